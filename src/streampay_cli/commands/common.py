"""Helpers shared by every resource command.

A typical command body reads::

    with cli_errors("Failed to create consumer"):
        body = build_body(...)            # may raise InvalidUsageError
        with open_client(ctx) as client:
            result = client.consumers.create(body)
    success("Consumer created successfully")
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), CONSUMER)

Flag parsing happens inside :func:`cli_errors` but before
:func:`open_client`, so usage errors never reach the network.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Optional

import typer

from streampay_cli.client import StreamPayClient
from streampay_cli.config import resolve_credential, resolve_default_format
from streampay_cli.exceptions import StreamApiError, StreamPayError
from streampay_cli.models import ResponseFormat
from streampay_cli.output import error, get_output


def format_option() -> Any:
    return typer.Option(
        None,
        "--format",
        case_sensitive=False,
        help="Output format: json, table or pretty.",
    )


def data_option() -> Any:
    return typer.Option(
        None,
        "--data",
        help="Raw JSON request body (overrides all other field flags).",
    )


def resolve_fmt(requested: Optional[ResponseFormat], fallback: ResponseFormat) -> ResponseFormat:
    """Pick the output format: explicit ``--format``, then stored default, then *fallback*."""
    if requested is not None:
        return requested
    return resolve_default_format(fallback)


def open_client(ctx: typer.Context) -> StreamPayClient:
    """Build a client from the root flags stored on the context.

    Raises:
        ConfigError: If no API key can be resolved.
    """
    obj = ctx.obj or {}
    credential = resolve_credential(
        cli_api_key=obj.get("api_key"),
        cli_api_secret=obj.get("api_secret"),
        cli_base_url=obj.get("base_url"),
        cli_branch=obj.get("branch"),
    )
    return StreamPayClient(credential, dry_run=obj.get("dry_run", False))


@contextmanager
def cli_errors(summary: str) -> Iterator[None]:
    """Report :class:`StreamPayError` on stderr and exit with its code.

    Args:
        summary: Headline printed for API failures, e.g.
            ``"Failed to list invoices"``.

    Raises:
        typer.Exit: With the error's ``exit_code``.
    """
    try:
        yield
    except StreamApiError as exc:
        get_output().api_error(exc, summary)
        raise typer.Exit(code=exc.exit_code) from None
    except StreamPayError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
