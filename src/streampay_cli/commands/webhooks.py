"""Webhook utilities: list event types, verify and compute signatures.

None of these commands touch the network or need an API key.

Example::

    streampay webhook verify --body "$BODY" --signature "$SIG" --secret "$SECRET"
"""

from __future__ import annotations

from typing import Optional

import typer

from streampay_cli.commands.common import format_option, resolve_fmt
from streampay_cli.exit_codes import EXIT_GENERIC_FAILURE
from streampay_cli.models import ResponseFormat
from streampay_cli.output import error, get_output, print_data, success
from streampay_cli.webhooks import SIGNATURE_HEADER, WEBHOOK_EVENTS, sign_payload, verify_signature

webhook_app = typer.Typer(no_args_is_help=True)


@webhook_app.command("events")
def webhook_events(
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """List all supported webhook event types."""
    output = get_output()
    resolved = output.resolve_format(resolve_fmt(fmt, ResponseFormat.PRETTY))
    if resolved == ResponseFormat.TABLE:
        output.print_table(["Event"], [[event] for event in WEBHOOK_EVENTS])
    else:
        output.format_response(list(WEBHOOK_EVENTS), resolved)


@webhook_app.command("verify")
def webhook_verify(
    signature: str = typer.Option(..., "--signature", help=f"The {SIGNATURE_HEADER} header value."),
    body: str = typer.Option(..., "--body", help="The raw request body, exactly as received."),
    secret: str = typer.Option(..., "--secret", help="The webhook secret."),
) -> None:
    """Verify a webhook signature.

    Exits 0 when the signature matches and 1 when it does not.
    """
    if verify_signature(body, signature, secret):
        success("Webhook signature is valid")
        return
    error("Webhook signature is invalid")
    raise typer.Exit(code=EXIT_GENERIC_FAILURE)


@webhook_app.command("sign")
def webhook_sign(
    body: str = typer.Option(..., "--body", help="The raw request body."),
    secret: str = typer.Option(..., "--secret", help="The webhook secret."),
) -> None:
    """Print the signature StreamPay would send for a body."""
    print_data(sign_payload(body, secret))
