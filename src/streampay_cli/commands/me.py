"""``streampay me`` -- the authenticated user and organization."""

from __future__ import annotations

from typing import Optional

import typer

from streampay_cli.commands.common import cli_errors, format_option, open_client, resolve_fmt
from streampay_cli.formatters import ME, show
from streampay_cli.models import ResponseFormat


def me_command(
    ctx: typer.Context,
    fmt: Optional[ResponseFormat] = format_option(),
) -> None:
    """Show the authenticated user, organization and currency settings."""
    with cli_errors("Failed to get account info"):
        with open_client(ctx) as client:
            result = client.me.get()
    show(result, resolve_fmt(fmt, ResponseFormat.PRETTY), ME)
