"""Config commands -- view and modify the stored configuration.

Provides the ``streampay config`` sub-command group. Values are persisted
in ``config.json`` under the streampay config directory and sit third in
the precedence chain, after CLI flags and ``STREAMPAY_*`` environment
variables.
"""

from __future__ import annotations

from typing import Optional

import typer

from streampay_cli.commands.common import cli_errors
from streampay_cli.models import ResponseFormat
from streampay_cli.output import get_output, info, print_data, success, warning

config_app = typer.Typer(no_args_is_help=True)

_SECRET_FIELDS = ("api_key", "api_secret")

_SOURCES = (
    "1. CLI flags (--api-key, --api-secret, --base-url, --branch)",
    "2. Environment variables (STREAMPAY_API_KEY, etc.)",
    "3. .env file in the current directory",
    "4. Config file (streampay config path)",
)


@config_app.command("set")
def config_set(
    api_key: Optional[str] = typer.Option(None, "--api-key", help="API key."),
    api_secret: Optional[str] = typer.Option(None, "--api-secret", help="API secret."),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="API base URL."),
    branch: Optional[str] = typer.Option(None, "--branch", help="Default branch ID."),
    default_format: Optional[ResponseFormat] = typer.Option(
        None, "--format", case_sensitive=False, help="Default output format: json, table or pretty."
    ),
) -> None:
    """Set configuration values.

    Only the given flags are changed; everything else in the file is kept.

    Example::

        streampay config set --api-key sk_live_... --format table
    """
    from streampay_cli.config import mask_secret, save_stored_config

    updates = {
        "api_key": api_key,
        "api_secret": api_secret,
        "base_url": base_url,
        "branch": branch,
        "default_format": default_format.value if default_format else None,
    }
    updates = {key: value for key, value in updates.items() if value}
    if not updates:
        warning("No configuration values provided")
        return

    with cli_errors("Failed to update configuration"):
        save_stored_config(**updates)
    success("Configuration updated successfully")

    output = get_output()
    for key, value in updates.items():
        output.field(key, mask_secret(value) if key in _SECRET_FIELDS else value)


@config_app.command("get")
def config_get(
    show_secrets: bool = typer.Option(
        False, "--show-secrets", help="Show the full API key and secret."
    ),
) -> None:
    """Display the stored configuration.

    Secrets are masked to their last four characters unless
    ``--show-secrets`` is given.
    """
    from rich.text import Text

    from streampay_cli.config import load_stored_config, mask_secret
    from streampay_cli.formatters import Detail, dash

    stored = load_stored_config().model_dump(mode="json")
    for key in _SECRET_FIELDS:
        if stored[key] and not show_secrets:
            stored[key] = mask_secret(stored[key])

    output = get_output()
    if output.resolve_format(ResponseFormat.PRETTY) == ResponseFormat.JSON:
        output.print_json(stored)
        return

    def value_or(key: str, placeholder: str) -> Text:
        return Text(stored[key]) if stored[key] else dash(placeholder)

    d = Detail(label_width=15)
    d.heading("Current Configuration")
    d.line("API Key", value_or("api_key", "(not set)"))
    d.line("API Secret", value_or("api_secret", "(not set)"))
    d.line("Base URL", value_or("base_url", "(default)"))
    d.line("Branch", value_or("branch", "(not set)"))
    d.line("Default Format", value_or("default_format", "(per command)"))
    d.blank()
    d.subtitle("Configuration sources (in order of priority):")
    for source in _SOURCES:
        d.subtitle(f"  {source}")
    d.blank()
    for line in d.lines:
        output.print_renderable(line)


@config_app.command("clear")
def config_clear() -> None:
    """Delete the stored configuration file."""
    from streampay_cli.config import clear_stored_config

    if clear_stored_config():
        success("Configuration cleared")
    else:
        info("No configuration file to clear")


@config_app.command("path")
def config_path() -> None:
    """Print the location of the configuration file."""
    from streampay_cli.config import get_config_path

    print_data(str(get_config_path()))
