"""Typer application and CLI entry point for streampay.

This module builds the top-level Typer application, registers every
resource sub-command group at import time, and defines the root callback
that turns global flags into the shared :class:`~streampay_cli.output.OutputManager`
and the ``ctx.obj`` values read by :func:`~streampay_cli.commands.common.open_client`.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler, invokes the Typer app,
and writes unhandled exceptions to a crash log under the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from streampay_cli import __version__
from streampay_cli.commands.auth import login_command, logout_command
from streampay_cli.commands.checkout import checkout_app
from streampay_cli.commands.config import config_app
from streampay_cli.commands.consumers import consumers_app
from streampay_cli.commands.coupons import coupons_app
from streampay_cli.commands.invoices import invoices_app
from streampay_cli.commands.me import me_command
from streampay_cli.commands.payments import payments_app
from streampay_cli.commands.products import products_app
from streampay_cli.commands.subscriptions import subscriptions_app
from streampay_cli.commands.webhooks import webhook_app
from streampay_cli.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED


app = typer.Typer(
    name="streampay",
    help="Manage StreamPay consumers, products, subscriptions, invoices and payments.",
    no_args_is_help=True,
    add_completion=True,
    rich_markup_mode="rich",
)

app.command("login")(login_command)
app.command("logout")(logout_command)
app.command("me")(me_command)
app.add_typer(config_app, name="config", help="Manage CLI configuration.")
app.add_typer(consumers_app, name="consumers", help="Manage consumers.")
app.add_typer(products_app, name="products", help="Manage products.")
app.add_typer(subscriptions_app, name="subs", help="Manage subscriptions and freezes.")
app.add_typer(invoices_app, name="invoices", help="Manage invoices.")
app.add_typer(payments_app, name="payments", help="Manage payments.")
app.add_typer(coupons_app, name="coupons", help="Manage coupons.")
app.add_typer(checkout_app, name="checkout", help="Manage payment links.")
app.add_typer(webhook_app, name="webhook", help="Webhook utilities and verification.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"streampay {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="API key (overrides env and config file)."
    ),
    api_secret: Optional[str] = typer.Option(
        None, "--api-secret", help="API secret (overrides env and config file)."
    ),
    branch: Optional[str] = typer.Option(
        None, "--branch", help="Branch ID sent as x-branch-id."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="API base URL."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output for every command."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the request instead of sending it."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Initialises the global :class:`~streampay_cli.output.OutputManager`
    from CLI flags and stores the connection overrides in ``ctx.obj``.
    """
    from streampay_cli.output import OutputManager, set_output

    set_output(
        OutputManager(
            json_only=json_output,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
        )
    )

    ctx.ensure_object(dict)
    ctx.obj["api_key"] = api_key
    ctx.obj["api_secret"] = api_secret
    ctx.obj["branch"] = branch
    ctx.obj["base_url"] = base_url
    ctx.obj["dry_run"] = dry_run


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log() -> str:
    """Write the current traceback to disk and return the log file path."""
    from streampay_cli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``streampay`` console script.

    Unhandled :class:`~streampay_cli.exceptions.StreamPayError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from streampay_cli.exceptions import StreamApiError, StreamPayError
        from streampay_cli.output import error, get_output

        if isinstance(exc, StreamApiError):
            get_output().api_error(exc)
            sys.exit(exc.exit_code)
        elif isinstance(exc, StreamPayError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log()
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
