"""Auth commands -- ``streampay login`` and ``streampay logout``.

``login`` persists the given credentials to the config file and then
verifies them with ``GET /me``. Flags fall back to the root-level
``--api-key``/``--api-secret``/``--branch``/``--base-url``, then to the
``STREAMPAY_*`` environment variables and ``./.env``, so
``STREAMPAY_API_KEY=... streampay login`` works. Under ``--dry-run`` nothing
is written to disk.

Typical workflow::

    streampay login --api-key sk_test_... --api-secret ...
    streampay me
    streampay logout
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from streampay_cli.commands.common import cli_errors
from streampay_cli.config import ENV_API_KEY, ENV_API_SECRET, ENV_BASE_URL, ENV_BRANCH, env_setting
from streampay_cli.exceptions import ConfigError
from streampay_cli.output import field, info, success


def _environment_label(me: Any) -> str:
    org = me.get("organization") or {}
    sandbox = org.get("sandbox")
    if sandbox is True:
        return "SANDBOX"
    if sandbox is False:
        return "LIVE"
    return me.get("environment") or me.get("mode") or "(unknown)"


def login_command(
    ctx: typer.Context,
    api_key: Optional[str] = typer.Option(None, "--api-key", help="API key."),
    api_secret: Optional[str] = typer.Option(None, "--api-secret", help="API secret."),
    branch: Optional[str] = typer.Option(None, "--branch", help="Default branch ID."),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="API base URL."),
) -> None:
    """Authenticate with the StreamPay API and store the credentials."""
    from streampay_cli.client import StreamPayClient
    from streampay_cli.config import save_stored_config
    from streampay_cli.models import Credential

    root = ctx.obj or {}
    api_key = api_key or root.get("api_key") or env_setting(ENV_API_KEY)
    api_secret = api_secret or root.get("api_secret") or env_setting(ENV_API_SECRET)
    branch = branch or root.get("branch") or env_setting(ENV_BRANCH)
    base_url = base_url or root.get("base_url") or env_setting(ENV_BASE_URL)
    dry_run = bool(root.get("dry_run", False))

    with cli_errors("Authentication failed"):
        if not api_key:
            raise ConfigError(f"API key is required. Provide --api-key or set {ENV_API_KEY}.")
        if not dry_run:
            save_stored_config(api_key=api_key, api_secret=api_secret, branch=branch, base_url=base_url)

        credential = Credential(api_key=api_key, api_secret=api_secret, branch=branch, base_url=base_url)
        with StreamPayClient(credential, dry_run=dry_run) as client:
            me = client.me.get()

    success("Authenticated successfully")
    if not isinstance(me, dict) or me.get("dry_run"):
        return
    org = me.get("organization") or {}
    user = me.get("user") or {}
    field("Organization", org.get("name") or "(unknown)")
    field("User", user.get("email") or me.get("email") or "(unknown)")
    field("Environment", _environment_label(me))


def logout_command() -> None:
    """Clear stored credentials."""
    from streampay_cli.config import clear_stored_config

    with cli_errors("Failed to clear credentials"):
        try:
            clear_stored_config()
        except OSError as exc:
            raise ConfigError(f"Cannot remove config file: {exc}") from exc
    success("Logged out, credentials cleared")
    info("Environment variables and .env files are still active")
