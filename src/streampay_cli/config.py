"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for streampay-cli:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.streampay/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Stored config** -- a single :class:`~streampay_cli.models.StoredConfig`
  JSON file holding the API key, secret, base URL, branch, and default
  output format written by ``streampay login`` and ``streampay config set``.
* **Precedence resolution** -- :func:`resolve_credential` merges CLI
  flags, environment variables, a ``.env`` file in the working directory, and
  the stored config into one frozen
  :class:`~streampay_cli.models.Credential`. Resolution happens once, at
  the command boundary; the HTTP client never reads ambient state.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) with ``0o600`` permissions, since the file holds
API secrets.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from dotenv import dotenv_values

from streampay_cli.exceptions import ConfigError
from streampay_cli.models import Credential, ResponseFormat, StoredConfig
from streampay_cli.output import debug

_APP_NAME = "streampay"
_CONFIG_FILENAME = "config.json"
_DOTENV_FILENAME = ".env"

ENV_API_KEY = "STREAMPAY_API_KEY"
ENV_API_SECRET = "STREAMPAY_API_SECRET"
ENV_BASE_URL = "STREAMPAY_BASE_URL"
ENV_BRANCH = "STREAMPAY_BRANCH"

_ENV_VARS = {
    "api_key": ENV_API_KEY,
    "api_secret": ENV_API_SECRET,
    "base_url": ENV_BASE_URL,
    "branch": ENV_BRANCH,
}

MISSING_API_KEY_MESSAGE = (
    "API key not configured. Run one of:\n\n"
    "  streampay login --api-key <key>              Set up and verify credentials\n"
    "  streampay config set --api-key <key>         Set API key directly\n"
    f"  export {ENV_API_KEY}=<key>               Use environment variable"
)


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform follows XDG Base Directory conventions (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/streampay/`` (default ``~/.config/streampay/``).
    On macOS/Windows: ``~/.streampay/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/streampay/`` (default ``~/.local/share/streampay/``).
    On macOS/Windows: ``~/.streampay/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_path() -> Path:
    """Path to the stored config file (it may not exist yet)."""
    return get_config_dir() / _CONFIG_FILENAME


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temp file is created next to *path* with ``0o600`` permissions
    before any content is written, so secrets are never world-readable,
    even momentarily.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        os.chmod(tmp_path, 0o600)
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Stored config ---


def load_stored_config() -> StoredConfig:
    """Load the stored configuration.

    A missing file yields an empty :class:`StoredConfig`. A corrupt file
    (invalid JSON or values that fail validation) is ignored the same way
    and will be replaced by the next :func:`save_stored_config`.
    """
    path = get_config_path()
    if not path.is_file():
        return StoredConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("top-level value is not an object")
        return StoredConfig.model_validate(data)
    except (OSError, ValueError) as exc:
        debug(f"Ignoring unreadable config at {path}: {exc}")
        return StoredConfig()


def save_stored_config(**updates: Any) -> StoredConfig:
    """Merge *updates* into the stored config and persist it atomically.

    Keys whose value is ``None`` are left untouched, and unset fields are
    omitted from the file so it stays minimal.

    Args:
        **updates: Field values from :class:`StoredConfig`.

    Returns:
        The merged configuration that was written.

    Raises:
        ConfigError: If the file cannot be written.
    """
    current = load_stored_config().model_dump(mode="json")
    current.update({k: v for k, v in updates.items() if v is not None})
    merged = StoredConfig.model_validate(current)
    text = json.dumps(merged.model_dump(mode="json", exclude_none=True), indent=2) + "\n"
    path = get_config_path()
    try:
        _atomic_write(path, text)
    except OSError as exc:
        raise ConfigError(f"Cannot write config file {path}: {exc}") from exc
    return merged


def clear_stored_config() -> bool:
    """Delete the stored config file.

    Returns:
        ``True`` if a file was removed, ``False`` if none existed.
    """
    path = get_config_path()
    if path.is_file():
        path.unlink()
        return True
    return False


# --- Precedence resolution ---


def load_dotenv_layer() -> dict[str, Optional[str]]:
    """Read ``./.env`` without touching :data:`os.environ`.

    Returns:
        The key/value pairs from the file, or an empty dict when the file
        does not exist.
    """
    path = Path.cwd() / _DOTENV_FILENAME
    if not path.is_file():
        return {}
    return dict(dotenv_values(path))


def env_setting(env_var: str) -> Optional[str]:
    """Read *env_var* from the process environment, then from ``./.env``."""
    return os.environ.get(env_var) or load_dotenv_layer().get(env_var) or None


def resolve_settings(
    cli_api_key: Optional[str] = None,
    cli_api_secret: Optional[str] = None,
    cli_base_url: Optional[str] = None,
    cli_branch: Optional[str] = None,
) -> dict[str, Optional[str]]:
    """Resolve connection settings through the full precedence chain.

    Precedence (high to low):
        1. CLI flags
        2. Environment variables (``STREAMPAY_API_KEY``, ...)
        3. ``.env`` file in the current directory
        4. Stored config file

    Empty strings are treated as unset at every layer.

    Returns:
        A mapping with ``api_key``, ``api_secret``, ``base_url``, and
        ``branch`` keys; values may be ``None``.
    """
    cli = {
        "api_key": cli_api_key,
        "api_secret": cli_api_secret,
        "base_url": cli_base_url,
        "branch": cli_branch,
    }
    stored = load_stored_config()
    dotenv_layer = load_dotenv_layer()

    resolved: dict[str, Optional[str]] = {}
    for field, env_var in _ENV_VARS.items():
        candidates = (
            cli[field],
            os.environ.get(env_var),
            dotenv_layer.get(env_var),
            getattr(stored, field),
        )
        resolved[field] = next((c for c in candidates if c), None)
    return resolved


def resolve_credential(
    cli_api_key: Optional[str] = None,
    cli_api_secret: Optional[str] = None,
    cli_base_url: Optional[str] = None,
    cli_branch: Optional[str] = None,
) -> Credential:
    """Resolve the :class:`Credential` used to build the HTTP client.

    See :func:`resolve_settings` for the precedence chain.

    Raises:
        ConfigError: If no API key is available from any source.
    """
    settings = resolve_settings(cli_api_key, cli_api_secret, cli_base_url, cli_branch)
    if not settings["api_key"]:
        raise ConfigError(MISSING_API_KEY_MESSAGE)
    return Credential(
        api_key=settings["api_key"],
        api_secret=settings["api_secret"],
        base_url=settings["base_url"],
        branch=settings["branch"],
    )


def resolve_default_format(fallback: ResponseFormat) -> ResponseFormat:
    """Return the stored ``default_format``, or *fallback* when none is set."""
    stored = load_stored_config().default_format
    return stored if stored is not None else fallback


def mask_secret(value: str) -> str:
    """Mask all but the last four characters: ``***abcd``."""
    return f"***{value[-4:]}"
