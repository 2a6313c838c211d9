"""Shared test fixtures for streampay-cli.

Provides config isolation, output state management, a fake StreamPay API
backed by :class:`httpx.MockTransport`, and a CLI runner. These fixtures
are discovered by pytest and available to every test module.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest

from streampay_cli.client import StreamPayClient
from streampay_cli.output import OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time. When Typer's CliRunner redirects those streams and the
    test finishes, the cached references become stale. Resetting forces a
    fresh manager on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path, clears all STREAMPAY_* and colour
    environment variables, and changes the working directory to tmp_path
    so a developer's own ``.env`` is never read.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("streampay_cli.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))

    for var in [
        "STREAMPAY_API_KEY",
        "STREAMPAY_API_SECRET",
        "STREAMPAY_BASE_URL",
        "STREAMPAY_BRANCH",
        "NO_COLOR",
        "TERM",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def api_key_env(isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Provide an API key through the environment, nothing else configured."""
    monkeypatch.setenv("STREAMPAY_API_KEY", "test-key-1234")
    return "test-key-1234"


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet, colourless output manager for tests that ignore stderr."""
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Fake API
# ---------------------------------------------------------------------------


class FakeApi:
    """Records requests and answers them with a canned response.

    Set :attr:`status_code` and :attr:`payload` before invoking the code
    under test; inspect :attr:`requests` afterwards.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.payload: Any = {}
        self.raise_exc: Optional[Exception] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_exc is not None:
            raise self.raise_exc
        if self.payload is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        content = self.last.content
        return json.loads(content) if content else None


@pytest.fixture
def fake_api(monkeypatch: pytest.MonkeyPatch) -> FakeApi:
    """Route every :class:`StreamPayClient` through a :class:`FakeApi`."""
    api = FakeApi()

    def _enter(self: StreamPayClient) -> StreamPayClient:
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=self._headers,
            transport=httpx.MockTransport(api.handler),
        )
        return self

    monkeypatch.setattr(StreamPayClient, "__enter__", _enter)
    return api


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
