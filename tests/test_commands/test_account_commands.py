"""CLI tests for login/logout, me, config, webhook utilities and root flags."""

from __future__ import annotations

import json

import httpx
from typer.testing import CliRunner

from streampay_cli import __version__
from streampay_cli.app import app
from streampay_cli.config import get_config_path, load_stored_config, save_stored_config
from streampay_cli.webhooks import sign_payload

runner = CliRunner()

ME_PAYLOAD = {
    "user": {"email": "owner@example.com", "first_name": "Sara"},
    "organization": {"name": "Acme Gym", "sandbox": True},
}


class TestLogin:
    def test_login_stores_and_verifies(self, isolated_config, fake_api) -> None:
        fake_api.payload = ME_PAYLOAD
        result = runner.invoke(app, ["login", "--api-key", "sk_test_abcd1234", "--branch", "b1"])
        assert result.exit_code == 0, result.output
        assert fake_api.last.url.path.endswith("/me")
        assert fake_api.last.headers["x-api-key"] == "sk_test_abcd1234"
        assert fake_api.last.headers["x-branch-id"] == "b1"
        stored = load_stored_config()
        assert stored.api_key == "sk_test_abcd1234"
        assert stored.branch == "b1"
        assert "Authenticated successfully" in result.output
        assert "Organization: Acme Gym" in result.output
        assert "Environment: SANDBOX" in result.output

    def test_login_reads_key_from_env(self, api_key_env, fake_api) -> None:
        fake_api.payload = ME_PAYLOAD
        result = runner.invoke(app, ["login"])
        assert result.exit_code == 0, result.output
        assert load_stored_config().api_key == api_key_env

    def test_login_uses_root_flags(self, isolated_config, fake_api) -> None:
        fake_api.payload = ME_PAYLOAD
        result = runner.invoke(app, ["--api-key", "root-key-4321", "--branch", "b2", "login"])
        assert result.exit_code == 0, result.output
        assert fake_api.last.headers["x-api-key"] == "root-key-4321"
        assert load_stored_config().branch == "b2"

    def test_login_reads_dotenv(self, isolated_config, fake_api) -> None:
        (isolated_config / ".env").write_text("STREAMPAY_API_KEY=dotenv-key-7777\n")
        fake_api.payload = ME_PAYLOAD
        result = runner.invoke(app, ["login"])
        assert result.exit_code == 0, result.output
        assert load_stored_config().api_key == "dotenv-key-7777"

    def test_login_dry_run_writes_nothing(self, isolated_config, fake_api) -> None:
        result = runner.invoke(app, ["--no-color", "--dry-run", "login", "--api-key", "sk_test_abcd1234"])
        assert result.exit_code == 0, result.output
        assert fake_api.requests == []
        assert not get_config_path().exists()
        assert "[dry-run] GET" in result.output

    def test_login_details_hidden_when_quiet(self, isolated_config, fake_api) -> None:
        fake_api.payload = ME_PAYLOAD
        result = runner.invoke(app, ["-q", "login", "--api-key", "sk_test_abcd1234"])
        assert result.exit_code == 0, result.output
        assert "Organization" not in result.output

    def test_login_without_key(self, isolated_config, fake_api) -> None:
        result = runner.invoke(app, ["login"])
        assert result.exit_code == 1
        assert "API key is required" in result.output
        assert fake_api.requests == []

    def test_login_rejected_key(self, isolated_config, fake_api) -> None:
        fake_api.status_code = 401
        fake_api.payload = {"error": {"code": "UNAUTHORIZED", "message": "Invalid API key"}}
        result = runner.invoke(app, ["login", "--api-key", "bad-key-0000"])
        assert result.exit_code == 3
        assert "Authentication failed" in result.output

    def test_logout(self, isolated_config) -> None:
        save_stored_config(api_key="sk_test_abcd1234")
        result = runner.invoke(app, ["logout"])
        assert result.exit_code == 0, result.output
        assert not get_config_path().exists()
        assert "Logged out" in result.output


class TestMe:
    def test_pretty(self, api_key_env, fake_api) -> None:
        fake_api.payload = ME_PAYLOAD
        result = runner.invoke(app, ["me"])
        assert result.exit_code == 0, result.output
        assert "owner@example.com" in result.output
        assert "SANDBOX" in result.output

    def test_json(self, api_key_env, fake_api) -> None:
        fake_api.payload = ME_PAYLOAD
        result = runner.invoke(app, ["-q", "me", "--format", "json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == ME_PAYLOAD


class TestConfig:
    def test_set_masks_secrets(self, isolated_config) -> None:
        result = runner.invoke(
            app, ["config", "set", "--api-key", "sk_live_secret5678", "--format", "table"]
        )
        assert result.exit_code == 0, result.output
        assert "sk_live_secret5678" not in result.output
        assert "api_key: ***5678" in result.output
        stored = load_stored_config()
        assert stored.api_key == "sk_live_secret5678"
        assert stored.default_format is not None
        assert stored.default_format.value == "table"

    def test_set_without_values_warns(self, isolated_config) -> None:
        result = runner.invoke(app, ["config", "set"])
        assert result.exit_code == 0
        assert "No configuration values provided" in result.output
        assert not get_config_path().exists()

    def test_get_masks_by_default(self, isolated_config) -> None:
        save_stored_config(api_key="sk_live_secret5678")
        result = runner.invoke(app, ["config", "get"])
        assert result.exit_code == 0, result.output
        assert "Current Configuration" in result.output
        assert "***5678" in result.output
        assert "sk_live_secret5678" not in result.output
        assert "(not set)" in result.output

    def test_get_show_secrets_json(self, isolated_config) -> None:
        save_stored_config(api_key="sk_live_secret5678", branch="main")
        result = runner.invoke(app, ["--json", "config", "get", "--show-secrets"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["api_key"] == "sk_live_secret5678"
        assert data["branch"] == "main"

    def test_path(self, isolated_config) -> None:
        result = runner.invoke(app, ["config", "path"])
        assert result.exit_code == 0
        assert result.output.strip() == str(get_config_path())

    def test_clear(self, isolated_config) -> None:
        save_stored_config(api_key="k")
        first = runner.invoke(app, ["config", "clear"])
        assert "Configuration cleared" in first.output
        second = runner.invoke(app, ["config", "clear"])
        assert "No configuration file to clear" in second.output

    def test_stored_default_format_applies(self, api_key_env, fake_api) -> None:
        save_stored_config(default_format="json")
        fake_api.payload = {"id": "c1", "name": "Sara"}
        result = runner.invoke(app, ["-q", "consumers", "get", "c1"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"id": "c1", "name": "Sara"}


class TestWebhook:
    BODY = '{"event":"payment.succeeded"}'

    def test_verify_valid(self) -> None:
        signature = sign_payload(self.BODY, "whsec")
        result = runner.invoke(
            app, ["webhook", "verify", "--body", self.BODY, "--signature", signature, "--secret", "whsec"]
        )
        assert result.exit_code == 0
        assert "Webhook signature is valid" in result.output

    def test_verify_invalid(self) -> None:
        result = runner.invoke(
            app, ["webhook", "verify", "--body", self.BODY, "--signature", "0" * 64, "--secret", "whsec"]
        )
        assert result.exit_code == 1
        assert "Webhook signature is invalid" in result.output

    def test_sign(self) -> None:
        result = runner.invoke(app, ["webhook", "sign", "--body", self.BODY, "--secret", "whsec"])
        assert result.exit_code == 0
        assert result.output.strip() == sign_payload(self.BODY, "whsec")

    def test_events_json(self, isolated_config) -> None:
        result = runner.invoke(app, ["-q", "webhook", "events", "--format", "json"])
        assert result.exit_code == 0, result.output
        events = json.loads(result.output)
        assert "payment.succeeded" in events
        assert "consumer.created" in events


class TestRootFlags:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.output.strip() == f"streampay {__version__}"

    def test_dry_run_sends_nothing(self, api_key_env, fake_api) -> None:
        result = runner.invoke(app, ["--no-color", "--dry-run", "consumers", "delete", "c1"])
        assert result.exit_code == 0, result.output
        assert fake_api.requests == []
        assert "[dry-run] DELETE https://" in result.output
        assert "/consumers/c1" in result.output
        assert "***1234" in result.output
        assert "test-key-1234" not in result.output

    def test_flag_key_overrides_env(self, api_key_env, fake_api) -> None:
        runner.invoke(app, ["--api-key", "flag-key-9999", "consumers", "get", "c1"])
        assert fake_api.last.headers["x-api-key"] == "flag-key-9999"

    def test_base_url_flag(self, api_key_env, fake_api) -> None:
        runner.invoke(app, ["--base-url", "https://sandbox.example.com/api/v2", "consumers", "get", "c1"])
        assert fake_api.last.url.host == "sandbox.example.com"
        assert fake_api.last.url.path == "/api/v2/consumers/c1"

    def test_server_error(self, api_key_env, fake_api) -> None:
        fake_api.status_code = 503
        fake_api.payload = {}
        result = runner.invoke(app, ["me"])
        assert result.exit_code == 5

    def test_network_error(self, api_key_env, fake_api) -> None:
        fake_api.raise_exc = httpx.ConnectError("connection refused")
        result = runner.invoke(app, ["me"])
        assert result.exit_code == 6
        assert "connection refused" in result.output
