"""Tests for the output system: stream discipline, formats, pagination."""

from __future__ import annotations

import json

import pytest

from streampay_cli.exceptions import StreamApiError
from streampay_cli.models import ResponseFormat
from streampay_cli.output import (
    OutputManager,
    _should_disable_color,
    extract_items,
    extract_pagination,
    format_cell,
    get_output,
    pagination_summary,
    reset_output,
    set_output,
    status_style,
)


@pytest.fixture
def out(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> OutputManager:
    """Colourless manager built after capture starts so Rich binds to the captured streams."""
    monkeypatch.delenv("NO_COLOR", raising=False)
    output = OutputManager(no_color=True)
    set_output(output)
    return output


# ---------------------------------------------------------------------------
# Global instance
# ---------------------------------------------------------------------------


class TestGlobalInstance:
    def test_lazy_default(self) -> None:
        reset_output()
        assert isinstance(get_output(), OutputManager)

    def test_set_and_reset(self) -> None:
        custom = OutputManager(quiet=True)
        set_output(custom)
        assert get_output() is custom
        reset_output()
        assert get_output() is not custom


# ---------------------------------------------------------------------------
# Stream discipline
# ---------------------------------------------------------------------------


class TestStreams:
    def test_diagnostics_go_to_stderr(self, out: OutputManager, capsys: pytest.CaptureFixture[str]) -> None:
        out.info("hello")
        out.success("done")
        out.warning("careful")
        out.error("broken")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "ℹ hello" in captured.err
        assert "✓ done" in captured.err
        assert "Warning: careful" in captured.err
        assert "Error: broken" in captured.err

    def test_data_goes_to_stdout(self, out: OutputManager, capsys: pytest.CaptureFixture[str]) -> None:
        out.format_response({"id": "c1"}, ResponseFormat.JSON)
        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"id": "c1"}
        assert captured.err == ""

    def test_quiet_suppresses_info_not_errors(self, capsys: pytest.CaptureFixture[str]) -> None:
        output = OutputManager(no_color=True, quiet=True)
        output.info("hidden")
        output.success("hidden too")
        output.warning("shown")
        output.error("also shown")
        err = capsys.readouterr().err
        assert "hidden" not in err
        assert "shown" in err
        assert "also shown" in err

    def test_field_is_neutral_and_quiet_aware(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager().field("Organization", "Acme")
        OutputManager(quiet=True).field("Hidden", "x")
        err = capsys.readouterr().err
        assert "  Organization: Acme" in err
        assert "Hidden" not in err

    def test_debug_only_when_verbose(self, capsys: pytest.CaptureFixture[str]) -> None:
        OutputManager(no_color=True).debug("silent")
        OutputManager(no_color=True, verbose=True).debug("loud")
        err = capsys.readouterr().err
        assert "silent" not in err
        assert "[debug] loud" in err

    def test_json_flag_overrides_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        output = OutputManager(json_only=True, no_color=True)
        output.format_response([{"id": "a"}], ResponseFormat.TABLE)
        assert json.loads(capsys.readouterr().out) == [{"id": "a"}]


# ---------------------------------------------------------------------------
# Formats
# ---------------------------------------------------------------------------


class TestFormats:
    def test_table_unwraps_envelope_and_skips_objects(
        self, out: OutputManager, capsys: pytest.CaptureFixture[str]
    ) -> None:
        data = {
            "data": [{"id": "a1", "name": "Alpha", "meta": {"x": 1}}],
            "pagination": {"current_page": 1, "max_page": 3, "total_count": 25, "limit": 10},
        }
        out.format_response(data, ResponseFormat.TABLE)
        text = capsys.readouterr().out
        assert "Alpha" in text
        assert "meta" not in text
        assert "Page 1 of 3 (25 total) | 10 per page" in text

    def test_table_with_no_rows_warns(self, out: OutputManager, capsys: pytest.CaptureFixture[str]) -> None:
        out.format_response({"data": []}, ResponseFormat.TABLE)
        captured = capsys.readouterr()
        assert "No data to display in table format" in captured.err

    def test_pretty_object(self, out: OutputManager, capsys: pytest.CaptureFixture[str]) -> None:
        out.format_response({"name": "Alpha", "nested": {"k": "v"}, "gone": None}, ResponseFormat.PRETTY)
        text = capsys.readouterr().out
        assert "Result:" in text
        assert "name: Alpha" in text
        assert "  k: v" in text
        assert "gone: —" in text

    def test_pretty_list(self, out: OutputManager, capsys: pytest.CaptureFixture[str]) -> None:
        out.format_response(["a.b", "c.d"], ResponseFormat.PRETTY)
        text = capsys.readouterr().out
        assert "Found 2 items:" in text
        assert "[1]" in text
        assert "c.d" in text


# ---------------------------------------------------------------------------
# API errors
# ---------------------------------------------------------------------------


class TestApiError:
    def test_all_fields_rendered(self, out: OutputManager, capsys: pytest.CaptureFixture[str]) -> None:
        exc = StreamApiError(409, "DUPLICATE_CONSUMER", "Consumer already exists", {"field": "email"})
        out.api_error(exc, "Failed to create consumer")
        err = capsys.readouterr().err
        assert "Error: Failed to create consumer" in err
        assert "Code: DUPLICATE_CONSUMER" in err
        assert "Message: Consumer already exists" in err
        assert '"field": "email"' in err
        assert "Status: 409" in err

    def test_network_error_has_no_status(self, out: OutputManager, capsys: pytest.CaptureFixture[str]) -> None:
        out.api_error(StreamApiError(0, "NETWORK_ERROR", "connection refused"))
        err = capsys.readouterr().err
        assert "Error: connection refused" in err
        assert "Status" not in err


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_extract_items(self) -> None:
        assert extract_items({"data": [1], "pagination": {}}) == [1]
        assert extract_items({"data": {"id": 1}}) == {"data": {"id": 1}}
        assert extract_items([1, 2]) == [1, 2]

    def test_extract_pagination(self) -> None:
        assert extract_pagination({"data": [], "pagination": {"page": 2}}) == {"page": 2}
        assert extract_pagination({"data": []}) is None

    def test_pagination_summary_fallback_keys_and_nav(self) -> None:
        summary = pagination_summary(
            {"page": 2, "total_pages": 5, "total": 48, "limit": 10, "has_previous_page": True, "has_next_page": True}
        )
        assert summary == "Page 2 of 5 (48 total) | 10 per page [← prev next →]"

    def test_status_style(self) -> None:
        assert status_style("paid") == "green"
        assert status_style("CANCELED") == "red"
        assert status_style("PENDING") == "yellow"
        assert status_style("UNKNOWN") == "white"

    def test_format_cell(self) -> None:
        assert format_cell(None).plain == "—"
        assert format_cell(True).plain == "✓ true"
        assert format_cell(["a", "b"]).plain == "a, b"
        assert format_cell([{"a": 1}]).plain == "[1 items]"
        assert format_cell({"a": 1}).plain == "[Object]"
        assert format_cell("PAID", "status").style == "green"
        assert format_cell("100", "total_amount").style == "magenta"

    def test_color_disabled_by_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm")
        assert _should_disable_color() is False
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True
        monkeypatch.delenv("NO_COLOR")
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True
