"""Output formatting system with strict stdout/stderr discipline.

Follows `clig.dev <https://clig.dev/>`_ conventions:

* **stdout** -- primary data only (API responses as JSON, tables, or
  formatted text). This is what downstream tools pipe and parse.
* **stderr** -- all diagnostics (success notes, warnings, errors, debug
  traces). Never contaminates the data stream.
* **Colour control** -- respects ``NO_COLOR``, ``TERM=dumb``, and the
  ``--no-color`` CLI flag. Rich drops styling on its own when stdout is
  not a terminal.

The module exposes two layers:

1. :class:`OutputManager` -- a stateful object holding format preferences,
   Rich consoles, and quiet/verbose flags. Created once in
   :func:`~streampay_cli.app.main_callback` and installed via
   :func:`set_output`.
2. Module-level convenience functions (:func:`info`, :func:`error`,
   :func:`debug`, etc.) that delegate to the global ``OutputManager``
   instance so callers do not need to pass the manager around.

Paginated responses arrive as ``{"data": [...], "pagination": {...}}``;
:func:`extract_items` and :func:`extract_pagination` unwrap that envelope,
which is the only part of a response body this module interprets.
"""

from __future__ import annotations

import json
import os
import sys
from typing import TYPE_CHECKING, Any, Optional, Union

from rich.console import Console, RenderableType
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from streampay_cli.models import ResponseFormat

if TYPE_CHECKING:
    from streampay_cli.exceptions import StreamApiError

Cell = Union[str, Text]

EMPTY = "—"

_GOOD_STATUSES = {"ACTIVE", "PAID", "COMPLETED", "SUCCESS", "SUCCEEDED", "UNFROZEN", "SETTLED"}
_BAD_STATUSES = {"INACTIVE", "CANCELLED", "CANCELED", "FAILED", "VOIDED", "REJECTED", "EXPIRED"}
_PENDING_STATUSES = {"PENDING", "FROZEN", "PROCESSING", "DRAFT", "UNDER_REVIEW", "SENT"}


class OutputManager:
    """Central manager for all CLI output with stdout/stderr discipline.

    Maintains two Rich :class:`~rich.console.Console` instances -- one for
    stdout (data) and one for stderr (diagnostics) -- and routes every
    output call to the correct stream.

    Args:
        json_only: Force JSON rendering for every response, regardless of
            the per-command ``--format`` (the global ``--json`` flag).
        no_color: Disable all colour and Rich markup.
        quiet: Suppress informational and success messages on stderr.
        verbose: Enable debug-level messages on stderr.
    """

    def __init__(
        self,
        json_only: bool = False,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._json_only = json_only
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            highlight=False,
        )
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
            highlight=False,
        )

    def resolve_format(self, requested: ResponseFormat) -> ResponseFormat:
        """Apply the global ``--json`` override to a per-command format."""
        return ResponseFormat.JSON if self._json_only else requested

    # ------------------------------------------------------------------ #
    # Data output (stdout)
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any, fmt: ResponseFormat = ResponseFormat.PRETTY) -> None:
        """Render an API response generically in the requested format.

        Args:
            data: Decoded JSON response (dict, list, scalar, or ``None``).
            fmt: ``json`` for indented JSON, ``table`` for a column view of
                the (unwrapped) item list, ``pretty`` for a key/value tree.
        """
        fmt = self.resolve_format(fmt)
        if fmt == ResponseFormat.JSON:
            self.print_json(data)
        elif fmt == ResponseFormat.TABLE:
            self._print_generic_table(data)
        else:
            self._print_pretty(data)

    def print_json(self, data: Any) -> None:
        """Print *data* as indented JSON to stdout.

        Highlighted on an interactive terminal, plain text otherwise so the
        stream stays parseable.
        """
        json_str = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._no_color or not self._stdout.is_terminal:
            self.print_data(json_str)
        else:
            self._stdout.print(Syntax(json_str, "json", theme="monokai", word_wrap=True))

    def print_data(self, text: str) -> None:
        """Print raw text to stdout, untouched by Rich markup."""
        print(text, file=sys.stdout, flush=True)

    def print_renderable(self, renderable: RenderableType = "") -> None:
        """Print a Rich renderable (``Text``, ``Table``, ...) to stdout."""
        self._stdout.print(renderable)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[Cell]],
        title: Optional[str] = None,
    ) -> None:
        """Print tabular data to stdout as a Rich table.

        Args:
            headers: Column header strings.
            rows: List of rows; cells may be plain strings or styled
                :class:`~rich.text.Text`.
            title: Optional table title.
        """
        table = Table(
            title=title,
            show_header=True,
            header_style="bold cyan",
            border_style="grey50",
        )
        for h in headers:
            table.add_column(h, overflow="fold")
        for row in rows:
            table.add_row(*(Text(c) if isinstance(c, str) else c for c in row))
        self._stdout.print(table)

    def print_pagination(self, data: Any) -> None:
        """Print the pagination footer for *data* if it carries one."""
        pagination = extract_pagination(data)
        if pagination is None:
            return
        summary = pagination_summary(pagination)
        if summary:
            self._stdout.print(Text(f"  {summary}", style="grey50"))

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Print an informational message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message, "blue", "ℹ")

    def success(self, message: str) -> None:
        """Print a green success message to stderr. Suppressed by ``--quiet``."""
        if not self._quiet:
            self._emit(message, "green", "✓")

    def warning(self, message: str) -> None:
        """Print a yellow warning to stderr. NOT suppressed by ``--quiet``."""
        self._emit(message, "yellow", "Warning:")

    def error(self, message: str) -> None:
        """Print a bold-red error to stderr. Never suppressed."""
        self._emit(message, "bold red", "Error:")

    def detail(self, label: str, value: str) -> None:
        """Print an indented ``label: value`` line under an error. Never suppressed."""
        if self._no_color:
            print(f"  {label}: {value}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"  [red]{escape(label)}:[/red] {escape(value)}")

    def field(self, label: str, value: str) -> None:
        """Print an indented ``label: value`` line after a success. Suppressed by ``--quiet``."""
        if self._quiet:
            return
        if self._no_color:
            print(f"  {label}: {value}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"  [cyan]{escape(label)}:[/cyan] {escape(value)}")

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown when ``--verbose`` is active."""
        if self._verbose:
            if self._no_color:
                print(f"[debug] {message}", file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[dim]{escape('[debug]')} {escape(message)}[/dim]")

    def api_error(self, exc: StreamApiError, summary: Optional[str] = None) -> None:
        """Print every populated field of a normalised API error to stderr.

        Args:
            exc: The error raised by the client.
            summary: Optional headline (``"Failed to create consumer"``);
                the API message is then shown as its own line.
        """
        self.error(summary or exc.message or exc.code)
        self.detail("Code", exc.code)
        if summary and exc.message:
            self.detail("Message", exc.message)
        if exc.details is not None:
            details = (
                exc.details
                if isinstance(exc.details, str)
                else json.dumps(exc.details, indent=2, ensure_ascii=False, default=str)
            )
            self.detail("Details", details)
        if exc.status_code:
            self.detail("Status", str(exc.status_code))

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _emit(self, message: str, style: str, prefix: str) -> None:
        if self._no_color:
            print(f"{prefix} {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[{style}]{escape(prefix)}[/{style}] {escape(message)}")

    def _print_generic_table(self, data: Any) -> None:
        """Render a list (or paginated envelope) with one column per scalar key."""
        items = extract_items(data)
        if not isinstance(items, list) or not items:
            self.warning("No data to display in table format")
            return

        # Skip keys whose values are nested objects -- unreadable in a cell.
        keys: list[str] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            for key, value in item.items():
                if isinstance(value, dict) or key in keys:
                    continue
                keys.append(key)

        if not keys:
            rows: list[list[Cell]] = [[format_cell(item)] for item in items]
            self.print_table(["value"], rows)
        else:
            rows = [
                [format_cell(item.get(k) if isinstance(item, dict) else None, k) for k in keys]
                for item in items
            ]
            self.print_table(keys, rows)
        self.print_pagination(data)

    def _print_pretty(self, data: Any) -> None:
        """Render an object as a key/value tree, or a list as numbered items."""
        items = extract_items(data)
        if isinstance(items, list):
            self.print_renderable(Text(f"\nFound {len(items)} items:\n", style="green"))
            for index, item in enumerate(items, 1):
                self.print_renderable(Text(f"[{index}]", style="cyan"))
                if isinstance(item, dict):
                    for line in pretty_lines(item, indent=1):
                        self.print_renderable(line)
                else:
                    self.print_renderable(Text("  ") + format_cell(item))
                self.print_renderable()
            self.print_pagination(data)
        elif isinstance(items, dict):
            self.print_renderable(Text("\nResult:\n", style="green"))
            for line in pretty_lines(items):
                self.print_renderable(line)
            self.print_renderable()
        elif items is None:
            self.print_renderable(Text(EMPTY, style="grey50"))
        else:
            self.print_data(str(items))


# ------------------------------------------------------------------ #
# Response shape helpers
# ------------------------------------------------------------------ #


def extract_items(data: Any) -> Any:
    """Unwrap ``{"data": [...], ...}`` envelopes; return other values unchanged."""
    if isinstance(data, dict) and isinstance(data.get("data"), list):
        return data["data"]
    return data


def extract_pagination(data: Any) -> Optional[dict[str, Any]]:
    """Return the ``pagination`` object of a paginated response, if present."""
    if isinstance(data, dict) and isinstance(data.get("pagination"), dict):
        return data["pagination"]
    return None


def pagination_summary(pagination: dict[str, Any]) -> str:
    """Build ``Page 2 of 5 (48 total) | 10 per page [← prev next →]``.

    Reads the API's ``current_page``/``max_page``/``total_count`` fields,
    falling back to ``page``/``total_pages``/``total``.
    """

    def first(*keys: str) -> Any:
        for key in keys:
            if pagination.get(key) is not None:
                return pagination[key]
        return None

    parts: list[str] = []
    current_page = first("current_page", "page")
    max_page = first("max_page", "total_pages")
    total_count = first("total_count", "total")

    if current_page is not None:
        parts.append(f"Page {current_page}")
    if max_page is not None:
        parts.append(f"of {max_page}")
    if total_count is not None:
        parts.append(f"({total_count} total)")
    if pagination.get("limit") is not None:
        parts.append(f"| {pagination['limit']} per page")

    nav: list[str] = []
    if pagination.get("has_previous_page"):
        nav.append("← prev")
    if pagination.get("has_next_page"):
        nav.append("next →")
    if nav:
        parts.append(f"[{' '.join(nav)}]")
    return " ".join(parts)


# ------------------------------------------------------------------ #
# Cell and tree formatting
# ------------------------------------------------------------------ #


def status_style(value: str) -> str:
    """Colour for a status string: green settled, red terminal, yellow in-flight."""
    upper = value.upper()
    if upper in _GOOD_STATUSES:
        return "green"
    if upper in _BAD_STATUSES:
        return "red"
    if upper in _PENDING_STATUSES:
        return "yellow"
    return "white"


def format_cell(value: Any, key: str = "") -> Text:
    """Format a single value for a table cell, coloured by field semantics.

    The field name drives the colour: statuses by outcome, amounts in
    magenta, currencies in yellow, identifiers dimmed, dates in blue,
    names bold, emails and phones in cyan, URLs underlined.
    """
    if value is None:
        return Text(EMPTY, style="grey50")
    if isinstance(value, bool):
        return Text("✓ true", style="green") if value else Text("✗ false", style="red")
    if isinstance(value, list):
        if not value:
            return Text("[]", style="grey50")
        if not isinstance(value[0], (dict, list)):
            return Text(", ".join(str(v) for v in value))
        return Text(f"[{len(value)} items]", style="grey50")
    if isinstance(value, dict):
        return Text("[Object]", style="grey50")

    text = str(value)
    k = key.lower()

    if k == "status" or k.endswith("_status"):
        return Text(text, style=status_style(text))
    if k.startswith(("is_", "has_")) or k == "active":
        if text == "true":
            return Text("✓ true", style="green")
        if text == "false":
            return Text("✗ false", style="red")
    if k in ("amount", "total") or "_amount" in k or "price" in k or "_value" in k:
        return Text(text, style="magenta")
    if k == "currency" or k.endswith("_currency"):
        return Text(text, style="yellow")
    if k == "id" or k.endswith("_id"):
        return Text(text, style="dim")
    if "_at" in k or "_date" in k or k in ("valid_until", "scheduled_on"):
        return Text(text, style="blue")
    if k == "name" or k.endswith("_name"):
        return Text(text, style="bold")
    if "email" in k or "phone" in k:
        return Text(text, style="cyan")
    if "url" in k or "link" in k:
        return Text(text, style="underline blue")
    return Text(text)


def pretty_lines(obj: dict[str, Any], indent: int = 0) -> list[Text]:
    """Flatten a JSON object into indented ``key: value`` lines."""
    spaces = "  " * indent
    lines: list[Text] = []
    for key, value in obj.items():
        label = Text(spaces) + Text(str(key), style="yellow") + Text(": ")
        if value is None:
            lines.append(label + Text(EMPTY, style="grey50"))
        elif isinstance(value, list):
            if not value:
                lines.append(label + Text("[]", style="grey50"))
            elif isinstance(value[0], dict):
                lines.append(label + Text(f"[{len(value)} items]", style="grey50"))
                for index, item in enumerate(value):
                    lines.append(Text(f"{spaces}  ") + Text(f"[{index}]", style="grey50"))
                    if isinstance(item, dict):
                        lines.extend(pretty_lines(item, indent + 2))
                    else:
                        lines.append(Text(f"{spaces}    ") + format_cell(item))
            else:
                lines.append(label + Text(", ".join(str(v) for v in value)))
        elif isinstance(value, dict):
            lines.append(Text(spaces) + Text(str(key), style="yellow") + Text(":"))
            lines.extend(pretty_lines(value, indent + 1))
        elif isinstance(value, bool):
            lines.append(label + (Text("true", style="green") if value else Text("false", style="red")))
        else:
            lines.append(label + Text(str(value)))
    return lines


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance (set during app startup)
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


# ------------------------------------------------------------------ #
# Convenience functions that use the global instance
# ------------------------------------------------------------------ #


def format_response(data: Any, fmt: ResponseFormat = ResponseFormat.PRETTY) -> None:
    """Render API response data via the global :class:`OutputManager`."""
    get_output().format_response(data, fmt)


def print_data(text: str) -> None:
    """Print raw data to stdout via the global OutputManager."""
    get_output().print_data(text)


def info(message: str) -> None:
    """Print info message to stderr via the global OutputManager."""
    get_output().info(message)


def error(message: str) -> None:
    """Print error to stderr via the global OutputManager."""
    get_output().error(message)


def success(message: str) -> None:
    """Print success message to stderr via the global OutputManager."""
    get_output().success(message)


def warning(message: str) -> None:
    """Print warning to stderr via the global OutputManager."""
    get_output().warning(message)


def field(label: str, value: str) -> None:
    """Print a neutral ``label: value`` line to stderr via the global OutputManager."""
    get_output().field(label, value)


def debug(message: str) -> None:
    """Print debug message to stderr via the global OutputManager."""
    get_output().debug(message)
