"""Parsing and validation of command-line flag values.

Everything here runs before any HTTP request is made, and every failure
raises :class:`~streampay_cli.exceptions.InvalidUsageError` (exit code 2)
with a message that names the offending flag or value.
"""

from __future__ import annotations

import enum
import json
import re
from typing import Any, Optional, Union

from streampay_cli.exceptions import InvalidUsageError

# Non-negative decimal, optionally signed; rejects "", ".", "+", "-.".
_DISCOUNT_VALUE_RE = re.compile(r"^(?!^[-+.]*$)[+-]?0*\d*\.?\d*$")

_TRUE_VALUES = ("true", "1")
_FALSE_VALUES = ("false", "0")


def parse_json(text: str) -> Any:
    """Parse a JSON flag value.

    Raises:
        InvalidUsageError: With the decoder's reason and the first 80
            characters of the input.

    Example::

        >>> parse_json('[{"product_id": "p1", "quantity": 1}]')
        [{'product_id': 'p1', 'quantity': 1}]
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        hint = text[:80] + "…" if len(text) > 80 else text
        raise InvalidUsageError(f"Invalid JSON input: {exc}\n  Input: {hint}") from exc


def parse_json_object(text: str, flag: str) -> dict[str, Any]:
    """Parse a JSON flag value that must be an object (``--data`` and friends)."""
    value = parse_json(text)
    if not isinstance(value, dict):
        raise InvalidUsageError(f"{flag} must be a JSON object")
    return value


def parse_json_array(text: str, flag: str) -> list[Any]:
    """Parse a JSON flag value that must be an array (``--items`` and friends)."""
    value = parse_json(text)
    if not isinstance(value, list):
        raise InvalidUsageError(f"{flag} must be a JSON array")
    return value


def parse_bool(value: str) -> bool:
    """Accept ``true``/``1`` and ``false``/``0``."""
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise InvalidUsageError(f'Invalid boolean value: "{value}". Use true or false.')


def parse_optional_bool(value: Optional[str]) -> Optional[bool]:
    return None if value is None else parse_bool(value)


def parse_discount_value(value: str) -> Union[float, int, str]:
    """Validate a coupon discount value.

    Signed input (``+5``, ``-0``) is passed through as a string, which the
    API accepts; anything else is converted to a number, integral values
    as ``int`` so they serialise without a trailing ``.0``.

    Raises:
        InvalidUsageError: If the value is not a non-negative number.
    """
    if not _DISCOUNT_VALUE_RE.match(value):
        raise InvalidUsageError(
            f'Invalid discount value: "{value}". Must be a number >= 0 (e.g. 10, 10.5, 0.25).'
        )
    if value.startswith(("+", "-")):
        return value
    number = float(value)
    if number < 0:
        raise InvalidUsageError(f"Discount value must be >= 0, got: {value}")
    return int(number) if number.is_integer() else number


def split_csv(value: Optional[str]) -> Optional[list[str]]:
    """Split ``"a, b,,c"`` into ``["a", "b", "c"]``; ``None`` stays ``None``."""
    if value is None:
        return None
    return [part.strip() for part in value.split(",") if part.strip()]


def parse_choices(
    values: Union[str, list[str], None],
    choices: type[enum.Enum],
    flag: str,
    upper: bool = True,
) -> Optional[list[str]]:
    """Validate a comma-separated (or repeated) flag against an enum.

    Args:
        values: Raw CSV string, a list of strings from a repeatable
            option, or ``None``.
        choices: The enum whose values are accepted.
        flag: Flag name for the error message, e.g. ``--statuses``.
        upper: Normalise input to upper case before checking.

    Returns:
        The normalised values, or ``None`` when the flag was not given.
    """
    if values is None:
        return None
    raw = split_csv(values) if isinstance(values, str) else [v for v in values if v]
    if not raw:
        return None
    allowed = [member.value for member in choices]
    result: list[str] = []
    for item in raw:
        normalized = item.upper() if upper else item.lower()
        if normalized not in allowed:
            raise InvalidUsageError(
                f"Invalid value for {flag}: {item!r}. Must be one of: {', '.join(allowed)}"
            )
        result.append(normalized)
    return result


def parse_choice(value: Optional[str], choices: type[enum.Enum], flag: str, upper: bool = True) -> Optional[str]:
    """Validate a single flag value against an enum (see :func:`parse_choices`)."""
    if value is None:
        return None
    parsed = parse_choices([value], choices, flag, upper=upper)
    return parsed[0] if parsed else None


def compact(values: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose value is ``None``."""
    return {key: value for key, value in values.items() if value is not None}


def require_fields(message: str, body: dict[str, Any]) -> dict[str, Any]:
    """Ensure an update body sets at least one field.

    Raises:
        InvalidUsageError: With *message* when *body* is empty.
    """
    if not body:
        raise InvalidUsageError(message)
    return body


def require(value: Any, flag: str) -> Any:
    """Ensure a flag that is required without ``--data`` was given."""
    if value is None or value == "":
        raise InvalidUsageError(f"Missing required option {flag} (or pass the full body with --data)")
    return value
