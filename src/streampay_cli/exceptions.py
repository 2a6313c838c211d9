"""Exception hierarchy for streampay-cli.

All exceptions inherit from :class:`StreamPayError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`streampay_cli.exit_codes`. The top-level error handler in
:func:`streampay_cli.app.main` catches ``StreamPayError`` and exits with
the appropriate code, while unexpected exceptions produce a crash log and
exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    StreamPayError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- ConfigError         (exit 1)
    +-- StreamApiError      (exit derived from the HTTP status)

:class:`StreamApiError` is the single normalised error shape produced by
the transport adapter. Every failure of an API call -- validation
rejection, structured API error, bare HTTP failure, or no response at all
-- surfaces as exactly one instance of it.
"""

from __future__ import annotations

from typing import Any, Optional

from streampay_cli.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class StreamPayError(Exception):
    """Base exception for all streampay-cli errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(StreamPayError):
    """Raised for invalid flag values, bad JSON input, or missing required fields."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(StreamPayError):
    """Raised for configuration problems (missing API key, unwritable config file)."""

    exit_code = EXIT_GENERIC_FAILURE


class StreamApiError(StreamPayError):
    """Normalised failure of a StreamPay API call.

    Attributes:
        status_code: HTTP status of the response, or ``0`` when no
            response was received.
        code: Short machine-readable code -- ``VALIDATION_ERROR``,
            ``NETWORK_ERROR``, a vendor code such as
            ``DUPLICATE_CONSUMER``, or ``HTTP_<status>``.
        message: Human-readable description.
        details: Optional structured payload (the raw validation entries
            or the API's ``additional_info``).
    """

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details
        self.exit_code = _exit_code_for_status(status_code)

    def to_dict(self) -> dict[str, Any]:
        """Return the error as a plain JSON-serialisable mapping."""
        data: dict[str, Any] = {
            "status_code": self.status_code,
            "code": self.code,
            "message": self.message,
        }
        if self.details is not None:
            data["details"] = self.details
        return data

    def __repr__(self) -> str:
        return (
            f"StreamApiError(status_code={self.status_code!r}, code={self.code!r}, "
            f"message={self.message!r})"
        )


def _exit_code_for_status(status_code: int) -> int:
    """Map an HTTP status (0 = no response) to a process exit code."""
    if status_code == 0:
        return EXIT_CONNECTION_ERROR
    if status_code in (401, 403):
        return EXIT_AUTH_FAILURE
    if status_code == 404:
        return EXIT_NOT_FOUND
    if status_code >= 500:
        return EXIT_SERVER_ERROR
    return EXIT_GENERIC_FAILURE
