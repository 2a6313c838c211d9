"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~streampay_cli.exceptions.StreamPayError` subclass.
Shell scripts can inspect the exit code to tell a rejected API key apart
from an unreachable server without parsing stderr.

Example::

    $ streampay consumers get 1234
    $ echo $?
    4   # EXIT_NOT_FOUND -- the consumer does not exist
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred (including a rejected webhook signature)."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required fields."""

EXIT_AUTH_FAILURE = 3
"""The API rejected the credentials (HTTP 401 / 403)."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The remote API returned an HTTP 5xx server error."""

EXIT_CONNECTION_ERROR = 6
"""No response was received (timeout, DNS failure, connection refused)."""

EXIT_INTERRUPTED = 130
"""The command was cancelled with Ctrl-C."""
