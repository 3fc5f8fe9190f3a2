"""Exception hierarchy for idmgmt.

All exceptions inherit from :class:`IdmgmtError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`idmgmt.exit_codes`.
The top-level error handler in :func:`idmgmt.app.main` catches
``IdmgmtError`` and exits with the appropriate code.

Two families matter to library callers:

* :class:`ArgumentError` -- raised synchronously while constructing a
  manager, before any network activity.
* :class:`RequestError` -- any failed request.  Raised from the blocking
  and async methods, or handed to the callback as its first argument.

Subclass hierarchy::

    IdmgmtError (exit 1)
    +-- ConfigError           (exit 1)
    |   +-- ArgumentError     (exit 2)
    +-- RequestError          (exit 1)
        +-- AuthError         (exit 3)
        +-- NotFoundError     (exit 4)
        +-- ServerError       (exit 5)
        +-- ConnectionError_  (exit 6)
"""

from __future__ import annotations

from typing import Any, Optional

from idmgmt.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class IdmgmtError(Exception):
    """Base exception for all idmgmt errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(IdmgmtError):
    """Raised for configuration problems (invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE


class ArgumentError(ConfigError):
    """Raised when manager options are missing or invalid (e.g. no base URL)."""

    exit_code = EXIT_INVALID_USAGE


class RequestError(IdmgmtError):
    """Raised when a request fails at the transport level or with a non-2xx status.

    Args:
        message: Human-readable error description.
        status_code: HTTP status of the failed response, ``None`` for
            transport failures.
        body: Decoded response body, if any.
        method: HTTP method of the failed request.
        url: Full URL of the failed request.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Any = None,
        method: Optional[str] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.method = method
        self.url = url


class AuthError(RequestError):
    """Raised when the API rejects the credentials (HTTP 401 / 403)."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(RequestError):
    """Raised when the API returns HTTP 404."""

    exit_code = EXIT_NOT_FOUND


class ServerError(RequestError):
    """Raised when the API returns an HTTP 5xx server error."""

    exit_code = EXIT_SERVER_ERROR


class ConnectionError_(RequestError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR
