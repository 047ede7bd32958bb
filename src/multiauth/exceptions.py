"""Exception hierarchy for multiauth.

All exceptions inherit from :class:`MultiauthError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`multiauth.exit_codes`.
The top-level error handler in :func:`multiauth.app.main` catches
``MultiauthError`` and exits with the appropriate code.

Library operations that report failures through a return value (``load``,
``StrategyFactory.create``) never raise these; they log the exception's
message and return ``False`` / ``None`` instead.

Subclass hierarchy::

    MultiauthError (exit 1)
    +-- InvalidUsageError          (exit 2)
    +-- ConfigError                (exit 1)
    +-- AuthError                  (exit 3)
        +-- UnknownServiceError
        +-- InvalidCredentialFormat
        +-- NotAuthorizedError
        +-- TransportError         (exit 6)
"""

from multiauth.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class MultiauthError(Exception):
    """Base exception for all multiauth errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(MultiauthError):
    """Raised for invalid CLI arguments or missing required parameters."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(MultiauthError):
    """Raised for configuration problems (invalid services file, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE


class AuthError(MultiauthError):
    """Raised when authentication or authorisation fails."""

    exit_code = EXIT_AUTH_FAILURE


class UnknownServiceError(AuthError):
    """No binding is registered for the requested service identifier."""


class InvalidCredentialFormat(AuthError):
    """A serialized credential did not split into the expected number of fields."""


class NotAuthorizedError(AuthError):
    """Signing was attempted before any credential was installed."""


class TransportError(AuthError):
    """A token endpoint could not be reached or answered with an error.

    Args:
        message: Human-readable error description.
        detail: The raw response body (or network error text) as received.
    """

    exit_code = EXIT_CONNECTION_ERROR

    def __init__(self, message: str, detail: str = ""):
        super().__init__(message)
        self.detail = detail
