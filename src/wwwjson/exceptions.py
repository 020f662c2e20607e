"""Exception hierarchy for wwwjson.

Only problems with how the client is configured or called are raised.
Everything that can go wrong with a request once it is dispatched (network
faults, HTTP error statuses, bodies that are not JSON) is reported through
:attr:`wwwjson.client.Response.success` instead.

Subclass hierarchy::

    WWWJSONError (exit 1)
    +-- ConfigError         (exit 1)
    +-- InvalidUsageError   (exit 2)
"""

from wwwjson.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INVALID_USAGE


class WWWJSONError(Exception):
    """Base exception for all wwwjson errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(WWWJSONError):
    """Raised for invalid configuration values (body format, transform, base URL, auth)."""

    exit_code = EXIT_GENERIC_FAILURE


class InvalidUsageError(WWWJSONError):
    """Raised before any network activity for unsupported methods or unusable paths."""

    exit_code = EXIT_INVALID_USAGE
