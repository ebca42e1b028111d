"""Exception hierarchy for sendpulse_client.

The public :class:`~sendpulse_client.sendpulse.SendPulse` methods never raise
these: the request pipeline catches them and folds them into a
:class:`~sendpulse_client.models.SendPulseResponse`. They are raised by the
lower layers (transport, config) and by the CLI, whose entry point catches
``SendPulseError`` and exits with the attached ``exit_code``.

Subclass hierarchy::

    SendPulseError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- AuthError           (exit 3)
    +-- NotFoundError       (exit 4)
    +-- ServerError         (exit 5)
    +-- TransportError      (exit 6)
    +-- ConfigError         (exit 1)
"""

from sendpulse_client.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
)


class SendPulseError(Exception):
    """Base exception for all sendpulse_client errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SendPulseError):
    """Raised for invalid CLI arguments or malformed request descriptors."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(SendPulseError):
    """Raised when the credentials-grant exchange is rejected."""

    exit_code = EXIT_AUTH_FAILURE


class NotFoundError(SendPulseError):
    """Raised when the API returns HTTP 404."""

    exit_code = EXIT_NOT_FOUND


class ServerError(SendPulseError):
    """Raised when the API returns an HTTP 5xx server error."""

    exit_code = EXIT_SERVER_ERROR


class TransportError(SendPulseError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    The retry coordinator converts it into a result with
    ``http_status_code == 0``.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ConfigError(SendPulseError):
    """Raised for configuration problems (missing profiles, invalid JSON, bad credential sources)."""

    exit_code = EXIT_GENERIC_FAILURE


def error_for_result(
    http_status_code: int,
    is_error: bool,
    sdk_error_message: str | None = None,
) -> SendPulseError | None:
    """Translate the fields of a unified result into a typed exception.

    Used by the CLI to pick an exit code. Returns ``None`` for a successful
    result. A status of ``0`` means no response was received: a local
    validation failure, or a connection error when the message carries the
    ``Connection failed`` prefix set by the retry coordinator.
    """
    if not is_error:
        return None

    message = sdk_error_message or f"HTTP {http_status_code}"
    if http_status_code == 0:
        if message.startswith("Connection failed"):
            return TransportError(message)
        return InvalidUsageError(message)
    if http_status_code in (401, 403):
        return AuthError(message)
    if http_status_code == 404:
        return NotFoundError(message)
    if http_status_code >= 500:
        return ServerError(message)
    return SendPulseError(message)
