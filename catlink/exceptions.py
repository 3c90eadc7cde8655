"""
Exceptions for catlink.

Validation and misuse errors are raised; timeouts and unparsable replies
are reported through Response fields instead.
"""

from typing import Optional


class CATError(Exception):
    """
    Base exception for radio control errors.

    All catlink exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        command: Optional[bytes] = None,
        response: Optional[bytes] = None
    ) -> None:
        """
        Initialize exception with context.

        Args:
            message: Error description
            command: Wire bytes of the command that caused the error (if applicable)
            response: Bytes received from the radio (if applicable)
        """
        self.command = command
        self.response = response
        super().__init__(message)

    def __str__(self) -> str:
        """Format error message with context."""
        parts = [super().__str__()]

        if self.command:
            parts.append(f"Command: {self.command!r}")

        if self.response:
            parts.append(f"Response: {self.response!r}")

        return " | ".join(parts)


class TransportError(CATError):
    """
    Raised when the serial transport fails.

    This indicates:
    - Serial port does not exist
    - Permission denied
    - Port already held by another process
    """
    pass


class DeviceDisconnectedError(TransportError):
    """
    Raised when the device disappears while the port is open.

    The session is closed; it must be reopened before further use.
    """
    pass


class TransportTimeoutError(TransportError):
    """
    Raised by a transport when a write exceeds its deadline.

    Session.execute() converts this into a failed Response.
    """
    pass


class ProtocolError(CATError):
    """
    Raised when received bytes match no known pattern for the active radio.

    Only raised by strict decoding; the default path yields no value.
    """
    pass


class ValidationError(CATError):
    """
    Raised when a parameter or configuration value is invalid.

    Always raised before any bytes reach the transport.
    """
    pass


class OutOfRangeError(ValidationError):
    """
    Raised when a numeric parameter is outside its valid range.

    This indicates:
    - Frequency below 0 Hz or above 999,999,999,999 Hz
    - Frequency with more digits than the radio's field holds
    """
    pass


class NotOpenError(CATError):
    """
    Raised when an operation is attempted on a closed session.
    """
    pass


class UnsupportedOperationError(CATError):
    """
    Raised when the active radio model has no encoding for an operation.
    """
    pass


class UnknownRadioError(CATError):
    """
    Raised when a radio model name is not in the registry.
    """
    pass
