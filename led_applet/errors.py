"""
Exception taxonomy for the applet client.

- AppletConnectionError: transport-level failure (connect, send, receive)
- ServerError: the server answered with a nonzero status byte
- ValidationError: a local argument was rejected before any I/O
"""

from typing import Optional

from .protocol_config import StatusCode, describe_status


class AppletError(Exception):
    """Base exception for applet client errors."""

    pass


class AppletConnectionError(AppletError, ConnectionError):
    """Raised when the connection to the display server fails or is closed."""

    pass


class ServerError(AppletError):
    """Raised when the server rejects a command.

    Attributes:
        code: Raw status byte as received
        status: Matching StatusCode, or None for a code outside the table
    """

    def __init__(self, code: int, message: Optional[str] = None):
        self.code = int(code)
        self.status = StatusCode.from_code(code)
        super().__init__(message or f"Server returned status {code}: {self.description}")

    @property
    def description(self) -> str:
        return describe_status(self.code)


class AlreadyExistsError(ServerError):
    """Raised when the requested applet slot is held by another connection."""

    def __init__(self, app_num: int):
        self.app_num = app_num
        super().__init__(
            StatusCode.ALREADY_EXISTS, f"Applet {app_num} already exists on the server"
        )


class InvalidSeparatorError(ServerError):
    """Raised when the server refuses the separator sent at creation."""

    def __init__(self, separator_code: int):
        self.separator_code = separator_code
        super().__init__(
            StatusCode.INVALID_SEPARATOR,
            f"Server rejected separator code {separator_code}",
        )


class ValidationError(AppletError, ValueError):
    """Base exception for locally rejected arguments."""

    pass


class AppNumberError(ValidationError):
    """Raised when an applet number is outside the supported slots."""

    pass


class SeparatorValueError(ValidationError):
    """Raised when a separator value names no separator mode."""

    pass


class IndexOutOfBoundsError(ValidationError, IndexError):
    """Raised when a grid coordinate lies outside the grid."""

    pass


class GridShapeError(ValidationError):
    """Raised when a grid does not have the expected dimensions."""

    pass


class BarShapeError(ValidationError):
    """Raised when a bar does not have the expected length."""

    pass


class IntensityError(ValidationError):
    """Raised when an LED intensity is not an integer in 0-255."""

    pass


class ConfigError(ValidationError):
    """Raised when a configuration value is invalid."""

    pass


def error_for_handshake(code: int, app_num: int, separator_code: int) -> ServerError:
    """Map a nonzero CreateApplet status to its exception."""
    if code == StatusCode.ALREADY_EXISTS:
        return AlreadyExistsError(app_num)
    if code == StatusCode.INVALID_SEPARATOR:
        return InvalidSeparatorError(separator_code)
    return ServerError(code)
