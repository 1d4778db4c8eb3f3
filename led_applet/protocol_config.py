"""
Applet display protocol configuration.

Request: one JSON object {"opcode": str, "app_num": int, "parameters": [u8, ...]}
Response: exactly one raw status byte.
"""

import numbers
from enum import Enum, IntEnum
from typing import Optional, Union


# Buffer geometry
GRID_ROWS = 10
GRID_COLS = 9
GRID_CELLS = GRID_ROWS * GRID_COLS
BAR_CELLS = 9

# Intensity range for a single LED
MIN_INTENSITY = 0
MAX_INTENSITY = 255

# Applet slots: 0 is bar-only, 1-3 carry a grid
STATUS_BAR_APP = 0
MAX_APP_NUM = 3

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 27072

# Size of every server reply
STATUS_SIZE = 1


class Separator(Enum):
    """Separator bar modes, valued by their wire code."""

    EMPTY = 0
    SOLID = 1
    DOTTED = 2
    VARIABLE = 3

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: Union["Separator", int, str]) -> "Separator":
        """Coerce a Separator, its wire code, or its name into a Separator.

        Raises:
            ValueError: If the value names no separator mode
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid separator {value!r}")
        if isinstance(value, numbers.Integral):
            return cls(int(value))
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        raise ValueError(
            f"Invalid separator {value!r}; expected one of "
            f"{', '.join(str(s) for s in cls)}"
        )


class Opcode(Enum):
    """Command opcodes understood by the display server."""

    CREATE_APPLET = "CreateApplet"
    UPDATE_GRID = "UpdateGrid"
    UPDATE_BAR = "UpdateBar"

    def __str__(self) -> str:
        return self.value


class StatusCode(IntEnum):
    """Status byte returned by the server after every command."""

    SUCCESS = 0
    READ_FAILED = 10
    DECODE_FAILED = 20
    PARSE_FAILED = 21
    INVALID_APPLET = 30
    NOT_OWNER = 31
    ILLEGAL_UPDATE = 32
    EXECUTION_FAILED = 33
    ALREADY_EXISTS = 34
    INVALID_SEPARATOR = 40
    UNKNOWN_ERROR = 255

    @classmethod
    def from_code(cls, code: int) -> Optional["StatusCode"]:
        """Return the matching status, or None for a code outside the table."""
        try:
            return cls(code)
        except ValueError:
            return None


STATUS_DESCRIPTIONS = {
    StatusCode.SUCCESS: "success",
    StatusCode.READ_FAILED: "server failed to read stream data",
    StatusCode.DECODE_FAILED: "server failed to decode stream data as text",
    StatusCode.PARSE_FAILED: "server failed to parse text as JSON",
    StatusCode.INVALID_APPLET: "invalid applet number in command",
    StatusCode.NOT_OWNER: "command modifies an applet this connection did not create",
    StatusCode.ILLEGAL_UPDATE: "illegal grid update on applet 0, or bar update while not variable",
    StatusCode.EXECUTION_FAILED: "internal command execution error",
    StatusCode.ALREADY_EXISTS: "applet already exists",
    StatusCode.INVALID_SEPARATOR: "invalid separator value at creation",
    StatusCode.UNKNOWN_ERROR: "unknown error",
}


def describe_status(code: int) -> str:
    """Human readable meaning of a status byte."""
    status = StatusCode.from_code(code)
    if status is None:
        return f"unrecognized status {code}"
    return STATUS_DESCRIPTIONS[status]
