"""
Applet Handle - client side of one display applet

This module contains the AppletHandle class. A handle claims one applet slot
on the display server when it is created, keeps the slot's grid and
separator bar as local buffers, and pushes a buffer to the server on demand.

Setters only touch local state. write_grid and write_bar each perform one
blocking round trip and surface the server's status byte. The server is the
only authority on what a slot may display, so writes are never refused
locally.
"""

import logging
from typing import Optional, Union

import numpy as np

from .config import ClientConfig, ServerConfig
from .errors import (
    AppletConnectionError,
    ServerError,
    SeparatorValueError,
    error_for_handshake,
)
from .protocol_config import (
    BAR_CELLS,
    DEFAULT_HOST,
    GRID_COLS,
    GRID_ROWS,
    STATUS_BAR_APP,
    STATUS_SIZE,
    Separator,
    StatusCode,
)
from .protocol_encoder import ProtocolEncoder
from .transport import Transport, TransportError, create_transport
from .validation import (
    validate_app_num,
    validate_bar,
    validate_grid,
    validate_intensity,
    validate_point,
)


logger = logging.getLogger(__name__)


def _read_only(buffer: np.ndarray) -> np.ndarray:
    view = buffer.view()
    view.flags.writeable = False
    return view


class AppletHandle:
    """
    Handle for one applet slot on the display server.

    The connection is the slot's identity: the server binds the slot to the
    connection during the handshake, and the slot is released when the
    connection closes.
    """

    def __init__(
        self,
        port: int,
        app_num: int,
        separator: Union[Separator, int, str],
        host: str = DEFAULT_HOST,
        transport: Optional[Transport] = None,
        protocol_encoder: Optional[ProtocolEncoder] = None,
    ):
        """
        Connect to the display server and claim an applet slot.

        Args:
            port: TCP port of the display server
            app_num: Applet slot, 0 for the status bar or 1-3 for a grid slot
            separator: Separator mode for the slot
            host: Display server host
            transport: Connection to use instead of a socket to host:port
            protocol_encoder: Protocol encoding logic (default: new instance)

        Raises:
            AppNumberError: If app_num is outside 0-3
            SeparatorValueError: If separator names no separator mode
            AppletConnectionError: If the server cannot be reached or hangs up
            AlreadyExistsError: If another connection holds the slot
            InvalidSeparatorError: If the server refuses the separator
            ServerError: For any other nonzero status
        """
        self._app_num = validate_app_num(app_num)
        try:
            self._separator = Separator.parse(separator)
        except ValueError as e:
            raise SeparatorValueError(str(e)) from e

        self.encoder = protocol_encoder or ProtocolEncoder()
        self.transport = transport or create_transport(
            ServerConfig(host=host, port=port), use_mock=False
        )

        self._grid = np.zeros((GRID_ROWS, GRID_COLS), dtype=np.uint8)
        self._bar = np.zeros(BAR_CELLS, dtype=np.uint8)

        self.logger = logging.getLogger(f"{__name__}")

        try:
            if not self.transport.is_connected():
                self.transport.connect()
        except TransportError as e:
            raise AppletConnectionError(f"Failed to connect: {e}") from e

        try:
            self._create_applet()
        except Exception:
            self.transport.close()
            raise

        self.logger.info(
            f"Applet {self._app_num} created with {self._separator} separator"
        )

    @classmethod
    def from_config(
        cls, config: ClientConfig, transport: Optional[Transport] = None
    ) -> "AppletHandle":
        """Create a handle from a ClientConfig (mock transport when configured)."""
        return cls(
            port=config.server.port,
            app_num=config.applet.app_num,
            separator=config.applet.separator,
            host=config.server.host,
            transport=transport or create_transport(config.server),
        )

    def _create_applet(self) -> None:
        message = self.encoder.encode_create_applet(self._app_num, self._separator)
        status = self._round_trip(message)
        if status != StatusCode.SUCCESS:
            error = error_for_handshake(status, self._app_num, self._separator.value)
            self.logger.warning(f"Applet {self._app_num} creation rejected: {error}")
            raise error

    def _round_trip(self, message: bytes) -> int:
        """Send one command and block for its status byte."""
        if not self.transport.is_connected():
            raise AppletConnectionError("Applet connection is closed")
        try:
            self.transport.send(message)
            reply = self.transport.receive(STATUS_SIZE)
        except TransportError as e:
            # the slot is tied to this connection, so it cannot be reused
            self.transport.close()
            raise AppletConnectionError(str(e)) from e
        return self.encoder.decode_status(reply)

    def _write(self, message: bytes, what: str) -> None:
        status = self._round_trip(message)
        if status != StatusCode.SUCCESS:
            error = ServerError(status)
            self.logger.warning(f"Applet {self._app_num} {what} rejected: {error}")
            raise error
        self.logger.debug(f"Applet {self._app_num} {what} written")

    # ---- Accessors ----
    @property
    def app_num(self) -> int:
        return self._app_num

    @property
    def separator(self) -> Separator:
        return self._separator

    @property
    def has_grid(self) -> bool:
        """Whether the slot displays a grid (every slot except applet 0)."""
        return self._app_num != STATUS_BAR_APP

    @property
    def has_variable_bar(self) -> bool:
        return self._separator is Separator.VARIABLE

    def is_connected(self) -> bool:
        return self.transport.is_connected()

    def get_grid(self) -> np.ndarray:
        """Read-only view of the grid buffer, shape (rows, columns)."""
        return _read_only(self._grid)

    def get_bar(self) -> np.ndarray:
        """Read-only view of the separator bar buffer."""
        return _read_only(self._bar)

    # ---- Local buffer mutation ----
    def set_grid(self, matrix) -> None:
        """
        Replace the whole grid buffer.

        Args:
            matrix: Array-like of 10 rows by 9 columns, integers 0-255

        Raises:
            GridShapeError: If the dimensions are wrong
            IntensityError: If any value is not an integer in 0-255
        """
        self._grid[...] = validate_grid(matrix)

    def set_point(self, x: int, y: int, value: int) -> None:
        """
        Set one grid cell.

        Args:
            x: Column 0-8, left origin
            y: Row 0-9, top origin
            value: Intensity 0-255

        Raises:
            IndexOutOfBoundsError: If (x, y) lies outside the grid
            IntensityError: If value is not an integer in 0-255
        """
        validate_point(x, y)
        self._grid[y, x] = validate_intensity(value)

    def set_bar(self, array) -> None:
        """
        Replace the whole separator bar buffer.

        Only variable separators carry bar contents. For any other separator
        the call does nothing and raises nothing; check has_variable_bar
        first when the difference matters.

        Raises:
            BarShapeError: If the array does not hold 9 values
            IntensityError: If any value is not an integer in 0-255
        """
        if not self.has_variable_bar:
            self.logger.debug(
                f"Ignoring bar update for applet {self._app_num}: separator is {self._separator}"
            )
            return
        self._bar[...] = validate_bar(array)

    def clear_grid(self) -> None:
        self._grid.fill(0)

    def clear_bar(self) -> None:
        """Zero the bar buffer (same separator rule as set_bar)."""
        if self.has_variable_bar:
            self._bar.fill(0)

    # ---- Server round trips ----
    def write_grid(self) -> None:
        """
        Push the grid buffer to the server.

        Raises:
            ServerError: If the server returns a nonzero status (32 on applet 0)
            AppletConnectionError: If the connection fails or was closed
        """
        self._write(self.encoder.encode_grid_update(self._app_num, self._grid), "grid")

    def write_bar(self) -> None:
        """
        Push the separator bar buffer to the server.

        Raises:
            ServerError: If the server returns a nonzero status (32 unless variable)
            AppletConnectionError: If the connection fails or was closed
        """
        self._write(self.encoder.encode_bar_update(self._app_num, self._bar), "bar")

    # ---- Lifecycle ----
    def close(self) -> None:
        """Close the connection, releasing the slot on the server."""
        if self.transport.is_connected():
            self.transport.close()
            self.logger.info(f"Applet {self._app_num} closed")

    def __enter__(self) -> "AppletHandle":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def get_applet_stats(self) -> dict:
        """Get applet state for logging and diagnostics."""
        return {
            "app_num": self._app_num,
            "separator": str(self._separator),
            "has_grid": self.has_grid,
            "has_variable_bar": self.has_variable_bar,
            "connected": self.is_connected(),
            "grid_size": f"{GRID_COLS}x{GRID_ROWS}",
            "grid_lit": int(np.count_nonzero(self._grid)),
            "bar_lit": int(np.count_nonzero(self._bar)),
        }
