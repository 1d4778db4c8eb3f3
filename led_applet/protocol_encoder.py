"""
Pure Protocol Encoding Logic

This module contains the ProtocolEncoder class, which turns applet commands
into JSON request messages and decodes the single status byte the server
sends back. It has no I/O dependencies.

Request format: {"opcode": <str>, "app_num": <int>, "parameters": [<u8>, ...]}
Response format: exactly one raw byte
"""

import json
from typing import Iterable, List

import numpy as np

from .protocol_config import (
    BAR_CELLS,
    GRID_CELLS,
    MAX_INTENSITY,
    MIN_INTENSITY,
    STATUS_SIZE,
    Opcode,
    Separator,
)


class ProtocolEncoder:
    """
    Pure protocol encoder for applet commands.

    All methods take inputs and return encoded bytes (or decoded values)
    without touching the connection.
    """

    def encode_command(
        self, opcode: Opcode, app_num: int, parameters: Iterable[int]
    ) -> bytes:
        """
        Encode one command as compact UTF-8 JSON.

        Args:
            opcode: Command opcode
            app_num: Applet slot the command targets
            parameters: u8 parameter values

        Returns:
            bytes: Complete request message ready for transmission

        Raises:
            ValueError: If a parameter is outside 0-255
        """
        params: List[int] = [int(p) for p in parameters]
        for p in params:
            if not (MIN_INTENSITY <= p <= MAX_INTENSITY):
                raise ValueError(f"Parameter {p} does not fit in a byte")
        command = {
            "opcode": opcode.value,
            "app_num": int(app_num),
            "parameters": params,
        }
        return json.dumps(command, separators=(",", ":")).encode("utf-8")

    def encode_create_applet(self, app_num: int, separator: Separator) -> bytes:
        """Encode the handshake that claims an applet slot."""
        return self.encode_command(Opcode.CREATE_APPLET, app_num, [separator.value])

    def encode_grid_update(self, app_num: int, grid: np.ndarray) -> bytes:
        """
        Encode a grid update.

        Args:
            app_num: Applet slot
            grid: Grid buffer, flattened row-major (row 0 first)

        Returns:
            bytes: UpdateGrid request carrying GRID_CELLS values
        """
        values = np.asarray(grid, dtype=np.uint8).reshape(-1)
        if values.size != GRID_CELLS:
            raise ValueError(f"Grid must hold {GRID_CELLS} values, got {values.size}")
        return self.encode_command(Opcode.UPDATE_GRID, app_num, values.tolist())

    def encode_bar_update(self, app_num: int, bar: np.ndarray) -> bytes:
        """Encode a separator bar update carrying BAR_CELLS values."""
        values = np.asarray(bar, dtype=np.uint8).reshape(-1)
        if values.size != BAR_CELLS:
            raise ValueError(f"Bar must hold {BAR_CELLS} values, got {values.size}")
        return self.encode_command(Opcode.UPDATE_BAR, app_num, values.tolist())

    def decode_status(self, reply: bytes) -> int:
        """
        Decode the server reply.

        Args:
            reply: Raw bytes read from the connection

        Returns:
            int: Status byte value (0 means success)

        Raises:
            ValueError: If the reply is not exactly one byte
        """
        if len(reply) != STATUS_SIZE:
            raise ValueError(f"Expected a {STATUS_SIZE}-byte status, got {len(reply)} bytes")
        return reply[0]
