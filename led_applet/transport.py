"""
Display Server Transport I/O Boundary

This module provides the Transport classes, which handle all byte-stream I/O
between an applet handle and the display server. It abstracts away the
socket/mock distinction and exposes blocking send/receive calls.

I/O boundary class - handles all network interaction and connection management.
"""

import logging
import socket
from abc import ABC, abstractmethod
from collections import deque
from typing import Iterable, List, Optional, Union

from .config import ServerConfig
from .protocol_config import StatusCode


logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when transport operations fail."""

    pass


class Transport(ABC):
    """
    Abstract base class for the connection to the display server.

    Implementations are blocking: send returns once the whole message is
    handed to the stream and receive returns once the requested bytes arrive.
    """

    @abstractmethod
    def connect(self) -> None:
        """
        Open the connection.

        Raises:
            TransportError: If connection fails
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the connection. Closing twice is allowed."""
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        """Check if the connection is open."""
        pass

    @abstractmethod
    def send(self, message: bytes) -> None:
        """
        Send one complete message.

        Raises:
            TransportError: If the write fails or the connection is closed
        """
        pass

    @abstractmethod
    def receive(self, size: int) -> bytes:
        """
        Read exactly `size` bytes.

        Raises:
            TransportError: If the read fails or the stream ends early
        """
        pass


class SocketTransport(Transport):
    """
    TCP socket implementation.

    No timeout is set: a stalled server blocks the caller.
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self._sock: Optional[socket.socket] = None

    def connect(self) -> None:
        """Connect to the display server."""
        address = (self.config.host, self.config.port)
        try:
            self._sock = socket.create_connection(address)
        except OSError as e:
            self._sock = None
            raise TransportError(
                f"Connect to {self.config.host}:{self.config.port} failed: {e}"
            ) from e
        # request/response traffic of small messages
        self._sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        logger.info(f"Connected to display server {self.config.host}:{self.config.port}")

    def close(self) -> None:
        """Close the socket."""
        if self._sock is None:
            return
        try:
            self._sock.close()
            logger.info("Disconnected from display server")
        finally:
            self._sock = None

    def is_connected(self) -> bool:
        return self._sock is not None

    def send(self, message: bytes) -> None:
        if self._sock is None:
            raise TransportError("Not connected to display server")
        try:
            self._sock.sendall(message)
        except OSError as e:
            raise TransportError(f"Send failed: {e}") from e

    def receive(self, size: int) -> bytes:
        if self._sock is None:
            raise TransportError("Not connected to display server")
        chunks = bytearray()
        while len(chunks) < size:
            try:
                chunk = self._sock.recv(size - len(chunks))
            except OSError as e:
                raise TransportError(f"Receive failed: {e}") from e
            if not chunk:
                raise TransportError(
                    f"Connection closed by server after {len(chunks)}/{size} bytes"
                )
            chunks.extend(chunk)
        return bytes(chunks)


Reply = Union[int, Exception]


class MockTransport(Transport):
    """
    Mock transport for testing and development.

    Records every message sent and answers each one from a queue of scripted
    replies. A reply is a status code, or an exception instance to raise from
    receive. Once the queue is empty every command is answered with
    `default_status`.
    """

    def __init__(
        self,
        replies: Iterable[Reply] = (),
        default_status: int = StatusCode.SUCCESS,
        refuse_connect: bool = False,
    ):
        self.replies = deque(replies)
        self.default_status = int(default_status)
        self.refuse_connect = refuse_connect
        self.sent: List[bytes] = []
        self._connected = False
        self._pending = 0

    def connect(self) -> None:
        if self.refuse_connect:
            raise TransportError("[MOCK] Connection refused")
        self._connected = True
        logger.info("[MOCK] Connected to display server")

    def close(self) -> None:
        if self._connected:
            logger.info("[MOCK] Disconnected from display server")
        self._connected = False

    def is_connected(self) -> bool:
        return self._connected

    def send(self, message: bytes) -> None:
        if not self._connected:
            raise TransportError("Not connected to mock display server")
        self.sent.append(bytes(message))
        self._pending += 1
        logger.info(f"[MOCK] Sent {len(message)} bytes")

    def receive(self, size: int) -> bytes:
        if not self._connected:
            raise TransportError("Not connected to mock display server")
        if self._pending == 0:
            raise TransportError("[MOCK] No reply pending")
        self._pending -= 1
        reply = self.replies.popleft() if self.replies else self.default_status
        if isinstance(reply, Exception):
            raise reply
        return bytes([reply]) * size


def create_transport(config: ServerConfig, use_mock: Optional[bool] = None) -> Transport:
    """
    Factory function to create the appropriate transport implementation.

    Args:
        config: Server configuration
        use_mock: Force mock (True) or socket (False). If None, uses config.mock

    Returns:
        Transport: Socket or mock implementation
    """
    if use_mock is None:
        use_mock = config.mock

    if use_mock:
        logger.info("Creating mock transport")
        return MockTransport()
    else:
        logger.info("Creating socket transport")
        return SocketTransport(config)
