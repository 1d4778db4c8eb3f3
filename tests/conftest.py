"""Shared fixtures: an in-process fake display server and mock transports."""

import json
import socket
import socketserver
import threading

import pytest

from led_applet.transport import MockTransport


MAX_APP_NUM = 3
VARIABLE = 3


class FakeDisplayServer:
    """Threaded TCP server speaking the applet protocol.

    Keeps one slot per applet number, bound to the connection that created
    it and released when that connection closes.
    """

    def __init__(self):
        self.slots = {}  # app_num -> (handler, separator code)
        self.grids = {}  # app_num -> last 90 values
        self.bars = {}  # app_num -> last 9 values
        self.commands = []
        self._cond = threading.Condition()

        fake = self

        class Handler(socketserver.BaseRequestHandler):
            def handle(self):
                fake._serve(self)

        class Server(socketserver.ThreadingTCPServer):
            daemon_threads = True
            allow_reuse_address = True

        self._server = Server(("127.0.0.1", 0), Handler)
        self.port = self._server.server_address[1]
        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)

    def start(self):
        self._thread.start()

    def stop(self):
        self._server.shutdown()
        self._server.server_close()

    def wait_released(self, app_num, timeout=2.0):
        with self._cond:
            return self._cond.wait_for(lambda: app_num not in self.slots, timeout)

    def _serve(self, handler):
        decoder = json.JSONDecoder()
        pending = b""
        try:
            while True:
                chunk = handler.request.recv(4096)
                if not chunk:
                    return
                pending += chunk
                try:
                    text = pending.decode("utf-8")
                except UnicodeDecodeError:
                    handler.request.sendall(bytes([20]))
                    pending = b""
                    continue
                while text:
                    try:
                        command, end = decoder.raw_decode(text)
                    except json.JSONDecodeError:
                        # wait for the rest of the object
                        break
                    text = text[end:].lstrip()
                    handler.request.sendall(bytes([self._execute(handler, command)]))
                pending = text.encode("utf-8")
        except OSError:
            return
        finally:
            with self._cond:
                for app_num in [a for a, (h, _) in self.slots.items() if h is handler]:
                    del self.slots[app_num]
                self._cond.notify_all()

    def _execute(self, handler, command):
        with self._cond:
            self.commands.append(command)
            opcode = command.get("opcode")
            app_num = command.get("app_num")
            params = command.get("parameters", [])
            if not isinstance(app_num, int) or not 0 <= app_num <= MAX_APP_NUM:
                return 30

            if opcode == "CreateApplet":
                if app_num in self.slots:
                    return 34
                if len(params) != 1 or params[0] > VARIABLE:
                    return 40
                self.slots[app_num] = (handler, params[0])
                return 0

            owner = self.slots.get(app_num)
            if owner is None or owner[0] is not handler:
                return 31
            if opcode == "UpdateGrid":
                if app_num == 0:
                    return 32
                if len(params) != 90:
                    return 33
                self.grids[app_num] = list(params)
                return 0
            if opcode == "UpdateBar":
                if owner[1] != VARIABLE:
                    return 32
                if len(params) != 9:
                    return 33
                self.bars[app_num] = list(params)
                return 0
            return 33


@pytest.fixture
def display_server():
    """Running fake display server; yields it with its port."""
    server = FakeDisplayServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def closed_port():
    """A localhost port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]
    return port


@pytest.fixture
def mock_transport():
    """Mock transport acknowledging every command with status 0."""
    return MockTransport()
