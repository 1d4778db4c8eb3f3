# led_applet/config.py
from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from .errors import AppNumberError, ConfigError
from .protocol_config import DEFAULT_HOST, DEFAULT_PORT, Separator
from .validation import validate_app_num

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    mock: bool = False

    def __post_init__(self) -> None:
        if not self.host:
            raise ConfigError("Server host must not be empty")
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ConfigError(f"Server port must be an integer, got {self.port!r}")
        if not (1 <= self.port <= 0xFFFF):
            raise ConfigError(f"Server port must be 1-65535, got {self.port}")


@dataclass(frozen=True)
class AppletConfig:
    app_num: int = 1
    separator: Separator = Separator.VARIABLE

    def __post_init__(self) -> None:
        validate_app_num(self.app_num)
        if not isinstance(self.separator, Separator):
            raise ConfigError(
                f"Applet separator must be a Separator, got {self.separator!r}"
            )


@dataclass(frozen=True)
class ClientConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    applet: AppletConfig = field(default_factory=AppletConfig)


def _parse_separator(value: Union[str, int]) -> Separator:
    try:
        return Separator.parse(value)
    except ValueError as e:
        raise ConfigError(f"Invalid separator in config file: {e}") from e


def _table(data: dict, name: str, path: Path) -> dict:
    table = data.get(name, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[{name}] in {path} must be a table, got {table!r}")
    return table


def load_from_toml(config_path: str | Path) -> ClientConfig:
    """
    Load a ClientConfig from a TOML file.

    Expected TOML structure:

    [server]
    host = "127.0.0.1"
    port = 27072
    mock = false

    [applet]
    app_num = 1
    separator = "variable"  # empty|solid|dotted|variable, or 0-3
    """
    p = Path(config_path)
    if not p.exists():
        raise FileNotFoundError(f"Configuration file not found: {p}")

    with p.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Malformed configuration file {p}: {e}") from e

    server = _table(data, "server", p)
    applet = _table(data, "applet", p)
    mock = server.get("mock", False)
    if not isinstance(mock, bool):
        raise ConfigError(f"Server mock must be true or false, got {mock!r}")

    try:
        cfg = ClientConfig(
            server=ServerConfig(
                host=str(server.get("host", DEFAULT_HOST)),
                port=server.get("port", DEFAULT_PORT),
                mock=mock,
            ),
            applet=AppletConfig(
                app_num=applet.get("app_num", 1),
                separator=_parse_separator(applet.get("separator", "variable")),
            ),
        )
    except AppNumberError as e:
        raise ConfigError(f"Invalid applet in config file: {e}") from e
    except (TypeError, ValueError) as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(f"Invalid value in config file {p}: {e}") from e

    logger.info(
        "Loaded ClientConfig: server=%s:%d (mock=%s), applet=%d, separator=%s",
        cfg.server.host,
        cfg.server.port,
        cfg.server.mock,
        cfg.applet.app_num,
        cfg.applet.separator,
    )
    return cfg


def default_config() -> ClientConfig:
    """A local default: applet 1 with a variable bar on the standard port."""
    return ClientConfig(
        server=ServerConfig(host=DEFAULT_HOST, port=DEFAULT_PORT, mock=False),
        applet=AppletConfig(app_num=1, separator=Separator.VARIABLE),
    )
