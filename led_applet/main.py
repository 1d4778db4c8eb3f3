#!/usr/bin/env python3
"""
LED Applet - command line entry point

Claims one applet slot on a running display server, fills its buffers with a
built-in test pattern and pushes them. The slot is released on exit.
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .applet import AppletHandle
from .config import ClientConfig, default_config, load_from_toml
from .errors import AppletConnectionError, ServerError, ValidationError
from .patterns import BAR_PATTERNS, GRID_PATTERNS, create_bar_pattern, create_test_pattern
from .protocol_config import Separator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="LED Matrix Applet Client")
    parser.add_argument("--config", help="Path to configuration file")
    parser.add_argument("--host", help="Display server host")
    parser.add_argument("--port", type=int, help="Display server port")
    parser.add_argument("--app", type=int, help="Applet number (0-3)")
    parser.add_argument(
        "--separator",
        choices=[str(s) for s in Separator],
        help="Separator mode",
    )
    parser.add_argument(
        "--pattern", choices=GRID_PATTERNS, default="ramp", help="Grid test pattern"
    )
    parser.add_argument(
        "--bar-pattern", choices=BAR_PATTERNS, default="vee", help="Bar test pattern"
    )
    parser.add_argument(
        "--mock", action="store_true", help="Use the mock transport (no server)"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def resolve_config(args: argparse.Namespace) -> ClientConfig:
    """Load the config file (or defaults) and apply command line overrides."""
    cfg = load_from_toml(Path(args.config)) if args.config else default_config()

    server = cfg.server
    if args.host is not None:
        server = replace(server, host=args.host)
    if args.port is not None:
        server = replace(server, port=args.port)
    if args.mock:
        server = replace(server, mock=True)

    applet = cfg.applet
    if args.app is not None:
        applet = replace(applet, app_num=args.app)
    if args.separator is not None:
        applet = replace(applet, separator=Separator.parse(args.separator))

    return ClientConfig(server=server, applet=applet)


def run(cfg: ClientConfig, pattern: str, bar_pattern: str) -> None:
    """Claim the slot, push the test patterns, release the slot."""
    with AppletHandle.from_config(cfg) as applet:
        if applet.has_grid:
            applet.set_grid(create_test_pattern(pattern))
            applet.write_grid()
            logger.info(f"Grid pattern '{pattern}' sent to applet {applet.app_num}")
        if applet.has_variable_bar:
            applet.set_bar(create_bar_pattern(bar_pattern))
            applet.write_bar()
            logger.info(f"Bar pattern '{bar_pattern}' sent to applet {applet.app_num}")
        logger.info(f"Applet stats: {applet.get_applet_stats()}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        cfg = resolve_config(args)
        run(cfg, args.pattern, args.bar_pattern)
    except ServerError as e:
        logger.error(f"Server rejected command: {e}")
        return 2
    except (AppletConnectionError, ValidationError, FileNotFoundError) as e:
        logger.error(f"Applet error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
