"""Command line entrypoint: `chessnet serve` hosts a game, `chessnet connect` joins one."""

import argparse
import dataclasses
import logging
import sys
from typing import Optional

from chessnet.core.config import Settings, configure_logging
from chessnet.core.exceptions import SessionError
from chessnet.core.shared_types import Color
from chessnet.services.session import ClientSession, ServerSession, Session
from chessnet.ui.console import ConsoleUI

log = logging.getLogger("chessnet")


def _color(value: str) -> Color:
    try:
        return Color(value.capitalize())
    except ValueError as err:
        raise argparse.ArgumentTypeError(f"{value!r} is not white or black") from err


def build_parser(defaults: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Two-player chess over TCP")
    parser.add_argument("--log-level", default=defaults.log_level, help="DEBUG, INFO, WARNING, ...")
    subparsers = parser.add_subparsers(dest="mode", required=True)

    serve_p = subparsers.add_parser("serve", help="Host a game and wait for one opponent")
    serve_p.add_argument("--bind", default=defaults.host, help="Bind address")
    serve_p.add_argument("--port", type=int, default=defaults.port, help="TCP port to listen on")
    serve_p.add_argument(
        "--color",
        type=_color,
        default=defaults.server_color,
        help="Only accept opponents that let the server play this color",
    )

    connect_p = subparsers.add_parser("connect", help="Join a hosted game")
    connect_p.add_argument("--host", default=defaults.host, help="Server address")
    connect_p.add_argument("--port", type=int, default=defaults.port, help="TCP port to connect to")
    connect_p.add_argument(
        "--server-color",
        type=_color,
        default=Color.BLACK,
        help="Color the server plays. You play the other one.",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    defaults = Settings.from_env()
    args = build_parser(defaults).parse_args(argv)
    configure_logging(args.log_level)

    try:
        session: Session
        if args.mode == "serve":
            settings = dataclasses.replace(
                defaults, host=args.bind, port=args.port, server_color=args.color
            )
            session = ServerSession.listen(settings)
            with session:
                session.handshake()
                return _play(session)

        settings = dataclasses.replace(defaults, host=args.host, port=args.port)
        session = ClientSession.connect(settings)
        with session:
            session.handshake(args.server_color)
            return _play(session)
    except SessionError as err:
        log.error("Session ended: %s", err)
        return 1
    except OSError as err:
        log.error("Could not open the connection: %s", err)
        return 1
    except EOFError:
        log.error("Standard input closed before the game ended")
        return 1
    except KeyboardInterrupt:
        log.info("Interrupted")
        return 130


def _play(session: Session) -> int:
    joever = session.run(ConsoleUI(color=session.color))
    log.info("Result: %s", joever.value)
    return 0


if __name__ == "__main__":
    sys.exit(main())
