"""Unit tests for chessnet/core/config.py and the command line parser in chessnet/cli.py"""

import socket
from concurrent.futures import ThreadPoolExecutor

import pytest

from chessnet.cli import build_parser, main
from chessnet.core.config import Settings
from chessnet.core.shared_types import Color
from chessnet.services.session import ServerSession


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CHESSNET_HOST",
        "CHESSNET_PORT",
        "CHESSNET_IO_TIMEOUT_S",
        "CHESSNET_TURN_TIMEOUT_S",
        "CHESSNET_MAX_RECORD_BYTES",
        "CHESSNET_SERVER_COLOR",
        "CHESSNET_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    settings = Settings.from_env()
    assert settings == Settings()
    assert settings.server_color is None


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHESSNET_HOST", "0.0.0.0")
    monkeypatch.setenv("CHESSNET_PORT", "6000")
    monkeypatch.setenv("CHESSNET_IO_TIMEOUT_S", "2.5")
    monkeypatch.setenv("CHESSNET_SERVER_COLOR", "black")
    monkeypatch.setenv("CHESSNET_LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.host == "0.0.0.0"
    assert settings.port == 6000
    assert settings.io_timeout == 2.5
    assert settings.server_color == Color.BLACK
    assert settings.log_level == "DEBUG"


def test_empty_variable_means_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHESSNET_PORT", "")
    assert Settings.from_env().port == Settings().port


def test_parse_serve() -> None:
    args = build_parser(Settings()).parse_args(["serve", "--port", "7000", "--color", "white"])
    assert args.mode == "serve"
    assert args.port == 7000
    assert args.color == Color.WHITE


def test_parse_connect() -> None:
    args = build_parser(Settings()).parse_args(["connect", "--host", "10.0.0.2"])
    assert args.mode == "connect"
    assert args.host == "10.0.0.2"
    assert args.server_color == Color.BLACK


def test_parse_bad_color() -> None:
    with pytest.raises(SystemExit):
        build_parser(Settings()).parse_args(["serve", "--color", "green"])


def test_connect_to_nothing_fails_cleanly(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHESSNET_IO_TIMEOUT_S", "1")
    # port 1 is privileged and never listened on in a test environment
    assert main(["connect", "--host", "127.0.0.1", "--port", "1"]) == 1


class ClosedInput:
    """Console whose standard input is already at end of file."""

    def pick_move(self, view: object) -> None:
        raise EOFError

    def show(self, view: object) -> None:
        pass

    def reject(self, message: str) -> None:
        pass


def test_stdin_closed_mid_game(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("chessnet.cli.ConsoleUI", lambda color: ClosedInput())
    settings = Settings(io_timeout=5.0, turn_timeout=5.0)

    with socket.create_server(("127.0.0.1", 0)) as listener, ThreadPoolExecutor(max_workers=1) as pool:
        port = listener.getsockname()[1]

        def host() -> Color:
            conn, _ = listener.accept()
            with ServerSession(conn, settings) as server:
                return server.handshake()

        future = pool.submit(host)
        assert main(["connect", "--host", "127.0.0.1", "--port", str(port), "--server-color", "black"]) == 1
        assert future.result(timeout=5.0) == Color.BLACK
