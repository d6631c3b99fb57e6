from __future__ import annotations

import socket

import pytest

from pushfile.cli import build_parser, main


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def test_parser_defaults():
    args = build_parser().parse_args(["client", "127.0.0.1", "5000"])
    assert args.framing == "legacy"
    assert args.frame_capacity == 500
    args = build_parser().parse_args(["server", "v6", "5000", "--directory", "inbox"])
    assert args.proto == "v6"
    assert args.directory == "inbox"
    assert args.max_sessions is None


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["server", "v9", "5000"],
        ["server", "v4", "0"],
        ["server", "v4"],
        ["client", "not-an-address", "5000"],
        ["client", "127.0.0.1", "port"],
        ["client", "127.0.0.1", "5000", "--frame-capacity", "0"],
    ],
)
def test_usage_errors(argv, capsys):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    assert exc.value.code == 2
    assert "usage:" in capsys.readouterr().err


def test_client_connect_failure_is_reported():
    assert main(["client", "127.0.0.1", str(free_port())]) == 1
