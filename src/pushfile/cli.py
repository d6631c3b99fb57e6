from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .client import ClientSession
from .constants import DEFAULT_FRAME_CAPACITY
from .frame import FrameError, Framing
from .net import TcpEndpoint, format_address, parse_address, server_address
from .server import Server


def cmd_server(args: argparse.Namespace) -> int:
    family, sockaddr = args.address
    listener = TcpEndpoint.listening(family, sockaddr, capacity=args.frame_capacity)
    logging.info("Server on %s, waiting", format_address(family, sockaddr))
    try:
        Server(listener, Path(args.directory)).serve(args.max_sessions)
    except KeyboardInterrupt:
        logging.info("shutting down")
    finally:
        listener.close()
    return 0


def cmd_client(args: argparse.Namespace) -> int:
    family, sockaddr = args.address
    conn = TcpEndpoint.connecting(family, sockaddr, capacity=args.frame_capacity)
    logging.debug("connected to %s", format_address(family, sockaddr))
    session = ClientSession(conn, sys.stdin, sys.stdout, framing=Framing(args.framing))
    return session.run()


def _capacity(value: str) -> int:
    n = int(value)
    if n <= 0:
        raise argparse.ArgumentTypeError(f"frame capacity must be positive: {value}")
    return n


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="pushfile", description="Push a file to a server over TCP.")
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_common(x: argparse.ArgumentParser) -> None:
        x.add_argument("--frame-capacity", type=_capacity, default=DEFAULT_FRAME_CAPACITY)

    server = sub.add_parser("server", help="receive files into a directory")
    add_common(server)
    server.add_argument("proto", choices=["v4", "v6"])
    server.add_argument("port")
    server.add_argument("--directory", default=".")
    server.add_argument("--max-sessions", type=int, default=None)
    server.set_defaults(func=cmd_server, resolve=lambda a: server_address(a.proto, a.port))

    client = sub.add_parser("client", help="select and send files interactively")
    add_common(client)
    client.add_argument("host")
    client.add_argument("port")
    client.add_argument("--framing", choices=[f.value for f in Framing], default=Framing.LEGACY.value)
    client.set_defaults(func=cmd_client, resolve=lambda a: parse_address(a.host, a.port))

    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    try:
        args.address = args.resolve(args)
    except ValueError as exc:
        p.error(str(exc))

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s [%(levelname)s] %(message)s")
    try:
        return int(args.func(args))
    except (OSError, FrameError) as exc:
        logging.error("%s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
