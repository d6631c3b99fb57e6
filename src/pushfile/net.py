from __future__ import annotations

import ipaddress
import logging
import socket
from typing import Any, Tuple

from .constants import DEFAULT_FRAME_CAPACITY, LISTEN_BACKLOG
from .frame import message_end

SockAddr = Tuple[Any, ...]


class TransportError(OSError):
    pass


def parse_port(port: str | int) -> int:
    try:
        value = int(port)
    except ValueError:
        raise ValueError(f"invalid port: {port!r}") from None
    if not 0 < value < 65536:
        raise ValueError(f"invalid port: {port!r}")
    return value


def parse_address(host: str, port: str | int) -> Tuple[int, SockAddr]:
    """Turn a literal IPv4/IPv6 address and port into (family, sockaddr)."""
    number = parse_port(port)
    try:
        addr = ipaddress.ip_address(host)
    except ValueError:
        raise ValueError(f"invalid address: {host!r}") from None
    if addr.version == 4:
        return socket.AF_INET, (str(addr), number)
    return socket.AF_INET6, (str(addr), number, 0, 0)


def server_address(proto: str, port: str | int) -> Tuple[int, SockAddr]:
    number = parse_port(port)
    if proto == "v4":
        return socket.AF_INET, ("0.0.0.0", number)
    if proto == "v6":
        return socket.AF_INET6, ("::", number, 0, 0)
    raise ValueError(f"unknown protocol version: {proto!r}")


def format_address(family: int, sockaddr: SockAddr) -> str:
    version = 6 if family == socket.AF_INET6 else 4
    return f"IPv{version} {sockaddr[0]} {sockaddr[1]}"


class TcpEndpoint:
    """A connected (or listening) stream socket speaking the frame protocol.

    Received bytes are accumulated across ``recv`` calls until a whole
    message is buffered, so a frame split or merged by the transport still
    comes out as one message.
    """

    def __init__(self, sock: socket.socket, capacity: int = DEFAULT_FRAME_CAPACITY):
        self.sock = sock
        self.capacity = capacity
        self._pending = bytearray()

    @classmethod
    def listening(
        cls,
        family: int,
        sockaddr: SockAddr,
        backlog: int = LISTEN_BACKLOG,
        capacity: int = DEFAULT_FRAME_CAPACITY,
    ) -> "TcpEndpoint":
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(sockaddr)
            sock.listen(backlog)
        except OSError:
            sock.close()
            raise
        return cls(sock, capacity)

    @classmethod
    def connecting(
        cls,
        family: int,
        sockaddr: SockAddr,
        capacity: int = DEFAULT_FRAME_CAPACITY,
    ) -> "TcpEndpoint":
        sock = socket.socket(family, socket.SOCK_STREAM)
        try:
            sock.connect(sockaddr)
        except OSError:
            sock.close()
            raise
        return cls(sock, capacity)

    @property
    def family(self) -> int:
        return self.sock.family

    def local_address(self) -> SockAddr:
        return self.sock.getsockname()

    def accept(self) -> Tuple["TcpEndpoint", SockAddr]:
        conn, addr = self.sock.accept()
        return TcpEndpoint(conn, self.capacity), addr

    def send_exact(self, data: bytes) -> None:
        sent = self.sock.send(data)
        if sent != len(data):
            raise TransportError(f"short write: sent {sent} of {len(data)} bytes")

    def recv(self, bufsize: int | None = None) -> bytes:
        if self._pending:
            data = bytes(self._pending)
            self._pending.clear()
            return data
        return self.sock.recv(bufsize or self.capacity)

    def recv_message(self) -> Tuple[bytes, bool]:
        """Block until one message is buffered or the peer closes.

        A reset connection counts as closed.

        Returns ``(message, closed)``. When ``closed`` is true the message
        holds whatever arrived before the close, possibly nothing.
        """
        while True:
            end = message_end(self._pending, self.capacity)
            if end is not None:
                message = bytes(self._pending[:end])
                del self._pending[:end]
                return message, False

            try:
                chunk = self.sock.recv(self.capacity)
            except ConnectionError as exc:
                logging.debug("receive failed: %s", exc)
                chunk = b""
            if not chunk:
                message = bytes(self._pending)
                self._pending.clear()
                return message, True
            self._pending += chunk

    def close(self) -> None:
        self.sock.close()

    def __enter__(self) -> "TcpEndpoint":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
