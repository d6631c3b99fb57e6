from __future__ import annotations

import pytest

from pushfile.net import TcpEndpoint


class FakeSocket:
    """Stands in for a connected socket: recv replays chunks, send records."""

    def __init__(self, chunks=(), short_write=False, send_error=None):
        self.chunks = list(chunks)
        self.sent: list[bytes] = []
        self.short_write = short_write
        self.send_error = send_error
        self.closed = False

    def recv(self, bufsize):
        item = self.chunks.pop(0) if self.chunks else b""
        if isinstance(item, BaseException):
            raise item
        return item

    def send(self, data):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(bytes(data))
        return len(data) - 1 if self.short_write else len(data)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_endpoint():
    def make(chunks=(), capacity=500, short_write=False, send_error=None):
        sock = FakeSocket(chunks, short_write=short_write, send_error=send_error)
        return TcpEndpoint(sock, capacity), sock

    return make
