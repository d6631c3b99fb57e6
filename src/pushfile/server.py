from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .frame import Frame, FrameError, FrameKind, classify, decode
from .names import derive_name, file_exists
from .net import TcpEndpoint, format_address


def acknowledgement(name: str, overwritten: bool) -> str:
    return f"file {name} {'overwritten' if overwritten else 'received'}"


@dataclass(slots=True)
class ServerSession:
    conn: TcpEndpoint
    directory: Path = field(default_factory=Path)

    def run(self) -> FrameKind:
        """Serve one client until it exits, disconnects or misbehaves.

        The connection is always closed on return; the result says which of
        EXIT, CONNECTION_CLOSED or INVALID ended the session.
        """
        try:
            while True:
                message, closed = self.conn.recv_message()
                kind = classify(message)
                logging.debug("received %d bytes (%s): %r", len(message), kind.value, message.decode("utf-8", "replace"))

                if closed and kind is not FrameKind.EXIT:
                    if message:
                        name = derive_name(message.decode("utf-8", "surrogateescape"))
                        logging.error("error receiving file %s", name)
                    return FrameKind.CONNECTION_CLOSED

                if kind is FrameKind.EXIT:
                    logging.info("connection closed")
                    return kind

                if kind is FrameKind.INVALID:
                    logging.warning("invalid message from client; closing connection")
                    return kind

                try:
                    if not self._receive(message):
                        return FrameKind.INVALID
                except ConnectionError as exc:
                    logging.error("connection lost while acknowledging: %s", exc)
                    return FrameKind.CONNECTION_CLOSED
        finally:
            self.conn.close()

    def _receive(self, message: bytes) -> bool:
        try:
            frame = decode(message)
            target = self._target(frame)
        except FrameError as exc:
            logging.error("error receiving file: %s", exc)
            return False

        overwritten = file_exists(str(target))
        try:
            with open(target, "wb") as out:
                out.write(frame.payload)
        except OSError as exc:
            logging.error("error receiving file %s: %s", frame.tag, exc)
            return False

        ack = acknowledgement(frame.tag, overwritten)
        logging.info("%s", ack)
        self.conn.send_exact(ack.encode("utf-8", "surrogateescape"))
        return True

    def _target(self, frame: Frame) -> Path:
        root = self.directory.resolve()
        if os.path.isabs(frame.tag):
            raise FrameError(f"absolute file name {frame.tag!r}")
        target = (root / frame.tag).resolve()
        if root not in target.parents:
            raise FrameError(f"file name {frame.tag!r} leaves {root}")
        return target


@dataclass(slots=True)
class Server:
    listener: TcpEndpoint
    directory: Path = field(default_factory=Path)

    def serve(self, max_sessions: int | None = None) -> int:
        """Accept and serve clients one at a time; returns sessions served."""
        served = 0
        while max_sessions is None or served < max_sessions:
            conn, peer = self.listener.accept()
            logging.info("connection from %s", format_address(self.listener.family, peer))
            outcome = ServerSession(conn, self.directory).run()
            logging.debug("session ended: %s", outcome.value)
            served += 1
        return served
