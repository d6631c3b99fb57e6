from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TextIO

from .commands import Command, CommandKind, Verdict, parse
from .constants import EXIT_COMMAND
from .frame import FrameError, Framing, encode
from .net import TcpEndpoint, TransportError


class ClientState(enum.Enum):
    IDLE = "idle"
    FILE_SELECTED = "file_selected"
    CLOSED = "closed"


@dataclass(slots=True)
class ClientSession:
    conn: TcpEndpoint
    stdin: TextIO
    out: TextIO
    framing: Framing = Framing.LEGACY
    selected_path: str | None = None
    state: ClientState = ClientState.IDLE

    @property
    def selected_name_length(self) -> int:
        return len(self.selected_path) if self.selected_path is not None else 0

    def run(self) -> int:
        """Read commands until exit; returns the process exit status."""
        try:
            while True:
                line = self.stdin.readline()
                if not line:
                    line = EXIT_COMMAND + "\n"
                status = self.handle(line)
                if status is not None:
                    return status
        finally:
            self.state = ClientState.CLOSED
            self.conn.close()

    def handle(self, line: str) -> int | None:
        command = parse(line)

        if command.kind is CommandKind.EXIT:
            self.conn.send_exact(line.encode("utf-8"))
            self.state = ClientState.CLOSED
            return 0

        if command.kind is CommandKind.UNRECOGNIZED:
            logging.error("unrecognized command: %r", line.rstrip("\n"))
            self.state = ClientState.CLOSED
            return 1

        if command.kind is CommandKind.SELECT_FILE:
            self._select(command)
        else:
            self._send()
        return None

    def _say(self, text: str) -> None:
        print(text, file=self.out)

    def _clear(self) -> None:
        self.selected_path = None
        self.state = ClientState.IDLE

    def _select(self, command: Command) -> None:
        path = command.path or ""
        if command.verdict is Verdict.VALID:
            self.selected_path = path
            self.state = ClientState.FILE_SELECTED
            self._say(f"{path} selected")
        elif command.verdict is Verdict.NOT_EXISTS:
            self._clear()
            self._say(f"{path} do not exist")
        else:
            self._clear()
            self._say(f"{path} not valid!")

    def _send(self) -> None:
        path = self.selected_path
        if path is None:
            self._say("no file selected!")
            return

        try:
            source = open(path, "rb")
        except OSError:
            self._clear()
            self._say(f"{path} do not exist")
            return

        with source:
            try:
                message = encode(path, source, self.conn.capacity, self.framing)
            except FrameError as exc:
                self._say(f"cannot send {path}: {exc}")
                return

            logging.debug("sending %d bytes for %s (name length %d)", len(message), path, self.selected_name_length)
            self.conn.send_exact(message)
            ack = self.conn.recv()
            if not ack:
                raise TransportError("server closed the connection")
            self._say(ack.decode("utf-8", "replace"))
