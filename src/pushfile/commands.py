from __future__ import annotations

import enum
from dataclasses import dataclass

from .constants import EXIT_COMMAND, SELECT_PREFIX, SEND_COMMAND
from .names import file_exists, is_valid_extension


class CommandKind(enum.Enum):
    EXIT = "exit"
    SEND_FILE = "send_file"
    SELECT_FILE = "select_file"
    UNRECOGNIZED = "unrecognized"


class Verdict(enum.Enum):
    VALID = "valid"
    NOT_EXISTS = "not_exists"
    INVALID = "invalid"


@dataclass(frozen=True, slots=True)
class Command:
    kind: CommandKind
    path: str | None = None
    verdict: Verdict | None = None

    @staticmethod
    def select(path: str, verdict: Verdict) -> "Command":
        return Command(kind=CommandKind.SELECT_FILE, path=path, verdict=verdict)


EXIT = Command(CommandKind.EXIT)
SEND_FILE = Command(CommandKind.SEND_FILE)
UNRECOGNIZED = Command(CommandKind.UNRECOGNIZED)


def selection_verdict(path: str) -> Verdict:
    if not file_exists(path):
        return Verdict.NOT_EXISTS
    if not is_valid_extension(path):
        return Verdict.INVALID
    return Verdict.VALID


def parse(line: str) -> Command:
    """Classify one line of user input.

    Only the text before the first newline counts. The sole side effect is
    the readability check behind a ``select file`` verdict.
    """
    text = line.partition("\n")[0]

    if text == EXIT_COMMAND:
        return EXIT
    if text == SEND_COMMAND:
        return SEND_FILE
    if text.startswith(SELECT_PREFIX):
        path = text[len(SELECT_PREFIX) :]
        return Command.select(path, selection_verdict(path))
    return UNRECOGNIZED
