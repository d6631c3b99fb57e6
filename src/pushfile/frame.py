from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from typing import BinaryIO

from .constants import (
    DEFAULT_FRAME_CAPACITY,
    EXIT_COMMAND,
    HEADER_FORMAT,
    PREFIXED_MAGIC,
    SENTINEL,
)
from .names import derive_name
from .sanitize import sanitize

HEADER_LEN = struct.calcsize(HEADER_FORMAT)
MAX_TAG_LEN = 0xFFFF

_EXIT = EXIT_COMMAND.encode("ascii")
_EXIT_LINE = _EXIT + b"\n"


class FrameError(ValueError):
    pass


class Framing(enum.Enum):
    LEGACY = "legacy"
    PREFIXED = "prefixed"


class FrameKind(enum.Enum):
    SEND = "send"
    EXIT = "exit"
    INVALID = "invalid"
    CONNECTION_CLOSED = "connection_closed"


def _text(raw: bytes) -> str:
    return raw.decode("utf-8", "surrogateescape")


def _raw(text: str) -> bytes:
    return text.encode("utf-8", "surrogateescape")


@dataclass(frozen=True, slots=True)
class Frame:
    """One file transfer message.

    On the way out ``tag`` is the path exactly as the user selected it. A
    decoded frame carries the derived target name in ``tag`` instead.
    """

    tag: str
    payload: bytes = b""

    def to_bytes(self, framing: Framing = Framing.LEGACY) -> bytes:
        tag = _raw(self.tag)
        if framing is Framing.LEGACY:
            return tag + self.payload + SENTINEL

        if len(tag) > MAX_TAG_LEN:
            raise FrameError(f"tag too long: {len(tag)} bytes")
        header = struct.pack(HEADER_FORMAT, PREFIXED_MAGIC, len(tag), len(self.payload))
        return header + tag + self.payload + SENTINEL

    @staticmethod
    def from_bytes(raw: bytes) -> "Frame":
        if raw.startswith(PREFIXED_MAGIC):
            return _decode_prefixed(raw)
        return _decode_legacy(raw)


def _prefixed_total(raw: bytes) -> int:
    _, tag_len, payload_len = struct.unpack_from(HEADER_FORMAT, raw)
    return HEADER_LEN + tag_len + payload_len + len(SENTINEL)


def _decode_prefixed(raw: bytes) -> Frame:
    if len(raw) < HEADER_LEN:
        raise FrameError("frame too small to hold a header")
    _, tag_len, payload_len = struct.unpack_from(HEADER_FORMAT, raw)
    if _prefixed_total(raw) != len(raw) or not raw.endswith(SENTINEL):
        raise FrameError("frame length does not match its header")

    tag_end = HEADER_LEN + tag_len
    tag = _text(raw[HEADER_LEN:tag_end])
    payload = raw[tag_end : tag_end + payload_len]
    return Frame(tag=derive_name(tag), payload=payload)


def _decode_legacy(raw: bytes) -> Frame:
    # The tag has no length of its own: the target name is derived from the
    # whole frame and its first occurrence is cut out of it.
    text = _text(raw)
    target = derive_name(text)
    if not target:
        raise FrameError("frame carries an empty file name")

    at = text.find(target)
    if at < 0:
        raise FrameError(f"file name {target!r} does not occur in the frame")

    rest = _raw(text[:at] + text[at + len(target) :])
    if rest.endswith(SENTINEL):
        rest = rest[: -len(SENTINEL)]
    return Frame(tag=target, payload=rest)


def decode(message: bytes) -> Frame:
    return Frame.from_bytes(message)


def overhead(tag: str, framing: Framing = Framing.LEGACY) -> int:
    size = len(_raw(tag)) + len(SENTINEL)
    if framing is Framing.PREFIXED:
        size += HEADER_LEN
    return size


def payload_budget(tag: str, capacity: int = DEFAULT_FRAME_CAPACITY, framing: Framing = Framing.LEGACY) -> int:
    budget = capacity - overhead(tag, framing)
    if budget < 0:
        raise FrameError(f"file name {tag!r} does not fit in a {capacity} byte frame")
    return budget


def encode(
    tag: str,
    source: BinaryIO,
    capacity: int = DEFAULT_FRAME_CAPACITY,
    framing: Framing = Framing.LEGACY,
) -> bytes:
    """Build the single frame sent for ``tag``.

    At most the payload budget is read from ``source``; anything past it is
    never transferred. The bytes read are sanitized before framing, so the
    frame may come out shorter than ``capacity``.
    """
    budget = payload_budget(tag, capacity, framing)
    chunk = source.read(budget) if budget else b""
    return Frame(tag=tag, payload=sanitize(chunk or b"")).to_bytes(framing)


def classify(message: bytes) -> FrameKind:
    if not message:
        return FrameKind.CONNECTION_CLOSED

    if message.startswith(PREFIXED_MAGIC):
        if (
            len(message) >= HEADER_LEN
            and _prefixed_total(message) == len(message)
            and message.endswith(SENTINEL)
        ):
            return FrameKind.SEND
        return FrameKind.INVALID

    if message.endswith(SENTINEL):
        return FrameKind.SEND
    if message.startswith(_EXIT):
        return FrameKind.EXIT
    return FrameKind.INVALID


def message_end(buf: bytes | bytearray, capacity: int = DEFAULT_FRAME_CAPACITY) -> int | None:
    """Return where the first complete message in ``buf`` ends.

    ``None`` means more bytes are needed. A buffer that fills the frame
    capacity without completing a message is cut at the capacity.
    """
    if len(buf) < len(PREFIXED_MAGIC) and PREFIXED_MAGIC.startswith(buf):
        return None

    if buf.startswith(PREFIXED_MAGIC):
        if len(buf) < HEADER_LEN:
            return None
        total = _prefixed_total(bytes(buf[:HEADER_LEN]))
        if total > capacity:
            return HEADER_LEN
        return total if len(buf) >= total else None

    at = buf.find(SENTINEL, 0, capacity)
    if at >= 0:
        return at + len(SENTINEL)
    if buf.startswith(_EXIT_LINE):
        return len(_EXIT_LINE)
    if len(buf) >= capacity:
        return capacity
    return None
