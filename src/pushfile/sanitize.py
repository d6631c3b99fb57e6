from __future__ import annotations

import string

_KEEP = frozenset((string.ascii_letters + string.digits + " \n").encode("ascii"))
_DROP = bytes(b for b in range(256) if b not in _KEEP)


def sanitize(data: bytes) -> bytes:
    """Drop every byte that is not an ASCII letter, digit, space or newline."""
    return data.translate(None, _DROP)
