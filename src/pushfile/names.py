from __future__ import annotations

from .constants import EXTENSION_LOOKAHEAD, KNOWN_EXTENSIONS, VALID_EXTENSIONS


def derive_name(raw: str) -> str:
    """Normalize ``raw`` to ``<base>.<ext>``.

    The base is everything before the first dot. Starting right after that
    dot, up to four offsets are tried; at each offset the known extensions
    are checked as prefixes in order and the first hit is appended. No hit
    inside the window leaves the bare base. Text without a dot comes back
    unchanged.
    """
    dot = raw.find(".")
    if dot < 0:
        return raw

    base = raw[:dot]
    rest = raw[dot + 1 :]
    for offset in range(min(EXTENSION_LOOKAHEAD, len(rest))):
        for ext in KNOWN_EXTENSIONS:
            if rest.startswith(ext, offset):
                return f"{base}.{ext}"
    return base


def is_valid_extension(filename: str) -> bool:
    _, dot, ext = filename.rpartition(".")
    if not dot:
        return False
    return ext.lower() in VALID_EXTENSIONS


def file_exists(path: str) -> bool:
    try:
        with open(path, "r"):
            return True
    except OSError:
        return False
