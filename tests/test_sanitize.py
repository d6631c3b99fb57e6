from __future__ import annotations

from pushfile.sanitize import sanitize


def test_keeps_alnum_space_newline():
    assert sanitize(b"Hello World 42\nbye") == b"Hello World 42\nbye"


def test_drops_everything_else():
    assert sanitize(b"a-b_c.d!\te\r\n\\end\x00\xff") == b"abcde\nend"


def test_idempotent_and_never_grows():
    raw = bytes(range(256)) * 2
    once = sanitize(raw)
    assert sanitize(once) == once
    assert len(once) <= len(raw)
    assert set(once) <= set(b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789 \n")


def test_empty():
    assert sanitize(b"") == b""
