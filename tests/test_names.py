from __future__ import annotations

import pytest

from pushfile.names import derive_name, file_exists, is_valid_extension


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("report.java", "report.java"),
        ("notes.md", "notes"),
        ("a.cpp.txt", "a.cpp"),
        ("README", "README"),
        ("main.c", "main.c"),
        ("script.pyHello world\\end", "script.py"),
        ("x.mdpy", "x.py"),
        ("x.abdepy", "x"),
        ("doc.texts", "doc.tex"),
        ("a.", "a"),
    ],
)
def test_derive_name(raw, expected):
    assert derive_name(raw) == expected


def test_derive_name_uses_first_dot():
    assert derive_name("v1.2/file.txt") == "v1"


@pytest.mark.parametrize("name", ["a.txt", "b.C", "c.cpp", "d.PY", "e.tex", "f.Java", "x.md.txt"])
def test_valid_extensions(name):
    assert is_valid_extension(name)


@pytest.mark.parametrize("name", ["a.md", "noext", "a.txt.bak", "a.", "a.cc"])
def test_invalid_extensions(name):
    assert not is_valid_extension(name)


def test_file_exists(tmp_path):
    f = tmp_path / "there.txt"
    f.write_text("x")
    assert file_exists(str(f))
    assert not file_exists(str(tmp_path / "missing.txt"))
