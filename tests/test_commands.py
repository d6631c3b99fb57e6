from __future__ import annotations

import pytest

from pushfile.commands import CommandKind, Verdict, parse


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "notes.txt").write_text("hi\n")
    (tmp_path / "Main.JAVA").write_text("class Main {}\n")
    (tmp_path / "readme.md").write_text("# hi\n")
    return tmp_path


def test_exit_and_send():
    assert parse("exit\n").kind is CommandKind.EXIT
    assert parse("exit").kind is CommandKind.EXIT
    assert parse("send file\n").kind is CommandKind.SEND_FILE


@pytest.mark.parametrize("line", ["exit now\n", " exit\n", "send\n", "select file\n", "", "\n", "SEND FILE\n"])
def test_unrecognized(line):
    assert parse(line).kind is CommandKind.UNRECOGNIZED


def test_select_valid(workdir):
    cmd = parse("select file notes.txt\n")
    assert cmd.kind is CommandKind.SELECT_FILE
    assert cmd.path == "notes.txt"
    assert cmd.verdict is Verdict.VALID
    assert parse("select file Main.JAVA").verdict is Verdict.VALID


def test_select_not_exists(workdir):
    cmd = parse("select file missing.txt\n")
    assert cmd.path == "missing.txt"
    assert cmd.verdict is Verdict.NOT_EXISTS


def test_select_invalid_extension(workdir):
    assert parse("select file readme.md\n").verdict is Verdict.INVALID


def test_select_empty_path_does_not_exist(workdir):
    assert parse("select file \n").verdict is Verdict.NOT_EXISTS
