# Copyright (c) 2026 kilo contributors
# SPDX-License-Identifier: ISC
#
# Command line tests. The interactive part needs a terminal, so only
# argument handling and the non-terminal failure path are covered here.

import os

import pytest

import kilo


def test_filename_optional():
    assert kilo._parse_args([]).filename is None
    assert kilo._parse_args(["notes.txt"]).filename == "notes.txt"


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        kilo._parse_args(["--version"])
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == "kilo 0.0.1"


def test_too_many_arguments(capsys):
    with pytest.raises(SystemExit) as excinfo:
        kilo._parse_args(["a", "b"])
    assert excinfo.value.code == 2


def test_main_without_terminal(tmp_path, monkeypatch):
    """Not being on a terminal is fatal before anything is drawn."""
    path = tmp_path / "stdin"
    path.write_bytes(b"")
    fd = os.open(str(path), os.O_RDONLY)
    saved = os.dup(0)
    os.dup2(fd, 0)
    monkeypatch.setattr("sys.argv", ["kilo"])
    try:
        with pytest.raises(SystemExit) as excinfo:
            kilo._main()
    finally:
        os.dup2(saved, 0)
        os.close(saved)
        os.close(fd)

    assert str(excinfo.value.code).startswith("tcgetattr: ")
