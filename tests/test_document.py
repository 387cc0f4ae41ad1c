# Copyright (c) 2026 kilo contributors
# SPDX-License-Identifier: ISC
#
# Document model tests: row appending and file loading with mixed line
# endings.

import pytest

from kilo import Document, Row


def test_load_file_strips_line_endings(tmp_path):
    path = tmp_path / "mixed.txt"
    path.write_bytes(b"abc\r\ndef\nghi")

    doc = Document()
    doc.load_file(str(path))

    assert [bytes(row.chars) for row in doc] == [b"abc", b"def", b"ghi"]
    assert [row.size for row in doc] == [3, 3, 3]


def test_load_file_keeps_empty_lines(tmp_path):
    path = tmp_path / "blank.txt"
    path.write_bytes(b"\n\r\nx\r\r\n\n")

    doc = Document()
    doc.load_file(str(path))

    # A run of '\r' and '\n' at the end of a line is stripped as a whole
    assert [bytes(row.chars) for row in doc] == [b"", b"", b"x", b""]


def test_load_file_keeps_inner_carriage_returns(tmp_path):
    path = tmp_path / "cr.txt"
    path.write_bytes(b"a\rb\n")

    doc = Document()
    doc.load_file(str(path))

    assert len(doc) == 1
    assert doc[0].chars == b"a\rb"


def test_load_empty_file(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_bytes(b"")

    doc = Document()
    doc.load_file(str(path))
    assert len(doc) == 0


def test_load_file_raw_bytes(tmp_path):
    """Bytes are kept as they are, whatever the encoding."""
    data = b"\xff\xfe\x00caf\xc3\xa9"
    path = tmp_path / "binary.txt"
    path.write_bytes(data + b"\n")

    doc = Document()
    doc.load_file(str(path))
    assert doc[0].chars == data


def test_load_missing_file(tmp_path):
    with pytest.raises(OSError):
        Document().load_file(str(tmp_path / "missing"))


def test_append_row_copies():
    data = bytearray(b"hello")
    doc = Document()
    doc.append_row(data)
    data[0:1] = b"j"

    assert doc[0].chars == b"hello"
    assert doc[0].size == 5


def test_append_row_order():
    doc = Document()
    for line in b"one", b"two", b"three":
        doc.append_row(line)

    assert len(doc) == 3
    assert [bytes(row.chars) for row in doc] == [b"one", b"two", b"three"]


def test_row_size_tracks_chars():
    row = Row(b"abc")
    assert row.size == 3
    row.chars += b"de"
    assert row.size == 5
    assert repr(row) == "<Row b'abcde'>"
