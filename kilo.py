#!/usr/bin/env python3

# Copyright (c) 2026 kilo contributors
# SPDX-License-Identifier: ISC

"""
Overview
========

A minimal full-screen text editor for VT100-compatible terminals, built on
rawterm (pure-Python raw terminal I/O).

The file given on the command line is loaded into memory and the first
screenful of it is shown. With no file, an empty buffer and a welcome banner
are shown instead. Each refresh is composed in memory and sent to the
terminal in a single write, so partially drawn frames are never visible.

Keys:

  Arrow keys       : Move the cursor one cell
  Home/End         : Move to the first/last column
  Page Up/Down     : Move a screen height up/down
  Ctrl-Q           : Quit

The cursor moves within the visible screen; there is no scrolling, and no
editing of the text yet.


Running
=======

  $ kilo [FILENAME]

The exit status is 0 after Ctrl-Q and 1 when the terminal can't be put into
raw mode, its size can't be determined, or FILENAME can't be opened.
"""

import argparse
import sys

import rawterm
from rawterm import (
    Key,
    Terminal,
    AppendBuffer,
    ctrl_key,
    read_key,
    window_size,
    die,
    TerminalError,
    CLEAR_SCREEN,
    CURSOR_HOME,
    CLEAR_LINE,
    HIDE_CURSOR,
    SHOW_CURSOR,
)

#
# Configuration variables
#

KILO_VERSION = "0.0.1"

# Key that exits the editor
_QUIT_KEY = ctrl_key("q")

# Welcome banner shown a third of the way down an empty buffer
_WELCOME = f"Kilo editor -- version {KILO_VERSION}".encode()

# Marker drawn at the start of screen lines past the end of the buffer
_EMPTY_LINE = b"~"

_ARROW_KEYS = (Key.UP, Key.DOWN, Key.LEFT, Key.RIGHT)


#
# Document
#


class Row:
    """
    One line of text, without its line terminator.

    chars:
      The line's bytes, as a bytearray owned by the row

    size:
      Number of bytes in 'chars'
    """

    __slots__ = ("chars",)

    def __init__(self, data):
        self.chars = bytearray(data)

    @property
    def size(self):
        return len(self.chars)

    def __repr__(self):
        return f"<Row {bytes(self.chars)!r}>"


class Document:
    """
    The lines of the buffer being edited, in order. Rows are only ever
    appended.
    """

    def __init__(self):
        self.rows = []

    def __len__(self):
        return len(self.rows)

    def __getitem__(self, i):
        return self.rows[i]

    def __iter__(self):
        return iter(self.rows)

    def append_row(self, data):
        """Append a copy of 'data' as a new last row."""
        self.rows.append(Row(data))

    def load_file(self, path):
        """
        Append the lines of the file at 'path'. Trailing '\\r' and '\\n'
        characters are stripped from each line, so both '\\n' and '\\r\\n'
        line endings work.

        Raises OSError if the file can't be opened or read.
        """
        with open(path, "rb") as f:
            for line in f:
                self.append_row(line.rstrip(b"\r\n"))


#
# Editor
#


class Editor:
    """
    The editor state: cursor, screen size, and the Document, together with
    the terminal they're shown on.

    term:
      rawterm.Terminal (or anything with the same read_byte(), write() and
      os_size() methods), in raw mode

    warn:
      If True (the default), warnings are collected in 'warnings'. They
      can't be printed while the terminal is in raw mode.

    The cursor position (cx, cy) is relative to the screen, not to the
    Document.
    """

    def __init__(self, term, warn=True):
        self.term = term
        self.warn = warn
        self.warnings = []

        self.cx = 0
        self.cy = 0
        self.document = Document()

        try:
            self.screenrows, self.screencols = window_size(term, self._warn)
        except (OSError, TerminalError) as e:
            die("getWindowSize", e, term.fd_out)

    def _warn(self, msg):
        if self.warn:
            self.warnings.append(msg)

    def open(self, filename):
        # Loads 'filename' into the Document. Failing to open it is fatal.

        try:
            self.document.load_file(filename)
        except OSError as e:
            die("fopen", e, self.term.fd_out)

    #
    # Input
    #

    def move_cursor(self, key):
        # Moves the cursor one cell in the direction of the arrow key 'key',
        # staying on the screen

        if key == Key.LEFT:
            if self.cx > 0:
                self.cx -= 1
        elif key == Key.RIGHT:
            if self.cx < self.screencols - 1:
                self.cx += 1
        elif key == Key.UP:
            if self.cy > 0:
                self.cy -= 1
        elif key == Key.DOWN:
            if self.cy < self.screenrows - 1:
                self.cy += 1

    def process_keypress(self):
        """
        Reads one key and acts on it. Ctrl-Q clears the screen and exits
        with status 0 (by raising SystemExit). Keys without a binding are
        ignored.
        """
        c = read_key(self.term.read_byte)

        if c == _QUIT_KEY:
            self.term.write(CLEAR_SCREEN)
            self.term.write(CURSOR_HOME)
            sys.exit(0)

        elif c == Key.HOME:
            self.cx = 0

        elif c == Key.END:
            self.cx = self.screencols - 1

        elif c in (Key.PAGE_UP, Key.PAGE_DOWN):
            direction = Key.UP if c == Key.PAGE_UP else Key.DOWN
            for _ in range(self.screenrows):
                self.move_cursor(direction)

        elif c in _ARROW_KEYS:
            self.move_cursor(c)

    #
    # Output
    #

    def draw_rows(self, ab):
        # Appends every screen line to the AppendBuffer 'ab': Document rows
        # first, then '~' markers, with the welcome banner on an empty
        # Document

        numrows = len(self.document)

        for y in range(self.screenrows):
            if y >= numrows:
                if numrows == 0 and y == self.screenrows // 3:
                    ab.append(self._welcome_line())
                else:
                    ab.append(_EMPTY_LINE)
            else:
                ab.append(self.document[y].chars[: self.screencols])

            ab.append(CLEAR_LINE)
            if y < self.screenrows - 1:
                ab.append(b"\r\n")

    def _welcome_line(self):
        # Returns the welcome banner, truncated to the screen width and
        # centered, with a '~' marker in place of the first padding cell

        welcome = _WELCOME[: self.screencols]
        padding = (self.screencols - len(welcome)) // 2

        line = b""
        if padding:
            line += _EMPTY_LINE
            padding -= 1
        return line + b" " * padding + welcome

    def refresh_screen(self):
        """
        Redraws the whole screen. The frame is composed in an AppendBuffer
        and written with a single write, hiding the cursor while it's drawn.
        """
        ab = AppendBuffer()

        ab.append(HIDE_CURSOR)
        ab.append(CURSOR_HOME)

        self.draw_rows(ab)

        ab.append(rawterm.cursor_to(self.cy, self.cx))
        ab.append(SHOW_CURSOR)

        ab.flush(self.term)

    def run(self):
        """Runs the editor until Ctrl-Q. Never returns normally."""
        while True:
            self.refresh_screen()
            self.process_keypress()


#
# Command line
#


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="kilo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=__doc__,
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {KILO_VERSION}"
    )

    parser.add_argument(
        "filename", metavar="FILENAME", nargs="?", help="File to open (optional)"
    )

    return parser.parse_args(argv)


def _main():
    args = _parse_args()

    editor = None
    try:
        # Raw mode is restored when the block exits, whether through Ctrl-Q,
        # a fatal error, or an exception
        with Terminal() as term:
            editor = Editor(term)
            if args.filename:
                editor.open(args.filename)
            editor.run()
    finally:
        if editor:
            for msg in editor.warnings:
                print("kilo warning: " + msg, file=sys.stderr)


if __name__ == "__main__":
    _main()
