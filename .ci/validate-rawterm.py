#!/usr/bin/env python3
"""Validate rawterm and kilo against the terminal the script runs on.

Exercises the rawterm key decoder, append buffer and escape table without a
terminal, then the full raw mode lifecycle (enable, size query, restore) and
a single editor frame when stdin/stdout are TTYs.

Run from the project root: python .ci/validate-rawterm.py
"""

import os
import sys
import termios

# Ensure the project root (CWD) is on the import path, since Python
# adds the script's directory (.ci/) rather than CWD by default.
sys.path.insert(0, os.getcwd())


def check_rawterm_units():
    """rawterm Key, read_key, match_escape, AppendBuffer -- no terminal required."""
    from rawterm import ESC, Key, AppendBuffer, ctrl_key, match_escape, read_key

    # Key constants exist and are distinct
    names = (
        "UP",
        "DOWN",
        "LEFT",
        "RIGHT",
        "HOME",
        "END",
        "PAGE_UP",
        "PAGE_DOWN",
        "DELETE",
    )
    values = [getattr(Key, attr) for attr in names]
    assert len(set(values)) == len(values), "Key constants not distinct"

    # Decoding from a canned byte stream
    stream = list(b"\x1b[Ax\x1b[5~\x1bOH\x1b[")

    def read_byte():
        return bytes((stream.pop(0),)) if stream else b""

    decoded = [read_key(read_byte) for _ in range(5)]
    assert decoded == [Key.UP, b"x", Key.PAGE_UP, Key.HOME, ESC], decoded

    assert match_escape(b"\x1b[") is None, "prefix needs more input"
    assert match_escape(b"\x1b[Z") == ESC, "unknown sequence"
    assert ctrl_key("q") == b"\x11", "ctrl_key"

    # Append buffer accumulates and empties on flush
    class Sink:
        def __init__(self):
            self.writes = []

        def write(self, data):
            self.writes.append(data)
            return len(data)

    ab = AppendBuffer()
    ab.append(b"ab")
    ab.append(b"cd")
    sink = Sink()
    ab.flush(sink)
    assert sink.writes == [b"abcd"], "single flush write"
    assert len(ab) == 0, "buffer emptied"

    print("rawterm unit checks passed")


def check_terminal_init():
    """Raw mode lifecycle on the real terminal.

    Requires a real TTY on stdin/stdout.
    """
    if not (os.isatty(sys.stdin.fileno()) and os.isatty(sys.stdout.fileno())):
        print("Terminal init/close skipped (no TTY)")
        return

    from rawterm import Terminal, window_size

    before = termios.tcgetattr(sys.stdin.fileno())

    with Terminal() as term:
        assert term.mode.enabled, "raw mode enabled"
        lflag = termios.tcgetattr(term.fd_in)[3]
        assert not lflag & termios.ICANON, "canonical mode still on"
        assert not lflag & termios.ECHO, "echo still on"

        rows, cols = window_size(term)
        assert rows > 0, "terminal height"
        assert cols > 0, "terminal width"

    assert not term.mode.enabled, "raw mode disabled"
    assert termios.tcgetattr(sys.stdin.fileno())[3] == before[3], "lflag restored"

    print("Terminal init/close passed ({}x{})".format(cols, rows))


def check_kilo_frame():
    """One editor frame rendered into a scripted terminal."""
    import kilo

    class Script:
        fd_out = None

        def __init__(self):
            self.writes = []

        def read_byte(self):
            return b""

        def write(self, data):
            self.writes.append(data)
            return len(data)

        def os_size(self):
            return 12, 40

    term = Script()
    editor = kilo.Editor(term)
    editor.document.append_row(b"hello")
    editor.refresh_screen()

    assert len(term.writes) == 1, "frame written once"
    frame = term.writes[0]
    assert frame.startswith(b"\x1b[?25l\x1b[Hhello\x1b[K"), "frame prologue"
    assert frame.endswith(b"\x1b[1;1H\x1b[?25h"), "frame epilogue"

    print("kilo frame validation passed")


if __name__ == "__main__":
    check_rawterm_units()
    check_terminal_init()
    check_kilo_frame()
    print("All checks passed")
