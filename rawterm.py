#!/usr/bin/env python3

# Copyright (c) 2026 kilo contributors
# SPDX-License-Identifier: ISC

"""
rawterm -- raw-mode terminal I/O for kilo

Byte-level building blocks for a full-screen editor: raw mode with
guaranteed restoration, single-byte bounded reads, a pure escape-sequence
matcher for navigation keys, window size discovery (with a cursor-position
probe for terminals that can't answer the ioctl), and an append buffer so
that each frame reaches the terminal in one write.

Zero external dependencies. Uses only Python stdlib: termios, os, sys,
errno, atexit, re. Unix only.
"""

import atexit
import errno
import os
import re
import sys
import termios


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

# Read timeout in deciseconds (termios VTIME). Reads return after the first
# byte or after this long, whichever comes first.
_READ_TIMEOUT = 1

# Maximum number of bytes read back for a cursor position report
_PROBE_REPLY_MAX = 31

STDIN_FILENO = 0
STDOUT_FILENO = 1


# ---------------------------------------------------------------------------
# Escape sequences written to the terminal
# ---------------------------------------------------------------------------

CLEAR_SCREEN = b"\x1b[2J"
CURSOR_HOME = b"\x1b[H"
CLEAR_LINE = b"\x1b[K"
HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
CURSOR_FAR_CORNER = b"\x1b[999C\x1b[999B"
REPORT_CURSOR = b"\x1b[6n"


def cursor_to(row, col):
    """Return the sequence moving the cursor to 0-based (row, col)."""
    return f"\x1b[{row + 1};{col + 1}H".encode()


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TerminalError(Exception):
    """
    Raised when the terminal doesn't behave as required, e.g. when a cursor
    position report can't be read back or parsed.
    """


def _describe(err):
    # Human-readable text for an OSError, a termios.error, or anything else

    if isinstance(err, OSError) and err.strerror:
        return err.strerror
    if isinstance(err, termios.error) and len(err.args) > 1:
        return err.args[1]
    return str(err)


def die(what, err=None, fd=STDOUT_FILENO):
    """
    Clears the screen, homes the cursor, and exits with status 1 after
    printing "<what>: <reason>" to stderr.

    Exiting goes through SystemExit, so an enclosing 'with Terminal()' block
    and the atexit hook registered by TerminalMode.enable() restore the
    terminal on the way out.

    what:
      Name of the operation that failed

    err:
      Exception describing the failure, or None
    """
    for seq in CLEAR_SCREEN, CURSOR_HOME:
        try:
            os.write(fd, seq)
        except OSError:
            pass

    if err is None:
        sys.exit(what)
    sys.exit(f"{what}: {_describe(err)}")


# ---------------------------------------------------------------------------
# Input constants
# ---------------------------------------------------------------------------


class Key:
    """Named constants for special keys."""

    UP = "key_up"
    DOWN = "key_down"
    LEFT = "key_left"
    RIGHT = "key_right"
    PAGE_UP = "key_page_up"
    PAGE_DOWN = "key_page_down"
    HOME = "key_home"
    END = "key_end"
    DELETE = "key_delete"


# Returned for a lone Esc press, and for any sequence not in the table below
ESC = b"\x1b"


def ctrl_key(ch):
    """Return the byte produced by Ctrl+<ch>, e.g. ctrl_key("q") == b"\\x11"."""
    return bytes((ord(ch) & 0x1F,))


# ---------------------------------------------------------------------------
# Escape sequence trie for input parsing
# ---------------------------------------------------------------------------

# Map escape sequences to Key constants. Multiple entries per key to
# handle terminal variants (xterm, rxvt, tmux/linux console).
_ESCAPE_SEQUENCES = {
    # Arrow keys
    b"\x1b[A": Key.UP,
    b"\x1b[B": Key.DOWN,
    b"\x1b[C": Key.RIGHT,
    b"\x1b[D": Key.LEFT,
    # Page Up / Page Down
    b"\x1b[5~": Key.PAGE_UP,
    b"\x1b[6~": Key.PAGE_DOWN,
    # Home
    b"\x1b[H": Key.HOME,  # xterm
    b"\x1bOH": Key.HOME,  # application mode
    b"\x1b[1~": Key.HOME,  # tmux/linux
    b"\x1b[7~": Key.HOME,  # rxvt
    # End
    b"\x1b[F": Key.END,  # xterm
    b"\x1bOF": Key.END,  # application mode
    b"\x1b[4~": Key.END,  # tmux/linux
    b"\x1b[8~": Key.END,  # rxvt
    # Delete
    b"\x1b[3~": Key.DELETE,
}


def _build_trie(sequences):
    """Build a trie (nested dict keyed by byte value) from the table."""
    root = {}
    for seq, key in sequences.items():
        node = root
        for byte in seq[:-1]:
            node = node.setdefault(byte, {})
        node[seq[-1]] = key
    return root


_ESCAPE_TRIE = _build_trie(_ESCAPE_SEQUENCES)


def match_escape(seq):
    """
    Match a byte sequence starting with ESC against the escape table.

    Returns the Key constant for a complete entry, None if 'seq' is a proper
    prefix of some entry (more input is needed), and ESC for anything that
    can't become an entry.
    """
    node = _ESCAPE_TRIE
    for byte in seq:
        if not isinstance(node, dict) or byte not in node:
            return ESC
        node = node[byte]

    if isinstance(node, dict):
        return None
    return node


def read_key(read_byte):
    """
    Block until a key arrives and return it: a Key constant, or the raw
    byte as a length-1 bytes object (ESC for a lone Esc press).

    read_byte:
      Callable taking no arguments and returning one byte, or b"" when the
      bounded read timed out (see Terminal.read_byte())

    After ESC, two more bytes are read, and a third for 'ESC [ <digit>'. An
    empty read at any of those points gives ESC. Nothing is carried over
    between calls.
    """
    while True:
        c = read_byte()
        if c:
            break

    if c != ESC:
        return c

    seq = c
    for _ in range(2):
        c = read_byte()
        if not c:
            return ESC
        seq += c

    if seq[1:2] == b"[" and seq[2:3].isdigit():
        c = read_byte()
        if not c:
            return ESC
        seq += c

    # A proper prefix here (e.g. 'ESC [ 1 x') can't complete within the
    # bytes we're allowed to read
    return match_escape(seq) or ESC


# ---------------------------------------------------------------------------
# Raw mode
# ---------------------------------------------------------------------------


class TerminalMode:
    """
    Raw mode for a terminal file descriptor.

    enable() saves the current attributes and registers disable() with
    atexit before changing anything. disable() restores the saved attributes
    once; later calls do nothing.
    """

    def __init__(self, fd=STDIN_FILENO):
        self.fd = fd
        self._saved = None

    @property
    def enabled(self):
        return self._saved is not None

    def enable(self):
        try:
            saved = termios.tcgetattr(self.fd)
        except termios.error as e:
            die("tcgetattr", e)

        self._saved = saved
        atexit.register(self.disable)

        raw = saved[:6] + [list(saved[6])]
        # IFLAG: no Ctrl-S/Ctrl-Q flow control, no CR->NL, no break signal,
        # no parity check, no 8th bit stripping
        raw[0] &= ~(
            termios.IXON
            | termios.ICRNL
            | termios.BRKINT
            | termios.INPCK
            | termios.ISTRIP
        )
        # OFLAG: no output post-processing ("\n" is not turned into "\r\n")
        raw[1] &= ~termios.OPOST
        # CFLAG: 8-bit characters
        raw[2] |= termios.CS8
        # LFLAG: no echo, byte-at-a-time input, no Ctrl-C/Ctrl-Z signals,
        # no Ctrl-V
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN)
        # read() returns as soon as there's a byte, or after the timeout
        raw[6][termios.VMIN] = 0
        raw[6][termios.VTIME] = _READ_TIMEOUT

        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, raw)
        except termios.error as e:
            die("tcsetattr", e)

    def disable(self):
        if self._saved is None:
            return

        saved = self._saved
        self._saved = None
        atexit.unregister(self.disable)

        try:
            termios.tcsetattr(self.fd, termios.TCSAFLUSH, saved)
        except termios.error as e:
            die("tcsetattr", e)


# ---------------------------------------------------------------------------
# Terminal
# ---------------------------------------------------------------------------


class Terminal:
    """
    Input/output file descriptors of the controlling terminal, plus its raw
    mode. Use as a context manager to hold raw mode for the duration of a
    block:

      with Terminal() as term:
          ...
    """

    def __init__(self, fd_in=STDIN_FILENO, fd_out=STDOUT_FILENO):
        self.fd_in = fd_in
        self.fd_out = fd_out
        self.mode = TerminalMode(fd_in)

    def __enter__(self):
        self.mode.enable()
        return self

    def __exit__(self, *_):
        self.mode.disable()

    def read_byte(self):
        """
        Read at most one byte. Returns b"" if nothing arrived within the raw
        mode read timeout.
        """
        try:
            return os.read(self.fd_in, 1)
        except OSError as e:
            # Cygwin returns EAGAIN instead of an empty read on timeout
            if e.errno == errno.EAGAIN:
                return b""
            die("read", e, self.fd_out)

    def write(self, data):
        """Write 'data' with a single write(2). Returns the number of bytes written."""
        return os.write(self.fd_out, data)

    def os_size(self):
        """
        Return (rows, cols) as reported by the TIOCGWINSZ ioctl. Raises
        OSError if the terminal can't tell.
        """
        size = os.get_terminal_size(self.fd_in)
        return size.lines, size.columns


# ---------------------------------------------------------------------------
# Window size
# ---------------------------------------------------------------------------

_CURSOR_REPORT_RE = re.compile(rb"\x1b\[(\d+);(\d+)")


def cursor_position(term):
    """
    Ask the terminal where the cursor is (device status report) and return
    the 1-based (row, col) from its 'ESC [ <row> ; <col> R' reply.

    Raises TerminalError if the request can't be written or the reply is
    missing or malformed.
    """
    if term.write(REPORT_CURSOR) != len(REPORT_CURSOR):
        raise TerminalError("short write of cursor position request")

    reply = b""
    while len(reply) < _PROBE_REPLY_MAX:
        c = term.read_byte()
        if not c or c == b"R":
            break
        reply += c

    match = _CURSOR_REPORT_RE.match(reply)
    if not match:
        raise TerminalError(f"malformed cursor position report {reply!r}")

    return int(match.group(1)), int(match.group(2))


def window_size(term, warn=None):
    """
    Return the terminal size as (rows, cols).

    The ioctl is tried first. If it fails or reports zero columns, the
    cursor is pushed to the bottom-right corner (999 is clamped by the
    terminal) and its position is read back instead.

    warn:
      Optional callable, called with a message when the fallback is used

    Raises TerminalError if the fallback fails too.
    """
    try:
        rows, cols = term.os_size()
    except OSError:
        cols = 0

    if cols:
        return rows, cols

    if term.write(CURSOR_FAR_CORNER) != len(CURSOR_FAR_CORNER):
        raise TerminalError("short write of cursor positioning sequence")

    if warn:
        warn("terminal size ioctl unavailable, probing with the cursor instead")

    return cursor_position(term)


# ---------------------------------------------------------------------------
# Append buffer
# ---------------------------------------------------------------------------


class AppendBuffer:
    """
    Accumulates one frame of output so that it reaches the terminal in a
    single write.

    An append that can't be allocated is dropped (and counted in 'dropped')
    instead of raising. The frame then comes out incomplete, which the next
    refresh repairs.
    """

    def __init__(self):
        self._buf = bytearray()
        self.dropped = 0

    def __len__(self):
        return len(self._buf)

    def getvalue(self):
        return bytes(self._buf)

    def append(self, data):
        try:
            self._buf += data
        except MemoryError:
            self.dropped += 1

    def flush(self, term):
        """Write the whole buffer with one term.write() and empty it."""
        term.write(bytes(self._buf))
        self._buf = bytearray()
