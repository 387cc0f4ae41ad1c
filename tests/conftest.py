# Copyright (c) 2026 kilo contributors
# SPDX-License-Identifier: ISC
#
# Shared fixtures for the kilo pytest suite: a scripted stand-in for
# rawterm.Terminal, and a real pseudo-terminal pair.

import os
import sys

import pytest

# Ensure kilo and rawterm are importable from the project root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))


# ---------------------------------------------------------------------------
# Fake terminal
# ---------------------------------------------------------------------------


class FakeTerminal:
    """
    Stands in for rawterm.Terminal. Input bytes are handed out one per
    read_byte() call, followed by empty reads (timeouts). Every write() is
    recorded separately in 'writes'.

    size:
      (rows, cols) returned by os_size(). None makes os_size() raise OSError,
      like a terminal that doesn't support the ioctl.
    """

    def __init__(self, data=b"", size=(24, 80)):
        self.input = bytearray(data)
        self.size = size
        self.writes = []
        self.reads = 0
        self.fd_out = None

    def feed(self, data):
        self.input += data

    def read_byte(self):
        self.reads += 1
        if not self.input:
            return b""
        c = bytes(self.input[:1])
        del self.input[:1]
        return c

    def write(self, data):
        self.writes.append(bytes(data))
        return len(data)

    def os_size(self):
        if self.size is None:
            raise OSError(25, "Inappropriate ioctl for device")
        return self.size

    @property
    def output(self):
        return b"".join(self.writes)


@pytest.fixture
def fake_term():
    return FakeTerminal()


@pytest.fixture
def null_fd():
    """Writable file descriptor that discards everything, for die()."""
    fd = os.open(os.devnull, os.O_WRONLY)
    yield fd
    os.close(fd)


# ---------------------------------------------------------------------------
# Pseudo-terminal
# ---------------------------------------------------------------------------


@pytest.fixture
def pty_pair():
    """(master, slave) file descriptors of a fresh pseudo-terminal."""
    pty = pytest.importorskip("pty")
    try:
        master, slave = pty.openpty()
    except OSError as e:
        pytest.skip(f"no pseudo-terminals available: {e}")
    yield master, slave
    os.close(slave)
    os.close(master)
