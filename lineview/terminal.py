"""Terminal interface: raw mode, geometry and byte-level I/O.

Raw mode is held by a ``RawMode`` guard so the original attributes are
restored on every exit path, including fatal errors. Geometry comes from
the kernel through Blessed, with a cursor-position probe as fallback.
"""

import errno
import logging
import os
import re
import sys
import termios
from typing import Optional, Tuple

import blessed

from .constants import ViewerConstants

logger = logging.getLogger(__name__)

CLEAR_SCREEN = b"\x1b[2J"
CURSOR_TO_BOTTOM_RIGHT = b"\x1b[999C\x1b[999B"
QUERY_CURSOR_POSITION = b"\x1b[6n"

STDIN_FILENO = 0
STDOUT_FILENO = 1

_REPORT_BODY = re.compile(rb"(\d+);(\d+)")


class TerminalError(Exception):
    """Unrecoverable terminal-control failure."""

    def __init__(self, operation: str, cause: object = None):
        self.operation = operation
        self.cause = cause
        message = f"{operation}: {cause}" if cause is not None else operation
        super().__init__(message)


class CursorReportTokenizer:
    """Reads one cursor-position report (``ESC [ rows ; cols R``).

    Scanning stops at the ``R`` terminator, at a read timeout, or after
    ``max_length - 1`` bytes, whichever comes first.
    """

    def __init__(self, reader, max_length: int = ViewerConstants.CURSOR_REPORT_MAX_LENGTH):
        self.reader = reader
        self.max_length = max_length

    def read(self) -> bytes:
        """Return the report bytes without the terminator."""
        buf = bytearray()
        while len(buf) < self.max_length - 1:
            byte = self.reader.read_byte()
            if byte is None or byte == ord("R"):
                break
            buf.append(byte)
        return bytes(buf)


def parse_cursor_report(report: bytes) -> Optional[Tuple[int, int]]:
    """Parse ``ESC [ rows ; cols`` into ``(rows, cols)``.

    Returns None for anything not framed as an escape report.
    """
    if not report.startswith(b"\x1b["):
        return None
    m = _REPORT_BODY.fullmatch(report[2:])
    if not m:
        return None
    return int(m.group(1)), int(m.group(2))


class RawMode:
    """Scoped raw-mode guard; restores the terminal on every exit."""

    def __init__(self, terminal: "TerminalInterface"):
        self.terminal = terminal
        self._entered = False

    def __enter__(self) -> "TerminalInterface":
        if self._entered:
            raise RuntimeError("raw mode guard is not reentrant")
        self.terminal.enable()
        self._entered = True
        return self.terminal

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._entered:
            self._entered = False
            self.terminal.disable()


class TerminalInterface:
    """Handles terminal I/O on raw file descriptors."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None,
                 in_fd: int = STDIN_FILENO, out_fd: int = STDOUT_FILENO,
                 read_timeout: int = ViewerConstants.READ_TIMEOUT):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal(stream=sys.__stdout__)
        self.in_fd = in_fd
        self.out_fd = out_fd
        self.read_timeout = read_timeout
        self._original_attrs: Optional[list] = None

    def raw_mode(self) -> RawMode:
        """Return a guard that holds raw mode for the duration of a with-block."""
        return RawMode(self)

    @property
    def is_raw(self) -> bool:
        return self._original_attrs is not None

    def enable(self) -> None:
        """Capture the current attributes and switch to raw mode."""
        try:
            original = termios.tcgetattr(self.in_fd)
        except termios.error as e:
            raise TerminalError("tcgetattr", e) from e

        attrs = list(original)
        attrs[6] = list(original[6])
        attrs[0] &= ~(termios.IXON | termios.ICRNL)
        attrs[1] &= ~termios.OPOST
        attrs[3] &= ~(termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN)
        # read() returns after VTIME tenths of a second even with no data
        attrs[6][termios.VMIN] = 0
        attrs[6][termios.VTIME] = self.read_timeout

        try:
            termios.tcsetattr(self.in_fd, termios.TCSAFLUSH, attrs)
        except termios.error as e:
            raise TerminalError("tcsetattr", e) from e
        self._original_attrs = original
        logger.debug("raw mode enabled on fd %d", self.in_fd)

    def disable(self) -> None:
        """Restore the attributes captured by enable()."""
        if self._original_attrs is None:
            return
        original, self._original_attrs = self._original_attrs, None
        try:
            termios.tcsetattr(self.in_fd, termios.TCSAFLUSH, original)
        except termios.error as e:
            raise TerminalError("tcsetattr", e) from e
        logger.debug("raw mode disabled on fd %d", self.in_fd)

    def read_byte(self) -> Optional[int]:
        """Read one byte, or None if nothing arrived before the timeout."""
        try:
            data = os.read(self.in_fd, 1)
        except OSError as e:
            if e.errno in (errno.EAGAIN, errno.EINTR):
                return None
            raise TerminalError("read", e) from e
        if not data:
            return None
        return data[0]

    def write(self, data: bytes) -> int:
        """Write data in a single call; failures are logged, not retried."""
        try:
            written = os.write(self.out_fd, data)
        except OSError as e:
            logger.warning("write of %d bytes failed: %s", len(data), e)
            return 0
        if written != len(data):
            logger.warning("short write: %d of %d bytes", written, len(data))
        return written

    def clear_screen(self) -> None:
        """Clear the entire screen."""
        self.write(CLEAR_SCREEN)

    def query_geometry(self) -> Tuple[int, int]:
        """Return the terminal size as (rows, cols).

        Raises:
            TerminalError: if neither the kernel nor the terminal reports a size
        """
        # Blessed's public width/height fall back to 80x24 and would hide
        # a failed ioctl; _winsize raises instead, which the probe needs.
        try:
            winsize = self.term._winsize(self.out_fd)
            rows, cols = winsize.ws_row, winsize.ws_col
        except (OSError, ValueError, TypeError) as e:
            logger.debug("window size ioctl failed: %s", e)
            rows, cols = 0, 0

        if cols > 0:
            return rows, cols

        logger.debug("falling back to cursor position probe")
        size = self._probe_geometry()
        if size is None:
            raise TerminalError("get_window_size")
        return size

    def _probe_geometry(self) -> Optional[Tuple[int, int]]:
        if self.write(CURSOR_TO_BOTTOM_RIGHT) != len(CURSOR_TO_BOTTOM_RIGHT):
            return None
        return self.cursor_position()

    def cursor_position(self) -> Optional[Tuple[int, int]]:
        """Ask the terminal where the cursor is and parse its report."""
        if self.write(QUERY_CURSOR_POSITION) != len(QUERY_CURSOR_POSITION):
            return None
        report = CursorReportTokenizer(self).read()
        position = parse_cursor_report(report)
        if position is None:
            logger.debug("ignoring malformed cursor report %r", report)
        return position
