"""Frame composition: builds the full escape-sequence stream for one repaint."""

import logging
import os
import time
from typing import TYPE_CHECKING, Callable, Optional

from .constants import ViewerConstants
from .version import VERSION

if TYPE_CHECKING:
    from .terminal import TerminalInterface
    from .viewer import ViewerState

logger = logging.getLogger(__name__)

HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
CURSOR_HOME = b"\x1b[H"
ERASE_LINE = b"\x1b[K"
REVERSE_VIDEO = b"\x1b[7m"
NORMAL_VIDEO = b"\x1b[m"
NEWLINE = b"\r\n"


def move_cursor(row: int, col: int) -> bytes:
    """Cursor position sequence for 1-based coordinates."""
    return b"\x1b[%d;%dH" % (row, col)


class StatusMessage:
    """A short message shown in the message bar for a limited time.

    Expiry only hides the message from rendering; the text is kept.
    """

    def __init__(self, timeout: float = ViewerConstants.STATUS_MESSAGE_TIMEOUT,
                 clock: Callable[[], float] = time.time):
        self.timeout = timeout
        self.clock = clock
        self.text = ""
        self.set_at: Optional[float] = None

    def set(self, fmt: str, *args) -> None:
        """Set the message using printf-style formatting."""
        text = fmt % args if args else fmt
        self.text = text[:ViewerConstants.STATUS_MESSAGE_MAX_LENGTH]
        self.set_at = self.clock()

    def is_visible(self, now: Optional[float] = None) -> bool:
        if not self.text or self.set_at is None:
            return False
        if now is None:
            now = self.clock()
        return now - self.set_at < self.timeout


class OutputBuffer:
    """Append-only byte buffer holding one frame."""

    def __init__(self):
        self._data = bytearray()

    def append(self, data: bytes) -> None:
        try:
            self._data += data
        except MemoryError:
            # Keep what is already buffered; only this piece is lost
            logger.warning("dropped %d bytes from frame: out of memory", len(data))

    def __len__(self):
        return len(self._data)

    def getvalue(self) -> bytes:
        return bytes(self._data)


class ScreenCompositor:
    """Builds and flushes complete frames."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock

    def refresh(self, state: 'ViewerState', terminal: 'TerminalInterface') -> None:
        """Compose a frame and flush it in a single write."""
        terminal.write(self.compose(state))

    def compose(self, state: 'ViewerState') -> bytes:
        ab = OutputBuffer()
        ab.append(HIDE_CURSOR)
        ab.append(CURSOR_HOME)
        self.draw_rows(ab, state)
        self.draw_status_bar(ab, state)
        self.draw_message_bar(ab, state)
        row, col = state.viewport.screen_position(state.cursor)
        ab.append(move_cursor(row, col))
        ab.append(SHOW_CURSOR)
        return ab.getvalue()

    def draw_rows(self, ab: OutputBuffer, state: 'ViewerState') -> None:
        document = state.document
        viewport = state.viewport
        for y in range(viewport.screen_rows):
            file_row = y + viewport.row_offset
            if file_row >= document.num_rows:
                if document.num_rows == 0 and y == viewport.screen_rows // 3:
                    self.draw_welcome(ab, viewport.screen_cols)
                else:
                    ab.append(ViewerConstants.FILLER_GLYPH)
            else:
                render = document.rows[file_row].render
                start = viewport.col_offset
                ab.append(render[start:start + viewport.screen_cols])
            ab.append(ERASE_LINE)
            ab.append(NEWLINE)

    def draw_welcome(self, ab: OutputBuffer, screen_cols: int) -> None:
        msg = ViewerConstants.WELCOME_MESSAGE.format(VERSION).encode()
        msg = msg[:screen_cols]
        padding = (screen_cols - len(msg)) // 2
        if padding:
            ab.append(ViewerConstants.FILLER_GLYPH)
            padding -= 1
        ab.append(b" " * padding)
        ab.append(msg)

    def draw_status_bar(self, ab: OutputBuffer, state: 'ViewerState') -> None:
        screen_cols = state.viewport.screen_cols
        num_rows = state.document.num_rows
        filename = os.fsencode(state.filename or ViewerConstants.NO_NAME)
        filename = filename[:ViewerConstants.STATUS_FILENAME_WIDTH]
        status = (filename + b" - %d lines" % num_rows)[:screen_cols]
        rstatus = f"{state.cursor.row + 1}/{num_rows}".encode()

        ab.append(REVERSE_VIDEO)
        ab.append(status)
        gap = screen_cols - len(status)
        if gap >= len(rstatus):
            ab.append(b" " * (gap - len(rstatus)) + rstatus)
        else:
            ab.append(b" " * gap)
        ab.append(NORMAL_VIDEO)
        ab.append(NEWLINE)

    def draw_message_bar(self, ab: OutputBuffer, state: 'ViewerState') -> None:
        ab.append(ERASE_LINE)
        status = state.status
        if status.is_visible(self.clock()):
            ab.append(status.text.encode(errors="surrogateescape")[:state.viewport.screen_cols])
