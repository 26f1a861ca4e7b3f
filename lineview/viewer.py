"""Main viewer controller: the repaint, read, apply loop."""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from .commands import CommandRegistry
from .constants import ViewerConstants
from .keyboard import KeyDecoder, KeyEvent
from .model import Cursor, Document
from .screen import ScreenCompositor, StatusMessage
from .settings import ViewerSettings
from .terminal import TerminalInterface
from .view import Viewport, update_render_col

logger = logging.getLogger(__name__)


@dataclass
class ViewerState:
    """Everything the loop mutates, owned by a single Viewer."""
    document: Document = field(default_factory=Document)
    cursor: Cursor = field(default_factory=Cursor)
    viewport: Viewport = field(default_factory=Viewport)
    status: StatusMessage = field(default_factory=StatusMessage)
    filename: Optional[str] = None


class Viewer:
    """Read-only file viewer application controller."""

    def __init__(self, terminal: Optional[TerminalInterface] = None,
                 settings: Optional[ViewerSettings] = None,
                 clock: Callable[[], float] = time.time):
        """Initialize the viewer components."""
        self.settings = settings or ViewerSettings()
        self.terminal = terminal or TerminalInterface(read_timeout=self.settings.read_timeout)
        self.keyboard = KeyDecoder(self.terminal)
        self.compositor = ScreenCompositor(clock=clock)
        self.command_registry = CommandRegistry()
        self.state = ViewerState(
            document=Document(tab_stop=self.settings.tab_stop),
            status=StatusMessage(timeout=self.settings.message_timeout, clock=clock),
        )
        self.running = False

    def load_file(self, filename: str):
        """Load a file into the viewer.

        Raises:
            OSError: if the file cannot be read
        """
        self.state.document = Document.from_file(filename, tab_stop=self.settings.tab_stop)
        self.state.filename = filename
        logger.info("loaded %s (%d lines)", filename, self.state.document.num_rows)

    def set_status_message(self, fmt: str, *args):
        self.state.status.set(fmt, *args)

    def resize(self, rows: int, cols: int):
        """Size the viewport for a terminal of rows x cols."""
        self.state.viewport.screen_rows = max(rows - ViewerConstants.RESERVED_ROWS, 0)
        self.state.viewport.screen_cols = cols

    def run(self):
        """Run the main viewer loop until quit.

        Raises:
            TerminalError: on any fatal terminal failure, after the screen
                has been cleared and the terminal restored
        """
        with self.terminal.raw_mode():
            try:
                rows, cols = self.terminal.query_geometry()
                self.resize(rows, cols)
                logger.info("viewer started on %dx%d terminal", rows, cols)
                self.set_status_message(ViewerConstants.HELP_MESSAGE)
                self.running = True
                while self.running:
                    self.refresh_screen()
                    self.process_key(self.keyboard.read_key())
            finally:
                self.running = False
                self.terminal.clear_screen()
        logger.info("viewer stopped")

    def refresh_screen(self):
        """Scroll to the cursor and repaint the whole screen."""
        update_render_col(self.state.cursor, self.state.document)
        self.state.viewport.recompute(self.state.cursor)
        self.compositor.refresh(self.state, self.terminal)

    def process_key(self, key_event: KeyEvent):
        """Apply the command bound to a key; unbound keys are ignored."""
        self.command_registry.execute(self, key_event)
