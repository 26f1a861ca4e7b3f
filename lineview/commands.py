"""Command pattern implementation for viewer actions."""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Optional, TYPE_CHECKING
from .keyboard import KeyType

if TYPE_CHECKING:
    from .viewer import Viewer, ViewerState
    from .keyboard import KeyEvent


def move_cursor(state: 'ViewerState', direction: str) -> None:
    """Move the cursor one unit, wrapping between rows.

    The cursor may rest on the row just past the last one; it can never
    go further.
    """
    document = state.document
    cursor = state.cursor
    on_row = cursor.row < document.num_rows

    if direction == 'left':
        if cursor.col != 0:
            cursor.col -= 1
        elif cursor.row > 0:
            cursor.row -= 1
            cursor.col = document.row_length(cursor.row)
    elif direction == 'right':
        if on_row and cursor.col < document.row_length(cursor.row):
            cursor.col += 1
        elif on_row:
            cursor.row += 1
            cursor.col = 0
    elif direction == 'up':
        if cursor.row != 0:
            cursor.row -= 1
    elif direction == 'down':
        if cursor.row < document.num_rows:
            cursor.row += 1

    # The new row may be shorter than the old one
    row_length = document.row_length(cursor.row)
    if cursor.col > row_length:
        cursor.col = row_length


class ViewerCommand(ABC):
    """Base class for viewer commands."""

    @abstractmethod
    def execute(self, viewer: 'Viewer', key_event: 'KeyEvent') -> None:
        """Execute the command.

        Args:
            viewer: Viewer instance
            key_event: The key event that triggered this command
        """
        pass


class MovementCommand(ViewerCommand):
    """Base class for cursor movement commands."""

    def execute(self, viewer: 'Viewer', key_event: 'KeyEvent') -> None:
        self._move(viewer.state)

    @abstractmethod
    def _move(self, state: 'ViewerState'):
        """Perform the movement."""
        pass


class ArrowCommand(MovementCommand):
    def __init__(self, direction: str):
        self.direction = direction

    def _move(self, state):
        move_cursor(state, self.direction)


class BeginningOfLineCommand(MovementCommand):
    def _move(self, state):
        state.cursor.col = 0


class EndOfLineCommand(MovementCommand):
    def _move(self, state):
        if state.cursor.row < state.document.num_rows:
            state.cursor.col = state.document.row_length(state.cursor.row)


class PageUpCommand(MovementCommand):
    """Jump to the top of the view, then step up a screenful one row at a time."""

    def _move(self, state):
        state.cursor.row = state.viewport.row_offset
        for _ in range(state.viewport.screen_rows):
            move_cursor(state, 'up')


class PageDownCommand(MovementCommand):
    """Jump to the bottom of the view, then step down a screenful one row at a time."""

    def _move(self, state):
        viewport = state.viewport
        state.cursor.row = min(viewport.row_offset + viewport.screen_rows - 1,
                               state.document.num_rows)
        for _ in range(viewport.screen_rows):
            move_cursor(state, 'down')


class QuitCommand(ViewerCommand):
    def execute(self, viewer, key_event):
        viewer.running = False


class CommandRegistry:
    """Registry mapping key combinations to commands."""

    def __init__(self):
        self._commands: Dict[Tuple[KeyType, str], ViewerCommand] = {}
        self._register_default_commands()

    def _register_default_commands(self):
        """Register the default key bindings."""
        # Basic movement
        for direction in ('left', 'right', 'up', 'down'):
            self.register((KeyType.SPECIAL, direction), ArrowCommand(direction))
        self.register((KeyType.SPECIAL, 'home'), BeginningOfLineCommand())
        self.register((KeyType.SPECIAL, 'end'), EndOfLineCommand())

        # Paging
        self.register((KeyType.SPECIAL, 'page_up'), PageUpCommand())
        self.register((KeyType.SPECIAL, 'page_down'), PageDownCommand())

        # System commands
        self.register((KeyType.CTRL, 'q'), QuitCommand())

    def register(self, key: Tuple[KeyType, str], command: ViewerCommand):
        """Register a command for a key combination."""
        self._commands[key] = command

    def get_command(self, key_type: KeyType, value: str) -> Optional[ViewerCommand]:
        """Get the command for a key combination."""
        return self._commands.get((key_type, value))

    def execute(self, viewer: 'Viewer', key_event: 'KeyEvent') -> bool:
        """Execute the command for the given key event.

        Returns:
            True if a command was bound to the key
        """
        command = self.get_command(key_event.key_type, key_event.value)
        if command is None:
            return False
        command.execute(viewer, key_event)
        return True
