"""Viewport scrolling and file-space to screen-space cursor mapping."""

from dataclasses import dataclass
from typing import Tuple

from .model import Cursor, Document


def update_render_col(cursor: Cursor, document: Document) -> int:
    """Recompute the cursor's render column from its byte column."""
    if cursor.row < document.num_rows:
        cursor.render_col = document.column_map(cursor.row, cursor.col)
    else:
        cursor.render_col = 0
    return cursor.render_col


@dataclass
class Viewport:
    """The part of the document mapped onto the screen, in render space."""
    screen_rows: int = 0
    screen_cols: int = 0
    row_offset: int = 0
    col_offset: int = 0

    def recompute(self, cursor: Cursor) -> "Viewport":
        """Scroll just enough to bring the cursor back into view.

        Each axis is clamped independently and only in the direction the
        cursor escaped, so calling this twice is the same as calling it once.
        """
        if cursor.row < self.row_offset:
            self.row_offset = cursor.row
        if cursor.row - self.row_offset >= self.screen_rows:
            self.row_offset = cursor.row - self.screen_rows + 1
        if cursor.render_col < self.col_offset:
            self.col_offset = cursor.render_col
        if cursor.render_col - self.col_offset > self.screen_cols:
            self.col_offset = cursor.render_col - self.screen_cols + 1
        return self

    def screen_position(self, cursor: Cursor) -> Tuple[int, int]:
        """1-based terminal coordinates of the cursor."""
        return (cursor.row - self.row_offset + 1,
                cursor.render_col - self.col_offset + 1)
