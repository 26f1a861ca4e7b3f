"""Lineview - A terminal text viewer."""

from .model import Document, Row, Cursor, render_row
from .view import Viewport

__all__ = [
    'Document',
    'Row',
    'Cursor',
    'render_row',
    'Viewport',
]
