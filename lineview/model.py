"""Document model: raw rows, their tab-expanded renders and the cursor."""

from dataclasses import dataclass, field

from .constants import ViewerConstants

TAB = 0x09


def render_row(chars: bytes, tab_stop: int = ViewerConstants.TAB_STOP) -> bytes:
    """Expand tabs to spaces so every tab ends on a multiple of tab_stop."""
    out = bytearray()
    for byte in chars:
        if byte == TAB:
            out.append(0x20)
            while len(out) % tab_stop != 0:
                out.append(0x20)
        else:
            out.append(byte)
    return bytes(out)


@dataclass
class Row:
    chars: bytes = b""
    render: bytes = b""
    tab_stop: int = ViewerConstants.TAB_STOP

    def __post_init__(self):
        self.update(self.chars)

    def update(self, chars: bytes):
        """Replace the raw content and regenerate the render."""
        self.chars = chars
        self.render = render_row(chars, self.tab_stop)

    def __len__(self):
        return len(self.chars)


@dataclass
class Cursor:
    row: int = 0
    col: int = 0
    render_col: int = 0


@dataclass
class Document:
    """Ordered rows of a file; the index of a row is its line number."""
    tab_stop: int = ViewerConstants.TAB_STOP
    rows: list[Row] = field(default_factory=list)

    @classmethod
    def from_file(cls, path: str, tab_stop: int = ViewerConstants.TAB_STOP) -> "Document":
        """Load a file, one Row per physical line."""
        document = cls(tab_stop=tab_stop)
        with open(path, 'rb') as f:
            for line in f:
                document.append_row(line)
        return document

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    def __len__(self):
        return len(self.rows)

    def append_row(self, line: bytes) -> Row:
        """Append a line, dropping one trailing LF or CR."""
        if line.endswith((b"\n", b"\r")):
            line = line[:-1]
        row = Row(line, tab_stop=self.tab_stop)
        self.rows.append(row)
        return row

    def row_length(self, index: int) -> int:
        """Raw length of a row, or 0 past the end of the document."""
        if 0 <= index < len(self.rows):
            return len(self.rows[index])
        return 0

    def column_map(self, index: int, byte_offset: int) -> int:
        """Map a byte offset in a row to its render column."""
        render_col = 0
        for byte in self.rows[index].chars[:byte_offset]:
            if byte == TAB:
                render_col += (self.tab_stop - 1) - (render_col % self.tab_stop)
            render_col += 1
        return render_col
