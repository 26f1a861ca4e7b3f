"""Test tab expansion and byte-offset to render-column mapping."""

import pytest
from lineview.model import Document, Row, render_row


def expected_render_length(chars, tab_stop):
    col = 0
    for byte in chars:
        if byte == 0x09:
            col += tab_stop - (col % tab_stop)
        else:
            col += 1
    return col


@pytest.mark.parametrize("chars", [
    b"",
    b"plain text",
    b"\t",
    b"a\tb",
    b"\t\tx",
    b"1234567\tx",
    b"12345678\tx",
    b"mixed\t tabs\t\tand spaces\t",
])
@pytest.mark.parametrize("tab_stop", [1, 4, 8])
def test_render_length_and_no_tabs(chars, tab_stop):
    render = render_row(chars, tab_stop)
    assert len(render) == expected_render_length(chars, tab_stop)
    assert b"\t" not in render
    assert len(render) >= len(chars)


def test_tab_aligns_to_next_stop():
    assert render_row(b"ab\tc") == b"ab      c"
    assert render_row(b"\tc") == b"        c"
    # A tab exactly on a stop still advances a full stop
    assert render_row(b"12345678\tc") == b"12345678        c"


def test_row_update_regenerates_render():
    row = Row(b"\tx")
    assert row.render == b"        x"
    row.update(b"y\t")
    assert row.chars == b"y\t"
    assert row.render == b"y       "


def test_append_row_strips_one_terminator():
    doc = Document()
    doc.append_row(b"first\n")
    doc.append_row(b"second\r")
    doc.append_row(b"third\r\n")
    doc.append_row(b"fourth")
    assert [r.chars for r in doc.rows] == [b"first", b"second", b"third\r", b"fourth"]
    assert doc.num_rows == 4


def test_column_map_starts_at_zero_and_is_monotonic():
    doc = Document()
    doc.append_row(b"\ta\t\tbc\td")
    assert doc.column_map(0, 0) == 0
    cols = [doc.column_map(0, i) for i in range(len(doc.rows[0]) + 1)]
    assert cols == sorted(cols)
    assert cols[-1] == len(doc.rows[0].render)


def test_column_map_matches_render_positions():
    doc = Document(tab_stop=4)
    doc.append_row(b"ab\tcd\te")
    # 'c' sits right after the first tab stop
    assert doc.column_map(0, 3) == 4
    assert doc.rows[0].render[doc.column_map(0, 3):][:1] == b"c"
    assert doc.column_map(0, 6) == 8


def test_from_file_reads_lines(tmp_path):
    path = tmp_path / "sample.txt"
    path.write_bytes(b"one\n\ttwo\nthree")
    doc = Document.from_file(str(path))
    assert [r.chars for r in doc.rows] == [b"one", b"\ttwo", b"three"]
    assert doc.rows[1].render == b"        two"


def test_from_empty_file(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_bytes(b"")
    assert Document.from_file(str(path)).num_rows == 0


def test_row_length_past_end_is_zero():
    doc = Document()
    doc.append_row(b"abc")
    assert doc.row_length(0) == 3
    assert doc.row_length(1) == 0
