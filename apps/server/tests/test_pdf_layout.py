from __future__ import annotations

from reportlab.pdfbase.pdfmetrics import stringWidth

from handover.report.pdf_layout import (
    fit_rect_preserve_aspect,
    line_height,
    truncate_to_width,
    wrap_lines,
)


def test_wrap_lines_respects_width() -> None:
    text = "The nearside rear door has a shallow dent with paint intact " * 4
    lines = wrap_lines(text, 120, 8)
    assert len(lines) > 1
    assert all(stringWidth(line, "Helvetica", 8) <= 120 for line in lines)
    assert " ".join(lines).split() == text.split()


def test_wrap_lines_breaks_words_longer_than_width() -> None:
    lines = wrap_lines("X" * 200, 50, 8)
    assert len(lines) > 1
    assert "".join(lines) == "X" * 200
    assert all(stringWidth(line, "Helvetica", 8) <= 50 for line in lines)


def test_wrap_lines_keeps_explicit_newlines() -> None:
    assert wrap_lines("first\nsecond", 400, 9) == ["first", "second"]


def test_wrap_lines_empty_text() -> None:
    assert wrap_lines("", 100, 8) == []
    assert wrap_lines("trailing\n\n", 100, 8) == ["trailing"]


def test_line_height_includes_gap() -> None:
    assert line_height(10) == 12.0
    assert line_height(10, 3) == 15.0


def test_truncate_to_width_adds_ellipsis() -> None:
    assert truncate_to_width("short", 200, 8) == "short"
    out = truncate_to_width("a considerably longer vehicle label", 40, 8)
    assert out.endswith("…")
    assert stringWidth(out, "Helvetica", 8) <= 40


def test_fit_rect_preserves_aspect_and_centres() -> None:
    x, y, w, h = fit_rect_preserve_aspect(400, 100, 0, 0, 200, 200)
    assert (w, h) == (200, 50)
    assert (x, y) == (0, 75)
    x, y, w, h = fit_rect_preserve_aspect(100, 400, 0, 0, 200, 200)
    assert (w, h) == (50, 200)
    assert (x, y) == (75, 0)


def test_fit_rect_with_unknown_source_fills_box() -> None:
    assert fit_rect_preserve_aspect(0, 0, 5, 6, 7, 8) == (5, 6, 7, 8)
