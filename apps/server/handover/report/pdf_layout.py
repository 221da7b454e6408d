"""Text measurement and geometry helpers for PDF report layout.

Pure-maths utilities that keep the drawing code focused on content rather
than layout arithmetic.  Wrapping uses real font metrics so that measured
heights match what is drawn.
"""

from __future__ import annotations

from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth

from ..report_theme import FONT

LINE_HEIGHT_FACTOR = 1.2


def line_height(size: float, line_gap: float = 0.0) -> float:
    return size * LINE_HEIGHT_FACTOR + line_gap


def text_width(text: str, size: float, font: str = FONT) -> float:
    return stringWidth(text, font, size)


def wrap_lines(text: str, width: float, size: float, font: str = FONT) -> list[str]:
    """Split *text* into lines no wider than *width* (explicit newlines kept).

    Words longer than the width are broken mid-word rather than overflowing.
    """
    if not text:
        return []
    lines: list[str] = []
    for paragraph in str(text).replace("\r\n", "\n").split("\n"):
        if not paragraph.strip():
            lines.append("")
            continue
        for line in simpleSplit(paragraph, font, size, width):
            lines.extend(_break_long_word(line, width, size, font))
    while lines and not lines[-1]:
        lines.pop()
    return lines


def _break_long_word(line: str, width: float, size: float, font: str) -> list[str]:
    if stringWidth(line, font, size) <= width or len(line) <= 1:
        return [line]
    out: list[str] = []
    chunk = ""
    for ch in line:
        if chunk and stringWidth(chunk + ch, font, size) > width:
            out.append(chunk)
            chunk = ch
        else:
            chunk += ch
    if chunk:
        out.append(chunk)
    return out


def fit_rect_preserve_aspect(
    src_w: float,
    src_h: float,
    box_x: float,
    box_y: float,
    box_w: float,
    box_h: float,
) -> tuple[float, float, float, float]:
    """Return (x, y, w, h) fitted inside box while preserving src aspect."""
    if src_w <= 0 or src_h <= 0:
        return box_x, box_y, box_w, box_h
    src_ratio = src_w / src_h
    box_ratio = box_w / box_h if box_h else src_ratio
    if box_ratio > src_ratio:
        h = box_h
        w = h * src_ratio
        x = box_x + (box_w - w) / 2
        y = box_y
    else:
        w = box_w
        h = w / src_ratio
        x = box_x
        y = box_y + (box_h - h) / 2
    return x, y, w, h


def truncate_to_width(text: str, width: float, size: float, font: str = FONT) -> str:
    """Shorten *text* with a trailing ellipsis so it fits on one line."""
    if stringWidth(text, font, size) <= width:
        return text
    ellipsis = "…"
    out = text
    while out and stringWidth(out + ellipsis, font, size) > width:
        out = out[:-1]
    return (out.rstrip() + ellipsis) if out else ellipsis
