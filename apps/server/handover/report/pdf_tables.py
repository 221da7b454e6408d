"""Row-paginated tables: the vehicle checklist and tyre information.

Rows are measured before they are drawn; a row that does not fit on the
current page moves to the next page whole, so no row is ever split or
clipped.  Placements of every drawn row are returned to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from ..check_items import resolve_label
from ..domain_models import CheckEntry, TyreEntry
from ..report_theme import FONT, FONT_BOLD, REPORT_COLORS
from .page_cursor import CONTENT_WIDTH, PageCursor
from .pdf_layout import line_height, truncate_to_width, wrap_lines
from .pdf_sections import draw_section_title
from .report_data import RowPlacement

LOGGER = logging.getLogger(__name__)

HEADER_BAR_H = 14.0
HEADER_ADVANCE = 15.0
HEADER_FONT_SIZE = 6.5
MIN_ROW_H = 11.0
ROW_PADDING = 4.0
CHECKBOX_SIZE = 8.0
CHECKBOX_X_OFFSET = 6.0

MISSING_CELL = "-"


@dataclass(frozen=True, slots=True)
class TableColumn:
    """A fixed-width column.  ``x`` is relative to the left margin."""

    label: str
    x: float
    width: float
    size: float = 8
    font: str = FONT
    color: str = REPORT_COLORS["ink"]
    align: str = "left"
    wrap: bool = True
    text_offset: float = 0.0


@dataclass(frozen=True, slots=True)
class TableRow:
    cells: tuple[str, ...]
    checked: bool | None = None


CHECKLIST_COLUMNS: tuple[TableColumn, ...] = (
    TableColumn("CHECK ITEM", x=22, width=275),
    TableColumn(
        "COMMENTS",
        x=310,
        width=CONTENT_WIDTH - 316,
        size=7,
        color=REPORT_COLORS["text_muted"],
        align="right",
        text_offset=1,
    ),
)

TYRE_COLUMNS: tuple[TableColumn, ...] = (
    TableColumn("POSITION", x=6, width=65, font=FONT_BOLD, wrap=False, text_offset=1),
    TableColumn("SIZE", x=75, width=120, wrap=False, text_offset=1),
    TableColumn("DEPTH", x=200, width=80, wrap=False, text_offset=1),
    TableColumn("BRAND", x=285, width=120, wrap=False, text_offset=1),
    TableColumn("TYPE", x=410, width=CONTENT_WIDTH - 416, wrap=False, text_offset=1),
)


# ---------------------------------------------------------------------------
# Row builders
# ---------------------------------------------------------------------------


def checklist_rows(checks: Sequence[CheckEntry]) -> list[TableRow]:
    return [
        TableRow(
            cells=(resolve_label(check.check_item_key), check.comments or ""),
            checked=check.checked,
        )
        for check in checks
    ]


def tyre_rows(tyres: Sequence[TyreEntry]) -> list[TableRow]:
    return [
        TableRow(
            cells=(
                tyre.position or MISSING_CELL,
                tyre.size or MISSING_CELL,
                tyre.depth or MISSING_CELL,
                tyre.brand or MISSING_CELL,
                tyre.tyre_type_label,
            )
        )
        for tyre in tyres
    ]


# ---------------------------------------------------------------------------
# Measuring and drawing
# ---------------------------------------------------------------------------


def _cell_lines(column: TableColumn, value: str) -> list[str]:
    if not value:
        return []
    if not column.wrap:
        return [truncate_to_width(value, column.width, column.size, column.font)]
    return wrap_lines(value, column.width, column.size, column.font)


def measure_row(columns: Sequence[TableColumn], row: TableRow) -> float:
    """Row height: tallest wrapped cell (at least MIN_ROW_H) plus padding."""
    tallest = MIN_ROW_H
    for column, value in zip(columns, row.cells, strict=True):
        lines = _cell_lines(column, value)
        tallest = max(tallest, len(lines) * line_height(column.size))
    return tallest + ROW_PADDING


def draw_checkbox(cursor: PageCursor, x: float, y: float, checked: bool) -> None:
    """Green square with a tick when checked, pale-red square with a cross when not."""
    page = cursor.page
    s = CHECKBOX_SIZE
    if checked:
        page.rect(x, y, s, s, fill=REPORT_COLORS["success"], stroke=REPORT_COLORS["success"])
        page.polyline(
            [(x + 1.8, y + s * 0.5), (x + s * 0.38, y + s - 2), (x + s - 1.8, y + 1.8)],
            color=REPORT_COLORS["white"],
            width=1.4,
        )
    else:
        page.rect(
            x,
            y,
            s,
            s,
            fill=REPORT_COLORS["danger_bg"],
            stroke=REPORT_COLORS["danger"],
            line_width=1,
        )
        page.line(x + 2, y + 2, x + s - 2, y + s - 2, color=REPORT_COLORS["danger"])
        page.line(x + s - 2, y + 2, x + 2, y + s - 2, color=REPORT_COLORS["danger"])


def draw_header_bar(cursor: PageCursor, columns: Sequence[TableColumn]) -> None:
    page = cursor.page
    top = cursor.y
    page.rect(
        cursor.left,
        top - 2,
        cursor.width,
        HEADER_BAR_H,
        fill=REPORT_COLORS["black"],
    )
    for column in columns:
        x = cursor.left + column.x
        if column.align == "right":
            x += column.width
        page.text(
            x,
            top + 1,
            column.label,
            font=FONT_BOLD,
            size=HEADER_FONT_SIZE,
            color=REPORT_COLORS["white"],
            align=column.align,
        )
    cursor.y = top + HEADER_ADVANCE


def _draw_row(
    cursor: PageCursor,
    columns: Sequence[TableColumn],
    row: TableRow,
    row_h: float,
    index: int,
) -> RowPlacement:
    page = cursor.page
    row_y = cursor.y
    if index % 2 == 0:
        page.rect(cursor.left, row_y - 1, cursor.width, row_h, fill=REPORT_COLORS["surface"])
    if row.checked is not None:
        draw_checkbox(cursor, cursor.left + CHECKBOX_X_OFFSET, row_y, row.checked)

    for column, value in zip(columns, row.cells, strict=True):
        lh = line_height(column.size)
        x = cursor.left + column.x
        if column.align == "right":
            x += column.width
        for i, line in enumerate(_cell_lines(column, value)):
            page.text(
                x,
                row_y + column.text_offset + i * lh,
                line,
                font=column.font,
                size=column.size,
                color=column.color,
                align=column.align,
            )

    cursor.y = row_y + row_h
    page.line(
        cursor.left,
        cursor.y,
        cursor.right,
        cursor.y,
        color=REPORT_COLORS["row_separator"],
        width=0.3,
    )
    return RowPlacement(page_index=page.index, top=row_y, height=row_h)


def draw_table(
    cursor: PageCursor,
    columns: Sequence[TableColumn],
    rows: Sequence[TableRow],
    *,
    title: str | None = None,
    repeat_header: bool = True,
) -> list[RowPlacement]:
    """Draw an optional section *title*, a header bar and *rows*.

    Returns one placement per row, in order.  The title and header bar are
    kept on the same page as the first row.  With *repeat_header* the bar
    is drawn again at the top of every continuation page.
    """
    heights = [measure_row(columns, row) for row in rows]
    first_h = heights[0] + 1 if heights else 0.0
    lead_h = HEADER_ADVANCE + first_h
    if title:
        draw_section_title(cursor, title, keep_with=lead_h)
    cursor.ensure_space(lead_h)
    draw_header_bar(cursor, columns)

    placements: list[RowPlacement] = []
    for index, (row, row_h) in enumerate(zip(rows, heights, strict=True)):
        if cursor.ensure_space(row_h + 1) and repeat_header:
            draw_header_bar(cursor, columns)
            if cursor.y + row_h + 1 > cursor.bottom:
                LOGGER.warning("Table row %d taller than a page; drawing unsplit", index)
        placements.append(_draw_row(cursor, columns, row, row_h, index))
    return placements


def draw_checklist(
    cursor: PageCursor,
    checks: Sequence[CheckEntry],
    *,
    title: str | None = None,
    repeat_header: bool = True,
) -> list[RowPlacement]:
    return draw_table(
        cursor,
        CHECKLIST_COLUMNS,
        checklist_rows(checks),
        title=title,
        repeat_header=repeat_header,
    )


def draw_tyre_table(
    cursor: PageCursor,
    tyres: Sequence[TyreEntry],
    *,
    title: str | None = None,
    repeat_header: bool = True,
) -> list[RowPlacement]:
    return draw_table(
        cursor,
        TYRE_COLUMNS,
        tyre_rows(tyres),
        title=title,
        repeat_header=repeat_header,
    )

