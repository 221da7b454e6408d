"""Section chrome for the handover report.

Branded page headers, the title line with its status pill, the vehicle
details box, section titles and the free-text comments block.  Every
function draws at the cursor and leaves the cursor below what it drew.
"""

from __future__ import annotations

import logging
from datetime import date

from ..domain_models import (
    KIND_DELIVERY,
    HandoverAggregate,
    HandoverRecord,
)
from ..report_theme import FONT, FONT_BOLD, REPORT_COLORS
from .page_cursor import PageCursor
from .pdf_layout import line_height, text_width, truncate_to_width, wrap_lines
from .report_data import ReportBranding

LOGGER = logging.getLogger(__name__)

HEADER_H = 64.0
PHOTO_HEADER_H = 48.0
HEADER_GAP = 10.0

SECTION_TITLE_LEAD = 8.0
SECTION_TITLE_SIZE = 11
SECTION_RULE_OFFSET = 14.0
SECTION_RULE_PAD = 6.0
# Total vertical advance of draw_section_title.
SECTION_TITLE_SPACE = SECTION_TITLE_LEAD + SECTION_RULE_OFFSET + SECTION_RULE_PAD
SECTION_RULE_WIDTH = 0.8

DETAILS_BOX_H = 52.0
DETAILS_ROW_GAP = 24.0

COMMENTS_PAD = 10.0
COMMENTS_SIZE = 9
COMMENTS_LINE_GAP = 3.0
COMMENTS_GAP_AFTER = 4.0

NOT_AVAILABLE = "N/A"

# Absorbs float rounding when a box exactly fills the remaining space.
_FIT_SLACK = 1e-6

REPORT_TITLES = {
    KIND_DELIVERY: "Vehicle Delivery Report",
}
DEFAULT_REPORT_TITLE = "Vehicle Handover Report"


def format_date(value: date) -> str:
    """dd/mm/yyyy, as printed throughout the report."""
    return value.strftime("%d/%m/%Y")


def format_mileage(mileage: int | None) -> str:
    return f"{mileage:,}" if mileage is not None else NOT_AVAILABLE


def report_title(handover: HandoverRecord) -> str:
    return REPORT_TITLES.get(handover.kind, DEFAULT_REPORT_TITLE)


# ---------------------------------------------------------------------------
# Page headers
# ---------------------------------------------------------------------------


def draw_report_header(cursor: PageCursor, branding: ReportBranding) -> None:
    """Full-width dark bar with the company name and right-aligned contacts."""
    page = cursor.page
    page.rect(0, 0, cursor.doc.page_width, HEADER_H, fill=REPORT_COLORS["black"])
    page.text(
        cursor.left,
        20,
        truncate_to_width(branding.company_name, cursor.width * 0.55, 18, FONT_BOLD),
        font=FONT_BOLD,
        size=18,
        color=REPORT_COLORS["white"],
    )
    for i, line in enumerate(branding.contact_lines):
        page.text(
            cursor.right,
            22 + i * 12,
            truncate_to_width(line, cursor.width * 0.45, 7.5),
            size=7.5,
            color=REPORT_COLORS["header_muted"],
            align="right",
        )
    cursor.y = HEADER_H + HEADER_GAP


def draw_photo_page_header(cursor: PageCursor, branding: ReportBranding) -> None:
    """Compact header variant opening the photo pages."""
    page = cursor.page
    page.rect(0, 0, cursor.doc.page_width, PHOTO_HEADER_H, fill=REPORT_COLORS["black"])
    page.text(
        cursor.left,
        14,
        truncate_to_width(branding.company_name, cursor.width * 0.5, 15, FONT_BOLD),
        font=FONT_BOLD,
        size=15,
        color=REPORT_COLORS["white"],
    )
    contact = "  |  ".join(branding.contact_lines)
    if contact:
        page.text(
            cursor.right,
            20,
            truncate_to_width(contact, cursor.width * 0.5, 7),
            size=7,
            color=REPORT_COLORS["header_muted"],
            align="right",
        )
    cursor.y = PHOTO_HEADER_H + HEADER_GAP


# ---------------------------------------------------------------------------
# Title line and vehicle details
# ---------------------------------------------------------------------------


def draw_title_line(cursor: PageCursor, handover: HandoverRecord) -> None:
    """Report title on the left, status pill flush right."""
    page = cursor.page
    y = cursor.y
    page.text(
        cursor.left,
        y,
        report_title(handover),
        font=FONT_BOLD,
        size=15,
        color=REPORT_COLORS["black"],
    )

    if handover.is_completed:
        pill_bg, pill_fg = REPORT_COLORS["pill_completed_bg"], REPORT_COLORS["pill_completed_text"]
    else:
        pill_bg, pill_fg = REPORT_COLORS["pill_draft_bg"], REPORT_COLORS["pill_draft_text"]
    status_text = handover.status.upper()
    pill_w = text_width(status_text, 8, FONT_BOLD) + 14
    page.rect(cursor.right - pill_w, y - 2, pill_w, 18, fill=pill_bg, radius=3)
    page.text(
        cursor.right - pill_w + 7,
        y + 3,
        status_text,
        font=FONT_BOLD,
        size=8,
        color=pill_fg,
    )
    cursor.advance(22)


def vehicle_detail_fields(aggregate: HandoverAggregate) -> list[tuple[str, str]]:
    handover = aggregate.handover
    vehicle = aggregate.vehicle
    return [
        ("Date", format_date(handover.date)),
        ("Inspector", handover.inspector_name or NOT_AVAILABLE),
        ("Mileage", format_mileage(handover.mileage)),
        ("Vehicle", f"{vehicle.make} {vehicle.model}".strip() or NOT_AVAILABLE),
        ("Registration", vehicle.registration or NOT_AVAILABLE),
        ("Status", handover.status.capitalize() or NOT_AVAILABLE),
    ]


def draw_vehicle_details(cursor: PageCursor, aggregate: HandoverAggregate) -> None:
    """Rounded box with a 2 x 3 grid of label/value pairs."""
    cursor.ensure_space(DETAILS_BOX_H + 2)
    page = cursor.page
    box_y = cursor.y
    page.rect(
        cursor.left,
        box_y,
        cursor.width,
        DETAILS_BOX_H,
        fill=REPORT_COLORS["surface"],
        stroke=REPORT_COLORS["border"],
        radius=4,
    )
    col_w = cursor.width / 3
    row1_y = box_y + 6
    for i, (label, value) in enumerate(vehicle_detail_fields(aggregate)):
        row_y = row1_y + (i // 3) * DETAILS_ROW_GAP
        x = cursor.left + 10 + (i % 3) * col_w
        page.text(x, row_y, label.upper(), size=6.5, color=REPORT_COLORS["text_muted"])
        page.text(
            x,
            row_y + 9,
            truncate_to_width(value, col_w - 16, 9.5, FONT_BOLD),
            font=FONT_BOLD,
            size=9.5,
            color=REPORT_COLORS["ink"],
        )
    cursor.y = box_y + DETAILS_BOX_H + 2


# ---------------------------------------------------------------------------
# Section title and comments
# ---------------------------------------------------------------------------


def draw_section_title(cursor: PageCursor, title: str, keep_with: float = 0.0) -> None:
    """Bold title over a full-width rule.

    *keep_with* is the height of the block that must follow the title on
    the same page.
    """
    cursor.ensure_space(SECTION_TITLE_SPACE + keep_with)
    cursor.advance(SECTION_TITLE_LEAD)
    page = cursor.page
    page.text(
        cursor.left,
        cursor.y,
        title,
        font=FONT_BOLD,
        size=SECTION_TITLE_SIZE,
        color=REPORT_COLORS["black"],
    )
    rule_y = cursor.y + SECTION_RULE_OFFSET
    page.line(
        cursor.left,
        rule_y,
        cursor.right,
        rule_y,
        color=REPORT_COLORS["black"],
        width=SECTION_RULE_WIDTH,
    )
    cursor.y = rule_y + SECTION_RULE_PAD


def draw_comments_block(
    cursor: PageCursor,
    text: str | None,
    title: str = "Other Comments",
) -> list[int]:
    """Titled comments box; returns the page index of every box drawn.

    Nothing is drawn for empty or whitespace-only text.  Text that cannot
    fit on one page continues in further boxes on following pages, split
    between whole lines.
    """
    if not text or not text.strip():
        return []

    text_w = cursor.width - COMMENTS_PAD * 2
    lines = wrap_lines(text.strip(), text_w, COMMENTS_SIZE)
    lh = line_height(COMMENTS_SIZE, COMMENTS_LINE_GAP)
    full_h = len(lines) * lh + COMMENTS_PAD * 2
    content_h = cursor.bottom - cursor.top
    first_box_h = (
        full_h
        if SECTION_TITLE_SPACE + full_h + COMMENTS_GAP_AFTER <= content_h
        else COMMENTS_PAD * 2 + lh
    )
    cursor.ensure_space(min(SECTION_TITLE_SPACE + first_box_h + COMMENTS_GAP_AFTER, content_h))
    draw_section_title(cursor, title)

    pages: list[int] = []
    while lines:
        avail = cursor.remaining - COMMENTS_GAP_AFTER - COMMENTS_PAD * 2
        fit = int((avail + _FIT_SLACK) // lh)
        if fit < 1:
            cursor.new_page()
            continue
        chunk, lines = lines[:fit], lines[fit:]
        box_y = cursor.y
        box_h = len(chunk) * lh + COMMENTS_PAD * 2
        page = cursor.page
        page.rect(
            cursor.left,
            box_y,
            cursor.width,
            box_h,
            fill=REPORT_COLORS["surface"],
            stroke=REPORT_COLORS["border"],
            radius=3,
        )
        for i, line in enumerate(chunk):
            if line:
                page.text(
                    cursor.left + COMMENTS_PAD,
                    box_y + COMMENTS_PAD + i * lh,
                    line,
                    font=FONT,
                    size=COMMENTS_SIZE,
                    color=REPORT_COLORS["ink"],
                )
        pages.append(cursor.page_index)
        cursor.y = box_y + box_h + COMMENTS_GAP_AFTER
        if lines:
            LOGGER.debug("Comments continue on page %d", cursor.page_index + 2)
            cursor.new_page()
    return pages
