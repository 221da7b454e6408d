"""PDF report builder – buffered multi-page handover report.

Layout, in order:
  branded header, title line with status pill, vehicle details box,
  "Vehicle Checks" table, "Tyre Information" table, optional
  "Other Comments" block, then (when there are photos) a new page with
  the compact header, the photo grid and the signature block.

Pages are recorded in a :class:`BufferedDocument` and only serialised
once the footer pass has stamped "Page i of N" on every page.
"""

from __future__ import annotations

import logging
from datetime import date

from ..domain_models import HandoverAggregate
from ..report_theme import FONT, REPORT_COLORS
from .page_cursor import CONTENT_BOTTOM, PageCursor
from .pdf_document import BufferedDocument
from .pdf_layout import truncate_to_width
from .pdf_photos import ImageLoader, draw_photo_section
from .pdf_sections import (
    draw_comments_block,
    draw_photo_page_header,
    draw_report_header,
    draw_title_line,
    draw_vehicle_details,
    format_date,
    report_title,
)
from .pdf_tables import draw_checklist, draw_tyre_table
from .report_data import ReportBranding, ReportLayout

LOGGER = logging.getLogger(__name__)

FOOTER_RULE_Y = CONTENT_BOTTOM + 4
FOOTER_TEXT_Y = CONTENT_BOTTOM + 10
FOOTER_SIZE = 7


def draw_footers(doc: BufferedDocument, vehicle_label: str, generated_on: date) -> None:
    """Stamp the rule and three-part footer line on every page of *doc*."""
    cursor = PageCursor(doc)
    third = cursor.width / 3
    generated = f"Generated {format_date(generated_on)}"
    label = truncate_to_width(vehicle_label, third, FOOTER_SIZE)
    total = doc.page_count
    for page in doc.pages:
        page.line(
            cursor.left,
            FOOTER_RULE_Y,
            cursor.right,
            FOOTER_RULE_Y,
            color=REPORT_COLORS["border"],
            width=0.5,
        )
        style = {"font": FONT, "size": FOOTER_SIZE, "color": REPORT_COLORS["text_faint"]}
        page.text(cursor.left, FOOTER_TEXT_Y, f"Page {page.index + 1} of {total}", **style)
        page.text(cursor.left + third * 1.5, FOOTER_TEXT_Y, label, align="center", **style)
        page.text(cursor.right, FOOTER_TEXT_Y, generated, align="right", **style)


def assemble_report(
    aggregate: HandoverAggregate,
    loader: ImageLoader,
    *,
    branding: ReportBranding,
    generated_on: date,
    repeat_table_header: bool = True,
) -> tuple[BufferedDocument, ReportLayout]:
    """Lay out the whole report; returns the buffered pages and their placements."""
    doc = BufferedDocument(
        title=f"{report_title(aggregate.handover)} {aggregate.vehicle.registration}".strip(),
        author=branding.company_name,
    )
    cursor = PageCursor(doc)
    layout = ReportLayout()

    draw_report_header(cursor, branding)
    draw_title_line(cursor, aggregate.handover)
    draw_vehicle_details(cursor, aggregate)

    layout.checklist_rows = draw_checklist(
        cursor,
        aggregate.checks,
        title="Vehicle Checks",
        repeat_header=repeat_table_header,
    )
    layout.tyre_rows = draw_tyre_table(
        cursor,
        aggregate.tyres,
        title="Tyre Information",
        repeat_header=repeat_table_header,
    )

    layout.comment_box_pages = draw_comments_block(cursor, aggregate.handover.other_comments)

    if aggregate.photos:
        cursor.new_page()
        draw_photo_page_header(cursor, branding)
        layout.photos = draw_photo_section(cursor, aggregate.photos, loader)

    draw_footers(doc, aggregate.vehicle.label, generated_on)
    layout.page_count = doc.page_count
    LOGGER.debug(
        "Laid out handover %s: %d page(s), %d check row(s), %d tyre row(s)",
        aggregate.handover.id,
        doc.page_count,
        len(layout.checklist_rows),
        len(layout.tyre_rows),
    )
    return doc, layout


def build_handover_pdf(
    aggregate: HandoverAggregate,
    loader: ImageLoader,
    *,
    branding: ReportBranding,
    generated_on: date,
    repeat_table_header: bool = True,
) -> tuple[bytes, ReportLayout]:
    """Render *aggregate* to PDF bytes."""
    doc, layout = assemble_report(
        aggregate,
        loader,
        branding=branding,
        generated_on=generated_on,
        repeat_table_header=repeat_table_header,
    )
    return doc.render(), layout
