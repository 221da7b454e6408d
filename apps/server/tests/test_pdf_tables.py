from __future__ import annotations

from collections import Counter

from builders import make_checks, make_tyres

from handover.domain_models import CheckEntry, TyreEntry
from handover.report.page_cursor import CONTENT_BOTTOM, MARGIN_TOP, PageCursor
from handover.report.pdf_document import BufferedDocument
from handover.report.pdf_sections import SECTION_TITLE_SPACE
from handover.report.pdf_tables import (
    CHECKLIST_COLUMNS,
    MIN_ROW_H,
    ROW_PADDING,
    checklist_rows,
    draw_checklist,
    draw_tyre_table,
    measure_row,
    tyre_rows,
)


def _all_texts(doc: BufferedDocument) -> list[str]:
    return [text for page in doc.pages for text in page.texts()]


def test_two_hundred_checks_are_each_drawn_once_without_crossing_the_bottom() -> None:
    checks = make_checks(200, max_comment=500)
    cursor = PageCursor(BufferedDocument())
    placements = draw_checklist(cursor, checks)

    assert len(placements) == 200
    assert cursor.doc.page_count > 1
    for placement in placements:
        assert placement.top >= MARGIN_TOP
        assert placement.bottom <= CONTENT_BOTTOM

    # Order preserved: page index never decreases, tops increase within a page.
    for prev, cur in zip(placements, placements[1:]):
        assert (cur.page_index, cur.top) > (prev.page_index, prev.top)

    counts = Counter(_all_texts(cursor.doc))
    for check in checks:
        assert counts[check.check_item_key] == 1


def test_row_height_grows_with_wrapped_comment() -> None:
    short_row, long_row = checklist_rows(
        [
            CheckEntry("horn", True, None),
            CheckEntry("horn", True, "word " * 120),
        ]
    )
    assert measure_row(CHECKLIST_COLUMNS, short_row) == MIN_ROW_H + ROW_PADDING
    assert measure_row(CHECKLIST_COLUMNS, long_row) > MIN_ROW_H + ROW_PADDING


def test_header_bar_repeats_on_continuation_pages() -> None:
    cursor = PageCursor(BufferedDocument())
    placements = draw_checklist(cursor, make_checks(150, max_comment=200))
    pages_used = {p.page_index for p in placements}
    assert len(pages_used) > 1
    for page in cursor.doc.pages:
        if page.index in pages_used:
            assert page.texts().count("CHECK ITEM") == 1


def test_header_bar_can_be_drawn_once_only() -> None:
    cursor = PageCursor(BufferedDocument())
    draw_checklist(cursor, make_checks(150, max_comment=200), repeat_header=False)
    assert _all_texts(cursor.doc).count("CHECK ITEM") == 1


def test_header_bar_is_kept_with_first_row() -> None:
    cursor = PageCursor(BufferedDocument())
    cursor.y = CONTENT_BOTTOM - 20
    placements = draw_checklist(cursor, [CheckEntry("horn", True, None)])
    assert cursor.doc.pages[0].texts() == []
    assert "CHECK ITEM" in cursor.doc.pages[1].texts()
    assert placements[0].page_index == 1


def test_zebra_fill_on_even_rows_only() -> None:
    cursor = PageCursor(BufferedDocument())
    draw_checklist(
        cursor, [CheckEntry("horn", True), CheckEntry("horn", False), CheckEntry("horn", True)]
    )
    zebra = [
        op
        for op in cursor.page.ops_of("rect")
        if op.params["fill"] == "#f5f5f5" and op.params["w"] == cursor.width
    ]
    assert len(zebra) == 2


def test_checkbox_glyphs_follow_checked_flag() -> None:
    cursor = PageCursor(BufferedDocument())
    draw_checklist(cursor, [CheckEntry("horn", True), CheckEntry("spare_keys", False)])
    fills = [op.params["fill"] for op in cursor.page.ops_of("rect") if op.params["w"] == 8]
    assert fills == ["#16a34a", "#fef2f2"]
    assert len(cursor.page.ops_of("polyline")) == 1


def test_unknown_check_key_renders_raw_key_and_known_key_renders_label() -> None:
    cursor = PageCursor(BufferedDocument())
    draw_checklist(cursor, [CheckEntry("horn", True), CheckEntry("roof_box_fitted", True)])
    texts = cursor.page.texts()
    assert "Horn working" in texts
    assert "roof_box_fitted" in texts


def test_tyre_rows_fill_missing_values_and_type_labels() -> None:
    rows = tyre_rows(make_tyres())
    assert rows[0].cells == ("NSF", "245/45 R19", "6mm", "Michelin", "Normal")
    assert rows[2].cells == ("OSR", "275/40 R19", "-", "-", "Run Flat")
    assert TyreEntry("NSF").tyre_type_label == "Normal"


def test_zero_tyres_draws_header_bar_and_no_rows() -> None:
    cursor = PageCursor(BufferedDocument())
    placements = draw_tyre_table(cursor, [])
    assert placements == []
    assert cursor.page.texts() == ["POSITION", "SIZE", "DEPTH", "BRAND", "TYPE"]


def test_table_title_is_kept_with_header_bar_and_first_row() -> None:
    cursor = PageCursor(BufferedDocument())
    cursor.y = CONTENT_BOTTOM - (SECTION_TITLE_SPACE + 10)
    placements = draw_checklist(cursor, make_checks(3, max_comment=0), title="Vehicle Checks")
    assert cursor.doc.pages[0].texts() == []
    texts = cursor.doc.pages[1].texts()
    assert texts[:2] == ["Vehicle Checks", "CHECK ITEM"]
    assert placements[0].page_index == 1


def test_titled_empty_table_draws_title_and_header_bar() -> None:
    cursor = PageCursor(BufferedDocument())
    assert draw_tyre_table(cursor, [], title="Tyre Information") == []
    assert cursor.page.texts() == ["Tyre Information", "POSITION", "SIZE", "DEPTH", "BRAND", "TYPE"]
