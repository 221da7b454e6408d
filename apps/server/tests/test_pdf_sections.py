from __future__ import annotations

from handover.report.page_cursor import CONTENT_BOTTOM, PageCursor
from handover.report.pdf_document import BufferedDocument
from handover.report.pdf_layout import line_height
from handover.report.pdf_sections import (
    COMMENTS_GAP_AFTER,
    COMMENTS_LINE_GAP,
    COMMENTS_PAD,
    COMMENTS_SIZE,
    SECTION_TITLE_SPACE,
    draw_comments_block,
    draw_section_title,
)

SEVEN_LINES = "\n".join(f"Line {i}" for i in range(7))
SEVEN_LINE_BOX_H = 7 * line_height(COMMENTS_SIZE, COMMENTS_LINE_GAP) + COMMENTS_PAD * 2


def test_section_title_space_matches_drawn_advance() -> None:
    cursor = PageCursor(BufferedDocument())
    start = cursor.y
    draw_section_title(cursor, "Vehicle Checks")
    assert cursor.y - start == SECTION_TITLE_SPACE


def test_section_title_moves_to_next_page_with_its_content() -> None:
    cursor = PageCursor(BufferedDocument())
    cursor.y = CONTENT_BOTTOM - SECTION_TITLE_SPACE - 5
    draw_section_title(cursor, "Tyre Information", keep_with=20)
    assert cursor.doc.pages[0].texts() == []
    assert cursor.page.texts() == ["Tyre Information"]


def test_comments_that_just_fit_stay_in_one_box() -> None:
    cursor = PageCursor(BufferedDocument())
    cursor.y = CONTENT_BOTTOM - (SECTION_TITLE_SPACE + SEVEN_LINE_BOX_H + COMMENTS_GAP_AFTER + 0.5)
    pages = draw_comments_block(cursor, SEVEN_LINES)
    assert pages == [0]
    assert cursor.doc.page_count == 1


def test_comments_a_little_short_of_room_move_whole_to_next_page() -> None:
    cursor = PageCursor(BufferedDocument())
    cursor.y = CONTENT_BOTTOM - (SECTION_TITLE_SPACE + SEVEN_LINE_BOX_H + COMMENTS_GAP_AFTER - 1)
    pages = draw_comments_block(cursor, SEVEN_LINES)
    assert pages == [1]
    assert cursor.doc.pages[0].texts() == []
    assert cursor.doc.pages[1].texts()[0] == "Other Comments"
    assert len(cursor.doc.pages[1].ops_of("rect")) == 1
