"""Vertical write position over a :class:`BufferedDocument`."""

from __future__ import annotations

import logging

from .pdf_document import BufferedDocument, PageBuffer

LOGGER = logging.getLogger(__name__)

MARGIN_LEFT = 40.0
MARGIN_RIGHT = 555.0
MARGIN_TOP = 40.0
CONTENT_BOTTOM = 780.0
CONTENT_WIDTH = MARGIN_RIGHT - MARGIN_LEFT


class PageCursor:
    """Tracks the current page and a top-down ``y`` position on it.

    Horizontal bounds are fixed; only ``y`` moves.  Every variable-height
    block calls :meth:`ensure_space` before drawing so nothing is painted
    below :data:`CONTENT_BOTTOM`.
    """

    left = MARGIN_LEFT
    right = MARGIN_RIGHT
    top = MARGIN_TOP
    bottom = CONTENT_BOTTOM
    width = CONTENT_WIDTH

    def __init__(self, doc: BufferedDocument) -> None:
        self.doc = doc
        self.y = self.top

    @property
    def page(self) -> PageBuffer:
        return self.doc.current

    @property
    def page_index(self) -> int:
        return self.doc.current.index

    @property
    def remaining(self) -> float:
        return self.bottom - self.y

    @property
    def at_page_top(self) -> bool:
        return self.y <= self.top

    def new_page(self) -> PageBuffer:
        page = self.doc.add_page()
        self.y = self.top
        return page

    def advance(self, dy: float) -> None:
        self.y += dy

    def ensure_space(self, height_needed: float) -> bool:
        """Start a new page if *height_needed* does not fit below ``y``.

        Returns ``True`` when a page break happened.  A block taller than a
        whole content area cannot fit anywhere; it is drawn from the top of a
        fresh page and may run past the bottom margin.
        """
        if self.y + height_needed <= self.bottom:
            return False
        if height_needed > self.bottom - self.top:
            LOGGER.warning(
                "Block of %.1fpt exceeds the %.1fpt content area on page %d",
                height_needed,
                self.bottom - self.top,
                self.page_index + 1,
            )
            if self.at_page_top:
                return False
        self.new_page()
        return True
