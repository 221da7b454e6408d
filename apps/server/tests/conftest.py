"""Shared test helpers for the handover test suite."""

from __future__ import annotations

import os
from collections.abc import Iterator
from io import BytesIO
from pathlib import Path

import pytest

# Importing handover.app must not build the module-level app during tests.
os.environ.setdefault("HANDOVER_DISABLE_AUTO_APP", "1")

from handover.handover_db import HandoverDB  # noqa: E402

# ---------------------------------------------------------------------------
# PDF text extraction helpers
# ---------------------------------------------------------------------------


def extract_pdf_text(pdf_bytes: bytes) -> str:
    """Extract all text from a PDF byte string using pypdf."""
    return "\n".join(pdf_page_texts(pdf_bytes))


def pdf_page_texts(pdf_bytes: bytes) -> list[str]:
    from pypdf import PdfReader

    reader = PdfReader(BytesIO(pdf_bytes))
    return [(page.extract_text() or "") for page in reader.pages]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def handover_db(tmp_path: Path) -> Iterator[HandoverDB]:
    db = HandoverDB(tmp_path / "handovers.db")
    try:
        yield db
    finally:
        db.close()
