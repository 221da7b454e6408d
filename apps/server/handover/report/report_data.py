"""Data objects passed into and returned from the PDF renderers.

The renderers return placement records alongside the drawn pages so the
assembler (and its tests) can check ordering and page-break behaviour
without parsing the PDF.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..domain_models import PhotoEntry


@dataclass(frozen=True, slots=True)
class ReportBranding:
    company_name: str
    company_address: str = ""
    company_phone: str = ""

    @property
    def contact_lines(self) -> list[str]:
        return [line for line in (self.company_address, self.company_phone) if line]


@dataclass(frozen=True, slots=True)
class RowPlacement:
    page_index: int
    top: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass(frozen=True, slots=True)
class PhotoPlacement:
    page_index: int
    top: float
    column: int
    category: str
    caption: str
    loaded: bool


@dataclass(slots=True)
class PhotoGroup:
    """Photos sharing a heading, in first-seen order."""

    category: str
    label: str
    photos: list[PhotoEntry] = field(default_factory=list)


@dataclass(slots=True)
class PhotoLayout:
    groups: list[tuple[str, int]] = field(default_factory=list)
    placements: list[PhotoPlacement] = field(default_factory=list)
    signature: PhotoPlacement | None = None


@dataclass(slots=True)
class ReportLayout:
    """Where each variable-length block ended up after layout."""

    checklist_rows: list[RowPlacement] = field(default_factory=list)
    tyre_rows: list[RowPlacement] = field(default_factory=list)
    comment_box_pages: list[int] = field(default_factory=list)
    photos: PhotoLayout | None = None
    page_count: int = 0
