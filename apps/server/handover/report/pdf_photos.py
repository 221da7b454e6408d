"""Photo pages: category-grouped two-column grid plus the signature block.

Photos are grouped by category in first-seen order.  V5 document photos
are held back and drawn after the other groups under their own heading;
the first signature photo closes the section as a single smaller box.
Downloads happen before layout and are applied in input order, so the
drawn order never depends on which download finished first.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from ..domain_models import PhotoEntry, photo_category_label
from ..image_fetcher import FetchedImage
from ..report_theme import FONT, FONT_BOLD, REPORT_COLORS
from .page_cursor import PageCursor
from .pdf_layout import fit_rect_preserve_aspect, truncate_to_width
from .report_data import PhotoGroup, PhotoLayout, PhotoPlacement

LOGGER = logging.getLogger(__name__)

PHOTO_W = 245.0
PHOTO_H = 184.0
COL_GAP = 25.0
ROW_GAP = 8.0
CAPTION_SPACE = 14.0
SLOT_H = PHOTO_H + CAPTION_SPACE + ROW_GAP
COLUMNS = 2

SIGNATURE_W = 245.0
SIGNATURE_H = 110.0

SECTION_TITLE = "Photos"
CATEGORY_LABEL_SIZE = 10
CATEGORY_LABEL_ADVANCE = 14.0
GROUP_GAP = 4.0
PLACEHOLDER_TEXT = "[Photo could not be loaded]"
SIGNATURE_TITLE = "Customer Signature"

SIGNATURE_CATEGORY = "signature"
V5_CATEGORY = "v5"


class ImageLoader(Protocol):
    def load_many(self, urls: Sequence[str]) -> list[FetchedImage]: ...


def group_photos(photos: Sequence[PhotoEntry]) -> list[PhotoGroup]:
    """Group *photos* by category, keeping first-seen order of categories and photos."""
    groups: list[PhotoGroup] = []
    for photo in photos:
        for group in groups:
            if group.category == photo.category:
                group.photos.append(photo)
                break
        else:
            groups.append(
                PhotoGroup(
                    category=photo.category,
                    label=photo_category_label(photo.category),
                    photos=[photo],
                )
            )
    return groups


def plan_photo_section(
    photos: Sequence[PhotoEntry],
) -> tuple[list[PhotoGroup], PhotoEntry | None]:
    """Split photos into grid groups and the optional signature photo.

    Generic categories come first, the V5 group (if any) after them.
    Only the first signature photo is kept.
    """
    generic = [p for p in photos if p.category not in (SIGNATURE_CATEGORY, V5_CATEGORY)]
    v5 = [p for p in photos if p.category == V5_CATEGORY]
    signatures = [p for p in photos if p.category == SIGNATURE_CATEGORY]
    if len(signatures) > 1:
        LOGGER.info("Ignoring %d extra signature photo(s)", len(signatures) - 1)
    groups = group_photos(generic) + group_photos(v5)
    return groups, (signatures[0] if signatures else None)


def caption_text(photo: PhotoEntry) -> str:
    if photo.caption:
        return f"{photo.category_label} - {photo.caption}"
    return photo.category_label


def _draw_slot(
    cursor: PageCursor,
    photo: PhotoEntry,
    image: FetchedImage,
    x: float,
    top: float,
    w: float,
    h: float,
) -> str:
    page = cursor.page
    page.rect(
        x,
        top,
        w,
        h,
        fill=REPORT_COLORS["surface"],
        stroke=REPORT_COLORS["border"],
        radius=3,
    )
    if image.ok and image.data is not None:
        ix, iy, iw, ih = fit_rect_preserve_aspect(
            image.width, image.height, x + 2, top + 2, w - 4, h - 4
        )
        page.image(image.data, ix, iy, iw, ih)
    else:
        page.text(
            x + w / 2,
            top + h / 2 - 4,
            PLACEHOLDER_TEXT,
            font=FONT,
            size=8,
            color=REPORT_COLORS["placeholder_text"],
            align="center",
        )
    caption = caption_text(photo)
    page.text(
        x,
        top + h + 3,
        truncate_to_width(caption, w, 7),
        font=FONT,
        size=7,
        color=REPORT_COLORS["text_muted"],
    )
    return caption


def _draw_group_label(cursor: PageCursor, label: str) -> None:
    cursor.page.text(
        cursor.left,
        cursor.y,
        label,
        font=FONT_BOLD,
        size=CATEGORY_LABEL_SIZE,
        color=REPORT_COLORS["black"],
    )
    cursor.advance(CATEGORY_LABEL_ADVANCE)


def _draw_group(
    cursor: PageCursor,
    group: PhotoGroup,
    images: Sequence[FetchedImage],
) -> list[PhotoPlacement]:
    # Heading stays with the first row of the grid.
    cursor.ensure_space(CATEGORY_LABEL_ADVANCE + SLOT_H)
    _draw_group_label(cursor, group.label)

    placements: list[PhotoPlacement] = []
    col = 0
    row_top = cursor.y
    for photo, image in zip(group.photos, images, strict=True):
        if col == 0:
            cursor.ensure_space(SLOT_H)
            row_top = cursor.y
        x = cursor.left + col * (PHOTO_W + COL_GAP)
        caption = _draw_slot(cursor, photo, image, x, row_top, PHOTO_W, PHOTO_H)
        placements.append(
            PhotoPlacement(
                page_index=cursor.page_index,
                top=row_top,
                column=col,
                category=group.category,
                caption=caption,
                loaded=image.ok,
            )
        )
        col += 1
        if col >= COLUMNS:
            col = 0
            cursor.y = row_top + SLOT_H
    if col != 0:
        cursor.y = row_top + SLOT_H
    cursor.advance(GROUP_GAP)
    return placements


def _draw_signature(
    cursor: PageCursor,
    photo: PhotoEntry,
    image: FetchedImage,
) -> PhotoPlacement:
    cursor.ensure_space(CATEGORY_LABEL_ADVANCE + SIGNATURE_H + CAPTION_SPACE + ROW_GAP)
    _draw_group_label(cursor, SIGNATURE_TITLE)
    top = cursor.y
    caption = _draw_slot(cursor, photo, image, cursor.left, top, SIGNATURE_W, SIGNATURE_H)
    cursor.y = top + SIGNATURE_H + CAPTION_SPACE + ROW_GAP
    return PhotoPlacement(
        page_index=cursor.page_index,
        top=top,
        column=0,
        category=photo.category,
        caption=caption,
        loaded=image.ok,
    )


def draw_photo_section(
    cursor: PageCursor,
    photos: Sequence[PhotoEntry],
    loader: ImageLoader,
) -> PhotoLayout:
    """Draw the "Photos" title, every group and the signature block.

    The caller is responsible for starting the photo page and its header.
    """
    groups, signature = plan_photo_section(photos)
    ordered = [p for g in groups for p in g.photos]
    if signature is not None:
        ordered.append(signature)
    images = loader.load_many([p.remote_url for p in ordered])
    if len(images) != len(ordered):
        raise RuntimeError(
            f"Image loader returned {len(images)} results for {len(ordered)} photos"
        )
    failed = sum(1 for image in images if not image.ok)
    if failed:
        LOGGER.warning("%d of %d photo(s) could not be loaded", failed, len(images))

    cursor.page.text(
        cursor.left,
        cursor.y,
        SECTION_TITLE,
        font=FONT_BOLD,
        size=13,
        color=REPORT_COLORS["black"],
    )
    cursor.advance(20)

    layout = PhotoLayout()
    offset = 0
    for group in groups:
        group_images = images[offset : offset + len(group.photos)]
        offset += len(group.photos)
        layout.placements.extend(_draw_group(cursor, group, group_images))
        layout.groups.append((group.label, len(group.photos)))
    if signature is not None:
        layout.signature = _draw_signature(cursor, signature, images[offset])
    return layout
