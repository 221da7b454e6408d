"""Domain model objects for the handover report service.

Typed dataclasses for the handover aggregate the report renderer consumes.
Rows read from storage go through the ``from_row`` helpers, which normalise
unknown enum strings to safe defaults instead of failing the report.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any

# ---------------------------------------------------------------------------
# Enumerated values (stored lowercase, as in the database)
# ---------------------------------------------------------------------------

STATUS_DRAFT = "draft"
STATUS_COMPLETED = "completed"
VALID_STATUSES: tuple[str, ...] = (STATUS_DRAFT, STATUS_COMPLETED)

KIND_COLLECTION = "collection"
KIND_DELIVERY = "delivery"
VALID_KINDS: tuple[str, ...] = (KIND_COLLECTION, KIND_DELIVERY)

TYRE_TYPE_NORMAL = "normal"
TYRE_TYPE_RUN_FLAT = "run_flat"
VALID_TYRE_TYPES: tuple[str, ...] = (TYRE_TYPE_NORMAL, TYRE_TYPE_RUN_FLAT)

PHOTO_CATEGORIES: tuple[str, ...] = (
    "exterior",
    "interior",
    "damage",
    "tyres",
    "other",
    "v5",
    "signature",
)
DEFAULT_PHOTO_CATEGORY = "other"

PHOTO_CATEGORY_LABELS: dict[str, str] = {
    "exterior": "Exterior",
    "interior": "Interior",
    "damage": "Damage",
    "tyres": "Tyres",
    "other": "Other",
    "v5": "V5 Document",
    "signature": "Signature",
}


def _choice(value: object, allowed: tuple[str, ...], default: str) -> str:
    token = str(value or "").strip().lower()
    return token if token in allowed else default


def _optional_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_mileage(value: object) -> int | None:
    if value in (None, ""):
        return None
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if math.isnan(out) or math.isinf(out) or out < 0:
        return None
    return int(round(out))


def _as_date(value: object) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if not text:
        raise ValueError("handover date is required")
    return datetime.fromisoformat(text.replace("Z", "+00:00")).date()


def photo_category_label(category: str) -> str:
    """Human label for a photo category (``"v5"`` -> ``"V5 Document"``)."""
    return PHOTO_CATEGORY_LABELS.get(category, category[:1].upper() + category[1:])


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class VehicleRecord:
    id: str
    make: str
    model: str
    registration: str

    @property
    def label(self) -> str:
        """``"<make> <model> - <registration>"`` as used in report footers."""
        return f"{self.make} {self.model} - {self.registration}"

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> VehicleRecord:
        return cls(
            id=str(row["id"]),
            make=str(row.get("make") or "").strip(),
            model=str(row.get("model") or "").strip(),
            registration=str(row.get("registration") or "").strip().upper(),
        )


@dataclass(slots=True)
class HandoverRecord:
    id: str
    vehicle_id: str
    inspector_name: str
    date: date
    mileage: int | None = None
    other_comments: str | None = None
    status: str = STATUS_DRAFT
    kind: str = KIND_COLLECTION
    updated_at: str | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == STATUS_COMPLETED

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> HandoverRecord:
        return cls(
            id=str(row["id"]),
            vehicle_id=str(row["vehicle_id"]),
            inspector_name=str(row.get("inspector_name") or "").strip(),
            date=_as_date(row.get("date")),
            mileage=_as_mileage(row.get("mileage")),
            other_comments=_optional_text(row.get("other_comments")),
            status=_choice(row.get("status"), VALID_STATUSES, STATUS_DRAFT),
            kind=_choice(row.get("kind"), VALID_KINDS, KIND_COLLECTION),
            updated_at=_optional_text(row.get("updated_at")),
        )


@dataclass(slots=True)
class CheckEntry:
    check_item_key: str
    checked: bool = False
    comments: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> CheckEntry:
        return cls(
            check_item_key=str(row.get("check_item_key") or "").strip(),
            checked=bool(row.get("checked")),
            comments=_optional_text(row.get("comments")),
        )


@dataclass(slots=True)
class TyreEntry:
    position: str
    size: str | None = None
    depth: str | None = None
    brand: str | None = None
    tyre_type: str = TYRE_TYPE_NORMAL

    @property
    def tyre_type_label(self) -> str:
        return "Run Flat" if self.tyre_type == TYRE_TYPE_RUN_FLAT else "Normal"

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> TyreEntry:
        position = str(row.get("position") or "").strip().upper()
        return cls(
            position=position,
            size=_optional_text(row.get("size")),
            depth=_optional_text(row.get("depth")),
            brand=_optional_text(row.get("brand")),
            tyre_type=_choice(row.get("tyre_type"), VALID_TYRE_TYPES, TYRE_TYPE_NORMAL),
        )


@dataclass(slots=True)
class PhotoEntry:
    category: str
    remote_url: str
    caption: str | None = None

    @property
    def category_label(self) -> str:
        return photo_category_label(self.category)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> PhotoEntry:
        return cls(
            category=_choice(row.get("category"), PHOTO_CATEGORIES, DEFAULT_PHOTO_CATEGORY),
            remote_url=str(row.get("remote_url") or "").strip(),
            caption=_optional_text(row.get("caption")),
        )


@dataclass(slots=True)
class HandoverAggregate:
    """One handover with its vehicle and child collections, in stored order."""

    handover: HandoverRecord
    vehicle: VehicleRecord
    checks: list[CheckEntry] = field(default_factory=list)
    tyres: list[TyreEntry] = field(default_factory=list)
    photos: list[PhotoEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["handover"]["date"] = self.handover.date.isoformat()
        return out
