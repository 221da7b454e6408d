"""SQLite-backed persistence for handover records.

Stores vehicles, handovers and their checklist, tyre and photo rows in a
single file.  The report renderer only needs :meth:`HandoverDB.get_handover_aggregate`;
the write helpers exist so the CLI, fixtures and tests can seed data.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import UTC, date, datetime
from pathlib import Path
from threading import RLock
from typing import Any

from .domain_models import (
    CheckEntry,
    HandoverAggregate,
    HandoverRecord,
    PhotoEntry,
    TyreEntry,
    VehicleRecord,
)

LOGGER = logging.getLogger(__name__)

# -- Schema -------------------------------------------------------------------

_SCHEMA_VERSION = 1

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS schema_meta (
    key   TEXT PRIMARY KEY,
    value TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS vehicles (
    id            TEXT PRIMARY KEY,
    make          TEXT NOT NULL,
    model         TEXT NOT NULL,
    registration  TEXT NOT NULL,
    created_at    TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS handovers (
    id              TEXT PRIMARY KEY,
    vehicle_id      TEXT NOT NULL REFERENCES vehicles(id),
    inspector_name  TEXT NOT NULL,
    date            TEXT NOT NULL,
    mileage         INTEGER,
    other_comments  TEXT,
    status          TEXT NOT NULL DEFAULT 'draft',
    kind            TEXT NOT NULL DEFAULT 'collection',
    created_at      TEXT NOT NULL,
    updated_at      TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS handover_checks (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    handover_id     TEXT NOT NULL REFERENCES handovers(id) ON DELETE CASCADE,
    check_item_key  TEXT NOT NULL,
    checked         INTEGER NOT NULL DEFAULT 0,
    comments        TEXT
);

CREATE TABLE IF NOT EXISTS tyre_records (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    handover_id  TEXT NOT NULL REFERENCES handovers(id) ON DELETE CASCADE,
    position     TEXT NOT NULL,
    size         TEXT,
    depth        TEXT,
    brand        TEXT,
    tyre_type    TEXT NOT NULL DEFAULT 'normal'
);

CREATE TABLE IF NOT EXISTS handover_photos (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    handover_id  TEXT NOT NULL REFERENCES handovers(id) ON DELETE CASCADE,
    remote_url   TEXT NOT NULL,
    caption      TEXT,
    category     TEXT NOT NULL DEFAULT 'other',
    created_at   TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_checks_handover ON handover_checks(handover_id, id);
CREATE INDEX IF NOT EXISTS idx_tyres_handover ON tyre_records(handover_id, id);
CREATE INDEX IF NOT EXISTS idx_photos_handover ON handover_photos(handover_id, id);
"""


class HandoverDB:
    """Thin wrapper around a SQLite database for handover records."""

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self._lock = RLock()
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        self._ensure_schema()

    # -- lifecycle ------------------------------------------------------------

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    @contextmanager
    def _cursor(self, *, commit: bool = True):
        with self._lock:
            cur = self._conn.cursor()
            try:
                yield cur
                if commit:
                    self._conn.commit()
            except Exception:
                self._conn.rollback()
                raise
            finally:
                cur.close()

    def _ensure_schema(self) -> None:
        with self._cursor() as cur:
            cur.executescript(_SCHEMA_SQL)
        with self._cursor() as cur:
            cur.execute("SELECT value FROM schema_meta WHERE key = ?", ("version",))
            row = cur.fetchone()
            if row is None:
                cur.execute(
                    "INSERT INTO schema_meta (key, value) VALUES (?, ?)",
                    ("version", str(_SCHEMA_VERSION)),
                )
                return
            version = int(str(row[0]))
            if version != _SCHEMA_VERSION:
                raise RuntimeError(
                    f"Unsupported handover DB schema version {version}; "
                    f"expected {_SCHEMA_VERSION}. Delete the database file to recreate."
                )

    # -- write ----------------------------------------------------------------

    def create_handover(
        self,
        *,
        make: str,
        model: str,
        registration: str,
        inspector_name: str,
        handover_date: date | str,
        mileage: int | None = None,
        other_comments: str | None = None,
        status: str = "draft",
        kind: str = "collection",
        checks: list[dict[str, Any]] | None = None,
        tyres: list[dict[str, Any]] | None = None,
        photos: list[dict[str, Any]] | None = None,
        handover_id: str | None = None,
    ) -> str:
        """Insert a vehicle, a handover and its child rows; return the handover id.

        Child rows keep the order they were given in, which is the order the
        report renders them in.
        """
        now = datetime.now(UTC).isoformat()
        vehicle_id = str(uuid.uuid4())
        hid = handover_id or str(uuid.uuid4())
        date_text = (
            handover_date.isoformat() if isinstance(handover_date, date) else str(handover_date)
        )
        with self._cursor() as cur:
            cur.execute(
                "INSERT INTO vehicles (id, make, model, registration, created_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (vehicle_id, make, model, registration.strip().upper(), now),
            )
            cur.execute(
                "INSERT INTO handovers (id, vehicle_id, inspector_name, date, mileage, "
                "other_comments, status, kind, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    hid,
                    vehicle_id,
                    inspector_name,
                    date_text,
                    mileage,
                    other_comments or None,
                    status,
                    kind,
                    now,
                    now,
                ),
            )
            cur.executemany(
                "INSERT INTO handover_checks (handover_id, check_item_key, checked, comments) "
                "VALUES (?, ?, ?, ?)",
                (
                    (hid, c["check_item_key"], int(bool(c.get("checked"))), c.get("comments"))
                    for c in checks or []
                ),
            )
            cur.executemany(
                "INSERT INTO tyre_records (handover_id, position, size, depth, brand, tyre_type) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    (
                        hid,
                        t["position"],
                        t.get("size"),
                        t.get("depth"),
                        t.get("brand"),
                        t.get("tyre_type") or "normal",
                    )
                    for t in tyres or []
                ),
            )
            cur.executemany(
                "INSERT INTO handover_photos (handover_id, remote_url, caption, category, "
                "created_at) VALUES (?, ?, ?, ?, ?)",
                (
                    (hid, p["remote_url"], p.get("caption"), p.get("category") or "other", now)
                    for p in photos or []
                ),
            )
        LOGGER.info("Created handover %s for %s", hid, registration)
        return hid

    def set_status(self, handover_id: str, status: str) -> bool:
        now = datetime.now(UTC).isoformat()
        with self._cursor() as cur:
            cur.execute(
                "UPDATE handovers SET status = ?, updated_at = ? WHERE id = ?",
                (status, now, handover_id),
            )
            return cur.rowcount > 0

    def delete_handover(self, handover_id: str) -> bool:
        with self._cursor() as cur:
            cur.execute("SELECT vehicle_id FROM handovers WHERE id = ?", (handover_id,))
            row = cur.fetchone()
            if row is None:
                return False
            cur.execute("DELETE FROM handovers WHERE id = ?", (handover_id,))
            cur.execute("DELETE FROM vehicles WHERE id = ?", (row["vehicle_id"],))
            return True

    # -- read -----------------------------------------------------------------

    def list_handovers(self) -> list[dict[str, Any]]:
        with self._cursor(commit=False) as cur:
            cur.execute(
                "SELECT h.id, h.date, h.status, h.kind, h.inspector_name, h.updated_at, "
                "v.make, v.model, v.registration "
                "FROM handovers h JOIN vehicles v ON v.id = h.vehicle_id "
                "ORDER BY h.date DESC, h.created_at DESC"
            )
            return [dict(row) for row in cur.fetchall()]

    def get_handover_aggregate(self, handover_id: str) -> HandoverAggregate | None:
        """Load a handover with its vehicle, checks, tyres and photos, or ``None``."""
        with self._cursor(commit=False) as cur:
            cur.execute("SELECT * FROM handovers WHERE id = ?", (handover_id,))
            handover_row = cur.fetchone()
            if handover_row is None:
                return None
            cur.execute("SELECT * FROM vehicles WHERE id = ?", (handover_row["vehicle_id"],))
            vehicle_row = cur.fetchone()
            if vehicle_row is None:
                raise RuntimeError(f"Handover {handover_id} references a missing vehicle")
            cur.execute(
                "SELECT check_item_key, checked, comments FROM handover_checks "
                "WHERE handover_id = ? ORDER BY id",
                (handover_id,),
            )
            check_rows = cur.fetchall()
            cur.execute(
                "SELECT position, size, depth, brand, tyre_type FROM tyre_records "
                "WHERE handover_id = ? ORDER BY id",
                (handover_id,),
            )
            tyre_rows = cur.fetchall()
            cur.execute(
                "SELECT category, remote_url, caption FROM handover_photos "
                "WHERE handover_id = ? ORDER BY id",
                (handover_id,),
            )
            photo_rows = cur.fetchall()

        return HandoverAggregate(
            handover=HandoverRecord.from_row(dict(handover_row)),
            vehicle=VehicleRecord.from_row(dict(vehicle_row)),
            checks=[CheckEntry.from_row(dict(r)) for r in check_rows],
            tyres=[TyreEntry.from_row(dict(r)) for r in tyre_rows],
            photos=[PhotoEntry.from_row(dict(r)) for r in photo_rows],
        )
