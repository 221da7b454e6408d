"""Tests for the handover lookup and report PDF endpoints."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest
from builders import SCENARIO_BROKEN_URL, FakeImageLoader, seed_scenario
from fastapi import HTTPException

from handover.app import RuntimeState
from handover.config import load_config
from handover.handover_db import HandoverDB
from handover.routes import create_router


class _ExplodingLoader:
    def __init__(self) -> None:
        self.calls = 0

    def load_many(self, urls):
        self.calls += 1
        raise RuntimeError("fetch pool unavailable")


def _route_endpoint(router, path: str):
    for route in router.routes:
        if getattr(route, "path", "") == path:
            return route.endpoint
    raise AssertionError(f"route {path} not registered")


def _state(handover_db: HandoverDB, tmp_path: Path, loader) -> RuntimeState:
    config = load_config(tmp_path / "config.yaml")
    return RuntimeState(config=config, handover_db=handover_db, image_fetcher=loader)


def _touch(db_path: Path, handover_id: str, updated_at: str) -> None:
    with sqlite3.connect(db_path) as conn:
        conn.execute("UPDATE handovers SET updated_at = ? WHERE id = ?", (updated_at, handover_id))


def test_routes_registered(handover_db: HandoverDB, tmp_path: Path) -> None:
    router = create_router(_state(handover_db, tmp_path, FakeImageLoader()))
    routes = {r.path: r.methods for r in router.routes if hasattr(r, "methods")}
    for path in (
        "/api/health",
        "/api/handovers",
        "/api/handovers/{handover_id}",
        "/api/handovers/{handover_id}/report.pdf",
    ):
        assert "GET" in routes[path]


@pytest.mark.asyncio
async def test_list_and_detail(handover_db: HandoverDB, tmp_path: Path) -> None:
    hid = seed_scenario(handover_db)
    router = create_router(_state(handover_db, tmp_path, FakeImageLoader()))

    listing = await _route_endpoint(router, "/api/handovers")()
    assert listing["handovers"][0]["id"] == hid
    assert listing["handovers"][0]["vehicle"] == "BMW X5"

    detail = await _route_endpoint(router, "/api/handovers/{handover_id}")(handover_id=hid)
    assert detail["vehicle"]["registration"] == "AB12CDE"
    assert detail["checks"][9]["label"] == "Horn working"
    assert detail["handover"]["date"] == "2026-03-14"


@pytest.mark.asyncio
async def test_detail_unknown_id_is_404(handover_db: HandoverDB, tmp_path: Path) -> None:
    router = create_router(_state(handover_db, tmp_path, FakeImageLoader()))
    with pytest.raises(HTTPException) as excinfo:
        await _route_endpoint(router, "/api/handovers/{handover_id}")(handover_id="nope")
    assert excinfo.value.status_code == 404


@pytest.mark.asyncio
async def test_report_pdf_download(handover_db: HandoverDB, tmp_path: Path) -> None:
    hid = seed_scenario(handover_db)
    loader = FakeImageLoader(failing={SCENARIO_BROKEN_URL})
    router = create_router(_state(handover_db, tmp_path, loader))
    endpoint = _route_endpoint(router, "/api/handovers/{handover_id}/report.pdf")

    response = await endpoint(handover_id=hid)

    assert response.status_code == 200
    assert response.media_type == "application/pdf"
    assert response.body.startswith(b"%PDF")
    assert (
        response.headers["content-disposition"] == 'attachment; filename="AB12CDE-handover.pdf"'
    )
    assert len(loader.requested) == 1


@pytest.mark.asyncio
async def test_report_pdf_cached_until_handover_changes(
    handover_db: HandoverDB, tmp_path: Path
) -> None:
    hid = seed_scenario(handover_db)
    loader = FakeImageLoader()
    router = create_router(_state(handover_db, tmp_path, loader))
    endpoint = _route_endpoint(router, "/api/handovers/{handover_id}/report.pdf")

    first = await endpoint(handover_id=hid)
    second = await endpoint(handover_id=hid)
    assert second.body == first.body
    assert len(loader.requested) == 1

    _touch(handover_db.db_path, hid, "2099-01-01T00:00:00+00:00")
    await endpoint(handover_id=hid)
    assert len(loader.requested) == 2


@pytest.mark.asyncio
async def test_report_pdf_unknown_id_is_404(handover_db: HandoverDB, tmp_path: Path) -> None:
    router = create_router(_state(handover_db, tmp_path, FakeImageLoader()))
    endpoint = _route_endpoint(router, "/api/handovers/{handover_id}/report.pdf")
    with pytest.raises(HTTPException) as excinfo:
        await endpoint(handover_id="nope")
    assert excinfo.value.status_code == 404


@pytest.mark.asyncio
async def test_report_pdf_failure_is_500_and_not_cached(
    handover_db: HandoverDB, tmp_path: Path
) -> None:
    hid = seed_scenario(handover_db)
    loader = _ExplodingLoader()
    router = create_router(_state(handover_db, tmp_path, loader))
    endpoint = _route_endpoint(router, "/api/handovers/{handover_id}/report.pdf")

    for _ in range(2):
        with pytest.raises(HTTPException) as excinfo:
            await endpoint(handover_id=hid)
        assert excinfo.value.status_code == 500
        assert excinfo.value.detail == "Failed to generate report"
    assert loader.calls == 2
