"""Handover lookup and PDF report download endpoints."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from ..api_models import HandoverDetailResponse, HandoverListResponse
from ..check_items import resolve_label
from ..reports import HandoverNotFoundError, ReportGenerationError, generate_report
from ._helpers import async_require_handover, safe_filename

if TYPE_CHECKING:
    from ..app import RuntimeState
    from ..domain_models import HandoverAggregate

LOGGER = logging.getLogger(__name__)


def _summary_row(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": row["id"],
        "registration": row["registration"],
        "vehicle": f"{row['make']} {row['model']}".strip(),
        "date": row["date"],
        "status": row["status"],
        "kind": row["kind"],
        "inspector_name": row["inspector_name"],
        "updated_at": row.get("updated_at"),
    }


def _detail_payload(aggregate: HandoverAggregate) -> dict[str, Any]:
    payload = aggregate.to_dict()
    for check in payload["checks"]:
        check["label"] = resolve_label(check["check_item_key"])
    return payload


def create_handover_routes(state: RuntimeState) -> APIRouter:
    router = APIRouter()
    max_cache_entries = state.config.report.pdf_cache_entries
    report_pdf_cache: OrderedDict[tuple[str, str | None], tuple[bytes, str]] = OrderedDict()
    report_pdf_locks: dict[tuple[str, str | None], asyncio.Lock] = {}

    def _cache_get(cache_key: tuple[str, str | None]) -> tuple[bytes, str] | None:
        cached = report_pdf_cache.get(cache_key)
        if cached is None:
            return None
        report_pdf_cache.move_to_end(cache_key)
        return cached

    def _cache_put(cache_key: tuple[str, str | None], entry: tuple[bytes, str]) -> None:
        report_pdf_cache[cache_key] = entry
        report_pdf_cache.move_to_end(cache_key)
        while len(report_pdf_cache) > max_cache_entries:
            evicted_key, _ = report_pdf_cache.popitem(last=False)
            report_pdf_locks.pop(evicted_key, None)
        _prune_stale_pdf_locks()

    def _prune_stale_pdf_locks() -> None:
        """Remove locks that have no cache entry and are not currently held."""
        if len(report_pdf_locks) > max_cache_entries * 2:
            stale_keys = [
                k
                for k, v in report_pdf_locks.items()
                if k not in report_pdf_cache and not v.locked()
            ]
            for k in stale_keys:
                report_pdf_locks.pop(k, None)

    def _pdf_response(content: bytes, filename: str) -> Response:
        return Response(
            content=content,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{safe_filename(filename)}"'},
        )

    # -- lookups ---------------------------------------------------------------

    @router.get("/api/handovers", response_model=HandoverListResponse)
    async def list_handovers() -> HandoverListResponse:
        rows = await asyncio.to_thread(state.handover_db.list_handovers)
        return {"handovers": [_summary_row(row) for row in rows]}

    @router.get("/api/handovers/{handover_id}", response_model=HandoverDetailResponse)
    async def get_handover(handover_id: str) -> HandoverDetailResponse:
        aggregate = await async_require_handover(state.handover_db, handover_id)
        return _detail_payload(aggregate)

    # -- report PDF ------------------------------------------------------------

    @router.get("/api/handovers/{handover_id}/report.pdf")
    async def download_handover_report_pdf(handover_id: str) -> Response:
        aggregate = await async_require_handover(state.handover_db, handover_id)
        cache_key = (handover_id, aggregate.handover.updated_at)
        cached = _cache_get(cache_key)
        if cached is not None:
            return _pdf_response(*cached)

        def _build_pdf() -> tuple[bytes, str]:
            result = generate_report(
                handover_id,
                store=state.handover_db,
                fetcher=state.image_fetcher,
                settings=state.config.report,
            )
            return result.content, result.filename

        build_lock = report_pdf_locks.setdefault(cache_key, asyncio.Lock())
        async with build_lock:
            cached = _cache_get(cache_key)
            if cached is not None:
                return _pdf_response(*cached)
            try:
                entry = await asyncio.to_thread(_build_pdf)
            except HandoverNotFoundError as exc:
                _prune_stale_pdf_locks()
                raise HTTPException(status_code=404, detail="Handover not found") from exc
            except ReportGenerationError as exc:
                LOGGER.warning("PDF generation failed for handover %s", handover_id, exc_info=True)
                _prune_stale_pdf_locks()
                raise HTTPException(status_code=500, detail="Failed to generate report") from exc
            _cache_put(cache_key, entry)
        return _pdf_response(*entry)

    return router
