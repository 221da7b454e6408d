"""Report generation entry point: load a handover and render its PDF."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol

from .config import ReportConfig, report_config_from_mapping
from .domain_models import HandoverAggregate, VehicleRecord
from .image_fetcher import ImageFetcher
from .report.pdf_builder import build_handover_pdf
from .report.pdf_photos import ImageLoader
from .report.report_data import ReportBranding, ReportLayout

LOGGER = logging.getLogger(__name__)

_SAFE_FILENAME_RE = re.compile(r"[^a-zA-Z0-9._-]")


class HandoverNotFoundError(LookupError):
    """No handover exists with the requested id."""


class ReportGenerationError(RuntimeError):
    """Rendering the PDF failed; the cause is chained."""


class HandoverStore(Protocol):
    def get_handover_aggregate(self, handover_id: str) -> HandoverAggregate | None: ...


@dataclass(frozen=True, slots=True)
class ReportResult:
    content: bytes
    filename: str
    page_count: int
    layout: ReportLayout | None = field(default=None, repr=False, compare=False)


def safe_filename(name: str) -> str:
    """Sanitize *name* for use in Content-Disposition headers and file names."""
    return _SAFE_FILENAME_RE.sub("_", name)[:200] or "download"


def report_filename(vehicle: VehicleRecord, handover_id: str) -> str:
    """``<registration>-handover.pdf``, falling back to the handover id."""
    base = vehicle.registration.replace(" ", "") or handover_id
    return f"{safe_filename(base)}-handover.pdf"


def branding_from_settings(settings: ReportConfig) -> ReportBranding:
    return ReportBranding(
        company_name=settings.company_name,
        company_address=settings.company_address,
        company_phone=settings.company_phone,
    )


def fetcher_from_settings(settings: ReportConfig) -> ImageFetcher:
    return ImageFetcher(
        timeout_s=settings.image_fetch_timeout_s,
        max_bytes=settings.image_max_bytes,
        max_workers=settings.image_fetch_workers,
    )


def generate_report(
    handover_id: str,
    *,
    store: HandoverStore,
    fetcher: ImageLoader | None = None,
    settings: ReportConfig | None = None,
    generated_on: date | None = None,
) -> ReportResult:
    """Render the handover report for *handover_id*.

    Raises :class:`HandoverNotFoundError` for an unknown id and
    :class:`ReportGenerationError` when rendering fails.  Errors raised by
    *store* itself propagate unchanged.
    """
    aggregate = store.get_handover_aggregate(handover_id)
    if aggregate is None:
        raise HandoverNotFoundError(f"Handover not found: {handover_id}")

    settings = settings or report_config_from_mapping()
    loader = fetcher or fetcher_from_settings(settings)
    try:
        content, layout = build_handover_pdf(
            aggregate,
            loader,
            branding=branding_from_settings(settings),
            generated_on=generated_on or date.today(),
            repeat_table_header=settings.repeat_table_header,
        )
    except Exception as exc:
        LOGGER.error("PDF generation failed for handover %s.", handover_id, exc_info=True)
        raise ReportGenerationError(f"PDF generation failed for handover {handover_id}") from exc

    result = ReportResult(
        content=content,
        filename=report_filename(aggregate.vehicle, handover_id),
        page_count=layout.page_count,
        layout=layout,
    )
    LOGGER.info(
        "Generated report %s for handover %s (%d page(s), %d bytes)",
        result.filename,
        handover_id,
        result.page_count,
        len(result.content),
    )
    return result
