"""Shared route helpers used across multiple route modules."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from fastapi import HTTPException

from ..reports import safe_filename

if TYPE_CHECKING:
    from ..domain_models import HandoverAggregate
    from ..handover_db import HandoverDB

__all__ = ["async_require_handover", "safe_filename"]


async def async_require_handover(handover_db: HandoverDB, handover_id: str) -> HandoverAggregate:
    """Load a handover aggregate in a thread or raise 404."""
    aggregate = await asyncio.to_thread(handover_db.get_handover_aggregate, handover_id)
    if aggregate is None:
        raise HTTPException(status_code=404, detail="Handover not found")
    return aggregate
