"""Tests for the /api/health endpoint registration."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from handover import __version__
from handover.routes import create_router


def test_health_route_registered():
    router = create_router(MagicMock())
    routes = {r.path: r.methods for r in router.routes if hasattr(r, "methods")}
    assert "/api/health" in routes
    assert "GET" in routes["/api/health"]


@pytest.mark.asyncio
async def test_health_endpoint_response_shape():
    router = create_router(MagicMock())

    endpoint = None
    for route in router.routes:
        if getattr(route, "path", "") == "/api/health":
            endpoint = route.endpoint
            break
    assert endpoint is not None

    result = await endpoint()
    assert result == {"status": "ok", "version": __version__}
