"""HTTP application wiring: config -> store -> routes.

Keep this module focused on orchestration.  Layout and drawing belong in
``report/*``; loading and naming reports belongs in ``reports.py``.
"""

from __future__ import annotations

import argparse
import logging
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

import uvicorn
from fastapi import FastAPI

from . import __version__
from .config import AppConfig, configure_logging, load_config
from .handover_db import HandoverDB
from .image_fetcher import ImageFetcher
from .reports import fetcher_from_settings
from .routes import create_router

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class RuntimeState:
    config: AppConfig
    handover_db: HandoverDB
    image_fetcher: ImageFetcher


def create_app(config_path: Path | None = None) -> FastAPI:
    config = load_config(config_path)
    handover_db = HandoverDB(config.storage.handover_db_path)
    runtime = RuntimeState(
        config=config,
        handover_db=handover_db,
        image_fetcher=fetcher_from_settings(config.report),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        LOGGER.info("Handover report service %s started", __version__)
        try:
            yield
        finally:
            try:
                runtime.handover_db.close()
            except Exception:
                LOGGER.warning("Error closing handover DB", exc_info=True)

    app = FastAPI(title="Handover Reports", version=__version__, lifespan=lifespan)
    app.state.runtime = runtime
    app.include_router(create_router(runtime))
    return app


app: FastAPI | None = (
    create_app()
    if __name__ != "__main__" and os.getenv("HANDOVER_DISABLE_AUTO_APP", "0") != "1"
    else None
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the handover report server")
    parser.add_argument("--config", type=Path, default=None, help="Path to config YAML")
    args = parser.parse_args()

    runtime_app = create_app(config_path=args.config)
    runtime: RuntimeState = runtime_app.state.runtime
    configure_logging(runtime.config.logging.level)
    uvicorn.run(
        runtime_app,
        host=runtime.config.server.host,
        port=runtime.config.server.port,
        log_level=runtime.config.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
