from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from app.api import router
from app.web import router as web_router
from datastore.mock_sheet import build_default_spreadsheet
from logging_config import configure_logging
from services.event_logger import build_default_service


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    build_default_service()
    try:
        yield
    finally:
        build_default_service.cache_clear()
        build_default_spreadsheet.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Fingerprint Event Logger",
        description="Logs fingerprint scanner readings and serves the latest one back to the device.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(router)
    app.include_router(web_router)
    return app

app = create_app()
