"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

try:  # pragma: no cover - optional dependency
    from prometheus_fastapi_instrumentator import Instrumentator
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    Instrumentator = None  # type: ignore

from pdf2img.config import get_settings
from pdf2img.logging import configure_logging
from pdf2img.routers import convert, health, images
from pdf2img.services.converter import PdfImageConverter, build_converter

logger = logging.getLogger(__name__)


def create_app(converter: Optional[PdfImageConverter] = None) -> FastAPI:
    configure_logging()
    settings = get_settings()
    converter = converter or build_converter(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        converter.loader.close()

    app = FastAPI(
        title="PDF to Image API",
        version="1.0.0",
        summary="Renders the first page of a PDF into a PNG preview",
        lifespan=lifespan,
    )
    app.state.converter = converter

    if settings.cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.cors_allow_origins],
            allow_methods=["*"],
            allow_headers=["*"],
            allow_credentials=True,
        )

    app.include_router(health.router)
    app.include_router(convert.router)
    app.include_router(images.router)

    if settings.metrics_enabled and Instrumentator is not None:
        Instrumentator().instrument(app).expose(app)
    elif settings.metrics_enabled:
        logger.warning("prometheus-fastapi-instrumentator is not installed; /metrics disabled")

    return app


app = create_app()


__all__ = ["app", "create_app"]
