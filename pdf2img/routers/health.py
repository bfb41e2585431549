"""Health and readiness probes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from pdf2img.routers.convert import get_converter
from pdf2img.services.converter import PdfImageConverter
from pdf2img.services.errors import EngineUnavailable

router = APIRouter(tags=["probes"])


@router.get("/healthz", summary="Liveness probe")
async def health() -> Response:
    """Simple liveness endpoint."""

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/readyz", summary="Readiness probe")
async def ready(converter: PdfImageConverter = Depends(get_converter)) -> Response:
    """Ready once the rendering engine can be loaded."""

    try:
        await converter.loader.acquire()
    except EngineUnavailable:
        return Response(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
