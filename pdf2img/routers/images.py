"""Access to converted images by locator."""
from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Response, status

from pdf2img.routers.convert import get_converter
from pdf2img.services.converter import PdfImageConverter

router = APIRouter(prefix="/images", tags=["images"])


@router.get("/{token}", summary="Download a converted image")
async def get_image(token: str, converter: PdfImageConverter = Depends(get_converter)) -> Response:
    store = converter.store
    try:
        artifact = store.resolve(store.locator_for(token))
    except KeyError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")

    return Response(
        content=artifact.data,
        media_type=artifact.mime_type,
        headers={"Content-Disposition": f"inline; filename*=UTF-8''{quote(artifact.name)}"},
    )


@router.delete(
    "/{token}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Revoke a converted image and free its memory",
)
async def revoke_image(token: str, converter: PdfImageConverter = Depends(get_converter)) -> Response:
    store = converter.store
    if not store.revoke(store.locator_for(token)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
