"""Conversion endpoints."""
from __future__ import annotations

from typing import Optional

import httpx
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status

from pdf2img.config import get_settings
from pdf2img.models.schemas import ConversionResponse, ConvertUrlInput
from pdf2img.services.converter import ConversionResult, PdfImageConverter
from pdf2img.services.errors import ConversionError, EngineUnavailable
from pdf2img.utils.http import DownloadTooLarge, fetch_document

router = APIRouter(prefix="/convert", tags=["convert"])


def get_converter(request: Request) -> PdfImageConverter:
    return request.app.state.converter


def _status_for(error: ConversionError | None) -> int:
    if isinstance(error, EngineUnavailable):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_422_UNPROCESSABLE_ENTITY


def _to_response(result: ConversionResult) -> ConversionResponse:
    if not result.ok:
        raise HTTPException(status_code=_status_for(result.error), detail=result.message)
    return ConversionResponse.from_result(result)


@router.post(
    "",
    response_model=ConversionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Convert the first page of an uploaded PDF to PNG",
)
async def convert_upload(
    file: UploadFile = File(...),
    device_pixel_ratio: Optional[float] = Form(default=None, gt=0),
    converter: PdfImageConverter = Depends(get_converter),
) -> ConversionResponse:
    settings = get_settings()
    if file.size is not None and file.size > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {settings.max_upload_mb} MB",
        )

    result = await converter.convert(file, density_hint=device_pixel_ratio)
    return _to_response(result)


@router.post(
    "/url",
    response_model=ConversionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Convert the first page of a remote PDF to PNG",
)
async def convert_url(
    payload: ConvertUrlInput,
    converter: PdfImageConverter = Depends(get_converter),
) -> ConversionResponse:
    try:
        document = await fetch_document(str(payload.pdf_url))
    except DownloadTooLarge as exc:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(exc)) from exc
    except httpx.HTTPError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    result = await converter.convert(document, density_hint=payload.device_pixel_ratio)
    return _to_response(result)


__all__ = ["get_converter", "router"]
