"""HTTP utilities."""
from __future__ import annotations

from pathlib import PurePosixPath
from typing import Optional
from urllib.parse import unquote, urlparse

import httpx

from pdf2img.config import get_settings
from pdf2img.services.converter import InMemoryDocument


class DownloadTooLarge(ValueError):
    """Raised when a remote document exceeds the configured upload limit."""


def filename_from_url(url: str) -> str:
    """Return the last path segment of ``url``, or an empty string."""

    return PurePosixPath(unquote(urlparse(url).path)).name


async def fetch_document(
    url: str,
    timeout: Optional[int] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> InMemoryDocument:
    """Download a remote document along with its declared name and type."""

    settings = get_settings()
    client_timeout = timeout or settings.request_timeout

    async with httpx.AsyncClient(
        timeout=client_timeout, follow_redirects=True, transport=transport
    ) as client:
        response = await client.get(url)
        response.raise_for_status()

    if len(response.content) > settings.max_upload_bytes:
        raise DownloadTooLarge(f"Document exceeds {settings.max_upload_mb} MB")

    content_type = response.headers.get("content-type")
    return InMemoryDocument(
        filename=filename_from_url(str(response.url)) or None,
        content_type=content_type.split(";", 1)[0].strip() if content_type else None,
        data=response.content,
    )


__all__ = ["DownloadTooLarge", "fetch_document", "filename_from_url"]
