from __future__ import annotations

import httpx
import pytest

from pdf2img.config import get_settings
from pdf2img.utils.http import DownloadTooLarge, fetch_document, filename_from_url


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://example.com/files/Report.pdf", "Report.pdf"),
        ("https://example.com/files/My%20Scan.PDF?download=1", "My Scan.PDF"),
        ("https://example.com/", ""),
        ("https://example.com", ""),
    ],
)
def test_filename_from_url(url, expected):
    assert filename_from_url(url) == expected


PDF_BYTES = b"%PDF-1.4 remote"


@pytest.fixture
def upload_limit(monkeypatch):
    monkeypatch.setenv("MAX_UPLOAD_MB", "1")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _transport(handler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_fetch_document_follows_redirects_and_strips_type_parameters(upload_limit):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/latest":
            return httpx.Response(302, headers={"location": "https://files.test/reports/Q3%20Report.PDF"})
        return httpx.Response(
            200,
            content=PDF_BYTES,
            headers={"content-type": "application/pdf; charset=binary"},
        )

    document = await fetch_document("https://files.test/latest", transport=_transport(handler))

    assert document.filename == "Q3 Report.PDF"
    assert document.content_type == "application/pdf"
    assert await document.read() == PDF_BYTES


@pytest.mark.asyncio
async def test_fetch_document_without_name_or_type(upload_limit):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=PDF_BYTES)

    document = await fetch_document("https://files.test/", transport=_transport(handler))

    assert document.filename is None
    assert document.content_type is None


@pytest.mark.asyncio
async def test_fetch_document_rejects_oversized_body(upload_limit):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"0" * (2 * 1024 * 1024), headers={"content-type": "application/pdf"})

    with pytest.raises(DownloadTooLarge) as exc:
        await fetch_document("https://files.test/big.pdf", transport=_transport(handler))

    assert "1 MB" in str(exc.value)


@pytest.mark.asyncio
async def test_fetch_document_raises_for_http_errors(upload_limit):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    with pytest.raises(httpx.HTTPStatusError):
        await fetch_document("https://files.test/missing.pdf", transport=_transport(handler))
