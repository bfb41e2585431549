"""First-page rasterization pipeline."""
from __future__ import annotations

import asyncio
import io
import logging
import math
from dataclasses import dataclass

from pdf2img.services.engines import DocumentHandle, PageHandle, RasterSurface
from pdf2img.services.errors import (
    ConversionError,
    DocumentParseError,
    EncodeFailure,
    PageNotFound,
    RenderFailure,
)
from pdf2img.services.loader import EngineLoader
from pdf2img.utils.pdf import plan_scale

logger = logging.getLogger(__name__)

DEFAULT_PIXEL_BUDGET = 2_500_000
FIRST_PAGE = 0


@dataclass(frozen=True)
class RasterizedPage:
    data: bytes
    width: int
    height: int
    scale: float


def _encode_png(surface: RasterSurface) -> bytes:
    buffer = io.BytesIO()
    surface.image.save(buffer, format="PNG")
    return buffer.getvalue()


async def _open(loader: EngineLoader, data: bytes) -> DocumentHandle:
    engine = await loader.acquire()
    try:
        return await engine.open_document(data)
    except ConversionError:
        raise
    except Exception as exc:
        raise DocumentParseError(f"Invalid or corrupted PDF: {exc}") from exc


async def _first_page(document: DocumentHandle) -> PageHandle:
    if document.page_count < 1:
        raise PageNotFound("PDF has no pages")
    try:
        return await document.get_page(FIRST_PAGE)
    except ConversionError:
        raise
    except Exception as exc:
        raise PageNotFound(f"Cannot load page {FIRST_PAGE + 1}: {exc}") from exc


async def _render(page: PageHandle, pixel_budget: float, density_hint: float) -> RasterizedPage:
    base = page.natural_viewport(scale=1.0)
    scale = plan_scale(base.width, base.height, pixel_budget, density_hint)
    viewport = page.natural_viewport(scale=scale)

    surface = RasterSurface.allocate(math.ceil(viewport.width), math.ceil(viewport.height))
    surface.fill()
    surface.enable_smoothing("high")

    try:
        await page.paint(surface, viewport)
    except ConversionError:
        raise
    except Exception as exc:
        raise RenderFailure(f"Failed to render page: {exc}") from exc

    loop = asyncio.get_running_loop()
    try:
        png = await loop.run_in_executor(None, _encode_png, surface)
    except Exception as exc:
        raise EncodeFailure(f"Failed to encode page image: {exc}") from exc
    if not png:
        raise EncodeFailure("Failed to create image from rendered page")

    logger.debug(
        "Rendered %.1fx%.1f page at scale %.3f into %dx%d pixels",
        base.width,
        base.height,
        scale,
        surface.width,
        surface.height,
    )
    return RasterizedPage(data=png, width=surface.width, height=surface.height, scale=scale)


async def rasterize_first_page(
    loader: EngineLoader,
    data: bytes,
    pixel_budget: float = DEFAULT_PIXEL_BUDGET,
    density_hint: float = 1.0,
) -> RasterizedPage:
    """Render page one of ``data`` into PNG bytes.

    Every stage raises its own :class:`ConversionError` subclass and stops the
    pipeline. Page and document handles are released on all paths.
    """

    document = await _open(loader, data)
    try:
        page = await _first_page(document)
        try:
            return await _render(page, pixel_budget, density_hint)
        finally:
            await _release(page)
    finally:
        await _release(document)


async def _release(handle: PageHandle | DocumentHandle) -> None:
    # Best effort: a failed release must not mask the conversion outcome.
    try:
        await handle.close()
    except Exception as exc:
        logger.warning("Failed to release %s: %s", type(handle).__name__, exc)


__all__ = ["DEFAULT_PIXEL_BUDGET", "RasterizedPage", "rasterize_first_page"]
