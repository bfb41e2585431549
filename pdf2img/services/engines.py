"""Page rendering engine implementations."""
from __future__ import annotations

import asyncio
import importlib
import importlib.util
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Protocol, TypeVar

from PIL import Image, ImageDraw

from pdf2img.services.errors import EngineUnavailable, GeometryError

T = TypeVar("T")

BACKGROUND = "#ffffff"


@dataclass(frozen=True)
class Viewport:
    """Page geometry in PDF points multiplied by ``scale``."""

    width: float
    height: float
    scale: float = 1.0


@dataclass
class RasterSurface:
    """Off-screen RGB drawing target a page is painted onto."""

    image: Image.Image
    smoothing: bool = False
    smoothing_quality: str | None = None

    @classmethod
    def allocate(cls, width: int, height: int) -> "RasterSurface":
        if width <= 0 or height <= 0:
            raise GeometryError(f"Invalid surface size {width}x{height}")
        try:
            image = Image.new("RGB", (width, height))
        except (MemoryError, ValueError) as exc:
            raise GeometryError(f"Cannot allocate a {width}x{height} surface: {exc}") from exc
        return cls(image=image)

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def context(self) -> ImageDraw.ImageDraw:
        return ImageDraw.Draw(self.image)

    def fill(self, color: str = BACKGROUND) -> None:
        self.context.rectangle((0, 0, self.width - 1, self.height - 1), fill=color)

    def enable_smoothing(self, quality: str = "high") -> None:
        self.smoothing = True
        self.smoothing_quality = quality


class PageHandle(Protocol):
    def natural_viewport(self, scale: float = 1.0) -> Viewport:
        ...

    async def paint(self, surface: RasterSurface, viewport: Viewport) -> None:
        ...

    async def close(self) -> None:
        ...


class DocumentHandle(Protocol):
    @property
    def page_count(self) -> int:
        ...

    async def get_page(self, index: int) -> PageHandle:
        ...

    async def close(self) -> None:
        ...


class RenderEngine(Protocol):
    def configure_worker(self, worker_src: str) -> None:
        """Bind the engine to its background worker. Called once after loading."""

    async def open_document(self, data: bytes) -> DocumentHandle:
        ...

    def close(self) -> None:
        ...


EngineFactory = Callable[[], Awaitable[RenderEngine]]


class PdfiumEngine:
    """Engine backed by pypdfium2.

    pdfium is not thread-safe, so every call into it goes through one
    dedicated worker thread. The event loop only ever sees plain Python
    values and Pillow images.
    """

    def __init__(self, pdfium: Any):
        self._pdfium = pdfium
        self._executor: ThreadPoolExecutor | None = None
        self.worker_src: str | None = None

    def configure_worker(self, worker_src: str) -> None:
        self.worker_src = worker_src
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=worker_src)

    async def run(self, func: Callable[..., T], *args: Any) -> T:
        if self._executor is None:
            raise EngineUnavailable("pdfium worker has not been configured")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func, *args)

    async def open_document(self, data: bytes) -> "PdfiumDocument":
        pdf = await self.run(self._pdfium.PdfDocument, data)
        try:
            page_count = await self.run(len, pdf)
        except Exception:
            await self.run(pdf.close)
            raise
        return PdfiumDocument(self, pdf, page_count)

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None


class PdfiumDocument:
    def __init__(self, engine: PdfiumEngine, pdf: Any, page_count: int):
        self._engine = engine
        self._pdf = pdf
        self._page_count = page_count

    @property
    def page_count(self) -> int:
        return self._page_count

    async def get_page(self, index: int) -> "PdfiumPage":
        def _load() -> tuple[Any, tuple[float, float]]:
            page = self._pdf.get_page(index)
            return page, page.get_size()

        page, size = await self._engine.run(_load)
        return PdfiumPage(self._engine, page, size)

    async def close(self) -> None:
        await self._engine.run(self._pdf.close)


class PdfiumPage:
    def __init__(self, engine: PdfiumEngine, page: Any, size: tuple[float, float]):
        self._engine = engine
        self._page = page
        self._width, self._height = size

    def natural_viewport(self, scale: float = 1.0) -> Viewport:
        return Viewport(width=self._width * scale, height=self._height * scale, scale=scale)

    async def paint(self, surface: RasterSurface, viewport: Viewport) -> None:
        rough = not surface.smoothing

        def _render() -> Image.Image:
            # Transparent fill so the surface background shows through uncovered areas.
            bitmap = self._page.render(
                scale=viewport.scale,
                fill_color=(255, 255, 255, 0),
                draw_annots=True,
                no_smoothtext=rough,
                no_smoothimage=rough,
                no_smoothpath=rough,
            )
            try:
                return bitmap.to_pil().convert("RGBA")
            finally:
                bitmap.close()

        rendered = await self._engine.run(_render)
        surface.image.paste(rendered, (0, 0), rendered)

    async def close(self) -> None:
        await self._engine.run(self._page.close)


async def load_pdfium() -> PdfiumEngine:
    """Import pypdfium2 off the event loop and wrap it in an engine."""

    if importlib.util.find_spec("pypdfium2") is None:
        raise EngineUnavailable("pypdfium2 is not installed. Install it to enable PDF rendering.")
    loop = asyncio.get_running_loop()
    pdfium = await loop.run_in_executor(None, importlib.import_module, "pypdfium2")
    return PdfiumEngine(pdfium)


ENGINES: dict[str, EngineFactory] = {
    "pdfium": load_pdfium,
}


__all__ = [
    "BACKGROUND",
    "DocumentHandle",
    "ENGINES",
    "EngineFactory",
    "PageHandle",
    "PdfiumEngine",
    "RasterSurface",
    "RenderEngine",
    "Viewport",
    "load_pdfium",
]
