"""User-facing PDF to image conversion."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional, Protocol, Union

from pdf2img.config import Settings
from pdf2img.services.errors import ConversionError, InvalidInput
from pdf2img.services.loader import EngineLoader
from pdf2img.services.rasterizer import DEFAULT_PIXEL_BUDGET, rasterize_first_page
from pdf2img.services.store import ImageStore
from pdf2img.utils.pdf import IMAGE_MIME_TYPE, derive_image_name, looks_like_pdf

logger = logging.getLogger(__name__)

NOT_A_PDF = "File is not a PDF"


class DocumentSource(Protocol):
    """Anything shaped like an uploaded file. ``UploadFile`` qualifies."""

    filename: Optional[str]
    content_type: Optional[str]

    async def read(self) -> bytes:
        ...


@dataclass
class InMemoryDocument:
    filename: Optional[str]
    content_type: Optional[str]
    data: bytes

    async def read(self) -> bytes:
        return self.data


@dataclass(frozen=True)
class ImageArtifact:
    name: str
    data: bytes
    mime_type: str = IMAGE_MIME_TYPE
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True)
class ConversionSuccess:
    image_locator: str
    artifact: ImageArtifact
    ok: Literal[True] = True


@dataclass(frozen=True)
class ConversionFailure:
    message: str
    error: ConversionError | None = None
    ok: Literal[False] = False


ConversionResult = Union[ConversionSuccess, ConversionFailure]


class PdfImageConverter:
    """Turn the first page of a PDF into a registered PNG artifact.

    :meth:`convert` never raises for conversion problems; every failure comes
    back as a :class:`ConversionFailure` carrying a readable message.
    """

    def __init__(
        self,
        loader: EngineLoader,
        store: ImageStore,
        *,
        pixel_budget: float = DEFAULT_PIXEL_BUDGET,
        density_hint: float = 1.0,
    ):
        self.loader = loader
        self.store = store
        self.pixel_budget = pixel_budget
        self.density_hint = density_hint

    async def convert(self, source: DocumentSource, density_hint: float | None = None) -> ConversionResult:
        if not looks_like_pdf(source.filename, source.content_type):
            logger.info("Rejected %r (%s): not a PDF", source.filename, source.content_type)
            return ConversionFailure(NOT_A_PDF, InvalidInput(NOT_A_PDF))

        try:
            data = await source.read()
            page = await rasterize_first_page(
                self.loader,
                data,
                pixel_budget=self.pixel_budget,
                density_hint=self.density_hint if density_hint is None else density_hint,
            )
        except Exception as exc:
            logger.exception("Failed to convert %r", source.filename)
            error = exc if isinstance(exc, ConversionError) else None
            return ConversionFailure(f"Failed to convert PDF: {str(exc) or type(exc).__name__}", error)

        artifact = ImageArtifact(
            name=derive_image_name(source.filename),
            data=page.data,
            width=page.width,
            height=page.height,
        )
        locator = self.store.register(artifact)
        logger.info(
            "Converted %r to %s (%dx%d, %d bytes)",
            source.filename,
            artifact.name,
            page.width,
            page.height,
            len(page.data),
        )
        return ConversionSuccess(image_locator=locator, artifact=artifact)


def build_converter(settings: Settings) -> PdfImageConverter:
    """Instantiate the converter described by the settings."""

    return PdfImageConverter(
        EngineLoader.from_settings(settings),
        ImageStore(settings.image_url_prefix),
        pixel_budget=settings.pixel_budget,
        density_hint=settings.density_hint,
    )


__all__ = [
    "ConversionFailure",
    "ConversionResult",
    "ConversionSuccess",
    "DocumentSource",
    "ImageArtifact",
    "InMemoryDocument",
    "NOT_A_PDF",
    "PdfImageConverter",
    "build_converter",
]
