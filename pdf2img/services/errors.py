"""Failure taxonomy of the rasterization pipeline."""
from __future__ import annotations


class ConversionError(RuntimeError):
    """Base class for every failure raised while converting a PDF."""


class InvalidInput(ConversionError):
    """Raised when the input is not recognisable as a PDF."""


class EngineUnavailable(ConversionError):
    """Raised when the rendering engine cannot be loaded."""


class DocumentParseError(ConversionError):
    """Raised when the engine cannot parse the document bytes."""


class PageNotFound(ConversionError):
    """Raised when the requested page does not exist."""


class GeometryError(ConversionError):
    """Raised when the computed raster surface has no drawable area."""


class RenderFailure(ConversionError):
    """Raised when painting the page fails."""


class EncodeFailure(ConversionError):
    """Raised when the rendered surface cannot be encoded."""


__all__ = [
    "ConversionError",
    "InvalidInput",
    "EngineUnavailable",
    "DocumentParseError",
    "PageNotFound",
    "GeometryError",
    "RenderFailure",
    "EncodeFailure",
]
