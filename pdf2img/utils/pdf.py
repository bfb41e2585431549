"""PDF utilities for rasterisation."""
from __future__ import annotations

import math

PDF_EXTENSION = ".pdf"
IMAGE_EXTENSION = ".png"
IMAGE_MIME_TYPE = "image/png"

DEFAULT_MAX_PIXELS = 3_000_000
MIN_SCALE = 0.5
MAX_SCALE = 3.0
MAX_DENSITY = 2.0


def plan_scale(
    natural_width: float,
    natural_height: float,
    pixel_budget: float = DEFAULT_MAX_PIXELS,
    density_hint: float = 1.0,
) -> float:
    """Compute the render scale for a page of the given natural size.

    The rendered area grows with the square of the scale, so the scale that
    exactly meets ``pixel_budget`` is the square root of the area ratio. That
    value is clamped to ``[0.5, 3.0]`` before the density hint (itself capped
    at 2x) is applied. Only the upper bound is reasserted afterwards: a density
    hint below 1 may take the result under 0.5.
    """

    page_pixels = max(1.0, natural_width * natural_height)
    budget_scale = math.sqrt(pixel_budget / page_pixels)
    safe_scale = max(MIN_SCALE, min(MAX_SCALE, budget_scale))
    return min(MAX_SCALE, safe_scale * min(MAX_DENSITY, density_hint))


def looks_like_pdf(filename: str | None, content_type: str | None) -> bool:
    """Return ``True`` when the declared type or the file name points at a PDF."""

    if content_type and "pdf" in content_type:
        return True
    return bool(filename) and filename.lower().endswith(PDF_EXTENSION)


def derive_image_name(filename: str | None, default: str = "document") -> str:
    """Swap a trailing ``.pdf`` (any case) for the image extension.

    Only a missing name falls back to ``default``.
    """

    if not filename:
        return f"{default}{IMAGE_EXTENSION}"
    if filename.lower().endswith(PDF_EXTENSION):
        filename = filename[: -len(PDF_EXTENSION)]
    return f"{filename}{IMAGE_EXTENSION}"


__all__ = [
    "DEFAULT_MAX_PIXELS",
    "IMAGE_EXTENSION",
    "IMAGE_MIME_TYPE",
    "MAX_DENSITY",
    "MAX_SCALE",
    "MIN_SCALE",
    "PDF_EXTENSION",
    "derive_image_name",
    "looks_like_pdf",
    "plan_scale",
]
