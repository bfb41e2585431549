"""Pydantic models shared across the API."""
from __future__ import annotations

from typing import Optional

from pydantic import AnyHttpUrl, BaseModel, Field, field_validator

from pdf2img.services.converter import ConversionSuccess


class ConvertUrlInput(BaseModel):
    """Payload for the /convert/url endpoint."""

    pdf_url: AnyHttpUrl = Field(..., description="Remote PDF whose first page is converted.")
    device_pixel_ratio: Optional[float] = Field(
        default=None,
        gt=0,
        description="Pixel density of the display the image is meant for.",
    )

    @field_validator("pdf_url", mode="before")
    @classmethod
    def _reject_unexpanded_placeholders(cls, value: object) -> object:
        """Raise a helpful error when the payload contains a shell placeholder.

        Payloads wrapped in single quotes on the ``curl`` command line keep
        ``${variable}`` literally, which otherwise fails with an opaque URL
        validation error.
        """

        if isinstance(value, str) and "${" in value and "}" in value:
            raise ValueError(
                "pdf_url looks like an unexpanded shell variable. "
                "If you are using curl, wrap the JSON body in double quotes "
                "so that ${...} placeholders are replaced before sending the request."
            )
        return value


class ConversionResponse(BaseModel):
    image_url: str = Field(..., description="Locator of the PNG; valid until deleted.")
    file_name: str = Field(..., description="Name of the PNG derived from the PDF name.")
    mime_type: str = Field("image/png", description="Media type of the image.")
    size_bytes: int = Field(..., ge=0, description="Size of the encoded image.")
    width: Optional[int] = Field(default=None, description="Image width in pixels.")
    height: Optional[int] = Field(default=None, description="Image height in pixels.")

    @classmethod
    def from_result(cls, result: ConversionSuccess) -> "ConversionResponse":
        artifact = result.artifact
        return cls(
            image_url=result.image_locator,
            file_name=artifact.name,
            mime_type=artifact.mime_type,
            size_bytes=len(artifact.data),
            width=artifact.width,
            height=artifact.height,
        )


__all__ = ["ConversionResponse", "ConvertUrlInput"]
