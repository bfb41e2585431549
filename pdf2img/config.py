"""Application configuration settings for the PDF preview service."""
from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, PositiveFloat, PositiveInt, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Environment driven configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    engine: Literal["pdfium"] = Field(
        "pdfium",
        description="Page rendering engine implementation to use.",
    )
    engine_worker_src: str = Field(
        "pdfium-worker",
        description="Background worker the engine dispatches its calls to, configured once on load.",
    )
    pixel_budget: PositiveInt = Field(
        2_500_000,
        description="Maximum rendered area (width x height) for the first page before the density hint.",
    )
    density_hint: PositiveFloat = Field(
        1.0,
        description="Output pixel ratio used when the client does not report one.",
    )
    image_url_prefix: str = Field(
        "/images/",
        description="Prefix of the locators handed out for converted images.",
    )
    max_upload_mb: PositiveInt = Field(
        50,
        description="Maximum accepted size of an uploaded or downloaded PDF in megabytes.",
    )
    request_timeout: PositiveInt = Field(
        60,
        description="Timeout in seconds for outbound HTTP requests when downloading documents.",
    )
    metrics_enabled: bool = Field(
        True,
        description="Toggle Prometheus metrics endpoint instrumentation.",
    )
    cors_allow_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="List of origins allowed to perform cross-origin requests.",
    )

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | list[str] | None) -> list[str]:
        if not value:
            return []
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
