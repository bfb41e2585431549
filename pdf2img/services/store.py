"""In-memory registry of converted images addressed by revocable locators."""
from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pdf2img.services.converter import ImageArtifact

logger = logging.getLogger(__name__)


class ImageStore:
    """Map locators to artifacts until the caller revokes them."""

    def __init__(self, prefix: str = "/images/"):
        self.prefix = prefix
        self._artifacts: dict[str, ImageArtifact] = {}

    def register(self, artifact: ImageArtifact) -> str:
        locator = self._new_locator()
        while locator in self._artifacts:
            locator = self._new_locator()
        self._artifacts[locator] = artifact
        return locator

    def resolve(self, locator: str) -> ImageArtifact:
        """Return the artifact bound to ``locator``; raises ``KeyError`` once revoked."""

        return self._artifacts[locator]

    def revoke(self, locator: str) -> bool:
        artifact = self._artifacts.pop(locator, None)
        if artifact is None:
            return False
        logger.debug("Revoked %s (%d bytes)", locator, len(artifact.data))
        return True

    def locator_for(self, token: str) -> str:
        return f"{self.prefix}{token}"

    def _new_locator(self) -> str:
        return self.locator_for(uuid.uuid4().hex)

    def __contains__(self, locator: object) -> bool:
        return locator in self._artifacts

    def __len__(self) -> int:
        return len(self._artifacts)


__all__ = ["ImageStore"]
