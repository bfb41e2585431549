"""Lazy, single-flight access to the rendering engine."""
from __future__ import annotations

import asyncio
import logging

from pdf2img.config import Settings
from pdf2img.services.engines import ENGINES, EngineFactory, RenderEngine
from pdf2img.services.errors import EngineUnavailable

logger = logging.getLogger(__name__)


class EngineLoader:
    """Hand out one shared engine, loading it on first demand.

    Concurrent callers arriving while the engine loads all await the same
    attempt and observe the same outcome. A failed attempt is not cached; the
    next call starts a new one.
    """

    def __init__(self, factory: EngineFactory, worker_src: str):
        self._factory = factory
        self._worker_src = worker_src
        self._engine: RenderEngine | None = None
        self._pending: asyncio.Task[RenderEngine] | None = None
        self._generation = 0

    @classmethod
    def from_settings(cls, settings: Settings) -> "EngineLoader":
        try:
            factory = ENGINES[settings.engine]
        except KeyError as exc:  # pragma: no cover - settings validation guards this
            raise EngineUnavailable(f"Unsupported engine '{settings.engine}'") from exc
        return cls(factory, settings.engine_worker_src)

    @property
    def loaded(self) -> bool:
        return self._engine is not None

    async def acquire(self) -> RenderEngine:
        if self._engine is not None:
            return self._engine
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._load(self._generation))
        return await asyncio.shield(self._pending)

    async def _load(self, generation: int) -> RenderEngine:
        this_attempt = asyncio.current_task()
        try:
            engine = await self._factory()
            engine.configure_worker(self._worker_src)
        except EngineUnavailable as exc:
            logger.error("Failed to load rendering engine: %s", exc)
            raise
        except Exception as exc:
            logger.error("Failed to load rendering engine: %s", exc)
            raise EngineUnavailable(f"Rendering engine could not be loaded: {exc}") from exc
        else:
            if generation != self._generation:
                engine.close()
                raise EngineUnavailable("Rendering engine loader was closed while loading")
            self._engine = engine
            logger.info("Rendering engine loaded (worker=%s)", self._worker_src)
            return engine
        finally:
            if self._pending is this_attempt:
                self._pending = None

    def close(self) -> None:
        """Release the cached engine so a later ``acquire`` loads a new one.

        A load still in flight is discarded: its engine is closed as soon as
        it arrives and its callers see :class:`EngineUnavailable`.
        """

        self._generation += 1
        self._pending = None
        if self._engine is not None:
            self._engine.close()
            self._engine = None


__all__ = ["EngineLoader"]
