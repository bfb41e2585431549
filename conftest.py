from __future__ import annotations

# Lightweight pytest helpers for running asyncio tests without extra plugins,
# plus an in-memory rendering engine for exercising the pipeline.

import asyncio
import inspect
from typing import Callable, Optional

import pytest

from pdf2img.services.engines import RasterSurface, Viewport
from pdf2img.services.loader import EngineLoader


def _should_handle_asyncio(pyfuncitem: pytest.Function) -> bool:
    """Return ``True`` if the test should run inside an asyncio loop."""

    if not inspect.iscoroutinefunction(pyfuncitem.obj):
        return False
    return pyfuncitem.get_closest_marker("asyncio") is not None


@pytest.hookimpl(tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool:
    """Execute ``@pytest.mark.asyncio`` tests using a fresh event loop."""

    if not _should_handle_asyncio(pyfuncitem):
        return False

    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        testargs = {arg: pyfuncitem.funcargs[arg] for arg in pyfuncitem._fixtureinfo.argnames}
        loop.run_until_complete(pyfuncitem.obj(**testargs))
    finally:
        try:
            loop.run_until_complete(loop.shutdown_asyncgens())
        finally:
            asyncio.set_event_loop(None)
            loop.close()
    return True


def pytest_configure(config: pytest.Config) -> None:
    """Register the custom asyncio marker to silence warnings."""

    config.addinivalue_line("markers", "asyncio: mark test to run in an asyncio event loop")


class FakePage:
    def __init__(self, width: float, height: float, paint_error: Optional[Exception] = None):
        self.width = width
        self.height = height
        self.paint_error = paint_error
        self.painted: list[tuple[int, int, float, bool]] = []
        self.closed = False

    def natural_viewport(self, scale: float = 1.0) -> Viewport:
        return Viewport(width=self.width * scale, height=self.height * scale, scale=scale)

    async def paint(self, surface: RasterSurface, viewport: Viewport) -> None:
        await asyncio.sleep(0)
        if self.paint_error is not None:
            raise self.paint_error
        surface.context.rectangle((0, 0, surface.width // 2, surface.height // 2), fill="#ff0000")
        self.painted.append((surface.width, surface.height, viewport.scale, surface.smoothing))

    async def close(self) -> None:
        self.closed = True


class FakeDocument:
    def __init__(self, pages: list[FakePage]):
        self.pages = pages
        self.closed = False

    @property
    def page_count(self) -> int:
        return len(self.pages)

    async def get_page(self, index: int) -> FakePage:
        await asyncio.sleep(0)
        return self.pages[index]

    async def close(self) -> None:
        self.closed = True


class FakeEngine:
    """Opens anything starting with the PDF header; rejects everything else."""

    def __init__(self, pages: Optional[list[FakePage]] = None):
        self.pages = [FakePage(612, 792)] if pages is None else pages
        self.workers: list[str] = []
        self.documents: list[FakeDocument] = []
        self.closed = False

    def configure_worker(self, worker_src: str) -> None:
        self.workers.append(worker_src)

    async def open_document(self, data: bytes) -> FakeDocument:
        await asyncio.sleep(0)
        if not data.startswith(b"%PDF-"):
            raise ValueError("No /Root object")
        document = FakeDocument(self.pages)
        self.documents.append(document)
        return document

    def close(self) -> None:
        self.closed = True


class CountingFactory:
    """Engine factory that records how often it runs."""

    def __init__(self, engine: FakeEngine, errors: Optional[list[Exception]] = None):
        self.engine = engine
        self.errors = list(errors or [])
        self.calls = 0
        self.gate: Optional[asyncio.Event] = None

    async def __call__(self) -> FakeEngine:
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if self.errors:
            raise self.errors.pop(0)
        return self.engine


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def make_page() -> Callable[..., FakePage]:
    return FakePage


@pytest.fixture
def make_factory() -> Callable[..., CountingFactory]:
    return CountingFactory


@pytest.fixture
def factory(fake_engine: FakeEngine) -> CountingFactory:
    return CountingFactory(fake_engine)


@pytest.fixture
def loader(factory: CountingFactory) -> EngineLoader:
    return EngineLoader(factory, "test-worker")
