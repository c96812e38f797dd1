"""
Render Phase Instrumentation
============================

One wrapper per render lifecycle phase. A wrapper awaits the action it is
given and returns its result unchanged; failures propagate untouched.
Implementations may only observe, for example by recording durations.
"""

import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, TypeVar

from image_renderer.config.logging import get_logger

T = TypeVar("T")

Action = Callable[[], Awaitable[T]]

PHASES = ("launch", "new_page", "navigate", "panels_rendered", "screenshot", "pdf")

logger = get_logger(__name__)


class BrowserTimings(Protocol):
    """Phase wrappers used by the render orchestrator."""

    async def launch(self, callback: Action[T]) -> T: ...

    async def new_page(self, callback: Action[T]) -> T: ...

    async def navigate(self, callback: Action[T]) -> T: ...

    async def panels_rendered(self, callback: Action[T]) -> T: ...

    async def screenshot(self, callback: Action[T]) -> T: ...

    async def pdf(self, callback: Action[T]) -> T: ...


class NoOpBrowserTiming:
    """Pass-through phase wrappers."""

    async def launch(self, callback: Action[T]) -> T:
        return await callback()

    async def new_page(self, callback: Action[T]) -> T:
        return await callback()

    async def navigate(self, callback: Action[T]) -> T:
        return await callback()

    async def panels_rendered(self, callback: Action[T]) -> T:
        return await callback()

    async def screenshot(self, callback: Action[T]) -> T:
        return await callback()

    async def pdf(self, callback: Action[T]) -> T:
        return await callback()


class LoggingBrowserTiming:
    """Phase wrappers that record wall clock durations.

    Durations are kept per phase in ``durations`` and logged at debug. A
    recorder callback can forward them to a metrics backend.
    """

    def __init__(self, recorder: Optional[Callable[[str, float], Any]] = None):
        self.recorder = recorder
        self.durations: Dict[str, List[float]] = {phase: [] for phase in PHASES}
        self.logger: Any = logger.bind(component="browser_timings")

    async def _timed(self, phase: str, callback: Action[T]) -> T:
        start = time.perf_counter()
        try:
            return await callback()
        finally:
            elapsed = time.perf_counter() - start
            self.durations[phase].append(elapsed)
            self.logger.debug("Render phase finished", phase=phase, duration=round(elapsed, 4))
            if self.recorder:
                try:
                    self.recorder(phase, elapsed)
                except Exception as e:
                    self.logger.warning("Phase recorder failed", phase=phase, error=str(e))

    async def launch(self, callback: Action[T]) -> T:
        return await self._timed("launch", callback)

    async def new_page(self, callback: Action[T]) -> T:
        return await self._timed("new_page", callback)

    async def navigate(self, callback: Action[T]) -> T:
        return await self._timed("navigate", callback)

    async def panels_rendered(self, callback: Action[T]) -> T:
        return await self._timed("panels_rendered", callback)

    async def screenshot(self, callback: Action[T]) -> T:
        return await self._timed("screenshot", callback)

    async def pdf(self, callback: Action[T]) -> T:
        return await self._timed("pdf", callback)
