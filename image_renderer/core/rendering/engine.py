"""
Browser Engine Session
======================

One Playwright driver plus one launched Chromium, owned by a single render
call. Sessions are never pooled or reused.
"""

from typing import Any, Optional

from playwright.async_api import async_playwright, Browser, Page, Playwright

from image_renderer.config.logging import get_logger
from image_renderer.core.rendering.launcher import LaunchConfig

logger = get_logger(__name__)


class EngineSession:
    """Exclusively owned handle to a running browser."""

    def __init__(self, playwright: Playwright, browser: Browser):
        self._playwright = playwright
        self._browser = browser
        self._closed = False

    @property
    def version(self) -> str:
        return self._browser.version

    @property
    def closed(self) -> bool:
        return self._closed

    async def new_page(self, **kwargs: Any) -> Page:
        """Open a page in its own browser context."""
        return await self._browser.new_page(**kwargs)

    async def close(self) -> None:
        """Close the browser, then stop the driver. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()


async def launch_engine(config: LaunchConfig) -> EngineSession:
    """
    Start Playwright and launch Chromium with the given configuration.

    The driver is stopped again if the browser fails to launch.
    """
    playwright = await async_playwright().start()
    browser: Optional[Browser] = None
    try:
        browser = await playwright.chromium.launch(**config.launch_kwargs())
    finally:
        if browser is None:
            await playwright.stop()

    logger.debug("Browser launched", version=browser.version)
    return EngineSession(playwright, browser)
