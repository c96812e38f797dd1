"""
Rendering Module
===============

URL to PNG, JPEG or PDF rendering with browser automation.

Components:
- options: Render request validation and normalization
- launcher: Chromium launch configuration
- timings: Instrumentable render lifecycle phases
- diagnostics: Page event logging
- engine: Playwright browser session
- browser: Render orchestration
"""

from image_renderer.core.rendering.browser import Browser, RenderCall, RenderState
from image_renderer.core.rendering.errors import (
    BadRequestError,
    EngineError,
    OverridesParseError,
    RenderError,
    RenderTimeoutError,
)
from image_renderer.core.rendering.timings import (
    BrowserTimings,
    LoggingBrowserTiming,
    NoOpBrowserTiming,
)

__all__ = [
    "Browser",
    "RenderCall",
    "RenderState",
    "BadRequestError",
    "EngineError",
    "OverridesParseError",
    "RenderError",
    "RenderTimeoutError",
    "BrowserTimings",
    "LoggingBrowserTiming",
    "NoOpBrowserTiming",
]
