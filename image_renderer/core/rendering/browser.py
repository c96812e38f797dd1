"""
Render Orchestration
====================

Drives one render call end to end: validate the request, launch a browser,
open a page, navigate, wait for panels to render, capture the output and
always tear the page and browser down again.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, List, Mapping, Optional, TypeVar, Union

from playwright.async_api import Page, TimeoutError as PlaywrightTimeoutError

from image_renderer.config.logging import get_logger
from image_renderer.config.settings import Settings, get_settings
from image_renderer.core.rendering.diagnostics import DiagnosticsSubscriber, Subscription
from image_renderer.core.rendering.engine import EngineSession, launch_engine
from image_renderer.core.rendering.errors import EngineError, RenderError, RenderTimeoutError
from image_renderer.core.rendering.files import unique_filename
from image_renderer.core.rendering.launcher import LaunchConfig, get_launcher_options
from image_renderer.core.rendering.options import validate_options
from image_renderer.core.rendering.timings import BrowserTimings, NoOpBrowserTiming
from image_renderer.models.schemas import RawRenderRequest, RenderRequest, RenderResult

logger = get_logger(__name__)

T = TypeVar("T")

EngineFactory = Callable[[LaunchConfig], Awaitable[EngineSession]]

RENDER_KEY_COOKIE = "renderKey"

# Resolves once the page reports at least as many rendered panels as it has.
PANELS_RENDERED_JS = """() => {
    const panelCount = document.querySelectorAll('.panel').length
        || document.querySelectorAll('.panel-container').length;
    return window.panelsRendered >= panelCount;
}"""


class RenderState(str, Enum):
    """Render call lifecycle states."""

    IDLE = "idle"
    VALIDATING = "validating"
    LAUNCHING = "launching"
    PAGE_OPEN = "page_open"
    NAVIGATING = "navigating"
    WAITING_FOR_RENDER = "waiting_for_render"
    CAPTURING = "capturing"
    CLOSING = "closing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RenderCall:
    """Resources and state owned by a single render call."""

    state: RenderState = RenderState.IDLE
    session: Optional[EngineSession] = None
    page: Optional[Page] = None
    diagnostics: Optional[DiagnosticsSubscriber] = None
    subscriptions: List[Subscription] = field(default_factory=list)
    history: List[RenderState] = field(default_factory=list)

    def transition(self, state: RenderState) -> None:
        self.state = state
        self.history.append(state)


class Browser:
    """Renders URLs to PNG, JPEG or PDF files with headless Chromium."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        log: Any = None,
        timings: Optional[BrowserTimings] = None,
        engine_factory: Optional[EngineFactory] = None,
    ):
        self.settings = settings or get_settings()
        self.log: Any = log or logger
        self.timings = timings or NoOpBrowserTiming()
        self.launch_engine = engine_factory or launch_engine

    async def get_browser_version(self) -> str:
        """Launch a browser with default options and report its version."""
        session = await self.launch_engine(get_launcher_options(self.settings))
        try:
            return session.version
        finally:
            await session.close()

    async def render(
        self,
        options: Union[RawRenderRequest, Mapping[str, Any]],
        call: Optional[RenderCall] = None,
    ) -> RenderResult:
        """
        Render a URL to a file.

        Args:
            options: Raw render request
            call: Optional call record, lets callers observe state and resources

        Returns:
            RenderResult with the path of the produced file

        Raises:
            BadRequestError: If the request is invalid; no browser is launched
            EngineError: If the browser fails during any phase
            RenderTimeoutError: If panels do not render within the request timeout
        """
        call = call or RenderCall()
        call.transition(RenderState.VALIDATING)
        try:
            request = validate_options(options)
        except RenderError:
            call.transition(RenderState.FAILED)
            raise

        log = self.log.bind(url=request.url, encoding=request.encoding)
        try:
            result = await self._render(call, request, log)
        except BaseException:
            await self._close(call, log)
            call.transition(RenderState.FAILED)
            raise

        await self._close(call, log)
        call.transition(RenderState.DONE)
        log.info("Render completed", file_path=result.file_path)
        return result

    async def _render(self, call: RenderCall, request: RenderRequest, log: Any) -> RenderResult:
        call.transition(RenderState.LAUNCHING)
        config = get_launcher_options(self.settings, request)
        call.session = await self._phase(
            "launch", request, self.timings.launch, lambda: self.launch_engine(config)
        )

        session = call.session
        call.page = await self._phase(
            "new_page",
            request,
            self.timings.new_page,
            lambda: session.new_page(**config.page_kwargs()),
        )
        call.transition(RenderState.PAGE_OPEN)

        # Page events are logged with the url and encoding of this call.
        call.diagnostics = DiagnosticsSubscriber(log, self.settings.verbose_logging)
        await self._step("new_page", request, lambda: self._attach_diagnostics(call))

        return await self.take_screenshot(call, request, log)

    async def take_screenshot(
        self, call: RenderCall, request: RenderRequest, log: Any
    ) -> RenderResult:
        """Navigate the open page, wait for panels and capture the output."""
        page = call.page
        overrides = request.json_data

        call.transition(RenderState.NAVIGATING)
        await self._step("setup", request, lambda: self._configure_page(page, request))

        url = request.url + (overrides.extra_url_params or "")
        log.debug("Goto", target=url)

        await self._phase(
            "navigate",
            request,
            self.timings.navigate,
            lambda: page.goto(url, wait_until="networkidle"),
        )

        await self._step("inject", request, lambda: self._inject_tags(page, request))

        call.transition(RenderState.WAITING_FOR_RENDER)
        try:
            await self.timings.panels_rendered(
                lambda: page.wait_for_function(PANELS_RENDERED_JS, timeout=request.timeout * 1000)
            )
        except PlaywrightTimeoutError as e:
            raise RenderTimeoutError(
                f"Panels did not render within {request.timeout}s",
                timeout=request.timeout,
                url=request.url,
                cause=e,
            ) from e
        except Exception as e:
            raise EngineError(
                f"Browser panels_rendered failed: {e}",
                phase="panels_rendered",
                url=request.url,
                cause=e,
            ) from e

        if overrides.wait_for is not None:
            await self._step("wait_for", request, lambda: self._wait_for(page, overrides.wait_for))

        call.transition(RenderState.CAPTURING)
        file_path = request.file_path or unique_filename(
            self.settings.temp_path, "." + request.encoding
        )

        if request.encoding == "pdf":
            pdf_options = overrides.pdf.to_kwargs() if overrides.pdf else {}
            await self._phase(
                "pdf",
                request,
                self.timings.pdf,
                lambda: page.pdf(path=file_path, **pdf_options),
            )
        else:
            await self._phase(
                "screenshot",
                request,
                self.timings.screenshot,
                lambda: page.screenshot(path=file_path, type=request.encoding),
            )

        return RenderResult(file_path=file_path)

    async def _attach_diagnostics(self, call: RenderCall) -> None:
        call.subscriptions = call.diagnostics.attach(call.page)

    async def _configure_page(self, page: Page, request: RenderRequest) -> None:
        overrides = request.json_data
        viewport = {"width": request.width, "height": request.height}
        if overrides.viewport:
            viewport.update(
                overrides.viewport.model_dump(include={"width", "height"}, exclude_none=True)
            )
        await page.set_viewport_size(viewport)

        if overrides.emulate_media:
            await page.emulate_media(media=overrides.emulate_media)

        if overrides.default_navigation_timeout:
            page.set_default_navigation_timeout(overrides.default_navigation_timeout)

        cookie = {"name": RENDER_KEY_COOKIE, "value": request.render_key}
        if request.domain:
            cookie.update({"domain": request.domain, "path": "/"})
        else:
            cookie["url"] = request.url
        await page.context.add_cookies([cookie])

    async def _inject_tags(self, page: Page, request: RenderRequest) -> None:
        for script_tag in request.json_data.script_tags:
            await page.add_script_tag(**script_tag.to_kwargs())

        for style_tag in request.json_data.style_tags:
            await page.add_style_tag(**style_tag.to_kwargs())

    async def _wait_for(self, page: Page, wait_for: Union[int, str]) -> None:
        if isinstance(wait_for, int):
            await page.wait_for_timeout(wait_for)
        else:
            await page.wait_for_selector(wait_for)

    async def _phase(
        self,
        phase: str,
        request: RenderRequest,
        wrapper: Callable[[Callable[[], Awaitable[T]]], Awaitable[T]],
        action: Callable[[], Awaitable[T]],
    ) -> T:
        """Run ``action`` through a timing wrapper, reporting browser failures as EngineError."""
        try:
            return await wrapper(action)
        except RenderError:
            raise
        except Exception as e:
            raise EngineError(
                f"Browser {phase} failed: {e}", phase=phase, url=request.url, cause=e
            ) from e

    async def _step(
        self, phase: str, request: RenderRequest, action: Callable[[], Awaitable[T]]
    ) -> T:
        return await self._phase(phase, request, _call, action)

    async def _close(self, call: RenderCall, log: Any) -> None:
        """Detach diagnostics, close the page, close the browser.

        Failures are logged and never replace the error that caused teardown.
        """
        call.transition(RenderState.CLOSING)

        if call.page is not None:
            if call.diagnostics is not None:
                try:
                    call.diagnostics.detach(call.page, call.subscriptions)
                except Exception as e:
                    log.error("Failed to detach page diagnostics", error=str(e))
            call.subscriptions = []

            try:
                await call.page.close()
            except Exception as e:
                log.error("Failed to close page", error=str(e))

        if call.session is not None:
            try:
                await call.session.close()
            except Exception as e:
                log.error("Failed to close browser", error=str(e))


async def _call(action: Callable[[], Awaitable[T]]) -> T:
    return await action()
