"""
Browser Launch Configuration
============================

Builds per-call Chromium launch parameters from static settings and a
validated request. The process environment is copied, never mutated, so
concurrent renders with different timezones stay isolated.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from image_renderer.config.logging import get_logger
from image_renderer.config.settings import Settings
from image_renderer.models.schemas import RenderRequest

logger = get_logger(__name__)

NO_SANDBOX_ARGS = ["--no-sandbox"]

_CONFIG_FIELDS = ("env", "ignore_https_errors", "args", "headless")


@dataclass(frozen=True)
class LaunchConfig:
    """Launch parameters for one render call."""

    env: Dict[str, str]
    ignore_https_errors: bool
    args: List[str] = field(default_factory=lambda: list(NO_SANDBOX_ARGS))
    headless: bool = True
    executable_path: Optional[str] = None
    device_scale_factor: Optional[float] = None
    is_mobile: Optional[bool] = None
    has_touch: Optional[bool] = None
    # Remaining caller overrides passed straight to chromium.launch
    extra: Dict[str, Any] = field(default_factory=dict)

    def launch_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``playwright.chromium.launch``."""
        kwargs: Dict[str, Any] = {
            "env": dict(self.env),
            "args": list(self.args),
            "headless": self.headless,
            **self.extra,
        }
        if self.executable_path:
            kwargs["executable_path"] = self.executable_path
        return kwargs

    def page_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``browser.new_page``.

        Playwright scopes TLS tolerance, pixel density and mobile emulation to
        the browser context that ``new_page`` creates.
        """
        kwargs: Dict[str, Any] = {"ignore_https_errors": self.ignore_https_errors}
        if self.device_scale_factor:
            kwargs["device_scale_factor"] = self.device_scale_factor
        if self.is_mobile is not None:
            kwargs["is_mobile"] = self.is_mobile
        if self.has_touch is not None:
            kwargs["has_touch"] = self.has_touch
        return kwargs


def get_launcher_options(
    settings: Settings, request: Optional[RenderRequest] = None
) -> LaunchConfig:
    """
    Build launch parameters for a render call.

    Args:
        settings: Static renderer settings
        request: Validated request, or None for a bare launch

    Returns:
        LaunchConfig with caller launch overrides merged at the top level
    """
    overrides = request.json_data if request else None
    logger.debug(
        "LauncherOptions", json_data=overrides.to_kwargs() if overrides else None
    )

    env = dict(os.environ)
    timezone = (request.timezone if request else None) or settings.timezone
    if timezone:
        env["TZ"] = timezone

    options: Dict[str, Any] = {
        "env": env,
        "ignore_https_errors": settings.ignores_https_errors,
        "args": list(NO_SANDBOX_ARGS),
        "headless": settings.headless,
    }
    if overrides and overrides.launch_options:
        options.update(overrides.launch_options.to_kwargs())

    extra = {key: options.pop(key) for key in list(options) if key not in _CONFIG_FIELDS}

    viewport = overrides.viewport if overrides else None

    return LaunchConfig(
        executable_path=settings.chrome_bin or None,
        device_scale_factor=viewport.device_scale_factor if viewport else None,
        is_mobile=viewport.is_mobile if viewport else None,
        has_touch=viewport.has_touch if viewport else None,
        extra=extra,
        **options,
    )
