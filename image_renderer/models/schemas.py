"""
Pydantic Models and Schemas
===========================

Render request, caller-supplied overrides and render result models.
Caller overrides are explicit structures. Unknown top-level jsonData keys are
kept but never reach the browser; nested launch, viewport and PDF options
reject unknown keys.
"""

from typing import Optional, List, Dict, Any, Union, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


Encoding = Literal["png", "jpeg", "pdf"]

ALLOWED_ENCODINGS = ("png", "jpeg", "pdf")


class OverrideModel(BaseModel):
    """Base for caller overrides: camelCase aliases, unknown keys forbidden."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def to_kwargs(self) -> Dict[str, Any]:
        """Playwright keyword arguments for the fields the caller actually set."""
        return self.model_dump(exclude_none=True)


class LaunchOverrides(OverrideModel):
    """Launch options a caller may override.

    The environment and the executable path stay under server control.
    """

    args: Optional[List[str]] = Field(None, description="Chromium command line arguments")
    ignore_default_args: Optional[Union[bool, List[str]]] = Field(None, alias="ignoreDefaultArgs")
    headless: Optional[bool] = Field(None, description="Run browser in headless mode")
    timeout: Optional[float] = Field(None, ge=0, description="Launch timeout in milliseconds")
    slow_mo: Optional[float] = Field(None, ge=0, alias="slowMo")
    ignore_https_errors: Optional[bool] = Field(None, alias="ignoreHTTPSErrors")


class ViewportOverride(OverrideModel):
    """Viewport override merged over the requested size."""

    width: Optional[int] = Field(None, gt=0)
    height: Optional[int] = Field(None, gt=0)
    device_scale_factor: Optional[float] = Field(None, gt=0, alias="deviceScaleFactor")
    is_mobile: Optional[bool] = Field(None, alias="isMobile")
    has_touch: Optional[bool] = Field(None, alias="hasTouch")


class ScriptTag(OverrideModel):
    """Script tag injected after navigation."""

    url: Optional[str] = None
    path: Optional[str] = None
    content: Optional[str] = None
    type: Optional[str] = None

    @model_validator(mode="after")
    def require_source(self) -> "ScriptTag":
        if not (self.url or self.path or self.content):
            raise ValueError("script tag needs one of url, path or content")
        return self


class StyleTag(OverrideModel):
    """Style tag injected after navigation."""

    url: Optional[str] = None
    path: Optional[str] = None
    content: Optional[str] = None

    @model_validator(mode="after")
    def require_source(self) -> "StyleTag":
        if not (self.url or self.path or self.content):
            raise ValueError("style tag needs one of url, path or content")
        return self


class PdfMargin(OverrideModel):
    top: Optional[Union[str, float]] = None
    right: Optional[Union[str, float]] = None
    bottom: Optional[Union[str, float]] = None
    left: Optional[Union[str, float]] = None


class PdfOptions(OverrideModel):
    """PDF capture options. The output path is always chosen by the renderer."""

    format: Optional[str] = Field(None, description="Paper format, e.g. A4 or Letter")
    landscape: Optional[bool] = None
    scale: Optional[float] = Field(None, ge=0.1, le=2.0)
    width: Optional[Union[str, float]] = None
    height: Optional[Union[str, float]] = None
    margin: Optional[PdfMargin] = None
    print_background: Optional[bool] = Field(None, alias="printBackground")
    page_ranges: Optional[str] = Field(None, alias="pageRanges")
    prefer_css_page_size: Optional[bool] = Field(None, alias="preferCSSPageSize")
    display_header_footer: Optional[bool] = Field(None, alias="displayHeaderFooter")
    header_template: Optional[str] = Field(None, alias="headerTemplate")
    footer_template: Optional[str] = Field(None, alias="footerTemplate")


class RenderOverrides(OverrideModel):
    """Decoded jsonData of a render request."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    launch_options: Optional[LaunchOverrides] = Field(None, alias="launchOptions")
    viewport: Optional[ViewportOverride] = None
    emulate_media: Optional[Literal["screen", "print"]] = Field(None, alias="emulateMedia")
    default_navigation_timeout: Optional[int] = Field(
        None, ge=0, alias="defaultNavigationTimeout", description="Milliseconds"
    )
    extra_url_params: Optional[str] = Field(None, alias="extraUrlParams")
    script_tags: List[ScriptTag] = Field(default_factory=list, alias="scriptTags")
    style_tags: List[StyleTag] = Field(default_factory=list, alias="styleTags")
    wait_for: Optional[Union[int, str]] = Field(
        None, alias="waitFor", description="Milliseconds to sleep or a CSS selector to await"
    )
    pdf: Optional[PdfOptions] = None


class RawRenderRequest(BaseModel):
    """Render request as received from a caller, before validation."""

    model_config = ConfigDict(populate_by_name=True)

    url: str
    width: Any = None
    height: Any = None
    file_path: Optional[str] = Field(None, alias="filePath")
    timeout: Any = None
    render_key: str = Field("", alias="renderKey")
    domain: str = ""
    timezone: Optional[str] = None
    encoding: Optional[str] = None
    json_data: Optional[Union[str, Dict[str, Any]]] = Field(None, alias="jsonData")


class RenderRequest(BaseModel):
    """Validated, normalized render request."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    url: str
    width: int = Field(..., ge=10, le=3000)
    height: int = Field(..., ge=10, le=3000)
    file_path: Optional[str] = Field(None, alias="filePath")
    timeout: int = Field(..., gt=0, description="Render timeout in seconds")
    render_key: str = Field(..., alias="renderKey")
    domain: str
    timezone: Optional[str] = None
    encoding: Encoding = "png"
    json_data: RenderOverrides = Field(default_factory=RenderOverrides, alias="jsonData")


class RenderResult(BaseModel):
    """Location of a rendered artifact."""

    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(..., alias="filePath")
