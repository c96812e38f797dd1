"""
Data Models
===========

Pydantic models for render requests, caller overrides and results.
"""

from .schemas import (
    ALLOWED_ENCODINGS,
    LaunchOverrides,
    PdfMargin,
    PdfOptions,
    RawRenderRequest,
    RenderOverrides,
    RenderRequest,
    RenderResult,
    ScriptTag,
    StyleTag,
    ViewportOverride,
)

__all__ = [
    "ALLOWED_ENCODINGS",
    "LaunchOverrides",
    "PdfMargin",
    "PdfOptions",
    "RawRenderRequest",
    "RenderOverrides",
    "RenderRequest",
    "RenderResult",
    "ScriptTag",
    "StyleTag",
    "ViewportOverride",
]
