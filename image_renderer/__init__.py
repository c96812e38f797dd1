"""
Image Renderer
==============

Server-side rendering backend that turns a URL into a PNG, JPEG or PDF
snapshot by driving headless Chromium with Playwright.

This package provides:
- Request validation and normalization
- Browser launch configuration
- Instrumentable render lifecycle phases
- Page diagnostics routed to structured logging
"""

__version__ = "1.0.0"
__author__ = "Image Renderer Team"
