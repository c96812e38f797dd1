"""Render error taxonomy.

Client request errors are raised before any browser work starts. Engine and
timeout errors are raised only after the page and browser have been closed.
"""

from typing import Optional


class RenderError(Exception):
    """Base exception for render failures."""

    def __init__(self, message: str, url: Optional[str] = None, cause: Optional[Exception] = None):
        super().__init__(message)
        self.url = url
        self.cause = cause

    def __str__(self) -> str:
        msg = super().__str__()
        if self.url:
            msg = f"{msg} (URL: {self.url})"
        if self.cause:
            msg = f"{msg} (Caused by: {self.cause})"
        return msg


class BadRequestError(RenderError):
    """Exception raised for invalid render requests."""

    pass


class OverridesParseError(BadRequestError):
    """Exception raised when jsonData is not valid JSON."""

    pass


class EngineError(RenderError):
    """Exception raised when the browser fails during a render phase."""

    def __init__(
        self,
        message: str,
        phase: str,
        url: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, url=url, cause=cause)
        self.phase = phase


class RenderTimeoutError(RenderError):
    """Exception raised when panels do not finish rendering in time."""

    def __init__(
        self,
        message: str,
        timeout: int,
        url: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, url=url, cause=cause)
        self.timeout = timeout
