"""
Page Diagnostics
================

Routes page crashes, uncaught exceptions, failed requests and console output
to structured logging. Handlers are attached and detached through explicit
subscription handles so exactly the attached set is removed again.
"""

from dataclasses import dataclass
from typing import Any, Callable, List

from image_renderer.config.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class Subscription:
    """Opaque handle for one page event handler."""

    event: str
    handler: Callable[..., Any]


def subscribe(page: Any, event: str, handler: Callable[..., Any]) -> Subscription:
    """Attach ``handler`` to ``event`` and return the handle that removes it."""
    page.on(event, handler)
    return Subscription(event=event, handler=handler)


def unsubscribe(page: Any, subscription: Subscription) -> None:
    """Remove the handler recorded in ``subscription``."""
    page.remove_listener(subscription.event, subscription.handler)


class DiagnosticsSubscriber:
    """Attaches page event handlers that log browser diagnostics."""

    def __init__(self, log: Any = None, verbose_logging: bool = False):
        self.log: Any = log or logger
        self.verbose_logging = verbose_logging

    def attach(self, page: Any) -> List[Subscription]:
        """Attach diagnostics handlers to a freshly opened page.

        If any handler cannot be attached, the ones already attached are
        removed again before the error propagates.
        """
        handlers = [
            ("crash", self.log_error),
            ("pageerror", self.log_page_error),
            ("requestfailed", self.log_request_failed),
            ("console", self.log_console_message),
        ]
        if self.verbose_logging:
            handlers.extend(
                [
                    ("request", self.log_request),
                    ("requestfinished", self.log_request_finished),
                    ("close", self.log_page_closed),
                ]
            )

        subscriptions: List[Subscription] = []
        try:
            for event, handler in handlers:
                subscriptions.append(subscribe(page, event, handler))
        except Exception:
            self.detach(page, subscriptions)
            raise
        return subscriptions

    def detach(self, page: Any, subscriptions: List[Subscription]) -> None:
        """Remove exactly the handlers returned by ``attach``."""
        for subscription in subscriptions:
            unsubscribe(page, subscription)

    def log_error(self, page: Any) -> None:
        self.log.error("Browser page crashed", url=getattr(page, "url", None))

    def log_page_error(self, err: Any) -> None:
        self.log.error("Browser uncaught exception", error=str(err))

    def log_console_message(self, msg: Any) -> None:
        msg_type = msg.type
        if not self.verbose_logging and msg_type != "error":
            return

        loc = msg.location or {}
        fields = {
            "msg": msg.text,
            "url": loc.get("url"),
            "line": loc.get("lineNumber"),
            "column": loc.get("columnNumber"),
        }
        if msg_type == "error":
            self.log.error("Browser console error", **fields)
            return

        self.log.debug(f"Browser console {msg_type}", **fields)

    def log_request(self, request: Any) -> None:
        self.log.debug("Browser request", url=request.url, method=request.method)

    def log_request_failed(self, request: Any) -> None:
        self.log.error(
            "Browser request failed",
            url=request.url,
            method=request.method,
            failure=request.failure,
        )

    def log_request_finished(self, request: Any) -> None:
        self.log.debug("Browser request finished", url=request.url, method=request.method)

    def log_page_closed(self, page: Any = None) -> None:
        self.log.debug("Browser page closed")
