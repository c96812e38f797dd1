"""
Unit Tests for Page Diagnostics
===============================
"""

from unittest.mock import MagicMock

import pytest

from image_renderer.core.rendering.diagnostics import (
    DiagnosticsSubscriber,
    Subscription,
    subscribe,
    unsubscribe,
)

from tests.utils.mocks import FakeConsoleMessage, FakePage, FakeRequest

BASE_EVENTS = {"crash", "pageerror", "requestfailed", "console"}
VERBOSE_EVENTS = BASE_EVENTS | {"request", "requestfinished", "close"}


@pytest.fixture
def quiet(mock_log):
    return DiagnosticsSubscriber(mock_log, verbose_logging=False)


@pytest.fixture
def verbose(mock_log):
    return DiagnosticsSubscriber(mock_log, verbose_logging=True)


class TestSubscriptionHandles:
    """Test handle based subscribe and unsubscribe."""

    def test_subscribe_returns_handle(self):
        page = FakePage()
        handler = MagicMock()

        subscription = subscribe(page, "console", handler)

        assert isinstance(subscription, Subscription)
        assert subscription.event == "console"
        assert page.listeners["console"] == [handler]

    def test_unsubscribe_removes_handler(self):
        page = FakePage()
        subscription = subscribe(page, "console", MagicMock())

        unsubscribe(page, subscription)

        assert page.listener_count == 0

    def test_handles_for_same_handler_are_distinct(self):
        page = FakePage()
        handler = MagicMock()
        first = subscribe(page, "console", handler)
        second = subscribe(page, "console", handler)
        assert first != second


class TestAttachDetach:
    """Test the attached handler set."""

    def test_attach_base_handlers(self, quiet):
        page = FakePage()
        subscriptions = quiet.attach(page)

        assert {s.event for s in subscriptions} == BASE_EVENTS
        assert page.attach_count == 4

    def test_attach_verbose_handlers(self, verbose):
        page = FakePage()
        subscriptions = verbose.attach(page)

        assert {s.event for s in subscriptions} == VERBOSE_EVENTS
        assert page.attach_count == 7

    @pytest.mark.parametrize("verbose_logging", [False, True])
    def test_detach_is_symmetric(self, mock_log, verbose_logging):
        page = FakePage()
        subscriber = DiagnosticsSubscriber(mock_log, verbose_logging=verbose_logging)

        subscriptions = subscriber.attach(page)
        subscriber.detach(page, subscriptions)

        assert page.detach_count == page.attach_count
        assert page.listener_count == 0

    def test_detach_leaves_foreign_handlers(self, quiet):
        page = FakePage()
        foreign = MagicMock()
        page.on("console", foreign)

        quiet.detach(page, quiet.attach(page))

        assert page.listeners["console"] == [foreign]

    def test_repeated_renders_do_not_leak_handlers(self, verbose):
        page = FakePage()
        for _ in range(5):
            verbose.detach(page, verbose.attach(page))
        assert page.listener_count == 0

    @pytest.mark.parametrize("event", ["crash", "console", "close"])
    def test_failed_attach_removes_partial_handlers(self, verbose, event):
        page = FakePage(on_error_event=event)

        with pytest.raises(RuntimeError, match=f"Cannot listen to {event}"):
            verbose.attach(page)

        assert page.detach_count == page.attach_count
        assert page.listener_count == 0


class TestLogRouting:
    """Test that page events reach the log with the right severity."""

    def test_crash_is_logged_as_error(self, quiet, mock_log):
        page = FakePage()
        quiet.attach(page)

        page.emit("crash", page)

        mock_log.error.assert_called_once_with("Browser page crashed", url=page.url)

    def test_page_error_is_logged(self, quiet, mock_log):
        page = FakePage()
        quiet.attach(page)

        page.emit("pageerror", Exception("ReferenceError: x is not defined"))

        mock_log.error.assert_called_once_with(
            "Browser uncaught exception", error="ReferenceError: x is not defined"
        )

    def test_request_failed_is_logged(self, quiet, mock_log):
        page = FakePage()
        quiet.attach(page)

        page.emit("requestfailed", FakeRequest())

        mock_log.error.assert_called_once_with(
            "Browser request failed",
            url="http://localhost/api/ds/query",
            method="POST",
            failure="net::ERR_FAILED",
        )

    def test_console_error_always_logged(self, quiet, mock_log):
        page = FakePage()
        quiet.attach(page)

        page.emit("console", FakeConsoleMessage("error", "Failed to load panel"))

        mock_log.error.assert_called_once_with(
            "Browser console error",
            msg="Failed to load panel",
            url="http://localhost/app.js",
            line=10,
            column=4,
        )

    def test_console_info_dropped_without_verbose(self, quiet, mock_log):
        page = FakePage()
        quiet.attach(page)

        page.emit("console", FakeConsoleMessage("log", "hello"))

        mock_log.debug.assert_not_called()
        mock_log.error.assert_not_called()

    def test_console_info_logged_at_debug_with_verbose(self, verbose, mock_log):
        page = FakePage()
        verbose.attach(page)

        page.emit("console", FakeConsoleMessage("warning", "deprecated", location={}))

        mock_log.debug.assert_called_once_with(
            "Browser console warning", msg="deprecated", url=None, line=None, column=None
        )

    def test_verbose_request_lifecycle_at_debug(self, verbose, mock_log):
        page = FakePage()
        verbose.attach(page)

        page.emit("request", FakeRequest("http://localhost/a", "GET"))
        page.emit("requestfinished", FakeRequest("http://localhost/a", "GET"))
        page.emit("close", page)

        messages = [call.args[0] for call in mock_log.debug.call_args_list]
        assert messages == ["Browser request", "Browser request finished", "Browser page closed"]
        mock_log.error.assert_not_called()
