"""
Test Configuration
==================

Pytest configuration with fixtures shared by the unit tests.
"""

from pathlib import Path
from typing import Any, Dict
from unittest.mock import MagicMock

import pytest

from image_renderer.config.settings import Settings
from image_renderer.core.rendering.browser import Browser

from tests.utils.mocks import FakeEngine, FakePage, FakeSession


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings isolated from the environment, writing output to tmp_path."""
    return Settings(
        environment="testing",
        verbose_logging=False,
        timezone="Europe/Stockholm",
        ignores_https_errors=True,
        chrome_bin=None,
        temp_path=tmp_path,
    )


@pytest.fixture
def verbose_settings(test_settings: Settings) -> Settings:
    return test_settings.model_copy(update={"verbose_logging": True})


@pytest.fixture
def mock_log() -> MagicMock:
    """Logger double; bind() returns the same logger so calls can be asserted."""
    log = MagicMock()
    log.bind.return_value = log
    return log


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def fake_session(fake_page: FakePage) -> FakeSession:
    return FakeSession(page=fake_page)


@pytest.fixture
def fake_engine(fake_session: FakeSession) -> FakeEngine:
    return FakeEngine(session=fake_session)


@pytest.fixture
def browser(test_settings: Settings, mock_log: MagicMock, fake_engine: FakeEngine) -> Browser:
    return Browser(test_settings, log=mock_log, engine_factory=fake_engine)


@pytest.fixture
def render_request() -> Dict[str, Any]:
    """Raw request as sent by a dashboard service."""
    return {
        "url": "http://localhost:3000/d/abc?orgId=1",
        "width": "1200",
        "height": "800",
        "timeout": "15",
        "renderKey": "secret-render-key",
        "domain": "localhost",
        "encoding": "png",
    }
