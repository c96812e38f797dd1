"""
Unit Tests for Render Phase Timings
===================================

Phase wrappers must return exactly what the wrapped action returns and
propagate its failures unchanged.
"""

import pytest

from image_renderer.core.rendering.timings import PHASES, LoggingBrowserTiming, NoOpBrowserTiming


class PhaseFailure(Exception):
    pass


@pytest.fixture(params=[NoOpBrowserTiming, LoggingBrowserTiming])
def timings(request):
    return request.param()


class TestPhaseTransparency:
    """Test that wrappers are transparent for results and failures."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("phase", PHASES)
    async def test_returns_action_result(self, timings, phase):
        result = object()

        async def action():
            return result

        direct = await action()
        wrapped = await getattr(timings, phase)(action)

        assert wrapped is direct

    @pytest.mark.asyncio
    @pytest.mark.parametrize("phase", PHASES)
    async def test_propagates_action_failure(self, timings, phase):
        error = PhaseFailure("boom")

        async def action():
            raise error

        with pytest.raises(PhaseFailure) as direct:
            await action()
        with pytest.raises(PhaseFailure) as wrapped:
            await getattr(timings, phase)(action)

        assert wrapped.value is direct.value

    @pytest.mark.asyncio
    async def test_runs_action_once(self, timings):
        calls = []

        async def action():
            calls.append(1)

        await timings.navigate(action)
        assert calls == [1]


class TestLoggingBrowserTiming:
    """Test duration recording."""

    @pytest.mark.asyncio
    async def test_records_duration_per_phase(self):
        recorded = []
        timings = LoggingBrowserTiming(recorder=lambda phase, duration: recorded.append(phase))

        async def action():
            return "ok"

        await timings.launch(action)
        await timings.screenshot(action)

        assert len(timings.durations["launch"]) == 1
        assert len(timings.durations["screenshot"]) == 1
        assert timings.durations["pdf"] == []
        assert recorded == ["launch", "screenshot"]

    @pytest.mark.asyncio
    async def test_records_duration_of_failed_phase(self):
        timings = LoggingBrowserTiming()

        async def action():
            raise PhaseFailure("navigation failed")

        with pytest.raises(PhaseFailure):
            await timings.navigate(action)

        assert len(timings.durations["navigate"]) == 1
        assert timings.durations["navigate"][0] >= 0

    @pytest.mark.asyncio
    async def test_recorder_failure_does_not_hide_result(self):
        def broken_recorder(phase, duration):
            raise RuntimeError("metrics backend down")

        timings = LoggingBrowserTiming(recorder=broken_recorder)

        async def action():
            return 42

        assert await timings.panels_rendered(action) == 42
