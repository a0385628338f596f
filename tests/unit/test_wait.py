"""Tests for gitops_providers/utils/wait.py - bounded eventual-consistency polling."""

import pytest

from gitops_providers.exceptions import NotFoundError, WaitTimeoutError
from gitops_providers.utils.wait import wait_until


class FakeClock:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def failing_probe(failures: int):
    """Probe that raises NotFoundError ``failures`` times, then succeeds."""
    calls = {"count": 0}

    def probe() -> None:
        calls["count"] += 1
        if calls["count"] <= failures:
            raise NotFoundError("repository not visible yet")

    probe.calls = calls  # type: ignore[attr-defined]
    return probe


class TestWaitUntil:
    """Tests for wait_until."""

    def test_immediate_success_does_not_sleep(self) -> None:
        """A probe that succeeds first time returns without sleeping."""
        clock = FakeClock()
        probe = failing_probe(0)

        wait_until(probe, interval=1.0, timeout=5.0, sleep=clock.sleep, clock=clock)

        assert probe.calls["count"] == 1
        assert clock.sleeps == []

    def test_succeeds_after_transient_failures(self) -> None:
        """N failures cost N intervals of sleep."""
        clock = FakeClock()
        probe = failing_probe(3)

        wait_until(probe, interval=1.0, timeout=10.0, sleep=clock.sleep, clock=clock)

        assert probe.calls["count"] == 4
        assert clock.sleeps == [1.0, 1.0, 1.0]

    def test_succeeds_when_failures_fit_exactly(self) -> None:
        """Succeeds when N * interval equals the timeout."""
        clock = FakeClock()
        probe = failing_probe(3)

        wait_until(probe, interval=1.0, timeout=3.0, sleep=clock.sleep, clock=clock)

        assert probe.calls["count"] == 4

    def test_times_out_with_last_error(self) -> None:
        """A probe that never succeeds raises WaitTimeoutError wrapping its error."""
        clock = FakeClock()
        probe = failing_probe(100)

        with pytest.raises(WaitTimeoutError) as exc_info:
            wait_until(probe, interval=1.0, timeout=3.0, sleep=clock.sleep, clock=clock)

        assert isinstance(exc_info.value.last_error, NotFoundError)
        assert exc_info.value.__cause__ is exc_info.value.last_error
        assert exc_info.value.timeout == 3.0
        assert "repository not visible yet" in str(exc_info.value)
        assert clock.now <= 3.0

    def test_never_sleeps_past_timeout(self) -> None:
        """Total sleep never exceeds the timeout."""
        clock = FakeClock()

        with pytest.raises(WaitTimeoutError):
            wait_until(failing_probe(100), interval=2.0, timeout=5.0, sleep=clock.sleep, clock=clock)

        assert sum(clock.sleeps) <= 5.0
        assert clock.sleeps == [2.0, 2.0]

    def test_probe_return_value_is_ignored(self) -> None:
        """Returning a value (even falsy) counts as success."""
        clock = FakeClock()

        wait_until(lambda: None, interval=1.0, timeout=1.0, sleep=clock.sleep, clock=clock)

        assert clock.sleeps == []
