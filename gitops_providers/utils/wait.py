"""Bounded polling for eventually-consistent provider APIs.

Git hosting APIs do not promise read-after-write consistency: a repository
or deploy key that was just created may 404 for a few seconds. Every
mutation that must be confirmed before the caller continues polls with
``wait_until``.

Key Exports:
    wait_until: Run a probe until it succeeds or a timeout elapses.

Example:
    >>> from gitops_providers.utils.wait import wait_until
    >>> wait_until(lambda: client.get_repository(ref), interval=1.0, timeout=30.0)

Timing:
    The probe runs immediately, then once per ``interval`` seconds. A probe
    that fails N times and then succeeds returns once N * interval has
    elapsed, provided that is below ``timeout``.
"""

import time
from collections.abc import Callable
from typing import Any

import structlog

from gitops_providers.exceptions import WaitTimeoutError

log = structlog.get_logger(__name__)

DEFAULT_INTERVAL = 1.0
DEFAULT_TIMEOUT = 30.0


def wait_until(
    probe: Callable[[], Any],
    interval: float = DEFAULT_INTERVAL,
    timeout: float = DEFAULT_TIMEOUT,
    *,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> None:
    """Call ``probe`` until it stops raising or ``timeout`` elapses.

    A probe signals "not yet" by raising any ``Exception``. Its return value
    is ignored.

    Args:
        probe: Zero-argument callable to poll.
        interval: Seconds to sleep between probes.
        timeout: Bound on cumulative elapsed time, in seconds.
        sleep: Sleep function (injectable for tests).
        clock: Monotonic clock (injectable for tests).

    Raises:
        WaitTimeoutError: Once elapsed time exceeds ``timeout`` without a
            successful probe. Wraps the last probe error.
    """
    start = clock()
    attempt = 0

    while True:
        attempt += 1
        try:
            probe()
            return
        except Exception as e:
            last_error = e

        elapsed = clock() - start
        if elapsed + interval > timeout:
            log.warning("wait_timed_out", attempts=attempt, timeout=timeout, error=str(last_error))
            raise WaitTimeoutError(timeout, last_error) from last_error

        log.debug("wait_probe_failed", attempt=attempt, elapsed=elapsed, error=str(last_error))
        sleep(interval)
