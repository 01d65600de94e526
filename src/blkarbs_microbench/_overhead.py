"""Overhead calibration.

Measures, once per process, the per-iteration cost of calling a function
inside a counted loop so it can be subtracted from real measurements.

Design by Contract:
- Calibration size MUST be a positive int
- The clock MUST be monotonic over a calibration run (crash otherwise)
- Both constants are >= 0 in the returned profile
- No fallback profile: failure is fatal
"""

import math
import time
from collections.abc import Callable
from dataclasses import dataclass

from beartype import beartype
from loguru import logger

from blkarbs_microbench._errors import CalibrationError, InvalidArgument

DEFAULT_CALIBRATION_ITERATIONS = 1_000_000


@dataclass(frozen=True)
class OverheadProfile:
    """Calibrated per-iteration costs of loop and call mechanics.

    Attributes:
        call_overhead_per_iter: Seconds spent dispatching one no-op call
        loop_overhead_per_iter: Seconds of loop bookkeeping per iteration,
            net of call cost
        iterations: Calibration size the constants were derived from
    """

    call_overhead_per_iter: float
    loop_overhead_per_iter: float
    iterations: int


def _noop() -> None:
    pass


def _timed_noop_loop(clock: Callable[[], float], iterations: int) -> float:
    start = clock()
    for _ in range(iterations):
        _noop()
    end = clock()

    elapsed = end - start
    if not math.isfinite(elapsed) or elapsed < 0:
        raise CalibrationError(
            f"Clock reading invalid during calibration: elapsed={elapsed!r}s. "
            f"System clock went backwards or returned a non-finite value."
        )
    return elapsed


@beartype
def calibrate(
    iterations: int = DEFAULT_CALIBRATION_ITERATIONS,
    clock: Callable[[], float] = time.perf_counter,
) -> OverheadProfile:
    """Estimate call and loop overhead per iteration.

    The same no-op loop is timed twice. The first run yields the call
    overhead; the second run, minus the now-known call cost, yields the
    cost of loop control flow alone.

    Args:
        iterations: Calls per calibration loop. Large values average the
            per-call cost over many calls so clock resolution does not dominate.
        clock: Monotonic clock returning seconds

    Returns:
        OverheadProfile with both constants in seconds per iteration.

    Raises:
        InvalidArgument: iterations is not a positive int
        CalibrationError: the clock went backwards or is non-finite
    """
    if isinstance(iterations, bool) or iterations <= 0:
        raise InvalidArgument("iterations", f"must be a positive int, got {iterations!r}")

    call_elapsed = _timed_noop_loop(clock, iterations)
    call_overhead = call_elapsed / iterations

    loop_elapsed = _timed_noop_loop(clock, iterations)
    loop_overhead = (loop_elapsed - call_overhead * iterations) / iterations

    if loop_overhead < 0:
        logger.debug(
            f"Loop overhead below zero ({loop_overhead:.3e}s/iter), clamping to 0.0"
        )
        loop_overhead = 0.0

    logger.debug(
        f"Calibrated overhead over {iterations:,} iterations: "
        f"call={call_overhead:.3e}s/iter, loop={loop_overhead:.3e}s/iter"
    )
    return OverheadProfile(
        call_overhead_per_iter=call_overhead,
        loop_overhead_per_iter=loop_overhead,
        iterations=iterations,
    )


_default_profile: OverheadProfile | None = None
_default_failure: Exception | None = None


def default_overhead_profile() -> OverheadProfile:
    """Process-wide profile, calibrated on first use and never again.

    A failed calibration is remembered too: later calls re-raise the same
    error instead of calibrating again.
    """
    global _default_profile, _default_failure
    if _default_failure is not None:
        raise _default_failure
    if _default_profile is None:
        try:
            _default_profile = calibrate()
        except Exception as exc:
            _default_failure = exc
            raise
    return _default_profile
