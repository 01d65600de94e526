"""Measurement engine.

Design by Contract:
- iteration_count MUST be a positive int (InvalidArgument otherwise)
- Preconditions are checked before any callable runs
- Memory is snapshotted immediately before the first and after the last call
- Callable failures propagate unmodified; no partial result
- GC is never forced here

Memory tracking via psutil (resident set size, KB).
"""

import math
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TextIO

import psutil
from loguru import logger

from blkarbs_microbench._errors import InvalidArgument
from blkarbs_microbench._overhead import OverheadProfile, default_overhead_profile


@dataclass
class BenchmarkConfig:
    """Settings threaded through every measurement and report call.

    Attributes:
        ignore_overhead: Subtract calibrated call/loop overhead from timings
        report_memory: Include the memory offset line in reports
        output_sink: Writable text stream that also receives every report.
            Opened and closed by the caller.
    """

    ignore_overhead: bool = False
    report_memory: bool = False
    output_sink: TextIO | None = None


@dataclass(frozen=True)
class MeasurementResult:
    """Outcome of one timed run of a callable.

    Attributes:
        elapsed_seconds: Wall time for all iterations. With overhead
            correction enabled this may be negative for workloads cheaper
            than the calibrated overhead.
        start_memory_kb: Process memory before the first iteration (KB)
        end_memory_kb: Process memory after the last iteration (KB)
        iteration_count: Number of times the callable ran
    """

    elapsed_seconds: float
    start_memory_kb: float
    end_memory_kb: float
    iteration_count: int

    @property
    def memory_offset_percent(self) -> float:
        """Percentage change in memory across the run, NaN for a zero baseline."""
        if self.start_memory_kb == 0:
            return math.nan
        return (self.end_memory_kb - self.start_memory_kb) / self.start_memory_kb * 100


def process_memory_kb() -> float:
    """Resident set size of the current process in KB.

    This is RSS as reported by psutil, not interpreter heap usage, so it also
    counts memory held by the allocator and native extensions.
    """
    return psutil.Process().memory_info().rss / 1024


def measure(
    callback: Callable[..., Any],
    iteration_count: int,
    *args: Any,
    config: BenchmarkConfig | None = None,
    profile: OverheadProfile | None = None,
    clock: Callable[[], float] = time.perf_counter,
    memory_probe: Callable[[], float] = process_memory_kb,
) -> MeasurementResult:
    """Run ``callback(*args)`` iteration_count times and time the whole run.

    The same argument objects are passed on every iteration. Wrap calls
    needing keyword arguments in functools.partial.

    Overhead correction subtracts the call cost once per iteration and the
    loop cost once in total. This is a linear approximation, the loop figure
    comes from a fixed-size calibration run.

    Args:
        callback: Work to benchmark
        iteration_count: Times to invoke callback (MUST be > 0)
        *args: Positional arguments passed to callback on every call
        config: Active settings; defaults to BenchmarkConfig()
        profile: Overhead constants; defaults to the process-wide calibration,
            only consulted when config.ignore_overhead is set
        clock: Monotonic clock returning seconds
        memory_probe: Returns current memory usage in KB

    Returns:
        MeasurementResult for the run.

    Raises:
        InvalidArgument: callback is not callable or iteration_count is not
            a positive int
    """
    if not callable(callback):
        raise InvalidArgument("callback", f"expected a callable, got {type(callback).__name__}")
    if isinstance(iteration_count, bool) or not isinstance(iteration_count, int):
        raise InvalidArgument(
            "iteration_count", f"expected an int, got {type(iteration_count).__name__}"
        )
    if iteration_count <= 0:
        raise InvalidArgument(
            "iteration_count", f"must be greater than 0, got {iteration_count}"
        )

    if config is None:
        config = BenchmarkConfig()
    if config.ignore_overhead and profile is None:
        profile = default_overhead_profile()

    start_memory = memory_probe()
    start_time = clock()
    for _ in range(iteration_count):
        callback(*args)
    end_time = clock()
    end_memory = memory_probe()

    elapsed = end_time - start_time
    if config.ignore_overhead:
        elapsed = (
            elapsed
            - profile.call_overhead_per_iter * iteration_count
            - profile.loop_overhead_per_iter
        )

    logger.debug(
        f"Measured {getattr(callback, '__name__', repr(callback))} x{iteration_count:,}: "
        f"{elapsed:.6e}s (overhead {'removed' if config.ignore_overhead else 'kept'})"
    )
    return MeasurementResult(
        elapsed_seconds=elapsed,
        start_memory_kb=start_memory,
        end_memory_kb=end_memory,
        iteration_count=iteration_count,
    )
