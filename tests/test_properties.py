"""Property-based tests for blkarbs_microbench using Hypothesis.

These pin down the arithmetic of overhead calibration and correction for
arbitrary constants and sizes, which handwritten cases only sample.
"""

import math

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from blkarbs_microbench import (
    BenchmarkConfig,
    InvalidArgument,
    MeasurementResult,
    OverheadProfile,
    calibrate,
    format_number,
    measure,
)

# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

# Per-iteration costs between 1ns and 1ms
per_iter_cost = st.floats(min_value=1e-9, max_value=1e-3, allow_nan=False, allow_infinity=False)

# Kept small: measure() really runs the loop
small_count = st.integers(min_value=1, max_value=500)

# Calibration sizes never execute more than a few thousand no-ops here
calibration_size = st.integers(min_value=1, max_value=5_000)

clock_origin = st.floats(min_value=0.0, max_value=1e3, allow_nan=False, allow_infinity=False)

raw_elapsed = st.floats(min_value=0.0, max_value=1e3, allow_nan=False, allow_infinity=False)

positive_memory = st.floats(min_value=1.0, max_value=1e9, allow_nan=False, allow_infinity=False)


def scripted_clock(*readings: float):
    it = iter(readings)
    return lambda: next(it)


# ---------------------------------------------------------------------------
# measure(): correction linearity
# ---------------------------------------------------------------------------

class TestCorrectionProperties:
    @given(
        n=small_count,
        start=clock_origin,
        elapsed=raw_elapsed,
        call=per_iter_cost,
        loop=per_iter_cost,
    )
    @settings(max_examples=50)
    def test_corrected_elapsed_is_linear_in_iteration_count(self, n, start, elapsed, call, loop):
        """elapsed == raw - call * n - loop for any profile and count."""
        profile = OverheadProfile(call_overhead_per_iter=call, loop_overhead_per_iter=loop, iterations=1)
        result = measure(
            lambda: None,
            n,
            config=BenchmarkConfig(ignore_overhead=True),
            profile=profile,
            clock=scripted_clock(start, start + elapsed),
            memory_probe=lambda: 1.0,
        )
        raw = (start + elapsed) - start
        assert result.elapsed_seconds == pytest.approx(raw - call * n - loop, abs=1e-9)

    @given(n=small_count, start=clock_origin, elapsed=raw_elapsed)
    @settings(max_examples=50)
    def test_uncorrected_elapsed_is_raw_delta(self, n, start, elapsed):
        result = measure(
            lambda: None,
            n,
            config=BenchmarkConfig(ignore_overhead=False),
            clock=scripted_clock(start, start + elapsed),
            memory_probe=lambda: 1.0,
        )
        assert result.elapsed_seconds == (start + elapsed) - start


# ---------------------------------------------------------------------------
# measure(): invocation and preconditions
# ---------------------------------------------------------------------------

class TestInvocationProperties:
    @given(n=small_count, args=st.lists(st.integers(), max_size=5))
    @settings(max_examples=30)
    def test_called_exactly_n_times_with_same_args(self, n, args):
        calls = []
        measure(lambda *a: calls.append(a), n, *args)

        assert len(calls) == n
        assert all(call == tuple(args) for call in calls)

    @given(n=st.integers(max_value=0))
    def test_non_positive_count_always_rejected(self, n):
        calls = []
        with pytest.raises(InvalidArgument):
            measure(lambda: calls.append(1), n)
        assert calls == []


# ---------------------------------------------------------------------------
# calibrate(): calibration-size sensitivity
# ---------------------------------------------------------------------------

class TestCalibrationProperties:
    @given(size=calibration_size, call=per_iter_cost, loop=per_iter_cost, origin=clock_origin)
    @settings(max_examples=30)
    def test_linear_clock_recovers_constants_for_any_size(self, size, call, loop, origin):
        """Under a clock where cost scales linearly, constants do not depend on size."""
        clock = scripted_clock(
            origin,
            origin + call * size,
            origin + 10.0,
            origin + 10.0 + (call + loop) * size,
        )
        profile = calibrate(iterations=size, clock=clock)

        assert profile.call_overhead_per_iter == pytest.approx(call, rel=1e-6, abs=1e-12)
        assert profile.loop_overhead_per_iter == pytest.approx(loop, rel=1e-4, abs=1e-9)

    @given(size=calibration_size, readings=st.lists(raw_elapsed, min_size=2, max_size=2))
    @settings(max_examples=30)
    def test_constants_never_negative(self, size, readings):
        first, second = readings
        profile = calibrate(iterations=size, clock=scripted_clock(0.0, first, 0.0, second))

        assert profile.call_overhead_per_iter >= 0
        assert profile.loop_overhead_per_iter >= 0


# ---------------------------------------------------------------------------
# MeasurementResult / formatting
# ---------------------------------------------------------------------------

class TestResultProperties:
    @given(start=positive_memory, end=positive_memory)
    def test_memory_offset_sign_follows_growth(self, start, end):
        offset = MeasurementResult(0.0, start, end, 1).memory_offset_percent

        assert math.isfinite(offset)
        if end > start:
            assert offset > 0
        elif end < start:
            assert offset < 0
        else:
            assert offset == 0

    @given(value=st.integers(min_value=0, max_value=10**15))
    def test_thousands_groups_have_three_digits(self, value):
        groups = format_number(value).split(",")

        assert 1 <= len(groups[0]) <= 3
        assert all(len(g) == 3 for g in groups[1:])
        assert int("".join(groups)) == value
