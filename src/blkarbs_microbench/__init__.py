"""blkarbs-microbench: Micro-benchmarking with call/loop overhead removal.

Provides:
- calibrate: Measure per-iteration call and loop overhead (OverheadProfile)
- measure: Time N calls of a callable with before/after memory snapshots
- BenchmarkConfig: Explicit settings threaded through measure/report calls
- BenchmarkSuite: Grouped console/file reporting of measurements

Usage:
    from blkarbs_microbench import BenchmarkConfig, BenchmarkSuite, default_runtime_label

    config = BenchmarkConfig(ignore_overhead=True, report_memory=True)
    suite = BenchmarkSuite(config, default_runtime_label())

    with suite.group("String Operations:"):
        suite.member("Length Calculation", len, 1_000_000, "hello world")
"""

from blkarbs_microbench._core import (
    BenchmarkConfig,
    MeasurementResult,
    measure,
    process_memory_kb,
)
from blkarbs_microbench._errors import BenchmarkError, CalibrationError, InvalidArgument
from blkarbs_microbench._overhead import (
    DEFAULT_CALIBRATION_ITERATIONS,
    OverheadProfile,
    calibrate,
    default_overhead_profile,
)
from blkarbs_microbench._report import (
    BenchmarkSuite,
    default_runtime_label,
    format_banner,
    format_measurement,
    format_number,
    report_measurement,
)

__all__ = [
    "DEFAULT_CALIBRATION_ITERATIONS",
    "BenchmarkConfig",
    "BenchmarkError",
    "BenchmarkSuite",
    "CalibrationError",
    "InvalidArgument",
    "MeasurementResult",
    "OverheadProfile",
    "calibrate",
    "default_overhead_profile",
    "default_runtime_label",
    "format_banner",
    "format_measurement",
    "format_number",
    "measure",
    "process_memory_kb",
    "report_measurement",
]

__version__ = "0.1.0"
