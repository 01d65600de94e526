"""Text reporting for measurement results.

Reports are written verbatim to a console stream (always) and to the
configured output sink (when set). Streams are owned by the caller.
"""

import platform
import sys
from collections.abc import Callable, Generator
from contextlib import contextmanager
from typing import Any, TextIO

from beartype import beartype
from loguru import logger

from blkarbs_microbench._core import BenchmarkConfig, MeasurementResult, measure
from blkarbs_microbench._overhead import OverheadProfile

BANNER_PREFIX = "blkarbs-microbench || Running benchmark -> "

# Set once the first group header of the process has been emitted
_went_first = False


@beartype
def format_number(value: int) -> str:
    """Render an integer with thousands separators (1000 -> "1,000")."""
    return f"{value:,}"


def default_runtime_label() -> str:
    """Interpreter name and version, e.g. "CPython 3.12.1"."""
    return f"{platform.python_implementation()} {platform.python_version()}"


@beartype
def format_banner(runtime_label: str) -> str:
    """Header printed before the first group of the process."""
    rule = "=" * (len(BANNER_PREFIX) + len(runtime_label) + 2)
    return f"{BANNER_PREFIX}({runtime_label})\n{rule}\n"


@beartype
def format_measurement(
    description: str,
    result: MeasurementResult,
    report_memory: bool,
) -> str:
    """Render one result: description, time, optional memory offset, count."""
    lines = [
        f"\n\tPerformed '{description}'",
        f"\t\tTime: {result.elapsed_seconds}s",
    ]
    if report_memory:
        lines.append(
            f"\t\tMemory Offset: {result.memory_offset_percent:.2f}% || "
            f"(start) {result.start_memory_kb:.2f}kb vs (now) {result.end_memory_kb:.2f}kb"
        )
    lines.append(f"\t\tIteration Count: {format_number(result.iteration_count)}\n")
    return "\n".join(lines)


def _emit(text: str, console: TextIO, sink: TextIO | None) -> None:
    console.write(text)
    if sink is not None:
        sink.write(text)


def report_measurement(
    description: str,
    result: MeasurementResult,
    config: BenchmarkConfig,
    console: TextIO | None = None,
) -> str:
    """Write a formatted result to the console and the configured sink.

    Args:
        description: Label for the measured operation
        result: Completed measurement
        config: Active settings (report_memory, output_sink)
        console: Console stream; defaults to sys.stdout at call time

    Returns:
        The text that was written.
    """
    text = format_measurement(description, result, config.report_memory)
    _emit(text, console if console is not None else sys.stdout, config.output_sink)
    return text


class BenchmarkSuite:
    """Groups measurements under named headers and reports each one.

    The first group begun in the process is preceded by a banner naming the
    runtime; every later group, in this or any other suite, gets a plain
    newline-prefixed header.

    Example:
        config = BenchmarkConfig(report_memory=True)
        suite = BenchmarkSuite(config, default_runtime_label())
        with suite.group("String Operations:"):
            suite.member("Upper", str.upper, 1_000_000, "hello world")

    Not thread-safe: one suite drives one sequential run.
    """

    def __init__(
        self,
        config: BenchmarkConfig,
        runtime_label: str,
        console: TextIO | None = None,
        profile: OverheadProfile | None = None,
    ) -> None:
        self.config = config
        self.runtime_label = runtime_label
        self.profile = profile
        self._console = console

    @property
    def console(self) -> TextIO:
        return self._console if self._console is not None else sys.stdout

    @beartype
    def begin_group(self, description: str) -> str:
        """Emit a group header and return the emitted text.

        Only the first group of the process, across all suites, gets the banner.
        """
        global _went_first
        if _went_first:
            text = f"\n{description}"
        else:
            text = format_banner(self.runtime_label) + description
            _went_first = True

        _emit(text, self.console, self.config.output_sink)
        return text

    @beartype
    @contextmanager
    def group(self, description: str) -> Generator[None, None, None]:
        """Begin a group; members run inside the with-block belong to it."""
        self.begin_group(description)
        yield

    @beartype
    def benchmark(self, description: str, callback: Callable[[], Any]) -> None:
        """Begin a group and run callback, which nests member() calls."""
        with self.group(description):
            callback()

    def member(
        self,
        description: str,
        callback: Callable[..., Any],
        iteration_count: int,
        *args: Any,
    ) -> MeasurementResult:
        """Measure ``callback(*args)`` and report it under the current group.

        Raises:
            InvalidArgument: propagated from measure(); nothing is reported
        """
        result = measure(
            callback,
            iteration_count,
            *args,
            config=self.config,
            profile=self.profile,
        )
        report_measurement(description, result, self.config, console=self.console)
        logger.debug(f"Reported '{description}' ({result.elapsed_seconds:.6e}s)")
        return result
