"""Exception taxonomy for blkarbs_microbench."""


class BenchmarkError(Exception):
    """Base class for all benchmark harness errors."""


class InvalidArgument(BenchmarkError, ValueError):
    """A precondition on a public operation was violated.

    Attributes:
        parameter: Name of the offending parameter
    """

    def __init__(self, parameter: str, reason: str) -> None:
        self.parameter = parameter
        super().__init__(f"Invalid argument '{parameter}': {reason}")


class CalibrationError(BenchmarkError, RuntimeError):
    """Overhead calibration could not produce trustworthy constants.

    Fatal: there is no fallback profile, results would otherwise be
    reported as overhead-free when they are not.
    """
