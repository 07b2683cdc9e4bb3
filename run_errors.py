"""
Run failure taxonomy for junit-dashboard.

Every failure of a triggered test run is a RunError and is delivered to the
dashboard inside the run's lifecycle event rather than raised.
"""


class RunError(Exception):
    """Exception raised when a test run cannot produce a report."""
    pass


class SpawnError(RunError):
    """Exception raised when the test command cannot be started."""
    pass


class ReportDecodeError(RunError):
    """Exception raised when the captured output is not valid UTF-8."""
    pass


class ReportParseError(RunError):
    """Exception raised when captured output is not a well-formed report."""
    pass
