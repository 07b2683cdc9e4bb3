"""
Report model for junit-dashboard.

This module provides the typed representation of a parsed test report:
- Per-case outcome status (success, failure, error, skipped)
- Test cases with optional captured output
- Suites with nested suites, cases and rolled-up counts
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional


class StatusKind(Enum):
    """Closed set of test case outcomes."""
    SUCCESS = "success"
    FAILURE = "failure"
    ERROR = "error"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class Status:
    """Outcome of a single test case."""
    kind: StatusKind
    message: str = ""
    text: str = ""

    @classmethod
    def success(cls) -> "Status":
        return cls(StatusKind.SUCCESS)

    @classmethod
    def failure(cls, message: str = "", text: str = "") -> "Status":
        return cls(StatusKind.FAILURE, message, text)

    @classmethod
    def error(cls, message: str = "", text: str = "") -> "Status":
        return cls(StatusKind.ERROR, message, text)

    @classmethod
    def skipped(cls, message: str = "", text: str = "") -> "Status":
        return cls(StatusKind.SKIPPED, message, text)

    @property
    def is_failing(self) -> bool:
        """True for failures and errors."""
        return self.kind in (StatusKind.FAILURE, StatusKind.ERROR)

    @property
    def is_skipped(self) -> bool:
        return self.kind is StatusKind.SKIPPED

    def describe(self) -> str:
        """
        Render the diagnostic part of the status for the detail view.

        Returns:
            Empty string for a success, otherwise "message\\ntext"
        """
        if self.kind is StatusKind.SUCCESS:
            return ""
        return f"{self.message}\n{self.text}"


@dataclass(frozen=True)
class Case:
    """A single test case."""
    name: str
    status: Status
    captured_output: Optional[str] = None


@dataclass(frozen=True)
class SuiteCounts:
    """Rolled-up counts reported for a suite."""
    total: int = 0
    failures: int = 0
    errors: int = 0
    skipped: int = 0


@dataclass(frozen=True)
class Suite:
    """A named grouping of cases and nested suites."""
    name: str
    identifier: Optional[str] = None
    nested_suites: List["Suite"] = field(default_factory=list)
    cases: List[Case] = field(default_factory=list)
    counts: SuiteCounts = field(default_factory=SuiteCounts)

    @property
    def tree_id(self) -> str:
        """Identifier used in the display tree: explicit id, else the name."""
        return self.identifier if self.identifier is not None else self.name

    def iter_cases(self) -> Iterator[Case]:
        """Yield every case in this suite, nested suites first, in source order."""
        for nested in self.nested_suites:
            yield from nested.iter_cases()
        yield from self.cases


@dataclass(frozen=True)
class Report:
    """A full parsed report: an ordered collection of top-level suites."""
    suites: List[Suite] = field(default_factory=list)

    def iter_cases(self) -> Iterator[Case]:
        for suite in self.suites:
            yield from suite.iter_cases()

    def case_count(self) -> int:
        return sum(1 for _ in self.iter_cases())
