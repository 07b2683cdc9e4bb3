"""
Result tree builder for junit-dashboard.

This module materializes a parsed Report into a TestRun:
- A forest of display nodes, one per suite and one leaf per case
- A lookup from case name to case detail
- Aggregate pass/fail/skip totals
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from rich.text import Text

from report_model import Case, Report, Suite

PASS_STYLE = "green"
FAIL_STYLE = "red"
SKIP_STYLE = "yellow"


@dataclass(frozen=True)
class TreeNode:
    """A display node: internal when built from a suite, a leaf when built from a case."""
    id: str
    label: Text
    children: List["TreeNode"] = field(default_factory=list)
    case: Optional[Case] = None

    @property
    def is_leaf(self) -> bool:
        return self.case is not None


@dataclass(frozen=True)
class Totals:
    """Aggregate counts across the top-level suites of a run."""
    passes: int = 0
    failures: int = 0
    skipped: int = 0


@dataclass(frozen=True)
class TestRun:
    """One completed materialization of a report."""
    __test__ = False  # prevent pytest collection

    tree: List[TreeNode] = field(default_factory=list)
    cases: Dict[str, Case] = field(default_factory=dict)
    totals: Totals = field(default_factory=Totals)


def styled_label(content: str, skipped: bool, failures: bool) -> Text:
    """Red for failures, else yellow when skipped, else green."""
    if failures:
        style = FAIL_STYLE
    elif skipped:
        style = SKIP_STYLE
    else:
        style = PASS_STYLE
    return Text(content, style=style)


def build_run(report: Report) -> TestRun:
    """
    Build the display tree, case lookup and totals for a report.

    Suites and cases keep their source order. When two cases share a
    name, the one visited last owns the lookup entry.

    Args:
        report: Parsed report

    Returns:
        Immutable TestRun
    """
    passes = failures = skipped = 0
    for suite in report.suites:
        counts = suite.counts
        failures += counts.failures + counts.errors
        skipped += counts.skipped
        passes += counts.total - counts.errors - counts.failures - counts.skipped

    cases: Dict[str, Case] = {}
    tree = [_build_node(suite, cases) for suite in report.suites]

    return TestRun(
        tree=tree,
        cases=cases,
        totals=Totals(passes=passes, failures=failures, skipped=skipped),
    )


def _build_node(suite: Suite, cases: Dict[str, Case]) -> TreeNode:
    children = [_build_node(nested, cases) for nested in suite.nested_suites]
    for case in suite.cases:
        cases[case.name] = case
        children.append(TreeNode(
            id=case.name,
            label=styled_label(case.name, case.status.is_skipped, case.status.is_failing),
            case=case,
        ))

    return TreeNode(
        id=suite.tree_id,
        label=styled_label(suite.name, suite.counts.skipped > 0, suite.counts.failures > 0),
        children=children,
    )
