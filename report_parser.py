"""
JUnit XML report parser for junit-dashboard.

This module converts the text captured from a test command into a Report:
- Accepts a <testsuites> root or a single <testsuite> root
- Keeps nested suites and cases in source order
- Reads suite counts from attributes, deriving any that are missing
"""

import xml.etree.ElementTree as ET
from typing import List, Optional

from report_model import Case, Report, Status, StatusKind, Suite, SuiteCounts
from run_errors import ReportParseError


_STATUS_TAGS = {
    "failure": Status.failure,
    "error": Status.error,
    "skipped": Status.skipped,
}


def parse_report(text: str) -> Report:
    """
    Parse JUnit XML text into a Report.

    Args:
        text: Captured output of the test command

    Returns:
        Parsed Report with suites in document order

    Raises:
        ReportParseError: If the text is not a JUnit XML document
    """
    if not text.strip():
        raise ReportParseError("Test report is empty")

    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise ReportParseError(f"Invalid test report XML: {str(e)}") from e

    if root.tag == "testsuites":
        suites = [_parse_suite(el) for el in root.findall("testsuite")]
    elif root.tag == "testsuite":
        suites = [_parse_suite(root)]
    else:
        raise ReportParseError(f"Unexpected report root element <{root.tag}>")

    return Report(suites=suites)


def _parse_suite(element: ET.Element) -> Suite:
    nested = [_parse_suite(el) for el in element.findall("testsuite")]
    cases = [_parse_case(el) for el in element.findall("testcase")]
    name = element.get("name", "")

    # Missing attributes fall back to what the suite actually contains
    all_cases: List[Case] = []
    for suite in nested:
        all_cases.extend(suite.iter_cases())
    all_cases.extend(cases)

    counts = SuiteCounts(
        total=_count(element, "tests", name, len(all_cases)),
        failures=_count(element, "failures", name,
                        sum(1 for c in all_cases if c.status.kind is StatusKind.FAILURE)),
        errors=_count(element, "errors", name,
                      sum(1 for c in all_cases if c.status.kind is StatusKind.ERROR)),
        skipped=_count(element, "skipped", name,
                       sum(1 for c in all_cases if c.status.is_skipped)),
    )

    return Suite(
        name=name,
        identifier=element.get("id"),
        nested_suites=nested,
        cases=cases,
        counts=counts,
    )


def _parse_case(element: ET.Element) -> Case:
    status = Status.success()
    for child in element:
        factory = _STATUS_TAGS.get(child.tag)
        if factory is not None:
            status = factory(child.get("message", ""), child.text or "")
            break

    output: Optional[str] = None
    system_out = element.find("system-out")
    if system_out is not None:
        output = system_out.text or ""

    return Case(
        name=element.get("name", ""),
        status=status,
        captured_output=output,
    )


def _count(element: ET.Element, attribute: str, suite_name: str, derived: int) -> int:
    raw = element.get(attribute)
    if raw is None:
        return derived
    try:
        return int(raw)
    except ValueError:
        raise ReportParseError(
            f"Invalid '{attribute}' count {raw!r} in suite '{suite_name}'"
        )
