"""
Property-based tests for the auto-expand and default selection policy.
"""

from hypothesis import given, settings

from report_model import Case, Report, Status, Suite, SuiteCounts
from selection_policy import contains_failure, initialize
from tree_builder import build_run

from report_strategies import reports


def expected_expansion(report):
    """Map every suite path to whether any suite at that path holds a failing case."""
    expected = {}

    def walk(suite, parent):
        path = parent + (suite.tree_id,)
        failing = any(case.status.is_failing for case in suite.iter_cases())
        expected[path] = expected.get(path, False) or failing
        for nested in suite.nested_suites:
            walk(nested, path)

    for suite in report.suites:
        walk(suite, ())
    return expected


# Feature: junit-dashboard, Property 6: Suites expand iff they contain a failure
@settings(max_examples=200)
@given(report=reports())
def test_property_6_suites_expand_iff_failure(report):
    """
    Property 6: Suites expand iff they contain a failure

    A suite path is expanded exactly when a failing or erroring case is
    among its transitive descendants.
    """
    run = build_run(report)
    expansion = initialize(run)

    expected = expected_expansion(report)
    assert set(expansion.expanded_paths) <= set(expected)
    for path, failing in expected.items():
        assert (path in expansion.expanded_paths) == failing


# Feature: junit-dashboard, Property 7: Default selection
@settings(max_examples=100)
@given(report=reports())
def test_property_7_default_selection(report):
    """
    Property 7: Default selection

    With nothing selected, the first root is selected; an empty run leaves
    the selection unset.
    """
    run = build_run(report)
    expansion = initialize(run)

    if run.tree:
        assert expansion.default_selection == (run.tree[0].id,)
    else:
        assert expansion.default_selection == ()


def test_existing_selection_is_kept():
    report = Report(suites=[Suite(name="a"), Suite(name="b")])

    expansion = initialize(build_run(report), selected=("b",))

    assert expansion.default_selection == ("b",)


def test_failing_suite_expanded():
    report = Report(suites=[
        Suite(
            name="suite",
            cases=[Case("bad", Status.failure("boom")), Case("good", Status.success())],
            counts=SuiteCounts(total=2, failures=1),
        ),
    ])

    expansion = initialize(build_run(report))

    assert expansion.expanded_identifiers == {"suite"}
    assert expansion.default_selection == ("suite",)


def test_passing_suite_not_expanded():
    report = Report(suites=[
        Suite(name="suite", cases=[Case("ok", Status.success())], counts=SuiteCounts(total=1)),
    ])

    expansion = initialize(build_run(report))

    assert expansion.expanded_paths == frozenset()


def test_skipped_cases_do_not_expand():
    report = Report(suites=[
        Suite(name="suite", cases=[Case("later", Status.skipped("todo"))],
              counts=SuiteCounts(total=1, skipped=1)),
    ])

    assert initialize(build_run(report)).expanded_paths == frozenset()


def test_expansion_propagates_to_every_ancestor():
    inner = Suite(
        name="inner",
        cases=[Case("bad", Status.error("crash"))],
        counts=SuiteCounts(total=1, errors=1),
    )
    clean = Suite(name="clean", cases=[Case("ok", Status.success())], counts=SuiteCounts(total=1))
    middle = Suite(name="middle", nested_suites=[clean, inner], counts=SuiteCounts(total=2, errors=1))
    outer = Suite(name="outer", nested_suites=[middle], counts=SuiteCounts(total=2, errors=1))

    run = build_run(Report(suites=[outer]))
    expansion = initialize(run)

    assert expansion.expanded_paths == {
        ("outer",),
        ("outer", "middle"),
        ("outer", "middle", "inner"),
    }
    assert contains_failure(run.tree[0])
    assert not contains_failure(run.tree[0].children[0].children[0])


def test_empty_run():
    expansion = initialize(build_run(Report()))

    assert expansion.expanded_paths == frozenset()
    assert expansion.default_selection == ()
