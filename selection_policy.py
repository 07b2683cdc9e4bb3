"""
Selection and auto-expand policy for junit-dashboard.

When a fresh TestRun arrives, every suite that contains a failing or
erroring case starts expanded and the first root is selected.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Set, Tuple

from tree_builder import TestRun, TreeNode

Path = Tuple[str, ...]


@dataclass(frozen=True)
class AutoExpansion:
    """Initial navigation state derived from a run."""
    expanded_paths: FrozenSet[Path] = field(default_factory=frozenset)
    default_selection: Path = ()

    @property
    def expanded_identifiers(self) -> Set[str]:
        """Identifiers of the expanded internal nodes."""
        return {path[-1] for path in self.expanded_paths}


def contains_failure(node: TreeNode) -> bool:
    """True when the node is a failing leaf or has one among its descendants."""
    if node.case is not None:
        return node.case.status.is_failing
    return any(contains_failure(child) for child in node.children)


def initialize(run: TestRun, selected: Path = ()) -> AutoExpansion:
    """
    Decide which suites start expanded and what is selected.

    Args:
        run: Freshly built run
        selected: Current selection; empty when nothing is selected

    Returns:
        AutoExpansion with the expanded suite paths and the selection to use
    """
    expanded: Set[Path] = set()
    for root in run.tree:
        _expand_failed(root, (), expanded)

    selection = selected
    if not selection and run.tree:
        selection = (run.tree[0].id,)

    return AutoExpansion(expanded_paths=frozenset(expanded), default_selection=selection)


def _expand_failed(node: TreeNode, parent: Path, expanded: Set[Path]) -> bool:
    # Post-order: a suite opens when any child subtree reports a failure
    if node.case is not None:
        return node.case.status.is_failing

    path = parent + (node.id,)
    failed = False
    for child in node.children:
        if _expand_failed(child, path, expanded):
            failed = True
    if failed:
        expanded.add(path)
    return failed
