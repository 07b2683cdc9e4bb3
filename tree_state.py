"""
Navigation state for the result tree.

Paths are tuples of node identifiers from a root down to a node. Only the
main loop mutates a TreeState; navigation past the tree bounds is a no-op.
"""

from typing import Iterable, List, Optional, Set, Tuple

from selection_policy import AutoExpansion
from tree_builder import TreeNode

Path = Tuple[str, ...]


class TreeState:
    """Selection cursor and opened paths of the result tree."""

    def __init__(self, selected: Path = (), opened: Optional[Iterable[Path]] = None):
        self.selected: Path = tuple(selected)
        self.opened: Set[Path] = set(opened or ())

    @classmethod
    def from_expansion(cls, expansion: AutoExpansion) -> "TreeState":
        return cls(selected=expansion.default_selection, opened=expansion.expanded_paths)

    @property
    def selected_id(self) -> Optional[str]:
        """Identifier of the selected node, None when nothing is selected."""
        return self.selected[-1] if self.selected else None

    def is_open(self, path: Path) -> bool:
        return tuple(path) in self.opened

    def open(self, path: Path) -> None:
        self.opened.add(tuple(path))

    def close(self, path: Path) -> None:
        self.opened.discard(tuple(path))

    def select(self, path: Path) -> None:
        self.selected = tuple(path)

    def visible_paths(self, tree: List[TreeNode]) -> List[Path]:
        """Depth-first paths of the rows currently shown, descending only into opened nodes."""
        paths: List[Path] = []

        def walk(nodes: List[TreeNode], parent: Path) -> None:
            for node in nodes:
                path = parent + (node.id,)
                paths.append(path)
                if node.children and path in self.opened:
                    walk(node.children, path)

        walk(tree, ())
        return paths

    def key_down(self, tree: List[TreeNode]) -> None:
        visible = self.visible_paths(tree)
        if not visible:
            return
        if self.selected in visible:
            index = min(visible.index(self.selected) + 1, len(visible) - 1)
        else:
            index = 0
        self.selected = visible[index]

    def key_up(self, tree: List[TreeNode]) -> None:
        visible = self.visible_paths(tree)
        if not visible:
            return
        if self.selected in visible:
            index = max(visible.index(self.selected) - 1, 0)
        else:
            index = len(visible) - 1
        self.selected = visible[index]

    def key_right(self, tree: List[TreeNode]) -> None:
        node = find_node(tree, self.selected)
        if node is not None and node.children:
            self.open(self.selected)

    def key_left(self, tree: List[TreeNode]) -> None:
        if not self.selected:
            return
        if self.selected in self.opened:
            self.close(self.selected)
        elif len(self.selected) > 1:
            self.selected = self.selected[:-1]


def find_node(tree: List[TreeNode], path: Path) -> Optional[TreeNode]:
    """Resolve a path to its node, None when the path does not exist."""
    nodes = tree
    node: Optional[TreeNode] = None
    for identifier in path:
        node = next((n for n in nodes if n.id == identifier), None)
        if node is None:
            return None
        nodes = node.children
    return node
