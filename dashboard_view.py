"""
Rich renderables for junit-dashboard.

render(app) builds the full screen from the current DashboardApp state:
header, result tree (or the idle/error panel), totals bar and detail panel.
"""

from typing import List

from rich import box
from rich.console import RenderableType
from rich.layout import Layout
from rich.panel import Panel
from rich.text import Text
from rich.tree import Tree

from app_state import DashboardApp
from tree_builder import TestRun, TreeNode
from tree_state import Path, TreeState

SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
TITLE = "Test Results"
HIGHLIGHT_STYLE = "bold on grey50"


def render_header(app: DashboardApp) -> Panel:
    title = Text(app.target_path.name)
    if app.is_running:
        frame = SPINNER_FRAMES[app.spinner_frame % len(SPINNER_FRAMES)]
        title = Text.assemble((f"{frame} ", "cyan"), title)
    return Panel(title, box=box.ROUNDED)


def render_message(message: str, style: str) -> Panel:
    """Bordered, centered message used for the idle and error states."""
    return Panel(
        Text(message, justify="center", style=style),
        title=TITLE,
        box=box.ROUNDED,
    )


def render_tree(run: TestRun, state: TreeState) -> Panel:
    tree = Tree(TITLE, hide_root=True, guide_style="dim")
    _add_nodes(tree, run.tree, (), state)
    return Panel(tree, title=TITLE, box=box.ROUNDED)


def _add_nodes(parent: Tree, nodes: List[TreeNode], path: Path, state: TreeState) -> None:
    for node in nodes:
        node_path = path + (node.id,)
        label = node.label.copy()
        if node.children:
            marker = "▼ " if state.is_open(node_path) else "▶ "
            label = Text.assemble(marker, label)
        if node_path == state.selected:
            label.stylize(HIGHLIGHT_STYLE)
        branch = parent.add(label)
        if node.children and state.is_open(node_path):
            _add_nodes(branch, node.children, node_path, state)


def render_totals(run: TestRun) -> Panel:
    totals = run.totals
    line = Text.assemble(
        (f"{totals.passes}● ", "green"),
        (f"{totals.failures}● ", "red"),
        (f"{totals.skipped}●", "yellow"),
    )
    return Panel(line, box=box.ROUNDED)


def render_detail(app: DashboardApp) -> Panel:
    return Panel(Text(app.detail_text()), box=box.ROUNDED)


def render(app: DashboardApp) -> RenderableType:
    """Build the whole screen for the current state."""
    layout = Layout()
    header = Layout(render_header(app), name="header", size=3)

    run = app.run
    if run is None:
        if app.error is not None:
            body = render_message(str(app.error), "red")
        else:
            body = render_message("Press 'r' to run test", "white")
        layout.split_column(header, Layout(body, name="body"))
        return layout

    layout.split_column(
        header,
        Layout(render_tree(run, app.tree_state), name="tree", ratio=3),
        Layout(render_totals(run), name="totals", size=3),
        Layout(render_detail(app), name="detail", ratio=2),
    )
    return layout
