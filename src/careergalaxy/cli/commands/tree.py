"""
Tree Command - Render the disclosed part of the galaxy as a tree.
"""

import sys
from typing import Tuple

import click
from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from ...config import level_name
from ...core.annotate import primary_color
from ...core.session import GalaxySession
from ...core.types import PositionedNode
from ..utils import build_session, echo_warning, paths_option, settings_option, taxonomy_option

console = Console()


@click.command()
@taxonomy_option
@settings_option
@paths_option
@click.option("-e", "--expand", "expand_ids", multiple=True,
              help="Node id to expand (repeatable, applied in order)")
@click.option("--all", "show_all", is_flag=True, help="Show every node")
@click.option("--recommended", "recommended_only", is_flag=True,
              help="Open every recommended branch")
def tree(
    taxonomy_file: str,
    settings_file: str,
    paths_file: str,
    expand_ids: Tuple[str, ...],
    show_all: bool,
    recommended_only: bool,
) -> None:
    """
    Show the taxonomy as a tree.

    By default only the roots are shown, as in a freshly opened galaxy.

    \b
    Examples:
      galaxy tree --expand sc-tech --expand ind-software
      galaxy tree --paths paths.json --recommended
    """
    session = build_session(taxonomy_file, settings_file, paths_file)
    if session is None:
        sys.exit(1)

    if recommended_only:
        for node in session.recommended_nodes:
            session.disclosure.expand(node.id)

    for node_id in expand_ids:
        if not session.disclosure.expand(node_id) and not session.disclosure.is_expanded(node_id):
            echo_warning(f"Cannot expand {node_id} (unknown, hidden, or without children)")

    visible = None if show_all else session.disclosure.visible_ids
    console.print(build_tree(session, visible))


def build_tree(session: GalaxySession, visible=None) -> Tree:
    """Build a rich Tree of ``session`` restricted to ``visible`` ids."""
    root = Tree(Text("Career Galaxy", style="bold"))
    stack = [(root, node_id) for node_id in reversed(session.disclosure.root_ids)]
    seen = set()
    # Depth-first, keeping child order
    while stack:
        parent_branch, node_id = stack.pop()
        node = session.get_node(node_id)
        if node is None or node_id in seen or (visible is not None and node_id not in visible):
            continue
        seen.add(node_id)
        branch = parent_branch.add(_label(node))
        for child_id in reversed(node.child_ids):
            stack.append((branch, child_id))
    return root


def _label(node: PositionedNode) -> Text:
    label = Text()
    label.append(node.name, style=f"bold {node.color}" if node.level == 0 else node.color)
    label.append(f"  {node.id}", style="dim")
    if node.level > 0:
        label.append(f"  [{level_name(node.level)}]", style="dim")
    if node.injected:
        label.append("  AI", style="italic magenta")
    if node.recommended:
        label.append(f"  ★ {', '.join(node.path_types)}", style=primary_color(node))
    if node.typical_salary:
        label.append(f"  {node.typical_salary}", style="green")
    return label
