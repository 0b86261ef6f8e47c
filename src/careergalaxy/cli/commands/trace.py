"""
Trace Command - Show each AI path as a lineage from its root.
"""

import sys
from typing import Optional

import click

from ...config import level_name
from ...core.annotate import lineage
from ..utils import build_session, echo_warning, settings_option, taxonomy_option


@click.command()
@taxonomy_option
@settings_option
@click.option("-p", "--paths", "paths_file", required=True, type=click.Path(),
              help="JSON or YAML file with AI career paths")
def trace(taxonomy_file: Optional[str], settings_file: Optional[str], paths_file: str) -> None:
    """
    Trace every AI path through the merged taxonomy.

    Each path is shown from the root of its target role down to the role
    itself, flagging nodes the path injected.
    """
    session = build_session(taxonomy_file, settings_file, paths_file)
    if session is None:
        sys.exit(1)

    if not session.paths:
        echo_warning("No paths to trace")
        return

    by_id = {n.id: n for n in session.nodes}

    click.echo()
    click.echo(f"🔭 {click.style('Career Path Trace', bold=True)}")
    click.echo("═" * 60)

    for i, path in enumerate(session.paths):
        click.echo()
        header = f"Path {i + 1}: {path.type}"
        click.echo(click.style(header, fg="cyan", bold=True))

        ids = [node_id for node_id in path.node_ids(i) if node_id in by_id]
        if not ids:
            echo_warning("No node of this path made it into the galaxy")
            continue

        chain = lineage(ids[-1], by_id)
        for j, node_id in enumerate(chain):
            node = by_id[node_id]
            connector = "└─" if j == len(chain) - 1 else "├─"
            name = click.style(node.name, fg="green" if node_id in ids else "white")
            suffix = click.style(f" [{level_name(node.level)}]", dim=True)
            if node.injected:
                suffix += click.style(" (AI)", fg="magenta")
            click.echo(f"    {connector} {name}{suffix}")

        if path.reasoning:
            click.echo(f"    Why: {path.reasoning}")
        if path.search_query:
            click.echo(f"    Search: {path.search_query}")
