"""
Stats Command - Summarize the merged galaxy.
"""

import json
import sys
from typing import Optional

import click

from ...config import level_name
from ..utils import build_session, paths_option, settings_option, taxonomy_option


@click.command()
@taxonomy_option
@settings_option
@paths_option
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def stats(
    taxonomy_file: Optional[str],
    settings_file: Optional[str],
    paths_file: Optional[str],
    as_json: bool,
) -> None:
    """Show node counts per level, injected and recommended nodes."""
    session = build_session(taxonomy_file, settings_file, paths_file)
    if session is None:
        sys.exit(1)

    data = session.stats()
    problems = session.taxonomy.validate()
    data["taxonomy_problems"] = len(problems)

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    click.echo()
    click.echo(f"📊 {click.style('Galaxy Statistics', bold=True)}")
    click.echo("═" * 40)
    click.echo(f"Nodes:          {data['total_nodes']}")
    click.echo(f"Links:          {data['total_edges']}")
    for level, count in data["nodes_by_level"].items():
        click.echo(f"  {level_name(level) + ':':<14}{count}")
    click.echo(f"Paths:          {data['paths']}")
    click.echo(f"Injected:       {data['injected']}")
    click.echo(f"Recommended:    {data['recommended']}")
    if data["merge_issues"]:
        click.echo(click.style(f"Merge issues:   {data['merge_issues']}", fg="yellow"))
    if data["dropped_by_layout"]:
        click.echo(click.style(f"Unreachable:    {data['dropped_by_layout']}", fg="yellow"))
    if problems:
        click.echo(click.style(f"Taxonomy problems: {len(problems)}", fg="red"))
        for problem in problems[:10]:
            click.echo(f"  - {problem}")
