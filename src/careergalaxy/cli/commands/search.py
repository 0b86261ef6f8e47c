"""
Search Command - Find job titles in the taxonomy.
"""

import sys
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from ...core.taxonomy import TaxonomyError
from ..utils import echo_error, echo_warning, load_taxonomy, taxonomy_option

console = Console()


@click.command()
@click.argument("query")
@taxonomy_option
@click.option("-n", "--limit", default=20, show_default=True, help="Maximum results to show")
def search(query: str, taxonomy_file: Optional[str], limit: int) -> None:
    """
    Search job titles by name, description or search keyword.

    \b
    Examples:
      galaxy search engineer
      galaxy search "data science" --limit 5
    """
    try:
        taxonomy = load_taxonomy(taxonomy_file)
    except TaxonomyError as e:
        echo_error(str(e))
        sys.exit(1)

    matches = taxonomy.search_job_titles(query)
    if not matches:
        echo_warning(f"No job titles match '{query}'")
        return

    table = Table(title=f"{len(matches)} job title(s) matching '{query}'")
    table.add_column("Job Title", style="bold")
    table.add_column("Path", style="dim")
    table.add_column("Salary", style="green")
    table.add_column("Level")

    for node in matches[:limit]:
        breadcrumb = " › ".join(n.name for n in taxonomy.lineage(node.id)[:-1])
        table.add_row(
            node.name,
            breadcrumb,
            node.typical_salary or "",
            node.experience_level.value if node.experience_level else "",
        )

    console.print(table)
    if len(matches) > limit:
        click.echo(f"  ... and {len(matches) - limit} more")
