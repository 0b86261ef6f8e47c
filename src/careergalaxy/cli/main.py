"""
galaxy CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import logging

import click

from .commands import layout, search, stats, trace, tree


@click.group()
@click.version_option(package_name="careergalaxy")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """galaxy: Radial Career Taxonomy Explorer.

    Merges AI-proposed career paths into the role taxonomy and shows
    the result the way the galaxy view lays it out.

    \b
    Quick Start:
      galaxy tree --expand sc-tech
      galaxy trace --paths paths.json
      galaxy layout --paths paths.json -o galaxy.json
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# Register commands
main.add_command(tree.tree)
main.add_command(layout.layout)
main.add_command(trace.trace)
main.add_command(stats.stats)
main.add_command(search.search)

if __name__ == "__main__":
    main()
