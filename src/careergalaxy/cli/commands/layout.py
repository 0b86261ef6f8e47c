"""
Layout Command - Export positioned nodes as JSON.
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click

from ..utils import build_session, echo_info, echo_success, paths_option, settings_option, taxonomy_option


@click.command()
@taxonomy_option
@settings_option
@paths_option
@click.option("-o", "--output", "output_file", default=None, type=click.Path(),
              help="Write JSON here instead of stdout")
@click.option("--visible-only", is_flag=True, help="Only export the initially visible roots")
def layout(
    taxonomy_file: Optional[str],
    settings_file: Optional[str],
    paths_file: Optional[str],
    output_file: Optional[str],
    visible_only: bool,
) -> None:
    """
    Compute the radial layout and dump it as JSON.

    The export holds positioned nodes (with recommendation markings),
    parent -> child links, and the default viewport window.
    """
    session = build_session(taxonomy_file, settings_file, paths_file)
    if session is None:
        sys.exit(1)

    nodes = session.visible_nodes() if visible_only else session.nodes
    links = session.visible_links() if visible_only else session.links
    payload = {
        "nodes": [n.model_dump(mode="json") for n in nodes],
        "links": [l.model_dump(mode="json") for l in links],
        "root_ids": list(session.disclosure.root_ids),
        "injected_ids": list(session.merge_result.injected_ids),
        "window": session.viewport.window.model_dump(mode="json"),
        "view_box": session.viewport.window.as_view_box(),
    }
    text = json.dumps(payload, indent=2)

    if output_file is None:
        click.echo(text)
        return

    out = Path(output_file)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
    echo_success(f"Wrote {len(nodes)} nodes and {len(links)} links to {out}")
    if session.merge_result.injected_ids:
        echo_info(f"{len(session.merge_result.injected_ids)} node(s) injected from AI paths")
