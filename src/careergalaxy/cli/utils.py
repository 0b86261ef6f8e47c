"""
CLI Utilities - Shared helper functions for command line operations.

Formatted printing plus the loaders every command needs: taxonomy,
settings, AI paths, and a ready-to-query GalaxySession.
"""

import json
from pathlib import Path
from typing import List, Optional

import click
import yaml

from ..core.merge import parse_paths
from ..core.session import GalaxySession
from ..core.settings import DEFAULT_SETTINGS_FILE, GalaxySettings
from ..core.taxonomy import TaxonomyStore
from ..core.types import PathSpec

# Click option shared by every command that reads a taxonomy
taxonomy_option = click.option(
    "-t", "--taxonomy", "taxonomy_file", default=None, type=click.Path(),
    help="Taxonomy YAML file (default: bundled taxonomy)",
)
settings_option = click.option(
    "-s", "--settings", "settings_file", default=DEFAULT_SETTINGS_FILE, type=click.Path(),
    help="Settings TOML file",
)
paths_option = click.option(
    "-p", "--paths", "paths_file", default=None, type=click.Path(),
    help="JSON or YAML file with AI career paths",
)


def echo_success(message: str) -> None:
    """Print a success message with a green checkmark."""
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """Print an error message with a red cross to stderr."""
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    click.echo(click.style(f"⚠️  {message}", fg="yellow"), err=True)


def echo_info(message: str) -> None:
    click.echo(click.style(f"   {message}", dim=True))


def load_taxonomy(taxonomy_file: Optional[str] = None) -> TaxonomyStore:
    """
    Load a taxonomy file, or the bundled taxonomy when no file is given.

    Raises:
        TaxonomyError: If the file cannot be read or parsed.
    """
    if taxonomy_file is None:
        return TaxonomyStore.default()
    return TaxonomyStore.load(taxonomy_file)


def load_settings(settings_file: Optional[str] = None) -> GalaxySettings:
    if settings_file is None:
        return GalaxySettings()
    return GalaxySettings.load(settings_file)


def load_paths(paths_file: Optional[str]) -> List[PathSpec]:
    """
    Read AI paths from a JSON or YAML file.

    The file holds either a list of paths or a mapping with a ``paths`` key.
    Individual invalid paths are reported as warnings and skipped.

    Raises:
        ValueError: If the file is missing or cannot be parsed.
    """
    if paths_file is None:
        return []

    path = Path(paths_file)
    try:
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Failed to parse {path}: {e}")

    if isinstance(data, dict):
        data = data.get("paths", [])
    if not isinstance(data, list):
        raise ValueError(f"Failed to parse {path}: expected a list of paths")

    paths, errors = parse_paths(data)
    for error in errors:
        echo_warning(f"Skipping invalid {error}")
    return paths


def build_session(
    taxonomy_file: Optional[str] = None,
    settings_file: Optional[str] = None,
    paths_file: Optional[str] = None,
) -> Optional[GalaxySession]:
    """
    Load every input and run the pipeline.

    Returns:
        Optional[GalaxySession]: The session, or None if an input failed to load.
    """
    try:
        taxonomy = load_taxonomy(taxonomy_file)
        settings = load_settings(settings_file)
        paths = load_paths(paths_file)
    except ValueError as e:
        echo_error(str(e))
        return None

    session = GalaxySession(
        taxonomy=taxonomy,
        paths=paths,
        layout_config=settings.layout,
        viewport_config=settings.viewport,
        level_policy=settings.level_policy,
    )
    for issue in session.merge_result.issues:
        echo_warning(f"Skipped {issue}")
    return session
