"""Build a project locally."""

import sys
from pathlib import Path

import click

from ..local import AppConfigError, BuildError, LocalBuilder


@click.command("build")
@click.option(
    "--dir",
    "project_dir",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project directory (default: current directory)",
)
@click.option("--no-link", is_flag=True, help="Do not link the web root to the build")
def build(project_dir: str, no_link: bool):
    """Build the project's applications locally.

    The toolstack is taken from .platform.app.yaml or detected from the
    files in each application, then its package manager is run.

    \b
    Example:
        platform build
        platform build --dir ./my-project
    """
    project_root = Path(project_dir)
    builder = LocalBuilder()

    try:
        results = builder.build_project(project_root, link=not no_link)
    except AppConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except BuildError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(1)

    if not results:
        click.echo("No toolstack found for this project; nothing to build.", err=True)
        return

    for result in results:
        click.echo(f"Built '{result.app_name}' with {result.toolstack}")
    if not no_link:
        click.echo(f"Web root: {project_root / builder.web_root}")
