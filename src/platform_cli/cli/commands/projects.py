"""CLI commands for projects."""

import json

import click

from ..api.client import PlatformAPIError, PlatformClient
from ..utils import echo_properties, echo_table, format_timestamp
from . import exit_with_api_error


@click.group()
def projects():
    """List and inspect projects."""
    pass


@projects.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--refresh", is_flag=True, help="Bypass the local cache")
def list_projects(as_json: bool, refresh: bool):
    """List the projects you have access to."""
    client = PlatformClient(use_cache=not refresh)

    try:
        project_list = client.list_projects()
    except PlatformAPIError as e:
        exit_with_api_error(e)

    if as_json:
        click.echo(json.dumps([p.model_dump() for p in project_list], indent=2))
        return

    if not project_list:
        click.echo("You do not have any projects yet.")
        return

    echo_table(
        ["ID", "Title", "Region", "Created"],
        [
            [p.id, p.title, p.region, format_timestamp(p.created_at, short=True)]
            for p in project_list
        ],
    )


@projects.command("get")
@click.argument("project_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--refresh", is_flag=True, help="Bypass the local cache")
def get_project(project_id: str, as_json: bool, refresh: bool):
    """Show the details of a project."""
    client = PlatformClient(use_cache=not refresh)

    try:
        project = client.get_project(project_id)
    except PlatformAPIError as e:
        exit_with_api_error(e, not_found=f"Project '{project_id}' not found")

    if as_json:
        click.echo(json.dumps(project.model_dump(), indent=2))
        return

    echo_properties(
        {
            "ID": project.id,
            "Title": project.title,
            "Region": project.region,
            "Status": project.status,
            "Default branch": project.default_branch,
            "Created": format_timestamp(project.created_at),
            "Updated": format_timestamp(project.updated_at),
        }
    )
