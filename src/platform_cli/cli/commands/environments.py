"""CLI commands for project environments."""

import json

import click

from ..api.client import PlatformAPIError, PlatformClient
from ..utils import echo_properties, echo_table, format_timestamp
from . import exit_with_api_error


@click.group()
def environments():
    """List and inspect project environments."""
    pass


@environments.command("list")
@click.argument("project_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--refresh", is_flag=True, help="Bypass the local cache")
def list_environments(project_id: str, as_json: bool, refresh: bool):
    """List the environments of a project."""
    client = PlatformClient(use_cache=not refresh)

    try:
        env_list = client.list_environments(project_id)
    except PlatformAPIError as e:
        exit_with_api_error(e, not_found=f"Project '{project_id}' not found")

    if as_json:
        click.echo(json.dumps([e.model_dump() for e in env_list], indent=2))
        return

    if not env_list:
        click.echo(f"No environments found for project '{project_id}'")
        return

    echo_table(
        ["ID", "Title", "Status", "Parent"],
        [[e.id, e.title or e.name, e.status, e.parent or ""] for e in env_list],
    )


@environments.command("get")
@click.argument("project_id")
@click.argument("environment_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--refresh", is_flag=True, help="Bypass the local cache")
def get_environment(project_id: str, environment_id: str, as_json: bool, refresh: bool):
    """Show the details of an environment."""
    client = PlatformClient(use_cache=not refresh)

    try:
        env = client.get_environment(project_id, environment_id)
    except PlatformAPIError as e:
        exit_with_api_error(
            e, not_found=f"Environment '{environment_id}' not found in '{project_id}'"
        )

    if as_json:
        click.echo(json.dumps(env.model_dump(), indent=2))
        return

    echo_properties(
        {
            "ID": env.id,
            "Title": env.title or env.name,
            "Status": env.status,
            "Parent": env.parent or "",
            "Machine name": env.machine_name,
            "Created": format_timestamp(env.created_at),
            "Updated": format_timestamp(env.updated_at),
        }
    )
