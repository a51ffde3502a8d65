"""CLI commands for managing project integrations.

Input for ``add`` and ``update`` goes through the integration form, so
invalid values are rejected before anything is sent to the API.
"""

import json
import sys
from collections.abc import Callable
from typing import Any

import click
import questionary

from ..api.client import PlatformAPIError, PlatformClient
from ..forms import BooleanField, Field, Form, FormError, OptionsField
from ..integrations import format_integration, get_form, integration_values
from ..utils import Spinner, echo_properties, echo_table
from . import PROMPT_STYLE, exit_with_api_error


def form_options(form: Form) -> Callable:
    """Add one ``--option`` per form field to a command.

    Every option is a plain string; conversion and validation are the
    form's job.
    """

    def decorator(f: Callable) -> Callable:
        for field in reversed(list(form)):
            f = click.option(
                f"--{field.option_name}",
                field.key,
                default=None,
                help=field.description or field.name,
            )(f)
        return f

    return decorator


def prompt_field(field: Field) -> Any:
    """Ask for a missing field value on the terminal.

    Returns:
        The raw answer, or None to use the field default.
    """
    if isinstance(field, OptionsField):
        answer = questionary.select(
            f"{field.name}:", choices=field.options, style=PROMPT_STYLE
        ).ask()
    elif isinstance(field, BooleanField):
        answer = questionary.confirm(
            f"{field.name}?", default=bool(field.default), style=PROMPT_STYLE
        ).ask()
    else:
        default = field.format_value(field.default) if field.default else ""

        def validate(value: str) -> bool | str:
            if not value:
                return not field.required or "A value is required"
            return field.check(value)

        answer = questionary.text(
            f"{field.name}:", default=default, validate=validate, style=PROMPT_STYLE
        ).ask()

    if answer is None:
        click.echo("Cancelled.", err=True)
        sys.exit(1)
    if answer == "":
        return None
    return answer


def _summary(values: dict[str, Any]) -> str:
    for key in ("repository", "url", "room"):
        if values.get(key):
            return str(values[key])
    return ""


@click.group()
def integrations():
    """Manage project integrations (GitHub, HipChat, webhooks)."""
    pass


@integrations.command("list")
@click.argument("project_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--refresh", is_flag=True, help="Bypass the local cache")
def list_integrations(project_id: str, as_json: bool, refresh: bool):
    """List the integrations of a project."""
    client = PlatformClient(use_cache=not refresh)

    try:
        integration_list = client.list_integrations(project_id)
    except PlatformAPIError as e:
        exit_with_api_error(e, not_found=f"Project '{project_id}' not found")

    if as_json:
        click.echo(
            json.dumps([i.model_dump(by_alias=True) for i in integration_list], indent=2)
        )
        return

    if not integration_list:
        click.echo(f"No integrations found for project '{project_id}'")
        click.echo(f"Add one with: platform integrations add {project_id} --type TYPE")
        return

    echo_table(
        ["ID", "Type", "Summary"],
        [[i.id, i.type, _summary(i.properties)] for i in integration_list],
    )


@integrations.command("get")
@click.argument("project_id")
@click.argument("integration_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--refresh", is_flag=True, help="Bypass the local cache")
def get_integration(project_id: str, integration_id: str, as_json: bool, refresh: bool):
    """Show the details of an integration."""
    client = PlatformClient(use_cache=not refresh)

    try:
        integration = client.get_integration(project_id, integration_id)
    except PlatformAPIError as e:
        exit_with_api_error(e, not_found=f"Integration '{integration_id}' not found")

    echo_properties(format_integration(integration), as_json=as_json)


@integrations.command("add")
@click.argument("project_id")
@form_options(get_form())
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def add_integration(project_id: str, as_json: bool, **values: str | None):
    """Add an integration to a project.

    \b
    Example:
        platform integrations add my-project --type github \\
            --repository https://github.com/user/repo --token TOKEN
        platform integrations add my-project --type webhook \\
            --url https://example.com/hook --events environment.push
    """
    form = get_form()
    interactive = sys.stdin.isatty() and not as_json

    try:
        resolved = form.resolve(values, prompter=prompt_field if interactive else None)
    except FormError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    client = PlatformClient()
    status = Spinner()
    if not as_json:
        status.start(f"Adding {resolved['type']} integration...")

    try:
        integration = client.create_integration(project_id, resolved)
    except PlatformAPIError as e:
        if not as_json:
            status.fail()
        exit_with_api_error(e, not_found=f"Project '{project_id}' not found")

    if as_json:
        click.echo(json.dumps(integration.model_dump(by_alias=True), indent=2))
        return

    status.done()
    click.echo(f"Created integration {integration.id} (type: {integration.type})")
    echo_properties(format_integration(integration, form))


@integrations.command("update")
@click.argument("project_id")
@click.argument("integration_id")
@form_options(get_form())
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def update_integration(
    project_id: str, integration_id: str, as_json: bool, **values: str | None
):
    """Update the given properties of an integration."""
    form = get_form()
    client = PlatformClient(use_cache=False)

    try:
        integration = client.get_integration(project_id, integration_id)
    except PlatformAPIError as e:
        exit_with_api_error(e, not_found=f"Integration '{integration_id}' not found")

    current = integration_values(integration)
    try:
        resolved = form.resolve(values, partial=True, context=current)
    except FormError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    changes = {k: v for k, v in resolved.items() if current.get(k) != v}
    if not changes:
        click.echo("No changed values were provided to update.", err=True)
        sys.exit(1)

    try:
        integration = client.update_integration(project_id, integration_id, changes)
    except PlatformAPIError as e:
        exit_with_api_error(e, not_found=f"Integration '{integration_id}' not found")

    if as_json:
        click.echo(json.dumps(integration.model_dump(by_alias=True), indent=2))
        return

    click.echo(f"Updated integration {integration.id}")
    echo_properties(format_integration(integration, form))


@integrations.command("delete")
@click.argument("project_id")
@click.argument("integration_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def delete_integration(project_id: str, integration_id: str, yes: bool):
    """Delete an integration from a project."""
    if not yes:
        if not click.confirm(f"Delete integration '{integration_id}'?"):
            click.echo("Cancelled")
            return

    client = PlatformClient()

    try:
        client.delete_integration(project_id, integration_id)
    except PlatformAPIError as e:
        exit_with_api_error(e, not_found=f"Integration '{integration_id}' not found")

    click.echo(f"Deleted integration '{integration_id}'")
