"""Authenticate with the hosting platform.

Usage:
    platform login                     # Prompt for an API token
    platform login --api-token TOKEN   # Non-interactive
"""

import sys

import click
import questionary

from ..api.auth import clear_credentials, is_authenticated, save_credentials
from ..api.client import PlatformClient
from ..api.types import Credentials
from . import PROMPT_STYLE


@click.command()
@click.option("--api-token", help="API token for authentication")
def login(api_token: str | None) -> None:
    """Log in to the platform with an API token.

    Credentials are stored in ~/.platform-cli/credentials.json.
    """
    if is_authenticated() and not api_token:
        client = PlatformClient(use_cache=False)
        if client.validate_token():
            click.echo("Already logged in. Use 'platform logout' to sign out.")
            return

    if not api_token:
        if not sys.stdin.isatty():
            click.echo("Error: --api-token is required", err=True)
            sys.exit(1)
        api_token = questionary.password("API token:", style=PROMPT_STYLE).ask()
        if not api_token:
            click.echo("Cancelled.", err=True)
            sys.exit(1)

    save_credentials(Credentials(token=api_token))

    client = PlatformClient(use_cache=False)
    if not client.validate_token():
        clear_credentials()
        click.echo("Error: Invalid API token", err=True)
        sys.exit(1)

    # Responses cached under a previous account are no longer relevant
    client.clear_cache()
    account = client.get_account()
    name = account.display_name or account.username or account.id
    click.echo(f"Logged in as {name}.")
