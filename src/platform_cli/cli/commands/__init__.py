"""CLI command implementations."""

import sys
from typing import NoReturn

import click
from questionary import Style

from ..api.client import PlatformAPIError

# Pastel prompt style
PROMPT_STYLE = Style(
    [
        ("qmark", "fg:#b48ead"),  # soft lavender question mark
        ("question", "fg:#d8dee9 bold"),  # light grey-white question text
        ("answer", "fg:#e8915a"),  # warm orange answers
        ("pointer", "fg:#b48ead bold"),  # lavender pointer
        ("highlighted", "fg:#88c0d0 bold"),  # pastel cyan for focused item
        ("instruction", "fg:#4c566a"),  # muted grey instructions
    ]
)


def exit_with_api_error(e: PlatformAPIError, not_found: str | None = None) -> NoReturn:
    """Report an API error the same way from every command and exit 1."""
    if e.status_code == 401:
        click.echo("Not authenticated. Run 'platform login' first.", err=True)
    elif e.status_code == 404 and not_found:
        click.echo(not_found, err=True)
    elif e.status_code == 422:
        click.echo(f"Validation error: {e.message}", err=True)
    else:
        click.echo(f"Error: {e.message}", err=True)
    sys.exit(1)
