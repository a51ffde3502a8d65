"""Log out from the hosting platform.

The `platform logout` command clears stored credentials and the response cache.
"""

import click

from ..api.auth import clear_credentials, get_credentials
from ..api.client import PlatformClient


@click.command()
def logout() -> None:
    """Log out and remove stored credentials.

    Clears ~/.platform-cli/credentials.json and the local response cache.
    """
    if not get_credentials():
        click.echo("Not logged in.")
        return

    clear_credentials()
    PlatformClient().clear_cache()
    click.echo("Logged out successfully.")
