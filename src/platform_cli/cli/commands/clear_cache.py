"""Clear the local API response cache."""

import logging

import click

from ..api.client import PlatformClient

logger = logging.getLogger(__name__)


@click.command("clear-cache")
def clear_cache() -> None:
    """Clear the CLI cache."""
    removed = PlatformClient().clear_cache()
    logger.debug("Removed %d cached responses", removed)
    click.echo("All caches have been cleared", err=True)
