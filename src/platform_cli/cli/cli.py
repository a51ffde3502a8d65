#!/usr/bin/env python3
"""platform - Command-line client for the application hosting platform

Usage:
    platform login [--api-token=TOKEN]
    platform logout
    platform clear-cache
    platform projects list|get
    platform environments list|get
    platform integrations list|get|add|update|delete
    platform build [--dir=PATH]
"""

import logging
import sys
from importlib.metadata import PackageNotFoundError, version

import click
import requests

from .api.client import PlatformAPIError
from .commands.build import build
from .commands.clear_cache import clear_cache
from .commands.environments import environments
from .commands.integrations import integrations
from .commands.login import login
from .commands.logout import logout
from .commands.projects import projects

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _version() -> str:
    try:
        return version("platform-cli")
    except PackageNotFoundError:
        return "unknown"


@click.group()
@click.version_option(version=_version())
@click.option("--verbose", "-v", is_flag=True, help="Show debug output")
def cli(verbose: bool):
    """Manage projects, environments and integrations, and build locally."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


# Authentication
cli.add_command(login)
cli.add_command(logout)

# Cache
cli.add_command(clear_cache)
cli.add_command(clear_cache, name="clearcache")
cli.add_command(clear_cache, name="cc")

# Remote resources
cli.add_command(projects)
cli.add_command(environments)
cli.add_command(integrations)

# Local
cli.add_command(build)


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except PlatformAPIError as e:
        click.echo(f"Error: {e.message}", err=True)
        hint = {
            401: "Hint: Run 'platform login' to authenticate.",
            403: "Hint: You don't have permission for this action.",
            404: "Hint: Run 'platform projects list' to see your projects.",
            429: "Hint: Too many requests. Please wait and try again.",
            500: "Hint: This is a server issue. Please try again later.",
            502: "Hint: The server is temporarily unavailable. Please try again later.",
            503: "Hint: The service is temporarily unavailable. Please try again later.",
        }.get(e.status_code)
        if hint:
            click.echo(hint, err=True)
        sys.exit(1)
    except requests.exceptions.SSLError:
        click.echo("Error: SSL certificate verification failed.", err=True)
        sys.exit(1)
    except requests.ConnectionError:
        click.echo("Error: Could not connect to the Platform API.", err=True)
        click.echo("Hint: Check your internet connection and try again.", err=True)
        sys.exit(1)
    except requests.RequestException:
        click.echo("Error: Network request failed.", err=True)
        sys.exit(1)
    except (click.Abort, KeyboardInterrupt):
        click.echo(err=True)
        sys.exit(130)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        click.echo(
            "Hint: If this persists, try updating with 'pip install -U platform-cli'.",
            err=True,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
