"""Shared fixtures for platform-cli tests."""

from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def cli_home(tmp_path):
    """Keep credentials and cache inside a temporary home directory."""
    home = tmp_path / ".platform-cli"
    with (
        patch("platform_cli.cli.api.auth.CREDENTIALS_FILE", home / "credentials.json"),
        patch("platform_cli.cli.api.cache.CACHE_DIR", home / "cache"),
    ):
        yield home
