"""Platform API configuration constants."""

import os
from pathlib import Path

from platform_cli import __version__

PLATFORM_API_URL = os.environ.get(
    "PLATFORM_CLI_API_URL", "https://api.platform.example.com"
)
# Local development: point at a mock API
# PLATFORM_API_URL = os.environ.get("PLATFORM_CLI_API_URL", "http://localhost:8000")
PLATFORM_CLI_HOME = Path(
    os.environ.get("PLATFORM_CLI_HOME", str(Path.home() / ".platform-cli"))
)
CREDENTIALS_FILE = PLATFORM_CLI_HOME / "credentials.json"
CACHE_DIR = PLATFORM_CLI_HOME / "cache"
CACHE_TTL = int(os.environ.get("PLATFORM_CLI_CACHE_TTL", "600"))  # seconds
USER_AGENT = f"platform-cli/{__version__}"
DEFAULT_TIMEOUT = 30  # seconds

# Local builds
APP_CONFIG_FILE = ".platform.app.yaml"
WEB_ROOT = os.environ.get("PLATFORM_CLI_WEB_ROOT", "_www")
