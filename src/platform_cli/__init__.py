"""platform-cli - Command-line client for the application hosting platform.

Manage projects, environments and integrations from a terminal, and build
applications locally with the toolstack the platform would use.

Example:
    $ platform login --api-token TOKEN
    $ platform integrations add my-project --type webhook --url https://example.com/hook
    $ platform build --dir ./my-app
"""

import importlib.metadata

try:
    __version__ = importlib.metadata.version("platform-cli")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0.dev"

__all__ = ["__version__"]
