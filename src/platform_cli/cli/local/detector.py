"""Select the toolstack that builds an application."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from .app_config import AppConfig, load_app_config
from .toolstacks import Toolstack, default_toolstacks

logger = logging.getLogger(__name__)


class ToolstackDetector:
    """Chooses at most one toolstack for an application directory.

    A toolstack named in the app config wins. Otherwise the registered
    toolstacks are tried in registration order and the first match wins.
    """

    def __init__(self, toolstacks: Iterable[Toolstack] | None = None) -> None:
        self.toolstacks: list[Toolstack] = []
        for toolstack in default_toolstacks() if toolstacks is None else toolstacks:
            self.register(toolstack)

    def register(self, toolstack: Toolstack) -> None:
        if self.get(toolstack.name) is not None:
            raise ValueError(f"Toolstack already registered: {toolstack.name}")
        self.toolstacks.append(toolstack)

    def get(self, name: str) -> Toolstack | None:
        for toolstack in self.toolstacks:
            if toolstack.name == name:
                return toolstack
        return None

    def detect(
        self, app_root: Path, config: AppConfig | None = None
    ) -> Toolstack | None:
        """Find the toolstack for ``app_root``.

        Args:
            app_root: Application directory.
            config: Parsed app config; loaded from ``app_root`` when omitted.

        Returns:
            The matching toolstack, or None if nothing claims the directory.

        Raises:
            AppConfigError: If the app config file exists but is invalid.
        """
        app_root = Path(app_root)
        if config is None:
            config = load_app_config(app_root)

        if config is not None and config.toolstack_name:
            toolstack = self.get(config.toolstack_name)
            if toolstack is not None:
                logger.debug("Toolstack %s set by app config", toolstack.name)
                return toolstack
            logger.warning(
                "Unknown toolstack '%s' in %s, trying detection",
                config.toolstack_name,
                app_root,
            )

        for toolstack in self.toolstacks:
            if toolstack.detect(app_root):
                logger.debug("Detected toolstack %s in %s", toolstack.name, app_root)
                return toolstack

        logger.debug("No toolstack found for %s", app_root)
        return None
