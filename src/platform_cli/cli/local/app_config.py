"""Application configuration files (.platform.app.yaml).

Two formats name the toolstack. The current one splits it into the runtime
``type`` and a build ``flavor``::

    type: "php:7.4"
    build:
      flavor: symfony

The deprecated one names it directly::

    toolstack: "php:symfony"

Both resolve to the same toolstack name.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..api.config import APP_CONFIG_FILE

logger = logging.getLogger(__name__)

DEFAULT_FLAVORS = {"php": "composer"}
LANGUAGE_ALIASES = {"hhvm": "php"}

# App names become directory names under the builds directory
APP_NAME_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9_.-]*$"


class AppConfigError(Exception):
    """The application configuration file could not be read."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class BuildConfig(BaseModel):
    flavor: str | None = None

    model_config = ConfigDict(extra="allow")


class AppConfig(BaseModel):
    """Parsed application configuration."""

    name: str = Field(default="app", pattern=APP_NAME_PATTERN)
    type: str | None = None
    build: BuildConfig = Field(default_factory=BuildConfig)
    toolstack: str | None = None

    model_config = ConfigDict(extra="allow")

    @property
    def is_deprecated_format(self) -> bool:
        return self.toolstack is not None

    @property
    def toolstack_name(self) -> str | None:
        """The explicitly configured toolstack, e.g. ``php:composer``."""
        if self.toolstack:
            language, _, flavor = self.toolstack.partition(":")
            return toolstack_name(language, flavor or None)
        if self.type:
            language = self.type.partition(":")[0]
            return toolstack_name(language, self.build.flavor)
        return None


def toolstack_name(language: str, flavor: str | None = None) -> str:
    language = language.strip().lower()
    language = LANGUAGE_ALIASES.get(language, language)
    flavor = (flavor or DEFAULT_FLAVORS.get(language, "default")).strip().lower()
    return f"{language}:{flavor}"


def load_app_config(app_root: Path) -> AppConfig | None:
    """Load the application config in ``app_root``.

    Returns:
        The parsed config, or None if the directory has no config file.

    Raises:
        AppConfigError: If the file is not valid YAML or not a mapping.
    """
    path = Path(app_root) / APP_CONFIG_FILE
    if not path.exists():
        return None

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise AppConfigError(path, f"Invalid YAML:\n  {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise AppConfigError(path, "must be a YAML mapping")

    try:
        config = AppConfig.model_validate(data)
    except ValidationError as e:
        raise AppConfigError(path, str(e)) from e

    if config.is_deprecated_format:
        logger.warning(
            "%s uses the deprecated 'toolstack' key; "
            "use 'type' and 'build.flavor' instead",
            path,
        )
    return config


def find_apps(project_root: Path) -> list[Path]:
    """Locate the applications of a project.

    An application is a directory holding an app config file: either the
    project root itself or one of its immediate subdirectories. A project
    with no config at all is a single application at its root.
    """
    project_root = Path(project_root)
    if (project_root / APP_CONFIG_FILE).exists():
        return [project_root]

    apps = [
        d
        for d in sorted(project_root.iterdir())
        if d.is_dir() and not d.name.startswith(".") and (d / APP_CONFIG_FILE).exists()
    ]
    return apps or [project_root]
