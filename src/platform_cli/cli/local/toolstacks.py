"""Toolstacks: how to recognise and build one kind of application.

Each toolstack is a strategy object exposing the same three operations. The
detector asks them in order; the builder runs the steps of the chosen one
and then checks that the expected artifacts exist.
"""

from __future__ import annotations

import json
import logging
import sys
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)

Command = list[str]


class Toolstack(ABC):
    """Detection rule plus build procedure for one language/framework."""

    name: str

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    @abstractmethod
    def detect(self, app_root: Path) -> bool:
        """Return True if the directory looks like an app of this toolstack."""

    @abstractmethod
    def build_steps(self, app_root: Path) -> list[Command]:
        """Commands to run, in order, with ``app_root`` as working directory."""

    def expected_artifacts(self, app_root: Path) -> list[Path]:
        """Files or directories a successful build must leave behind."""
        return []


def _read_json(path: Path) -> dict:
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError):
        logger.debug("Could not parse %s", path)
        return {}
    return data if isinstance(data, dict) else {}


class ComposerToolstack(Toolstack):
    """PHP applications managed by Composer.

    Args:
        name: Toolstack name, e.g. ``php:composer`` or ``php:symfony``.
        packages: If given, heuristic detection also requires composer.json
            to require at least one of these packages.
    """

    COMMAND = [
        "composer",
        "install",
        "--no-progress",
        "--prefer-dist",
        "--optimize-autoloader",
        "--no-interaction",
    ]

    def __init__(
        self, name: str = "php:composer", packages: Iterable[str] | None = None
    ) -> None:
        self.name = name
        self.packages = tuple(packages or ())

    def detect(self, app_root: Path) -> bool:
        composer_json = app_root / "composer.json"
        if not composer_json.is_file():
            return False
        if not self.packages:
            return True
        data = _read_json(composer_json)
        required = {}
        for section in ("require", "require-dev"):
            # Composer writes an empty section as []
            packages = data.get(section)
            if isinstance(packages, dict):
                required.update(packages)
        return any(package in required for package in self.packages)

    def build_steps(self, app_root: Path) -> list[Command]:
        # Without composer.json there is nothing to install.
        if not (app_root / "composer.json").is_file():
            return []
        return [list(self.COMMAND)]

    def expected_artifacts(self, app_root: Path) -> list[Path]:
        if not (app_root / "composer.json").is_file():
            return []
        return [app_root / "vendor" / "autoload.php"]


class DrupalToolstack(Toolstack):
    """Drupal sites assembled from a Drush make file, or with Composer."""

    name = "php:drupal"
    MAKE_FILES = ("project.make", "project.make.yml", "drupal-org.make")

    def _make_file(self, app_root: Path) -> Path | None:
        for filename in self.MAKE_FILES:
            if (app_root / filename).is_file():
                return app_root / filename
        return None

    def detect(self, app_root: Path) -> bool:
        return self._make_file(app_root) is not None

    def build_steps(self, app_root: Path) -> list[Command]:
        make_file = self._make_file(app_root)
        if make_file is not None:
            return [
                [
                    "drush",
                    "make",
                    "--yes",
                    "--no-gitinfofile",
                    make_file.name,
                    "public",
                ]
            ]
        if (app_root / "composer.json").is_file():
            return [list(ComposerToolstack.COMMAND)]
        return []

    def expected_artifacts(self, app_root: Path) -> list[Path]:
        if self._make_file(app_root) is not None:
            return [app_root / "public" / "index.php"]
        if (app_root / "composer.json").is_file():
            return [app_root / "vendor" / "autoload.php"]
        return []


class NodeJsToolstack(Toolstack):
    """Node.js applications managed by npm."""

    name = "nodejs:default"

    def detect(self, app_root: Path) -> bool:
        return (app_root / "package.json").is_file()

    def build_steps(self, app_root: Path) -> list[Command]:
        if not self.detect(app_root):
            return []
        if (app_root / "package-lock.json").is_file():
            return [["npm", "ci", "--no-audit", "--no-fund"]]
        return [["npm", "install", "--no-audit", "--no-fund"]]

    def expected_artifacts(self, app_root: Path) -> list[Path]:
        if not self.detect(app_root):
            return []
        return [app_root / "node_modules"]


class PythonToolstack(Toolstack):
    """Python applications with a requirements.txt, installed into ``.deps``."""

    name = "python:default"
    TARGET = ".deps"

    def detect(self, app_root: Path) -> bool:
        return (app_root / "requirements.txt").is_file()

    def build_steps(self, app_root: Path) -> list[Command]:
        if not self.detect(app_root):
            return []
        return [
            [
                sys.executable,
                "-m",
                "pip",
                "install",
                "--disable-pip-version-check",
                "--target",
                self.TARGET,
                "-r",
                "requirements.txt",
            ]
        ]

    def expected_artifacts(self, app_root: Path) -> list[Path]:
        if not self.detect(app_root):
            return []
        return [app_root / self.TARGET]


def default_toolstacks() -> list[Toolstack]:
    """Built-in toolstacks in heuristic detection order."""
    return [
        DrupalToolstack(),
        ComposerToolstack(
            "php:symfony", packages=("symfony/symfony", "symfony/framework-bundle")
        ),
        ComposerToolstack("php:composer"),
        NodeJsToolstack(),
        PythonToolstack(),
    ]
