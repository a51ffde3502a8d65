"""Build applications locally with the detected toolstack.

The application source is copied to ``.platform/local/builds/<app>`` and
built there, so the package managers never write into the working tree.
The project's web root link then points at the build.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from pydantic import BaseModel

from ..api.config import APP_CONFIG_FILE, WEB_ROOT
from .app_config import AppConfig, AppConfigError, find_apps, load_app_config
from .detector import ToolstackDetector

logger = logging.getLogger(__name__)

BUILDS_DIR = Path(".platform") / "local" / "builds"

# Never copied into a build directory
COPY_EXCLUDES = {".git", ".platform", "__pycache__"}


class BuildError(Exception):
    """A build step failed or left an expected artifact missing."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        path: Path | None = None,
    ) -> None:
        self.message = message
        self.command = command
        self.path = path
        super().__init__(message)


class BuildResult(BaseModel):
    """Outcome of one successful application build."""

    app_name: str
    app_root: Path
    build_dir: Path
    toolstack: str


class LocalBuilder:
    """Builds every application of a project.

    Args:
        detector: Toolstack detector to use.
        web_root: Name of the web root link created in the project root.
    """

    def __init__(
        self, detector: ToolstackDetector | None = None, web_root: str = WEB_ROOT
    ) -> None:
        self.detector = detector or ToolstackDetector()
        self.web_root = web_root

    def build_project(
        self, project_root: Path, link: bool = True
    ) -> list[BuildResult]:
        """Build all applications found in ``project_root``.

        Applications without a matching toolstack are skipped.

        Returns:
            One result per application that was built.

        Raises:
            BuildError: If any build fails.
            AppConfigError: If an app config is invalid.
        """
        project_root = Path(project_root).resolve()
        apps: dict[str, tuple[Path, AppConfig | None]] = {}
        for app_root in find_apps(project_root):
            config = load_app_config(app_root)
            app_name = config.name if config is not None else app_root.name
            if app_name in apps:
                raise AppConfigError(
                    app_root / APP_CONFIG_FILE,
                    f"app name '{app_name}' is already used by "
                    f"{apps[app_name][0] / APP_CONFIG_FILE}",
                )
            apps[app_name] = (app_root, config)

        results = []
        for app_root, config in apps.values():
            result = self.build_app(app_root, project_root, config)
            if result is not None:
                results.append(result)

        if link and results:
            self.link_web_root(project_root, results)
        return results

    def build_app(
        self, app_root: Path, project_root: Path, config: AppConfig | None = None
    ) -> BuildResult | None:
        """Build one application.

        Args:
            app_root: Directory of the application.
            project_root: Project directory holding the builds and web root.
            config: Already loaded app config; read from ``app_root`` if omitted.

        Returns:
            The build result, or None if no toolstack claims the directory.

        Raises:
            BuildError: If the build directory would fall outside the project.
        """
        if config is None:
            config = load_app_config(app_root)
        toolstack = self.detector.detect(app_root, config)
        app_name = config.name if config is not None else app_root.name
        if toolstack is None:
            logger.warning("No toolstack found for %s, skipping build", app_root)
            return None

        builds_root = (project_root / BUILDS_DIR).resolve()
        build_dir = (builds_root / app_name).resolve()
        if build_dir == builds_root or not build_dir.is_relative_to(builds_root):
            raise BuildError(
                f"Invalid app name '{app_name}': build directory must be "
                f"inside {builds_root}",
                path=build_dir,
            )
        self._copy_source(app_root, build_dir, project_root)
        logger.info("Building %s with %s in %s", app_name, toolstack.name, build_dir)

        for command in toolstack.build_steps(build_dir):
            self._run(command, build_dir)

        for artifact in toolstack.expected_artifacts(build_dir):
            if not artifact.exists():
                raise BuildError(
                    f"Build of '{app_name}' failed: expected file not found: "
                    f"{artifact.relative_to(build_dir)}",
                    path=artifact,
                )

        return BuildResult(
            app_name=app_name,
            app_root=app_root,
            build_dir=build_dir,
            toolstack=toolstack.name,
        )

    def _copy_source(self, app_root: Path, build_dir: Path, project_root: Path) -> None:
        web_root = project_root / self.web_root

        def ignore(directory: str, names: list[str]) -> set[str]:
            skipped = {name for name in names if name in COPY_EXCLUDES}
            if Path(directory) == web_root.parent:
                skipped |= {name for name in names if name == web_root.name}
            return skipped

        if build_dir.exists():
            shutil.rmtree(build_dir)
        build_dir.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(app_root, build_dir, symlinks=True, ignore=ignore)

    def _run(self, command: list[str], cwd: Path) -> None:
        logger.info("Running: %s", " ".join(command))
        try:
            subprocess.run(command, cwd=cwd, check=True)
        except FileNotFoundError as e:
            raise BuildError(f"Command not found: {command[0]}", command=command) from e
        except subprocess.CalledProcessError as e:
            raise BuildError(
                f"Command failed with exit code {e.returncode}: {' '.join(command)}",
                command=command,
            ) from e

    def link_web_root(self, project_root: Path, results: list[BuildResult]) -> Path:
        """Point the web root at the build(s).

        A single application is linked directly; several applications get
        one link each inside the web root directory.
        """
        web_root = project_root / self.web_root
        if web_root.is_symlink() or web_root.is_file():
            web_root.unlink()
        elif web_root.is_dir():
            # A directory of per-app links left by an earlier build
            entries = list(web_root.iterdir())
            if all(entry.is_symlink() for entry in entries):
                for entry in entries:
                    entry.unlink()
                web_root.rmdir()

        if len(results) == 1:
            if web_root.exists():
                raise BuildError(
                    f"Web root {web_root} exists and is not a link", path=web_root
                )
            web_root.symlink_to(results[0].build_dir, target_is_directory=True)
            return web_root

        web_root.mkdir(exist_ok=True)
        for result in results:
            link = web_root / result.app_name
            if link.is_symlink():
                link.unlink()
            link.symlink_to(result.build_dir, target_is_directory=True)
        return web_root
