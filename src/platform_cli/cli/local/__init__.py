"""Local builds: toolstack detection and package manager invocation."""

from .app_config import AppConfig, AppConfigError, find_apps, load_app_config
from .builder import BuildError, BuildResult, LocalBuilder
from .detector import ToolstackDetector
from .toolstacks import (
    ComposerToolstack,
    DrupalToolstack,
    NodeJsToolstack,
    PythonToolstack,
    Toolstack,
    default_toolstacks,
)

__all__ = [
    "AppConfig",
    "AppConfigError",
    "find_apps",
    "load_app_config",
    "BuildError",
    "BuildResult",
    "LocalBuilder",
    "ToolstackDetector",
    "Toolstack",
    "ComposerToolstack",
    "DrupalToolstack",
    "NodeJsToolstack",
    "PythonToolstack",
    "default_toolstacks",
]
