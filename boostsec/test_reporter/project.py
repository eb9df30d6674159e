"""Project identity and logical package paths."""

import logging
import tomllib
from pathlib import Path, PurePosixPath

from boostsec.test_reporter.errors import ConfigurationError

logger = logging.getLogger(__name__)


def discover_module_name(project_dir: Path) -> str:
    """Read the module identity of a project from its pyproject.toml.

    Args:
        project_dir: Root directory of the project

    Returns:
        The ``[project]`` name, or the ``[tool.poetry]`` name as a fallback

    Raises:
        ConfigurationError: If pyproject.toml is missing, invalid or unnamed

    """
    pyproject = project_dir / "pyproject.toml"

    if not pyproject.exists():
        raise ConfigurationError(f"Project file not found: {pyproject}")

    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {pyproject}: {e}") from e

    name = data.get("project", {}).get("name")
    if not name:
        name = data.get("tool", {}).get("poetry", {}).get("name")
    if not name:
        raise ConfigurationError(f"No project name declared in {pyproject}")

    logger.debug(f"Module identity of {project_dir}: {name}")
    return str(name)


def logical_package_path(module: str, relative_dir: str | PurePosixPath) -> str:
    """Join a module identity with a slash-normalized relative directory.

    Files at the project root belong to the module identity itself.
    """
    relative = PurePosixPath(str(relative_dir).replace("\\", "/")).as_posix()
    if relative in {"", "."}:
        return module
    return f"{module}/{relative}"
