"""Load reporter configuration from YAML files."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from boostsec.test_reporter.errors import ConfigurationError
from boostsec.test_reporter.models.reporter_config import ReporterConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".test-reporter.yaml"


def load_config_file(config_file: Path) -> dict[str, Any]:
    """Load the settings of a configuration file.

    Args:
        config_file: Path to the YAML configuration file

    Returns:
        Parsed settings

    Raises:
        ConfigurationError: If the file is missing, empty or not a mapping

    """
    if not config_file.exists():
        raise ConfigurationError(f"Config file not found: {config_file}")

    try:
        with config_file.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

    if data is None:
        raise ConfigurationError(f"Empty config file: {config_file}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_file} must contain a mapping")

    return data


def load_config(
    project_dir: Path,
    config_file: Path | None = None,
    **overrides: Any,
) -> ReporterConfig:
    """Build the configuration of a run.

    Settings come from config_file when given, else from
    ``.test-reporter.yaml`` in project_dir when it exists. Overrides that
    are not None win over file settings.

    Raises:
        ConfigurationError: If the file or the resulting settings are invalid

    """
    settings: dict[str, Any] = {}

    if config_file is None and (project_dir / CONFIG_FILE_NAME).exists():
        config_file = project_dir / CONFIG_FILE_NAME

    if config_file is not None:
        logger.info(f"Loading configuration from {config_file}")
        settings.update(load_config_file(config_file))

    settings["project_dir"] = project_dir
    settings.update(
        {key: value for key, value in overrides.items() if value is not None}
    )

    try:
        return ReporterConfig.model_validate(settings)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
