"""
Centralized YAML configuration loading utilities.

Provides consistent YAML loading with error handling and logging. JSON
documents are valid YAML, so the same loader reads ``config.json`` files.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class YAMLConfigLoader:
    """Centralized YAML configuration loader with consistent error handling."""

    @staticmethod
    def load_yaml(path: Path) -> Dict[str, Any]:
        """
        Load a YAML (or JSON) mapping from disk.

        Args:
            path: Path to the configuration file

        Returns:
            Dictionary containing the parsed document

        Raises:
            ConfigurationError: If the file is missing, unreadable, malformed
                or does not contain a mapping at the top level
        """
        if not path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {path}",
                error_code="CONFIG_NOT_FOUND",
                details={"path": str(path)},
                component="config",
            )

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse configuration file {path}: {e}")
            raise ConfigurationError(
                f"Malformed configuration file {path}: {e}",
                error_code="CONFIG_MALFORMED",
                details={"path": str(path)},
                component="config",
            ) from e
        except OSError as e:
            logger.error(f"Failed to read configuration file {path}: {e}")
            raise ConfigurationError(
                f"Unreadable configuration file {path}: {e}",
                error_code="CONFIG_UNREADABLE",
                details={"path": str(path)},
                component="config",
            ) from e

        if data is None:
            logger.warning(f"Configuration file is empty or contains only comments: {path}")
            return {}

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file {path} must contain a mapping",
                error_code="CONFIG_MALFORMED",
                details={"path": str(path), "type": type(data).__name__},
                component="config",
            )

        logger.debug(f"Successfully loaded configuration from {path}")
        return data

    @staticmethod
    def save_yaml(data: Dict[str, Any], path: Path) -> None:
        """
        Save data to YAML file with consistent formatting.

        Args:
            data: Dictionary to save
            path: Path to save YAML file
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        logger.debug(f"Successfully saved YAML to {path}")
