"""
Main configuration class for the packer.

Contains the Config class that gathers every configuration section and knows
how to build itself from a YAML/JSON document, including the CamelCase keys
used by older ``config.json`` files.
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Union

from ..exceptions import ConfigurationError
from .runtime import DestinationsConfig, LoggingConfig, PackagingConfig, PathsConfig
from .yaml_loader import YAMLConfigLoader

logger = logging.getLogger(__name__)

# CamelCase keys accepted from older config.json files
_LEGACY_TOP_LEVEL_KEYS = {
    "SourcePaths": "source_paths",
    "ZippedPaths": "zipped_paths",
    "DatabasePath": "database_path",
    "OutputPath": "output_path",
    "ExtremeTags": "restricted_tags",
}

_LEGACY_PATH_KEYS = {
    "GameZipPath": "content",
    "ImagePath": "images",
    "LegacyPath": "legacy",
    "ExtrasPath": "extras",
    "CgiPath": "cgi",
}


def _normalize_keys(data: Dict[str, Any], aliases: Dict[str, str]) -> Dict[str, Any]:
    normalized: Dict[str, Any] = {}
    for key, value in data.items():
        normalized[aliases.get(key, key)] = value
    return normalized


def _section_mapping(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name) or {}
    if not isinstance(value, dict):
        raise ConfigurationError(
            f"Section '{name}' must be a mapping",
            error_code="CONFIG_MALFORMED",
            details={"section": name},
            component="config",
        )
    return value


def _reject_unknown(section: str, values: Dict[str, Any], cls: type) -> None:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown keys in section '{section}': {', '.join(unknown)}",
            error_code="CONFIG_UNKNOWN_KEYS",
            details={"section": section, "keys": unknown},
            component="config",
        )


def _resolve(value: Optional[Union[str, Path]], base_dir: Path) -> Optional[Path]:
    if value is None or value == "":
        return None
    path = Path(value).expanduser()
    return path if path.is_absolute() else base_dir / path


@dataclass
class Config:
    """Main configuration class for the packer."""

    database_path: Path = field(default_factory=lambda: Path.cwd() / "flashpoint.sqlite")
    output_path: Path = field(default_factory=lambda: Path.cwd() / "output")
    restricted_tags: List[str] = field(default_factory=list)

    source_paths: PathsConfig = field(default_factory=PathsConfig)
    zipped_paths: DestinationsConfig = field(default_factory=DestinationsConfig)
    packaging: PackagingConfig = field(default_factory=PackagingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def restricted_tag_set(self) -> FrozenSet[str]:
        """Restricted tags as a set for membership tests."""
        return frozenset(self.restricted_tags)

    @property
    def manifest_path(self) -> Path:
        """Where the manifest is written."""
        return self.output_path / self.packaging.manifest_name

    def validate(self) -> None:
        """Check that everything a build needs is present."""
        missing = []
        if self.source_paths.content is None:
            missing.append("source_paths.content")
        if self.source_paths.images is None:
            missing.append("source_paths.images")
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}",
                error_code="CONFIG_INCOMPLETE",
                details={"missing": missing},
                component="config",
            )

        if not all(isinstance(tag, str) for tag in self.restricted_tags):
            raise ConfigurationError(
                "restricted_tags must be a list of strings",
                error_code="CONFIG_MALFORMED",
                details={"restricted_tags": [str(t) for t in self.restricted_tags]},
                component="config",
            )

        if not self.packaging.archive_prefix:
            raise ConfigurationError(
                "packaging.archive_prefix must not be empty",
                error_code="CONFIG_MALFORMED",
                component="config",
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "Config":
        """
        Build a configuration from a parsed document.

        Args:
            data: Parsed configuration mapping
            base_dir: Directory that relative paths are resolved against

        Returns:
            Validated configuration

        Raises:
            ConfigurationError: If the document is malformed or incomplete
        """
        base_dir = base_dir or Path.cwd()
        data = _normalize_keys(data, _LEGACY_TOP_LEVEL_KEYS)

        for key in ("database_path", "output_path"):
            if not data.get(key):
                raise ConfigurationError(
                    f"Missing required configuration: {key}",
                    error_code="CONFIG_INCOMPLETE",
                    details={"missing": [key]},
                    component="config",
                )

        sources = _normalize_keys(_section_mapping(data, "source_paths"), _LEGACY_PATH_KEYS)
        destinations = _normalize_keys(
            _section_mapping(data, "zipped_paths"), _LEGACY_PATH_KEYS
        )
        packaging = _section_mapping(data, "packaging")
        logging_section = _section_mapping(data, "logging")

        _reject_unknown("source_paths", sources, PathsConfig)
        _reject_unknown("zipped_paths", destinations, DestinationsConfig)
        _reject_unknown("packaging", packaging, PackagingConfig)
        _reject_unknown("logging", logging_section, LoggingConfig)

        restricted = data.get("restricted_tags") or []
        if not isinstance(restricted, list):
            raise ConfigurationError(
                "restricted_tags must be a list of strings",
                error_code="CONFIG_MALFORMED",
                component="config",
            )

        config = cls(
            database_path=_resolve(data["database_path"], base_dir),  # type: ignore[arg-type]
            output_path=_resolve(data["output_path"], base_dir),  # type: ignore[arg-type]
            restricted_tags=list(restricted),
            source_paths=PathsConfig(
                **{key: _resolve(value, base_dir) for key, value in sources.items()}
            ),
            zipped_paths=DestinationsConfig(
                **{key: str(value or "") for key, value in destinations.items()}
            ),
            packaging=PackagingConfig(**packaging),
            logging=LoggingConfig(**logging_section),
        )
        config.validate()
        return config

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Config":
        """Load and validate configuration from a YAML or JSON file."""
        path = Path(path)
        data = YAMLConfigLoader.load_yaml(path)
        config = cls.from_dict(data, base_dir=path.resolve().parent)
        logger.info(f"Loaded configuration from {path}")
        return config
