"""
Section configuration for the packer.

Contains the path, packaging and logging configuration classes.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEFAULT_ARCHIVE_PREFIX = "Flashpoint"
DEFAULT_MANIFEST_NAME = "info.json"


@dataclass
class PathsConfig:
    """Source tree roots, one per archive family.

    An unset auxiliary root disables the corresponding bundle.
    """

    content: Optional[Path] = None
    images: Optional[Path] = None
    legacy: Optional[Path] = None
    extras: Optional[Path] = None
    cgi: Optional[Path] = None


@dataclass
class DestinationsConfig:
    """Archive-internal prefixes, also reported as ``path`` in the manifest."""

    content: str = ""
    images: str = ""
    legacy: str = ""
    extras: str = ""
    cgi: str = ""


@dataclass
class PackagingConfig:
    """Archive naming and failure policy."""

    archive_prefix: str = DEFAULT_ARCHIVE_PREFIX
    manifest_name: str = DEFAULT_MANIFEST_NAME
    # Abort the run when an auxiliary root cannot be walked instead of skipping it
    strict_auxiliary_roots: bool = False


@dataclass
class LoggingConfig:
    """Logging output configuration."""

    level: str = "INFO"
    json_format: bool = False
