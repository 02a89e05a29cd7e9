"""
Configuration management for the Flashpoint packer.

Provides a clean public API for all configuration components.
"""

# Main configuration class
from .main import Config

# Section configuration
from .runtime import (
    DEFAULT_ARCHIVE_PREFIX,
    DEFAULT_MANIFEST_NAME,
    DestinationsConfig,
    LoggingConfig,
    PackagingConfig,
    PathsConfig,
)
from .yaml_loader import YAMLConfigLoader

# Public API
__all__ = [
    # Main class
    "Config",
    # Sections
    "DestinationsConfig",
    "LoggingConfig",
    "PackagingConfig",
    "PathsConfig",
    "DEFAULT_ARCHIVE_PREFIX",
    "DEFAULT_MANIFEST_NAME",
    # Loading
    "YAMLConfigLoader",
]
