"""
Shared types for the archive build pipeline.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List

from ..core.exceptions import MissingSourceFileError


class Classification(Enum):
    """Content classification derived from an item's tags."""

    STANDARD = "standard"
    RESTRICTED = "restricted"


class GroupKind(Enum):
    """What an archive group holds."""

    CONTENT = "content"
    IMAGE = "image"
    AUXILIARY = "auxiliary"


class ManifestSection(Enum):
    """Manifest sections, in the order they are written."""

    PLATFORMS = "platforms"
    PLATFORMS_RESTRICTED = "platformsNsfw"
    PLATFORM_IMAGES = "platformImages"
    PLATFORM_IMAGES_RESTRICTED = "platformImagesNsfw"
    OTHER = "other"

    @classmethod
    def for_group(cls, classification: Classification, kind: GroupKind) -> "ManifestSection":
        """Pick the section an archive of this classification and kind belongs to."""
        if kind is GroupKind.AUXILIARY:
            return cls.OTHER
        restricted = classification is Classification.RESTRICTED
        if kind is GroupKind.CONTENT:
            return cls.PLATFORMS_RESTRICTED if restricted else cls.PLATFORMS
        return cls.PLATFORM_IMAGES_RESTRICTED if restricted else cls.PLATFORM_IMAGES


_SUFFIXES = {
    (Classification.STANDARD, GroupKind.CONTENT): "",
    (Classification.RESTRICTED, GroupKind.CONTENT): "_NSFW",
    (Classification.STANDARD, GroupKind.IMAGE): "_Images",
    (Classification.RESTRICTED, GroupKind.IMAGE): "_Images_NSFW",
    (Classification.STANDARD, GroupKind.AUXILIARY): "",
    (Classification.RESTRICTED, GroupKind.AUXILIARY): "_NSFW",
}


@dataclass(frozen=True)
class SourceFileRef:
    """A path to archive, or a directory placeholder.

    Directory placeholders keep empty directories in the archive. In path
    lists they are marked by a trailing path separator.
    """

    path: str
    is_dir: bool = False

    @classmethod
    def parse(cls, raw: str) -> "SourceFileRef":
        """Interpret a path string, treating a trailing separator as a directory marker."""
        separators = (os.sep, "/") if os.altsep is None else (os.sep, os.altsep)
        if raw.endswith(separators):
            return cls(path=raw.rstrip("".join(separators)) or raw[:1], is_dir=True)
        return cls(path=raw)


@dataclass
class ArchiveGroup:
    """One unit of archiving: (category, classification, kind) and its files.

    ``files`` keeps discovery order and duplicates.
    """

    name: str
    classification: Classification
    kind: GroupKind
    source_root: Path
    destination: str = ""
    files: List[str] = field(default_factory=list)

    @property
    def suffix(self) -> str:
        """Archive file name suffix for this group's variant."""
        return _SUFFIXES[(self.classification, self.kind)]

    @property
    def section(self) -> ManifestSection:
        """Manifest section this group's archive is recorded in."""
        return ManifestSection.for_group(self.classification, self.kind)

    def is_empty(self) -> bool:
        return not self.files

    def add(self, *paths: str) -> None:
        self.files.extend(paths)


@dataclass
class BuiltArchive:
    """A finalized archive on disk, ready to be hashed and recorded."""

    group: ArchiveGroup
    file_name: str
    path: Path
    files_written: int = 0
    directories_written: int = 0
    uncompressed_size: int = 0
    skipped: List[MissingSourceFileError] = field(default_factory=list)
