"""
Archive manifest model and persistence.

The manifest (``info.json``) lists every archive built in a run, grouped in
a fixed section order, together with run-wide size totals.
"""

import contextlib
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, List, Tuple, Union

from ..core.exceptions import IntegrityError, ManifestWriteError
from ..core.logging import get_logger
from .types import ManifestSection

logger = get_logger(__name__)


@dataclass(frozen=True)
class ManifestEntry:
    """Identity, size and digest of one built archive."""

    name: str
    file: str
    path: str
    size: int
    uncompressed_size: int
    hash: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "file": self.file,
            "path": self.path,
            "size": self.size,
            "uncompressedSize": self.uncompressed_size,
            "hash": self.hash,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ManifestEntry":
        return cls(
            name=data["name"],
            file=data["file"],
            path=data.get("path", ""),
            size=int(data["size"]),
            uncompressed_size=int(data.get("uncompressedSize", 0)),
            hash=data.get("hash", ""),
        )


class Manifest:
    """Append-only collector of manifest entries for one run."""

    def __init__(self) -> None:
        self._sections: Dict[ManifestSection, List[ManifestEntry]] = {
            section: [] for section in ManifestSection
        }
        self.compressed_size = 0
        self.uncompressed_size = 0

    def add(self, section: ManifestSection, entry: ManifestEntry) -> None:
        self._sections[section].append(entry)
        self.compressed_size += entry.size
        self.uncompressed_size += entry.uncompressed_size

    def section(self, section: ManifestSection) -> List[ManifestEntry]:
        return list(self._sections[section])

    def entries(self) -> Iterator[Tuple[ManifestSection, ManifestEntry]]:
        for section in ManifestSection:
            for entry in self._sections[section]:
                yield section, entry

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._sections.values())

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "compressedSize": self.compressed_size,
            "uncompressedSize": self.uncompressed_size,
        }
        for section in ManifestSection:
            data[section.value] = [entry.to_dict() for entry in self._sections[section]]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Manifest":
        manifest = cls()
        for section in ManifestSection:
            for raw in data.get(section.value) or []:
                manifest.add(section, ManifestEntry.from_dict(raw))
        return manifest


def write_manifest(manifest: Manifest, path: Union[str, Path]) -> Path:
    """
    Write the manifest as indented JSON, replacing any existing file.

    The document is written to a temporary sibling first and moved into
    place, so readers never observe a half-written manifest.

    Raises:
        ManifestWriteError: If serialization or any filesystem step fails
    """
    path = Path(path)
    temp_file = path.with_suffix(path.suffix + ".tmp")
    try:
        payload = json.dumps(manifest.to_dict(), indent=2, ensure_ascii=False)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(temp_file, "w", encoding="utf-8") as f:
            f.write(payload)
        temp_file.replace(path)
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Failed to write manifest {path}: {e}")
        with contextlib.suppress(OSError):
            temp_file.unlink()
        raise ManifestWriteError(str(path), str(e), component="manifest") from e

    logger.info(f"Wrote manifest {path}", archives=len(manifest))
    return path


def load_manifest(path: Union[str, Path]) -> Manifest:
    """Read a manifest written by ``write_manifest``."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return Manifest.from_dict(data)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        raise IntegrityError(str(path), f"unreadable manifest: {e}", component="manifest") from e
