"""
Archive integrity recording and verification.

After an archive has been written and closed it is reopened read-only, its
on-disk size taken and a SHA-256 digest computed over the whole byte stream.
The result becomes the archive's manifest entry.
"""

import hashlib
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, Union

from ..core.exceptions import IntegrityError
from ..core.logging import get_logger
from .manifest import Manifest, ManifestEntry
from .types import BuiltArchive

logger = get_logger(__name__)

HASH_ALGORITHM = "sha256"
CHUNK_SIZE = 1024 * 1024


def hash_file(path: Union[str, Path], chunk_size: int = CHUNK_SIZE) -> Tuple[int, str]:
    """
    Size and hex SHA-256 digest of a file, read through a fresh handle.

    Returns:
        ``(size_in_bytes, hex_digest)``

    Raises:
        IntegrityError: If the file cannot be opened or read
    """
    h = hashlib.new(HASH_ALGORITHM)
    try:
        with open(path, "rb") as f:
            size = os.fstat(f.fileno()).st_size
            for chunk in iter(lambda: f.read(chunk_size), b""):
                h.update(chunk)
    except OSError as e:
        raise IntegrityError(str(path), str(e), component="integrity") from e
    return size, h.hexdigest()


class IntegrityRecorder:
    """Hash finalized archives and append their entries to a manifest."""

    def __init__(self, manifest: Manifest):
        self.manifest = manifest

    def record(self, built: BuiltArchive) -> ManifestEntry:
        """
        Hash a finalized archive and record it.

        ``built.path`` must already be closed by the builder; it is opened
        again here so the digest covers the bytes actually on disk.
        """
        size, digest = hash_file(built.path)
        entry = ManifestEntry(
            name=built.group.name,
            file=built.file_name,
            path=built.group.destination,
            size=size,
            uncompressed_size=built.uncompressed_size,
            hash=digest,
        )
        self.manifest.add(built.group.section, entry)
        logger.info(
            f"Recorded {built.file_name}",
            section=built.group.section.value,
            size=size,
            uncompressed_size=built.uncompressed_size,
            hash=digest,
        )
        return entry


@dataclass
class VerificationReport:
    """Outcome of re-hashing every archive listed in a manifest."""

    verified: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    mismatched: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing and not self.mismatched


def verify(manifest: Manifest, archive_dir: Union[str, Path]) -> VerificationReport:
    """Re-hash each archive in ``manifest`` found under ``archive_dir``."""
    archive_dir = Path(archive_dir)
    report = VerificationReport()

    for section, entry in manifest.entries():
        path = archive_dir / entry.file
        if not path.is_file():
            logger.error(f"Archive missing: {entry.file}", section=section.value)
            report.missing.append(entry.file)
            continue

        size, digest = hash_file(path)
        if size != entry.size or digest != entry.hash:
            logger.error(
                f"Archive does not match manifest: {entry.file}",
                section=section.value,
                expected_hash=entry.hash,
                actual_hash=digest,
                expected_size=entry.size,
                actual_size=size,
            )
            report.mismatched.append(entry.file)
        else:
            report.verified.append(entry.file)

    return report
