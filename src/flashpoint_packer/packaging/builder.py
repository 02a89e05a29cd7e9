"""
Streaming ZIP archive builder.

Writes one archive per group, streaming each source file into its entry in
fixed-size chunks so thousands of large files never have to be held in
memory. Missing source files are recorded and skipped; every other I/O
failure aborts with ``ArchiveWriteError``.
"""

import os
import posixpath
import stat
import zipfile
from datetime import date
from pathlib import Path
from typing import Optional, Union

from ..core.config import DEFAULT_ARCHIVE_PREFIX
from ..core.exceptions import ArchiveWriteError, MissingSourceFileError
from ..core.logging import ProcessingTimer, archive_var, get_logger
from .types import ArchiveGroup, BuiltArchive, SourceFileRef

logger = get_logger(__name__)

ARCHIVE_EXTENSION = ".zip"
CHUNK_SIZE = 1024 * 1024
# Fixed entry metadata keeps archives byte-identical across runs
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)
FILE_ATTRS = (stat.S_IFREG | 0o644) << 16
DIR_ATTRS = ((stat.S_IFDIR | 0o755) << 16) | 0x10


def archive_name(prefix: str, group: ArchiveGroup, build_date: date) -> str:
    """``<prefix>_<name with spaces as _><suffix>_<YYYYMMDD>.zip``"""
    name = group.name.replace(" ", "_")
    return f"{prefix}_{name}{group.suffix}_{build_date:%Y%m%d}{ARCHIVE_EXTENSION}"


def internal_path(source_path: str, source_root: str, destination: str = "") -> str:
    """
    Archive-internal path for a source path.

    Strips ``source_root`` as a plain prefix, converts separators to ``/``
    and trims leading separators. Returns an empty string when the path is
    the root itself; otherwise joins ``destination`` in front when set.
    """
    relative = source_path
    if source_root and relative.startswith(source_root):
        relative = relative[len(source_root):]
    relative = relative.replace(os.sep, "/").lstrip("/")
    if not relative:
        return ""
    if destination:
        return posixpath.join(destination.replace(os.sep, "/").strip("/"), relative)
    return relative


class ArchiveBuilder:
    """Build ZIP archives for archive groups into an output directory."""

    def __init__(
        self,
        output_dir: Union[str, Path],
        prefix: str = DEFAULT_ARCHIVE_PREFIX,
        build_date: Optional[date] = None,
        chunk_size: int = CHUNK_SIZE,
    ):
        self.output_dir = Path(output_dir)
        self.prefix = prefix
        self.build_date = build_date or date.today()
        self.chunk_size = chunk_size

    def archive_name(self, group: ArchiveGroup) -> str:
        return archive_name(self.prefix, group, self.build_date)

    def build(self, group: ArchiveGroup) -> BuiltArchive:
        """
        Write the archive for ``group``, truncating any previous file.

        The archive is fully finalized and closed when this returns.

        Raises:
            ArchiveWriteError: If the archive cannot be created or written, or
                a source file that exists cannot be read
        """
        file_name = self.archive_name(group)
        built = BuiltArchive(group=group, file_name=file_name, path=self.output_dir / file_name)
        token = archive_var.set(file_name)

        try:
            logger.info(f"Creating {file_name}...")
            with ProcessingTimer(logger, "build_archive", "builder", files=len(group.files)):
                self._write(built)
        finally:
            archive_var.reset(token)

        if built.skipped:
            logger.warning(
                f"{len(built.skipped)} source files missing from {file_name}",
                skipped=len(built.skipped),
            )
        return built

    def _write(self, built: BuiltArchive) -> None:
        group = built.group
        source_root = str(group.source_root)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with open(built.path, "wb") as fh, zipfile.ZipFile(
                fh, mode="w", compression=zipfile.ZIP_DEFLATED
            ) as zf:
                for raw in group.files:
                    ref = SourceFileRef.parse(raw)
                    arcname = internal_path(ref.path, source_root, group.destination)
                    if not arcname:
                        continue
                    if ref.is_dir:
                        self._add_directory(zf, arcname)
                        built.directories_written += 1
                    else:
                        self._add_file(zf, built, ref.path, arcname)
        except (OSError, zipfile.BadZipFile, zipfile.LargeZipFile) as e:
            raise ArchiveWriteError(built.file_name, str(e), component="builder") from e

    def _add_directory(self, zf: zipfile.ZipFile, arcname: str) -> None:
        info = zipfile.ZipInfo(arcname.rstrip("/") + "/", date_time=ZIP_EPOCH)
        info.external_attr = DIR_ATTRS
        zf.writestr(info, b"")

    def _add_file(
        self, zf: zipfile.ZipFile, built: BuiltArchive, source: str, arcname: str
    ) -> None:
        try:
            src = open(source, "rb")
        except (FileNotFoundError, NotADirectoryError):
            missing = MissingSourceFileError(source, built.file_name, component="builder")
            built.skipped.append(missing)
            logger.log_skipped_file(source, "does not exist")
            return

        with src:
            info = zipfile.ZipInfo(arcname, date_time=ZIP_EPOCH)
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = FILE_ATTRS
            info.file_size = os.fstat(src.fileno()).st_size
            with zf.open(info, mode="w") as dst:
                for chunk in iter(lambda: src.read(self.chunk_size), b""):
                    dst.write(chunk)
                    built.uncompressed_size += len(chunk)

        built.files_written += 1
