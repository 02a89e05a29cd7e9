"""
End-to-end archive build.

Groups the catalogue, builds and hashes every archive one at a time, builds
the auxiliary bundles and finally writes the manifest. A fatal error
propagates before the manifest is written, so no partial manifest is ever
produced.
"""

from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ..core.config import Config
from ..core.database import CatalogSource
from ..core.exceptions import SourceTreeError
from ..core.logging import generate_run_id, get_logger, run_id_var
from .builder import ArchiveBuilder
from .enumerator import list_tree
from .grouper import Grouper, GroupingResult
from .integrity import IntegrityRecorder
from .manifest import Manifest, ManifestEntry, write_manifest
from .types import ArchiveGroup, Classification, GroupKind

logger = get_logger(__name__)


class PackagingPipeline:
    """Sequential archive build for one run."""

    def __init__(
        self,
        config: Config,
        source: CatalogSource,
        build_date: Optional[date] = None,
    ):
        self.config = config
        self.source = source
        self.builder = ArchiveBuilder(
            output_dir=config.output_path,
            prefix=config.packaging.archive_prefix,
            build_date=build_date,
        )
        self.grouper = Grouper(
            source=source,
            restricted_tags=config.restricted_tag_set,
            content_root=config.source_paths.content,  # type: ignore[arg-type]
            image_root=config.source_paths.images,  # type: ignore[arg-type]
            content_destination=config.zipped_paths.content,
            image_destination=config.zipped_paths.images,
        )

    def auxiliary_bundles(self) -> List[Tuple[str, Path, str]]:
        """Configured fixed bundles as ``(name, source_root, destination)``."""
        sources = self.config.source_paths
        destinations = self.config.zipped_paths
        candidates = [
            ("Legacy", sources.legacy, destinations.legacy),
            ("Extras", sources.extras, destinations.extras),
            ("cgi-bin", sources.cgi, destinations.cgi),
        ]
        return [(name, root, dest) for name, root, dest in candidates if root is not None]

    def auxiliary_groups(self) -> List[ArchiveGroup]:
        """
        Enumerate each auxiliary bundle's tree into a group.

        An unreadable root aborts when ``strict_auxiliary_roots`` is set and
        otherwise skips the bundle after logging the error.
        """
        groups = []
        for name, root, destination in self.auxiliary_bundles():
            try:
                # The root itself carries no archive entry
                files = list_tree(root)[1:]
            except SourceTreeError as e:
                if self.config.packaging.strict_auxiliary_roots:
                    raise
                logger.error(f"Skipping {name} bundle: {e.message}", root=str(root))
                continue

            group = ArchiveGroup(
                name=name,
                classification=Classification.STANDARD,
                kind=GroupKind.AUXILIARY,
                source_root=root,
                destination=destination,
                files=files,
            )
            if not group.is_empty():
                groups.append(group)
        return groups

    def plan(
        self, categories: Optional[Iterable[str]] = None, include_auxiliary: bool = True
    ) -> List[ArchiveGroup]:
        """Every group a run would build, in build order, without writing anything."""
        grouping = self.grouper.collect(categories)
        groups = grouping.groups
        if include_auxiliary:
            groups += self.auxiliary_groups()
        return groups

    def run(
        self, categories: Optional[Iterable[str]] = None, include_auxiliary: bool = True
    ) -> Manifest:
        """
        Build every archive and write the manifest.

        Args:
            categories: Limit the build to these categories
            include_auxiliary: Also build the Legacy/Extras/cgi-bin bundles

        Returns:
            The manifest that was written

        Raises:
            PackerError: Any fatal error; the manifest is not written
        """
        token = run_id_var.set(generate_run_id())
        try:
            manifest = Manifest()
            recorder = IntegrityRecorder(manifest)

            grouping: GroupingResult = self.grouper.collect(categories)
            for group in grouping.groups:
                self._build_and_record(group, recorder)

            if include_auxiliary:
                for group in self.auxiliary_groups():
                    self._build_and_record(group, recorder)

            logger.info(f"Writing to {self.config.packaging.manifest_name}...")
            write_manifest(manifest, self.config.manifest_path)
            logger.info(
                "Done!",
                archives=len(manifest),
                compressed_size=manifest.compressed_size,
                uncompressed_size=manifest.uncompressed_size,
            )
            return manifest
        finally:
            run_id_var.reset(token)

    def _build_and_record(self, group: ArchiveGroup, recorder: IntegrityRecorder) -> ManifestEntry:
        built = self.builder.build(group)
        return recorder.record(built)
