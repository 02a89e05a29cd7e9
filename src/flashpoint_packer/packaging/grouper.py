"""
Category grouping for the archive build.

Queries the catalogue for every category and partitions each category's
content files and image files into standard and restricted groups.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import AbstractSet, Dict, Iterable, List, Optional, Tuple

from ..core.database import CatalogSource
from ..core.logging import category_var, get_logger
from .classifier import classify, has_membership
from .types import ArchiveGroup, Classification, GroupKind

logger = get_logger(__name__)

IMAGE_EXTENSION = ".png"
IMAGE_FOLDERS = ("Logos", "Screenshots")


def content_path(content_root: Path, path: str) -> Optional[str]:
    """Join a catalogue path under ``content_root``.

    Leading separators are dropped so absolute catalogue paths stay inside the
    root. Returns None for paths that climb out of the root.
    """
    root = os.path.normpath(str(content_root))
    joined = os.path.normpath(os.path.join(root, path.lstrip("/\\")))
    if os.path.commonpath([root, joined]) != root:
        return None
    return joined


def image_paths(image_root: Path, item_id: str) -> List[str]:
    """Sharded logo and screenshot paths for an item.

    ``<root>/<folder>/<id[0:2]>/<id[2:4]>/<id>.png`` for each image folder.
    """
    relative = os.path.join(item_id[:2], item_id[2:4], item_id + IMAGE_EXTENSION)
    return [os.path.join(str(image_root), folder, relative) for folder in IMAGE_FOLDERS]


@dataclass
class GroupingResult:
    """Non-empty archive groups discovered for a run, in discovery order."""

    content_groups: List[ArchiveGroup] = field(default_factory=list)
    image_groups: List[ArchiveGroup] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)

    @property
    def groups(self) -> List[ArchiveGroup]:
        return self.content_groups + self.image_groups


class Grouper:
    """Partition catalogue rows into (category, classification, kind) groups."""

    def __init__(
        self,
        source: CatalogSource,
        restricted_tags: AbstractSet[str],
        content_root: Path,
        image_root: Path,
        content_destination: str = "",
        image_destination: str = "",
    ):
        self.source = source
        self.restricted_tags = restricted_tags
        self.content_root = Path(os.path.normpath(str(content_root)))
        self.image_root = Path(image_root)
        self.content_destination = content_destination
        self.image_destination = image_destination

    def collect(self, categories: Optional[Iterable[str]] = None) -> GroupingResult:
        """
        Build the archive groups for every category.

        Args:
            categories: Restrict grouping to these categories; defaults to
                every distinct category in the catalogue

        Returns:
            Non-empty content and image groups

        Raises:
            DataSourceError: If any catalogue query fails
        """
        names = list(categories) if categories is not None else self.source.list_categories()
        result = GroupingResult(categories=names)

        for category in names:
            token = category_var.set(category)
            try:
                logger.info(f"Fetching info about {category} entries...")
                content = self._content_groups(category)
                images = self._image_groups(category)
            finally:
                category_var.reset(token)

            result.content_groups.extend(g for g in content if not g.is_empty())
            result.image_groups.extend(g for g in images if not g.is_empty())

        logger.info(
            "Grouping complete",
            categories=len(names),
            content_groups=len(result.content_groups),
            image_groups=len(result.image_groups),
        )
        return result

    def _new_pair(
        self, category: str, kind: GroupKind, root: Path, destination: str
    ) -> Dict[Classification, ArchiveGroup]:
        return {
            classification: ArchiveGroup(
                name=category,
                classification=classification,
                kind=kind,
                source_root=root,
                destination=destination,
            )
            for classification in (Classification.STANDARD, Classification.RESTRICTED)
        }

    @staticmethod
    def _ordered(pair: Dict[Classification, ArchiveGroup]) -> Tuple[ArchiveGroup, ArchiveGroup]:
        return pair[Classification.STANDARD], pair[Classification.RESTRICTED]

    def _content_groups(self, category: str) -> Tuple[ArchiveGroup, ArchiveGroup]:
        pair = self._new_pair(
            category, GroupKind.CONTENT, self.content_root, self.content_destination
        )
        rejected = 0
        for path, tags, membership in self.source.content_rows(category):
            if not has_membership(membership, category):
                rejected += 1
                continue
            resolved = content_path(self.content_root, path)
            if resolved is None:
                logger.warning(f"Ignoring path outside the content root: {path}")
                continue
            target = pair[classify(tags, self.restricted_tags)]
            target.add(resolved)

        if rejected:
            logger.debug("Dropped partial category matches", kind="content", rows=rejected)
        return self._ordered(pair)

    def _image_groups(self, category: str) -> Tuple[ArchiveGroup, ArchiveGroup]:
        pair = self._new_pair(
            category, GroupKind.IMAGE, self.image_root, self.image_destination
        )
        rejected = 0
        for item_id, tags, membership in self.source.image_rows(category):
            if not has_membership(membership, category):
                rejected += 1
                continue
            target = pair[classify(tags, self.restricted_tags)]
            target.add(*image_paths(self.image_root, item_id))

        if rejected:
            logger.debug("Dropped partial category matches", kind="image", rows=rejected)
        return self._ordered(pair)
