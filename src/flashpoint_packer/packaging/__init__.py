"""
Archive build pipeline.

Classification, grouping, enumeration, archive writing, integrity recording
and manifest persistence.
"""

from .builder import ArchiveBuilder, archive_name, internal_path
from .classifier import classify, has_membership, is_restricted, split_tags
from .enumerator import list_tree
from .grouper import Grouper, GroupingResult, content_path, image_paths
from .integrity import IntegrityRecorder, VerificationReport, hash_file, verify
from .manifest import Manifest, ManifestEntry, load_manifest, write_manifest
from .pipeline import PackagingPipeline
from .types import (
    ArchiveGroup,
    BuiltArchive,
    Classification,
    GroupKind,
    ManifestSection,
    SourceFileRef,
)

__all__ = [
    "ArchiveBuilder",
    "ArchiveGroup",
    "BuiltArchive",
    "Classification",
    "GroupKind",
    "Grouper",
    "GroupingResult",
    "IntegrityRecorder",
    "Manifest",
    "ManifestEntry",
    "ManifestSection",
    "PackagingPipeline",
    "SourceFileRef",
    "VerificationReport",
    "archive_name",
    "classify",
    "content_path",
    "has_membership",
    "hash_file",
    "image_paths",
    "internal_path",
    "is_restricted",
    "list_tree",
    "load_manifest",
    "split_tags",
    "verify",
    "write_manifest",
]
