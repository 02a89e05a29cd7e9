"""
Filesystem enumeration for auxiliary bundles.
"""

import os
from pathlib import Path
from typing import List, Union

from ..core.exceptions import SourceTreeError
from ..core.logging import get_logger

logger = get_logger(__name__)


def list_tree(root: Union[str, Path]) -> List[str]:
    """
    List every directory and file beneath ``root``, depth first.

    Entries are visited in lexical order with each directory emitted before
    its children, starting with ``root`` itself. Directories carry a trailing
    ``os.sep`` so the archive builder keeps them as placeholders.

    Raises:
        SourceTreeError: If ``root`` or any directory below it cannot be read
    """
    root_str = str(root)
    if not os.path.isdir(root_str):
        reason = "not a directory" if os.path.exists(root_str) else "does not exist"
        raise SourceTreeError(root_str, reason, component="enumerator")

    entries: List[str] = []
    _walk(root_str, entries)
    logger.debug(f"Enumerated {len(entries)} entries under {root_str}")
    return entries


def _walk(directory: str, entries: List[str]) -> None:
    entries.append(directory.rstrip(os.sep) + os.sep)
    try:
        with os.scandir(directory) as it:
            children = sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        raise SourceTreeError(directory, e.strerror or str(e), component="enumerator") from e

    for child in children:
        if child.is_dir(follow_symlinks=False):
            _walk(child.path, entries)
        else:
            entries.append(child.path)
