"""
Tag-based content classification.

An item is restricted when any of its tags is in the configured restricted
set. Tags and category memberships are stored as ``"; "``-joined strings.
"""

from typing import AbstractSet, Iterable, List

from .types import Classification

TAG_DELIMITER = "; "


def split_tags(value: str) -> List[str]:
    """Split a delimiter-joined string into its tokens. Empty input gives no tokens."""
    if not value:
        return []
    return value.split(TAG_DELIMITER)


def is_restricted(tags: Iterable[str], restricted: AbstractSet[str]) -> bool:
    """True iff any tag is a member of ``restricted``."""
    return any(tag in restricted for tag in tags)


def classify(tags_str: str, restricted: AbstractSet[str]) -> Classification:
    """Classify an item from its raw tag string."""
    if is_restricted(split_tags(tags_str), restricted):
        return Classification.RESTRICTED
    return Classification.STANDARD


def has_membership(membership_str: str, category: str) -> bool:
    """Exact-token membership test for a delimiter-joined category list.

    Substring matches are not membership: "SNES" is not a member of
    "Super SNES Extended".
    """
    return category in split_tags(membership_str)
