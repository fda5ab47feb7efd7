"""Version management utilities"""

import re
from typing import Any, Callable, List, Optional, Tuple, TypeVar

from packaging.version import parse, Version, InvalidVersion

from ..constants import RELEASE_TAG_PATTERN, PREVIEW_TAG_PREFIX, ZERO_VERSION

T = TypeVar('T')

_DIGITS = re.compile(r'(\d+)')


def parse_version(version_str: str) -> Optional[Version]:
    """
    Parse version string

    Args:
        version_str: Version string

    Returns:
        Version object or None if invalid
    """
    try:
        return parse(version_str)
    except InvalidVersion:
        return None


def is_valid_version(version: str) -> bool:
    """
    Check if version string is a valid (PEP 440 / semver-like) version

    Args:
        version: Version string

    Returns:
        True if valid
    """
    return parse_version(version) is not None


def natural_key(value: str) -> Tuple[Tuple[Any, ...], str]:
    """
    Numeric-aware sort key

    Runs of digits compare as integers, everything else compares
    case-insensitively, so "10.0.0" sorts after "9.0.0".

    Args:
        value: String to build a key for

    Returns:
        Sort key
    """
    parts = _DIGITS.split(value.lower())
    # re.split with a capture group puts digit runs at odd indexes
    chunks = tuple(int(p) if i % 2 else p for i, p in enumerate(parts))
    return chunks, value


def sort_by_version(items: List[T],
                    key: Callable[[T], str],
                    reverse: bool = True) -> List[T]:
    """
    Sort items by a version string attribute

    The sort is stable, so items with equal versions keep their order.

    Args:
        items: Items to sort
        key: Function returning the version string of an item
        reverse: Sort in descending order

    Returns:
        Sorted list
    """
    return sorted(items, key=lambda item: natural_key(key(item)), reverse=reverse)


def strip_version_prefix(version: str) -> str:
    """
    Remove a single leading "v" ("v1.2.0" -> "1.2.0")

    Args:
        version: Version or tag string

    Returns:
        Version without prefix
    """
    return version[1:] if version.startswith('v') else version


def slugify_version(version: str) -> str:
    """
    Hostname-safe form of a version ("1.2.0-RC" -> "1-2-0-rc")

    Args:
        version: Version string

    Returns:
        Slug
    """
    return version.replace('.', '-').lower()


def release_tag(version: str) -> str:
    """Tag used for a release upload"""
    return f"v{version}"


def release_alias(version: str) -> str:
    """Preview alias used for a release upload"""
    return f"v{slugify_version(version)}"


def preview_tag(pr_number: str) -> str:
    """Tag used for a PR preview upload"""
    return f"{PREVIEW_TAG_PREFIX}{pr_number}"


def is_release_tag(tag: str) -> bool:
    """Check if tag marks a release (`v<digit>...`)"""
    return bool(RELEASE_TAG_PATTERN.match(tag))


def is_preview_tag(tag: str) -> bool:
    """Check if tag marks a PR preview (`pr-...`)"""
    return tag.startswith(PREVIEW_TAG_PREFIX)


def is_zero_version(version: Optional[str]) -> bool:
    """Check for the "no version configured" placeholder"""
    return not version or version == ZERO_VERSION
