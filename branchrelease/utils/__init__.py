"""Utility modules for the release tool."""

from branchrelease.utils.shell import ShellError, run, strip_ansi
from branchrelease.utils.version import (
    BUMP_TYPES,
    BumpType,
    add_tag_prefix,
    bump_prerelease,
    bump_version,
    compare_versions,
    is_valid_version,
    normalize_version,
    open_prerelease,
    parse_version,
    prerelease_identifier,
    remove_tag_prefix,
)

__all__ = [
    # Shell utilities
    "run",
    "strip_ansi",
    "ShellError",
    # Version utilities
    "parse_version",
    "is_valid_version",
    "compare_versions",
    "normalize_version",
    "add_tag_prefix",
    "remove_tag_prefix",
    "prerelease_identifier",
    "bump_version",
    "bump_prerelease",
    "open_prerelease",
    "BumpType",
    "BUMP_TYPES",
]
