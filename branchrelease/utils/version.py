"""Semantic version helpers built on the ``semver`` package.

Versions are MAJOR.MINOR.PATCH[-PRERELEASE][+BUILD]. Git tags usually carry
a leading 'v' ('v1.2.3-beta.0'), which every helper here accepts.
Prerelease trains are ``<identifier>.<number>``, e.g. 'alpha.3' or 'beta.0'.
"""

from collections.abc import Callable
from typing import Literal

import semver

from branchrelease.exceptions import VersionError

BumpType = Literal["major", "minor", "patch"]

BUMP_TYPES: tuple[str, ...] = ("patch", "minor", "major")

_BUMPS: dict[str, Callable[[semver.Version], semver.Version]] = {
    "patch": semver.Version.bump_patch,
    "minor": semver.Version.bump_minor,
    "major": semver.Version.bump_major,
}


def parse_version(version_str: str) -> semver.Version:
    """Parse a version, dropping a 'v' that precedes the major number.

    Raises:
        VersionError: If the string is blank or not semver

    Examples:
        >>> str(parse_version('v1.2.3-beta.1'))
        '1.2.3-beta.1'
    """
    text = (version_str or "").strip()
    if not text:
        raise VersionError(
            "Version is empty",
            fix_hint="Use a semantic version such as 1.2.3",
        )

    if text.startswith("v") and text[1:2].isdigit():
        text = text[1:]

    try:
        return semver.Version.parse(text)
    except (ValueError, TypeError) as e:
        raise VersionError(
            f"'{version_str}' is not a semantic version",
            details=str(e),
            fix_hint="Use MAJOR.MINOR.PATCH with an optional prerelease, e.g. 1.2.3 or v1.2.3-alpha.0",
        ) from e


def is_valid_version(version_str: str) -> bool:
    """True when ``version_str`` parses, with or without a 'v'.

    Examples:
        >>> is_valid_version('v2.0.0-alpha.1')
        True
        >>> is_valid_version('2.0')
        False
    """
    try:
        parse_version(version_str)
    except VersionError:
        return False
    return True


def compare_versions(v1: str, v2: str) -> int:
    """-1, 0 or 1 as ``v1`` sorts before, equal to or after ``v2``."""
    return parse_version(v1).compare(parse_version(v2))


def normalize_version(version_str: str) -> str:
    """Canonical form without prefix or surrounding blanks.

    Examples:
        >>> normalize_version(' v1.2.3 ')
        '1.2.3'
    """
    return str(parse_version(version_str))


def add_tag_prefix(version: str, prefix: str = "v") -> str:
    """Tag name for ``version``; an existing 'v' is not doubled.

    Examples:
        >>> add_tag_prefix('v1.2.3')
        'v1.2.3'
    """
    return prefix + normalize_version(version)


def remove_tag_prefix(tag: str, prefix: str = "v") -> str:
    """Version carried by a tag created with ``prefix``.

    Raises:
        VersionError: If what remains is not a version

    Examples:
        >>> remove_tag_prefix('release1.2.3', 'release')
        '1.2.3'
    """
    name = tag.strip()
    if prefix:
        name = name.removeprefix(prefix)
    return normalize_version(name)


def prerelease_identifier(version_str: str) -> str | None:
    """First prerelease field ('beta' for '1.2.3-beta.4'), None for releases."""
    prerelease = parse_version(version_str).prerelease
    return prerelease.split(".", 1)[0] if prerelease else None


def bump_version(current: str, bump_type: BumpType | str) -> str:
    """Increment one release component and drop any prerelease.

    Raises:
        VersionError: If ``current`` or ``bump_type`` is invalid

    Examples:
        >>> bump_version('1.2.3', 'minor')
        '1.3.0'
        >>> bump_version('2.0.0-alpha.3', 'patch')
        '2.0.1'
    """
    version = parse_version(current)
    try:
        bump = _BUMPS[bump_type]
    except KeyError:
        raise VersionError(
            f"Invalid bump type: '{bump_type}'",
            fix_hint="Use one of: " + ", ".join(BUMP_TYPES),
        ) from None
    return str(bump(version))


def _increment_prerelease(version: semver.Version) -> semver.Version:
    """Add one to the trailing number of the prerelease, or append '.0'."""
    fields = str(version.prerelease).split(".")
    if fields[-1].isdigit():
        fields[-1] = str(int(fields[-1]) + 1)
    else:
        fields.append("0")
    return version.replace(prerelease=".".join(fields), build=None)


def bump_prerelease(current: str, identifier: str) -> str:
    """Move a version forward on a prerelease train.

    - A clean release opens a new train on the next patch
      ('1.2.3' -> '1.2.4-beta.0').
    - A lower train switches to ``identifier`` at zero
      ('1.2.4-alpha.3' -> '1.2.4-beta.0').
    - The same or a higher train is continued
      ('1.2.4-beta.0' -> '1.2.4-beta.1').

    The result always sorts after ``current``.
    """
    version = parse_version(current)

    if not version.prerelease:
        return str(version.bump_patch().replace(prerelease=f"{identifier}.0"))

    switched = version.replace(prerelease=f"{identifier}.0", build=None)
    if switched > version:
        return str(switched)
    return str(_increment_prerelease(version))


def open_prerelease(current: str, bump_type: BumpType | str, identifier: str) -> str:
    """Bump a release component and start a prerelease train on it.

    Examples:
        >>> open_prerelease('2.0.0', 'minor', 'alpha')
        '2.1.0-alpha.0'
    """
    bumped = parse_version(bump_version(current, bump_type))
    return str(bumped.replace(prerelease=f"{identifier}.0"))


__all__ = [
    "BUMP_TYPES",
    "BumpType",
    "add_tag_prefix",
    "bump_prerelease",
    "bump_version",
    "compare_versions",
    "is_valid_version",
    "normalize_version",
    "open_prerelease",
    "parse_version",
    "prerelease_identifier",
    "remove_tag_prefix",
]
