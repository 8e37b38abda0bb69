"""Current version discovery from git tags."""

from dataclasses import dataclass, field
from functools import cmp_to_key

from branchrelease.exceptions import VersionError
from branchrelease.policy import Branch, resolve_environment
from branchrelease.utils.version import (
    compare_versions,
    normalize_version,
    prerelease_identifier,
    remove_tag_prefix,
)

CANDIDATE_LIMIT = 5


@dataclass(frozen=True)
class VersionResolution:
    """Outcome of tag-based version discovery.

    Attributes:
        version: Current version, without prefix
        tag: Tag the version came from (None when falling back)
        candidates: Highest visible tags, best first (display only)
        from_fallback: True when no usable tag was found
    """

    version: str
    tag: str | None = None
    candidates: tuple[str, ...] = field(default_factory=tuple)
    from_fallback: bool = False


def tag_version(tag: str, tag_prefix: str = "v") -> str | None:
    """Version carried by ``tag``, or None if it is not a release tag."""
    try:
        return remove_tag_prefix(tag, tag_prefix)
    except VersionError:
        return None


def visible_tags(tags: list[str], branch: str | Branch, tag_prefix: str = "v") -> list[str]:
    """Keep the semver tags a branch may see, highest first.

    Develop never sees beta tags, which belong to stage's in-flight train.
    """
    versions = {t: v for t in tags if (v := tag_version(t, tag_prefix)) is not None}
    if resolve_environment(branch).branch is Branch.DEVELOP:
        versions = {t: v for t, v in versions.items() if prerelease_identifier(v) != "beta"}

    def compare(a: str, b: str) -> int:
        return compare_versions(versions[a], versions[b])

    return sorted(versions, key=cmp_to_key(compare), reverse=True)


def resolve_current_version(
    tags: list[str],
    branch: str | Branch,
    fallback: str,
    tag_prefix: str = "v",
) -> VersionResolution:
    """Select the current version for ``branch``.

    Args:
        tags: All tag names in the repository
        branch: Branch being released
        fallback: Version declared in project metadata
        tag_prefix: Prefix release tags are created with

    Returns:
        VersionResolution; never fails when fallback is valid

    Raises:
        InvalidBranchError: If the branch has no release policy
    """
    ranked = visible_tags(tags, branch, tag_prefix)
    if not ranked:
        return VersionResolution(version=normalize_version(fallback), from_fallback=True)

    return VersionResolution(
        version=remove_tag_prefix(ranked[0], tag_prefix),
        tag=ranked[0],
        candidates=tuple(ranked[:CANDIDATE_LIMIT]),
    )
