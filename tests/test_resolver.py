"""Tests for tag-based version discovery."""

import pytest

from branchrelease.exceptions import InvalidBranchError
from branchrelease.resolver import resolve_current_version, visible_tags


class TestVisibleTags:
    """Tests for visible_tags filtering and ordering."""

    def test_invalid_tags_are_discarded(self) -> None:
        tags = ["v1.0.0", "latest", "release-2", "v1.2", "1.1.0"]
        assert visible_tags(tags, "master") == ["1.1.0", "v1.0.0"]

    def test_sorted_by_semver_precedence(self) -> None:
        """Releases sort above their prereleases and numbers compare numerically."""
        tags = ["v1.0.0-alpha.10", "v1.0.0", "v1.0.0-alpha.2", "v1.0.0-beta.0", "v0.9.9"]
        assert visible_tags(tags, "stage") == [
            "v1.0.0",
            "v1.0.0-beta.0",
            "v1.0.0-alpha.10",
            "v1.0.0-alpha.2",
            "v0.9.9",
        ]

    def test_develop_hides_beta_tags(self) -> None:
        tags = ["v1.1.0-beta.0", "v1.1.0-alpha.1", "v1.0.0"]
        assert visible_tags(tags, "develop") == ["v1.1.0-alpha.1", "v1.0.0"]

    def test_stage_and_master_see_beta_tags(self) -> None:
        tags = ["v1.1.0-beta.0", "v1.0.0"]
        assert visible_tags(tags, "stage")[0] == "v1.1.0-beta.0"
        assert visible_tags(tags, "master")[0] == "v1.1.0-beta.0"


class TestResolveCurrentVersion:
    """Tests for resolve_current_version."""

    def test_develop_excludes_beta(self) -> None:
        """Stage's in-flight beta must not become develop's current version."""
        result = resolve_current_version(["v1.0.0", "v1.1.0-beta.0", "v1.2.0"], "develop", "0.0.1")
        assert result.version == "1.2.0"
        assert result.tag == "v1.2.0"
        assert result.from_fallback is False

    def test_develop_with_newer_beta(self) -> None:
        result = resolve_current_version(["v1.0.0", "v1.1.0-beta.0"], "develop", "0.0.1")
        assert result.version == "1.0.0"

    def test_highest_tag_wins(self) -> None:
        result = resolve_current_version(["v2.0.0-alpha.3", "v1.9.0"], "master", "1.0.0")
        assert result.version == "2.0.0-alpha.3"

    def test_no_tags_uses_fallback(self) -> None:
        """Zero valid tags is a soft condition resolved by the fallback."""
        result = resolve_current_version([], "master", "1.2.3")
        assert result.version == "1.2.3"
        assert result.tag is None
        assert result.candidates == ()
        assert result.from_fallback is True

    def test_only_invalid_tags_uses_fallback(self) -> None:
        result = resolve_current_version(["nightly", "build-42"], "stage", "v0.3.0")
        assert result.version == "0.3.0"
        assert result.from_fallback is True

    def test_develop_only_beta_tags_uses_fallback(self) -> None:
        result = resolve_current_version(["v1.0.0-beta.1"], "develop", "0.9.0")
        assert result.version == "0.9.0"
        assert result.from_fallback is True

    def test_candidates_capped_at_five(self) -> None:
        tags = [f"v1.0.{patch}" for patch in range(8)]
        result = resolve_current_version(tags, "master", "0.0.0")
        assert result.candidates == ("v1.0.7", "v1.0.6", "v1.0.5", "v1.0.4", "v1.0.3")
        assert result.version == "1.0.7"

    def test_custom_tag_prefix(self) -> None:
        tags = ["release1.0.0", "release1.1.0-beta.0", "other2.0.0"]
        result = resolve_current_version(tags, "stage", "0.0.1", tag_prefix="release")
        assert result.version == "1.1.0-beta.0"
        assert result.tag == "release1.1.0-beta.0"
        assert result.candidates == ("release1.1.0-beta.0", "release1.0.0")

    @pytest.mark.parametrize("branch", ["feature", "main", ""])
    def test_unreleasable_branch_rejected(self, branch: str) -> None:
        with pytest.raises(InvalidBranchError) as exc_info:
            resolve_current_version(["v1.0.0"], branch, "0.0.1")
        assert exc_info.value.exit_code == 3
