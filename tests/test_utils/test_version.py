"""Unit tests for the semver helper functions."""

import pytest

from branchrelease.exceptions import VersionError
from branchrelease.utils.version import (
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


class TestParseVersion:
    """Tests for parse_version."""

    def test_accepts_v_prefix(self) -> None:
        assert str(parse_version("v1.2.3-beta.1")) == "1.2.3-beta.1"

    @pytest.mark.parametrize("value", ["", "   ", "1.2", "v", "version-1.0.0", "1.2.3.4"])
    def test_rejects_invalid(self, value: str) -> None:
        with pytest.raises(VersionError) as exc_info:
            parse_version(value)
        assert exc_info.value.fix_hint is not None

    def test_is_valid_version(self) -> None:
        assert is_valid_version("1.0.0-alpha.0") is True
        assert is_valid_version("v2.0.0") is True
        assert is_valid_version("2.0") is False


class TestComparisons:
    """Tests for semver ordering helpers."""

    def test_release_above_prerelease(self) -> None:
        assert compare_versions("1.0.0", "1.0.0-beta.9") == 1

    def test_numeric_prerelease_fields(self) -> None:
        assert compare_versions("1.0.0-alpha.10", "1.0.0-alpha.9") == 1

    def test_prefix_is_ignored(self) -> None:
        assert compare_versions("v1.2.3", "1.2.3") == 0


class TestTagPrefix:
    """Tests for tag prefix handling."""

    def test_add_and_remove(self) -> None:
        assert add_tag_prefix("1.2.3") == "v1.2.3"
        assert add_tag_prefix("v1.2.3") == "v1.2.3"
        assert remove_tag_prefix("release1.2.3", "release") == "1.2.3"
        assert normalize_version(" v1.2.3-alpha.0 ") == "1.2.3-alpha.0"


class TestBumps:
    """Tests for release and prerelease bumps."""

    def test_bump_version(self) -> None:
        assert bump_version("1.2.3", "patch") == "1.2.4"
        assert bump_version("1.2.3", "minor") == "1.3.0"
        assert bump_version("1.2.3", "major") == "2.0.0"

    def test_bump_version_invalid_type(self) -> None:
        with pytest.raises(VersionError):
            bump_version("1.2.3", "2.0.0")

    def test_prerelease_identifier(self) -> None:
        assert prerelease_identifier("1.0.0-alpha.3") == "alpha"
        assert prerelease_identifier("1.0.0-beta") == "beta"
        assert prerelease_identifier("1.0.0") is None

    @pytest.mark.parametrize(
        ("current", "identifier", "expected"),
        [
            ("1.2.3", "beta", "1.2.4-beta.0"),
            ("1.2.4-beta.0", "beta", "1.2.4-beta.1"),
            ("1.2.4-alpha.3", "beta", "1.2.4-beta.0"),
            ("1.2.4-beta.2", "alpha", "1.2.4-beta.3"),
            ("1.2.4-alpha", "alpha", "1.2.4-alpha.0"),
            ("1.2.4-beta", "alpha", "1.2.4-beta.0"),
        ],
    )
    def test_bump_prerelease(self, current: str, identifier: str, expected: str) -> None:
        assert bump_prerelease(current, identifier) == expected

    def test_open_prerelease(self) -> None:
        assert open_prerelease("2.0.0", "minor", "alpha") == "2.1.0-alpha.0"
        assert open_prerelease("2.0.0", "major", "alpha") == "3.0.0-alpha.0"
