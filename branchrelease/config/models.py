"""Pydantic v2 models for the release manifest and tool settings.

The manifest maps arbitrary keys to release targets:

    {
      "manifest": {"dir": "/manifest.json", "prefix": true, "versionKeys": ["$.version"]},
      "deploy": {"dir": "/deploy.json", "prefix": false, "versionKeys": ["$.versions.{branch}"]}
    }

Tool settings come from BRANCH_RELEASE_* environment variables.
"""

import string
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MESSAGE_FIELDS = frozenset({"tag", "version", "branch"})


class ReleaseTarget(BaseModel):
    """A file whose version fields are rewritten on release."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str = Field(default="", description="Manifest key of this target")
    dir: str = Field(description="File path relative to the project root")
    prefix: bool = Field(default=False, description="Write versions as 'v1.2.3'")
    version_keys: tuple[str, ...] = Field(
        alias="versionKeys",
        min_length=1,
        description="Path expressions of the version fields, in order",
    )
    create_missing: bool = Field(
        default=False,
        alias="createMissing",
        description="Create missing objects along a path instead of failing",
    )

    @field_validator("dir")
    @classmethod
    def validate_dir(cls, v: str) -> str:
        if not v.strip("/").strip():
            raise ValueError("dir must name a file")
        return v

    def resolve(self, root: Path) -> Path:
        """Return the absolute file path below ``root``."""
        return root / self.dir.lstrip("/")


class ReleaseManifest(BaseModel):
    """Ordered collection of release targets."""

    model_config = ConfigDict(frozen=True)

    targets: tuple[ReleaseTarget, ...] = ()

    @classmethod
    def from_mapping(cls, data: dict[str, dict[str, object]]) -> "ReleaseManifest":
        """Build a manifest from the on-disk key -> target mapping.

        Declaration order of the mapping is preserved.
        """
        targets = []
        for key, entry in data.items():
            if not isinstance(entry, dict):
                raise ValueError(f"Manifest entry '{key}' must be a mapping")
            targets.append(ReleaseTarget.model_validate({**entry, "key": key}))
        return cls(targets=tuple(targets))


class ReleaseSettings(BaseSettings):
    """Tool settings, overridable from the environment.

    Example: BRANCH_RELEASE_REMOTE=upstream
    """

    model_config = SettingsConfigDict(env_prefix="BRANCH_RELEASE_")

    remote: str = Field(default="origin", description="Git remote name")
    tag_prefix: str = Field(default="v", description="Prefix for git tags")
    commit_message: str = Field(
        default="Released {tag}",
        description="Release commit message template",
    )
    tag_message: str = Field(
        default="Released {tag}",
        description="Annotated tag message template",
    )
    metadata_file: str = Field(
        default="package.json",
        description="Project metadata file holding the fallback version",
    )
    metadata_version_path: str = Field(
        default="$.version",
        description="Path expression of the version inside the metadata file",
    )
    add_pattern: str = Field(default=".", description="Pathspec staged before commit")
    json_indent: int = Field(default=2, ge=0, description="Indent of rewritten JSON")
    git_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Timeout in seconds for network git calls (None waits forever)",
    )
    sign_commits: bool = Field(default=False, description="GPG sign commits")
    sign_tags: bool = Field(default=False, description="GPG sign tags")

    @field_validator("tag_prefix")
    @classmethod
    def validate_tag_prefix(cls, v: str) -> str:
        if v and not v.isalnum():
            raise ValueError("tag_prefix must be alphanumeric or empty")
        return v

    @field_validator("commit_message", "tag_message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        try:
            fields = {name for _, name, _, _ in string.Formatter().parse(v) if name is not None}
        except ValueError as e:
            raise ValueError(f"malformed message template: {e}") from e
        unknown = fields - MESSAGE_FIELDS
        if unknown:
            raise ValueError(
                f"unknown placeholder(s) {sorted(unknown)}; use {sorted(MESSAGE_FIELDS)}"
            )
        try:
            v.format(tag="v0.0.0", version="0.0.0", branch="develop")
        except (ValueError, KeyError, IndexError, AttributeError) as e:
            raise ValueError(f"message template cannot be rendered: {e}") from e
        return v
