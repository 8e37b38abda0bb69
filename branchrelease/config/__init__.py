"""Configuration management for the release tool."""

from branchrelease.config.models import ReleaseManifest, ReleaseSettings, ReleaseTarget

__all__ = [
    "ReleaseManifest",
    "ReleaseSettings",
    "ReleaseTarget",
]
