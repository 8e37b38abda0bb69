"""Branch-driven semantic release automation tool."""

__version__ = "0.1.0"

from branchrelease.exceptions import (
    ConfigurationError,
    GitError,
    InvalidBranchError,
    PathNotFoundError,
    PlanningError,
    PolicyError,
    ReleaseCancelled,
    ReleaseError,
    TargetWriteError,
    VersionError,
)

__all__ = [
    "__version__",
    "ReleaseError",
    "ConfigurationError",
    "PolicyError",
    "InvalidBranchError",
    "VersionError",
    "GitError",
    "TargetWriteError",
    "PathNotFoundError",
    "PlanningError",
    "ReleaseCancelled",
]
