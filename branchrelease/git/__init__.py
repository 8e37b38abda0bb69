"""Git operations and utilities.

This module provides a clean API for the git operations used by the release
workflow. All operations use branchrelease.utils.shell.run() for command
execution and raise GitError on failures.
"""

from branchrelease.git.client import GitClient
from branchrelease.git.operations import (
    add,
    checkout,
    commit,
    fetch,
    pull,
    push,
    push_tags,
    tag,
)
from branchrelease.git.queries import get_current_branch, get_tags, tag_exists

__all__ = [
    "GitClient",
    # Query operations
    "get_current_branch",
    "get_tags",
    "tag_exists",
    # Modification operations
    "fetch",
    "pull",
    "add",
    "commit",
    "tag",
    "push_tags",
    "push",
    "checkout",
]
