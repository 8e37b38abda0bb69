"""Read-only git queries.

Each query runs through branchrelease.utils.shell.run() and turns a failed
command into GitError.
"""

from pathlib import Path

from branchrelease.exceptions import GitError
from branchrelease.utils.shell import ShellError, run


def get_current_branch(cwd: Path | None = None) -> str:
    """Name of the checked-out branch.

    On a detached HEAD git prints nothing for ``--show-current``; the
    abbreviated ref ("HEAD") is returned instead, which no release policy
    accepts.

    Raises:
        GitError: If git cannot tell
    """
    try:
        branch = run(["git", "branch", "--show-current"], cwd=cwd).stdout
        if not branch:
            branch = run(["git", "rev-parse", "--abbrev-ref", "HEAD"], cwd=cwd).stdout
    except ShellError as e:
        raise GitError(
            "Cannot determine the current branch",
            details=str(e),
            fix_hint="Run the release inside a git repository with at least one commit",
        ) from e
    return branch


def get_tags(cwd: Path | None = None) -> list[str]:
    """All tag names, in git's order.

    Raises:
        GitError: If the tags cannot be listed
    """
    try:
        output = run(["git", "tag", "--list"], cwd=cwd).stdout
    except ShellError as e:
        raise GitError(
            "Cannot list git tags",
            details=str(e),
            fix_hint="Run the release inside a git repository",
        ) from e
    return [name.strip() for name in output.splitlines() if name.strip()]


def tag_exists(tag: str, cwd: Path | None = None) -> bool:
    """Whether ``tag`` exists in the local repository."""
    result = run(
        ["git", "rev-parse", "--verify", "--quiet", f"refs/tags/{tag}"],
        cwd=cwd,
        check=False,
    )
    return result.returncode == 0
