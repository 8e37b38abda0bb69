"""Git operations that change the repository or its remote.

Every function runs one git command through branchrelease.utils.shell.run()
and raises GitError, with the command's stderr as details, when it fails.
Network operations accept a timeout; None waits for git to finish.
"""

from pathlib import Path

from branchrelease.exceptions import GitError
from branchrelease.utils.shell import ShellError, run

PUSH_HINT = "Check that the remote exists, that you can push to it and that the network is up"


def _git(
    args: list[str],
    cwd: Path | None,
    failure: str,
    fix_hint: str,
    timeout: float | None = None,
) -> str:
    try:
        return run(["git", *args], cwd=cwd, timeout=timeout).stdout
    except ShellError as e:
        raise GitError(failure, details=str(e), fix_hint=fix_hint) from e


def fetch(
    remote: str = "origin",
    tags: bool = False,
    cwd: Path | None = None,
    timeout: float | None = None,
) -> None:
    """Fetch ``remote``, including every tag when ``tags`` is set."""
    args = ["fetch", "--tags", remote] if tags else ["fetch", remote]
    _git(
        args,
        cwd,
        f"Cannot fetch from remote '{remote}'",
        "Check the remote name and the network connection",
        timeout=timeout,
    )


def pull(
    remote: str = "origin",
    branch: str | None = None,
    cwd: Path | None = None,
    timeout: float | None = None,
) -> None:
    """Merge ``remote``/``branch`` into the current branch.

    Always merges (``--no-rebase``) so a pull never rewrites local commits.
    """
    args = ["pull", "--no-rebase", remote]
    if branch:
        args.append(branch)
    target = f"{remote}/{branch}" if branch else remote
    _git(
        args,
        cwd,
        f"Cannot pull {target}",
        "Resolve the diverged history or the network problem, then release again",
        timeout=timeout,
    )


def add(pattern: str = ".", cwd: Path | None = None) -> None:
    """Stage every change matching the pathspec ``pattern``."""
    _git(
        ["add", "--", pattern],
        cwd,
        f"Cannot stage '{pattern}'",
        "Check the add pattern and the repository permissions",
    )


def commit(message: str, sign: bool = False, cwd: Path | None = None) -> str:
    """Commit the staged changes and return the new commit SHA.

    Raises:
        GitError: If nothing is staged or the commit is rejected
    """
    args = ["commit", "-m", message]
    if sign:
        args.append("-S")
    hint = "Make sure the release targets changed; 'git status' shows what is staged"
    _git(args, cwd, "Cannot create the release commit", hint)
    return _git(["rev-parse", "HEAD"], cwd, "Cannot read the release commit", hint)


def tag(
    name: str,
    message: str | None = None,
    sign: bool = False,
    cwd: Path | None = None,
) -> None:
    """Create the annotated tag ``name`` on HEAD.

    The annotation defaults to the tag name.
    """
    args = ["tag", "-a", name, "-m", message if message is not None else name]
    if sign:
        args.append("-s")
    _git(
        args,
        cwd,
        f"Cannot create tag '{name}'",
        f"If the tag is left over from an earlier attempt, remove it with 'git tag -d {name}'",
    )


def push_tags(
    remote: str = "origin",
    cwd: Path | None = None,
    timeout: float | None = None,
) -> None:
    """Push every local tag to ``remote``."""
    _git(
        ["push", remote, "--tags"],
        cwd,
        f"Cannot push tags to remote '{remote}'",
        PUSH_HINT,
        timeout=timeout,
    )


def push(
    remote: str = "origin",
    branch: str | None = None,
    cwd: Path | None = None,
    timeout: float | None = None,
) -> None:
    """Push ``branch`` (or the current branch) to ``remote``."""
    args = ["push", remote]
    if branch:
        args.append(branch)
    _git(
        args,
        cwd,
        f"Cannot push {branch or 'the current branch'} to remote '{remote}'",
        PUSH_HINT,
        timeout=timeout,
    )


def checkout(ref: str, cwd: Path | None = None) -> None:
    """Switch the working tree to ``ref``."""
    _git(
        ["checkout", ref],
        cwd,
        f"Cannot checkout '{ref}'",
        "Check that the branch exists and the working tree is clean",
    )
