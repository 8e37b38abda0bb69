"""Errors raised by branch-release.

Every failure that should stop a release derives from ReleaseError and
carries the process exit status the CLI uses for it:

    1  unexpected release failure
    2  configuration (manifest, settings, metadata, path templates)
    3  release policy or malformed version
    4  git
    5  release target files
    6  planner defect

Declining the confirmation prompt raises ReleaseCancelled, which is not a
ReleaseError: the run stops without writing anything and exits with 0.
"""


class ReleaseError(Exception):
    """A release could not be completed.

    Attributes:
        message: One-line description shown first
        details: Underlying cause, such as git's stderr or a parser message
        fix_hint: What the user can do about it
    """

    exit_code: int = 1

    def __init__(self, message: str, details: str | None = None, fix_hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details
        self.fix_hint = fix_hint

    def __str__(self) -> str:
        lines = [self.message]
        if self.details:
            lines.append(f"Details: {self.details}")
        if self.fix_hint:
            lines.append(f"Fix: {self.fix_hint}")
        return "\n".join(lines)


class ConfigurationError(ReleaseError):
    """Unusable manifest, settings, metadata file or path template."""

    exit_code = 2


class PolicyError(ReleaseError):
    """The repository state does not allow a release."""

    exit_code = 3


class InvalidBranchError(PolicyError):
    """Releases are only cut from develop, stage or master."""

    def __init__(self, branch: str, allowed: tuple[str, ...] = ()) -> None:
        super().__init__(
            f"Branch {branch} is not allowed!",
            details=f"Releasable branches: {', '.join(allowed)}" if allowed else None,
            fix_hint="Checkout develop, stage or master before releasing",
        )
        self.branch = branch


class VersionError(ReleaseError):
    """Not a semantic version, or an unknown bump type."""

    exit_code = 3


class GitError(ReleaseError):
    """A git command failed (fetch, pull, add, commit, tag, push or checkout)."""

    exit_code = 4


class TargetWriteError(ReleaseError):
    """A release target could not be read, parsed or written."""

    exit_code = 5


class PathNotFoundError(TargetWriteError):
    """A version path matches nothing in a target document.

    ``source`` names the file when the error comes from a release target.
    """

    def __init__(self, expression: str, source: str | None = None) -> None:
        super().__init__(
            f"Path {expression} not found" + (f" in {source}" if source else ""),
            fix_hint="Check the versionKeys entry against the document structure",
        )
        self.expression = expression
        self.source = source


class PlanningError(ReleaseError):
    """The planned version would not be greater than the current one.

    Always a bug in the planner, never a user error.
    """

    exit_code = 6


class ReleaseCancelled(Exception):
    """The user answered no at the confirmation prompt."""
