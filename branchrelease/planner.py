"""Next-version computation and the release plan.

Branch rules:
- master: next patch release ('2.0.0-alpha.3' -> '2.0.1')
- stage: next beta prerelease ('1.2.3' -> '1.2.4-beta.0')
- develop: continue a running alpha/beta train, or bump the chosen component
  of a clean release and open an alpha train ('2.0.0' + minor -> '2.1.0-alpha.0')
"""

from dataclasses import dataclass

from branchrelease.config.models import ReleaseTarget
from branchrelease.exceptions import PlanningError, VersionError
from branchrelease.policy import Branch, BumpStrategy, Environment, resolve_environment
from branchrelease.utils.version import (
    BUMP_TYPES,
    BumpType,
    bump_prerelease,
    bump_version,
    compare_versions,
    normalize_version,
    open_prerelease,
    prerelease_identifier,
)

TRAIN_IDENTIFIERS = ("alpha", "beta")
DEFAULT_MANUAL_BUMP: BumpType = "patch"


def needs_manual_bump(old_version: str, branch: str | Branch) -> bool:
    """Whether planning on ``branch`` takes a patch/minor/major choice.

    Only develop asks, and only when the current version is a clean release.
    """
    environment = resolve_environment(branch)
    if environment.strategy is not BumpStrategy.ALPHA_TRAIN:
        return False
    return prerelease_identifier(old_version) not in TRAIN_IDENTIFIERS


def plan_next_version(
    old_version: str,
    branch: str | Branch,
    manual_bump: BumpType | str | None = None,
) -> str:
    """Compute the version to release after ``old_version`` on ``branch``.

    Args:
        old_version: Current version
        branch: Branch being released
        manual_bump: patch, minor or major; used on develop after a clean
            release and ignored otherwise

    Returns:
        Next version, without prefix

    Raises:
        InvalidBranchError: If the branch has no release policy
        VersionError: If the versions or manual_bump are invalid
        PlanningError: If the result would not increase the version
    """
    strategy = resolve_environment(branch).strategy

    if strategy is BumpStrategy.PATCH:
        next_version = bump_version(old_version, "patch")
    elif strategy is BumpStrategy.BETA_PRERELEASE:
        next_version = bump_prerelease(old_version, "beta")
    elif not needs_manual_bump(old_version, branch):
        next_version = bump_prerelease(old_version, "alpha")
    else:
        bump = manual_bump or DEFAULT_MANUAL_BUMP
        if bump not in BUMP_TYPES:
            raise VersionError(
                f"Invalid bump type: '{bump}'",
                fix_hint="Use one of: " + ", ".join(BUMP_TYPES),
            )
        next_version = open_prerelease(old_version, bump, "alpha")

    if compare_versions(next_version, old_version) <= 0:
        raise PlanningError(
            f"Next version {next_version} does not follow {old_version}",
            details=f"Strategy {strategy.value} on {Branch(branch).value}",
            fix_hint="Report this as a bug",
        )
    return next_version


@dataclass(frozen=True)
class ReleasePlan:
    """Everything decided before the user confirms a release."""

    old_version: str
    new_version: str
    environment: Environment
    targets: tuple[ReleaseTarget, ...]
    tag_prefix: str = "v"

    @property
    def branch(self) -> str:
        return self.environment.branch.value

    @property
    def tag_name(self) -> str:
        return f"{self.tag_prefix}{self.new_version}"

    def formatted_version(self, prefix: bool) -> str:
        """Version string written into a target."""
        return f"v{self.new_version}" if prefix else self.new_version

    def question(self) -> str:
        return (
            f"Version will go from {self.old_version} to {self.new_version}. "
            f"Deploy {self.branch} to {self.environment.label} env?"
        )


def build_plan(
    old_version: str,
    branch: str | Branch,
    targets: tuple[ReleaseTarget, ...],
    manual_bump: BumpType | str | None = None,
    tag_prefix: str = "v",
) -> ReleasePlan:
    """Resolve the policy and next version into an immutable plan."""
    environment = resolve_environment(branch)
    return ReleasePlan(
        old_version=normalize_version(old_version),
        new_version=plan_next_version(old_version, branch, manual_bump),
        environment=environment,
        targets=tuple(targets),
        tag_prefix=tag_prefix,
    )
