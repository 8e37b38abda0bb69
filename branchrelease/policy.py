"""Branch release policy.

Maps the releasable branches to their version bump strategy and the
environment they deploy to.
"""

from dataclasses import dataclass
from enum import Enum

from branchrelease.exceptions import InvalidBranchError


class Branch(str, Enum):
    """Branches a release can be cut from."""

    DEVELOP = "develop"
    STAGE = "stage"
    MASTER = "master"


class BumpStrategy(Enum):
    """How the next version is derived on a branch.

    - ALPHA_TRAIN: continue the alpha train, or open one after a release
    - BETA_PRERELEASE: next beta prerelease
    - PATCH: next patch release
    """

    ALPHA_TRAIN = "alpha-train"
    BETA_PRERELEASE = "beta-prerelease"
    PATCH = "patch"


@dataclass(frozen=True)
class Environment:
    """Release policy of one branch."""

    branch: Branch
    strategy: BumpStrategy
    label: str


POLICIES: dict[Branch, Environment] = {
    Branch.DEVELOP: Environment(Branch.DEVELOP, BumpStrategy.ALPHA_TRAIN, "development"),
    Branch.STAGE: Environment(Branch.STAGE, BumpStrategy.BETA_PRERELEASE, "stage"),
    Branch.MASTER: Environment(Branch.MASTER, BumpStrategy.PATCH, "production"),
}

ALLOWED_BRANCHES: tuple[str, ...] = tuple(branch.value for branch in Branch)


def resolve_environment(branch: str | Branch) -> Environment:
    """Return the release policy for ``branch``.

    Raises:
        InvalidBranchError: If the branch is not develop, stage or master
    """
    try:
        return POLICIES[Branch(branch)]
    except ValueError:
        raise InvalidBranchError(str(branch), ALLOWED_BRANCHES) from None
