"""Release workflow orchestration.

Runs one release as an explicit state machine:

    INIT -> BRANCH_CHECK -> SYNC -> VERSION_DISCOVERY -> CONFIRM -> WRITING
         -> COMMIT -> TAG -> PUSH_TAG -> PUSH_BRANCH -> [RETURN_TO_DEVELOP] -> DONE

Any step may abort. Each handler receives the run state and returns the next
stage together with the updated state; nothing is retried and completed git
mutations are never undone.
"""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Protocol

from branchrelease.config.models import ReleaseManifest, ReleaseSettings
from branchrelease.exceptions import ConfigurationError, GitError, ReleaseCancelled, ReleaseError
from branchrelease.planner import ReleasePlan, build_plan, needs_manual_bump
from branchrelease.policy import Branch, Environment, resolve_environment
from branchrelease.resolver import VersionResolution, resolve_current_version
from branchrelease.utils.version import BUMP_TYPES, BumpType
from branchrelease.writer import apply_version


class ReleaseStage(Enum):
    """States of the release state machine."""

    INIT = "init"
    BRANCH_CHECK = "branch-check"
    SYNC = "sync"
    VERSION_DISCOVERY = "version-discovery"
    CONFIRM = "confirm"
    WRITING = "writing"
    COMMIT = "commit"
    TAG = "tag"
    PUSH_TAG = "push-tag"
    PUSH_BRANCH = "push-branch"
    RETURN_TO_DEVELOP = "return-to-develop"
    DONE = "done"
    ABORTED = "aborted"


class StageStatus(Enum):
    """Progress events reported for a stage."""

    START = "start"
    SUCCESS = "success"
    SKIPPED = "skipped"
    INFO = "info"
    WARNING = "warning"
    FAILED = "failed"


class ReleaseOutcome(Enum):
    DONE = "done"
    CANCELLED = "cancelled"
    FAILED = "failed"


class ProgressReporter(Protocol):
    def report(self, stage: ReleaseStage, status: StageStatus, message: str = "") -> None: ...


class Prompter(Protocol):
    def confirm(self, question: str) -> bool: ...

    def choose_bump(self, question: str, choices: tuple[str, ...], default: str) -> str: ...


class GitBackend(Protocol):
    """Git primitives the workflow depends on (see GitClient)."""

    def get_current_branch(self) -> str: ...

    def list_tags(self) -> list[str]: ...

    def tag_exists(self, name: str) -> bool: ...

    def fetch(self, remote: str, include_tags: bool = True) -> None: ...

    def pull(self, remote: str, branch: str) -> None: ...

    def add(self, pattern: str) -> None: ...

    def commit(self, message: str) -> str: ...

    def create_tag(self, name: str, message: str | None = None) -> None: ...

    def push_tags(self, remote: str) -> None: ...

    def push(self, remote: str, branch: str) -> None: ...

    def checkout(self, branch: str) -> None: ...


@dataclass(frozen=True)
class RunState:
    """Values carried from one stage to the next."""

    environment: Environment | None = None
    resolution: VersionResolution | None = None
    plan: ReleasePlan | None = None

    def require_environment(self) -> Environment:
        if self.environment is None:
            raise ReleaseError("The branch policy was not resolved before this stage")
        return self.environment

    def require_resolution(self) -> VersionResolution:
        if self.resolution is None:
            raise ReleaseError("The current version was not discovered before this stage")
        return self.resolution

    def require_plan(self) -> ReleasePlan:
        if self.plan is None:
            raise ReleaseError("No release plan was confirmed before this stage")
        return self.plan


@dataclass(frozen=True)
class ReleaseResult:
    """How a release run ended.

    Attributes:
        outcome: DONE, CANCELLED (user declined) or FAILED
        stage: Last stage entered (the failing one on FAILED)
        plan: The confirmed plan, if one was computed
        error: The error that aborted the run
        history: Stages entered, in order
    """

    outcome: ReleaseOutcome
    stage: ReleaseStage
    plan: ReleasePlan | None = None
    error: ReleaseError | None = None
    history: tuple[ReleaseStage, ...] = ()

    @property
    def exit_code(self) -> int:
        if self.outcome is ReleaseOutcome.FAILED and self.error is not None:
            return self.error.exit_code
        return 0


Handler = Callable[[RunState], tuple[ReleaseStage, RunState]]


@dataclass
class ReleaseWorkflow:
    """Orchestrates one release run."""

    project_root: Path
    git: GitBackend
    manifest: ReleaseManifest
    settings: ReleaseSettings
    fallback_version: str
    reporter: ProgressReporter
    prompter: Prompter
    manual_bump: BumpType | str | None = None
    metadata_label: str = field(default="project metadata")

    def _handlers(self) -> dict[ReleaseStage, Handler]:
        return {
            ReleaseStage.INIT: self._init,
            ReleaseStage.BRANCH_CHECK: self._branch_check,
            ReleaseStage.SYNC: self._sync,
            ReleaseStage.VERSION_DISCOVERY: self._discover_version,
            ReleaseStage.CONFIRM: self._confirm,
            ReleaseStage.WRITING: self._write_versions,
            ReleaseStage.COMMIT: self._commit,
            ReleaseStage.TAG: self._tag,
            ReleaseStage.PUSH_TAG: self._push_tag,
            ReleaseStage.PUSH_BRANCH: self._push_branch,
            ReleaseStage.RETURN_TO_DEVELOP: self._return_to_develop,
        }

    def run(self) -> ReleaseResult:
        """Execute the release.

        Returns:
            ReleaseResult; errors are reported, not raised
        """
        handlers = self._handlers()
        stage = ReleaseStage.INIT
        state = RunState()
        history: list[ReleaseStage] = []

        try:
            while stage is not ReleaseStage.DONE:
                history.append(stage)
                stage, state = handlers[stage](state)
        except ReleaseCancelled:
            history.append(ReleaseStage.ABORTED)
            return ReleaseResult(
                ReleaseOutcome.CANCELLED, stage, plan=state.plan, history=tuple(history)
            )
        except ReleaseError as e:
            self.reporter.report(stage, StageStatus.FAILED, e.message)
            history.append(ReleaseStage.ABORTED)
            return ReleaseResult(
                ReleaseOutcome.FAILED,
                stage,
                plan=state.plan,
                error=e,
                history=tuple(history),
            )

        history.append(ReleaseStage.DONE)
        self.reporter.report(ReleaseStage.DONE, StageStatus.SUCCESS, "Completed")
        return ReleaseResult(
            ReleaseOutcome.DONE, ReleaseStage.DONE, plan=state.plan, history=tuple(history)
        )

    def preview(self) -> tuple[VersionResolution, ReleasePlan]:
        """Compute the plan from local state only, without syncing or prompting.

        Raises:
            InvalidBranchError: If the current branch is not releasable
            GitError: If git cannot be queried
        """
        environment = resolve_environment(self.git.get_current_branch())
        resolution = resolve_current_version(
            self.git.list_tags(),
            environment.branch,
            self.fallback_version,
            tag_prefix=self.settings.tag_prefix,
        )
        plan = build_plan(
            resolution.version,
            environment.branch,
            self.manifest.targets,
            manual_bump=self.manual_bump,
            tag_prefix=self.settings.tag_prefix,
        )
        return resolution, plan

    # Stage handlers

    def _init(self, state: RunState) -> tuple[ReleaseStage, RunState]:
        return ReleaseStage.BRANCH_CHECK, state

    def _branch_check(self, state: RunState) -> tuple[ReleaseStage, RunState]:
        self.reporter.report(ReleaseStage.BRANCH_CHECK, StageStatus.START, "Find current branch name...")
        branch = self.git.get_current_branch()
        environment = resolve_environment(branch)
        self.reporter.report(
            ReleaseStage.BRANCH_CHECK, StageStatus.SUCCESS, f"Current branch name is: {branch}"
        )
        return ReleaseStage.SYNC, replace(state, environment=environment)

    def _sync(self, state: RunState) -> tuple[ReleaseStage, RunState]:
        remote = self.settings.remote
        branch = state.require_environment().branch.value

        self.reporter.report(ReleaseStage.SYNC, StageStatus.START, f"Fetch {remote} and tags...")
        self.git.fetch(remote, include_tags=True)
        self.reporter.report(ReleaseStage.SYNC, StageStatus.SUCCESS, f"Fetched {remote} and tags")

        self.reporter.report(
            ReleaseStage.SYNC, StageStatus.START, f"Pull latest updates on {branch} branch..."
        )
        self.git.pull(remote, branch)
        self.reporter.report(ReleaseStage.SYNC, StageStatus.SUCCESS, f"Pulled {remote}/{branch}")
        return ReleaseStage.VERSION_DISCOVERY, state

    def _discover_version(self, state: RunState) -> tuple[ReleaseStage, RunState]:
        stage = ReleaseStage.VERSION_DISCOVERY

        self.reporter.report(stage, StageStatus.START, "Find greater tag...")
        resolution = resolve_current_version(
            self.git.list_tags(),
            state.require_environment().branch,
            self.fallback_version,
            tag_prefix=self.settings.tag_prefix,
        )

        if resolution.from_fallback:
            self.reporter.report(
                stage,
                StageStatus.WARNING,
                f"No release tags found, using {self.metadata_label} version {resolution.version}",
            )
        else:
            self.reporter.report(stage, StageStatus.INFO, "Latest tags: " + ", ".join(resolution.candidates))
        self.reporter.report(stage, StageStatus.SUCCESS, f"Greater version is: {resolution.version}")
        return ReleaseStage.CONFIRM, replace(state, resolution=resolution)

    def _confirm(self, state: RunState) -> tuple[ReleaseStage, RunState]:
        old_version = state.require_resolution().version
        branch = state.require_environment().branch

        manual_bump = self.manual_bump
        if manual_bump is None and needs_manual_bump(old_version, branch):
            manual_bump = self.prompter.choose_bump(
                f"{old_version} is a release. Which part should the new alpha train bump?",
                BUMP_TYPES,
                "patch",
            )

        plan = build_plan(
            old_version,
            branch,
            self.manifest.targets,
            manual_bump=manual_bump,
            tag_prefix=self.settings.tag_prefix,
        )
        state = replace(state, plan=plan)

        self.reporter.report(ReleaseStage.CONFIRM, StageStatus.START, "Confirm release...")
        if not self.prompter.confirm(plan.question()):
            raise ReleaseCancelled(plan.question())
        self.reporter.report(ReleaseStage.CONFIRM, StageStatus.SUCCESS, f"Confirmed {plan.tag_name}")
        return ReleaseStage.WRITING, state

    def _write_versions(self, state: RunState) -> tuple[ReleaseStage, RunState]:
        stage = ReleaseStage.WRITING

        self.reporter.report(stage, StageStatus.START, "Update versions...")
        written = apply_version(
            state.require_plan(),
            self.project_root,
            indent=self.settings.json_indent,
            listener=lambda message: self.reporter.report(stage, StageStatus.INFO, message),
        )
        self.reporter.report(stage, StageStatus.SUCCESS, f"Updated {len(written)} file(s)")
        return ReleaseStage.COMMIT, state

    def _commit(self, state: RunState) -> tuple[ReleaseStage, RunState]:
        plan = state.require_plan()

        self.reporter.report(ReleaseStage.COMMIT, StageStatus.START, "Add all changes...")
        self.git.add(self.settings.add_pattern)

        self.reporter.report(ReleaseStage.COMMIT, StageStatus.START, "Add commit...")
        sha = self.git.commit(self._message(self.settings.commit_message, plan))
        self.reporter.report(ReleaseStage.COMMIT, StageStatus.SUCCESS, f"Committed {sha[:7]}")
        return ReleaseStage.TAG, state

    def _tag(self, state: RunState) -> tuple[ReleaseStage, RunState]:
        plan = state.require_plan()
        tag_name = plan.tag_name

        if self.git.tag_exists(tag_name):
            self.reporter.report(ReleaseStage.TAG, StageStatus.SKIPPED, f"Tag {tag_name} already exists")
            return ReleaseStage.PUSH_TAG, state

        self.reporter.report(ReleaseStage.TAG, StageStatus.START, f"Add tag {tag_name} ...")
        self.git.create_tag(tag_name, self._message(self.settings.tag_message, plan))
        self.reporter.report(ReleaseStage.TAG, StageStatus.SUCCESS, f"Created tag {tag_name}")
        return ReleaseStage.PUSH_TAG, state

    def _push_tag(self, state: RunState) -> tuple[ReleaseStage, RunState]:
        remote = self.settings.remote
        self.reporter.report(ReleaseStage.PUSH_TAG, StageStatus.START, f"Push tags to {remote}...")
        self.git.push_tags(remote)
        self.reporter.report(ReleaseStage.PUSH_TAG, StageStatus.SUCCESS, f"Pushed tags to {remote}")
        return ReleaseStage.PUSH_BRANCH, state

    def _push_branch(self, state: RunState) -> tuple[ReleaseStage, RunState]:
        remote = self.settings.remote
        plan = state.require_plan()
        branch = plan.branch

        self.reporter.report(
            ReleaseStage.PUSH_BRANCH, StageStatus.START, f"Push branch to {remote}/{branch} ..."
        )
        self.git.push(remote, branch)
        self.reporter.report(ReleaseStage.PUSH_BRANCH, StageStatus.SUCCESS, f"Pushed {remote}/{branch}")

        if plan.environment.branch is Branch.DEVELOP:
            return ReleaseStage.DONE, state
        return ReleaseStage.RETURN_TO_DEVELOP, state

    def _return_to_develop(self, state: RunState) -> tuple[ReleaseStage, RunState]:
        plan = state.require_plan()
        target = Branch.DEVELOP.value
        stage = ReleaseStage.RETURN_TO_DEVELOP

        self.reporter.report(stage, StageStatus.START, f"Move to {target} from {plan.branch} ...")
        try:
            self.git.checkout(target)
            self.git.pull(self.settings.remote, target)
        except GitError as e:
            # The release itself is already pushed
            self.reporter.report(
                stage,
                StageStatus.WARNING,
                f"{e.message}; release {plan.tag_name} is complete",
            )
            return ReleaseStage.DONE, state

        self.reporter.report(stage, StageStatus.SUCCESS, f"Back on {target}")
        return ReleaseStage.DONE, state

    @staticmethod
    def _message(template: str, plan: ReleasePlan) -> str:
        try:
            return template.format(tag=plan.tag_name, version=plan.new_version, branch=plan.branch)
        except (ValueError, KeyError, IndexError, AttributeError) as e:
            raise ConfigurationError(
                f"Invalid message template: {template}",
                details=str(e),
                fix_hint="Use only the {tag}, {version} and {branch} placeholders",
            ) from e
