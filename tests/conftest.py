"""Pytest fixtures for release tool tests.

Provides common fixtures for:
- Temporary project directories
- Git repositories with a bare "origin" remote
- Release manifests and targets
- Recording fakes for the workflow collaborators
"""

import json
import os
import subprocess
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from branchrelease.config.models import ReleaseTarget
from branchrelease.workflow import ReleaseStage, StageStatus


def git(*args: str, cwd: Path) -> str:
    """Run a git command in a test repository and return its stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def temp_dir(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary directory for tests.

    Yields:
        Path to temporary directory
    """
    yield tmp_path
    # Cleanup handled by pytest's tmp_path


@pytest.fixture
def project_dir(temp_dir: Path) -> Path:
    """Create a temporary project directory.

    Returns:
        Path to project directory
    """
    project = temp_dir / "test-project"
    project.mkdir()
    return project


@pytest.fixture
def git_repo(project_dir: Path) -> Path:
    """Create a git repository on branch master in the project directory.

    Returns:
        Path to git repository
    """
    git("init", cwd=project_dir)
    git("symbolic-ref", "HEAD", "refs/heads/master", cwd=project_dir)
    git("config", "user.email", "test@test.com", cwd=project_dir)
    git("config", "user.name", "Test User", cwd=project_dir)
    git("config", "commit.gpgsign", "false", cwd=project_dir)
    git("config", "tag.gpgsign", "false", cwd=project_dir)
    return project_dir


@pytest.fixture
def remote_repo(temp_dir: Path) -> Path:
    """Create an empty bare repository to act as origin.

    Returns:
        Path to the bare repository
    """
    remote = temp_dir / "origin.git"
    git("init", "--bare", str(remote), cwd=temp_dir)
    return remote


@pytest.fixture
def nodejs_project(git_repo: Path, remote_repo: Path) -> Path:
    """Create a released project with package.json, manifest.json and origin.

    package.json declares 1.2.3; master and develop are pushed to origin
    and master is checked out.

    Returns:
        Path to project directory
    """
    package_json = {"name": "test-package", "version": "1.2.3"}
    (git_repo / "package.json").write_text(json.dumps(package_json, indent=2) + "\n")

    manifest_json = {"name": "test-app", "version": "v1.2.3", "versions": {"stage": "", "master": ""}}
    (git_repo / "manifest.json").write_text(json.dumps(manifest_json, indent=2) + "\n")

    release_json = {
        "manifest": {"dir": "/manifest.json", "prefix": True, "versionKeys": ["$.version"]},
    }
    (git_repo / "release.json").write_text(json.dumps(release_json, indent=2) + "\n")

    git("add", ".", cwd=git_repo)
    git("commit", "-m", "Initial commit", cwd=git_repo)
    git("branch", "develop", cwd=git_repo)
    git("remote", "add", "origin", str(remote_repo), cwd=git_repo)
    git("push", "origin", "master", "develop", cwd=git_repo)

    return git_repo


@pytest.fixture
def manifest_target() -> ReleaseTarget:
    """A prefixed target writing $.version of /manifest.json."""
    return ReleaseTarget(dir="/manifest.json", prefix=True, version_keys=("$.version",), key="manifest")


class RecordingReporter:
    """Collects progress events instead of printing them."""

    def __init__(self) -> None:
        self.events: list[tuple[ReleaseStage, StageStatus, str]] = []

    def report(self, stage: ReleaseStage, status: StageStatus, message: str = "") -> None:
        self.events.append((stage, status, message))

    def messages(self, status: StageStatus) -> list[str]:
        return [message for _, event_status, message in self.events if event_status is status]


class ScriptedPrompter:
    """Answers prompts with fixed values and remembers the questions."""

    def __init__(self, answer: bool = True, bump: str = "patch") -> None:
        self.answer = answer
        self.bump = bump
        self.questions: list[str] = []
        self.bump_questions: list[str] = []

    def confirm(self, question: str) -> bool:
        self.questions.append(question)
        return self.answer

    def choose_bump(self, question: str, choices: tuple[str, ...], default: str) -> str:
        self.bump_questions.append(question)
        return self.bump


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Temporarily clean environment variables.

    Removes BRANCH_RELEASE_* environment variables during test.
    """
    old_env: dict[str, Any] = {}
    for key in list(os.environ.keys()):
        if key.startswith("BRANCH_RELEASE_"):
            old_env[key] = os.environ.pop(key)

    yield

    os.environ.update(old_env)


@pytest.fixture
def declining_prompter() -> ScriptedPrompter:
    return ScriptedPrompter(answer=False)
