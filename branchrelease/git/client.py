"""Repository-bound git client used by the release workflow.

Wraps the query and operation functions with a fixed working directory so the
workflow depends on one small object that tests can replace.
"""

from dataclasses import dataclass
from pathlib import Path

from branchrelease.git import operations, queries


@dataclass(frozen=True)
class GitClient:
    """Git primitives for one repository."""

    cwd: Path
    timeout: float | None = None
    sign_commits: bool = False
    sign_tags: bool = False

    def get_current_branch(self) -> str:
        return queries.get_current_branch(cwd=self.cwd)

    def list_tags(self) -> list[str]:
        return queries.get_tags(cwd=self.cwd)

    def tag_exists(self, name: str) -> bool:
        return queries.tag_exists(name, cwd=self.cwd)

    def fetch(self, remote: str, include_tags: bool = True) -> None:
        operations.fetch(remote, tags=include_tags, cwd=self.cwd, timeout=self.timeout)

    def pull(self, remote: str, branch: str) -> None:
        operations.pull(remote, branch, cwd=self.cwd, timeout=self.timeout)

    def add(self, pattern: str) -> None:
        operations.add(pattern, cwd=self.cwd)

    def commit(self, message: str) -> str:
        return operations.commit(message, sign=self.sign_commits, cwd=self.cwd)

    def create_tag(self, name: str, message: str | None = None) -> None:
        operations.tag(name, message=message, sign=self.sign_tags, cwd=self.cwd)

    def push_tags(self, remote: str) -> None:
        operations.push_tags(remote, cwd=self.cwd, timeout=self.timeout)

    def push(self, remote: str, branch: str) -> None:
        operations.push(remote, branch, cwd=self.cwd, timeout=self.timeout)

    def checkout(self, branch: str) -> None:
        operations.checkout(branch, cwd=self.cwd)
