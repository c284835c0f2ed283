"""Capabilities handed to commands and step handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from gitpick.config import Settings

if TYPE_CHECKING:
    from gitpick.actions import ActionExecutor
    from gitpick.git.models import GitBranch, GitCommit, GitStashCommit, GitTag
    from gitpick.git.provider import RepositoryProvider


class WorkbenchViews(Protocol):
    async def reveal_repository(self, repo_path: str) -> None:
        ...

    async def reveal_branch(self, branch: GitBranch) -> None:
        ...

    async def reveal_tag(self, tag: GitTag) -> None:
        ...

    async def reveal_commit(self, commit: GitCommit) -> None:
        ...

    async def reveal_stash(self, stash: GitStashCommit) -> None:
        ...

    async def search_commits(self, repo_path: str, pattern: str, label: str) -> None:
        ...

    async def show_message(self, message: str) -> None:
        ...


class RecordingViews:
    """Views that remember what was asked of them."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    async def reveal_repository(self, repo_path: str) -> None:
        self.events.append(("reveal-repository", repo_path))

    async def reveal_branch(self, branch: GitBranch) -> None:
        self.events.append(("reveal-branch", branch.name))

    async def reveal_tag(self, tag: GitTag) -> None:
        self.events.append(("reveal-tag", tag.name))

    async def reveal_commit(self, commit: GitCommit) -> None:
        self.events.append(("reveal-commit", commit.sha))

    async def reveal_stash(self, stash: GitStashCommit) -> None:
        self.events.append(("reveal-stash", stash.stash_name))

    async def search_commits(self, repo_path: str, pattern: str, label: str) -> None:
        self.events.append(("search", pattern))

    async def show_message(self, message: str) -> None:
        self.events.append(("message", message))


@dataclass
class Services:
    provider: RepositoryProvider
    executor: ActionExecutor
    views: WorkbenchViews = field(default_factory=RecordingViews)
    settings: Settings = field(default_factory=Settings)
