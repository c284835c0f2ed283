"""Repository provider interface and factory."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from gitpick.git.models import (
    GitBranch,
    GitCommit,
    GitContributor,
    GitLog,
    GitRemote,
    GitStash,
    GitTag,
    Repository,
)


@runtime_checkable
class RepositoryProvider(Protocol):
    async def get_ordered_repositories(self) -> list[Repository]:
        """Return the open repositories, starred first."""

    async def get_repository(self, path: str) -> Repository | None:
        """Resolve a path (or repository name) to an open repository."""

    async def get_active_repository(self) -> Repository | None:
        """Return the repository the user is currently working in."""

    async def get_branch(self, repo_path: str) -> GitBranch | None:
        """Return the checked-out branch."""

    async def get_branches(self, repo_path: str) -> list[GitBranch]:
        """Return local and remote branches, sorted."""

    async def get_tags(self, repo_path: str) -> list[GitTag]:
        """Return tags, sorted."""

    async def get_log(self, repo_path: str, *, ref: str | None = None, limit: int | None = None) -> GitLog | None:
        """Return commits reachable from ``ref`` (default HEAD), newest first."""

    async def get_commit(self, repo_path: str, ref: str) -> GitCommit | None:
        """Resolve a single revision including its changed files."""

    async def get_stash(self, repo_path: str) -> GitStash | None:
        """Return the stash entries, newest first."""

    async def get_remotes(self, repo_path: str) -> list[GitRemote]:
        """Return the configured remotes."""

    async def get_contributors(self, repo_path: str) -> list[GitContributor]:
        """Return commit authors ordered by commit count."""

    async def validate_reference(self, repo_path: str, ref: str) -> bool:
        """Return whether ``ref`` names an existing revision."""

    async def get_diff(self, repo_path: str, ref1: str, ref2: str | None = None, file_name: str | None = None) -> str:
        """Return a unified diff between two revisions (or against the working tree)."""

    async def get_file_content(self, repo_path: str, ref: str, file_name: str) -> str:
        """Return the contents of ``file_name`` at ``ref``."""


def create_provider(mode: str, **kwargs: Any) -> RepositoryProvider:
    if mode == "memory":
        from gitpick.git.memory import MemoryProvider

        return MemoryProvider(**kwargs)
    if mode == "git":
        from gitpick.git.cli import GitCliProvider

        return GitCliProvider(**kwargs)
    raise ValueError(f"Unsupported provider mode: {mode}")
