"""In-memory provider for tests and demos."""

from __future__ import annotations

from dataclasses import dataclass, field

from gitpick.errors import ProviderError
from gitpick.git.models import (
    GitBranch,
    GitCommit,
    GitContributor,
    GitLog,
    GitRemote,
    GitStash,
    GitStashCommit,
    GitTag,
    Repository,
    sort_branches,
    sort_tags,
)


@dataclass
class MemoryRepository:
    repository: Repository
    branches: list[GitBranch] = field(default_factory=list)
    tags: list[GitTag] = field(default_factory=list)
    logs: dict[str, list[GitCommit]] = field(default_factory=dict)
    stashes: list[GitStashCommit] = field(default_factory=list)
    remotes: list[GitRemote] = field(default_factory=list)
    contributors: list[GitContributor] = field(default_factory=list)
    files: dict[tuple[str, str], str] = field(default_factory=dict)

    def all_commits(self) -> list[GitCommit]:
        seen: dict[str, GitCommit] = {}
        for commits in self.logs.values():
            for commit in commits:
                seen.setdefault(commit.sha, commit)
        for stash in self.stashes:
            seen.setdefault(stash.sha, stash)
        return list(seen.values())

    def head(self) -> str | None:
        for branch in self.branches:
            if branch.current:
                return branch.name
        return None


class MemoryProvider:
    def __init__(
        self,
        *,
        repositories: list[MemoryRepository] | None = None,
        active: str | None = None,
        failing: set[str] | None = None,
    ) -> None:
        self._repos = {entry.repository.path: entry for entry in repositories or []}
        self._active = active
        self._failing = failing or set()
        self.calls: list[str] = []

    def _entry(self, repo_path: str, operation: str) -> MemoryRepository | None:
        self.calls.append(operation)
        if operation in self._failing:
            raise ProviderError(command=["memory", operation], returncode=128, stderr="simulated failure", cwd=repo_path)
        return self._repos.get(repo_path)

    async def get_ordered_repositories(self) -> list[Repository]:
        self.calls.append("get_ordered_repositories")
        repos = [entry.repository for entry in self._repos.values()]
        return sorted(repos, key=lambda r: (not r.starred, r.name.lower()))

    async def get_repository(self, path: str) -> Repository | None:
        self.calls.append("get_repository")
        entry = self._repos.get(path)
        if entry is not None:
            return entry.repository
        for entry in self._repos.values():
            if entry.repository.name == path:
                return entry.repository
        return None

    async def get_active_repository(self) -> Repository | None:
        if self._active is not None:
            return await self.get_repository(self._active)
        repos = await self.get_ordered_repositories()
        return repos[0] if repos else None

    async def get_branch(self, repo_path: str) -> GitBranch | None:
        entry = self._entry(repo_path, "get_branch")
        if entry is None:
            return None
        return next((branch for branch in entry.branches if branch.current), None)

    async def get_branches(self, repo_path: str) -> list[GitBranch]:
        entry = self._entry(repo_path, "get_branches")
        return sort_branches(entry.branches) if entry else []

    async def get_tags(self, repo_path: str) -> list[GitTag]:
        entry = self._entry(repo_path, "get_tags")
        return sort_tags(entry.tags) if entry else []

    async def get_log(self, repo_path: str, *, ref: str | None = None, limit: int | None = None) -> GitLog | None:
        entry = self._entry(repo_path, "get_log")
        if entry is None:
            return None
        key = ref or entry.head()
        commits = entry.logs.get(key or "")
        if commits is None:
            commit = _find_commit(entry, key) if key else None
            if commit is None:
                return None
            commits = [commit]
        selected = commits[:limit] if limit else commits
        return GitLog(
            repo_path=repo_path,
            commits={commit.sha: commit for commit in selected},
            ref=key,
            limit=limit,
            has_more=limit is not None and len(commits) > limit,
        )

    async def get_commit(self, repo_path: str, ref: str) -> GitCommit | None:
        entry = self._entry(repo_path, "get_commit")
        if entry is None:
            return None
        return _find_commit(entry, ref)

    async def get_stash(self, repo_path: str) -> GitStash | None:
        entry = self._entry(repo_path, "get_stash")
        if entry is None or not entry.stashes:
            return None
        return GitStash(repo_path=repo_path, commits={stash.sha: stash for stash in entry.stashes})

    async def get_remotes(self, repo_path: str) -> list[GitRemote]:
        entry = self._entry(repo_path, "get_remotes")
        return list(entry.remotes) if entry else []

    async def get_contributors(self, repo_path: str) -> list[GitContributor]:
        entry = self._entry(repo_path, "get_contributors")
        if entry is None:
            return []
        return sorted(entry.contributors, key=lambda c: (-c.count, c.name.lower()))

    async def validate_reference(self, repo_path: str, ref: str) -> bool:
        entry = self._entry(repo_path, "validate_reference")
        if entry is None:
            return False
        return _find_commit(entry, ref) is not None

    async def get_diff(self, repo_path: str, ref1: str, ref2: str | None = None, file_name: str | None = None) -> str:
        self._entry(repo_path, "get_diff")
        target = ref2 or "working tree"
        scope = f" -- {file_name}" if file_name else ""
        return f"diff {ref1}..{target}{scope}\n"

    async def get_file_content(self, repo_path: str, ref: str, file_name: str) -> str:
        entry = self._entry(repo_path, "get_file_content")
        if entry is None:
            return ""
        return entry.files.get((ref, file_name), "")


def _find_commit(entry: MemoryRepository, ref: str) -> GitCommit | None:
    for branch in entry.branches:
        if branch.name == ref and branch.sha:
            ref = branch.sha
            break
    for tag in entry.tags:
        if tag.name == ref and tag.sha:
            ref = tag.sha
            break
    for commit in entry.all_commits():
        if commit.sha == ref or (len(ref) >= 4 and commit.sha.startswith(ref)):
            return commit
        if isinstance(commit, GitStashCommit) and commit.stash_name == ref:
            return commit
    return None
