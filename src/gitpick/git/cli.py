"""Repository provider backed by the git command line."""

from __future__ import annotations

import asyncio
from datetime import datetime
import logging
import os
from pathlib import Path

from gitpick.errors import ProviderError
from gitpick.git.models import (
    GitBranch,
    GitCommit,
    GitContributor,
    GitFile,
    GitLog,
    GitRemote,
    GitStash,
    GitStashCommit,
    GitTag,
    Repository,
    sort_branches,
    sort_tags,
)
from gitpick.git.remotes import get_remote_provider

logger = logging.getLogger(__name__)

_RS = "\x1e"
_US = "\x1f"
_LOG_FORMAT = "%x1e%H%x1f%an%x1f%ae%x1f%aI%x1f%P%x1f%B%x1f"
_STASH_FORMAT = "%x1e%H%x1f%an%x1f%ae%x1f%aI%x1f%P%x1f%B%x1f%gd%x1f"


async def run_git(*args: str, cwd: str | None = None, check: bool = True) -> str:
    command = ["git", *args]
    logger.debug("git %s (cwd=%s)", " ".join(args), cwd)
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env={**os.environ, "GIT_TERMINAL_PROMPT": "0", "LC_ALL": "C"},
        )
    except OSError as exc:
        raise ProviderError(command=command, returncode=127, stderr=str(exc), cwd=cwd) from exc
    stdout, stderr = await process.communicate()
    if check and process.returncode != 0:
        raise ProviderError(
            command=command,
            returncode=process.returncode or 1,
            stderr=stderr.decode("utf-8", errors="replace"),
            cwd=cwd,
        )
    return stdout.decode("utf-8", errors="replace")


def parse_name_status(text: str) -> tuple[GitFile, ...]:
    files: list[GitFile] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        parts = line.split("\t")
        status = parts[0].strip()
        if not status or len(parts) < 2:
            continue
        if status[0] in {"R", "C"} and len(parts) >= 3:
            files.append(GitFile(file_name=parts[2], status=status[0], original_file_name=parts[1]))
        else:
            files.append(GitFile(file_name=parts[1], status=status[0]))
    return tuple(files)


def parse_log(text: str, repo_path: str, *, stash: bool = False) -> list[GitCommit]:
    commits: list[GitCommit] = []
    for record in text.split(_RS):
        if not record.strip():
            continue
        fields = record.split(_US)
        expected = 8 if stash else 7
        if len(fields) < expected:
            logger.debug("Skipping malformed log record: %r", record[:80])
            continue
        sha, author, email, date, parents, message = fields[:6]
        files = parse_name_status(fields[expected - 1])
        values = dict(
            repo_path=repo_path,
            sha=sha.strip(),
            author=author,
            email=email,
            date=_parse_date(date),
            message=message.strip(),
            parents=tuple(parents.split()),
            files=files,
        )
        if stash:
            name = fields[6].strip()
            number = int(name[len("stash@{") : -1]) if name.startswith("stash@{") else len(commits)
            commits.append(GitStashCommit(**values, stash_name=name, number=number))
        else:
            commits.append(GitCommit(**values))
    return commits


def _parse_date(value: str) -> datetime | None:
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None


class GitCliProvider:
    def __init__(self, *, paths: list[str] | tuple[str, ...] | None = None, cwd: str | None = None) -> None:
        self._paths = list(paths or [])
        self._cwd = cwd or os.getcwd()
        self._repos: list[Repository] | None = None

    async def _toplevel(self, path: str) -> str | None:
        try:
            output = await run_git("rev-parse", "--show-toplevel", cwd=path)
        except ProviderError:
            logger.debug("Not a git repository: %s", path)
            return None
        return output.strip() or None

    async def get_ordered_repositories(self) -> list[Repository]:
        if self._repos is None:
            candidates = self._paths or [self._cwd]
            repos: list[Repository] = []
            for path in candidates:
                expanded = str(Path(path).expanduser())
                if not Path(expanded).is_dir():
                    continue
                top = await self._toplevel(expanded)
                if top and all(repo.path != top for repo in repos):
                    repos.append(Repository(path=top))
            self._repos = sorted(repos, key=lambda r: r.name.lower())
        return list(self._repos)

    async def get_repository(self, path: str) -> Repository | None:
        repos = await self.get_ordered_repositories()
        for repo in repos:
            if repo.path == path or repo.name == path:
                return repo
        if Path(path).is_dir():
            top = await self._toplevel(path)
            for repo in repos:
                if repo.path == top:
                    return repo
        return None

    async def get_active_repository(self) -> Repository | None:
        top = await self._toplevel(self._cwd)
        repos = await self.get_ordered_repositories()
        for repo in repos:
            if repo.path == top:
                return repo
        return repos[0] if repos else None

    async def get_branch(self, repo_path: str) -> GitBranch | None:
        branches = await self.get_branches(repo_path)
        return next((branch for branch in branches if branch.current), None)

    async def get_branches(self, repo_path: str) -> list[GitBranch]:
        output = await run_git(
            "for-each-ref",
            "--format=%(refname)%1f%(refname:short)%1f%(objectname)%1f%(HEAD)%1f%(upstream:short)%1f%(upstream:track,nobracket)",
            "refs/heads",
            "refs/remotes",
            cwd=repo_path,
        )
        branches: list[GitBranch] = []
        for line in output.splitlines():
            fields = line.split(_US)
            if len(fields) < 6:
                continue
            refname, short, sha, head, upstream, track = fields[:6]
            if refname.startswith("refs/remotes/") and refname.endswith("/HEAD"):
                continue
            ahead, behind = _parse_track(track)
            branches.append(
                GitBranch(
                    repo_path=repo_path,
                    name=short,
                    sha=sha,
                    current=head.strip() == "*",
                    remote=refname.startswith("refs/remotes/"),
                    upstream=upstream or None,
                    ahead=ahead,
                    behind=behind,
                )
            )
        return sort_branches(branches)

    async def get_tags(self, repo_path: str) -> list[GitTag]:
        output = await run_git(
            "for-each-ref",
            "--format=%(refname:short)%1f%(objectname)%1f%(*objectname)%1f%(contents:subject)",
            "refs/tags",
            cwd=repo_path,
        )
        tags: list[GitTag] = []
        for line in output.splitlines():
            fields = line.split(_US)
            if len(fields) < 4:
                continue
            name, sha, peeled, subject = fields[:4]
            tags.append(GitTag(repo_path=repo_path, name=name, sha=peeled or sha, message=subject))
        return sort_tags(tags)

    async def get_log(self, repo_path: str, *, ref: str | None = None, limit: int | None = None) -> GitLog | None:
        args = ["log", f"--format={_LOG_FORMAT}", "--name-status"]
        if limit:
            args.append(f"-n{limit + 1}")
        args.append(ref or "HEAD")
        args.append("--")
        try:
            output = await run_git(*args, cwd=repo_path)
        except ProviderError as exc:
            if exc.returncode == 128:
                return None
            raise
        commits = parse_log(output, repo_path)
        has_more = bool(limit) and len(commits) > limit
        if has_more:
            commits = commits[:limit]
        return GitLog(
            repo_path=repo_path,
            commits={commit.sha: commit for commit in commits},
            ref=ref,
            limit=limit,
            has_more=has_more,
        )

    async def get_commit(self, repo_path: str, ref: str) -> GitCommit | None:
        if ref.startswith("stash@{"):
            stash = await self.get_stash(repo_path)
            if stash is None:
                return None
            return next((c for c in stash.commits.values() if c.stash_name == ref), None)
        try:
            output = await run_git("log", f"--format={_LOG_FORMAT}", "--name-status", "-n1", ref, "--", cwd=repo_path)
        except ProviderError:
            return None
        commits = parse_log(output, repo_path)
        return commits[0] if commits else None

    async def get_stash(self, repo_path: str) -> GitStash | None:
        output = await run_git("stash", "list", f"--format={_STASH_FORMAT}", "--name-status", cwd=repo_path)
        commits = parse_log(output, repo_path, stash=True)
        if not commits:
            return None
        return GitStash(
            repo_path=repo_path,
            commits={commit.sha: commit for commit in commits if isinstance(commit, GitStashCommit)},
        )

    async def get_remotes(self, repo_path: str) -> list[GitRemote]:
        output = await run_git("remote", "-v", cwd=repo_path)
        remotes: dict[str, GitRemote] = {}
        for line in output.splitlines():
            parts = line.split()
            if len(parts) < 2 or (len(parts) > 2 and parts[2] != "(fetch)"):
                continue
            name, url = parts[0], parts[1]
            remotes[name] = GitRemote(repo_path=repo_path, name=name, url=url, provider=get_remote_provider(url))
        return sorted(remotes.values(), key=lambda r: (not r.default, r.name))

    async def get_contributors(self, repo_path: str) -> list[GitContributor]:
        output = await run_git("shortlog", "-sne", "HEAD", cwd=repo_path)
        try:
            email = (await run_git("config", "user.email", cwd=repo_path, check=False)).strip()
        except ProviderError:
            email = ""
        contributors: list[GitContributor] = []
        for line in output.splitlines():
            count_text, _, rest = line.strip().partition("\t")
            if not rest or not count_text.isdigit():
                continue
            name, _, address = rest.partition(" <")
            address = address.rstrip(">")
            contributors.append(
                GitContributor(
                    repo_path=repo_path,
                    name=name.strip(),
                    email=address,
                    count=int(count_text),
                    current=bool(email) and address == email,
                )
            )
        return contributors

    async def validate_reference(self, repo_path: str, ref: str) -> bool:
        if not ref or ref.startswith("-"):
            return False
        output = await run_git("rev-parse", "--verify", "--quiet", f"{ref}^{{commit}}", cwd=repo_path, check=False)
        return bool(output.strip())

    async def get_diff(self, repo_path: str, ref1: str, ref2: str | None = None, file_name: str | None = None) -> str:
        args = ["diff", ref1]
        if ref2:
            args.append(ref2)
        args.append("--")
        if file_name:
            args.append(file_name)
        return await run_git(*args, cwd=repo_path)

    async def get_file_content(self, repo_path: str, ref: str, file_name: str) -> str:
        return await run_git("show", f"{ref}:{file_name}", cwd=repo_path)


def _parse_track(track: str) -> tuple[int, int]:
    ahead = behind = 0
    for part in track.split(","):
        words = part.strip().split()
        if len(words) == 2 and words[1].isdigit():
            if words[0] == "ahead":
                ahead = int(words[1])
            elif words[0] == "behind":
                behind = int(words[1])
    return ahead, behind
