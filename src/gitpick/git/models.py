"""Repository data model handed to the wizard."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from pathlib import Path
import re
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from gitpick.git.remotes import RemoteProvider

_SHAISH = re.compile(r"^[0-9a-f]{7,40}$")
_UNCOMMITTED = "0" * 40


class RefType(str, Enum):
    BRANCH = "branch"
    TAG = "tag"
    REVISION = "revision"
    STASH = "stash"


@dataclass(frozen=True)
class Repository:
    path: str
    name: str = ""
    starred: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", Path(self.path).name or self.path)

    @property
    def id(self) -> str:
        return self.path

    @property
    def formatted_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class GitBranch:
    repo_path: str
    name: str
    sha: str = ""
    current: bool = False
    remote: bool = False
    upstream: str | None = None
    ahead: int = 0
    behind: int = 0

    ref_type = RefType.BRANCH

    @property
    def ref(self) -> str:
        return self.name

    @property
    def remote_name(self) -> str | None:
        if not self.remote:
            return None
        return self.name.split("/", 1)[0]

    @property
    def local_name(self) -> str:
        if not self.remote:
            return self.name
        return self.name.split("/", 1)[1] if "/" in self.name else self.name


@dataclass(frozen=True)
class GitTag:
    repo_path: str
    name: str
    sha: str = ""
    message: str = ""

    ref_type = RefType.TAG

    @property
    def ref(self) -> str:
        return self.name


@dataclass(frozen=True)
class GitFile:
    file_name: str
    status: str = "M"
    original_file_name: str | None = None

    @property
    def status_text(self) -> str:
        return {
            "A": "added",
            "D": "deleted",
            "M": "modified",
            "R": "renamed",
            "C": "copied",
            "T": "type changed",
            "U": "conflict",
        }.get(self.status[:1], "changed")


@dataclass(frozen=True)
class GitCommit:
    repo_path: str
    sha: str
    author: str = ""
    email: str = ""
    date: datetime | None = None
    message: str = ""
    parents: tuple[str, ...] = ()
    files: tuple[GitFile, ...] = ()
    file: GitFile | None = None

    ref_type = RefType.REVISION

    @property
    def ref(self) -> str:
        return self.sha

    @property
    def short_sha(self) -> str:
        return shorten_sha(self.sha)

    @property
    def summary(self) -> str:
        return self.message.strip().splitlines()[0] if self.message.strip() else ""

    @property
    def previous_sha(self) -> str | None:
        return self.parents[0] if self.parents else None

    @property
    def is_file(self) -> bool:
        return self.file is not None

    @property
    def file_name(self) -> str | None:
        return self.file.file_name if self.file else None

    def find_file(self, file_name: str) -> GitFile | None:
        normalized = file_name.replace("\\", "/").removeprefix("./")
        for entry in self.files:
            if entry.file_name == normalized:
                return entry
        return None

    def to_file_commit(self, file: GitFile | str) -> GitCommit | None:
        entry = file if isinstance(file, GitFile) else self.find_file(file)
        if entry is None or (self.files and entry not in self.files):
            return None
        return replace(self, file=entry)


@dataclass(frozen=True)
class GitStashCommit(GitCommit):
    stash_name: str = "stash@{0}"
    number: int = 0

    ref_type = RefType.STASH

    @property
    def ref(self) -> str:
        return self.stash_name


@dataclass(frozen=True)
class GitLog:
    repo_path: str
    commits: dict[str, GitCommit] = field(default_factory=dict)
    ref: str | None = None
    limit: int | None = None
    has_more: bool = False

    @property
    def count(self) -> int:
        return len(self.commits)


@dataclass(frozen=True)
class GitStash:
    repo_path: str
    commits: dict[str, GitStashCommit] = field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.commits)


@dataclass(frozen=True)
class GitRemote:
    repo_path: str
    name: str
    url: str
    provider: RemoteProvider | None = None

    @property
    def default(self) -> bool:
        return self.name == "origin"


@dataclass(frozen=True)
class GitContributor:
    repo_path: str
    name: str
    email: str = ""
    count: int = 0
    current: bool = False


GitReference = Union[GitBranch, GitTag, GitCommit]


def shorten_sha(sha: str | None, length: int = 7) -> str:
    if not sha:
        return ""
    if sha == _UNCOMMITTED:
        return "Working Tree"
    return sha[:length] if is_shaish(sha) else sha


def is_shaish(value: str) -> bool:
    return bool(_SHAISH.match(value))


def is_branch(ref: object) -> bool:
    return getattr(ref, "ref_type", None) is RefType.BRANCH


def is_tag(ref: object) -> bool:
    return getattr(ref, "ref_type", None) is RefType.TAG


def is_stash(ref: object) -> bool:
    return getattr(ref, "ref_type", None) is RefType.STASH


def is_revision(ref: object) -> bool:
    """Commits and stashes both name a single revision."""
    return getattr(ref, "ref_type", None) in (RefType.REVISION, RefType.STASH)


def reference_to_string(ref: GitReference | None, *, capitalize: bool = False, label: bool = True) -> str:
    if ref is None:
        return ""
    if is_branch(ref):
        kind, name = ("remote branch" if ref.remote else "branch"), ref.name
    elif is_tag(ref):
        kind, name = "tag", ref.name
    elif is_stash(ref):
        kind, name = "stash", ref.stash_name
    else:
        kind, name = "commit", ref.short_sha
    text = f"{kind} {name}" if label else name
    return text[:1].upper() + text[1:] if capitalize else text


def sort_branches(branches: list[GitBranch]) -> list[GitBranch]:
    return sorted(branches, key=lambda b: (not b.current, b.remote, b.name.lower()))


def sort_tags(tags: list[GitTag]) -> list[GitTag]:
    return sorted(tags, key=lambda t: _natural_key(t.name), reverse=True)


def _natural_key(value: str) -> list[object]:
    return [int(part) if part.isdigit() else part.lower() for part in re.split(r"(\d+)", value)]
