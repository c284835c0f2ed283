"""Pick item kinds and the factories that turn git objects into items."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from gitpick.actions import Action
from gitpick.git.models import (
    GitBranch,
    GitCommit,
    GitFile,
    GitStashCommit,
    GitTag,
    Repository,
)
from gitpick.wizard.types import Directive, ItemKind, QuickPickItem

if TYPE_CHECKING:
    from gitpick.wizard.command import PickedVia, QuickCommand

_DIRECTIVE_LABELS = {
    Directive.BACK: "Back",
    Directive.CANCEL: "Cancel",
    Directive.NOOP: "Try again",
}


@dataclass(frozen=True)
class DirectiveItem(QuickPickItem):
    kind: ItemKind = ItemKind.DIRECTIVE

    @property
    def directive(self) -> Directive:
        return self.item


def directive_item(
    directive: Directive,
    picked: bool = False,
    *,
    label: str | None = None,
    description: str = "",
    detail: str = "",
) -> DirectiveItem:
    return DirectiveItem(
        label=label or _DIRECTIVE_LABELS[directive],
        description=description,
        detail=detail,
        picked=picked,
        always_show=True,
        item=directive,
    )


@dataclass(frozen=True)
class CommandItem(QuickPickItem):
    """Runs an action when chosen, or when its key is pressed unless suppressed."""

    action: Action | None = None
    suppress_key_press: bool = False
    kind: ItemKind = ItemKind.COMMAND


@dataclass(frozen=True)
class GitCommandItem(QuickPickItem):
    """Delegates to another registered command seeded with the current answers."""

    command_key: str = ""
    seed: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)
    kind: ItemKind = ItemKind.GIT_COMMAND

    def create_command(self, picked_via: PickedVia) -> QuickCommand:
        from gitpick.commands import create_command

        return create_command(self.command_key, dict(self.seed), picked_via=picked_via)


@dataclass(frozen=True)
class CommitFilesItem(QuickPickItem):
    """Header item for a commit's changed files; choosing it rewinds to the commit's actions."""

    kind: ItemKind = ItemKind.TOGGLE


def commit_files_item(commit: GitCommit, *, picked: bool = False, file: GitFile | None = None) -> CommitFilesItem:
    count = len(commit.files)
    noun = "file" if count == 1 else "files"
    description = f"{count} {noun} changed"
    if file is not None:
        description = f"{file.file_name} ({file.status_text})"
    return CommitFilesItem(
        label=commit.summary or commit.short_sha,
        description=description,
        detail=f"{commit.author}  {_format_date(commit)}  {_commit_label(commit)}".strip(),
        picked=picked,
        always_show=True,
        item=commit,
    )


def repository_item(repo: Repository, *, picked: bool = False, branch: GitBranch | None = None) -> QuickPickItem:
    description = ""
    if branch is not None:
        description = branch.name
        if branch.upstream:
            description += f"  {_tracking(branch)}".rstrip()
    return QuickPickItem(
        label=("★ " if repo.starred else "") + repo.formatted_name,
        description=description,
        detail=repo.path,
        picked=picked,
        item=repo,
    )


def branch_item(branch: GitBranch, *, picked: bool = False, checked: bool = False) -> QuickPickItem:
    description = "remote branch" if branch.remote else "branch"
    if branch.upstream:
        description += f"  → {branch.upstream}"
        tracking = _tracking(branch)
        if tracking:
            description += f" {tracking}"
    label = branch.name + ("  ✓" if branch.current else "")
    return QuickPickItem(
        label=label,
        description=description,
        detail=branch.sha[:7],
        picked=picked or checked,
        item=branch,
    )


def tag_item(tag: GitTag, *, picked: bool = False, checked: bool = False) -> QuickPickItem:
    return QuickPickItem(
        label=tag.name,
        description="tag" + (f"  {tag.message}" if tag.message else ""),
        detail=tag.sha[:7],
        picked=picked or checked,
        item=tag,
    )


def commit_item(commit: GitCommit, *, picked: bool = False, compact: bool = True) -> QuickPickItem:
    if isinstance(commit, GitStashCommit):
        label = commit.summary or commit.stash_name
        description = f"{commit.stash_name}  {_format_date(commit)}"
    else:
        label = commit.summary or commit.short_sha
        description = f"{commit.author}, {_format_date(commit)}  {commit.short_sha}"
    detail = "" if compact else f"{len(commit.files)} files changed"
    return QuickPickItem(label=label, description=description.strip(), detail=detail, picked=picked, item=commit)


def commit_file_item(commit: GitCommit, file: GitFile, *, picked: bool = False) -> QuickPickItem:
    """Item for one changed file; ``item`` is the commit narrowed to that file."""
    directory, _, name = file.file_name.rpartition("/")
    description = directory
    if file.original_file_name:
        description = f"{directory}  ← {file.original_file_name}".strip()
    return QuickPickItem(
        label=name,
        description=description,
        detail=file.status_text,
        picked=picked,
        item=commit.to_file_commit(file),
    )


def _tracking(branch: GitBranch) -> str:
    parts = []
    if branch.ahead:
        parts.append(f"{branch.ahead}↑")
    if branch.behind:
        parts.append(f"{branch.behind}↓")
    return " ".join(parts)


def _format_date(commit: GitCommit) -> str:
    return commit.date.strftime("%Y-%m-%d") if commit.date else ""


def _commit_label(commit: GitCommit) -> str:
    return commit.stash_name if isinstance(commit, GitStashCommit) else commit.short_sha
