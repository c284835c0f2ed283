"""Show a commit or stash: its actions, its changed files, and per-file actions."""

from __future__ import annotations

from dataclasses import dataclass

from gitpick.commands import register_command
from gitpick.commands.base import GitQuickCommand, RepositoryContext, RepositoryState
from gitpick.git.models import GitCommit, GitFile, GitLog, reference_to_string
from gitpick.wizard.command import Delegate, Execute, Plan, Prompt
from gitpick.wizard.state import append_repos_to_title
from gitpick.wizard.steps import (
    pick_commit_step,
    show_commit_or_stash_file_step,
    show_commit_or_stash_files_step,
    show_commit_or_stash_step,
)
from gitpick.wizard.types import ItemKind, QuickPickItem, StepResult


@dataclass
class ShowState(RepositoryState):
    reference: GitCommit | str | None = None
    file: GitCommit | GitFile | str | None = None


@register_command
class ShowCommand(GitQuickCommand[ShowState, RepositoryContext]):
    key = "show"
    label = "show"
    title = "Show"
    description = "shows a commit or stash and its changed files"
    state_type = ShowState

    def initial_counter(self, state: ShowState) -> int:
        counter = 0
        if state.repo is not None:
            counter += 1
        if state.reference is not None:
            counter += 1
        if state.file is not None:
            counter += 2
        return counter

    async def plan(self, state: ShowState, context: RepositoryContext) -> Plan:
        repo = await self.plan_repository(state, context)
        if isinstance(repo, Prompt):
            return repo

        if isinstance(state.reference, str):
            context.reference_hint = state.reference
        commit = await self.resolve_reference(context, repo, state.reference, commit_only=True)
        if commit is None:
            state.reference = None
            state.file = None
            self.invalidate(state, 2)
        else:
            state.reference = commit

        if state.counter < 2:
            step = await pick_commit_step(
                state,
                context,
                repo,
                log=GitLog(repo_path=repo.path),
                placeholder="Enter a reference or commit id",
                picked=context.reference_hint,
            )
            return Prompt(2, step)

        context.title = append_repos_to_title(
            self.title, context, repo=repo, additional=f"  •  {reference_to_string(commit, capitalize=True)}"
        )
        if state.counter < 3:
            return Prompt(3, await show_commit_or_stash_step(state, context, repo, commit))

        if state.file is not None and not (isinstance(state.file, GitCommit) and state.file.sha == commit.sha):
            file_name = state.file.file_name if isinstance(state.file, (GitCommit, GitFile)) else state.file
            state.file = commit.to_file_commit(file_name) if file_name else None
        if state.file is None or state.file.file is None:
            state.file = None
            self.invalidate(state, 4)

        if state.counter < 4:
            picked = state.file.file_name if isinstance(state.file, GitCommit) else None
            return Prompt(4, await show_commit_or_stash_files_step(state, context, commit, picked=picked))

        return Prompt(5, await show_commit_or_stash_file_step(state, context, state.file, state.file.file))

    async def integrate(self, ordinal: int, state: ShowState, context: RepositoryContext, result: StepResult) -> Plan | None:
        item = result.first
        if ordinal == 1:
            self.integrate_repository(state, result)
        elif ordinal == 2:
            state.reference = item.item
            state.file = None
            context.reference_hint = None
        elif ordinal == 3:
            return self._follow_action(item)
        elif ordinal == 4:
            if item.kind is ItemKind.TOGGLE:
                self.toggle(state, ordinal)
            else:
                state.file = item.item
        elif ordinal == 5:
            if item.kind is ItemKind.TOGGLE:
                self.toggle(state, ordinal)
                return None
            return self._follow_action(item)
        return None

    def _follow_action(self, item: QuickPickItem) -> Plan | None:
        if item.kind is ItemKind.GIT_COMMAND:
            return Delegate(item.create_command(self.picked_via))
        if item.kind is ItemKind.COMMAND and item.action is not None:
            return Execute(item.action)
        return None
