"""History: choose a repository, a branch or tag, then a commit to show."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from gitpick.commands import create_command, register_command
from gitpick.commands.base import GitQuickCommand, RepositoryContext, RepositoryState
from gitpick.errors import ProviderError
from gitpick.git.models import GitBranch, GitCommit, GitReference, GitTag, is_revision
from gitpick.wizard.command import Delegate, Plan, Prompt
from gitpick.wizard.steps import pick_branch_or_tag_step, pick_commit_step
from gitpick.wizard.types import StepResult

logger = logging.getLogger(__name__)


@dataclass
class LogState(RepositoryState):
    reference: GitReference | str | None = None


@dataclass
class LogContext(RepositoryContext):
    selected_branch_or_tag: GitBranch | GitTag | None = None


@register_command
class LogCommand(GitQuickCommand[LogState, LogContext]):
    key = "log"
    label = "history"
    title = "Commits"
    description = "aka log, shows commit history"
    state_type = LogState
    context_type = LogContext

    def initial_counter(self, state: LogState) -> int:
        counter = 0
        if state.repo is not None:
            counter += 1
        if state.reference is not None:
            counter += 1
            if is_revision(state.reference):
                counter += 1
        return counter

    async def plan(self, state: LogState, context: LogContext) -> Plan:
        repo = await self.plan_repository(state, context)
        if isinstance(repo, Prompt):
            return repo

        if isinstance(state.reference, str):
            context.reference_hint = state.reference
        reference = await self.resolve_reference(context, repo, state.reference)
        if reference is None:
            if state.reference is not None and not isinstance(state.reference, str):
                context.selected_branch_or_tag = None
            state.reference = None
            self.invalidate(state, 2)
        else:
            state.reference = reference

        if state.counter < 2:
            selected = context.selected_branch_or_tag
            picked = selected.ref if selected else (state.reference.ref if state.reference else None)
            step = await pick_branch_or_tag_step(
                state,
                context,
                repo,
                placeholder="Choose a branch or tag to show its commit history",
                picked=picked,
                value=context.reference_hint if selected is None else None,
            )
            return Prompt(2, step, skippable=True)

        if not is_revision(state.reference):
            context.selected_branch_or_tag = state.reference

        selected = context.selected_branch_or_tag
        if state.counter < 3 and selected is not None:
            try:
                log = await context.provider.get_log(repo.path, ref=selected.ref, limit=context.services.settings.log_limit)
            except ProviderError as exc:
                logger.debug("Unable to load history for %s: %s", selected.ref, exc)
                log = None
            step = await pick_commit_step(
                state,
                context,
                repo,
                log=log,
                placeholder=f"Choose a commit from {selected.ref}",
                picked=state.reference.ref if is_revision(state.reference) else None,
                empty_placeholder=f"No commits found on {selected.ref}",
            )
            return Prompt(3, step)

        commit = state.reference
        if not isinstance(commit, GitCommit):
            commit = await self._commit(context, repo, commit.ref)
            if commit is None:
                state.reference = None
                self.invalidate(state, 2)
                return await self.plan(state, context)
            state.reference = commit
        return Delegate(create_command("show", {"repo": repo, "reference": commit}, picked_via=self.picked_via))

    async def integrate(self, ordinal: int, state: LogState, context: LogContext, result: StepResult) -> Plan | None:
        if ordinal == 1:
            self.integrate_repository(state, result)
        elif ordinal == 2:
            state.reference = result.first.item
            context.selected_branch_or_tag = None
            context.reference_hint = None
        elif ordinal == 3:
            state.reference = result.first.item
        return None
