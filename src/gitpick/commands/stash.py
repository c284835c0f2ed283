"""Apply or drop a stash."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from gitpick.actions import Action, ActionKind
from gitpick.commands import register_command
from gitpick.commands.base import GitQuickCommand, RepositoryContext, RepositoryState
from gitpick.errors import ProviderError
from gitpick.git.models import GitStashCommit
from gitpick.wizard.command import Execute, Plan, Prompt
from gitpick.wizard.state import append_repos_to_title
from gitpick.wizard.steps import confirm_step, pick_stash_step
from gitpick.wizard.types import QuickPickItem, StepResult

logger = logging.getLogger(__name__)

SUBCOMMANDS = ("apply", "drop")


@dataclass
class StashState(RepositoryState):
    subcommand: str = "apply"
    reference: GitStashCommit | str | None = None
    flags: tuple[str, ...] = ()


@register_command
class StashCommand(GitQuickCommand[StashState, RepositoryContext]):
    key = "stash"
    label = "stash"
    title = "Stash"
    description = "applies or drops stashed changes"
    can_confirm = True
    state_type = StashState

    def initial_counter(self, state: StashState) -> int:
        if state.subcommand not in SUBCOMMANDS:
            raise ValueError(f"Unknown stash subcommand: {state.subcommand}")
        return int(state.repo is not None) + int(state.reference is not None)

    async def plan(self, state: StashState, context: RepositoryContext) -> Plan:
        repo = await self.plan_repository(state, context)
        if isinstance(repo, Prompt):
            return repo
        verb = "Apply" if state.subcommand == "apply" else "Drop"
        context.title = append_repos_to_title(f"{self.title} {verb}", context, repo=repo)

        reference = await self.resolve_reference(context, repo, state.reference, commit_only=True)
        if not isinstance(reference, GitStashCommit):
            state.reference = None
            self.invalidate(state, 2)
        else:
            state.reference = reference

        if state.counter < 2:
            try:
                stash = await context.provider.get_stash(repo.path)
            except ProviderError as exc:
                logger.debug("Unable to list stashes: %s", exc)
                stash = None
            step = await pick_stash_step(
                state,
                context,
                repo,
                stash=stash,
                placeholder=f"Choose a stash to {verb.lower()}",
                picked=state.reference.ref if state.reference else None,
            )
            return Prompt(2, step)

        stash_name = state.reference.stash_name
        if self.confirm_required(state) and state.counter < 3:
            if state.subcommand == "apply":
                confirmations = [
                    QuickPickItem(label="Apply Stash", description=f"will apply {stash_name}", item=()),
                    QuickPickItem(label="Pop Stash", description=f"will apply and then drop {stash_name}", item=("--pop",)),
                ]
            else:
                confirmations = [
                    QuickPickItem(label="Drop Stash", description=f"will delete {stash_name}", item=()),
                ]
            return Prompt(3, confirm_step(f"Confirm {context.title}", confirmations))

        kind = ActionKind.STASH_APPLY if state.subcommand == "apply" else ActionKind.STASH_DROP
        return Execute(Action(kind, repo.path, ref=stash_name, flags=state.flags, target=state.reference))

    async def integrate(self, ordinal: int, state: StashState, context: RepositoryContext, result: StepResult) -> Plan | None:
        if ordinal == 1:
            self.integrate_repository(state, result)
        elif ordinal == 2:
            state.reference = result.first.item
        elif ordinal == 3:
            state.flags = tuple(result.first.item or ())
        return None
