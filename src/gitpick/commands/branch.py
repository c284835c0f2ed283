"""Create a branch from a branch, tag or commit."""

from __future__ import annotations

from dataclasses import dataclass

from gitpick.actions import Action, ActionKind
from gitpick.commands import register_command
from gitpick.commands.base import GitQuickCommand, RepositoryContext, RepositoryState
from gitpick.git.models import GitReference, is_branch, reference_to_string
from gitpick.validation import is_valid_ref_name
from gitpick.wizard.command import Execute, Plan, Prompt
from gitpick.wizard.steps import confirm_step, input_branch_name_step, pick_branch_or_tag_step
from gitpick.wizard.types import QuickPickItem, StepResult


@dataclass
class BranchState(RepositoryState):
    reference: GitReference | str | None = None
    name: str | None = None
    flags: tuple[str, ...] = ()


@register_command
class BranchCommand(GitQuickCommand[BranchState, RepositoryContext]):
    key = "branch"
    label = "branch"
    title = "Create Branch"
    description = "creates a branch from a reference"
    can_confirm = True
    state_type = BranchState

    def initial_counter(self, state: BranchState) -> int:
        return sum(value is not None for value in (state.repo, state.reference, state.name))

    async def plan(self, state: BranchState, context: RepositoryContext) -> Plan:
        repo = await self.plan_repository(state, context)
        if isinstance(repo, Prompt):
            return repo

        if isinstance(state.reference, str):
            context.reference_hint = state.reference
        reference = await self.resolve_reference(context, repo, state.reference)
        state.reference = reference
        if reference is None:
            self.invalidate(state, 2)
        if state.counter < 2:
            step = await pick_branch_or_tag_step(
                state,
                context,
                repo,
                placeholder="Choose a base to create the new branch from",
                picked=reference.ref if reference else None,
                value=context.reference_hint,
            )
            return Prompt(2, step, skippable=True)

        if state.name is not None and not is_valid_ref_name(state.name):
            self.invalidate(state, 3)
        if state.counter < 3:
            step = input_branch_name_step(
                state,
                context,
                repo,
                title=f"{context.title} from {reference_to_string(reference)}",
                value=state.name or (reference.local_name if is_branch(reference) and reference.remote else None),
            )
            return Prompt(3, step)

        if self.confirm_required(state) and state.counter < 4:
            source = reference_to_string(reference)
            confirmations = [
                QuickPickItem(label=context.title, description=f"will create {state.name} from {source}", item=()),
                QuickPickItem(
                    label=f"{context.title} and Switch",
                    description=f"will create and switch to {state.name} from {source}",
                    item=("--switch",),
                ),
            ]
            return Prompt(4, confirm_step(f"Confirm {context.title}", confirmations))

        return Execute(Action(ActionKind.CREATE_BRANCH, repo.path, ref=reference.ref, name=state.name, flags=state.flags))

    async def integrate(self, ordinal: int, state: BranchState, context: RepositoryContext, result: StepResult) -> Plan | None:
        if ordinal == 1:
            self.integrate_repository(state, result)
        elif ordinal == 2:
            state.reference = result.first.item
            context.reference_hint = None
        elif ordinal == 3:
            state.name = (result.value or "").strip()
        elif ordinal == 4:
            state.flags = tuple(result.first.item or ())
        return None
