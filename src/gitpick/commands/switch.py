"""Switch the working tree to a branch, tag or commit."""

from __future__ import annotations

from dataclasses import dataclass

from gitpick.actions import Action, ActionKind
from gitpick.commands import register_command
from gitpick.commands.base import GitQuickCommand, RepositoryContext, RepositoryState
from gitpick.git.models import GitReference, is_branch, reference_to_string
from gitpick.wizard.command import Execute, Plan, Prompt
from gitpick.wizard.steps import confirm_step, pick_branch_or_tag_step
from gitpick.wizard.types import QuickPickItem, StepResult


@dataclass
class SwitchState(RepositoryState):
    reference: GitReference | str | None = None
    flags: tuple[str, ...] = ()


@register_command
class SwitchCommand(GitQuickCommand[SwitchState, RepositoryContext]):
    key = "switch"
    label = "switch"
    title = "Switch"
    description = "aka checkout, switches the current branch"
    can_confirm = True
    state_type = SwitchState

    def initial_counter(self, state: SwitchState) -> int:
        return int(state.repo is not None) + int(state.reference is not None)

    async def plan(self, state: SwitchState, context: RepositoryContext) -> Plan:
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
                placeholder="Choose a branch or tag to switch to",
                picked=reference.ref if reference else None,
                value=context.reference_hint,
                filter_branches=lambda branch: not branch.current,
            )
            return Prompt(2, step, skippable=True)

        target = reference_to_string(reference)
        if self.confirm_required(state) and state.counter < 3:
            if is_branch(reference) and reference.remote:
                confirmations = [
                    QuickPickItem(
                        label="Create & Switch to New Local Branch",
                        description=f"will create and switch to {reference.local_name} tracking {reference.name}",
                        item=("--track",),
                    ),
                    QuickPickItem(label=context.title, description=f"will switch to {target} (detached)", item=("--detach",)),
                ]
            elif is_branch(reference):
                confirmations = [QuickPickItem(label=context.title, description=f"will switch to {target}", item=())]
            else:
                confirmations = [
                    QuickPickItem(label=context.title, description=f"will switch to {target} (detached)", item=("--detach",))
                ]
            return Prompt(3, confirm_step(f"Confirm {context.title}", confirmations))

        flags = state.flags
        if not flags and not (is_branch(reference) and not reference.remote):
            flags = ("--detach",)
        name = reference.local_name if "--track" in flags and is_branch(reference) else None
        return Execute(Action(ActionKind.CHECKOUT, repo.path, ref=reference.ref, name=name, flags=flags))

    async def integrate(self, ordinal: int, state: SwitchState, context: RepositoryContext, result: StepResult) -> Plan | None:
        if ordinal == 1:
            self.integrate_repository(state, result)
        elif ordinal == 2:
            state.reference = result.first.item
            context.reference_hint = None
        elif ordinal == 3:
            state.flags = tuple(result.first.item or ())
        return None
