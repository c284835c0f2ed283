from __future__ import annotations

import pytest

from gitpick.actions import ActionKind
from gitpick.commands import create_command
from gitpick.git.models import Repository
from gitpick.wizard.command import Delegate, Finish, PickedVia, Plan, Prompt, QuickCommand
from gitpick.wizard.engine import FrameStatus, WizardRun, run_wizard
from gitpick.wizard.services import Services
from gitpick.wizard.state import Context, StepState
from gitpick.wizard.types import QuickPickItem, QuickPickStep, StepResult
from tests.utils import APP, SHA3, STASH_SHA, RecordingExecutor, ScriptedPickerHost, choose


async def _into_show(run: WizardRun):
    step = await run.start()
    step = await run.next(choose("main")(step))
    return await run.next(choose("Fix parser edge case")(step))


@pytest.mark.asyncio
async def test_log_delegates_to_show(services: Services) -> None:
    run = WizardRun(create_command("log", picked_via=PickedVia.SHORTCUT), services)
    step = await _into_show(run)

    assert [frame.command.key for frame in run.frames] == ["log", "show"]
    assert run.frames[0].status is FrameStatus.DELEGATING
    child = run.current
    assert child.state.starting_step == 2
    assert child.state.counter == 2
    assert child.command.picked_via is PickedVia.SHORTCUT
    assert step.title == "Show  •  Commit 3c3c3c3"


@pytest.mark.asyncio
async def test_back_out_of_child_ends_the_run(services: Services) -> None:
    run = WizardRun(create_command("log"), services)
    await _into_show(run)

    assert await run.next(StepResult.back()) is None
    assert run.frames == ()
    assert run.outcome.cancelled
    assert run.outcome.backed_out
    assert run.outcome.state.counter == -1


@pytest.mark.asyncio
async def test_cancel_in_child_cancels_the_run(services: Services) -> None:
    run = WizardRun(create_command("log"), services)
    await _into_show(run)

    assert await run.next(StepResult.cancel()) is None
    assert run.outcome.cancelled
    assert not run.outcome.backed_out
    assert run.outcome.state.counter == -1


@pytest.mark.asyncio
async def test_execute_in_child_completes_every_frame(services: Services, executor: RecordingExecutor) -> None:
    host = ScriptedPickerHost(
        choose("main"),
        choose("Fix parser edge case"),
        choose("Create Branch at Commit..."),
        StepResult.text("hotfix"),
        choose("Create Branch"),
    )
    outcome = await run_wizard(create_command("log"), host, services)

    assert outcome.completed
    [action] = executor.actions
    assert action.kind is ActionKind.CREATE_BRANCH
    assert (action.ref, action.name, action.flags) == (SHA3, "hotfix", ())


@pytest.mark.asyncio
async def test_back_through_nested_children(services: Services) -> None:
    run = WizardRun(create_command("log"), services)
    step = await _into_show(run)
    step = await run.next(choose("Switch to Commit...")(step))

    assert [frame.command.key for frame in run.frames] == ["log", "show", "switch"]
    assert run.current.pending.ordinal == 3

    assert await run.next(StepResult.back()) is None
    assert run.frames == ()
    assert run.outcome.backed_out
    assert run.outcome.state.counter == -1
    assert run.outcome.steps_presented == 4


@pytest.mark.asyncio
async def test_stash_actions_delegate_with_subcommand(services: Services, executor: RecordingExecutor) -> None:
    command = create_command("show", {"repo": Repository(APP), "reference": "stash@{0}"})
    host = ScriptedPickerHost(choose("Apply Stash..."), choose("Pop Stash"))
    outcome = await run_wizard(command, host, services)

    assert outcome.completed
    assert "Switch to Commit..." not in [item.label for item in host.presented[0].items]
    assert host.presented[1].title == "Confirm Stash Apply"
    [action] = executor.actions
    assert action.kind is ActionKind.STASH_APPLY
    assert action.ref == "stash@{0}"
    assert action.flags == ("--pop",)
    assert action.target.sha == STASH_SHA


@pytest.mark.asyncio
async def test_back_inside_child_stays_in_child(services: Services) -> None:
    run = WizardRun(create_command("log"), services)
    step = await _into_show(run)
    step = await run.next(choose("Fix parser edge case")(step))
    assert run.current.pending.ordinal == 4

    step = await run.next(StepResult.back())

    assert [frame.command.key for frame in run.frames] == ["log", "show"]
    assert run.current.pending.ordinal == 3
    assert run.current.state.counter == 2
    assert step.title == "Show  •  Commit 3c3c3c3"


class _Child(QuickCommand[StepState, Context]):
    key = "child"

    async def create_context(self, services: Services) -> Context:
        return Context(title="Child", services=services)

    async def plan(self, state: StepState, context: Context) -> Plan:
        return Prompt(1, QuickPickStep(title="Child", placeholder="Finish", items=(QuickPickItem("done"),)))

    async def integrate(self, ordinal: int, state: StepState, context: Context, result: StepResult) -> Plan | None:
        return Finish()


class _Parent(QuickCommand[StepState, Context]):
    key = "parent"

    async def create_context(self, services: Services) -> Context:
        return Context(title="Parent", services=services)

    async def plan(self, state: StepState, context: Context) -> Plan:
        if state.counter < 1:
            return Prompt(1, QuickPickStep(title="Parent", placeholder="Go", items=(QuickPickItem("go"),)))
        return Delegate(_Child())

    async def integrate(self, ordinal: int, state: StepState, context: Context, result: StepResult) -> Plan | None:
        return None


@pytest.mark.asyncio
async def test_finished_child_returns_to_the_delegating_decision(services: Services) -> None:
    run = WizardRun(_Parent(), services)
    step = await run.start()
    step = await run.next(choose("go")(step))
    assert [frame.command.key for frame in run.frames] == ["parent", "child"]

    step = await run.next(choose("done")(step))

    assert [frame.command.key for frame in run.frames] == ["parent"]
    assert run.current.pending.ordinal == 1
    assert run.current.state.counter == 0
    assert step.placeholder == "Go"
    assert run.outcome is None


def test_command_without_plan_cannot_be_created() -> None:
    class Incomplete(QuickCommand[StepState, Context]):
        key = "incomplete"

        async def create_context(self, services: Services) -> Context:
            return Context(title="Incomplete", services=services)

    with pytest.raises(TypeError):
        Incomplete()
