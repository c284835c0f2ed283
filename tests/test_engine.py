from __future__ import annotations

import pytest

from gitpick.actions import ActionKind
from gitpick.commands import create_command
from gitpick.errors import EngineError
from gitpick.git.memory import MemoryProvider
from gitpick.git.models import GitBranch, GitCommit, Repository
from gitpick.wizard.command import Prompt
from gitpick.wizard.engine import RunStatus, WizardRun, run_wizard
from gitpick.wizard.services import Services
from gitpick.wizard.types import StepResult
from tests.utils import (
    APP,
    LIB,
    SHA2,
    SHA3,
    RecordingExecutor,
    ScriptedPickerHost,
    choose,
    find_item,
    lib_repository,
)


@pytest.mark.asyncio
async def test_single_repository_is_skipped(services: Services) -> None:
    run = WizardRun(create_command("log"), services)
    step = await run.start()

    assert step is not None
    assert step.placeholder == "Choose a branch or tag to show its commit history"
    assert run.current.state.counter == 1
    assert run.current.context.auto_skipped == {1}

    step = await run.next(choose("main")(step))
    assert run.current.state.counter == 2
    assert run.current.pending.ordinal == 3
    assert step.placeholder == "Choose a commit from main"


@pytest.mark.asyncio
async def test_sole_branch_is_skipped_and_back_leaves_the_wizard(executor: RecordingExecutor) -> None:
    services = Services(provider=MemoryProvider(repositories=[lib_repository()]), executor=executor)
    run = WizardRun(create_command("log"), services)
    step = await run.start()

    assert run.current.pending.ordinal == 3
    assert run.current.state.counter == 2
    assert run.current.context.auto_skipped == {1, 2}
    assert [item.label for item in step.items] == ["Create lib"]

    assert await run.next(StepResult.back()) is None
    assert run.outcome.cancelled
    assert run.outcome.backed_out


@pytest.mark.asyncio
async def test_back_returns_to_repository_choice(multi_services: Services) -> None:
    run = WizardRun(create_command("log"), multi_services)
    step = await run.start()
    assert run.current.pending.ordinal == 1
    assert [item.label for item in step.items] == ["app", "lib"]

    step = await run.next(choose("app")(step))
    assert run.current.pending.ordinal == 2

    step = await run.next(StepResult.back())
    assert run.current.pending.ordinal == 1
    assert run.current.state.counter == 0
    assert step.title == "Commits"


@pytest.mark.asyncio
async def test_back_from_commit_reasks_branch_only(multi_services: Services) -> None:
    run = WizardRun(create_command("log"), multi_services)
    step = await run.start()
    step = await run.next(choose("app")(step))
    step = await run.next(choose("feature")(step))
    assert step.placeholder == "Choose a commit from feature"

    step = await run.next(StepResult.back())
    assert run.current.pending.ordinal == 2
    assert run.current.state.counter == 1

    step = await run.next(choose("main")(step))
    assert run.current.pending.ordinal == 3
    assert run.current.state.repo == Repository(APP)
    assert step.placeholder == "Choose a commit from main"


@pytest.mark.asyncio
async def test_back_on_first_step_backs_out(multi_services: Services) -> None:
    host = ScriptedPickerHost(StepResult.back())
    outcome = await run_wizard(create_command("log"), host, multi_services)
    assert outcome.status is RunStatus.CANCELLED
    assert outcome.backed_out
    assert outcome.steps_presented == 1


@pytest.mark.asyncio
async def test_cancel_on_first_step(multi_services: Services) -> None:
    host = ScriptedPickerHost(StepResult.cancel())
    outcome = await run_wizard(create_command("log"), host, multi_services)
    assert outcome.cancelled
    assert not outcome.backed_out
    assert outcome.state.counter == -1


@pytest.mark.asyncio
async def test_cancel_directive_item_cancels(services: Services) -> None:
    host = ScriptedPickerHost(choose("feature"), choose("Start feature"), choose("Switch to Commit..."), choose("Cancel"))
    outcome = await run_wizard(create_command("log"), host, services)
    assert outcome.cancelled
    assert not outcome.backed_out
    assert host.exhausted


@pytest.mark.asyncio
async def test_refused_result_presents_the_same_step(services: Services) -> None:
    run = WizardRun(create_command("log"), services)
    step = await run.start()

    again = await run.next(StepResult.text("main"))
    assert again is step
    assert run.status is RunStatus.SUSPENDED

    two = StepResult.selection(find_item(step, "main"), find_item(step, "feature"))
    assert await run.next(two) is step


@pytest.mark.asyncio
async def test_plan_is_idempotent(multi_services: Services) -> None:
    command = create_command("log")
    context = await command.create_context(multi_services)

    first = await command.plan(command.state, context)
    second = await command.plan(command.state, context)

    assert isinstance(first, Prompt) and isinstance(second, Prompt)
    assert first.ordinal == second.ordinal == 1
    assert [i.label for i in first.step.items] == [i.label for i in second.step.items]
    assert command.state.counter == 0


@pytest.mark.asyncio
async def test_show_seeded_with_file_starts_at_file_actions(services: Services, executor: RecordingExecutor) -> None:
    commit = GitCommit(APP, SHA2)
    command = create_command("show", {"repo": Repository(APP), "reference": SHA2[:7], "file": "src/parser.py"})
    assert command.state.counter == 4

    host = ScriptedPickerHost(choose("Open Changes"))
    outcome = await run_wizard(command, host, services)

    assert outcome.completed
    assert host.presented[0].title.endswith("src/parser.py")
    [action] = executor.actions
    assert action.kind is ActionKind.OPEN_CHANGES
    assert action.ref == commit.sha
    assert action.file_name == "src/parser.py"


@pytest.mark.asyncio
async def test_unknown_file_falls_back_to_file_list(services: Services) -> None:
    command = create_command("show", {"repo": Repository(APP), "reference": SHA2, "file": "missing.txt"})
    run = WizardRun(command, services)
    step = await run.start()

    assert run.current.pending.ordinal == 4
    assert run.current.state.counter == 3
    assert [item.label for item in step.items][1:] == ["parser.py", "test_parser.py"]


@pytest.mark.asyncio
async def test_files_toggle_moves_between_actions_and_files(services: Services) -> None:
    run = WizardRun(create_command("show", {"repo": Repository(APP), "reference": SHA2}), services)
    step = await run.start()
    assert run.current.pending.ordinal == 3

    step = await run.next(choose("Add parser")(step))
    assert run.current.pending.ordinal == 4

    step = await run.next(choose("parser.py")(step))
    assert run.current.pending.ordinal == 5
    assert step.title == "Show  •  Commit 2b2b2b2  •  src/parser.py"

    step = await run.next(choose("Add parser")(step))
    assert run.current.pending.ordinal == 4
    assert find_item(step, "parser.py").picked

    step = await run.next(choose("Add parser")(step))
    assert run.current.pending.ordinal == 3
    assert run.current.state.counter == 2


@pytest.mark.asyncio
async def test_seeded_command_without_confirm_runs_without_prompting(
    services: Services, executor: RecordingExecutor
) -> None:
    command = create_command(
        "branch",
        {"repo": Repository(APP), "reference": "main", "name": "topic", "confirm": False},
    )
    host = ScriptedPickerHost()
    outcome = await run_wizard(command, host, services)

    assert outcome.completed
    assert outcome.steps_presented == 0
    [action] = executor.actions
    assert action.kind is ActionKind.CREATE_BRANCH
    assert (action.ref, action.name, action.flags) == ("main", "topic", ())


@pytest.mark.asyncio
async def test_stale_repository_is_asked_again(multi_services: Services) -> None:
    command = create_command("log", {"repo": "/work/gone"})
    assert command.state.counter == 1

    run = WizardRun(command, multi_services)
    await run.start()
    assert run.current.pending.ordinal == 1
    assert run.current.state.repo is None


@pytest.mark.asyncio
async def test_repository_answered_by_name(multi_services: Services) -> None:
    run = WizardRun(create_command("log", {"repo": "lib"}), multi_services)
    await run.start()
    assert run.current.pending.ordinal == 3
    assert run.current.state.repo == Repository(LIB)
    assert isinstance(run.current.state.reference, GitBranch)


@pytest.mark.asyncio
async def test_resume_after_terminated_run_is_rejected(services: Services) -> None:
    run = WizardRun(create_command("log"), services)
    await run.start()
    await run.next(StepResult.cancel())

    assert run.outcome is not None
    with pytest.raises(EngineError):
        await run.next(StepResult.cancel())
    with pytest.raises(EngineError):
        await run.start()


@pytest.mark.asyncio
async def test_outcome_reports_presented_steps_and_results(services: Services) -> None:
    host = ScriptedPickerHost(choose("main"), choose("Fix parser edge case"), choose("Copy Commit ID"))
    outcome = await run_wizard(create_command("log"), host, services)

    assert outcome.completed
    assert outcome.steps_presented == 3
    assert [result.message for result in outcome.action_results] == ["copy-sha done"]
    assert outcome.state.reference.sha == SHA3
