from __future__ import annotations

import pytest

from gitpick.actions import ActionKind
from gitpick.commands import command_keys, create_command, get_command_type
from gitpick.errors import UnknownCommandError
from gitpick.git.models import Repository
from gitpick.wizard.engine import WizardRun, run_wizard
from gitpick.wizard.services import Services
from gitpick.wizard.types import StepKind
from tests.utils import APP, SHA2, RecordingExecutor, ScriptedPickerHost, choose, text


def test_builtin_commands_are_registered() -> None:
    assert command_keys() == ["branch", "log", "show", "stash", "switch", "tag"]
    assert get_command_type("log").title == "Commits"
    with pytest.raises(UnknownCommandError):
        get_command_type("rebase")


def test_stash_rejects_unknown_subcommand() -> None:
    with pytest.raises(ValueError):
        create_command("stash", {"subcommand": "push"})


@pytest.mark.asyncio
async def test_stash_drop_confirms(services: Services, executor: RecordingExecutor) -> None:
    host = ScriptedPickerHost(choose("WIP on main: tweak"), choose("Drop Stash"))
    outcome = await run_wizard(create_command("stash", {"subcommand": "drop"}), host, services)

    assert outcome.completed
    assert host.presented[0].title == "Stash Drop"
    [action] = executor.actions
    assert action.kind is ActionKind.STASH_DROP
    assert action.ref == "stash@{0}"


@pytest.mark.asyncio
async def test_branch_name_is_validated(services: Services, executor: RecordingExecutor) -> None:
    run = WizardRun(create_command("branch"), services)
    step = await run.start()
    step = await run.next(choose("feature")(step))

    assert step.kind is StepKind.INPUT
    assert run.current.pending.ordinal == 3
    assert await step.check("main") == (False, "A branch named 'main' already exists.")
    assert await run.next(text("main")) is step
    assert await run.next(text("bad..name")) is step

    step = await run.next(text("topic"))
    assert [item.label for item in step.items] == ["Create Branch", "Create Branch and Switch", "Cancel"]

    assert await run.next(choose("Create Branch and Switch")(step)) is None
    [action] = executor.actions
    assert action.kind is ActionKind.CREATE_BRANCH
    assert (action.ref, action.name, action.flags) == ("feature", "topic", ("--switch",))


@pytest.mark.asyncio
async def test_branch_from_remote_suggests_local_name(services: Services) -> None:
    run = WizardRun(create_command("branch"), services)
    step = await run.start()
    step = await run.next(choose("origin/main")(step))
    assert step.value == "main"


@pytest.mark.asyncio
async def test_invalid_seeded_branch_name_is_asked_again(services: Services) -> None:
    command = create_command("branch", {"repo": Repository(APP), "reference": "main", "name": "-oops"})
    run = WizardRun(command, services)
    step = await run.start()

    assert run.current.pending.ordinal == 3
    assert step.value == "-oops"


@pytest.mark.asyncio
async def test_annotated_tag(services: Services, executor: RecordingExecutor) -> None:
    command = create_command("tag", {"message": "Second release"})
    host = ScriptedPickerHost(choose("main"), text("v2.0"), choose("Create Tag with Message"))
    outcome = await run_wizard(command, host, services)

    assert outcome.completed
    assert host.presented[1].title == "Create Tag at branch main"
    [action] = executor.actions
    assert action.kind is ActionKind.CREATE_TAG
    assert (action.ref, action.name, action.text) == ("main", "v2.0", "Second release")


@pytest.mark.asyncio
async def test_existing_tag_name_is_rejected(services: Services) -> None:
    run = WizardRun(create_command("tag", {"repo": Repository(APP), "reference": SHA2}), services)
    step = await run.start()
    assert await run.next(text("v1.0")) is step
    assert run.current.pending.ordinal == 3


@pytest.mark.asyncio
async def test_switch_hides_current_branch(services: Services) -> None:
    run = WizardRun(create_command("switch"), services)
    step = await run.start()
    assert [item.label for item in step.items] == ["feature", "origin/main", "v1.0"]


@pytest.mark.asyncio
async def test_switch_to_remote_branch_tracks(services: Services, executor: RecordingExecutor) -> None:
    host = ScriptedPickerHost(choose("origin/main"), choose("Create & Switch to New Local Branch"))
    outcome = await run_wizard(create_command("switch"), host, services)

    assert outcome.completed
    [action] = executor.actions
    assert action.kind is ActionKind.CHECKOUT
    assert (action.ref, action.name, action.flags) == ("origin/main", "main", ("--track",))


@pytest.mark.asyncio
async def test_switch_to_tag_detaches_without_confirm(services: Services, executor: RecordingExecutor) -> None:
    command = create_command("switch", {"repo": Repository(APP), "reference": "v1.0", "confirm": False})
    outcome = await run_wizard(command, ScriptedPickerHost(), services)

    assert outcome.completed
    [action] = executor.actions
    assert (action.ref, action.flags) == ("v1.0", ("--detach",))


@pytest.mark.asyncio
async def test_switch_to_local_branch(services: Services, executor: RecordingExecutor) -> None:
    host = ScriptedPickerHost(choose("feature"), choose("Switch"))
    outcome = await run_wizard(create_command("switch"), host, services)

    assert outcome.completed
    [action] = executor.actions
    assert (action.ref, action.name, action.flags) == ("feature", None, ())
