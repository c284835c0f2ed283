from __future__ import annotations

import pytest

from gitpick.actions import ActionKind
from gitpick.git.memory import MemoryProvider
from gitpick.git.models import Repository
from gitpick.wizard.command import PickedVia
from gitpick.wizard.items import CommandItem, GitCommandItem
from gitpick.wizard.services import RecordingViews, Services
from gitpick.wizard.state import Context, StepState, append_repos_to_title
from gitpick.wizard.steps import (
    LOAD_MORE,
    confirm_step,
    pick_branch_or_tag_step,
    pick_commit_step,
    pick_repository_step,
    show_commit_or_stash_step,
    validate_reference_fn,
)
from gitpick.wizard.types import REVEAL_IN_VIEW, Directive, ItemKind, QuickPickItem, StepResult
from tests.utils import APP, SHA2, SHA3, FakeControls, RecordingExecutor, find_item


async def _context(services: Services) -> Context:
    repos = await services.provider.get_ordered_repositories()
    return Context(title="Test", services=services, repos=repos)


@pytest.mark.asyncio
async def test_typed_reference_replaces_items(context: Context, app_repo: Repository) -> None:
    validate = validate_reference_fn(context, app_repo)
    controls = FakeControls([QuickPickItem("main"), QuickPickItem("feature")])

    assert await validate(controls, "#2b2b2b2")
    [item] = controls.items
    assert item.item.sha == SHA2
    assert item.picked


@pytest.mark.asyncio
async def test_unknown_typed_reference_offers_back(context: Context, app_repo: Repository) -> None:
    validate = validate_reference_fn(context, app_repo)
    controls = FakeControls([QuickPickItem("main")])

    assert await validate(controls, "#nope")
    [item] = controls.items
    assert item.kind is ItemKind.DIRECTIVE
    assert item.item is Directive.BACK
    assert item.label == "Enter a reference or commit id"


@pytest.mark.asyncio
async def test_text_matching_items_is_left_to_the_filter(context: Context, app_repo: Repository) -> None:
    validate = validate_reference_fn(context, app_repo)
    controls = FakeControls([QuickPickItem("main"), QuickPickItem("feature")])

    assert not await validate(controls, "feat")
    assert not await validate(controls, "not-a-ref")
    assert [item.label for item in controls.items] == ["main", "feature"]


@pytest.mark.asyncio
async def test_tags_toggle_refetches_items(context: Context, app_repo: Repository) -> None:
    step = await pick_branch_or_tag_step(StepState(), context, app_repo, placeholder="Choose")
    assert "v1.0" in [item.label for item in step.items]

    button = next(b for b in step.buttons if b.name == "tags")
    assert button.toggle and button.on

    controls = FakeControls(step.items)
    await step.on_did_click_button(controls, button)

    assert not context.show_tags
    assert not button.on
    assert "v1.0" not in [item.label for item in controls.items]
    assert controls.busy_seen
    assert not controls.busy
    assert controls.enabled


@pytest.mark.asyncio
async def test_reveal_key_reveals_active_reference(context: Context, views: RecordingViews, app_repo: Repository) -> None:
    step = await pick_branch_or_tag_step(StepState(), context, app_repo, placeholder="Choose")
    controls = FakeControls(step.items, active=0)

    await step.on_did_press_key(controls, "right")
    await step.on_did_click_button(FakeControls(step.items, active=len(step.items) - 1), REVEAL_IN_VIEW)

    assert views.events == [("reveal-branch", "main"), ("reveal-tag", "v1.0")]


@pytest.mark.asyncio
async def test_load_more_doubles_the_page(context: Context, app_repo: Repository) -> None:
    log = await context.provider.get_log(APP, ref="main", limit=1)
    step = await pick_commit_step(StepState(), context, app_repo, log=log, placeholder="Choose a commit")
    assert LOAD_MORE in step.buttons
    assert len(step.items) == 1

    controls = FakeControls(step.items)
    await step.on_did_click_button(controls, LOAD_MORE)
    assert len(controls.items) == 2


@pytest.mark.asyncio
async def test_missing_log_offers_directives(context: Context, app_repo: Repository) -> None:
    step = await pick_commit_step(
        StepState(), context, app_repo, log=None, placeholder="Choose", empty_placeholder="Nothing here"
    )
    assert step.placeholder == "Nothing here"
    assert [item.item for item in step.items] == [Directive.BACK, Directive.CANCEL]
    assert step.sole_item is None

    back = await step.finalize(StepResult.selection(step.items[0]))
    assert back == StepResult.back()


@pytest.mark.asyncio
async def test_no_repositories_offers_only_cancel(executor: RecordingExecutor) -> None:
    services = Services(provider=MemoryProvider(), executor=executor)
    context = await _context(services)
    step = await pick_repository_step(StepState(), context)

    assert step.placeholder == "No repositories found"
    assert [item.item for item in step.items] == [Directive.CANCEL]
    assert step.sole_item is None


@pytest.mark.asyncio
async def test_commit_actions_include_remote_links(context: Context, app_repo: Repository) -> None:
    commit = await context.provider.get_commit(APP, SHA3)
    step = await show_commit_or_stash_step(StepState(), context, app_repo, commit)

    open_remote = find_item(step, "Open Commit on GitHub")
    assert isinstance(open_remote, CommandItem)
    assert open_remote.action.kind is ActionKind.OPEN_REMOTE_URL
    assert open_remote.action.text == f"https://github.com/acme/app/commit/{SHA3}"

    switch = find_item(step, "Switch to Commit...")
    assert isinstance(switch, GitCommandItem)
    command = switch.create_command(PickedVia.MENU)
    assert command.key == "switch"
    assert command.state.counter == 2


@pytest.mark.asyncio
async def test_action_key_runs_the_active_command(
    context: Context, executor: RecordingExecutor, views: RecordingViews, app_repo: Repository
) -> None:
    commit = await context.provider.get_commit(APP, SHA3)
    step = await show_commit_or_stash_step(StepState(), context, app_repo, commit)
    index = step.items.index(find_item(step, "Copy Commit ID"))

    await step.on_did_press_key(FakeControls(step.items, active=index), "right")

    [action] = executor.actions
    assert action.kind is ActionKind.COPY_SHA
    assert views.events == [("message", "copy-sha done")]


@pytest.mark.asyncio
async def test_contributors_are_ordered_by_commit_count(context: Context, app_repo: Repository) -> None:
    contributors = await context.provider.get_contributors(app_repo.path)

    assert [(c.name, c.count) for c in contributors] == [("Ada", 3), ("Grace", 2)]
    assert [c.current for c in contributors] == [True, False]
    assert await context.provider.get_contributors("/work/gone") == []


@pytest.mark.asyncio
async def test_confirm_step_ends_with_cancel() -> None:
    step = confirm_step("Confirm Switch", [QuickPickItem("Switch", item=())])
    assert [item.label for item in step.items] == ["Switch", "Cancel"]
    assert await step.finalize(StepResult.selection(step.items[-1])) == StepResult.cancel()


@pytest.mark.asyncio
async def test_title_lists_repository_only_when_several_are_open(
    multi_services: Services, services: Services, app_repo: Repository
) -> None:
    single = await _context(services)
    several = await _context(multi_services)

    assert append_repos_to_title("Switch", single, repo=app_repo) == "Switch"
    assert append_repos_to_title("Switch", several, repo=app_repo) == "Switch  •  app"
    assert append_repos_to_title("Switch", several, repos=several.repos) == "Switch  •  2 repositories"
