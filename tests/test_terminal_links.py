from __future__ import annotations

import pytest

from gitpick.git.memory import MemoryProvider
from gitpick.git.models import GitBranch, GitCommit, GitTag
from gitpick.terminal import resolve_link
from gitpick.wizard.command import PickedVia
from tests.utils import APP, SHA2, app_repository


@pytest.mark.asyncio
async def test_head_opens_the_current_branch_log(provider: MemoryProvider) -> None:
    command = await resolve_link(provider, "HEAD")
    assert command is not None
    assert command.key == "log"
    assert command.picked_via is PickedVia.TERMINAL_LINK
    assert isinstance(command.state.reference, GitBranch)
    assert command.state.reference.name == "main"
    assert command.state.counter == 2


@pytest.mark.asyncio
async def test_commit_id_opens_show(provider: MemoryProvider) -> None:
    command = await resolve_link(provider, SHA2[:7])
    assert command is not None
    assert command.key == "show"
    assert isinstance(command.state.reference, GitCommit)
    assert command.state.reference.sha == SHA2


@pytest.mark.asyncio
async def test_branch_and_tag_names_open_log(provider: MemoryProvider) -> None:
    branch = await resolve_link(provider, "feature")
    tag = await resolve_link(provider, "v1.0")

    assert branch is not None and branch.key == "log"
    assert isinstance(branch.state.reference, GitBranch)
    assert tag is not None and tag.key == "log"
    assert isinstance(tag.state.reference, GitTag)


@pytest.mark.asyncio
async def test_unknown_text_is_not_a_link(provider: MemoryProvider) -> None:
    assert await resolve_link(provider, "") is None
    assert await resolve_link(provider, "nonsense") is None
    assert await resolve_link(provider, "abcdef0") is None


@pytest.mark.asyncio
async def test_links_need_a_single_open_repository(multi_provider: MemoryProvider) -> None:
    assert await resolve_link(multi_provider, "HEAD") is None


@pytest.mark.asyncio
async def test_provider_failure_is_not_a_link() -> None:
    provider = MemoryProvider(repositories=[app_repository()], active=APP, failing={"get_branches"})
    assert await resolve_link(provider, "feature") is None
