"""Reusable step factories shared by the commands."""

from __future__ import annotations

import logging
from typing import Any

from gitpick.actions import Action, ActionKind
from gitpick.errors import ProviderError
from gitpick.git.models import (
    GitBranch,
    GitCommit,
    GitFile,
    GitLog,
    GitRemote,
    GitStash,
    GitStashCommit,
    GitTag,
    Repository,
    is_branch,
    is_stash,
    is_tag,
    reference_to_string,
)
from gitpick.git.remotes import RemoteResource, RemoteResourceType
from gitpick.validation import ref_name_issues
from gitpick.wizard.items import (
    CommandItem,
    GitCommandItem,
    branch_item,
    commit_file_item,
    commit_files_item,
    commit_item,
    directive_item,
    repository_item,
    tag_item,
)
from gitpick.wizard.state import Context, StepState
from gitpick.wizard.types import (
    REVEAL_IN_VIEW,
    SHOW_IN_VIEW,
    Directive,
    PickerControls,
    QuickButton,
    QuickInputStep,
    QuickPickItem,
    QuickPickStep,
)

logger = logging.getLogger(__name__)

REVEAL_KEYS = ("right", "alt+right", "ctrl+right")
LOAD_MORE = QuickButton("more", "Load more commits")


def _no_candidates(*, repository_step: bool = False) -> tuple[QuickPickItem, ...]:
    if repository_step:
        return (directive_item(Directive.CANCEL),)
    return (directive_item(Directive.BACK, True), directive_item(Directive.CANCEL))


def _active(controls: PickerControls) -> Any:
    active = controls.active_items
    return active[0].item if active else None


async def resolve_repository(value: Repository | str | None, context: Context) -> Repository | None:
    """Resolve a repository answer against the current context; stale answers resolve to ``None``."""
    if value is None:
        return None
    if isinstance(value, Repository):
        return value if value in context.repos else None
    try:
        repo = await context.provider.get_repository(value)
    except ProviderError as exc:
        logger.debug("Unable to resolve repository %s: %s", value, exc)
        return None
    return repo if repo is not None and repo in context.repos else None


async def pick_repository_step(
    state: StepState,
    context: Context,
    *,
    placeholder: str = "Choose a repository",
    picked: Repository | None = None,
) -> QuickPickStep:
    if picked is None:
        try:
            picked = await context.provider.get_active_repository()
        except ProviderError:
            picked = None

    items: list[QuickPickItem] = []
    for repo in context.repos:
        try:
            branch = await context.provider.get_branch(repo.path)
        except ProviderError:
            branch = None
        items.append(repository_item(repo, picked=picked is not None and repo.path == picked.path, branch=branch))

    async def on_click(controls: PickerControls, button: QuickButton) -> None:
        if button is REVEAL_IN_VIEW:
            await _reveal_repository(controls)

    async def on_key(controls: PickerControls, key: str) -> None:
        await _reveal_repository(controls)

    async def _reveal_repository(controls: PickerControls) -> None:
        repo = _active(controls)
        if isinstance(repo, Repository):
            await context.services.views.reveal_repository(repo.path)

    return QuickPickStep(
        title=context.title,
        placeholder=placeholder if context.repos else "No repositories found",
        items=tuple(items) if items else _no_candidates(repository_step=True),
        buttons=(REVEAL_IN_VIEW,) if items else (),
        keys=REVEAL_KEYS if items else (),
        on_did_click_button=on_click,
        on_did_press_key=on_key,
    )


async def branch_and_tag_items(
    context: Context,
    repo: Repository,
    *,
    include_branches: bool = True,
    include_tags: bool = True,
    picked: str | None = None,
    filter_branches: Any = None,
    filter_tags: Any = None,
) -> list[QuickPickItem]:
    branches: list[GitBranch] = []
    tags: list[GitTag] = []
    try:
        if include_branches:
            branches = await context.provider.get_branches(repo.path)
        if include_tags:
            tags = await context.provider.get_tags(repo.path)
    except ProviderError as exc:
        logger.debug("Unable to list references in %s: %s", repo.path, exc)
        return []
    if filter_branches is not None:
        branches = [branch for branch in branches if filter_branches(branch)]
    if filter_tags is not None:
        tags = [tag for tag in tags if filter_tags(tag)]
    items: list[QuickPickItem] = [branch_item(b, picked=b.name == picked) for b in branches]
    items.extend(tag_item(t, picked=t.name == picked) for t in tags)
    return items


def validate_reference_fn(context: Context, repo: Repository, *, compact: bool = True):
    """Accept a typed ``#ref`` (or a bare revision no item matches) in place of the listed items."""

    async def validate(controls: PickerControls, value: str) -> bool:
        in_ref_mode = value.startswith("#")
        ref = value[1:].strip() if in_ref_mode else value.strip()
        if not ref:
            return False
        if not in_ref_mode and any(item.matches(ref, description=True) for item in controls.items if not item.always_show):
            return False

        commit: GitCommit | None = None
        try:
            if await context.provider.validate_reference(repo.path, ref):
                commit = await context.provider.get_commit(repo.path, ref)
        except ProviderError as exc:
            logger.debug("Reference %s did not resolve: %s", ref, exc)

        if commit is None:
            if not in_ref_mode:
                return False
            controls.items = [
                directive_item(
                    Directive.BACK,
                    True,
                    label="Enter a reference or commit id",
                    description=f"{ref} is not a valid reference",
                )
            ]
            return True
        controls.items = [commit_item(commit, picked=True, compact=compact)]
        return True

    return validate


async def pick_branch_or_tag_step(
    state: StepState,
    context: Context,
    repo: Repository,
    *,
    placeholder: str,
    picked: str | None = None,
    value: str | None = None,
    filter_branches: Any = None,
    filter_tags: Any = None,
    title: str | None = None,
) -> QuickPickStep:
    show_tags_button = QuickButton("tags", "Show tags", toggle=True, on=context.show_tags)

    def _placeholder() -> str:
        what = "branches or tags" if context.show_tags else "branches"
        return f"No {what} found in {repo.formatted_name}"

    items = await branch_and_tag_items(
        context,
        repo,
        include_tags=context.show_tags,
        picked=picked,
        filter_branches=filter_branches,
        filter_tags=filter_tags,
    )

    async def on_click(controls: PickerControls, button: QuickButton) -> None:
        if button is REVEAL_IN_VIEW:
            await _reveal_ref(controls)
            return
        if button.name != show_tags_button.name:
            return
        controls.busy = True
        controls.enabled = False
        try:
            context.show_tags = not context.show_tags
            button.on = context.show_tags
            refreshed = await branch_and_tag_items(
                context,
                repo,
                include_tags=context.show_tags,
                picked=picked,
                filter_branches=filter_branches,
                filter_tags=filter_tags,
            )
            controls.placeholder = placeholder if refreshed else _placeholder()
            controls.items = refreshed or list(_no_candidates())
        finally:
            controls.busy = False
            controls.enabled = True

    async def on_key(controls: PickerControls, key: str) -> None:
        await _reveal_ref(controls)

    async def _reveal_ref(controls: PickerControls) -> None:
        ref = _active(controls)
        if is_branch(ref):
            await context.services.views.reveal_branch(ref)
        elif is_tag(ref):
            await context.services.views.reveal_tag(ref)
        elif isinstance(ref, GitCommit):
            await context.services.views.reveal_commit(ref)

    return QuickPickStep(
        title=title or context.title,
        placeholder=placeholder if items else _placeholder(),
        items=tuple(items) if items else _no_candidates(),
        match_on_description=True,
        value=value,
        buttons=(REVEAL_IN_VIEW, show_tags_button),
        keys=REVEAL_KEYS,
        on_did_click_button=on_click,
        on_did_press_key=on_key,
        on_validate_value=validate_reference_fn(context, repo),
    )


async def pick_commit_step(
    state: StepState,
    context: Context,
    repo: Repository,
    *,
    log: GitLog | None,
    placeholder: str,
    picked: str | None = None,
    empty_placeholder: str | None = None,
    title: str | None = None,
) -> QuickPickStep:
    """Pick from a commit log. An empty (but present) log lets the user type a reference."""

    def _items(current: GitLog | None) -> tuple[QuickPickItem, ...]:
        if current is None:
            return _no_candidates()
        return tuple(commit_item(c, picked=c.ref == picked) for c in current.commits.values())

    holder = {"log": log}

    async def on_click(controls: PickerControls, button: QuickButton) -> None:
        commit = _active(controls)
        if button is REVEAL_IN_VIEW and isinstance(commit, GitCommit):
            await context.services.views.reveal_commit(commit)
        elif button is SHOW_IN_VIEW and isinstance(commit, GitCommit):
            await context.services.views.search_commits(repo.path, commit.sha, commit.short_sha)
        elif button is LOAD_MORE and holder["log"] is not None:
            current: GitLog = holder["log"]
            controls.busy = True
            try:
                limit = (current.limit or current.count) * 2
                more = await context.provider.get_log(repo.path, ref=current.ref, limit=limit)
            except ProviderError as exc:
                logger.debug("Unable to load more commits: %s", exc)
                more = None
            finally:
                controls.busy = False
            if more is not None:
                holder["log"] = more
                controls.items = list(_items(more))

    async def on_key(controls: PickerControls, key: str) -> None:
        commit = _active(controls)
        if isinstance(commit, GitCommit):
            await context.services.views.reveal_commit(commit)

    buttons: tuple[QuickButton, ...] = (REVEAL_IN_VIEW, SHOW_IN_VIEW)
    if log is not None and log.has_more:
        buttons = (*buttons, LOAD_MORE)
    if log is None:
        step_placeholder = empty_placeholder or f"No commits found in {repo.formatted_name}"
    else:
        step_placeholder = placeholder
    return QuickPickStep(
        title=title or context.title,
        placeholder=step_placeholder,
        items=_items(log),
        match_on_description=True,
        match_on_detail=True,
        value=picked if log is not None and log.count == 0 else None,
        buttons=buttons,
        keys=REVEAL_KEYS,
        on_did_click_button=on_click,
        on_did_press_key=on_key,
        on_validate_value=validate_reference_fn(context, repo, compact=False),
    )


async def pick_stash_step(
    state: StepState,
    context: Context,
    repo: Repository,
    *,
    stash: GitStash | None,
    placeholder: str,
    picked: str | None = None,
    title: str | None = None,
) -> QuickPickStep:
    items: tuple[QuickPickItem, ...]
    if stash is None or not stash.commits:
        items = _no_candidates()
        placeholder = f"No stashes found in {repo.formatted_name}"
    else:
        items = tuple(commit_item(c, picked=c.ref == picked) for c in stash.commits.values())

    async def on_click(controls: PickerControls, button: QuickButton) -> None:
        await _reveal_stash(controls)

    async def on_key(controls: PickerControls, key: str) -> None:
        await _reveal_stash(controls)

    async def _reveal_stash(controls: PickerControls) -> None:
        entry = _active(controls)
        if isinstance(entry, GitStashCommit):
            await context.services.views.reveal_stash(entry)

    return QuickPickStep(
        title=title or context.title,
        placeholder=placeholder,
        items=items,
        match_on_description=True,
        buttons=(REVEAL_IN_VIEW,) if stash is not None else (),
        keys=REVEAL_KEYS,
        on_did_click_button=on_click,
        on_did_press_key=on_key,
    )


def _name_validator(context: Context, repo: Repository, kind: str):
    async def validate(value: str) -> tuple[bool, str | None]:
        name = value.strip()
        issues = ref_name_issues(name)
        if issues:
            return False, issues[0].message
        try:
            existing = (
                await context.provider.get_branches(repo.path)
                if kind == "branch"
                else await context.provider.get_tags(repo.path)
            )
        except ProviderError:
            existing = []
        if any(ref.name == name for ref in existing):
            return False, f"A {kind} named '{name}' already exists."
        return True, None

    return validate


def input_branch_name_step(
    state: StepState,
    context: Context,
    repo: Repository,
    *,
    placeholder: str = "Branch name",
    title: str | None = None,
    value: str | None = None,
) -> QuickInputStep:
    return QuickInputStep(
        title=title or context.title,
        placeholder=placeholder,
        prompt="Enter a branch name",
        value=value,
        validate=_name_validator(context, repo, "branch"),
    )


def input_tag_name_step(
    state: StepState,
    context: Context,
    repo: Repository,
    *,
    placeholder: str = "Tag name",
    title: str | None = None,
    value: str | None = None,
) -> QuickInputStep:
    return QuickInputStep(
        title=title or context.title,
        placeholder=placeholder,
        prompt="Enter a tag name",
        value=value,
        validate=_name_validator(context, repo, "tag"),
    )


def confirm_step(
    title: str,
    confirmations: list[QuickPickItem],
    *,
    placeholder: str = "Confirm",
    cancel: QuickPickItem | None = None,
) -> QuickPickStep:
    return QuickPickStep(
        title=title,
        placeholder=placeholder,
        items=(*confirmations, cancel or directive_item(Directive.CANCEL)),
    )


def _remote_items(commit: GitCommit, remotes: list[GitRemote], resource: RemoteResource) -> list[QuickPickItem]:
    remote = next((r for r in remotes if r.provider is not None), None)
    if remote is None or remote.provider is None:
        return []
    url = remote.provider.url(resource)
    noun = "File" if resource.type in (RemoteResourceType.FILE, RemoteResourceType.REVISION) else "Commit"
    return [
        CommandItem(
            label=f"Open {noun} on {remote.provider.name}",
            description=remote.name,
            action=Action(ActionKind.OPEN_REMOTE_URL, commit.repo_path, ref=commit.sha, text=url),
        ),
        CommandItem(
            label=f"Copy {noun} Url",
            description=remote.name,
            action=Action(ActionKind.COPY_REMOTE_URL, commit.repo_path, ref=commit.sha, text=url),
        ),
    ]


async def _remotes(context: Context, repo_path: str) -> list[GitRemote]:
    try:
        return await context.provider.get_remotes(repo_path)
    except ProviderError as exc:
        logger.debug("Unable to list remotes: %s", exc)
        return []


def _execute_on_key(context: Context):
    async def on_key(controls: PickerControls, key: str) -> None:
        active = controls.active_items
        if not active:
            return
        item = active[0]
        if isinstance(item, CommandItem) and item.action is not None and not item.suppress_key_press:
            result = await context.services.executor.execute(item.action)
            await context.services.views.show_message(result.message)

    return on_key


async def show_commit_or_stash_step(
    state: StepState,
    context: Context,
    repo: Repository,
    commit: GitCommit,
) -> QuickPickStep:
    items: list[QuickPickItem] = [commit_files_item(commit)]
    seed = {"repo": repo, "reference": commit}
    if is_stash(commit):
        items.append(
            GitCommandItem(
                label="Apply Stash...",
                description="applies the stash to the working tree",
                command_key="stash",
                seed={**seed, "subcommand": "apply"},
            )
        )
        items.append(
            GitCommandItem(
                label="Delete Stash...",
                description="drops the stash",
                command_key="stash",
                seed={**seed, "subcommand": "drop"},
            )
        )
    else:
        items.append(
            GitCommandItem(label="Switch to Commit...", description="detaches HEAD", command_key="switch", seed=seed)
        )
        items.append(GitCommandItem(label="Create Branch at Commit...", command_key="branch", seed=seed))
        items.append(GitCommandItem(label="Create Tag at Commit...", command_key="tag", seed=seed))

    items.extend(
        [
            CommandItem(
                label="Reveal Commit in Side Bar",
                action=Action(ActionKind.REVEAL_COMMIT, repo.path, ref=commit.sha, target=commit),
            ),
            CommandItem(
                label="Search for Commit",
                action=Action(ActionKind.SEARCH_COMMITS, repo.path, ref=commit.sha, name=commit.short_sha),
            ),
            CommandItem(
                label="Open All Changes",
                action=Action(ActionKind.OPEN_ALL_CHANGES, repo.path, ref=commit.sha, ref2=commit.previous_sha),
            ),
            CommandItem(
                label="Open All Changes with Working Tree",
                action=Action(ActionKind.OPEN_ALL_CHANGES_WITH_WORKING, repo.path, ref=commit.sha),
            ),
            CommandItem(
                label="Copy Commit ID",
                description=commit.short_sha,
                action=Action(ActionKind.COPY_SHA, repo.path, ref=commit.sha, text=commit.sha),
            ),
            CommandItem(
                label="Copy Message",
                action=Action(ActionKind.COPY_MESSAGE, repo.path, ref=commit.sha, text=commit.message),
            ),
        ]
    )
    if not is_stash(commit):
        remotes = await _remotes(context, repo.path)
        items.extend(_remote_items(commit, remotes, RemoteResource(RemoteResourceType.COMMIT, sha=commit.sha)))

    return QuickPickStep(
        title=context.title,
        placeholder=f"{reference_to_string(commit, label=False)}  {commit.author}: {commit.summary}".strip(),
        items=tuple(items),
        keys=REVEAL_KEYS,
        on_did_press_key=_execute_on_key(context),
    )


async def show_commit_or_stash_files_step(
    state: StepState,
    context: Context,
    commit: GitCommit,
    *,
    picked: str | None = None,
) -> QuickPickStep:
    items: list[QuickPickItem] = [commit_files_item(commit, picked=picked is None)]
    items.extend(commit_file_item(commit, f, picked=f.file_name == picked) for f in commit.files)

    async def on_key(controls: PickerControls, key: str) -> None:
        active = _active(controls)
        if isinstance(active, GitCommit) and active.file is not None:
            action = Action(
                ActionKind.OPEN_CHANGES,
                active.repo_path,
                ref=active.sha,
                ref2=active.previous_sha,
                file_name=active.file.file_name,
            )
            result = await context.services.executor.execute(action)
            await context.services.views.show_message(result.message)

    return QuickPickStep(
        title=context.title,
        placeholder=f"{reference_to_string(commit, label=False)}  {commit.summary}".strip(),
        items=tuple(items),
        match_on_description=True,
        keys=REVEAL_KEYS,
        on_did_press_key=on_key,
    )


async def show_commit_or_stash_file_step(
    state: StepState,
    context: Context,
    commit: GitCommit,
    file: GitFile,
) -> QuickPickStep:
    name = file.file_name
    items: list[QuickPickItem] = [
        commit_files_item(commit, file=file),
        CommandItem(
            label="Open Changes",
            action=Action(ActionKind.OPEN_CHANGES, commit.repo_path, ref=commit.sha, ref2=commit.previous_sha, file_name=name),
        ),
        CommandItem(
            label="Open Changes with Working File",
            action=Action(ActionKind.OPEN_CHANGES_WITH_WORKING, commit.repo_path, ref=commit.sha, file_name=name),
        ),
    ]
    if file.status != "D":
        items.append(
            CommandItem(label="Open File", action=Action(ActionKind.OPEN_FILE, commit.repo_path, file_name=name))
        )
        items.append(
            CommandItem(
                label="Open File at Revision",
                action=Action(ActionKind.OPEN_REVISION, commit.repo_path, ref=commit.sha, file_name=name),
            )
        )
        items.append(
            CommandItem(
                label="Restore",
                description="aka checkout",
                action=Action(ActionKind.RESTORE_FILE, commit.repo_path, ref=commit.sha, file_name=name),
                suppress_key_press=True,
            )
        )
    items.extend(
        [
            CommandItem(
                label="Reveal Commit in Side Bar",
                action=Action(ActionKind.REVEAL_COMMIT, commit.repo_path, ref=commit.sha, target=commit),
            ),
            CommandItem(
                label="Copy Commit ID",
                description=commit.short_sha,
                action=Action(ActionKind.COPY_SHA, commit.repo_path, ref=commit.sha, text=commit.sha),
            ),
            CommandItem(
                label="Copy Message",
                action=Action(ActionKind.COPY_MESSAGE, commit.repo_path, ref=commit.sha, text=commit.message),
            ),
        ]
    )
    if not is_stash(commit):
        remotes = await _remotes(context, commit.repo_path)
        resource = RemoteResource(RemoteResourceType.REVISION, sha=commit.sha, file_name=name)
        items.extend(_remote_items(commit, remotes, resource))

    return QuickPickStep(
        title=f"{context.title}  •  {name}",
        placeholder=f"{name}  •  {reference_to_string(commit, label=False)}",
        items=tuple(items),
        keys=REVEAL_KEYS,
        on_did_press_key=_execute_on_key(context),
    )
