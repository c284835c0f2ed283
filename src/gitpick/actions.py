"""Terminal actions chosen at the end of a wizard and the executor that performs them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Protocol

import pyperclip
import typer

from gitpick.errors import ProviderError
from gitpick.git.cli import run_git
from gitpick.git.provider import RepositoryProvider
from gitpick.wizard.services import WorkbenchViews

logger = logging.getLogger(__name__)

EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"


class ActionKind(str, Enum):
    OPEN_ALL_CHANGES = "open-all-changes"
    OPEN_ALL_CHANGES_WITH_WORKING = "open-all-changes-with-working"
    OPEN_CHANGES = "open-changes"
    OPEN_CHANGES_WITH_WORKING = "open-changes-with-working"
    OPEN_FILE = "open-file"
    OPEN_REVISION = "open-revision"
    RESTORE_FILE = "restore-file"
    COPY_SHA = "copy-sha"
    COPY_MESSAGE = "copy-message"
    COPY_REMOTE_URL = "copy-remote-url"
    OPEN_REMOTE_URL = "open-remote-url"
    REVEAL_COMMIT = "reveal-commit"
    SEARCH_COMMITS = "search-commits"
    CHECKOUT = "checkout"
    STASH_APPLY = "stash-apply"
    STASH_DROP = "stash-drop"
    CREATE_BRANCH = "create-branch"
    CREATE_TAG = "create-tag"


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    repo_path: str
    ref: str | None = None
    ref2: str | None = None
    file_name: str | None = None
    name: str | None = None
    text: str | None = None
    flags: tuple[str, ...] = ()
    target: Any = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "repo_path": self.repo_path,
            "ref": self.ref,
            "ref2": self.ref2,
            "file_name": self.file_name,
            "name": self.name,
            "flags": list(self.flags),
        }


@dataclass(frozen=True)
class ActionResult:
    ok: bool
    message: str
    output: str | None = None
    syntax: str = "diff"


class ActionExecutor(Protocol):
    async def execute(self, action: Action) -> ActionResult:
        """Perform ``action``. Failures are returned, never raised."""


Handler = Callable[["GitActionExecutor", Action], Awaitable[ActionResult]]


class GitActionExecutor:
    def __init__(
        self,
        provider: RepositoryProvider,
        views: WorkbenchViews,
        *,
        launch: Callable[[str], Any] = typer.launch,
        copy: Callable[[str], None] = pyperclip.copy,
    ) -> None:
        self._provider = provider
        self._views = views
        self._launch = launch
        self._copy = copy

    async def execute(self, action: Action) -> ActionResult:
        handler = _HANDLERS.get(action.kind)
        if handler is None:
            return ActionResult(False, f"Unsupported action: {action.kind.value}")
        logger.debug("Executing %s", action.to_dict())
        try:
            return await handler(self, action)
        except ProviderError as exc:
            logger.debug("Action %s failed: %s", action.kind.value, exc)
            return ActionResult(False, str(exc))
        except pyperclip.PyperclipException as exc:
            return ActionResult(False, f"Clipboard unavailable: {exc}")

    async def _diff(self, action: Action) -> ActionResult:
        if action.kind in _WORKING_TREE_KINDS:
            output = await self._provider.get_diff(action.repo_path, action.ref or "HEAD", None, action.file_name)
        else:
            base = action.ref2 or EMPTY_TREE_SHA
            output = await self._provider.get_diff(action.repo_path, base, action.ref, action.file_name)
        label = action.file_name or "all files"
        return ActionResult(True, f"Changes in {label}", output=output or "(no changes)")

    async def _open_file(self, action: Action) -> ActionResult:
        path = Path(action.repo_path) / (action.file_name or "")
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            return ActionResult(False, f"Unable to open {action.file_name}: {exc}")
        return ActionResult(True, f"{action.file_name}", output=content, syntax=_syntax_for(action.file_name))

    async def _open_revision(self, action: Action) -> ActionResult:
        content = await self._provider.get_file_content(action.repo_path, action.ref or "HEAD", action.file_name or "")
        return ActionResult(
            True,
            f"{action.file_name} @ {(action.ref or 'HEAD')[:7]}",
            output=content,
            syntax=_syntax_for(action.file_name),
        )

    async def _restore_file(self, action: Action) -> ActionResult:
        await run_git("checkout", action.ref or "HEAD", "--", action.file_name or "", cwd=action.repo_path)
        return ActionResult(True, f"Restored {action.file_name} from {(action.ref or 'HEAD')[:7]}")

    async def _copy_text(self, action: Action) -> ActionResult:
        text = action.text or action.ref or ""
        self._copy(text)
        return ActionResult(True, f"Copied {_COPIED[action.kind]} to the clipboard")

    async def _open_remote(self, action: Action) -> ActionResult:
        if not action.text:
            return ActionResult(False, "No remote url available")
        self._launch(action.text)
        return ActionResult(True, f"Opened {action.text}")

    async def _reveal(self, action: Action) -> ActionResult:
        await self._views.reveal_commit(action.target)
        return ActionResult(True, f"Revealed {(action.ref or '')[:7]}")

    async def _search(self, action: Action) -> ActionResult:
        await self._views.search_commits(action.repo_path, action.ref or "", action.name or "")
        return ActionResult(True, f"Searching for {action.name or action.ref}")

    async def _checkout(self, action: Action) -> ActionResult:
        if "--track" in action.flags and action.name:
            await run_git("switch", "--create", action.name, "--track", action.ref or "", cwd=action.repo_path)
            return ActionResult(True, f"Switched to new branch {action.name}")
        args = ["switch", action.ref or ""] if "--detach" not in action.flags else ["switch", "--detach", action.ref or ""]
        await run_git(*args, cwd=action.repo_path)
        return ActionResult(True, f"Switched to {action.ref}")

    async def _stash_apply(self, action: Action) -> ActionResult:
        verb = "pop" if "--pop" in action.flags else "apply"
        await run_git("stash", verb, action.ref or "", cwd=action.repo_path)
        return ActionResult(True, f"Stash {action.ref} {'popped' if verb == 'pop' else 'applied'}")

    async def _stash_drop(self, action: Action) -> ActionResult:
        await run_git("stash", "drop", action.ref or "", cwd=action.repo_path)
        return ActionResult(True, f"Dropped {action.ref}")

    async def _create_branch(self, action: Action) -> ActionResult:
        if "--switch" in action.flags:
            await run_git("switch", "--create", action.name or "", action.ref or "HEAD", cwd=action.repo_path)
            return ActionResult(True, f"Created and switched to branch {action.name}")
        await run_git("branch", action.name or "", action.ref or "HEAD", cwd=action.repo_path)
        return ActionResult(True, f"Created branch {action.name}")

    async def _create_tag(self, action: Action) -> ActionResult:
        args = ["tag"]
        if action.text:
            args.extend(["--annotate", "--message", action.text])
        args.extend([action.name or "", action.ref or "HEAD"])
        await run_git(*args, cwd=action.repo_path)
        return ActionResult(True, f"Created tag {action.name}")


_WORKING_TREE_KINDS = {ActionKind.OPEN_ALL_CHANGES_WITH_WORKING, ActionKind.OPEN_CHANGES_WITH_WORKING}

_COPIED = {
    ActionKind.COPY_SHA: "commit id",
    ActionKind.COPY_MESSAGE: "message",
    ActionKind.COPY_REMOTE_URL: "url",
}

_HANDLERS: dict[ActionKind, Handler] = {
    ActionKind.OPEN_ALL_CHANGES: GitActionExecutor._diff,
    ActionKind.OPEN_ALL_CHANGES_WITH_WORKING: GitActionExecutor._diff,
    ActionKind.OPEN_CHANGES: GitActionExecutor._diff,
    ActionKind.OPEN_CHANGES_WITH_WORKING: GitActionExecutor._diff,
    ActionKind.OPEN_FILE: GitActionExecutor._open_file,
    ActionKind.OPEN_REVISION: GitActionExecutor._open_revision,
    ActionKind.RESTORE_FILE: GitActionExecutor._restore_file,
    ActionKind.COPY_SHA: GitActionExecutor._copy_text,
    ActionKind.COPY_MESSAGE: GitActionExecutor._copy_text,
    ActionKind.COPY_REMOTE_URL: GitActionExecutor._copy_text,
    ActionKind.OPEN_REMOTE_URL: GitActionExecutor._open_remote,
    ActionKind.REVEAL_COMMIT: GitActionExecutor._reveal,
    ActionKind.SEARCH_COMMITS: GitActionExecutor._search,
    ActionKind.CHECKOUT: GitActionExecutor._checkout,
    ActionKind.STASH_APPLY: GitActionExecutor._stash_apply,
    ActionKind.STASH_DROP: GitActionExecutor._stash_drop,
    ActionKind.CREATE_BRANCH: GitActionExecutor._create_branch,
    ActionKind.CREATE_TAG: GitActionExecutor._create_tag,
}


def _syntax_for(file_name: str | None) -> str:
    suffix = Path(file_name or "").suffix.lstrip(".")
    return suffix or "text"
