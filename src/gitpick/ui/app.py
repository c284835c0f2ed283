"""Textual TUI host for gitpick."""

from __future__ import annotations

import logging

from textual.app import App

from gitpick.git.models import GitBranch, GitCommit, GitStashCommit, GitTag
from gitpick.ui.screens import InputScreen, PickScreen
from gitpick.wizard.command import QuickCommand
from gitpick.wizard.engine import RunOutcome, run_wizard
from gitpick.wizard.services import Services
from gitpick.wizard.types import QuickStep, StepKind, StepResult

logger = logging.getLogger(__name__)


class NotifyViews:
    """Surfaces reveal and search requests as toast notifications once bound to an app."""

    def __init__(self, app: App | None = None) -> None:
        self.app = app

    def _notify(self, message: str, title: str = "") -> None:
        if self.app is None:
            logger.info("%s %s", title, message)
            return
        self.app.notify(message, title=title)

    async def reveal_repository(self, repo_path: str) -> None:
        self._notify(repo_path, "Repository")

    async def reveal_branch(self, branch: GitBranch) -> None:
        self._notify(f"{branch.name} at {branch.sha[:7]}", "Branch")

    async def reveal_tag(self, tag: GitTag) -> None:
        self._notify(f"{tag.name} at {tag.sha[:7]}", "Tag")

    async def reveal_commit(self, commit: GitCommit) -> None:
        self._notify(f"{commit.short_sha} {commit.summary}", "Commit")

    async def reveal_stash(self, stash: GitStashCommit) -> None:
        self._notify(f"{stash.stash_name} {stash.summary}", "Stash")

    async def search_commits(self, repo_path: str, pattern: str, label: str) -> None:
        self._notify(f"Search {label or pattern}", "Search")

    async def show_message(self, message: str) -> None:
        self._notify(message)


class TextualPickerHost(App[RunOutcome]):
    CSS_PATH = "styles.tcss"
    BINDINGS = [("ctrl+q", "quit", "Quit")]

    def __init__(self, command: QuickCommand, services: Services) -> None:
        super().__init__()
        self.command = command
        self.services = services
        if isinstance(services.views, NotifyViews):
            services.views.app = self
        self.title = command.title

    def on_mount(self) -> None:
        self.run_worker(self._drive(), exclusive=True)

    async def _drive(self) -> None:
        outcome = await run_wizard(self.command, self, self.services)
        self.exit(outcome)

    async def present(self, step: QuickStep) -> StepResult:
        if step.kind is StepKind.PICK:
            screen = PickScreen(step)
        else:
            screen = InputScreen(step)
        return await self.push_screen_wait(screen)


def run_tui(command: QuickCommand, services: Services) -> RunOutcome | None:
    """Run ``command`` full-screen. Returns None when the user quits the app outright."""
    app = TextualPickerHost(command, services)
    return app.run()
