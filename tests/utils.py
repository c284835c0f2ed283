from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Union

from gitpick.actions import Action, ActionResult
from gitpick.git.memory import MemoryRepository
from gitpick.git.models import (
    GitBranch,
    GitCommit,
    GitContributor,
    GitFile,
    GitRemote,
    GitStashCommit,
    GitTag,
    Repository,
)
from gitpick.git.remotes import get_remote_provider
from gitpick.wizard.types import QuickPickItem, QuickPickStep, QuickStep, StepResult

APP = "/work/app"
LIB = "/work/lib"

SHA1 = "1a" * 20
SHA2 = "2b" * 20
SHA3 = "3c" * 20
STASH_SHA = "4d" * 20
FEATURE_SHA = "5e" * 20
LIB_SHA = "6f" * 20


def _date(day: int) -> datetime:
    return datetime(2024, 3, day, 12, 0, tzinfo=timezone.utc)


def app_repository() -> MemoryRepository:
    repo = Repository(APP)
    c1 = GitCommit(
        APP,
        SHA1,
        author="Ada",
        email="ada@example.com",
        date=_date(1),
        message="Initial commit",
        files=(GitFile("README.md", "A"),),
    )
    c2 = GitCommit(
        APP,
        SHA2,
        author="Ada",
        email="ada@example.com",
        date=_date(2),
        message="Add parser\n\nHandles the common cases.",
        parents=(SHA1,),
        files=(GitFile("src/parser.py", "M"), GitFile("tests/test_parser.py", "A")),
    )
    c3 = GitCommit(
        APP,
        SHA3,
        author="Grace",
        email="grace@example.com",
        date=_date(3),
        message="Fix parser edge case",
        parents=(SHA2,),
        files=(GitFile("src/parser.py", "M"),),
    )
    feature = GitCommit(
        APP,
        FEATURE_SHA,
        author="Grace",
        email="grace@example.com",
        date=_date(4),
        message="Start feature",
        parents=(SHA3,),
        files=(GitFile("src/feature.py", "A"),),
    )
    stash = GitStashCommit(
        APP,
        STASH_SHA,
        author="Ada",
        email="ada@example.com",
        date=_date(5),
        message="WIP on main: tweak",
        parents=(SHA3,),
        files=(GitFile("src/parser.py", "M"),),
        stash_name="stash@{0}",
        number=0,
    )
    url = "git@github.com:acme/app.git"
    return MemoryRepository(
        repository=repo,
        branches=[
            GitBranch(APP, "main", SHA3, current=True, upstream="origin/main"),
            GitBranch(APP, "feature", FEATURE_SHA),
            GitBranch(APP, "origin/main", SHA3, remote=True),
        ],
        tags=[GitTag(APP, "v1.0", SHA2, message="First release")],
        logs={
            "main": [c3, c2, c1],
            "feature": [feature, c3, c2, c1],
            "origin/main": [c3, c2, c1],
            "v1.0": [c2, c1],
        },
        stashes=[stash],
        remotes=[GitRemote(APP, "origin", url, provider=get_remote_provider(url))],
        contributors=[
            GitContributor(APP, "Ada", "ada@example.com", count=3, current=True),
            GitContributor(APP, "Grace", "grace@example.com", count=2),
        ],
        files={(SHA2, "src/parser.py"): "def parse(text):\n    return text.split()\n"},
    )


def lib_repository() -> MemoryRepository:
    """A repository with a single branch, no tags and a single commit."""
    commit = GitCommit(LIB, LIB_SHA, author="Ada", date=_date(6), message="Create lib", files=(GitFile("lib.py", "A"),))
    return MemoryRepository(
        repository=Repository(LIB),
        branches=[GitBranch(LIB, "main", LIB_SHA, current=True)],
        logs={"main": [commit]},
    )


Response = Union[StepResult, Callable[[QuickStep], StepResult]]


def find_item(step: QuickStep, label: str) -> QuickPickItem:
    assert isinstance(step, QuickPickStep), f"expected a pick step, got {step!r}"
    for item in step.items:
        if item.label == label:
            return item
    for item in step.items:
        if item.label.startswith(label + " "):
            return item
    labels = [item.label for item in step.items]
    raise AssertionError(f"No item labelled {label!r} in {labels}")


def choose(*labels: str) -> Callable[[QuickStep], StepResult]:
    def respond(step: QuickStep) -> StepResult:
        return StepResult.selection(*(find_item(step, label) for label in labels))

    return respond


def text(value: str) -> StepResult:
    return StepResult.text(value)


class ScriptedPickerHost:
    """Answers each presented step with the next scripted response."""

    def __init__(self, *responses: Response) -> None:
        self._responses = list(responses)
        self.presented: list[QuickStep] = []

    async def present(self, step: QuickStep) -> StepResult:
        self.presented.append(step)
        if not self._responses:
            raise AssertionError(f"Unexpected step: {step.title} / {step.placeholder}")
        response = self._responses.pop(0)
        return response(step) if callable(response) else response

    @property
    def exhausted(self) -> bool:
        return not self._responses


class RecordingExecutor:
    def __init__(self) -> None:
        self.actions: list[Action] = []

    async def execute(self, action: Action) -> ActionResult:
        self.actions.append(action)
        return ActionResult(True, f"{action.kind.value} done")


class FakeControls:
    def __init__(self, items: list[QuickPickItem] | tuple[QuickPickItem, ...], active: int = 0) -> None:
        self.items = list(items)
        self.placeholder = ""
        self.busy = False
        self.enabled = True
        self.busy_seen = False
        self._active = active

    def __setattr__(self, name: str, value: object) -> None:
        if name == "busy" and value:
            object.__setattr__(self, "busy_seen", True)
        object.__setattr__(self, name, value)

    @property
    def active_items(self) -> list[QuickPickItem]:
        return self.items[self._active : self._active + 1]
