"""Step descriptors, pick items and step results exchanged with picker hosts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Protocol, Union


class StepKind(str, Enum):
    PICK = "pick"
    INPUT = "input"


class ItemKind(str, Enum):
    VALUE = "value"
    DIRECTIVE = "directive"
    COMMAND = "command"
    GIT_COMMAND = "git-command"
    TOGGLE = "toggle"


class Directive(str, Enum):
    BACK = "back"
    CANCEL = "cancel"
    NOOP = "noop"


class ResultKind(str, Enum):
    SELECTION = "selection"
    TEXT = "text"
    BACK = "back"
    CANCEL = "cancel"


@dataclass(frozen=True)
class QuickPickItem:
    label: str
    description: str = ""
    detail: str = ""
    picked: bool = False
    always_show: bool = False
    item: Any = None
    kind: ItemKind = ItemKind.VALUE

    def matches(self, text: str, *, description: bool = False, detail: bool = False) -> bool:
        needle = text.strip().lower()
        if not needle or self.always_show:
            return True
        haystacks = [self.label]
        if description:
            haystacks.append(self.description)
        if detail:
            haystacks.append(self.detail)
        return any(needle in value.lower() for value in haystacks)


@dataclass
class QuickButton:
    """A step-level button. Toggle buttons carry mutable ``on`` state across clicks."""

    name: str
    tooltip: str
    toggle: bool = False
    on: bool = False


REVEAL_IN_VIEW = QuickButton("reveal", "Reveal in Side Bar")
SHOW_IN_VIEW = QuickButton("search", "Show in Search Commits")


class PickerControls(Protocol):
    """The live picker a step handler may mutate while the step is displayed."""

    items: list[QuickPickItem]
    placeholder: str
    busy: bool
    enabled: bool

    @property
    def active_items(self) -> list[QuickPickItem]:
        ...


ButtonHandler = Callable[[PickerControls, QuickButton], Awaitable[None]]
KeyHandler = Callable[[PickerControls, str], Awaitable[None]]
ValueHandler = Callable[[PickerControls, str], Awaitable[bool]]
InputValidator = Callable[[str], Awaitable[tuple[bool, str | None]]]


@dataclass(frozen=True)
class StepResult:
    kind: ResultKind
    items: tuple[QuickPickItem, ...] = ()
    value: str | None = None

    @classmethod
    def selection(cls, *items: QuickPickItem) -> StepResult:
        return cls(ResultKind.SELECTION, items=tuple(items))

    @classmethod
    def text(cls, value: str) -> StepResult:
        return cls(ResultKind.TEXT, value=value)

    @classmethod
    def back(cls) -> StepResult:
        return cls(ResultKind.BACK)

    @classmethod
    def cancel(cls) -> StepResult:
        return cls(ResultKind.CANCEL)

    @property
    def is_break(self) -> bool:
        return self.kind in (ResultKind.BACK, ResultKind.CANCEL)

    @property
    def first(self) -> QuickPickItem | None:
        return self.items[0] if self.items else None


@dataclass(frozen=True)
class QuickPickStep:
    title: str
    placeholder: str
    items: tuple[QuickPickItem, ...] = ()
    multiselect: bool = False
    allow_empty: bool = False
    match_on_description: bool = False
    match_on_detail: bool = False
    value: str | None = None
    buttons: tuple[QuickButton, ...] = ()
    keys: tuple[str, ...] = ()
    on_did_click_button: ButtonHandler | None = None
    on_did_press_key: KeyHandler | None = None
    on_validate_value: ValueHandler | None = None
    kind: StepKind = field(default=StepKind.PICK, init=False)

    @property
    def sole_item(self) -> QuickPickItem | None:
        """The only candidate when exactly one non-directive item is offered."""
        if len(self.items) == 1 and self.items[0].kind is not ItemKind.DIRECTIVE:
            return self.items[0]
        return None

    async def finalize(self, result: StepResult) -> StepResult | None:
        """Normalize a host result. ``None`` means the step must be presented again."""
        if result.is_break:
            return result
        if result.kind is not ResultKind.SELECTION:
            return None
        if not result.items:
            return result if self.allow_empty else None
        if not self.multiselect and len(result.items) > 1:
            return None
        first = result.items[0]
        if first.kind is ItemKind.DIRECTIVE:
            if first.item is Directive.BACK:
                return StepResult.back()
            if first.item is Directive.CANCEL:
                return StepResult.cancel()
            return None
        return result


@dataclass(frozen=True)
class QuickInputStep:
    title: str
    placeholder: str
    prompt: str = ""
    value: str | None = None
    validate: InputValidator | None = None
    buttons: tuple[QuickButton, ...] = ()
    on_did_click_button: ButtonHandler | None = None
    kind: StepKind = field(default=StepKind.INPUT, init=False)

    async def check(self, value: str) -> tuple[bool, str | None]:
        if self.validate is None:
            return True, None
        return await self.validate(value)

    async def finalize(self, result: StepResult) -> StepResult | None:
        if result.is_break:
            return result
        if result.kind is not ResultKind.TEXT or result.value is None:
            return None
        valid, _ = await self.check(result.value)
        if not valid:
            return None
        return result


QuickStep = Union[QuickPickStep, QuickInputStep]


class PickerHost(Protocol):
    async def present(self, step: QuickStep) -> StepResult:
        """Display ``step`` and return what the user did."""
