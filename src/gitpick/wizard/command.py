"""Command base class, plans and the step counter algebra."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from enum import Enum
import logging
from typing import Any, ClassVar, Generic, TypeVar, Union

from gitpick.actions import Action
from gitpick.wizard.state import Context, StepState
from gitpick.wizard.services import Services
from gitpick.wizard.types import QuickStep, StepResult

logger = logging.getLogger(__name__)

S = TypeVar("S", bound=StepState)
C = TypeVar("C", bound=Context)


class PickedVia(str, Enum):
    MENU = "menu"
    SHORTCUT = "shortcut"
    TERMINAL_LINK = "terminal-link"
    CLI = "cli"


@dataclass(frozen=True)
class Prompt:
    ordinal: int
    step: QuickStep
    skippable: bool = False


@dataclass(frozen=True)
class Delegate:
    command: QuickCommand


@dataclass(frozen=True)
class Execute:
    action: Action


@dataclass(frozen=True)
class Finish:
    pass


Plan = Union[Prompt, Delegate, Execute, Finish]


class QuickCommand(ABC, Generic[S, C]):
    """A wizard: an ordered list of decisions over a state of type ``S``.

    Subclasses implement ``plan`` (what to do next given the answers so far) and
    ``integrate`` (store an answer). ``plan`` must be idempotent: calling it twice
    without an intervening answer yields the same prompt.
    """

    key: ClassVar[str] = ""
    label: ClassVar[str] = ""
    title: ClassVar[str] = ""
    description: ClassVar[str] = ""
    can_confirm: ClassVar[bool] = False
    state_type: ClassVar[type[StepState]] = StepState

    def __init__(self, state: S | dict[str, Any] | None = None, *, picked_via: PickedVia = PickedVia.MENU) -> None:
        self.picked_via = picked_via
        self.state: S = self._coerce_state(state)
        self.state.counter = self.initial_counter(self.state)

    def _coerce_state(self, state: S | dict[str, Any] | None) -> S:
        if isinstance(state, StepState):
            return state
        values = dict(state or {})
        known = {f.name for f in fields(self.state_type)}
        unknown = set(values) - known
        if unknown:
            raise TypeError(f"{self.key}: unknown state fields {sorted(unknown)}")
        if "confirm" not in values:
            values["confirm"] = self.can_confirm
        return self.state_type(**values)  # type: ignore[return-value]

    def initial_counter(self, state: S) -> int:
        return 0

    @abstractmethod
    async def create_context(self, services: Services) -> C:
        """Fetch the data every step of this run shares."""

    @abstractmethod
    async def plan(self, state: S, context: C) -> Plan:
        """Return the next prompt, delegation or action for the answers in ``state``."""

    @abstractmethod
    async def integrate(self, ordinal: int, state: S, context: C, result: StepResult) -> Plan | None:
        """Store the answer to decision ``ordinal``; may return a follow-up plan."""

    def confirm_required(self, state: S) -> bool:
        return self.can_confirm and state.confirm

    # Counter algebra

    @staticmethod
    def answered(state: StepState, ordinal: int) -> None:
        state.counter = max(state.counter, ordinal)

    @staticmethod
    def auto_skip(state: StepState, context: Context, ordinal: int) -> None:
        state.counter = max(state.counter, ordinal)
        context.auto_skipped.add(ordinal)
        logger.debug("Auto-skipped decision %d", ordinal)

    @staticmethod
    def invalidate(state: StepState, ordinal: int) -> None:
        """Mark decision ``ordinal`` (and everything after it) unanswered."""
        state.counter = min(state.counter, ordinal - 1)

    @staticmethod
    def rewind(state: StepState, context: Context, counter: int) -> None:
        while counter >= state.starting_step and (counter + 1) in context.auto_skipped:
            counter -= 1
        state.counter = counter if counter >= state.starting_step else -1

    def step_back(self, state: S, context: C, ordinal: int) -> None:
        self.rewind(state, context, ordinal - 2)
        logger.debug("%s: back from decision %d to counter %d", self.key, ordinal, state.counter)

    @staticmethod
    def toggle(state: StepState, ordinal: int) -> None:
        state.counter = ordinal - 2

    @staticmethod
    def end_steps(state: StepState) -> None:
        state.counter = -1

    @staticmethod
    def can_steps_continue(state: StepState) -> bool:
        return state.counter >= 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}(counter={self.state.counter}, picked_via={self.picked_via.value})"

