"""Cooperative wizard driver with an explicit frame stack for delegation."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
import logging

from gitpick.actions import ActionResult
from gitpick.errors import EngineError
from gitpick.wizard.command import Delegate, Execute, Finish, Plan, Prompt, QuickCommand
from gitpick.wizard.services import Services
from gitpick.wizard.state import Context, StepState
from gitpick.wizard.types import PickerHost, QuickStep, ResultKind, StepKind, StepResult

logger = logging.getLogger(__name__)


class RunStatus(str, Enum):
    RUNNING = "running"
    SUSPENDED = "suspended"
    DELEGATING = "delegating"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class FrameStatus(str, Enum):
    RUNNING = "running"
    SUSPENDED = "suspended"
    DELEGATING = "delegating"
    COMPLETED = "completed"
    BACKED_OUT = "backed-out"
    CANCELLED = "cancelled"


_ENDED = {FrameStatus.COMPLETED, FrameStatus.BACKED_OUT, FrameStatus.CANCELLED}


@dataclass
class Frame:
    command: QuickCommand
    state: StepState
    context: Context | None = None
    status: FrameStatus = FrameStatus.RUNNING
    pending: Prompt | None = None
    handoff_counter: int | None = None


@dataclass(frozen=True)
class RunOutcome:
    status: RunStatus
    state: StepState
    backed_out: bool = False
    action_results: tuple[ActionResult, ...] = ()
    steps_presented: int = 0

    @property
    def completed(self) -> bool:
        return self.status is RunStatus.COMPLETED

    @property
    def cancelled(self) -> bool:
        return self.status is RunStatus.CANCELLED


@dataclass
class _Tally:
    presented: int = 0
    results: list[ActionResult] = field(default_factory=list)


class WizardRun:
    """Drives one command (and any commands it delegates to).

    ``start`` and ``next`` return the step the host must present, or ``None``
    once the run has terminated and ``outcome`` is set.
    """

    def __init__(self, command: QuickCommand, services: Services) -> None:
        self._services = services
        self._root = Frame(command=command, state=command.state)
        self._stack: list[Frame] = [self._root]
        self._tally = _Tally()
        self._started = False
        self._terminated = False
        self.status = RunStatus.RUNNING
        self.outcome: RunOutcome | None = None

    @property
    def frames(self) -> tuple[Frame, ...]:
        return tuple(self._stack)

    @property
    def current(self) -> Frame | None:
        return self._stack[-1] if self._stack else None

    @property
    def current_step(self) -> QuickStep | None:
        frame = self.current
        if frame is None or frame.pending is None:
            return None
        return frame.pending.step

    async def start(self) -> QuickStep | None:
        if self._started:
            raise EngineError("Run already started.")
        self._started = True
        return await self._advance()

    async def next(self, result: StepResult) -> QuickStep | None:
        if self.status is not RunStatus.SUSPENDED:
            raise EngineError(f"Run is {self.status.value}; no step is awaiting a result.")
        frame = self._stack[-1]
        prompt = frame.pending
        if prompt is None:
            raise EngineError(f"{frame.command.key}: no decision is pending.")

        finalized = await prompt.step.finalize(result)
        if finalized is None:
            logger.debug("%s: refused result for decision %d", frame.command.key, prompt.ordinal)
            return prompt.step

        frame.pending = None
        frame.status = FrameStatus.RUNNING
        self.status = RunStatus.RUNNING

        if finalized.kind is ResultKind.CANCEL:
            frame.command.end_steps(frame.state)
            frame.status = FrameStatus.CANCELLED
        elif finalized.kind is ResultKind.BACK:
            frame.command.step_back(frame.state, frame.context, prompt.ordinal)
            if not frame.command.can_steps_continue(frame.state):
                frame.status = FrameStatus.BACKED_OUT
        else:
            frame.command.answered(frame.state, prompt.ordinal)
            plan = await frame.command.integrate(prompt.ordinal, frame.state, frame.context, finalized)
            if plan is not None:
                await self._follow(frame, plan)
        return await self._advance()

    async def _advance(self) -> QuickStep | None:
        while self._stack:
            frame = self._stack[-1]
            if frame.status in _ENDED:
                self._pop()
                continue
            if frame.context is None:
                frame.context = await frame.command.create_context(self._services)
            plan = await frame.command.plan(frame.state, frame.context)
            if isinstance(plan, Prompt):
                sole = plan.step.sole_item if plan.skippable and plan.step.kind is StepKind.PICK else None
                if sole is not None:
                    frame.command.auto_skip(frame.state, frame.context, plan.ordinal)
                    follow = await frame.command.integrate(
                        plan.ordinal, frame.state, frame.context, StepResult.selection(sole)
                    )
                    if follow is not None:
                        await self._follow(frame, follow)
                    continue
                frame.context.auto_skipped.discard(plan.ordinal)
                frame.pending = plan
                frame.status = FrameStatus.SUSPENDED
                self.status = RunStatus.SUSPENDED
                self._tally.presented += 1
                return plan.step
            await self._follow(frame, plan)
        return None

    async def _follow(self, frame: Frame, plan: Plan) -> None:
        if isinstance(plan, Delegate):
            self._push(frame, plan.command)
        elif isinstance(plan, Execute):
            result = await self._services.executor.execute(plan.action)
            logger.debug("%s: executed %s ok=%s", frame.command.key, plan.action.kind.value, result.ok)
            self._tally.results.append(result)
            self._terminated = True
            frame.status = FrameStatus.COMPLETED
        elif isinstance(plan, Finish):
            frame.status = FrameStatus.COMPLETED
        elif isinstance(plan, Prompt):
            raise EngineError("integrate must not return a Prompt")

    def _push(self, parent: Frame, command: QuickCommand) -> None:
        command.picked_via = parent.command.picked_via
        state = copy.copy(command.state)
        state.starting_step = state.counter
        parent.handoff_counter = parent.state.counter
        parent.status = FrameStatus.DELEGATING
        self.status = RunStatus.DELEGATING
        self._stack.append(Frame(command=command, state=state))
        logger.debug("Delegating %s -> %s at counter %d", parent.command.key, command.key, parent.state.counter)

    def _pop(self) -> None:
        child = self._stack.pop()
        logger.debug("Frame %s ended %s", child.command.key, child.status.value)
        if not self._stack:
            self._finish(child)
            return
        parent = self._stack[-1]
        if self._terminated:
            parent.status = FrameStatus.COMPLETED
            return
        if child.status in (FrameStatus.CANCELLED, FrameStatus.BACKED_OUT):
            parent.command.end_steps(parent.state)
            parent.status = child.status
            return
        handoff = parent.handoff_counter if parent.handoff_counter is not None else parent.state.counter
        parent.handoff_counter = None
        parent.command.rewind(parent.state, parent.context, handoff - 1)
        parent.status = (
            FrameStatus.RUNNING if parent.command.can_steps_continue(parent.state) else FrameStatus.BACKED_OUT
        )
        self.status = RunStatus.RUNNING
        logger.debug("Resumed %s at counter %d", parent.command.key, parent.state.counter)

    def _finish(self, root: Frame) -> None:
        completed = root.status is FrameStatus.COMPLETED
        self.status = RunStatus.COMPLETED if completed else RunStatus.CANCELLED
        self.outcome = RunOutcome(
            status=self.status,
            state=root.state,
            backed_out=root.status is FrameStatus.BACKED_OUT,
            action_results=tuple(self._tally.results),
            steps_presented=self._tally.presented,
        )


async def run_wizard(command: QuickCommand, host: PickerHost, services: Services) -> RunOutcome:
    run = WizardRun(command, services)
    step = await run.start()
    while step is not None:
        result = await host.present(step)
        step = await run.next(result)
    if run.outcome is None:
        raise EngineError("Run stopped without an outcome.")
    return run.outcome
