"""Console picker host built on typer prompts and rich panels."""

from __future__ import annotations

from typing import Callable

import typer

from gitpick.errors import EngineError
from gitpick.ui.progress import status_spinner
from gitpick.ui.render import render_pick_panel, render_step_header, render_warning
from gitpick.wizard.command import QuickCommand
from gitpick.wizard.engine import RunOutcome, WizardRun
from gitpick.wizard.services import Services
from gitpick.wizard.types import (
    QuickInputStep,
    QuickPickItem,
    QuickPickStep,
    QuickStep,
    StepKind,
    StepResult,
)

PICK_HELP = (
    "Enter a number (comma-separate for several), text to filter or #ref, "
    "/name for a button, >N to act on item N, b to go back, q to cancel."
)
INPUT_HELP = "Type /back to go back or /cancel to cancel."

Prompt = Callable[..., str]


class ConsoleControls:
    def __init__(self, step: QuickPickStep) -> None:
        self.items: list[QuickPickItem] = list(step.items)
        self.placeholder = step.placeholder
        self.busy = False
        self.enabled = True
        self._active: QuickPickItem | None = None

    @property
    def active_items(self) -> list[QuickPickItem]:
        if self._active is not None and self._active in self.items:
            return [self._active]
        return self.items[:1]

    def activate(self, item: QuickPickItem) -> None:
        self._active = item


class ConsolePickerHost:
    def __init__(self, *, prompt: Prompt = typer.prompt) -> None:
        self._prompt = prompt

    async def present(self, step: QuickStep) -> StepResult:
        if step.kind is StepKind.INPUT:
            return await self._present_input(step)
        return await self._present_pick(step)

    async def _present_pick(self, step: QuickPickStep) -> StepResult:
        controls = ConsoleControls(step)
        filter_text = ""
        if step.value:
            filter_text = await self._apply_text(step, controls, step.value)

        while True:
            visible = [
                item
                for item in controls.items
                if item.matches(filter_text, description=step.match_on_description, detail=step.match_on_detail)
            ]
            if not visible and filter_text:
                render_warning(f"No items match '{filter_text}'.")
                filter_text = ""
                continue
            render_pick_panel(
                title=step.title,
                placeholder=controls.placeholder + (f"  (filter: {filter_text})" if filter_text else ""),
                items=visible,
                buttons=step.buttons,
                multiselect=step.multiselect,
                busy=controls.busy,
                instructions=PICK_HELP,
            )
            response = self._prompt("Choice", default="", show_default=False).strip()
            lowered = response.lower()

            if lowered in {"q", "/cancel"}:
                return StepResult.cancel()
            if lowered in {"b", "/back"}:
                return StepResult.back()
            if response.startswith("/"):
                await self._click(step, controls, response[1:])
                continue
            if response.startswith(">"):
                await self._press(step, controls, visible, response[1:])
                continue
            if not response:
                chosen = [item for item in visible if item.picked]
                if chosen or (step.multiselect and step.allow_empty):
                    return StepResult.selection(*chosen) if step.multiselect else StepResult.selection(chosen[0])
                render_warning("Nothing selected.")
                continue

            indices = _parse_indices(response)
            if indices is not None:
                if any(index < 1 or index > len(visible) for index in indices):
                    render_warning(f"Invalid choice: {response}. Choose 1-{len(visible)}.")
                    continue
                if len(indices) > 1 and not step.multiselect:
                    render_warning("Choose a single item.")
                    continue
                return StepResult.selection(*(visible[index - 1] for index in indices))

            filter_text = await self._apply_text(step, controls, response)

    async def _apply_text(self, step: QuickPickStep, controls: ConsoleControls, text: str) -> str:
        """Offer typed text to the step first; unhandled text becomes the filter."""
        if step.on_validate_value is not None and await step.on_validate_value(controls, text):
            return ""
        return text

    async def _click(self, step: QuickPickStep, controls: ConsoleControls, name: str) -> None:
        button = next((b for b in step.buttons if b.name == name.strip().lower()), None)
        if button is None:
            names = ", ".join(f"/{b.name}" for b in step.buttons) or "none"
            render_warning(f"Unknown button: /{name}. Available: {names}.")
            return
        if step.on_did_click_button is not None:
            with status_spinner(button.tooltip):
                await step.on_did_click_button(controls, button)

    async def _press(self, step: QuickPickStep, controls: ConsoleControls, visible: list[QuickPickItem], text: str) -> None:
        indices = _parse_indices(text or "1")
        if not indices or len(indices) != 1 or not 1 <= indices[0] <= len(visible):
            render_warning(f"Invalid item: {text}.")
            return
        if not step.keys or step.on_did_press_key is None:
            render_warning("This step has no item actions.")
            return
        controls.activate(visible[indices[0] - 1])
        await step.on_did_press_key(controls, step.keys[0])

    async def _present_input(self, step: QuickInputStep) -> StepResult:
        render_step_header(step.title, step.prompt or step.placeholder)
        while True:
            response = self._prompt(
                step.placeholder,
                default=step.value or "",
                show_default=bool(step.value),
            )
            lowered = response.strip().lower()
            if lowered == "/back":
                return StepResult.back()
            if lowered == "/cancel":
                return StepResult.cancel()
            valid, message = await step.check(response)
            if valid:
                return StepResult.text(response)
            render_warning(f"{message or 'Invalid value.'} {INPUT_HELP}")


def _parse_indices(text: str) -> list[int] | None:
    parts = [part for part in text.replace(",", " ").split() if part]
    if not parts or not all(part.isdigit() for part in parts):
        return None
    return [int(part) for part in parts]


async def run_console(command: QuickCommand, services: Services, host: ConsolePickerHost | None = None) -> RunOutcome:
    host = host or ConsolePickerHost()
    run = WizardRun(command, services)
    with status_spinner("Loading…"):
        step = await run.start()
    while step is not None:
        result = await host.present(step)
        with status_spinner("Loading…"):
            step = await run.next(result)
    if run.outcome is None:
        raise EngineError("Run stopped without an outcome.")
    return run.outcome
