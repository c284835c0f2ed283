"""Textual screens that present wizard steps."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import Screen
from textual.widgets import Button, Input, OptionList, Static

from gitpick.ui.widgets import PickList
from gitpick.wizard.types import QuickButton, QuickInputStep, QuickPickItem, QuickPickStep, StepResult


def _footer_hint(multiselect: bool = False) -> Static:
    toggle = " · space toggle" if multiselect else ""
    return Static(f"↑↓ navigate{toggle} · enter confirm · ctrl+b back · esc cancel", id="key-hint")


def _button_label(button: QuickButton) -> str:
    if button.toggle:
        return f"{button.tooltip}: {'on' if button.on else 'off'}"
    return button.tooltip


class PickScreen(Screen[StepResult]):
    """Presents a pick step and doubles as the live ``PickerControls`` for its handlers."""

    BINDINGS = [("escape", "cancel", "Cancel"), ("ctrl+b", "back", "Back")]

    def __init__(self, step: QuickPickStep) -> None:
        super().__init__()
        self.step = step
        self._items = list(step.items)
        self._placeholder = step.placeholder
        self._busy = False
        self._enabled = True
        self._filter = ""

    def compose(self) -> ComposeResult:
        surface = Container(id="pick-surface", classes="surface")
        surface.border_title = self.step.title
        with surface:
            self.placeholder_label = Static(self._placeholder, id="pick-placeholder")
            yield self.placeholder_label
            self.filter_input = Input(
                value=self.step.value or "",
                placeholder="Type to filter, or #ref to enter a reference",
                id="pick-filter",
            )
            yield self.filter_input
            self.list = PickList(
                self._items,
                multiselect=self.step.multiselect,
                keys=self.step.keys,
                id="pick-list",
            )
            yield self.list
            if self.step.buttons:
                with Horizontal(id="pick-buttons"):
                    for button in self.step.buttons:
                        yield Button(_button_label(button), id=f"button-{button.name}")
        yield _footer_hint(self.step.multiselect)

    async def on_mount(self) -> None:
        self.list.focus()
        if self.step.value:
            await self._apply_text(self.step.value)

    @property
    def items(self) -> list[QuickPickItem]:
        return list(self._items)

    @items.setter
    def items(self, value: list[QuickPickItem]) -> None:
        self._items = list(value)
        self._show()

    @property
    def placeholder(self) -> str:
        return self._placeholder

    @placeholder.setter
    def placeholder(self, value: str) -> None:
        self._placeholder = value
        self.placeholder_label.update(value)

    @property
    def busy(self) -> bool:
        return self._busy

    @busy.setter
    def busy(self, value: bool) -> None:
        self._busy = value
        self.list.loading = value

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value
        self.list.disabled = not value
        self.filter_input.disabled = not value

    @property
    def active_items(self) -> list[QuickPickItem]:
        item = self.list.highlighted_item
        return [item] if item is not None else []

    def _show(self) -> None:
        shown = [
            item
            for item in self._items
            if item.matches(self._filter, description=self.step.match_on_description, detail=self.step.match_on_detail)
        ]
        self.list.update_items(shown)

    async def _apply_text(self, text: str) -> None:
        if self.step.on_validate_value is not None and await self.step.on_validate_value(self, text):
            self._filter = ""
            self._show()
            return
        self._filter = text
        self._show()

    async def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "pick-filter":
            await self._apply_text(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._confirm()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self._confirm()

    def _confirm(self) -> None:
        if self.step.multiselect:
            chosen = self.list.selected_items
        else:
            item = self.list.highlighted_item
            chosen = [item] if item is not None else []
        if chosen or self.step.allow_empty:
            self.dismiss(StepResult.selection(*chosen))

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        name = (event.button.id or "").removeprefix("button-")
        button = next((b for b in self.step.buttons if b.name == name), None)
        if button is None or self.step.on_did_click_button is None:
            return
        await self.step.on_did_click_button(self, button)
        event.button.label = _button_label(button)

    async def on_pick_list_key_pressed(self, message: PickList.KeyPressed) -> None:
        if self.step.on_did_press_key is not None:
            await self.step.on_did_press_key(self, message.key)

    def action_cancel(self) -> None:
        self.dismiss(StepResult.cancel())

    def action_back(self) -> None:
        self.dismiss(StepResult.back())


class InputScreen(Screen[StepResult]):
    BINDINGS = [("escape", "cancel", "Cancel"), ("ctrl+b", "back", "Back")]

    def __init__(self, step: QuickInputStep) -> None:
        super().__init__()
        self.step = step

    def compose(self) -> ComposeResult:
        surface = Container(id="input-surface", classes="surface")
        surface.border_title = self.step.title
        with surface:
            yield Static(self.step.prompt or self.step.placeholder, id="input-prompt")
            self.value_input = Input(value=self.step.value or "", placeholder=self.step.placeholder, id="input-value")
            yield self.value_input
            self.message = Static("", id="input-message")
            yield self.message
            yield Button("Continue", id="input-continue")
        yield Static("enter confirm · ctrl+b back · esc cancel", id="key-hint")

    def on_mount(self) -> None:
        self.value_input.focus()

    async def on_input_changed(self, event: Input.Changed) -> None:
        valid, message = await self.step.check(event.value)
        self.message.update("" if valid else (message or "Invalid value"))

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        await self._submit()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "input-continue":
            await self._submit()

    async def _submit(self) -> None:
        value = self.value_input.value
        valid, message = await self.step.check(value)
        if not valid:
            self.message.update(message or "Invalid value")
            return
        self.dismiss(StepResult.text(value))

    def action_cancel(self) -> None:
        self.dismiss(StepResult.cancel())

    def action_back(self) -> None:
        self.dismiss(StepResult.back())
