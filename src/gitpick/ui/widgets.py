"""Textual widgets for the gitpick picker."""

from __future__ import annotations

from rich.text import Text
from textual.message import Message
from textual.widgets import OptionList
from textual.widgets.option_list import Option

from gitpick.wizard.types import ItemKind, QuickPickItem


class PickList(OptionList):
    """OptionList over pick items, with checkbox-style multi-select and item keys."""

    class KeyPressed(Message):
        def __init__(self, key: str) -> None:
            super().__init__()
            self.key = key

    def __init__(
        self,
        items: list[QuickPickItem],
        *,
        multiselect: bool = False,
        keys: tuple[str, ...] = (),
        id: str | None = None,
    ) -> None:
        super().__init__(id=id)
        self._items = list(items)
        self._multiselect = multiselect
        self._keys = keys
        self._selected = {index for index, item in enumerate(self._items) if item.picked and multiselect}

    def on_mount(self) -> None:
        self._refresh_options()

    @property
    def shown_items(self) -> list[QuickPickItem]:
        return list(self._items)

    @property
    def highlighted_item(self) -> QuickPickItem | None:
        index = self.highlighted
        if index is None or not 0 <= index < len(self._items):
            return None
        return self._items[index]

    @property
    def selected_items(self) -> list[QuickPickItem]:
        return [item for index, item in enumerate(self._items) if index in self._selected]

    def update_items(self, items: list[QuickPickItem]) -> None:
        selected = self.selected_items
        self._items = list(items)
        self._selected = {
            index
            for index, item in enumerate(self._items)
            if item in selected or (self._multiselect and item.picked and not selected)
        }
        self._refresh_options()

    def _refresh_options(self) -> None:
        self.clear_options()
        picked = None
        for index, item in enumerate(self._items):
            prompt = Text()
            if self._multiselect and item.kind is not ItemKind.DIRECTIVE:
                prompt.append("[x] " if index in self._selected else "[ ] ", style="dim")
            prompt.append(item.label, style="italic" if item.kind is ItemKind.DIRECTIVE else "")
            if item.description:
                prompt.append(f"  {item.description}", style="dim")
            if item.detail:
                prompt.append(f"\n{item.detail}", style="dim")
            self.add_option(Option(prompt, id=str(index)))
            if item.picked and picked is None:
                picked = index
        if self._items:
            self.highlighted = picked if picked is not None else 0

    def _toggle_selected(self) -> None:
        index = self.highlighted
        if index is None:
            return
        if 0 <= index < len(self._items):
            if index in self._selected:
                self._selected.remove(index)
            else:
                self._selected.add(index)
            self._refresh_options()
            self.highlighted = index

    def on_key(self, event) -> None:  # type: ignore[override]
        if event.key == "space" and self._multiselect:
            self._toggle_selected()
            event.stop()
        elif event.key in self._keys:
            self.post_message(self.KeyPressed(event.key))
            event.stop()
