"""Render helpers for gitpick CLI."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from rich import box
from rich.console import Group
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from gitpick.ui.console import get_console
from gitpick.wizard.types import ItemKind, QuickButton, QuickPickItem

_PATH_KEYS = {"repos", "repository", "path"}


def _panel(body: Any, title: str | None = None, *, border: str = "border", padding: tuple[int, int] = (0, 2)) -> Panel:
    return Panel(
        body,
        title=Text(title, style="step") if title else None,
        title_align="left",
        box=box.ROUNDED,
        border_style=border,
        padding=padding,
        expand=True,
    )


def _item_line(index: int, item: QuickPickItem, *, multiselect: bool) -> Text:
    if multiselect:
        marker = "[x]" if item.picked else "[ ]"
    else:
        marker = "›" if item.picked else " "
    if item.kind is ItemKind.DIRECTIVE:
        style = "directive"
    else:
        style = "picked" if item.picked else "value"
    line = Text(f"{index:>3} {marker} ", style="label")
    line.append(item.label, style=style)
    if item.description:
        line.append(f"  {item.description}", style="label")
    return line


def _button_row(buttons: Sequence[QuickButton]) -> Text:
    row = Text()
    for button in buttons:
        suffix = (" (on)" if button.on else " (off)") if button.toggle else ""
        row.append(f"/{button.name}", style="accent")
        row.append(f" {button.tooltip}{suffix}   ", style="label")
    return row


def render_pick_panel(
    *,
    title: str,
    placeholder: str,
    items: Sequence[QuickPickItem],
    buttons: Sequence[QuickButton] = (),
    multiselect: bool = False,
    busy: bool = False,
    instructions: str = "",
) -> None:
    lines: list[Text] = [Text(placeholder, style="subtitle"), Text("")]
    for index, item in enumerate(items, start=1):
        lines.append(_item_line(index, item, multiselect=multiselect))
        if item.detail:
            lines.append(Text(f"        {item.detail}", style="info"))
    if buttons:
        lines.extend([Text(""), _button_row(buttons)])
    if busy:
        lines.append(Text("Loading…", style="info"))
    if instructions:
        lines.extend([Text(""), Text(instructions, style="dim")])
    get_console().print(_panel(Group(*lines), title))


def render_step_header(title: str, description: str) -> None:
    body = Text(description, style="subtitle") if description else Text("")
    get_console().print(_panel(body, title))


def render_info(text: str) -> None:
    get_console().print(text, style="info", markup=False)


def render_warning(text: str) -> None:
    get_console().print(text, style="warning", markup=False)


def render_success(text: str) -> None:
    get_console().print(text, style="success", markup=False)


def render_error(text: str) -> None:
    get_console().print(_panel(Text(text, style="error"), border="error"))


def render_summary_table(rows: Mapping[str, str] | Sequence[tuple[str, str]], title: str = "Summary") -> None:
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="label", no_wrap=True, justify="right")
    table.add_column(style="value")

    pairs = rows.items() if isinstance(rows, Mapping) else rows
    for key, value in pairs:
        value_text = Text(str(value) or "-", style="value")
        if str(key).lower() in _PATH_KEYS:
            value_text.stylize("path")
        table.add_row(Text(str(key), style="label"), value_text)

    console = get_console()
    console.print()
    console.print(_panel(table, title))


def render_validation_panel(title: str, issues: Sequence[str], *, style: str) -> None:
    lines = [Text(f"- {issue}", style=style) for issue in issues]
    get_console().print(_panel(Group(*lines), title))


def render_output(title: str, output: str, *, syntax: str = "diff") -> None:
    body = Syntax(output, syntax, theme="ansi_dark", word_wrap=True)
    get_console().print(_panel(body, title, padding=(0, 1)))
