"""Rich theme for gitpick CLI."""

from __future__ import annotations

from rich.theme import Theme

THEME = Theme(
    {
        "accent": "bright_blue",
        "subtitle": "dim",
        "step": "bold bright_blue",
        "border": "bright_black",
        "info": "dim",
        "warning": "red3",
        "success": "green3",
        "error": "bold red3",
        "label": "dim",
        "value": "white",
        "path": "cyan",
        "picked": "bold green3",
        "directive": "italic bright_black",
    }
)
