"""Command registry."""

from __future__ import annotations

from typing import Any

from gitpick.errors import UnknownCommandError
from gitpick.wizard.command import PickedVia, QuickCommand

_REGISTRY: dict[str, type[QuickCommand]] = {}


def register_command(command_type: type[QuickCommand]) -> type[QuickCommand]:
    _REGISTRY[command_type.key] = command_type
    return command_type


def get_command_type(key: str) -> type[QuickCommand]:
    _load_builtin_commands()
    try:
        return _REGISTRY[key]
    except KeyError:
        raise UnknownCommandError(key) from None


def create_command(
    key: str,
    state: dict[str, Any] | None = None,
    *,
    picked_via: PickedVia = PickedVia.MENU,
) -> QuickCommand:
    return get_command_type(key)(state, picked_via=picked_via)


def command_keys() -> list[str]:
    _load_builtin_commands()
    return sorted(_REGISTRY)


def _load_builtin_commands() -> None:
    from gitpick.commands import branch, log, show, stash, switch, tag  # noqa: F401
