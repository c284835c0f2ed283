"""Error types for gitpick."""

from __future__ import annotations

from dataclasses import dataclass, field


class GitPickError(Exception):
    """Base class for gitpick errors."""


@dataclass
class ProviderError(GitPickError):
    command: list[str]
    returncode: int
    stderr: str = ""
    cwd: str | None = field(default=None)

    def __str__(self) -> str:
        detail = self.stderr.strip().splitlines()[0] if self.stderr.strip() else "no output"
        return f"ProviderError({' '.join(self.command)} exited {self.returncode}: {detail})"


class UnknownCommandError(GitPickError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Unknown command: {key}")
        self.key = key


class EngineError(GitPickError):
    """Raised when a picker host drives a run out of protocol."""
