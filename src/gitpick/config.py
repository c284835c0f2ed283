"""Environment-driven settings for gitpick."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping

DEFAULT_LOG_LIMIT = 100
HOSTS = ("console", "tui")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def load_dotenv(path: str = ".env") -> bool:
    env_path = Path(path)
    if not env_path.exists():
        return False
    try:
        text = env_path.read_text(encoding="utf-8")
    except OSError:
        return False

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export ") :].lstrip()
        if "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if value and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        if value == "":
            continue
        if key not in os.environ:
            os.environ[key] = value
    return True


@dataclass(frozen=True)
class Settings:
    log_limit: int = DEFAULT_LOG_LIMIT
    show_tags: bool = True
    repos: tuple[str, ...] = ()
    host: str = "console"
    log_level: str = "WARNING"

    def to_dict(self) -> dict:
        return {
            "log_limit": self.log_limit,
            "show_tags": self.show_tags,
            "repos": list(self.repos),
            "host": self.host,
            "log_level": self.log_level,
        }


def parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"Expected a boolean, got '{value}'.")


def parse_repos(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(os.pathsep) if part.strip())


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build settings from the environment, falling back to defaults for bad values.

    Use ``validate_settings`` to surface the problems that were skipped here.
    """
    source = os.environ if env is None else env

    log_limit = DEFAULT_LOG_LIMIT
    raw_limit = source.get("GITPICK_LOG_LIMIT")
    if raw_limit:
        try:
            parsed = int(raw_limit)
        except ValueError:
            parsed = 0
        if parsed > 0:
            log_limit = parsed

    try:
        show_tags = parse_bool(source.get("GITPICK_SHOW_TAGS"), True)
    except ValueError:
        show_tags = True

    host = (source.get("GITPICK_HOST") or "console").strip().lower()
    if host not in HOSTS:
        host = "console"

    log_level = (source.get("GITPICK_LOG_LEVEL") or "WARNING").strip().upper()
    if log_level not in LOG_LEVELS:
        log_level = "WARNING"

    return Settings(
        log_limit=log_limit,
        show_tags=show_tags,
        repos=parse_repos(source.get("GITPICK_REPOS")),
        host=host,
        log_level=log_level,
    )
