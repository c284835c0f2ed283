"""Validation helpers for reference names and settings."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any, Mapping

from gitpick.config import HOSTS, LOG_LEVELS, load_settings, parse_bool, parse_repos

_FORBIDDEN_CHARS = set(" ~^:?*[\\")


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    config: dict[str, Any] | None
    errors: list[ValidationIssue]
    warnings: list[ValidationIssue]

    @property
    def ok(self) -> bool:
        return not self.errors


def ref_name_issues(name: str, *, path: str = "name") -> list[ValidationIssue]:
    """Return the reasons ``name`` is not a valid branch or tag name.

    Follows the rules of ``git check-ref-format --branch``.
    """
    issues: list[ValidationIssue] = []
    if not name:
        return [ValidationIssue(path, "Name cannot be empty.")]
    if name == "@":
        issues.append(ValidationIssue(path, "Name cannot be the single character '@'."))
    if name.startswith("-"):
        issues.append(ValidationIssue(path, "Name cannot start with '-'."))
    if name.startswith("/") or name.endswith("/"):
        issues.append(ValidationIssue(path, "Name cannot start or end with '/'."))
    if name.endswith("."):
        issues.append(ValidationIssue(path, "Name cannot end with '.'."))
    if ".." in name:
        issues.append(ValidationIssue(path, "Name cannot contain '..'."))
    if "//" in name:
        issues.append(ValidationIssue(path, "Name cannot contain '//'."))
    if "@{" in name:
        issues.append(ValidationIssue(path, "Name cannot contain '@{'."))

    bad = sorted({ch for ch in name if ch in _FORBIDDEN_CHARS or ord(ch) < 32 or ord(ch) == 127})
    if bad:
        shown = ", ".join(repr(ch) for ch in bad)
        issues.append(ValidationIssue(path, f"Name contains invalid characters: {shown}."))

    for component in name.split("/"):
        if component.startswith("."):
            issues.append(ValidationIssue(path, f"Component '{component}' cannot start with '.'."))
        if component.endswith(".lock"):
            issues.append(ValidationIssue(path, f"Component '{component}' cannot end with '.lock'."))
    return issues


def validate_ref_name(name: str) -> ValidationResult:
    errors = ref_name_issues(name)
    return ValidationResult(
        config={"name": name} if not errors else None,
        errors=errors,
        warnings=[],
    )


def is_valid_ref_name(name: str) -> bool:
    return not ref_name_issues(name)


def validate_settings(env: Mapping[str, str] | None = None) -> ValidationResult:
    source = os.environ if env is None else env
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    raw_limit = source.get("GITPICK_LOG_LIMIT")
    if raw_limit:
        try:
            limit = int(raw_limit)
        except ValueError:
            errors.append(ValidationIssue("GITPICK_LOG_LIMIT", f"Expected an integer, got '{raw_limit}'."))
        else:
            if limit <= 0:
                errors.append(ValidationIssue("GITPICK_LOG_LIMIT", "Must be a positive integer."))
            elif limit > 10000:
                warnings.append(
                    ValidationIssue("GITPICK_LOG_LIMIT", f"Large log limit ({limit}) may be slow to load.")
                )

    try:
        parse_bool(source.get("GITPICK_SHOW_TAGS"), True)
    except ValueError as exc:
        errors.append(ValidationIssue("GITPICK_SHOW_TAGS", str(exc)))

    host = source.get("GITPICK_HOST")
    if host and host.strip().lower() not in HOSTS:
        errors.append(
            ValidationIssue("GITPICK_HOST", f"Unknown host '{host}'. Expected one of: {', '.join(HOSTS)}.")
        )

    level = source.get("GITPICK_LOG_LEVEL")
    if level and level.strip().upper() not in LOG_LEVELS:
        errors.append(ValidationIssue("GITPICK_LOG_LEVEL", f"Unknown log level '{level}'."))

    for repo in parse_repos(source.get("GITPICK_REPOS")):
        if not Path(repo).expanduser().is_dir():
            warnings.append(ValidationIssue("GITPICK_REPOS", f"Path not found: {repo}"))

    settings = load_settings(source) if not errors else None
    return ValidationResult(
        config=settings.to_dict() if settings else None,
        errors=errors,
        warnings=warnings,
    )
