"""Per-command wizard state and context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gitpick.git.models import Repository

if TYPE_CHECKING:
    from gitpick.git.provider import RepositoryProvider
    from gitpick.wizard.services import Services


@dataclass
class StepState:
    """Answers collected so far.

    ``counter`` is the number of decisions answered (or skipped) in order;
    decision ``k`` is asked again whenever ``counter < k``.
    """

    counter: int = 0
    confirm: bool = False
    starting_step: int = 0


@dataclass
class Context:
    """Data fetched once per command run and shared by its steps."""

    title: str
    services: Services
    repos: list[Repository] = field(default_factory=list)
    auto_skipped: set[int] = field(default_factory=set)
    show_tags: bool = True

    @property
    def provider(self) -> RepositoryProvider:
        return self.services.provider


def append_repos_to_title(
    title: str,
    context: Context,
    *,
    repo: Repository | str | None = None,
    repos: list[Repository] | None = None,
    additional: str = "",
) -> str:
    if len(context.repos) <= 1:
        return f"{title}{additional}"
    if repos:
        if len(repos) == 1:
            return f"{title}{additional}  •  {repos[0].formatted_name}"
        return f"{title}{additional}  •  {len(repos)} repositories"
    if isinstance(repo, Repository):
        return f"{title}{additional}  •  {repo.formatted_name}"
    return f"{title}{additional}"
