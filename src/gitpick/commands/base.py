"""Shared decisions for commands that operate on a repository."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Generic, TypeVar

from gitpick.errors import ProviderError
from gitpick.git.models import GitCommit, GitReference, Repository
from gitpick.wizard.command import Prompt, QuickCommand
from gitpick.wizard.services import Services
from gitpick.wizard.state import Context, StepState, append_repos_to_title
from gitpick.wizard.steps import pick_repository_step, resolve_repository
from gitpick.wizard.types import StepResult

logger = logging.getLogger(__name__)


@dataclass
class RepositoryState(StepState):
    repo: Repository | str | None = None


@dataclass
class RepositoryContext(Context):
    reference_hint: str | None = None


S = TypeVar("S", bound=RepositoryState)
C = TypeVar("C", bound=RepositoryContext)


class GitQuickCommand(QuickCommand[S, C], Generic[S, C]):
    context_type: type[RepositoryContext] = RepositoryContext

    async def create_context(self, services: Services) -> C:
        try:
            repos = await services.provider.get_ordered_repositories()
        except ProviderError as exc:
            logger.warning("Unable to list repositories: %s", exc)
            repos = []
        return self.context_type(  # type: ignore[return-value]
            title=self.title,
            services=services,
            repos=repos,
            show_tags=services.settings.show_tags,
        )

    async def plan_repository(self, state: S, context: C) -> Prompt | Repository:
        """Decision 1. Returns the prompt to present, or the resolved repository."""
        repo = await resolve_repository(state.repo, context)
        if repo is None:
            if isinstance(state.repo, str):
                logger.debug("%s: repository %r did not resolve", self.key, state.repo)
            state.repo = None
            self.invalidate(state, 1)
        if state.counter < 1:
            context.title = self.title
            return Prompt(1, await pick_repository_step(state, context, picked=repo), skippable=True)
        state.repo = repo
        context.title = append_repos_to_title(self.title, context, repo=repo)
        return repo

    def integrate_repository(self, state: S, result: StepResult) -> None:
        item = result.first
        state.repo = item.item if item else None

    async def resolve_reference(
        self,
        context: C,
        repo: Repository,
        value: GitReference | str | None,
        *,
        commit_only: bool = False,
    ) -> GitReference | None:
        """Resolve a typed name to a branch, tag or commit in ``repo``; stale answers resolve to ``None``."""
        if value is None:
            return None
        if not isinstance(value, str):
            if value.repo_path != repo.path:
                return None
            if commit_only and not isinstance(value, GitCommit):
                return await self._commit(context, repo, value.ref)
            return value
        if not commit_only:
            try:
                branches = await context.provider.get_branches(repo.path)
                tags = await context.provider.get_tags(repo.path)
            except ProviderError as exc:
                logger.debug("Unable to resolve %s: %s", value, exc)
                return None
            for ref in (*branches, *tags):
                if ref.name == value:
                    return ref
        return await self._commit(context, repo, value)

    async def _commit(self, context: C, repo: Repository, ref: str) -> GitCommit | None:
        try:
            if not await context.provider.validate_reference(repo.path, ref):
                return None
            return await context.provider.get_commit(repo.path, ref)
        except ProviderError as exc:
            logger.debug("Unable to resolve commit %s: %s", ref, exc)
            return None
