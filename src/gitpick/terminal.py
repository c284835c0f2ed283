"""Turn a token clicked in a terminal into a ready-to-run command."""

from __future__ import annotations

import logging

from gitpick.commands import create_command
from gitpick.errors import ProviderError
from gitpick.git.models import is_shaish
from gitpick.git.provider import RepositoryProvider
from gitpick.wizard.command import PickedVia, QuickCommand

logger = logging.getLogger(__name__)


async def resolve_link(provider: RepositoryProvider, link: str) -> QuickCommand | None:
    token = link.strip()
    if not token:
        return None
    try:
        repos = await provider.get_ordered_repositories()
        if len(repos) != 1:
            logger.debug("Link %r ignored: %d repositories open", token, len(repos))
            return None
        repo = repos[0]

        if token == "HEAD":
            branch = await provider.get_branch(repo.path)
            state = {"repo": repo, "reference": branch} if branch is not None else {"repo": repo}
            return create_command("log", state, picked_via=PickedVia.TERMINAL_LINK)

        if is_shaish(token) and await provider.validate_reference(repo.path, token):
            commit = await provider.get_commit(repo.path, token)
            if commit is not None:
                return create_command(
                    "show",
                    {"repo": repo, "reference": commit},
                    picked_via=PickedVia.TERMINAL_LINK,
                )

        refs = [*await provider.get_branches(repo.path), *await provider.get_tags(repo.path)]
    except ProviderError as exc:
        logger.debug("Link %r did not resolve: %s", token, exc)
        return None

    for ref in refs:
        if ref.name == token:
            return create_command("log", {"repo": repo, "reference": ref}, picked_via=PickedVia.TERMINAL_LINK)
    return None
