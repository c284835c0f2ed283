"""Git data model and repository providers."""

from gitpick.git.memory import MemoryProvider, MemoryRepository
from gitpick.git.models import (
    GitBranch,
    GitCommit,
    GitContributor,
    GitFile,
    GitLog,
    GitReference,
    GitRemote,
    GitStash,
    GitStashCommit,
    GitTag,
    RefType,
    Repository,
)
from gitpick.git.provider import RepositoryProvider, create_provider

__all__ = [
    "GitBranch",
    "GitCommit",
    "GitContributor",
    "GitFile",
    "GitLog",
    "GitReference",
    "GitRemote",
    "GitStash",
    "GitStashCommit",
    "GitTag",
    "MemoryProvider",
    "MemoryRepository",
    "RefType",
    "Repository",
    "RepositoryProvider",
    "create_provider",
]
