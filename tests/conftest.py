from __future__ import annotations

import pytest
import pytest_asyncio

from gitpick.config import Settings
from gitpick.git.memory import MemoryProvider
from gitpick.git.models import Repository
from gitpick.wizard.services import RecordingViews, Services
from gitpick.wizard.state import Context
from tests.utils import APP, RecordingExecutor, app_repository, lib_repository


@pytest.fixture
def provider() -> MemoryProvider:
    return MemoryProvider(repositories=[app_repository()], active=APP)


@pytest.fixture
def multi_provider() -> MemoryProvider:
    return MemoryProvider(repositories=[app_repository(), lib_repository()], active=APP)


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def views() -> RecordingViews:
    return RecordingViews()


@pytest.fixture
def services(provider: MemoryProvider, executor: RecordingExecutor, views: RecordingViews) -> Services:
    return Services(provider=provider, executor=executor, views=views, settings=Settings(log_limit=50))


@pytest.fixture
def multi_services(multi_provider: MemoryProvider, executor: RecordingExecutor, views: RecordingViews) -> Services:
    return Services(provider=multi_provider, executor=executor, views=views, settings=Settings(log_limit=50))


@pytest.fixture
def app_repo() -> Repository:
    return Repository(APP)


@pytest_asyncio.fixture
async def context(services: Services) -> Context:
    repos = await services.provider.get_ordered_repositories()
    return Context(title="Test", services=services, repos=repos)
