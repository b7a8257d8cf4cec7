"""Shared test fixtures for chat_mirror.

This module provides pytest fixtures used across all tests.
"""

from collections.abc import Callable

import pytest
from mocks.fake_adapter import FakeServiceAdapter
from mocks.memory_store import InMemoryStore

from chat_mirror.config import SearchSettings, SyncSettings
from chat_mirror.infra.credentials import StaticCredentialProvider
from chat_mirror.models.account import Account, Service
from chat_mirror.models.chat import Chat, Message
from chat_mirror.services.index_engine import IndexEngine
from chat_mirror.services.status_store import SyncStatusStore
from chat_mirror.services.sync_coordinator import SyncCoordinator


# Settings fixtures
@pytest.fixture
def sync_settings() -> SyncSettings:
    """Sync settings without courtesy delays."""
    return SyncSettings(detail_delay=0, auto_sync_on_detect=False)


@pytest.fixture
def search_settings() -> SearchSettings:
    return SearchSettings()


# Sample data fixtures
@pytest.fixture
def sample_account() -> Account:
    """Create sample Claude account."""
    return Account(
        id="claude-org-1",
        service=Service.CLAUDE,
        display_name="Personal",
        org_id="org-1",
    )


@pytest.fixture
def chatgpt_account() -> Account:
    """Create sample ChatGPT account."""
    return Account(
        id="chatgpt-user-1",
        service=Service.CHATGPT,
        display_name="Jo",
        email="jo@example.com",
    )


@pytest.fixture
def make_chat() -> Callable[..., Chat]:
    """Factory for canonical chats."""

    def _make(
        remote_id: str,
        title: str,
        updated_at: int = 1000,
        messages: list[tuple[str, str]] | None = None,
        account_id: str = "claude-org-1",
        service: Service = Service.CLAUDE,
    ) -> Chat:
        account = Account(id=account_id, service=service, display_name="Test")
        return Chat.build(
            account,
            remote_id,
            title=title,
            created_at=updated_at,
            updated_at=updated_at,
            messages=[Message(role=role, content=text) for role, text in messages or []],
            url=f"https://chat.example/{remote_id}",
        )

    return _make


# Collaborator fixtures
@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def fake_adapter() -> FakeServiceAdapter:
    return FakeServiceAdapter(Service.CLAUDE)


@pytest.fixture
def credentials() -> StaticCredentialProvider:
    return StaticCredentialProvider({"claude": "sessionKey=test", "chatgpt": "session=test"})


@pytest.fixture
def statuses() -> SyncStatusStore:
    return SyncStatusStore()


@pytest.fixture
def index_engine(memory_store: InMemoryStore, search_settings: SearchSettings) -> IndexEngine:
    return IndexEngine(memory_store, search_settings)


@pytest.fixture
def coordinator(
    memory_store: InMemoryStore,
    fake_adapter: FakeServiceAdapter,
    credentials: StaticCredentialProvider,
    index_engine: IndexEngine,
    statuses: SyncStatusStore,
    sync_settings: SyncSettings,
) -> SyncCoordinator:
    """Coordinator wired to in-memory collaborators."""
    return SyncCoordinator(
        memory_store,
        {Service.CLAUDE: fake_adapter},
        credentials,
        index_engine,
        statuses,
        sync_settings,
    )
