"""chat_mirror - Local mirror and fuzzy search for remote AI chat history.

This package provides tools for:
- Detecting Claude and ChatGPT accounts from session credentials
- Incrementally syncing their conversations into a local store
- Fuzzy, ranked full-text search with highlighted snippets

Example usage:
    from chat_mirror import ChatMirror, EnvCredentialProvider, MongoStore, Service

    # Simple usage - config loaded from .env automatically
    async with ChatMirror(
        store_class=MongoStore,
        credentials_class=EnvCredentialProvider,
    ) as mirror:
        account = await mirror.detect_account(Service.CLAUDE)
        await mirror.sync_account(account.id)
        results = await mirror.search("refactor")
"""

__version__ = "0.1.0"

# Service adapters
from chat_mirror.adapters import ChatGPTAdapter, ClaudeAdapter, ServiceAdapterRegistry
from chat_mirror.config import ChatMirrorConfig

# Errors
from chat_mirror.errors import (
    AuthError,
    ChatMirrorError,
    MalformedDataError,
    NetworkError,
    NotFoundError,
)

# Implementations
from chat_mirror.infra.credentials import EnvCredentialProvider, StaticCredentialProvider
from chat_mirror.infra.mongo.store import MongoStore

# Interfaces
from chat_mirror.interfaces.adapter import ServiceAdapterInterface
from chat_mirror.interfaces.credentials import CredentialProviderInterface
from chat_mirror.interfaces.status import StatusReporter
from chat_mirror.interfaces.storage import StoreInterface

# Models
from chat_mirror.models import (
    Account,
    Chat,
    Message,
    SearchResult,
    Service,
    SyncState,
    SyncStatus,
)

# Orchestrator
from chat_mirror.orchestrator import ChatMirror
from chat_mirror.services.sync_coordinator import SyncResult

__all__ = [  # noqa: RUF022
    # Orchestrator
    "ChatMirror",
    "ChatMirrorConfig",
    "SyncResult",
    # Implementations
    "MongoStore",
    "EnvCredentialProvider",
    "StaticCredentialProvider",
    # Service adapters
    "ChatGPTAdapter",
    "ClaudeAdapter",
    "ServiceAdapterRegistry",
    # Interfaces
    "CredentialProviderInterface",
    "ServiceAdapterInterface",
    "StatusReporter",
    "StoreInterface",
    # Models
    "Account",
    "Chat",
    "Message",
    "SearchResult",
    "Service",
    "SyncState",
    "SyncStatus",
    # Errors
    "AuthError",
    "ChatMirrorError",
    "MalformedDataError",
    "NetworkError",
    "NotFoundError",
]
