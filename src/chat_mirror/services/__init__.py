"""Service layer for chat_mirror.

This module exports the main service entry points.
"""

from chat_mirror.services.index_engine import IndexEngine
from chat_mirror.services.status_store import SyncStatusStore
from chat_mirror.services.sync_coordinator import (
    SyncCoordinator,
    SyncResult,
    select_conversations_to_sync,
)

__all__ = [
    "IndexEngine",
    "SyncCoordinator",
    "SyncResult",
    "SyncStatusStore",
    "select_conversations_to_sync",
]
