"""Sync status models for chat_mirror.

SyncStatus is transient: one per account, overwritten in place, never persisted.
"""

from enum import StrEnum

from chat_mirror.models.base import WireModel

__all__ = [
    "SyncState",
    "SyncStatus",
]


class SyncState(StrEnum):
    """Lifecycle of an account sync."""

    IDLE = "idle"
    SYNCING = "syncing"
    ERROR = "error"


class SyncStatus(WireModel):
    """Current sync state of one account.

    Attributes:
        account_id: Account the status belongs to
        status: idle, syncing or error
        progress: Conversations processed so far in this run
        total: Conversations selected for this run
        error: Account-level failure message
        last_synced: Epoch ms of completion, set when a run finishes
        failed: Conversations skipped after a per-conversation failure
    """

    account_id: str
    status: SyncState
    progress: int | None = None
    total: int | None = None
    error: str | None = None
    last_synced: int | None = None
    failed: int | None = None

    @property
    def is_syncing(self) -> bool:
        return self.status == SyncState.SYNCING
