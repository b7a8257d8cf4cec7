"""Sync status table for chat_mirror.

This module owns the per-account SyncStatus table and fans every update out
to the subscribed status reporters.
"""

from chat_mirror.interfaces.status import StatusReporter
from chat_mirror.logging import get_logger
from chat_mirror.models.sync import SyncStatus

__all__ = [
    "SyncStatusStore",
]

logger = get_logger(__name__)


class SyncStatusStore:
    """Table of the current SyncStatus per account.

    Holds one status per account, overwritten in place. Reporters are called
    synchronously, in subscription order, after the table is updated.

    Example:
        statuses = SyncStatusStore()
        statuses.subscribe(lambda status: print(status.status))
        statuses.publish(SyncStatus(account_id="claude-org", status=SyncState.SYNCING))
    """

    def __init__(self) -> None:
        self._statuses: dict[str, SyncStatus] = {}
        self._reporters: list[StatusReporter] = []

    def subscribe(self, reporter: StatusReporter) -> None:
        """Register a reporter for all future transitions."""
        self._reporters.append(reporter)

    def unsubscribe(self, reporter: StatusReporter) -> None:
        if reporter in self._reporters:
            self._reporters.remove(reporter)

    def publish(self, status: SyncStatus) -> None:
        """Store a status and notify reporters.

        A failing reporter is logged and does not stop the others.
        """
        self._statuses[status.account_id] = status
        for reporter in list(self._reporters):
            try:
                reporter(status)
            except Exception as e:
                logger.warning(
                    "status_reporter_failed",
                    account_id=status.account_id,
                    error=str(e),
                )

    def get(self, account_id: str) -> SyncStatus | None:
        return self._statuses.get(account_id)

    def is_syncing(self, account_id: str) -> bool:
        status = self._statuses.get(account_id)
        return status is not None and status.is_syncing

    def snapshot(self) -> dict[str, SyncStatus]:
        """Copy of the whole table."""
        return dict(self._statuses)

    def discard(self, account_id: str) -> None:
        """Forget an account's status (used when the account is deleted)."""
        self._statuses.pop(account_id, None)
