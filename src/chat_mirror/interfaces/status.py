"""Status reporter interface for chat_mirror."""

from typing import Protocol

from chat_mirror.models.sync import SyncStatus

__all__ = [
    "StatusReporter",
]


class StatusReporter(Protocol):
    """Observer notified synchronously on every sync status transition.

    Reporters must not block; the coordinator does not buffer or wait.
    """

    def __call__(self, status: SyncStatus) -> None: ...
