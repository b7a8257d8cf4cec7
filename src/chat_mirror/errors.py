"""Error taxonomy for chat_mirror.

Account-level errors abort a sync and surface in the account's SyncStatus.
The same classes raised while handling a single conversation are logged
and skipped by the coordinator.
"""

__all__ = [
    "AuthError",
    "ChatMirrorError",
    "MalformedDataError",
    "NetworkError",
    "NotFoundError",
]


class ChatMirrorError(Exception):
    """Base class for all chat_mirror errors."""


class AuthError(ChatMirrorError):
    """No usable credentials for a remote service."""


class NetworkError(ChatMirrorError):
    """Non-success HTTP status or transport failure.

    Attributes:
        status_code: HTTP status, or None when the request never completed
        url: Requested URL
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class NotFoundError(ChatMirrorError):
    """An operation referenced an unknown account, chat or service."""


class MalformedDataError(ChatMirrorError):
    """A remote response is missing an expected field or cannot be decoded."""
