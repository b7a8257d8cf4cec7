"""Account models for chat_mirror.

An account is one connected identity on one remote chat service.
"""

from enum import StrEnum

from pydantic import Field

from chat_mirror.models.base import WireModel

__all__ = [
    "Account",
    "Service",
]


class Service(StrEnum):
    """Remote chat services chat_mirror can mirror."""

    CLAUDE = "claude"
    CHATGPT = "chatgpt"


class Account(WireModel):
    """A connected remote account.

    Attributes:
        id: "{service}-{remote_account_id}", globally unique
        service: Remote service tag, selects the adapter
        display_name: Human readable account name
        email: Account email, when the service exposes one
        org_id: Organization id (required by Claude's conversation API)
        last_synced: Epoch ms of the last successful sync, 0 if never synced
        chat_count: Remote conversation total observed at the last list fetch
    """

    id: str
    service: Service
    display_name: str
    email: str | None = None
    org_id: str | None = None
    last_synced: int = Field(default=0, description="Epoch milliseconds")
    chat_count: int = 0

    @staticmethod
    def make_id(service: Service | str, remote_account_id: str) -> str:
        """Build the globally unique account id."""
        return f"{Service(service).value}-{remote_account_id}"

    @property
    def has_synced(self) -> bool:
        """True once the account completed at least one sync."""
        return self.last_synced > 0
