"""Service adapter interface for chat_mirror.

One implementation exists per remote service. The coordinator selects an
implementation by the account's service tag.
"""

from typing import ClassVar, Protocol, runtime_checkable

from chat_mirror.models.account import Service
from chat_mirror.models.remote import (
    AccountIdentity,
    ConversationDetail,
    Credentials,
    RemoteConversation,
)

__all__ = [
    "ServiceAdapterInterface",
]


@runtime_checkable
class ServiceAdapterInterface(Protocol):
    """Contract for fetching and normalizing one service's conversations.

    Adapters must not persist data. They only fetch and normalize.
    """

    service: ClassVar[Service]

    async def fetch_conversation_list(
        self,
        credentials: Credentials,
    ) -> list[RemoteConversation]:
        """Fetch every remote conversation summary, fully paginated.

        Args:
            credentials: Session credentials

        Returns:
            Conversation summaries in remote order

        Raises:
            AuthError: If the credentials are unusable for this service
            NetworkError: On a non-success status or transport failure
            MalformedDataError: If the response cannot be decoded
        """
        ...

    async def fetch_conversation_detail(
        self,
        credentials: Credentials,
        remote_id: str,
    ) -> ConversationDetail:
        """Fetch one conversation and normalize its messages.

        Args:
            credentials: Session credentials
            remote_id: Remote conversation ID

        Returns:
            Normalized conversation detail

        Raises:
            NetworkError: On a non-success status or transport failure
            MalformedDataError: If the response cannot be normalized
        """
        ...

    async def detect_account(self, credentials: Credentials) -> AccountIdentity:
        """Ask the service who the credentials belong to.

        Args:
            credentials: Session credentials

        Returns:
            Identity of the logged-in account
        """
        ...

    def conversation_url(self, remote_id: str) -> str:
        """Web app link for a conversation."""
        ...
