"""Canonical chat models for chat_mirror.

Both service adapters normalize into these records. A Chat is always
stored whole: a resync overwrites it, it is never merged.
"""

from typing import Literal

from pydantic import Field

from chat_mirror.models.account import Account, Service
from chat_mirror.models.base import WireModel

__all__ = [
    "Chat",
    "Message",
]


class Message(WireModel):
    """One message in a conversation.

    Attributes:
        role: Author role
        content: Message text, never empty after trimming
        timestamp: Epoch ms, when the service reports one
    """

    role: Literal["user", "assistant"]
    content: str
    timestamp: int | None = None


class Chat(WireModel):
    """A normalized, locally stored conversation.

    Attributes:
        id: "{service}-{account_id}-{chat_id}"
        service: Remote service tag
        account_id: Owning account id
        chat_id: Remote conversation id
        title: Conversation title
        created_at: Epoch ms
        updated_at: Epoch ms, non-decreasing across syncs
        messages: Messages in conversation order
        full_text: Message contents joined by blank lines (the indexed body)
        url: Link to the conversation in the service's web app
    """

    id: str
    service: Service
    account_id: str
    chat_id: str
    title: str
    created_at: int = Field(description="Epoch milliseconds")
    updated_at: int = Field(description="Epoch milliseconds")
    messages: list[Message] = Field(default_factory=list)
    full_text: str = ""
    url: str = ""

    @staticmethod
    def make_id(service: Service | str, account_id: str, remote_chat_id: str) -> str:
        """Build the globally unique chat id."""
        return f"{Service(service).value}-{account_id}-{remote_chat_id}"

    @staticmethod
    def join_messages(messages: list[Message]) -> str:
        """Concatenate message contents in order, separated by blank lines."""
        return "\n\n".join(message.content for message in messages)

    @classmethod
    def build(
        cls,
        account: Account,
        remote_id: str,
        *,
        title: str,
        created_at: int,
        updated_at: int,
        messages: list[Message],
        url: str,
    ) -> "Chat":
        """Assemble a canonical chat for an account from normalized fields."""
        return cls(
            id=cls.make_id(account.service, account.id, remote_id),
            service=account.service,
            account_id=account.id,
            chat_id=remote_id,
            title=title or "Untitled",
            created_at=created_at,
            updated_at=updated_at,
            messages=list(messages),
            full_text=cls.join_messages(messages),
            url=url,
        )
