"""Service-agnostic projections of remote API payloads.

Adapters decode each service's wire format into these models before the
coordinator turns them into canonical Chat records.
"""

from pydantic import BaseModel, Field, SecretStr

from chat_mirror.models.chat import Message

__all__ = [
    "AccountIdentity",
    "ConversationDetail",
    "Credentials",
    "RemoteConversation",
]


class Credentials(BaseModel, frozen=True):
    """Opaque session credentials for one request batch.

    Attributes:
        header: Cookie header value, never inspected by chat_mirror
        org_id: Organization scope for services that need one
    """

    header: SecretStr
    org_id: str | None = None


class RemoteConversation(BaseModel, frozen=True):
    """One entry of a remote conversation list."""

    remote_id: str
    title: str = ""
    created_at: int = Field(description="Epoch milliseconds")
    updated_at: int = Field(description="Epoch milliseconds")


class ConversationDetail(BaseModel, frozen=True):
    """A fetched and normalized conversation, before it is bound to an account."""

    title: str = ""
    created_at: int = Field(description="Epoch milliseconds")
    updated_at: int = Field(description="Epoch milliseconds")
    messages: list[Message] = Field(default_factory=list)


class AccountIdentity(BaseModel, frozen=True):
    """Identity reported by a service for the current session."""

    remote_account_id: str
    display_name: str
    email: str | None = None
    org_id: str | None = None
