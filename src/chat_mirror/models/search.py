"""Search models for chat_mirror."""

from pydantic import BaseModel

from chat_mirror.models.account import Service
from chat_mirror.models.base import WireModel
from chat_mirror.models.chat import Chat

__all__ = [
    "IndexedDocument",
    "SearchResult",
]


class IndexedDocument(BaseModel, frozen=True):
    """Projection of a Chat used for tokenization.

    Derived from the store and rebuildable at any time.
    """

    id: str
    title: str
    full_text: str
    account_id: str
    service: Service
    updated_at: int

    @classmethod
    def from_chat(cls, chat: Chat) -> "IndexedDocument":
        return cls(
            id=chat.id,
            title=chat.title,
            full_text=chat.full_text,
            account_id=chat.account_id,
            service=chat.service,
            updated_at=chat.updated_at,
        )


class SearchResult(WireModel):
    """A ranked search hit.

    Attributes:
        chat: The matching chat
        score: Raw relevance score from the index
        matches: Up to three highlighted snippets
    """

    chat: Chat
    score: float
    matches: list[str]
