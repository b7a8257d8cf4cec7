"""Public models for chat_mirror.

This module exports all canonical records and transfer objects.
"""

from chat_mirror.models.account import Account, Service
from chat_mirror.models.chat import Chat, Message
from chat_mirror.models.remote import (
    AccountIdentity,
    ConversationDetail,
    Credentials,
    RemoteConversation,
)
from chat_mirror.models.search import IndexedDocument, SearchResult
from chat_mirror.models.sync import SyncState, SyncStatus

__all__ = [
    "Account",
    "AccountIdentity",
    "Chat",
    "ConversationDetail",
    "Credentials",
    "IndexedDocument",
    "Message",
    "RemoteConversation",
    "SearchResult",
    "Service",
    "SyncState",
    "SyncStatus",
]
