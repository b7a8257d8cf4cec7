"""Store interface for chat_mirror.

This module defines the Protocol for the durable key-value store that holds
accounts and canonical chats.
"""

from typing import ClassVar, Protocol, runtime_checkable

from chat_mirror.models.account import Account
from chat_mirror.models.chat import Chat

__all__ = [
    "StoreInterface",
]


@runtime_checkable
class StoreInterface(Protocol):
    """Contract for durable account and chat storage.

    Every operation is atomic per call. Implementations provide a secondary
    lookup of chats by account id.
    """

    config_class: ClassVar[type | None] = None

    # Account operations
    async def get_account(self, account_id: str) -> Account | None:
        """Get an account by ID.

        Args:
            account_id: Account ID to retrieve

        Returns:
            Account if found, None otherwise
        """
        ...

    async def save_account(self, account: Account) -> None:
        """Insert or replace an account.

        Args:
            account: Account to save
        """
        ...

    async def delete_account(self, account_id: str) -> None:
        """Delete an account and every chat that belongs to it.

        Args:
            account_id: Account ID to delete
        """
        ...

    async def get_all_accounts(self) -> list[Account]:
        """Get all accounts.

        Returns:
            List of accounts
        """
        ...

    # Chat operations
    async def get_chat(self, chat_id: str) -> Chat | None:
        """Get a chat by its canonical ID.

        Args:
            chat_id: Canonical chat ID

        Returns:
            Chat if found, None otherwise
        """
        ...

    async def save_chat(self, chat: Chat) -> None:
        """Insert or replace a chat.

        Args:
            chat: Chat to save
        """
        ...

    async def save_chats(self, chats: list[Chat]) -> None:
        """Insert or replace several chats in one batch.

        Optional bulk-load capability for callers importing many chats at once.
        Sync does not use it; it saves chats one at a time so each saved chat is
        indexed and reported as progress before the next fetch.

        Args:
            chats: Chats to save
        """
        ...

    async def get_chats_by_account(self, account_id: str) -> list[Chat]:
        """Get all chats for an account.

        Args:
            account_id: Owning account ID

        Returns:
            List of chats
        """
        ...

    async def get_all_chats(self) -> list[Chat]:
        """Get every stored chat.

        Returns:
            List of chats
        """
        ...

    async def count_chats(self) -> int:
        """Count stored chats.

        Returns:
            Number of chats across all accounts
        """
        ...

    async def delete_chat(self, chat_id: str) -> None:
        """Delete a chat by its canonical ID.

        Args:
            chat_id: Canonical chat ID
        """
        ...
