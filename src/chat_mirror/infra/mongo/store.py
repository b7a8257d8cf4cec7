"""MongoDB store for chat_mirror.

This module provides the StoreInterface implementation backed by MongoDB.
"""

from typing import Any, Self

from chat_mirror.config import MongoSettings
from chat_mirror.infra.mongo.client import MongoClient
from chat_mirror.interfaces.storage import StoreInterface
from chat_mirror.logging import get_logger
from chat_mirror.models.account import Account
from chat_mirror.models.chat import Chat
from chat_mirror.utils.lazy_import import lazy_import

__all__ = [
    "MongoStore",
]

logger = get_logger(__name__)

get_replace_one = lazy_import("pymongo", "ReplaceOne")


class MongoStore(StoreInterface):
    """MongoDB implementation of StoreInterface.

    Accounts and chats live in two collections keyed by their `id` field,
    with a secondary index on `chats.account_id`.
    """

    config_class = MongoSettings

    def __init__(self, client: MongoClient) -> None:
        """Initialize store with MongoDB client.

        Args:
            client: Connected MongoClient instance
        """
        self._client = client
        self._owns_client = False

    @classmethod
    async def from_config(cls, config: MongoSettings) -> Self:
        """Factory method for ChatMirror instantiation.

        Creates a MongoClient, connects, creates indexes, and returns the store.

        Args:
            config: MongoDB settings

        Returns:
            Connected MongoStore instance
        """
        client = MongoClient(config)
        await client.connect()
        await client.create_indexes()

        instance = cls(client)
        instance._owns_client = True
        return instance

    @classmethod
    async def from_dict(cls, config: dict[str, Any]) -> Self:
        """Factory method for custom config dict.

        Args:
            config: Dictionary with MongoDB settings

        Returns:
            Connected MongoStore instance
        """
        return await cls.from_config(MongoSettings(**config))

    async def close(self) -> None:
        """Close owned resources."""
        if self._owns_client and self._client:
            await self._client.disconnect()

    # Account operations
    async def get_account(self, account_id: str) -> Account | None:
        doc = await self._client.accounts.find_one({"id": account_id})
        return self._doc_to_account(doc) if doc else None

    async def save_account(self, account: Account) -> None:
        await self._client.accounts.replace_one(
            {"id": account.id},
            account.model_dump(mode="json"),
            upsert=True,
        )

    async def delete_account(self, account_id: str) -> None:
        """Delete an account and cascade to its chats."""
        await self._client.accounts.delete_one({"id": account_id})
        result = await self._client.chats.delete_many({"account_id": account_id})
        logger.info(
            "account_deleted",
            account_id=account_id,
            chats_deleted=result.deleted_count,
        )

    async def get_all_accounts(self) -> list[Account]:
        cursor = self._client.accounts.find({})
        return [self._doc_to_account(doc) async for doc in cursor]

    # Chat operations
    async def get_chat(self, chat_id: str) -> Chat | None:
        doc = await self._client.chats.find_one({"id": chat_id})
        return self._doc_to_chat(doc) if doc else None

    async def save_chat(self, chat: Chat) -> None:
        await self._client.chats.replace_one(
            {"id": chat.id},
            chat.model_dump(mode="json"),
            upsert=True,
        )

    async def save_chats(self, chats: list[Chat]) -> None:
        """Upsert chats in a single unordered bulk write.

        Bulk-load path only; sync goes through `save_chat`.
        """
        if not chats:
            return
        ReplaceOne = get_replace_one()  # noqa: N806
        operations = [
            ReplaceOne({"id": chat.id}, chat.model_dump(mode="json"), upsert=True)
            for chat in chats
        ]
        await self._client.chats.bulk_write(operations, ordered=False)

    async def get_chats_by_account(self, account_id: str) -> list[Chat]:
        cursor = self._client.chats.find({"account_id": account_id})
        return [self._doc_to_chat(doc) async for doc in cursor]

    async def get_all_chats(self) -> list[Chat]:
        cursor = self._client.chats.find({})
        return [self._doc_to_chat(doc) async for doc in cursor]

    async def count_chats(self) -> int:
        return await self._client.chats.count_documents({})

    async def delete_chat(self, chat_id: str) -> None:
        await self._client.chats.delete_one({"id": chat_id})

    # Conversion helpers
    def _doc_to_account(self, doc: dict[str, Any]) -> Account:
        return Account.model_validate({k: v for k, v in doc.items() if k != "_id"})

    def _doc_to_chat(self, doc: dict[str, Any]) -> Chat:
        return Chat.model_validate({k: v for k, v in doc.items() if k != "_id"})
