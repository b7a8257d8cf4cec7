"""In-memory StoreInterface implementation for testing."""

from typing import Any, Self

from chat_mirror.models.account import Account
from chat_mirror.models.chat import Chat


class InMemoryStore:
    """Dict-backed store.

    Uses config_class = None so ChatMirror builds it through from_dict.
    """

    config_class = None

    def __init__(self) -> None:
        self.accounts: dict[str, Account] = {}
        self.chats: dict[str, Chat] = {}
        self.saved_chat_ids: list[str] = []
        self.closed = False

    @classmethod
    async def from_dict(cls, config: dict[str, Any]) -> Self:
        store = cls()
        for account in config.get("accounts", []):
            await store.save_account(account)
        for chat in config.get("chats", []):
            await store.save_chat(chat)
        store.saved_chat_ids.clear()
        return store

    async def close(self) -> None:
        self.closed = True

    async def get_account(self, account_id: str) -> Account | None:
        return self.accounts.get(account_id)

    async def save_account(self, account: Account) -> None:
        self.accounts[account.id] = account

    async def delete_account(self, account_id: str) -> None:
        self.accounts.pop(account_id, None)
        for chat_id in [c.id for c in self.chats.values() if c.account_id == account_id]:
            del self.chats[chat_id]

    async def get_all_accounts(self) -> list[Account]:
        return list(self.accounts.values())

    async def get_chat(self, chat_id: str) -> Chat | None:
        return self.chats.get(chat_id)

    async def save_chat(self, chat: Chat) -> None:
        self.chats[chat.id] = chat
        self.saved_chat_ids.append(chat.id)

    async def save_chats(self, chats: list[Chat]) -> None:
        for chat in chats:
            await self.save_chat(chat)

    async def get_chats_by_account(self, account_id: str) -> list[Chat]:
        return [c for c in self.chats.values() if c.account_id == account_id]

    async def get_all_chats(self) -> list[Chat]:
        return list(self.chats.values())

    async def count_chats(self) -> int:
        return len(self.chats)

    async def delete_chat(self, chat_id: str) -> None:
        self.chats.pop(chat_id, None)
