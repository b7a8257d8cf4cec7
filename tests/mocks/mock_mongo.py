"""In-process stand-in for the Motor collections behind MongoStore."""

from collections import defaultdict
from collections.abc import AsyncIterator
from types import SimpleNamespace
from typing import Any


def _matches(document: dict[str, Any], query: dict[str, Any] | None) -> bool:
    return all(document.get(k) == v for k, v in (query or {}).items())


class MockMongoCollection:
    """Documents kept in insertion order, keyed by their `id` field."""

    def __init__(self) -> None:
        self.documents: dict[str, dict[str, Any]] = {}
        self.bulk_calls = 0

    def _keys(self, query: dict[str, Any] | None) -> list[str]:
        return [key for key, doc in self.documents.items() if _matches(doc, query)]

    async def create_index(self, keys: Any, **kwargs: Any) -> str:
        return f"{keys}_1"

    async def replace_one(
        self,
        query: dict[str, Any],
        replacement: dict[str, Any],
        upsert: bool = False,
    ) -> SimpleNamespace:
        found = self._keys(query)[:1]
        for key in found:
            del self.documents[key]
        if found or upsert:
            self.documents[replacement["id"]] = dict(replacement)
        return SimpleNamespace(matched_count=len(found), modified_count=len(found))

    async def bulk_write(self, operations: list[Any], ordered: bool = True) -> SimpleNamespace:
        self.bulk_calls += 1
        for op in operations:
            await self.replace_one(op._filter, op._doc, upsert=op._upsert)
        return SimpleNamespace(upserted_count=len(operations))

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        keys = self._keys(query)
        if not keys:
            return None
        # Motor hands back the stored document with its ObjectId
        return {"_id": f"oid-{keys[0]}", **self.documents[keys[0]]}

    async def delete_one(self, query: dict[str, Any]) -> SimpleNamespace:
        keys = self._keys(query)[:1]
        for key in keys:
            del self.documents[key]
        return SimpleNamespace(deleted_count=len(keys))

    async def delete_many(self, query: dict[str, Any]) -> SimpleNamespace:
        keys = self._keys(query)
        for key in keys:
            del self.documents[key]
        return SimpleNamespace(deleted_count=len(keys))

    async def count_documents(self, query: dict[str, Any]) -> int:
        return len(self._keys(query))

    def find(self, query: dict[str, Any] | None = None) -> AsyncIterator[dict[str, Any]]:
        snapshot = [dict(self.documents[key]) for key in self._keys(query)]

        async def cursor() -> AsyncIterator[dict[str, Any]]:
            for doc in snapshot:
                yield {"_id": f"oid-{doc['id']}", **doc}

        return cursor()


class MockMongoClient:
    """Replaces chat_mirror's MongoClient wrapper in store tests."""

    def __init__(self) -> None:
        self.collections: defaultdict[str, MockMongoCollection] = defaultdict(
            MockMongoCollection
        )
        self.connected = False

    @property
    def accounts(self) -> MockMongoCollection:
        return self.collections["accounts"]

    @property
    def chats(self) -> MockMongoCollection:
        return self.collections["chats"]

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    async def create_indexes(self) -> None:
        pass
