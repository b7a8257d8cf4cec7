"""MongoDB connection for chat_mirror.

Wraps a Motor client and exposes the two collections the store uses.
"""

from typing import TYPE_CHECKING, Any

from chat_mirror.config import MongoSettings
from chat_mirror.logging import get_logger
from chat_mirror.utils.lazy_import import lazy_import

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase

__all__ = [
    "COLLECTION_INDEXES",
    "MongoClient",
]

logger = get_logger(__name__)

get_async_motor = lazy_import("motor.motor_asyncio", "AsyncIOMotorClient")

# collection -> (field, unique)
COLLECTION_INDEXES: dict[str, tuple[tuple[str, bool], ...]] = {
    "accounts": (("id", True), ("service", False)),
    "chats": (
        ("id", True),
        ("account_id", False),
        ("service", False),
        ("updated_at", False),
    ),
}


class MongoClient:
    """Connection holder for the accounts and chats collections.

    Example:
        async with MongoClient(MongoSettings()) as client:
            doc = await client.accounts.find_one({"id": "claude-org-uuid"})
    """

    def __init__(self, settings: MongoSettings, motor_client: Any | None = None) -> None:
        """Initialize client.

        Args:
            settings: Connection settings
            motor_client: Existing AsyncIOMotorClient to reuse; it is not
                closed on disconnect
        """
        self._settings = settings
        self._motor = motor_client
        self._owns_motor = motor_client is None
        self._db = None

    async def connect(self) -> None:
        """Open the connection (if needed) and verify it with a ping."""
        if self._db is not None:
            return
        if self._motor is None:
            AsyncIOMotorClient = get_async_motor()  # noqa: N806
            self._motor = AsyncIOMotorClient(self._settings.uri.get_secret_value())

        await self._motor.admin.command("ping")
        self._db = self._motor[self._settings.database]
        logger.info("connected_to_mongodb", database=self._settings.database)

    async def disconnect(self) -> None:
        if self._db is None:
            return
        if self._owns_motor and self._motor is not None:
            self._motor.close()
            self._motor = None
        self._db = None
        logger.info("disconnected_from_mongodb")

    @property
    def db(self) -> "AsyncIOMotorDatabase[dict[str, Any]]":
        """Database handle.

        Raises:
            RuntimeError: If not connected
        """
        if self._db is None:
            raise RuntimeError("MongoClient not connected. Call connect() first.")
        return self._db

    def collection(self, name: str) -> "AsyncIOMotorCollection[dict[str, Any]]":
        """Collection by logical name, with the configured prefix applied."""
        return self.db[f"{self._settings.collection_prefix}{name}"]

    @property
    def accounts(self) -> "AsyncIOMotorCollection[dict[str, Any]]":
        return self.collection("accounts")

    @property
    def chats(self) -> "AsyncIOMotorCollection[dict[str, Any]]":
        return self.collection("chats")

    async def create_indexes(self) -> None:
        """Create the unique id indexes and the secondary lookups."""
        for name, indexes in COLLECTION_INDEXES.items():
            for field, unique in indexes:
                await self.collection(name).create_index(field, unique=unique)
        logger.info("created_mongodb_indexes", collections=list(COLLECTION_INDEXES))

    async def __aenter__(self) -> "MongoClient":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.disconnect()
