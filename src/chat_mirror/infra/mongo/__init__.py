"""MongoDB-backed storage for chat_mirror."""

from chat_mirror.infra.mongo.client import MongoClient
from chat_mirror.infra.mongo.store import MongoStore

__all__ = [
    "MongoClient",
    "MongoStore",
]
