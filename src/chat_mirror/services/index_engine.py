"""Search index service for chat_mirror.

This module keeps a process-local inverted index over every stored chat and
answers ranked, snippet-annotated searches. The index is disposable: it is
built lazily from the store and rebuilt whenever the stored chat count no
longer matches the count at the last build.
"""

import asyncio

from chat_mirror.config import SearchSettings
from chat_mirror.interfaces.storage import StoreInterface
from chat_mirror.logging import get_logger
from chat_mirror.models.chat import Chat
from chat_mirror.models.search import IndexedDocument, SearchResult
from chat_mirror.search.inverted_index import InvertedIndex
from chat_mirror.search.ranking import rank_results
from chat_mirror.search.snippets import extract_snippets

__all__ = [
    "IndexEngine",
]

logger = get_logger(__name__)


class IndexEngine:
    """Owner of the search index.

    All mutations (build, add, remove) go through one asyncio lock, so
    concurrent account syncs cannot interleave postings updates. Search is
    read-only and never raises; a missing index yields no results.

    Example:
        engine = IndexEngine(store)
        await engine.init_search_index()
        results = engine.search("refactor", account_ids=["claude-org"])
    """

    def __init__(
        self,
        store: StoreInterface,
        settings: SearchSettings | None = None,
    ) -> None:
        """Initialize engine.

        Args:
            store: Canonical store the index is built from
            settings: Search settings (loaded from environment if omitted)
        """
        self._store = store
        self._settings = settings or SearchSettings()
        self._index: InvertedIndex | None = None
        self._chats: dict[str, Chat] = {}
        self._last_indexed_count = 0
        self._lock = asyncio.Lock()

    @property
    def is_built(self) -> bool:
        return self._index is not None

    @property
    def document_count(self) -> int:
        return len(self._index) if self._index is not None else 0

    def _new_index(self) -> InvertedIndex:
        return InvertedIndex(
            boosts={"title": self._settings.title_boost, "full_text": 1.0},
            fuzzy=self._settings.fuzzy,
            prefix=True,
        )

    async def init_search_index(self) -> None:
        """Build the index unless it already covers the stored chat count.

        The count comparison is a staleness heuristic, not dirty tracking.
        """
        async with self._lock:
            await self._build(force=False)

    async def rebuild_index(self) -> None:
        """Rebuild the index from the store unconditionally."""
        async with self._lock:
            await self._build(force=True)

    async def _build(self, force: bool) -> None:
        if not force and self._index is not None:
            if await self._store.count_chats() == self._last_indexed_count:
                return

        chats = await self._store.get_all_chats()
        logger.info("search_index_building", chats=len(chats))
        index = self._new_index()
        cache: dict[str, Chat] = {}
        for chat in chats:
            index.add(IndexedDocument.from_chat(chat))
            cache[chat.id] = chat

        self._index = index
        self._chats = cache
        self._last_indexed_count = len(chats)
        logger.info("search_index_built", documents=len(index), terms=index.term_count)

    async def add_to_index(self, chat: Chat) -> None:
        """Index a chat, replacing any previous version with the same id."""
        async with self._lock:
            if self._index is None:
                logger.warning("search_index_not_initialized", chat_id=chat.id)
                return
            self._index.add(IndexedDocument.from_chat(chat))
            self._chats[chat.id] = chat

    async def remove_from_index(self, chat_id: str) -> None:
        """Drop a chat from the index; unknown ids are ignored."""
        async with self._lock:
            if self._index is None:
                return
            self._index.remove(chat_id)
            self._chats.pop(chat_id, None)

    def search(
        self,
        query: str,
        account_ids: list[str] | None = None,
    ) -> list[SearchResult]:
        """Ranked fuzzy search over titles and message text.

        Args:
            query: Free text query; blank queries return no results
            account_ids: Restrict results to these accounts (None or empty: all)

        Returns:
            Up to `max_results` results, each with up to `max_snippets` snippets
        """
        if not query.strip() or self._index is None:
            return []

        try:
            allowed = set(account_ids) if account_ids else None
            hits = self._index.search(
                query,
                filter=(lambda doc: doc.account_id in allowed) if allowed else None,
            )
            ranked = rank_results(
                hits,
                limit=self._settings.max_results,
                tie_threshold=self._settings.tie_threshold,
            )

            results: list[SearchResult] = []
            for hit in ranked:
                chat = self._chats.get(hit.document.id)
                if chat is None:
                    continue
                results.append(
                    SearchResult(
                        chat=chat,
                        score=hit.score,
                        matches=extract_snippets(chat, query, self._settings.max_snippets),
                    )
                )
            return results
        except Exception as e:
            logger.error("search_failed", query=query, error=str(e))
            return []
