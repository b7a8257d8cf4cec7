"""Unit tests for IndexEngine."""

from unittest.mock import AsyncMock

import pytest
from mocks.memory_store import InMemoryStore

from chat_mirror.config import SearchSettings
from chat_mirror.services.index_engine import IndexEngine


class TestIndexLifecycle:
    """Tests for building and maintaining the index."""

    @pytest.mark.asyncio
    async def test_search_before_build_returns_nothing(
        self,
        index_engine: IndexEngine,
        memory_store: InMemoryStore,
        make_chat,
    ) -> None:
        await memory_store.save_chat(make_chat("c1", "Budget"))

        assert index_engine.is_built is False
        assert index_engine.search("budget") == []

    @pytest.mark.asyncio
    async def test_init_builds_from_store(
        self,
        index_engine: IndexEngine,
        memory_store: InMemoryStore,
        make_chat,
    ) -> None:
        await memory_store.save_chat(make_chat("c1", "Budget"))
        await memory_store.save_chat(make_chat("c2", "Holiday"))

        await index_engine.init_search_index()

        assert index_engine.is_built is True
        assert index_engine.document_count == 2

    @pytest.mark.asyncio
    async def test_init_is_noop_when_count_unchanged(
        self,
        index_engine: IndexEngine,
        memory_store: InMemoryStore,
        make_chat,
    ) -> None:
        await memory_store.save_chat(make_chat("c1", "Budget"))
        memory_store.get_all_chats = AsyncMock(wraps=memory_store.get_all_chats)

        await index_engine.init_search_index()
        await index_engine.init_search_index()

        assert memory_store.get_all_chats.await_count == 1

    @pytest.mark.asyncio
    async def test_init_rebuilds_when_count_changes(
        self,
        index_engine: IndexEngine,
        memory_store: InMemoryStore,
        make_chat,
    ) -> None:
        await memory_store.save_chat(make_chat("c1", "Budget"))
        await index_engine.init_search_index()

        # Written behind the engine's back
        await memory_store.save_chat(make_chat("c2", "Budget draft"))
        await index_engine.init_search_index()

        assert index_engine.document_count == 2
        assert len(index_engine.search("budget")) == 2

    @pytest.mark.asyncio
    async def test_add_before_build_is_ignored(
        self,
        index_engine: IndexEngine,
        memory_store: InMemoryStore,
        make_chat,
    ) -> None:
        chat = make_chat("c1", "Budget")
        await index_engine.add_to_index(chat)
        assert index_engine.is_built is False

        await memory_store.save_chat(chat)
        await index_engine.init_search_index()

        assert [r.chat.id for r in index_engine.search("budget")] == [chat.id]

    @pytest.mark.asyncio
    async def test_add_replaces_previous_version(
        self,
        index_engine: IndexEngine,
        make_chat,
    ) -> None:
        await index_engine.init_search_index()

        await index_engine.add_to_index(make_chat("c1", "Budget", 100))
        await index_engine.add_to_index(make_chat("c1", "Holiday", 200))

        assert index_engine.document_count == 1
        assert index_engine.search("budget") == []
        assert index_engine.search("holiday")[0].chat.updated_at == 200

    @pytest.mark.asyncio
    async def test_remove_from_index(
        self,
        index_engine: IndexEngine,
        make_chat,
    ) -> None:
        await index_engine.init_search_index()
        chat = make_chat("c1", "Budget")
        await index_engine.add_to_index(chat)

        await index_engine.remove_from_index(chat.id)
        await index_engine.remove_from_index("unknown")

        assert index_engine.search("budget") == []

    @pytest.mark.asyncio
    async def test_rebuild_drops_deleted_chats(
        self,
        index_engine: IndexEngine,
        memory_store: InMemoryStore,
        make_chat,
    ) -> None:
        chat = make_chat("c1", "Budget")
        await memory_store.save_chat(chat)
        await index_engine.init_search_index()

        await memory_store.delete_chat(chat.id)
        await index_engine.rebuild_index()

        assert index_engine.document_count == 0


class TestIndexSearch:
    """Tests for IndexEngine.search."""

    @pytest.mark.asyncio
    async def test_blank_query_returns_nothing(
        self,
        index_engine: IndexEngine,
        memory_store: InMemoryStore,
        make_chat,
    ) -> None:
        await memory_store.save_chat(make_chat("c1", "Budget"))
        await index_engine.init_search_index()

        assert index_engine.search("") == []
        assert index_engine.search("   ") == []

    @pytest.mark.asyncio
    async def test_account_filter(
        self,
        index_engine: IndexEngine,
        memory_store: InMemoryStore,
        make_chat,
    ) -> None:
        await memory_store.save_chat(make_chat("c1", "Budget", account_id="claude-a"))
        await memory_store.save_chat(make_chat("c2", "Budget", account_id="claude-b"))
        await index_engine.init_search_index()

        filtered = index_engine.search("budget", account_ids=["claude-b"])
        unfiltered = index_engine.search("budget", account_ids=[])

        assert [r.chat.account_id for r in filtered] == ["claude-b"]
        assert len(unfiltered) == 2

    @pytest.mark.asyncio
    async def test_results_carry_snippets(
        self,
        index_engine: IndexEngine,
        memory_store: InMemoryStore,
        make_chat,
    ) -> None:
        await memory_store.save_chat(
            make_chat("c1", "Quarterly budget", messages=[("user", "Check the budget")])
        )
        await index_engine.init_search_index()

        (result,) = index_engine.search("budget")

        assert result.score > 0
        assert result.matches == [
            "Title: Quarterly **budget**",
            "You: Check the **budget**",
        ]

    @pytest.mark.asyncio
    async def test_result_limit(
        self,
        memory_store: InMemoryStore,
        make_chat,
    ) -> None:
        for i in range(5):
            await memory_store.save_chat(make_chat(f"c{i}", f"Budget {i}"))
        engine = IndexEngine(memory_store, SearchSettings(max_results=2))
        await engine.init_search_index()

        assert len(engine.search("budget")) == 2

    @pytest.mark.asyncio
    async def test_search_never_raises(
        self,
        index_engine: IndexEngine,
        memory_store: InMemoryStore,
        make_chat,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        await memory_store.save_chat(make_chat("c1", "Budget"))
        await index_engine.init_search_index()

        def boom(*args, **kwargs):
            raise RuntimeError("index corrupted")

        monkeypatch.setattr(index_engine._index, "search", boom)

        assert index_engine.search("budget") == []
