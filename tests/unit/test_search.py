"""Unit tests for tokenization, the inverted index, ranking and snippets."""

from chat_mirror.models.search import IndexedDocument
from chat_mirror.search.inverted_index import InvertedIndex, SearchHit
from chat_mirror.search.ranking import compare_hits, rank_results
from chat_mirror.search.snippets import extract_snippets, find_approximate
from chat_mirror.search.tokenizer import tokenize


def _doc(doc_id: str, title: str, text: str = "", updated_at: int = 0, account: str = "a1"):
    return IndexedDocument(
        id=doc_id,
        title=title,
        full_text=text,
        account_id=account,
        service="claude",
        updated_at=updated_at,
    )


def _hit(doc_id: str, score: float, updated_at: int) -> SearchHit:
    return SearchHit(document=_doc(doc_id, doc_id, updated_at=updated_at), score=score, terms=())


class TestTokenize:
    """Tests for tokenize."""

    def test_splits_on_whitespace_and_punctuation(self) -> None:
        assert tokenize("Hello, world! (snake_case) foo-bar {x}") == [
            "hello",
            "world",
            "snake",
            "case",
            "foo",
            "bar",
            "x",
        ]

    def test_lowercases(self) -> None:
        assert tokenize("Refactor NOTES") == ["refactor", "notes"]

    def test_blank_text_has_no_tokens(self) -> None:
        assert tokenize("  ...  ") == []


class TestInvertedIndex:
    """Tests for InvertedIndex."""

    def test_exact_match_outscores_prefix_match(self) -> None:
        index = InvertedIndex(boosts={"title": 3.0})
        index.add(_doc("prefix", "Refactoring plan"))
        index.add(_doc("exact", "refactor notes"))

        hits = index.search("refactor")

        assert [h.document.id for h in hits] == ["exact", "prefix"]

    def test_fuzzy_match_tolerates_typos(self) -> None:
        index = InvertedIndex()
        index.add(_doc("k8s", "Cluster", "kubernetes rollout"))

        hits = index.search("kubernetse")

        assert [h.document.id for h in hits] == ["k8s"]
        assert hits[0].terms == ("kubernetes",)

    def test_fuzzy_disabled(self) -> None:
        index = InvertedIndex(fuzzy=0, prefix=False)
        index.add(_doc("k8s", "Cluster", "kubernetes rollout"))

        assert index.search("kubernetse") == []

    def test_title_boost(self) -> None:
        index = InvertedIndex(boosts={"title": 3.0})
        index.add(_doc("in-title", "python", "other stuff"))
        index.add(_doc("in-body", "other stuff", "python"))

        hits = index.search("python")

        assert hits[0].document.id == "in-title"
        assert hits[0].score > hits[1].score

    def test_terms_are_or_combined(self) -> None:
        index = InvertedIndex()
        index.add(_doc("both", "alpha beta"))
        index.add(_doc("one", "alpha gamma"))

        hits = index.search("alpha beta")

        assert [h.document.id for h in hits] == ["both", "one"]

    def test_filter_excludes_documents(self) -> None:
        index = InvertedIndex()
        index.add(_doc("mine", "budget", account="a1"))
        index.add(_doc("theirs", "budget", account="a2"))

        hits = index.search("budget", filter=lambda doc: doc.account_id == "a2")

        assert [h.document.id for h in hits] == ["theirs"]

    def test_add_replaces_existing_document(self) -> None:
        index = InvertedIndex()
        index.add(_doc("c1", "old title"))
        index.add(_doc("c1", "new title"))

        assert len(index) == 1
        assert index.search("old") == []
        assert [h.document.id for h in index.search("new")] == ["c1"]

    def test_remove(self) -> None:
        index = InvertedIndex()
        index.add(_doc("c1", "budget review"))

        assert index.remove("c1") is True
        assert index.remove("c1") is False
        assert "c1" not in index
        assert index.search("budget") == []
        assert index.term_count == 0

    def test_empty_index_returns_no_hits(self) -> None:
        assert InvertedIndex().search("anything") == []


class TestRanking:
    """Tests for the recency tie-break."""

    def test_near_tie_prefers_recent(self) -> None:
        ranked = rank_results([_hit("older", 10, 1000), _hit("newer", 9, 2000)])

        assert [h.document.id for h in ranked] == ["newer", "older"]

    def test_clear_winner_keeps_score_order(self) -> None:
        ranked = rank_results([_hit("older", 10, 1000), _hit("newer", 4, 2000)])

        assert [h.document.id for h in ranked] == ["older", "newer"]

    def test_compare_hits_threshold(self) -> None:
        a = _hit("a", 10, 1000)
        b = _hit("b", 8, 2000)

        # 20% apart is not a tie
        assert compare_hits(a, b) < 0
        assert compare_hits(a, b, tie_threshold=0.25) > 0

    def test_limit_keeps_best_scores(self) -> None:
        hits = [_hit(f"h{i}", float(i), i) for i in range(1, 61)]

        ranked = rank_results(hits, limit=50)

        assert len(ranked) == 50
        assert min(h.score for h in ranked) == 11.0


class TestFindApproximate:
    """Tests for the snippet matcher."""

    def test_exact_substring(self) -> None:
        assert find_approximate("we should refactor", "refactor") == 10

    def test_tolerates_transposed_letters(self) -> None:
        assert find_approximate("the refactor", "refactro") == 4

    def test_no_match(self) -> None:
        assert find_approximate("hello", "zebra") == -1

    def test_word_longer_than_haystack(self) -> None:
        assert find_approximate("hi", "refactor") == -1


class TestExtractSnippets:
    """Tests for extract_snippets."""

    def test_title_snippet_is_highlighted(self, make_chat) -> None:
        chat = make_chat("c1", "Refactoring plan", messages=[("user", "Nothing relevant")])

        snippets = extract_snippets(chat, "refactor")

        assert snippets[0] == "Title: **Refactor**ing plan"

    def test_message_snippet_has_role_prefix(self, make_chat) -> None:
        chat = make_chat(
            "c1",
            "Notes",
            messages=[("user", "Let's refactor the parser"), ("assistant", "Sure, refactor it")],
        )

        snippets = extract_snippets(chat, "refactor")

        assert snippets == [
            "You: Let's **refactor t**he parser",
            "AI: Sure, **refactor i**t",
        ]

    def test_long_message_gets_ellipses(self, make_chat) -> None:
        content = "a " * 40 + "needle" + " b" * 60
        chat = make_chat("c1", "Notes", messages=[("user", content)])

        (snippet,) = extract_snippets(chat, "needle")

        assert snippet.startswith("You: ...")
        assert snippet.endswith("...")
        assert "**needle b**" in snippet

    def test_at_most_three_snippets(self, make_chat) -> None:
        chat = make_chat(
            "c1",
            "Budget",
            messages=[("user", f"budget item {i}") for i in range(5)],
        )

        snippets = extract_snippets(chat, "budget")

        assert len(snippets) == 3
        assert snippets[0].startswith("Title: ")

    def test_duplicate_excerpts_are_dropped(self, make_chat) -> None:
        chat = make_chat(
            "c1",
            "Notes",
            messages=[("user", "the budget is fine"), ("assistant", "the budget is fine")],
        )

        assert extract_snippets(chat, "budget") == ["You: the **budget i**s fine"]

    def test_fallback_to_first_message(self, make_chat) -> None:
        chat = make_chat("c1", "Untitled", messages=[("user", "a" * 150)])

        assert extract_snippets(chat, "qqqq") == ["a" * 100 + "..."]

    def test_no_messages_and_no_match(self, make_chat) -> None:
        chat = make_chat("c1", "Untitled")

        assert extract_snippets(chat, "qqqq") == []
