"""In-memory inverted index with prefix and fuzzy term matching.

Documents are scored with BM25+ per field. Query terms are OR-combined:
a document matching any term is a hit, and each matching term adds to its
score. Every query term is expanded to the index terms it matches:

- exact match, weight 1
- prefix match (index term starts with the query term), down-weighted by
  how much longer the index term is
- fuzzy match within a Levenshtein budget of `fuzzy * len(term)` edits,
  down-weighted by the edit distance
"""

import math
from collections import Counter, defaultdict
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from rapidfuzz.distance import Levenshtein

from chat_mirror.models.search import IndexedDocument
from chat_mirror.search.tokenizer import tokenize

__all__ = [
    "FIELDS",
    "InvertedIndex",
    "SearchHit",
]

FIELDS: tuple[str, ...] = ("title", "full_text")

PREFIX_WEIGHT = 0.375
FUZZY_WEIGHT = 0.45
MAX_FUZZY_DISTANCE = 6

# BM25+ parameters
BM25_K = 1.2
BM25_B = 0.7
BM25_D = 0.5


@dataclass(frozen=True)
class SearchHit:
    """A scored document.

    Attributes:
        document: The matching document
        score: Summed relevance over all matched terms and fields
        terms: Index terms that matched
    """

    document: IndexedDocument
    score: float
    terms: tuple[str, ...]


def _bm25(
    term_freq: int,
    doc_freq: int,
    doc_count: int,
    field_length: int,
    avg_field_length: float,
) -> float:
    idf = math.log(1 + (doc_count - doc_freq + 0.5) / (doc_freq + 0.5))
    norm = BM25_K * (1 - BM25_B + BM25_B * field_length / avg_field_length)
    return idf * (BM25_D + term_freq * (BM25_K + 1) / (term_freq + norm))


class InvertedIndex:
    """Term -> document postings over the title and full_text fields.

    Example:
        index = InvertedIndex(boosts={"title": 3.0})
        index.add(IndexedDocument.from_chat(chat))
        hits = index.search("refactor plan")
    """

    def __init__(
        self,
        boosts: Mapping[str, float] | None = None,
        fuzzy: float = 0.2,
        prefix: bool = True,
    ) -> None:
        """Initialize an empty index.

        Args:
            boosts: Per-field score multipliers (default 1.0)
            fuzzy: Edit budget as a fraction of the query term length, 0 disables
            prefix: Whether query terms also match longer index terms
        """
        self._boosts = {field: 1.0 for field in FIELDS}
        self._boosts.update(boosts or {})
        self._fuzzy = fuzzy
        self._prefix = prefix

        self._documents: dict[str, IndexedDocument] = {}
        # term -> doc id -> field -> term frequency
        self._postings: dict[str, dict[str, dict[str, int]]] = {}
        self._field_lengths: dict[str, dict[str, int]] = {}
        self._total_field_length: dict[str, int] = dict.fromkeys(FIELDS, 0)

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._documents

    @property
    def term_count(self) -> int:
        return len(self._postings)

    def get(self, doc_id: str) -> IndexedDocument | None:
        return self._documents.get(doc_id)

    def add(self, document: IndexedDocument) -> None:
        """Index a document, replacing any document with the same id."""
        if document.id in self._documents:
            self.remove(document.id)

        self._documents[document.id] = document
        lengths: dict[str, int] = {}
        for field in FIELDS:
            tokens = tokenize(getattr(document, field))
            lengths[field] = len(tokens)
            self._total_field_length[field] += len(tokens)
            for term, freq in Counter(tokens).items():
                self._postings.setdefault(term, {}).setdefault(document.id, {})[field] = freq
        self._field_lengths[document.id] = lengths

    def remove(self, doc_id: str) -> bool:
        """Drop a document and its postings.

        Returns:
            True if the document was indexed
        """
        document = self._documents.pop(doc_id, None)
        if document is None:
            return False

        for field in FIELDS:
            for term in set(tokenize(getattr(document, field))):
                postings = self._postings.get(term)
                if postings is None:
                    continue
                postings.pop(doc_id, None)
                if not postings:
                    del self._postings[term]

        lengths = self._field_lengths.pop(doc_id, {})
        for field, length in lengths.items():
            self._total_field_length[field] -= length
        return True

    def clear(self) -> None:
        self._documents.clear()
        self._postings.clear()
        self._field_lengths.clear()
        self._total_field_length = dict.fromkeys(FIELDS, 0)

    def search(
        self,
        query: str,
        filter: Callable[[IndexedDocument], bool] | None = None,  # noqa: A002
    ) -> list[SearchHit]:
        """Score every document matching any query term.

        Args:
            query: Free text query
            filter: Optional predicate; documents failing it are excluded

        Returns:
            Hits sorted by descending score
        """
        doc_count = len(self._documents)
        if doc_count == 0:
            return []

        scores: dict[str, float] = defaultdict(float)
        matched: dict[str, set[str]] = defaultdict(set)
        allowed: dict[str, bool] = {}

        for query_term in dict.fromkeys(tokenize(query)):
            for index_term, weight in self._expand(query_term).items():
                postings = self._postings[index_term]
                for field in FIELDS:
                    field_postings = [
                        (doc_id, fields[field])
                        for doc_id, fields in postings.items()
                        if field in fields
                    ]
                    if not field_postings:
                        continue

                    doc_freq = len(field_postings)
                    avg_length = max(self._total_field_length[field] / doc_count, 1.0)
                    boost = self._boosts.get(field, 1.0)

                    for doc_id, term_freq in field_postings:
                        if filter is not None:
                            if doc_id not in allowed:
                                allowed[doc_id] = filter(self._documents[doc_id])
                            if not allowed[doc_id]:
                                continue
                        relevance = _bm25(
                            term_freq,
                            doc_freq,
                            doc_count,
                            self._field_lengths[doc_id][field],
                            avg_length,
                        )
                        scores[doc_id] += boost * weight * relevance
                        matched[doc_id].add(index_term)

        hits = [
            SearchHit(
                document=self._documents[doc_id],
                score=score,
                terms=tuple(sorted(matched[doc_id])),
            )
            for doc_id, score in scores.items()
        ]
        hits.sort(key=lambda hit: hit.score, reverse=True)
        return hits

    def _expand(self, query_term: str) -> dict[str, float]:
        """Map a query term to matching index terms and their weights."""
        weights: dict[str, float] = {}
        if query_term in self._postings:
            weights[query_term] = 1.0

        length = len(query_term)
        max_distance = 0
        if self._fuzzy > 0:
            max_distance = min(MAX_FUZZY_DISTANCE, math.floor(length * self._fuzzy + 0.5))

        for term in self._postings:
            if term == query_term:
                continue
            weight = 0.0
            if self._prefix and term.startswith(query_term):
                extra = len(term) - length
                weight = PREFIX_WEIGHT * length / (length + 0.3 * extra)
            if max_distance and abs(len(term) - length) <= max_distance:
                distance = Levenshtein.distance(query_term, term, score_cutoff=max_distance)
                if distance <= max_distance:
                    weight = max(weight, FUZZY_WEIGHT * length / (length + distance))
            if weight > 0:
                weights[term] = weight

        return weights
