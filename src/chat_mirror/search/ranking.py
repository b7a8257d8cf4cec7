"""Result ordering: relevance first, recency among near-ties."""

from collections.abc import Sequence
from functools import cmp_to_key

from chat_mirror.search.inverted_index import SearchHit

__all__ = [
    "compare_hits",
    "rank_results",
]


def compare_hits(a: SearchHit, b: SearchHit, tie_threshold: float = 0.2) -> int:
    """Order two hits.

    If the scores differ by less than `tie_threshold` relative to the larger
    one, the more recently updated hit comes first; otherwise the higher
    score does.
    """
    high = max(a.score, b.score)
    score_diff = abs(a.score - b.score) / high if high > 0 else 0.0
    if score_diff < tie_threshold:
        return b.document.updated_at - a.document.updated_at
    return -1 if a.score > b.score else 1


def rank_results(
    hits: Sequence[SearchHit],
    limit: int = 50,
    tie_threshold: float = 0.2,
) -> list[SearchHit]:
    """Keep the `limit` best hits by score, then apply the recency tie-break."""
    top = sorted(hits, key=lambda hit: hit.score, reverse=True)[:limit]
    return sorted(top, key=cmp_to_key(lambda a, b: compare_hits(a, b, tie_threshold)))
