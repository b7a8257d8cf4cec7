"""Search primitives for chat_mirror.

Tokenization, the inverted index, result ranking and snippet extraction.
The IndexEngine service composes them over the canonical store.
"""

from chat_mirror.search.inverted_index import FIELDS, InvertedIndex, SearchHit
from chat_mirror.search.ranking import compare_hits, rank_results
from chat_mirror.search.snippets import HIGHLIGHT, extract_snippets, find_approximate
from chat_mirror.search.tokenizer import tokenize

__all__ = [
    "FIELDS",
    "HIGHLIGHT",
    "InvertedIndex",
    "SearchHit",
    "compare_hits",
    "extract_snippets",
    "find_approximate",
    "rank_results",
    "tokenize",
]
