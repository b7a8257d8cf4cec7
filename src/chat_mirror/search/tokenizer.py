"""Tokenization shared by indexing and querying."""

import re

__all__ = [
    "tokenize",
]

_SEPARATORS = re.compile(r"""[\s\-_.,!?;:'"()\[\]{}]+""")


def tokenize(text: str) -> list[str]:
    """Lowercase and split on whitespace and punctuation, dropping empty tokens."""
    return [token for token in _SEPARATORS.split(text.lower()) if token]
