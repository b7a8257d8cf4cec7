"""Highlighted snippet extraction for search results.

Snippets locate query words with a deliberately simple approximate matcher
(substring first, then a positional character-overlap window) so that
typos accepted by the fuzzy index still produce a highlight.
"""

import re

from chat_mirror.models.chat import Chat

__all__ = [
    "HIGHLIGHT",
    "extract_snippets",
    "find_approximate",
]

HIGHLIGHT = "**"

CONTEXT_BEFORE = 40
CONTEXT_AFTER = 60
TRAILING_MATCH_CHARS = 2
FALLBACK_LENGTH = 100
OVERLAP_RATIO = 0.7
ELLIPSIS = "..."

_WHITESPACE = re.compile(r"\s+")


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def find_approximate(haystack: str, word: str) -> int:
    """Find the position of `word` in `haystack`, tolerating typos.

    Tries exact containment first. Otherwise slides a window of
    `len(word) + 1` characters over the haystack and accepts the first
    position where at least 70% of the word's characters line up with the
    window at the same offsets.

    Returns:
        Start index of the match, or -1
    """
    idx = haystack.find(word)
    if idx != -1:
        return idx

    word_len = len(word)
    needed = word_len * OVERLAP_RATIO
    for i in range(len(haystack) - word_len + 2):
        window = haystack[i : i + word_len + 1]
        aligned = sum(1 for a, b in zip(window, word) if a == b)
        if aligned >= needed:
            return i
    return -1


def _title_snippet(title: str, words: list[str]) -> str | None:
    title_lower = title.lower()
    for word in words:
        idx = find_approximate(title_lower, word)
        if idx != -1:
            end = idx + len(word)
            return f"Title: {title[:idx]}{HIGHLIGHT}{title[idx:end]}{HIGHLIGHT}{title[end:]}"
    return None


def _message_snippet(content: str, idx: int, word: str) -> str:
    start = max(0, idx - CONTEXT_BEFORE)
    match_end = min(idx + len(word) + TRAILING_MATCH_CHARS, len(content))
    end = min(len(content), match_end + CONTEXT_AFTER)

    parts = []
    if start > 0:
        parts.append(ELLIPSIS)
    parts.append(content[start:idx])
    parts.append(f"{HIGHLIGHT}{content[idx:match_end]}{HIGHLIGHT}")
    parts.append(content[match_end:end])
    if end < len(content):
        parts.append(ELLIPSIS)
    return _collapse("".join(parts))


def extract_snippets(chat: Chat, query: str, max_snippets: int = 3) -> list[str]:
    """Build up to `max_snippets` highlighted excerpts of `chat` for `query`.

    The title contributes at most one snippet. Messages are scanned in
    conversation order, one snippet per message at most, prefixed with
    "You: " or "AI: ". When nothing matches, the start of the first message
    is returned instead.
    """
    words = query.lower().split()
    snippets: list[str] = []
    cores: list[str] = []

    title_snippet = _title_snippet(chat.title, words)
    if title_snippet:
        snippets.append(title_snippet)
        cores.append(title_snippet)

    for message in chat.messages:
        if len(snippets) >= max_snippets:
            break

        content_lower = message.content.lower()
        for word in words:
            idx = find_approximate(content_lower, word)
            if idx == -1:
                continue
            core = _message_snippet(message.content, idx, word)
            if core and not any(core in existing for existing in cores):
                prefix = "You: " if message.role == "user" else "AI: "
                snippets.append(prefix + core)
                cores.append(core)
            break

    if not snippets and chat.messages:
        first = _collapse(chat.messages[0].content[:FALLBACK_LENGTH])
        if first:
            snippets.append(first + ELLIPSIS)

    return snippets[:max_snippets]
