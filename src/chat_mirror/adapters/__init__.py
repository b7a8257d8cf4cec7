"""Service adapters for chat_mirror.

Importing this package registers the built-in adapters.
"""

from chat_mirror.adapters.chatgpt import ChatGPTAdapter
from chat_mirror.adapters.claude import ClaudeAdapter
from chat_mirror.adapters.registry import ServiceAdapterRegistry

__all__ = [
    "ChatGPTAdapter",
    "ClaudeAdapter",
    "ServiceAdapterRegistry",
]
