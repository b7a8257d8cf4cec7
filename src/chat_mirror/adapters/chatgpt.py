"""ChatGPT service adapter for chat_mirror.

ChatGPT stores each conversation as a tree of message nodes (edits and
regenerations branch off) and encodes timestamps as unix seconds.
"""

import asyncio
from typing import Any, ClassVar

import httpx
from typing_extensions import override

from chat_mirror.adapters.http import get_json
from chat_mirror.adapters.registry import ServiceAdapterRegistry
from chat_mirror.config import ChatGPTSettings
from chat_mirror.errors import MalformedDataError
from chat_mirror.interfaces.adapter import ServiceAdapterInterface
from chat_mirror.logging import get_logger
from chat_mirror.models.account import Service
from chat_mirror.models.chat import Message
from chat_mirror.models.remote import (
    AccountIdentity,
    ConversationDetail,
    Credentials,
    RemoteConversation,
)
from chat_mirror.utils.timestamps import (
    iso_to_epoch_ms,
    optional_unix_to_epoch_ms,
    unix_to_epoch_ms,
)

__all__ = [
    "ChatGPTAdapter",
    "extract_tree_messages",
]

logger = get_logger(__name__)


def _parse_time(value: Any) -> int:
    """Unix seconds, with ISO strings accepted for newer payloads."""
    if isinstance(value, str):
        return iso_to_epoch_ms(value)
    return unix_to_epoch_ms(value)


def extract_tree_messages(mapping: dict[str, Any]) -> list[Message]:
    """Flatten a conversation tree into an ordered message list.

    Walks depth-first from the first node without a parent, visiting
    children in array order. Each node is visited at most once, so cycles
    and shared children terminate.

    Args:
        mapping: Node id -> {"message"?, "parent"?, "children"?}

    Returns:
        User and assistant messages with non-empty text, in traversal order

    Raises:
        MalformedDataError: If no node is a root
    """
    root_id = next(
        (
            node_id
            for node_id, node in mapping.items()
            if isinstance(node, dict) and not node.get("parent")
        ),
        None,
    )
    if root_id is None:
        raise MalformedDataError("Conversation tree has no root node")

    messages: list[Message] = []
    visited: set[str] = set()
    stack = [root_id]

    while stack:
        node_id = stack.pop()
        if node_id in visited:
            continue
        visited.add(node_id)

        node = mapping.get(node_id)
        if not isinstance(node, dict):
            continue

        msg = _parse_node_message(node.get("message"))
        if msg:
            messages.append(msg)

        # Reversed so the first child is popped (and walked) first
        children = node.get("children") or []
        stack.extend(reversed([c for c in children if isinstance(c, str)]))

    return messages


def _parse_node_message(raw_msg: Any) -> Message | None:
    """Parse the message attached to a tree node, if it should be kept."""
    if not isinstance(raw_msg, dict):
        return None

    role = (raw_msg.get("author") or {}).get("role")
    if role not in ("user", "assistant"):
        return None

    parts = (raw_msg.get("content") or {}).get("parts") or []
    # Non-text parts (images, tool payloads) are not searchable
    content = "\n".join(p for p in parts if isinstance(p, str))
    if not content.strip():
        return None

    return Message(
        role=role,
        content=content,
        timestamp=optional_unix_to_epoch_ms(raw_msg.get("create_time")),
    )


@ServiceAdapterRegistry.register
class ChatGPTAdapter(ServiceAdapterInterface):
    """Adapter for the ChatGPT backend API.

    List format (paginated by offset/limit):
        {
            "items": [
                {"id": "conv-id", "title": "Chat", "create_time": 1704067200.0,
                 "update_time": 1704067300.5}
            ],
            "total": 1, "limit": 100, "offset": 0
        }

    Detail format:
        {
            "title": "Chat",
            "create_time": 1704067200.0,
            "update_time": 1704067300.5,
            "mapping": {
                "node-id": {
                    "message": {
                        "author": {"role": "user"},
                        "content": {"parts": ["Hello"]},
                        "create_time": 1704067200.0
                    },
                    "parent": "parent-id",
                    "children": ["child-id"]
                }
            }
        }
    """

    service: ClassVar[Service] = Service.CHATGPT
    config_class: ClassVar[type[ChatGPTSettings]] = ChatGPTSettings

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: ChatGPTSettings | None = None,
    ) -> None:
        """Initialize adapter.

        Args:
            client: Shared async HTTP client
            settings: ChatGPT settings (loaded from environment if omitted)
        """
        self._client = client
        self._settings = settings or self.config_class()

    @property
    def _api(self) -> str:
        return self._settings.api_base_url.rstrip("/")

    @override
    async def fetch_conversation_list(
        self,
        credentials: Credentials,
    ) -> list[RemoteConversation]:
        """Fetch all conversations, page by page.

        Stops at the first page shorter than the page size and waits
        `page_delay` seconds between pages.
        """
        limit = self._settings.page_size
        offset = 0
        conversations: list[RemoteConversation] = []

        while True:
            data = await get_json(
                self._client,
                f"{self._api}/conversations",
                credentials,
                params={"offset": offset, "limit": limit},
            )
            if not isinstance(data, dict) or not isinstance(data.get("items"), list):
                raise MalformedDataError("ChatGPT conversation page has no items array")

            items = data["items"]
            for item in items:
                conversation = self._parse_summary(item)
                if conversation is not None:
                    conversations.append(conversation)

            logger.debug("chatgpt_page_fetched", offset=offset, items=len(items))
            if len(items) < limit:
                break
            offset += limit
            await asyncio.sleep(self._settings.page_delay)

        return conversations

    @override
    async def fetch_conversation_detail(
        self,
        credentials: Credentials,
        remote_id: str,
    ) -> ConversationDetail:
        data = await get_json(self._client, f"{self._api}/conversation/{remote_id}", credentials)
        if not isinstance(data, dict):
            raise MalformedDataError(f"ChatGPT conversation {remote_id} is not an object")
        return self.parse_detail(data)

    @override
    async def detect_account(self, credentials: Credentials) -> AccountIdentity:
        """Resolve the logged-in user via /me."""
        user = await get_json(self._client, f"{self._api}/me", credentials)
        if not isinstance(user, dict):
            raise MalformedDataError("ChatGPT user profile is not an object")

        email = user.get("email")
        return AccountIdentity(
            remote_account_id=user.get("id") or email or "chatgpt-user",
            display_name=user.get("name") or email or "ChatGPT User",
            email=email,
        )

    @override
    def conversation_url(self, remote_id: str) -> str:
        return f"{self._settings.app_base_url.rstrip('/')}/c/{remote_id}"

    def parse_detail(self, data: dict[str, Any]) -> ConversationDetail:
        """Normalize a conversation detail payload."""
        mapping = data.get("mapping")
        if not isinstance(mapping, dict):
            raise MalformedDataError("ChatGPT conversation has no mapping")

        return ConversationDetail(
            title=data.get("title") or "",
            created_at=_parse_time(data.get("create_time")),
            updated_at=_parse_time(data.get("update_time")),
            messages=extract_tree_messages(mapping),
        )

    def _parse_summary(self, item: Any) -> RemoteConversation | None:
        """Parse one list entry; entries without id or timestamps are skipped."""
        if not isinstance(item, dict) or not item.get("id"):
            logger.warning("chatgpt_list_entry_skipped", reason="missing id")
            return None
        try:
            updated_at = _parse_time(item.get("update_time"))
        except MalformedDataError:
            logger.warning("chatgpt_list_entry_skipped", id=item["id"], reason="update_time")
            return None
        try:
            created_at = _parse_time(item.get("create_time"))
        except MalformedDataError:
            created_at = updated_at

        return RemoteConversation(
            remote_id=item["id"],
            title=item.get("title") or "",
            created_at=created_at,
            updated_at=updated_at,
        )
