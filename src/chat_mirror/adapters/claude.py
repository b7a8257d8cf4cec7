"""Claude service adapter for chat_mirror.

Claude keeps a linear message history per conversation and encodes
timestamps as ISO-8601 strings.
"""

from typing import Any, ClassVar

import httpx
from typing_extensions import override

from chat_mirror.adapters.http import get_json
from chat_mirror.adapters.registry import ServiceAdapterRegistry
from chat_mirror.config import ClaudeSettings
from chat_mirror.errors import AuthError, MalformedDataError, NotFoundError
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
from chat_mirror.utils.timestamps import iso_to_epoch_ms, optional_iso_to_epoch_ms

__all__ = [
    "ClaudeAdapter",
]

logger = get_logger(__name__)


@ServiceAdapterRegistry.register
class ClaudeAdapter(ServiceAdapterInterface):
    """Adapter for the Claude web API.

    Conversations are scoped to an organization, so the credentials must
    carry an org id.

    List format:
        [
            {
                "uuid": "conversation-id",
                "name": "Chat Title",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-02T00:00:00Z"
            }
        ]

    Detail format:
        {
            "uuid": "conversation-id",
            "name": "Chat Title",
            "created_at": "2024-01-01T00:00:00Z",
            "updated_at": "2024-01-02T00:00:00Z",
            "chat_messages": [
                {"sender": "human", "text": "Hello", "created_at": "..."}
            ]
        }
    """

    service: ClassVar[Service] = Service.CLAUDE
    config_class: ClassVar[type[ClaudeSettings]] = ClaudeSettings

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: ClaudeSettings | None = None,
    ) -> None:
        """Initialize adapter.

        Args:
            client: Shared async HTTP client
            settings: Claude settings (loaded from environment if omitted)
        """
        self._client = client
        self._settings = settings or self.config_class()

    @property
    def _api(self) -> str:
        return self._settings.api_base_url.rstrip("/")

    def _org_id(self, credentials: Credentials) -> str:
        if not credentials.org_id:
            raise AuthError("Claude account has no organization id")
        return credentials.org_id

    @override
    async def fetch_conversation_list(
        self,
        credentials: Credentials,
    ) -> list[RemoteConversation]:
        """Fetch all conversations of the organization.

        The endpoint returns the whole list in one response, so there is a
        single page.
        """
        url = f"{self._api}/organizations/{self._org_id(credentials)}/chat_conversations"
        data = await get_json(self._client, url, credentials)
        if not isinstance(data, list):
            raise MalformedDataError("Claude conversation list is not an array")

        conversations: list[RemoteConversation] = []
        for item in data:
            conversation = self._parse_summary(item)
            if conversation is not None:
                conversations.append(conversation)
        return conversations

    @override
    async def fetch_conversation_detail(
        self,
        credentials: Credentials,
        remote_id: str,
    ) -> ConversationDetail:
        url = (
            f"{self._api}/organizations/{self._org_id(credentials)}"
            f"/chat_conversations/{remote_id}"
        )
        data = await get_json(self._client, url, credentials)
        if not isinstance(data, dict):
            raise MalformedDataError(f"Claude conversation {remote_id} is not an object")
        return self.parse_detail(data)

    @override
    async def detect_account(self, credentials: Credentials) -> AccountIdentity:
        """Resolve the primary organization of the session."""
        data = await get_json(self._client, f"{self._api}/organizations", credentials)
        if not isinstance(data, list):
            raise MalformedDataError("Claude organization list is not an array")
        if not data or not isinstance(data[0], dict) or not data[0].get("uuid"):
            raise NotFoundError("No Claude organizations found")

        org = data[0]
        logger.info("claude_org_detected", org_name=org.get("name"))
        return AccountIdentity(
            remote_account_id=org["uuid"],
            display_name=org.get("name") or "Claude Account",
            org_id=org["uuid"],
        )

    @override
    def conversation_url(self, remote_id: str) -> str:
        return f"{self._settings.app_base_url.rstrip('/')}/chat/{remote_id}"

    def parse_detail(self, data: dict[str, Any]) -> ConversationDetail:
        """Normalize a conversation detail payload.

        Messages keep their remote order; messages that are empty after
        trimming are dropped.
        """
        messages: list[Message] = []
        for raw_msg in data.get("chat_messages") or []:
            if not isinstance(raw_msg, dict):
                continue
            msg = self._parse_message(raw_msg)
            if msg:
                messages.append(msg)

        return ConversationDetail(
            title=data.get("name") or "",
            created_at=iso_to_epoch_ms(data.get("created_at")),
            updated_at=iso_to_epoch_ms(data.get("updated_at")),
            messages=messages,
        )

    def _parse_summary(self, item: Any) -> RemoteConversation | None:
        """Parse one list entry; entries without id or timestamps are skipped."""
        if not isinstance(item, dict) or not item.get("uuid"):
            logger.warning("claude_list_entry_skipped", reason="missing uuid")
            return None

        updated_at = optional_iso_to_epoch_ms(item.get("updated_at"))
        if updated_at is None:
            logger.warning("claude_list_entry_skipped", uuid=item["uuid"], reason="updated_at")
            return None
        created_at = optional_iso_to_epoch_ms(item.get("created_at"))

        return RemoteConversation(
            remote_id=item["uuid"],
            title=item.get("name") or "",
            created_at=created_at if created_at is not None else updated_at,
            updated_at=updated_at,
        )

    def _parse_message(self, raw_msg: dict[str, Any]) -> Message | None:
        """Parse a single message."""
        content = raw_msg.get("text") or ""
        if not content and isinstance(raw_msg.get("content"), list):
            content = self._extract_text_from_blocks(raw_msg["content"])
        if not isinstance(content, str) or not content.strip():
            return None

        role = "user" if raw_msg.get("sender") == "human" else "assistant"
        return Message(
            role=role,
            content=content,
            timestamp=optional_iso_to_epoch_ms(raw_msg.get("created_at")),
        )

    def _extract_text_from_blocks(self, blocks: list[Any]) -> str:
        """Extract text from content blocks format."""
        texts = []
        for block in blocks:
            if isinstance(block, str):
                texts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                texts.append(block.get("text") or "")
        return "\n".join(texts)
