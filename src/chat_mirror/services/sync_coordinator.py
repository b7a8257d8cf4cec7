"""Incremental sync service for chat_mirror.

This module drives one account's sync: list remote conversations, keep the
ones that are new or changed, fetch and normalize those, persist and index
them, and publish progress along the way.
"""

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from chat_mirror.config import SyncSettings
from chat_mirror.errors import AuthError, NotFoundError
from chat_mirror.interfaces.adapter import ServiceAdapterInterface
from chat_mirror.interfaces.credentials import CredentialProviderInterface
from chat_mirror.interfaces.storage import StoreInterface
from chat_mirror.logging import bind_sync_context, get_logger
from chat_mirror.models.account import Account, Service
from chat_mirror.models.chat import Chat
from chat_mirror.models.remote import Credentials, RemoteConversation
from chat_mirror.models.sync import SyncState, SyncStatus
from chat_mirror.services.index_engine import IndexEngine
from chat_mirror.services.status_store import SyncStatusStore
from chat_mirror.utils.timestamps import now_ms

__all__ = [
    "SyncCoordinator",
    "SyncResult",
    "select_conversations_to_sync",
]

logger = get_logger(__name__)


@dataclass
class SyncResult:
    """Statistics from one account sync."""

    account_id: str
    remote_total: int = 0
    to_sync: int = 0
    synced: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)


def select_conversations_to_sync(
    remote: Iterable[RemoteConversation],
    existing: Iterable[Chat],
) -> list[RemoteConversation]:
    """Keep conversations that are new or changed remotely.

    A conversation is kept iff no local chat has its remote id, or the
    remote `updated_at` is strictly greater than the stored one. List order
    is preserved.
    """
    stored = {chat.chat_id: chat.updated_at for chat in existing}
    return [
        conversation
        for conversation in remote
        if conversation.remote_id not in stored
        or conversation.updated_at > stored[conversation.remote_id]
    ]


class SyncCoordinator:
    """Runs incremental syncs, at most one in flight per account.

    Example:
        coordinator = SyncCoordinator(store, adapters, credentials, index, statuses)
        result = await coordinator.sync_account("claude-org-uuid")
    """

    def __init__(
        self,
        store: StoreInterface,
        adapters: Mapping[Service, ServiceAdapterInterface],
        credentials: CredentialProviderInterface,
        index: IndexEngine,
        statuses: SyncStatusStore,
        settings: SyncSettings | None = None,
    ) -> None:
        """Initialize coordinator with dependencies.

        Args:
            store: Canonical store
            adapters: Adapter per service tag
            credentials: Credential provider
            index: Search index to feed synced chats into
            statuses: Status table the coordinator publishes to
            settings: Sync settings (loaded from environment if omitted)
        """
        self._store = store
        self._adapters = adapters
        self._credentials = credentials
        self._index = index
        self._statuses = statuses
        self._settings = settings or SyncSettings()
        self._cancelled: set[str] = set()

    def adapter_for(self, service: Service) -> ServiceAdapterInterface:
        """Select the adapter for a service tag.

        Raises:
            NotFoundError: If no adapter handles the service
        """
        adapter = self._adapters.get(service)
        if adapter is None:
            raise NotFoundError(f"No adapter configured for service: {service}")
        return adapter

    async def resolve_credentials(self, account: Account) -> Credentials:
        """Fetch the session header for the account's service.

        Raises:
            AuthError: If the provider has no credentials for the service
        """
        header = await self._credentials.get_credentials(account.service)
        if not header:
            raise AuthError(f"No {account.service} credentials found")
        return Credentials(header=header, org_id=account.org_id)

    async def sync_account(self, account_id: str) -> SyncResult | None:
        """Sync one account incrementally.

        Returns None without doing anything if the account is already syncing.

        Args:
            account_id: Account to sync

        Returns:
            SyncResult with statistics, or None for a no-op

        Raises:
            NotFoundError: If the account does not exist
            AuthError: If no credentials are available
            NetworkError: If the conversation list cannot be fetched
        """
        account = await self._store.get_account(account_id)

        # No await between the guard and the transition to SYNCING
        if self._statuses.is_syncing(account_id):
            logger.info("sync_already_running", account_id=account_id)
            return None

        if account is None:
            raise NotFoundError(f"Account not found: {account_id}")

        self._publish(account_id, SyncState.SYNCING, progress=0)

        try:
            with bind_sync_context(account_id, account.service.value):
                result = await self._run(account)
        finally:
            self._cancelled.discard(account_id)

        logger.info(
            "sync_completed",
            account_id=account_id,
            synced=result.synced,
            failed=result.failed,
        )
        return result

    async def _run(self, account: Account) -> SyncResult:
        """Body of a sync run; the account is already marked as syncing."""
        account_id = account.id
        result = SyncResult(account_id=account_id)

        try:
            adapter = self.adapter_for(account.service)
            credentials = await self.resolve_credentials(account)

            conversations = await adapter.fetch_conversation_list(credentials)
            existing = await self._store.get_chats_by_account(account_id)
            to_sync = select_conversations_to_sync(conversations, existing)

            result.remote_total = len(conversations)
            result.to_sync = len(to_sync)
            logger.info(
                "sync_started",
                to_sync=len(to_sync),
                remote_total=len(conversations),
            )

            for i, conversation in enumerate(to_sync):
                try:
                    chat = await self._sync_conversation(
                        account, adapter, credentials, conversation
                    )
                except Exception as e:
                    result.failed += 1
                    result.errors.append(f"{conversation.remote_id}: {e}")
                    logger.warning(
                        "conversation_sync_failed",
                        remote_id=conversation.remote_id,
                        error=str(e),
                    )
                else:
                    if chat is None:
                        break
                    result.synced += 1
                if account_id in self._cancelled:
                    break

                self._publish(
                    account_id,
                    SyncState.SYNCING,
                    progress=i + 1,
                    total=len(to_sync),
                    failed=result.failed or None,
                )
                await asyncio.sleep(self._settings.detail_delay)

            finished_at = now_ms()
            latest = await self._store.get_account(account_id)
            if latest is None or account_id in self._cancelled:
                # Deleted mid-run: leave no status behind
                self._statuses.discard(account_id)
                logger.warning("account_deleted_during_sync", synced=result.synced)
                return result
            await self._store.save_account(
                latest.model_copy(
                    update={"last_synced": finished_at, "chat_count": len(conversations)}
                )
            )

            self._publish(
                account_id,
                SyncState.IDLE,
                last_synced=finished_at,
                failed=result.failed or None,
            )
        except Exception as e:
            if account_id in self._cancelled:
                self._statuses.discard(account_id)
            else:
                self._publish(account_id, SyncState.ERROR, error=str(e))
            logger.error("sync_failed", error=str(e))
            raise

        return result

    def cancel(self, account_id: str) -> None:
        """Stop an in-flight sync of a deleted account before it saves anything else.

        The run ends without persisting further chats and drops the account's status.
        """
        if self._statuses.is_syncing(account_id):
            self._cancelled.add(account_id)

    async def _account_removed(self, account_id: str) -> bool:
        if await self._store.get_account(account_id) is None:
            return True
        return account_id in self._cancelled

    async def sync_all(self) -> dict[str, SyncResult | None | BaseException]:
        """Sync every stored account concurrently.

        One account failing does not affect the others; its exception is
        returned in place of a result.
        """
        accounts = await self._store.get_all_accounts()
        outcomes = await asyncio.gather(
            *(self.sync_account(account.id) for account in accounts),
            return_exceptions=True,
        )
        return {account.id: outcome for account, outcome in zip(accounts, outcomes)}

    async def _sync_conversation(
        self,
        account: Account,
        adapter: ServiceAdapterInterface,
        credentials: Credentials,
        conversation: RemoteConversation,
    ) -> Chat | None:
        """Fetch, normalize, persist and index one conversation.

        Returns None without saving if the account was deleted meanwhile.
        """
        detail = await adapter.fetch_conversation_detail(credentials, conversation.remote_id)
        if await self._account_removed(account.id):
            return None

        chat = Chat.build(
            account,
            conversation.remote_id,
            title=detail.title or conversation.title,
            created_at=detail.created_at,
            # The list timestamp is what the next diff compares against
            updated_at=max(detail.updated_at, conversation.updated_at),
            messages=detail.messages,
            url=adapter.conversation_url(conversation.remote_id),
        )

        await self._store.save_chat(chat)
        if account.id in self._cancelled:
            return None
        await self._index.add_to_index(chat)
        return chat

    def _publish(
        self,
        account_id: str,
        status: SyncState,
        **fields: int | str | None,
    ) -> None:
        self._statuses.publish(SyncStatus(account_id=account_id, status=status, **fields))
