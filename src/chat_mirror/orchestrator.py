"""ChatMirror orchestrator for syncing and searching remote chat history.

This module provides the main entry point for the chat_mirror package,
wiring the store, credential provider, service adapters, sync coordinator
and search index, and exposing them both as a Python API and as a
command-message surface for a UI collaborator.
"""

import asyncio
from typing import Any

import httpx
from pydantic import ValidationError

from chat_mirror.adapters import ServiceAdapterRegistry
from chat_mirror.config import ChatMirrorConfig
from chat_mirror.errors import AuthError, NotFoundError
from chat_mirror.interfaces.adapter import ServiceAdapterInterface
from chat_mirror.interfaces.credentials import CredentialProviderInterface
from chat_mirror.interfaces.status import StatusReporter
from chat_mirror.interfaces.storage import StoreInterface
from chat_mirror.logging import configure_logging, get_logger
from chat_mirror.models.account import Account, Service
from chat_mirror.models.commands import (
    COMMAND_TYPES,
    AccountDetectedCommand,
    Command,
    DeleteAccountCommand,
    DetectAccountCommand,
    GetAccountsCommand,
    GetSyncStatusCommand,
    SearchCommand,
    SyncAccountCommand,
    SyncAllCommand,
    parse_command,
)
from chat_mirror.models.remote import Credentials
from chat_mirror.models.search import SearchResult
from chat_mirror.models.sync import SyncStatus
from chat_mirror.services.index_engine import IndexEngine
from chat_mirror.services.status_store import SyncStatusStore
from chat_mirror.services.sync_coordinator import SyncCoordinator, SyncResult

__all__ = ["ChatMirror"]

logger = get_logger(__name__)


class ChatMirror:
    """Entry point tying store, credentials, adapters, sync and search together.

    Store and credential provider are given as classes. Classes with a
    `config_class` are built from environment settings unless a custom dict
    is passed; classes without one always need the dict.

    Example:
        async with ChatMirror(
            store_class=MongoStore,
            credentials_class=EnvCredentialProvider,
        ) as mirror:
            await mirror.detect_account(Service.CLAUDE)
            results = await mirror.search("refactor")
    """

    def __init__(
        self,
        store_class: type[StoreInterface],
        credentials_class: type[CredentialProviderInterface],
        *,
        store_custom_config: dict[str, Any] | None = None,
        credentials_custom_config: dict[str, Any] | None = None,
        config: ChatMirrorConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize ChatMirror with implementation classes.

        Args:
            store_class: Store implementation class
            credentials_class: Credential provider implementation class
            store_custom_config: Custom config dict if store_class.config_class is None
            credentials_custom_config: Custom config dict if
                credentials_class.config_class is None
            config: Aggregate settings (loaded from .env if omitted)
            http_client: HTTP client to use instead of creating one
        """
        self._config = config or ChatMirrorConfig()

        self._store_class = store_class
        self._credentials_class = credentials_class
        self._store_custom_config = store_custom_config
        self._credentials_custom_config = credentials_custom_config

        # Built in _connect
        self._store: StoreInterface | None = None
        self._credentials: CredentialProviderInterface | None = None
        self._http = http_client
        self._owns_http = http_client is None
        self._adapters: dict[Service, ServiceAdapterInterface] = {}

        self._statuses = SyncStatusStore()
        self._index: IndexEngine | None = None
        self._coordinator: SyncCoordinator | None = None

        self._background: set[asyncio.Task[Any]] = set()
        self._connected = False

    async def _instantiate_class(self, cls: type, custom_config: dict[str, Any] | None) -> Any:
        """Build a store or credential provider from a custom dict or its settings."""
        if custom_config is not None:
            return await cls.from_dict(custom_config)
        config_class = getattr(cls, "config_class", None)
        if config_class is None:
            raise ValueError(f"{cls.__name__} needs a custom config dict (no config_class)")
        return await cls.from_config(config_class())

    async def _connect(self) -> None:
        if self._connected:
            return

        log_settings = self._config.logging
        configure_logging(
            level=log_settings.level,
            json_output=log_settings.json_output,
        )

        self._store = await self._instantiate_class(self._store_class, self._store_custom_config)
        self._credentials = await self._instantiate_class(
            self._credentials_class, self._credentials_custom_config
        )

        if self._http is None:
            self._http = httpx.AsyncClient(
                timeout=self._config.sync.request_timeout,
                headers={"User-Agent": self._config.sync.user_agent},
                follow_redirects=True,
            )

        self._adapters = {
            service: ServiceAdapterRegistry.create(
                service,
                client=self._http,
                settings=getattr(self._config, service.value, None),
            )
            for service in ServiceAdapterRegistry.list_services()
        }

        self._index = IndexEngine(self._store, self._config.search)
        self._coordinator = SyncCoordinator(
            self._store,
            self._adapters,
            self._credentials,
            self._index,
            self._statuses,
            self._config.sync,
        )

        self._connected = True
        logger.info("chat_mirror_connected", services=[s.value for s in self._adapters])

    async def _disconnect(self) -> None:
        """Stop background syncs and close all connections."""
        for task in list(self._background):
            task.cancel()
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

        if self._store and hasattr(self._store, "close"):
            await self._store.close()
        if self._credentials and hasattr(self._credentials, "close"):
            await self._credentials.close()
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

        self._connected = False
        logger.info("chat_mirror_disconnected")

    async def __aenter__(self) -> "ChatMirror":
        await self._connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self._disconnect()

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise RuntimeError(
                "ChatMirror not connected. Use 'async with ChatMirror(...) as mirror:'"
            )

    @property
    def store(self) -> StoreInterface:
        self._ensure_connected()
        assert self._store is not None
        return self._store

    @property
    def index(self) -> IndexEngine:
        self._ensure_connected()
        assert self._index is not None
        return self._index

    @property
    def coordinator(self) -> SyncCoordinator:
        self._ensure_connected()
        assert self._coordinator is not None
        return self._coordinator

    @property
    def statuses(self) -> SyncStatusStore:
        return self._statuses

    # === ACCOUNTS ===

    async def account_detected(
        self,
        service: Service | str,
        remote_account_id: str,
        display_name: str,
        email: str | None = None,
        org_id: str | None = None,
    ) -> Account:
        """Register (or refresh) an account reported by the UI.

        Sync bookkeeping of an existing account is preserved. An account
        that has never completed a sync is synced in the background.

        Returns:
            The saved account
        """
        service = Service(service)
        account_id = Account.make_id(service, remote_account_id)
        existing = await self.store.get_account(account_id)

        account = Account(
            id=account_id,
            service=service,
            display_name=display_name,
            email=email,
            org_id=org_id,
            last_synced=existing.last_synced if existing else 0,
            chat_count=existing.chat_count if existing else 0,
        )
        await self.store.save_account(account)
        logger.info(
            "account_detected",
            account_id=account_id,
            service=service.value,
            display_name=display_name,
        )

        if self._config.sync.auto_sync_on_detect and not account.has_synced:
            self._spawn_sync(account_id)
        return account

    async def detect_account(self, service: Service | str) -> Account:
        """Ask a service who the configured credentials belong to and register it.

        Raises:
            AuthError: If no credentials are configured for the service
        """
        self._ensure_connected()
        assert self._credentials is not None
        service = Service(service)

        header = await self._credentials.get_credentials(service)
        if not header:
            raise AuthError(f"No {service} credentials found")

        adapter = self.coordinator.adapter_for(service)
        identity = await adapter.detect_account(Credentials(header=header))
        return await self.account_detected(
            service,
            identity.remote_account_id,
            identity.display_name,
            email=identity.email,
            org_id=identity.org_id,
        )

    async def get_accounts(self) -> list[Account]:
        return await self.store.get_all_accounts()

    async def delete_account(self, account_id: str) -> None:
        """Delete an account, its chats and its status, then rebuild the index.

        A sync of the account that is still running is cancelled first.

        Raises:
            NotFoundError: If the account does not exist
        """
        if await self.store.get_account(account_id) is None:
            raise NotFoundError(f"Account not found: {account_id}")

        self.coordinator.cancel(account_id)
        await self.store.delete_account(account_id)
        self._statuses.discard(account_id)
        await self.index.rebuild_index()
        logger.info("account_removed", account_id=account_id)

    # === SYNC ===

    async def sync_account(self, account_id: str) -> SyncResult | None:
        """Sync one account now; None if a sync for it is already running."""
        return await self.coordinator.sync_account(account_id)

    async def sync_all(self) -> dict[str, SyncResult | None | BaseException]:
        return await self.coordinator.sync_all()

    def get_sync_statuses(self) -> dict[str, SyncStatus]:
        return self._statuses.snapshot()

    def subscribe(self, reporter: StatusReporter) -> None:
        """Receive every sync status transition."""
        self._statuses.subscribe(reporter)

    def _spawn_sync(self, account_id: str) -> None:
        task = asyncio.create_task(self.coordinator.sync_account(account_id))
        self._background.add(task)
        task.add_done_callback(self._on_background_done)

    def _on_background_done(self, task: asyncio.Task[Any]) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("background_sync_failed", error=str(error))

    async def wait_for_background_syncs(self) -> None:
        """Wait until every background sync started so far has finished."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # === SEARCH ===

    async def search(
        self,
        query: str,
        account_ids: list[str] | None = None,
    ) -> list[SearchResult]:
        """Search every mirrored chat, building the index first if needed."""
        await self.index.init_search_index()
        return self.index.search(query, account_ids)

    # === COMMANDS ===

    async def handle_command(self, message: Any) -> dict[str, Any]:
        """Handle one command message and return its response.

        Never raises: unknown commands, invalid payloads and failed
        operations all produce `{"error": message}`.
        """
        try:
            command = parse_command(message)
        except ValidationError as e:
            logger.warning("invalid_command", error=str(e))
            return {"error": _describe_invalid(message, e)}

        try:
            return await self._dispatch(command)
        except Exception as e:
            logger.error("command_failed", command=command.type, error=str(e))
            return {"error": str(e) or type(e).__name__}

    async def _dispatch(self, command: Command) -> dict[str, Any]:
        match command:
            case AccountDetectedCommand(payload=payload):
                await self.account_detected(
                    payload.service,
                    payload.account_id,
                    payload.display_name,
                    email=payload.email,
                    org_id=payload.org_id,
                )
                return {"success": True}
            case DetectAccountCommand(payload=payload):
                account = await self.detect_account(payload.service)
                return {"success": True, "account": account.to_wire()}
            case SyncAccountCommand(payload=payload):
                await self.sync_account(payload.account_id)
                return {"success": True}
            case SyncAllCommand():
                await self.sync_all()
                return {"success": True}
            case GetAccountsCommand():
                accounts = await self.get_accounts()
                return {"accounts": [account.to_wire() for account in accounts]}
            case GetSyncStatusCommand():
                return {
                    "statuses": {
                        account_id: status.to_wire()
                        for account_id, status in self.get_sync_statuses().items()
                    }
                }
            case SearchCommand(payload=payload):
                results = await self.search(payload.query, payload.account_ids)
                return {"results": [result.to_wire() for result in results]}
            case DeleteAccountCommand(payload=payload):
                await self.delete_account(payload.account_id)
                return {"success": True}
        raise ValueError(f"Unhandled command: {command.type}")


def _describe_invalid(message: Any, error: ValidationError) -> str:
    command_type = message.get("type") if isinstance(message, dict) else None
    if command_type is None:
        return "Missing command type"
    if not isinstance(command_type, str) or command_type not in COMMAND_TYPES:
        return f"Unknown command type: {command_type}"
    return f"Invalid payload for {command_type}: {error.error_count()} validation error(s)"
