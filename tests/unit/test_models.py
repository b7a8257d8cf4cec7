"""Unit tests for chat_mirror models and helpers."""

import pytest
from pydantic import ValidationError

from chat_mirror.errors import MalformedDataError
from chat_mirror.models.account import Account, Service
from chat_mirror.models.chat import Chat, Message
from chat_mirror.models.commands import (
    AccountDetectedCommand,
    SearchCommand,
    SyncAllCommand,
    parse_command,
)
from chat_mirror.models.sync import SyncState, SyncStatus
from chat_mirror.utils.timestamps import (
    iso_to_epoch_ms,
    optional_iso_to_epoch_ms,
    optional_unix_to_epoch_ms,
    unix_to_epoch_ms,
)


class TestAccount:
    """Tests for Account."""

    def test_make_id(self) -> None:
        assert Account.make_id(Service.CLAUDE, "org-1") == "claude-org-1"
        assert Account.make_id("chatgpt", "user-1") == "chatgpt-user-1"

    def test_defaults(self, sample_account: Account) -> None:
        assert sample_account.last_synced == 0
        assert sample_account.chat_count == 0
        assert sample_account.has_synced is False

    def test_immutable(self, sample_account: Account) -> None:
        with pytest.raises(ValidationError):
            sample_account.display_name = "Other"

    def test_wire_format_uses_camel_case(self, sample_account: Account) -> None:
        wire = sample_account.to_wire()

        assert wire["displayName"] == "Personal"
        assert wire["orgId"] == "org-1"
        assert wire["lastSynced"] == 0
        assert wire["service"] == "claude"

    def test_accepts_camel_case_input(self) -> None:
        account = Account.model_validate(
            {"id": "claude-x", "service": "claude", "displayName": "X", "chatCount": 3}
        )

        assert account.display_name == "X"
        assert account.chat_count == 3


class TestChat:
    """Tests for Chat."""

    def test_build(self, sample_account: Account) -> None:
        chat = Chat.build(
            sample_account,
            "conv-1",
            title="",
            created_at=1,
            updated_at=2,
            messages=[
                Message(role="user", content="Hi"),
                Message(role="assistant", content="Hello"),
            ],
            url="https://claude.ai/chat/conv-1",
        )

        assert chat.id == "claude-claude-org-1-conv-1"
        assert chat.account_id == "claude-org-1"
        assert chat.chat_id == "conv-1"
        assert chat.title == "Untitled"
        assert chat.full_text == "Hi\n\nHello"

    def test_rejects_unknown_role(self) -> None:
        with pytest.raises(ValidationError):
            Message(role="system", content="x")

    def test_round_trips_through_wire_format(self, make_chat) -> None:
        chat = make_chat("c1", "Title", 100, [("user", "hello")])

        assert Chat.model_validate(chat.to_wire()) == chat


class TestSyncStatus:
    """Tests for SyncStatus."""

    def test_is_syncing(self) -> None:
        assert SyncStatus(account_id="a", status=SyncState.SYNCING).is_syncing is True
        assert SyncStatus(account_id="a", status="idle").is_syncing is False

    def test_wire_format(self) -> None:
        wire = SyncStatus(account_id="a", status=SyncState.ERROR, error="boom").to_wire()

        assert wire["accountId"] == "a"
        assert wire["status"] == "error"
        assert wire["error"] == "boom"


class TestCommands:
    """Tests for command parsing."""

    def test_parse_account_detected(self) -> None:
        command = parse_command(
            {
                "type": "ACCOUNT_DETECTED",
                "payload": {"service": "claude", "accountId": "org-1", "displayName": "Me"},
            }
        )

        assert isinstance(command, AccountDetectedCommand)
        assert command.payload.account_id == "org-1"
        assert command.payload.email is None

    def test_parse_without_payload(self) -> None:
        assert isinstance(parse_command({"type": "SYNC_ALL"}), SyncAllCommand)

    def test_parse_search(self) -> None:
        command = parse_command(
            {"type": "SEARCH", "payload": {"query": "x", "accountIds": ["a"]}}
        )

        assert isinstance(command, SearchCommand)
        assert command.payload.account_ids == ["a"]

    def test_unknown_type(self) -> None:
        with pytest.raises(ValidationError):
            parse_command({"type": "OPEN_CHAT", "payload": {"url": "x"}})

    def test_missing_payload_field(self) -> None:
        with pytest.raises(ValidationError):
            parse_command({"type": "SYNC_ACCOUNT", "payload": {}})


class TestTimestamps:
    """Tests for timestamp conversion."""

    def test_iso_with_zulu(self) -> None:
        assert iso_to_epoch_ms("2024-01-01T00:00:00Z") == 1704067200000

    def test_iso_with_fraction_and_offset(self) -> None:
        assert iso_to_epoch_ms("2024-01-01T01:00:00.250+01:00") == 1704067200250

    def test_naive_iso_is_utc(self) -> None:
        assert iso_to_epoch_ms("2024-01-01T00:00:00") == 1704067200000

    def test_invalid_iso(self) -> None:
        with pytest.raises(MalformedDataError):
            iso_to_epoch_ms("yesterday")
        assert optional_iso_to_epoch_ms(None) is None

    def test_unix_seconds(self) -> None:
        assert unix_to_epoch_ms(1704067200) == 1704067200000
        assert unix_to_epoch_ms(1704067200.5) == 1704067200500

    def test_unix_rejects_non_numeric(self) -> None:
        with pytest.raises(MalformedDataError):
            unix_to_epoch_ms(True)
        assert optional_unix_to_epoch_ms("1704067200") is None
