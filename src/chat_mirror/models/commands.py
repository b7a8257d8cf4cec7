"""Command messages accepted from the UI collaborator.

Each command is a `{"type": ..., "payload": {...}}` mapping. Payload keys
use camelCase on the wire; snake_case is accepted too.
"""

from typing import Annotated, Literal

from pydantic import Field, TypeAdapter

from chat_mirror.models.account import Service
from chat_mirror.models.base import WireModel

__all__ = [
    "COMMAND_TYPES",
    "AccountDetectedCommand",
    "AccountDetectedPayload",
    "AccountIdPayload",
    "Command",
    "DeleteAccountCommand",
    "DetectAccountCommand",
    "DetectAccountPayload",
    "GetAccountsCommand",
    "GetSyncStatusCommand",
    "SearchCommand",
    "SearchPayload",
    "SyncAccountCommand",
    "SyncAllCommand",
    "parse_command",
]


class AccountDetectedPayload(WireModel):
    service: Service
    account_id: str
    display_name: str
    email: str | None = None
    org_id: str | None = None


class AccountIdPayload(WireModel):
    account_id: str


class DetectAccountPayload(WireModel):
    service: Service


class SearchPayload(WireModel):
    query: str
    account_ids: list[str] | None = None


class AccountDetectedCommand(WireModel):
    type: Literal["ACCOUNT_DETECTED"]
    payload: AccountDetectedPayload


class DetectAccountCommand(WireModel):
    type: Literal["DETECT_ACCOUNT"]
    payload: DetectAccountPayload


class SyncAccountCommand(WireModel):
    type: Literal["SYNC_ACCOUNT"]
    payload: AccountIdPayload


class SyncAllCommand(WireModel):
    type: Literal["SYNC_ALL"]


class GetAccountsCommand(WireModel):
    type: Literal["GET_ACCOUNTS"]


class GetSyncStatusCommand(WireModel):
    type: Literal["GET_SYNC_STATUS"]


class SearchCommand(WireModel):
    type: Literal["SEARCH"]
    payload: SearchPayload


class DeleteAccountCommand(WireModel):
    type: Literal["DELETE_ACCOUNT"]
    payload: AccountIdPayload


Command = Annotated[
    AccountDetectedCommand
    | DetectAccountCommand
    | SyncAccountCommand
    | SyncAllCommand
    | GetAccountsCommand
    | GetSyncStatusCommand
    | SearchCommand
    | DeleteAccountCommand,
    Field(discriminator="type"),
]

COMMAND_TYPES: frozenset[str] = frozenset(
    {
        "ACCOUNT_DETECTED",
        "DETECT_ACCOUNT",
        "SYNC_ACCOUNT",
        "SYNC_ALL",
        "GET_ACCOUNTS",
        "GET_SYNC_STATUS",
        "SEARCH",
        "DELETE_ACCOUNT",
    }
)

_command_adapter: TypeAdapter[Command] = TypeAdapter(Command)


def parse_command(message: object) -> Command:
    """Validate a raw command mapping.

    Raises:
        pydantic.ValidationError: If the message does not match any command
    """
    return _command_adapter.validate_python(message)
