"""Interface contracts for chat_mirror.

This module exports all Protocol-based interfaces for dependency injection.
"""

from chat_mirror.interfaces.adapter import ServiceAdapterInterface
from chat_mirror.interfaces.credentials import CredentialProviderInterface
from chat_mirror.interfaces.status import StatusReporter
from chat_mirror.interfaces.storage import StoreInterface

__all__ = [
    "CredentialProviderInterface",
    "ServiceAdapterInterface",
    "StatusReporter",
    "StoreInterface",
]
