"""Credential provider interface for chat_mirror.

Acquiring session credentials happens outside chat_mirror; providers only
hand over an opaque header string.
"""

from typing import ClassVar, Protocol, runtime_checkable

from chat_mirror.models.account import Service

__all__ = [
    "CredentialProviderInterface",
]


@runtime_checkable
class CredentialProviderInterface(Protocol):
    """Contract for supplying session credentials per service."""

    config_class: ClassVar[type | None] = None

    async def get_credentials(self, service: Service) -> str | None:
        """Return the credential header for a service.

        Args:
            service: Remote service

        Returns:
            Opaque header value, or None if the user has no session
        """
        ...
