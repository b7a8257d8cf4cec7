"""Credential providers for chat_mirror.

The cookie headers themselves come from outside (a browser session, a
secrets manager); these providers only hand them to the sync coordinator.
"""

from typing import Any, Self

from chat_mirror.config import CredentialSettings
from chat_mirror.interfaces.credentials import CredentialProviderInterface
from chat_mirror.models.account import Service

__all__ = [
    "EnvCredentialProvider",
    "StaticCredentialProvider",
]


class EnvCredentialProvider(CredentialProviderInterface):
    """Reads cookie headers from CHAT_MIRROR_CREDENTIALS_* settings."""

    config_class = CredentialSettings

    def __init__(self, settings: CredentialSettings) -> None:
        self._settings = settings

    @classmethod
    async def from_config(cls, config: CredentialSettings) -> Self:
        return cls(config)

    @classmethod
    async def from_dict(cls, config: dict[str, Any]) -> Self:
        return cls(CredentialSettings(**config))

    async def get_credentials(self, service: Service) -> str | None:
        secret = {
            Service.CLAUDE: self._settings.claude_cookie,
            Service.CHATGPT: self._settings.chatgpt_cookie,
        }.get(Service(service))
        return secret.get_secret_value() if secret else None


class StaticCredentialProvider(CredentialProviderInterface):
    """Serves headers from an in-memory mapping of service name to header.

    Useful when an embedding application already holds the session cookies.
    """

    config_class = None

    def __init__(self, headers: dict[str, str] | None = None) -> None:
        self._headers = {Service(k): v for k, v in (headers or {}).items()}

    @classmethod
    async def from_dict(cls, config: dict[str, Any]) -> Self:
        return cls(config)

    def set_credentials(self, service: Service, header: str | None) -> None:
        """Replace (or clear, with None) the header for a service."""
        if header:
            self._headers[Service(service)] = header
        else:
            self._headers.pop(Service(service), None)

    async def get_credentials(self, service: Service) -> str | None:
        return self._headers.get(Service(service))
