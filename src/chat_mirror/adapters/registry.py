"""Service adapter registry for chat_mirror.

This module maps a service tag to the adapter class that speaks that
service's API.
"""

from typing import Any

from chat_mirror.errors import NotFoundError
from chat_mirror.interfaces.adapter import ServiceAdapterInterface
from chat_mirror.models.account import Service

__all__ = [
    "ServiceAdapterRegistry",
]


class ServiceAdapterRegistry:
    """Registry for service adapters.

    Adapters register by their `service` class attribute, and accounts are
    dispatched to an adapter by their `service` tag.

    Example:
        # Register an adapter (as decorator)
        @ServiceAdapterRegistry.register
        class ClaudeAdapter:
            service = Service.CLAUDE
            ...

        # Create an adapter instance
        adapter = ServiceAdapterRegistry.create(Service.CLAUDE, client=http_client)
        conversations = await adapter.fetch_conversation_list(credentials)
    """

    _adapters: dict[Service, type[ServiceAdapterInterface]] = {}  # noqa: RUF012

    @classmethod
    def register(
        cls,
        adapter_cls: type[ServiceAdapterInterface],
    ) -> type[ServiceAdapterInterface]:
        """Register an adapter class.

        Can be used as a decorator or called directly.

        Args:
            adapter_cls: Adapter class with a `service` class attribute

        Returns:
            The adapter class (for use as decorator)

        Raises:
            ValueError: If an adapter is already registered for the service
        """
        service = Service(adapter_cls.service)

        if service in cls._adapters:
            raise ValueError(f"Adapter already registered for service: {service}")

        cls._adapters[service] = adapter_cls
        return adapter_cls

    @classmethod
    def get(cls, service: Service | str) -> type[ServiceAdapterInterface]:
        """Get adapter class by service tag.

        Args:
            service: Service to look up

        Returns:
            Adapter class

        Raises:
            NotFoundError: If no adapter is registered for the service
        """
        try:
            key = Service(service)
        except ValueError:
            key = None
        if key is None or key not in cls._adapters:
            available = ", ".join(cls._adapters) or "none"
            raise NotFoundError(
                f"No adapter registered for service: {service}. Available: {available}"
            )
        return cls._adapters[key]

    @classmethod
    def create(cls, service: Service | str, **kwargs: Any) -> ServiceAdapterInterface:
        """Create adapter instance by service tag.

        Args:
            service: Service to look up
            **kwargs: Arguments to pass to the adapter constructor

        Returns:
            Adapter instance
        """
        adapter_cls = cls.get(service)
        return adapter_cls(**kwargs)

    @classmethod
    def list_services(cls) -> list[Service]:
        """List all services with a registered adapter."""
        return list(cls._adapters)

    @classmethod
    def is_registered(cls, service: Service | str) -> bool:
        """Check if a service has a registered adapter."""
        try:
            return Service(service) in cls._adapters
        except ValueError:
            return False
