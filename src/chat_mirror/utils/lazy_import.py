"""Deferred imports for optional storage drivers."""

from collections.abc import Callable
from importlib import import_module

__all__ = [
    "lazy_import",
]


def lazy_import(
    module_name: str,
    name: str | None = None,
) -> Callable[[], object]:
    """Return a loader that imports a module (or one of its attributes) on first call.

    Args:
        module_name: Dotted module path, e.g. "motor.motor_asyncio"
        name: Optional attribute to fetch from the module

    Returns:
        Zero-argument callable producing the module or attribute
    """

    def _load() -> object:
        module = import_module(module_name)
        return getattr(module, name) if name else module

    return _load
