"""Source stores and their registry."""

from collections.abc import Callable

from incrcov.core.errors import InputError

from .base import Store
from .fslookup import FsLookupStore
from .memory import MemoryStore

STORE_REGISTRY: dict[str, Callable[[], Store]] = {
    "fslookup": FsLookupStore,
    "memory": MemoryStore,
}

__all__ = [
    "STORE_REGISTRY",
    "FsLookupStore",
    "MemoryStore",
    "Store",
    "create_store",
]


def create_store(kind: str = "fslookup") -> Store:
    """Instantiate the store registered under ``kind``.

    Raises:
        InputError: If no store is registered under that name.
    """
    factory = STORE_REGISTRY.get(kind)
    if factory is None:
        raise InputError.invalid_store(kind)
    return factory()
