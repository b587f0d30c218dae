"""Source store protocol."""

from typing import Protocol


class Store(Protocol):
    """Resolves a covered file's key (its path) to its source text."""

    @property
    def store_type(self) -> str:
        """Registry tag (e.g., 'fslookup', 'memory')."""
        ...

    def get(self, key: str) -> str:
        """Return the source for ``key``.

        Raises:
            SourceLookupError: If no source exists for the key.
        """
        ...

    def has_key(self, key: str) -> bool: ...

    def keys(self) -> list[str]: ...

    def set(self, key: str, contents: str) -> str: ...
