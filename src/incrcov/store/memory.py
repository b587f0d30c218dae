"""In-memory source store, mostly for tests and embedding."""

from incrcov.core.errors import SourceLookupError


class MemoryStore:
    """Dictionary-backed store."""

    def __init__(self, sources: dict[str, str] | None = None):
        self._sources: dict[str, str] = dict(sources or {})

    @property
    def store_type(self) -> str:
        return "memory"

    def get(self, key: str) -> str:
        try:
            return self._sources[key]
        except KeyError:
            raise SourceLookupError.not_found(key) from None

    def has_key(self, key: str) -> bool:
        return key in self._sources

    def keys(self) -> list[str]:
        return list(self._sources)

    def set(self, key: str, contents: str) -> str:
        self._sources[key] = contents
        return key
