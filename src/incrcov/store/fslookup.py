"""Filesystem-backed source lookup.

Keys are file paths and contents are read straight from disk; nothing is
stored. Bundlers emit ``Foo.vue.js`` keys for single-file components, so a
missing ``*.vue.js`` falls back to the ``*.vue`` file beside it.
"""

from pathlib import Path

from incrcov.core.errors import SourceLookupError
from incrcov.core.logging import get_logger

log = get_logger("store.fslookup")

_VUE_SUFFIX = ".vue.js"


class FsLookupStore:
    """Store that reads sources from the filesystem."""

    @property
    def store_type(self) -> str:
        return "fslookup"

    def get(self, key: str) -> str:
        path = Path(key)
        if path.is_file():
            return path.read_text(encoding="utf-8")
        if key.endswith(_VUE_SUFFIX):
            original = Path(key[: -len(".js")])
            if original.is_file():
                log.debug("source_fallback", key=key, path=str(original))
                return original.read_text(encoding="utf-8")
        raise SourceLookupError.not_found(key)

    def has_key(self, key: str) -> bool:
        return Path(key).is_file()

    def keys(self) -> list[str]:
        return []

    def set(self, key: str, contents: str) -> str:  # noqa: ARG002
        if not self.has_key(key):
            raise SourceLookupError.not_settable(key)
        return key
