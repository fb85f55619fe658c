from __future__ import annotations
"""Query capability the folder engine reads object rows through."""
from abc import ABC, abstractmethod
from typing import Iterable, Mapping, Optional

from .models import DirectCount, ObjectEntry
from .stats import direct_count, immediate_subfolders


class CatalogUnavailableError(RuntimeError):
    """Raised when the underlying catalog cannot answer a query."""


class ObjectCatalog(ABC):
    """Read-only view over the objects stored in each bucket.

    Implementations answer four queries. ``list_keys`` must return entries
    ordered by key; the counting queries consider direct children only.
    """

    @abstractmethod
    def bucket_exists(self, bucket_name: str) -> bool:
        ...

    def resolve_bucket_id(self, bucket_name: str) -> str:
        return bucket_name

    @abstractmethod
    def list_keys(self, bucket_id: str, prefix: Optional[str] = None) -> list[ObjectEntry]:
        ...

    @abstractmethod
    def count_direct(self, bucket_id: str, folder: str) -> DirectCount:
        ...

    @abstractmethod
    def count_immediate_subfolders(self, bucket_id: str, folder: str) -> int:
        ...

    def folder_summary(self, bucket_id: str, folder: str) -> tuple[DirectCount, int]:
        """Direct counts and immediate subfolder count of ``folder``.

        Catalogs that can answer both from one query override this.
        """
        return (
            self.count_direct(bucket_id, folder),
            self.count_immediate_subfolders(bucket_id, folder),
        )


class InMemoryCatalog(ObjectCatalog):
    """Catalog backed by plain Python lists, one per bucket."""

    def __init__(self, buckets: Mapping[str, Iterable[ObjectEntry | tuple[str, Optional[int]]]] | None = None):
        self._buckets: dict[str, list[ObjectEntry]] = {}
        for name, entries in (buckets or {}).items():
            self.create_bucket(name)
            for entry in entries:
                if isinstance(entry, ObjectEntry):
                    self._buckets[name].append(entry)
                else:
                    self.put_object(name, *entry)

    def create_bucket(self, bucket_name: str) -> None:
        self._buckets.setdefault(bucket_name, [])

    def put_object(self, bucket_name: str, key: str, size: Optional[int] = None) -> None:
        entries = self._buckets[bucket_name]
        entries[:] = [entry for entry in entries if entry.key != key]
        entries.append(ObjectEntry(key=key, size=size))

    def bucket_exists(self, bucket_name: str) -> bool:
        return bucket_name in self._buckets

    def list_keys(self, bucket_id: str, prefix: Optional[str] = None) -> list[ObjectEntry]:
        entries = self._entries(bucket_id)
        if prefix:
            entries = [entry for entry in entries if entry.key.startswith(prefix)]
        return sorted(entries, key=lambda entry: entry.key)

    def count_direct(self, bucket_id: str, folder: str) -> DirectCount:
        return direct_count(self._entries(bucket_id), folder)

    def count_immediate_subfolders(self, bucket_id: str, folder: str) -> int:
        return len(immediate_subfolders(self._entries(bucket_id), folder))

    def _entries(self, bucket_id: str) -> list[ObjectEntry]:
        try:
            return self._buckets[bucket_id]
        except KeyError:
            raise CatalogUnavailableError(f"Unknown bucket id '{bucket_id}'") from None
