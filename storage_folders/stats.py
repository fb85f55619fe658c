from __future__ import annotations
"""Per-folder statistics: direct files, immediate subfolders and byte totals."""
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
import logging
from typing import TYPE_CHECKING, Iterable, Sequence

from .formatting import format_size
from .models import DirectCount, FolderStats, ObjectEntry
from .paths import ancestor_folders, child_name

if TYPE_CHECKING:  # pragma: no cover - import cycle with catalog
    from .catalog import ObjectCatalog

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


def direct_count(entries: Iterable[ObjectEntry], folder: str) -> DirectCount:
    """Count the objects stored directly in ``folder`` and sum their sizes.

    Objects without size metadata count as zero bytes.
    """

    file_count = 0
    total_size = 0
    for entry in entries:
        if entry.key.startswith(folder) and child_name(entry.key, folder) is None:
            file_count += 1
            total_size += entry.size or 0
    return DirectCount(file_count=file_count, total_size=total_size)


def immediate_subfolders(entries: Iterable[ObjectEntry], folder: str) -> set[str]:
    names = set()
    for entry in entries:
        if not entry.key.startswith(folder):
            continue
        name = child_name(entry.key, folder)
        if name is not None:
            names.add(name)
    return names


def build_stats(folder: str, counts: DirectCount, subfolder_count: int) -> FolderStats:
    return FolderStats(
        path=folder,
        file_count=counts.file_count,
        subfolder_count=subfolder_count,
        total_size=counts.total_size,
        human_readable_size=format_size(counts.total_size),
    )


def stats_from_entries(entries: Iterable[ObjectEntry], folders: Sequence[str]) -> list[FolderStats]:
    """Compute stats for ``folders`` from a single key listing.

    ``entries`` must cover every key below each requested folder. The result
    follows the order of ``folders``.
    """

    files: dict[str, int] = defaultdict(int)
    sizes: dict[str, int] = defaultdict(int)
    children: dict[str, set[str]] = defaultdict(set)
    for entry in entries:
        ancestors = list(ancestor_folders(entry.key))
        if not ancestors:
            continue
        parent = ancestors[-1]
        files[parent] += 1
        sizes[parent] += entry.size or 0
        for outer, inner in zip(ancestors, ancestors[1:]):
            children[outer].add(inner)
    return [
        build_stats(
            folder,
            DirectCount(file_count=files.get(folder, 0), total_size=sizes.get(folder, 0)),
            len(children.get(folder, ())),
        )
        for folder in folders
    ]


class StatsAggregator:
    """Queries a catalog for the statistics of individual folders."""

    def __init__(self, catalog: ObjectCatalog, bucket_id: str):
        self._catalog = catalog
        self._bucket_id = bucket_id

    def folder_stats(self, folder: str) -> FolderStats:
        counts, subfolder_count = self._catalog.folder_summary(self._bucket_id, folder)
        return build_stats(folder, counts, subfolder_count)

    def collect(self, folders: Sequence[str], max_workers: int = DEFAULT_MAX_WORKERS) -> list[FolderStats]:
        """Compute stats for every folder, at most ``max_workers`` at a time.

        Results keep the order of ``folders``. The first failure propagates and
        no partial result is returned.
        """

        if not folders:
            return []
        workers = max(1, min(max_workers, len(folders)))
        LOGGER.debug(
            "Collecting stats for %d folder(s) in bucket '%s' with %d worker(s)",
            len(folders),
            self._bucket_id,
            workers,
        )
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self.folder_stats, folder) for folder in folders]
            try:
                return [future.result() for future in futures]
            except Exception:
                for future in futures:
                    future.cancel()
                raise
