from __future__ import annotations
"""Folder listing for a bucket: derive, filter, sort and summarize folders."""
import logging

from .catalog import ObjectCatalog
from .models import FolderListing
from .paths import filter_shallow, index_folders, is_boundary_prefix
from .settings import STATS_STRATEGY_LISTING, AppSettings
from .stats import StatsAggregator, stats_from_entries

LOGGER = logging.getLogger(__name__)


class BucketNotFoundError(LookupError):
    """Raised when the requested bucket does not exist."""

    def __init__(self, bucket: str):
        super().__init__(f'Bucket "{bucket}" does not exist')
        self.bucket = bucket


class InvalidPrefixError(ValueError):
    """Raised for a shallow listing whose prefix splits a path component."""


class FolderListingService:
    """Builds :class:`FolderListing` results from an :class:`ObjectCatalog`."""

    def __init__(self, catalog: ObjectCatalog, settings: AppSettings | None = None):
        self._catalog = catalog
        self._settings = settings or AppSettings()

    def list_folders(
        self,
        bucket_name: str,
        prefix: str = "",
        include_subfolders: bool = True,
    ) -> FolderListing:
        """Return every folder implied by the bucket's keys with its statistics.

        With ``include_subfolders`` disabled only ``prefix`` itself and its
        immediate child folders are kept (folders outside the prefix are not
        pruned).

        Raises:
            BucketNotFoundError: when ``bucket_name`` does not exist.
            InvalidPrefixError: for a shallow listing with a prefix that does not
                end on a ``/`` boundary while ``strict_prefix`` is enabled.
            CatalogUnavailableError: when any catalog query fails.
        """

        prefix = prefix or ""
        if not include_subfolders and not is_boundary_prefix(prefix):
            if self._settings.strict_prefix:
                raise InvalidPrefixError(f"Prefix '{prefix}' does not end with '/'")
            LOGGER.warning("Shallow listing with non-boundary prefix '%s'; applying it literally", prefix)

        if not self._catalog.bucket_exists(bucket_name):
            raise BucketNotFoundError(bucket_name)
        bucket_id = self._catalog.resolve_bucket_id(bucket_name)

        entries = self._catalog.list_keys(bucket_id, prefix or None)
        LOGGER.debug("Fetched %d key(s) from bucket '%s' with prefix '%s'", len(entries), bucket_name, prefix)

        folders = index_folders(entries)
        if not include_subfolders:
            folders = filter_shallow(folders, prefix)
        ordered = sorted(folders)

        if self._settings.stats_strategy == STATS_STRATEGY_LISTING:
            if prefix and any(not folder.startswith(prefix) for folder in ordered):
                entries = self._catalog.list_keys(bucket_id, None)
            stats = stats_from_entries(entries, ordered)
        else:
            aggregator = StatsAggregator(self._catalog, bucket_id)
            stats = aggregator.collect(ordered, max_workers=self._settings.max_concurrency)

        LOGGER.debug("Listed %d folder(s) for bucket '%s'", len(stats), bucket_name)
        return FolderListing(bucket=bucket_name, prefix=prefix, folders=stats)
