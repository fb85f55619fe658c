from __future__ import annotations
"""Controller tying profiles, settings and catalogs to folder listings."""

from dataclasses import replace
import logging
from typing import Callable

from .catalog import CatalogUnavailableError, ObjectCatalog
from .listing import BucketNotFoundError, FolderListingService, InvalidPrefixError
from .models import FolderListing
from .profiles import ConnectionProfile, ProfileStorage
from .settings import AppSettings, SettingsStorage

LOGGER = logging.getLogger(__name__)

CatalogFactory = Callable[..., ObjectCatalog]


class NotConnectedError(RuntimeError):
    """Raised when a listing is requested before connecting."""


def _default_catalog_factory(**kwargs) -> ObjectCatalog:
    from .services import S3Catalog

    return S3Catalog(**kwargs)


class StorageController:
    """Coordinates caller actions with a connected :class:`ObjectCatalog`."""

    def __init__(
        self,
        *,
        storage: ProfileStorage | None = None,
        settings: AppSettings | None = None,
        settings_storage: SettingsStorage | None = None,
        catalog_factory: CatalogFactory | None = None,
    ):
        self._storage = storage or ProfileStorage()
        self._settings_storage = settings_storage
        if settings is None:
            settings = settings_storage.load() if settings_storage else AppSettings()
        self._settings = settings
        self._catalog_factory = catalog_factory or _default_catalog_factory
        self._profiles: list[ConnectionProfile] = self._storage.load()
        self._catalog: ObjectCatalog | None = None
        self._selected_profile: str | None = None

    @property
    def is_connected(self) -> bool:
        return self._catalog is not None

    @property
    def selected_profile(self) -> str | None:
        return self._selected_profile

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def list_profiles(self) -> list[ConnectionProfile]:
        return list(self._profiles)

    def save_profile(self, profile: ConnectionProfile, *, original_name: str | None = None) -> None:
        if original_name and original_name != profile.name:
            self._profiles = [p for p in self._profiles if p.name != original_name]
        for idx, existing in enumerate(self._profiles):
            if existing.name == profile.name:
                self._profiles[idx] = profile
                break
        else:
            self._profiles.append(profile)
        self._storage.save(self._profiles)

    def delete_profile(self, name: str) -> None:
        before = len(self._profiles)
        self._profiles = [p for p in self._profiles if p.name != name]
        if len(self._profiles) == before:
            raise ValueError(f"Profile '{name}' does not exist")
        if self._selected_profile == name:
            self._selected_profile = None
        self._storage.save(self._profiles)

    def get_profile(self, name: str) -> ConnectionProfile:
        for profile in self._profiles:
            if profile.name == name:
                return profile
        raise ValueError(f"Profile '{name}' does not exist")

    def connect_with_profile(self, name: str) -> None:
        profile = self.get_profile(name)
        self.connect(
            endpoint_url=profile.endpoint_url,
            access_key=profile.access_key,
            secret_key=profile.secret_key,
            region=profile.region,
        )
        self._selected_profile = name
        self._remember_connection(name)

    def connect(self, *, endpoint_url: str, access_key: str, secret_key: str, region: str = "") -> None:
        LOGGER.debug("Connecting to '%s'", endpoint_url or "default endpoint")
        self._catalog = self._catalog_factory(
            endpoint_url=endpoint_url,
            access_key=access_key,
            secret_key=secret_key,
            region=region or None,
            page_size=self._settings.page_size,
        )
        self._selected_profile = None

    def use_catalog(self, catalog: ObjectCatalog) -> None:
        self._catalog = catalog

    def list_folders(
        self,
        *,
        bucket_name: str,
        prefix: str = "",
        include_subfolders: bool = True,
    ) -> FolderListing:
        catalog = self._require_catalog()
        service = FolderListingService(catalog, self._settings)
        try:
            return service.list_folders(bucket_name, prefix=prefix, include_subfolders=include_subfolders)
        except BucketNotFoundError:
            LOGGER.warning("Bucket '%s' does not exist", bucket_name)
            raise
        except (InvalidPrefixError, CatalogUnavailableError) as exc:
            LOGGER.error("Error listing folders for bucket '%s': %s", bucket_name, exc)
            raise
        except Exception:
            LOGGER.exception("Unexpected error listing folders for bucket '%s'", bucket_name)
            raise

    def _remember_connection(self, name: str) -> None:
        if self._settings_storage is None or self._settings.last_connection == name:
            return
        self._settings = replace(self._settings, last_connection=name)
        self._settings_storage.save(self._settings)

    def _require_catalog(self) -> ObjectCatalog:
        if self._catalog is None:
            raise NotConnectedError("Not connected to object storage")
        return self._catalog
