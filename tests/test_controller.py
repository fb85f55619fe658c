import tempfile
import unittest
from pathlib import Path

from storage_folders.catalog import InMemoryCatalog
from storage_folders.controller import NotConnectedError, StorageController
from storage_folders.listing import BucketNotFoundError
from storage_folders.profiles import ConnectionProfile, ProfileStorage
from storage_folders.settings import AppSettings, SettingsStorage


class FakeKeychain:
    def __init__(self):
        self.secrets = {}

    def get_secret(self, profile_name):
        return self.secrets.get(profile_name, "")

    def set_secret(self, profile_name, secret_key):
        self.secrets[profile_name] = secret_key

    def delete_secret(self, profile_name):
        self.secrets.pop(profile_name, None)


class FakeCatalogFactory:
    def __init__(self, catalog):
        self.catalog = catalog
        self.calls = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        return self.catalog


class StorageControllerTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.storage = ProfileStorage(Path(self._tmp.name) / "connections.json", keychain=FakeKeychain())
        self.catalog = InMemoryCatalog({"media": [("a/b.txt", 100), ("a/c/d.txt", 200), ("e.txt", 50)]})
        self.factory = FakeCatalogFactory(self.catalog)
        self.controller = StorageController(
            storage=self.storage,
            settings=AppSettings(page_size=500),
            catalog_factory=self.factory,
        )

    def test_list_folders_requires_connection(self):
        with self.assertRaises(NotConnectedError):
            self.controller.list_folders(bucket_name="media")

    def test_connect_with_profile_builds_catalog(self):
        self.controller.save_profile(ConnectionProfile("prod", "https://prod/s3", "key", "secret", "eu-west-1"))

        self.controller.connect_with_profile("prod")

        self.assertTrue(self.controller.is_connected)
        self.assertEqual("prod", self.controller.selected_profile)
        self.assertEqual(
            [
                {
                    "endpoint_url": "https://prod/s3",
                    "access_key": "key",
                    "secret_key": "secret",
                    "region": "eu-west-1",
                    "page_size": 500,
                }
            ],
            self.factory.calls,
        )

    def test_list_folders_delegates_to_listing_service(self):
        self.controller.use_catalog(self.catalog)

        listing = self.controller.list_folders(bucket_name="media", prefix="a/", include_subfolders=False)

        self.assertEqual(["a/", "a/c/"], listing.paths)

    def test_list_folders_propagates_missing_bucket(self):
        self.controller.use_catalog(self.catalog)

        with self.assertLogs("storage_folders.controller", level="WARNING") as logs:
            with self.assertRaises(BucketNotFoundError):
                self.controller.list_folders(bucket_name="missing")

        self.assertEqual(["WARNING"], [record.levelname for record in logs.records])
        self.assertIsNone(logs.records[0].exc_info)

    def test_connect_with_profile_remembers_connection(self):
        settings_storage = SettingsStorage(Path(self._tmp.name) / "settings.json")
        controller = StorageController(
            storage=self.storage,
            settings_storage=settings_storage,
            catalog_factory=self.factory,
        )
        controller.save_profile(ConnectionProfile("prod", "https://prod/s3", "key", "secret"))

        controller.connect_with_profile("prod")

        self.assertEqual("prod", controller.settings.last_connection)
        self.assertEqual("prod", settings_storage.load().last_connection)

    def test_profile_management(self):
        self.controller.save_profile(ConnectionProfile("one", "https://one", "a", "s"))
        self.controller.save_profile(ConnectionProfile("two", "https://two", "b", "s"), original_name="one")

        self.assertEqual(["two"], [p.name for p in self.controller.list_profiles()])
        self.assertEqual(["two"], [p.name for p in self.storage.load()])

        self.controller.delete_profile("two")
        self.assertEqual([], self.controller.list_profiles())
        with self.assertRaises(ValueError):
            self.controller.delete_profile("two")
        with self.assertRaises(ValueError):
            self.controller.get_profile("two")


if __name__ == "__main__":
    unittest.main()
