from __future__ import annotations
"""Connection profile models and persistence."""
from dataclasses import dataclass
import json
import logging
from pathlib import Path

import keyring
from keyring.errors import KeyringError

LOGGER = logging.getLogger(__name__)

KEYRING_SERVICE = "storage-folders"


@dataclass
class ConnectionProfile:
    """A saved object storage endpoint."""

    name: str
    endpoint_url: str
    access_key: str
    secret_key: str = ""
    region: str = ""

    def public_fields(self) -> dict[str, str]:
        return {
            "name": self.name,
            "endpoint_url": self.endpoint_url,
            "access_key": self.access_key,
            "region": self.region,
        }


class KeychainStore:
    """Reads and writes profile secrets in the OS keychain."""

    def __init__(self, service_name: str = KEYRING_SERVICE):
        self._service_name = service_name

    def get_secret(self, profile_name: str) -> str:
        if not profile_name:
            return ""
        try:
            return keyring.get_password(self._service_name, profile_name) or ""
        except KeyringError:
            LOGGER.warning("Keychain lookup failed for profile '%s'", profile_name)
            return ""

    def set_secret(self, profile_name: str, secret_key: str) -> None:
        if not profile_name:
            return
        if not secret_key:
            self.delete_secret(profile_name)
            return
        try:
            keyring.set_password(self._service_name, profile_name, secret_key)
        except KeyringError:
            LOGGER.warning("Keychain write failed for profile '%s'", profile_name)

    def delete_secret(self, profile_name: str) -> None:
        if not profile_name:
            return
        try:
            keyring.delete_password(self._service_name, profile_name)
        except KeyringError:
            LOGGER.debug("No keychain entry removed for profile '%s'", profile_name)


class ProfileStorage:
    """JSON file of profiles; secrets never touch the file."""

    def __init__(self, storage_path: str | Path | None = None, keychain: KeychainStore | None = None):
        if storage_path is None:
            storage_path = Path.home() / ".storage_folders_connections.json"
        self._path = Path(storage_path)
        self._keychain = keychain or KeychainStore()

    def load(self) -> list[ConnectionProfile]:
        profiles: list[ConnectionProfile] = []
        for entry in self._read_entries():
            try:
                name = entry["name"]
                profile = ConnectionProfile(
                    name=name,
                    endpoint_url=entry["endpoint_url"],
                    access_key=entry["access_key"],
                    secret_key=self._keychain.get_secret(name),
                    region=entry.get("region") or "",
                )
            except (KeyError, TypeError):
                continue
            profiles.append(profile)
        return profiles

    def save(self, profiles: list[ConnectionProfile]) -> None:
        existing_names = {entry.get("name") for entry in self._read_entries() if isinstance(entry, dict)}
        current_names = {profile.name for profile in profiles}
        for profile in profiles:
            self._keychain.set_secret(profile.name, profile.secret_key)
        for name in existing_names - current_names:
            if isinstance(name, str) and name:
                self._keychain.delete_secret(name)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = [profile.public_fields() for profile in profiles]
        self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def _read_entries(self) -> list[dict]:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            LOGGER.warning("Ignoring unreadable profile file %s", self._path)
            return []
        return data if isinstance(data, list) else []
