from __future__ import annotations
"""Data models representing folder listings."""
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ObjectEntry:
    """A single object row returned by a catalog listing."""

    key: str
    size: Optional[int] = None


@dataclass(frozen=True)
class DirectCount:
    """Number and byte total of the objects stored directly in a folder."""

    file_count: int = 0
    total_size: int = 0


@dataclass
class FolderStats:
    """Summary statistics for one virtual folder."""

    path: str
    file_count: int = 0
    subfolder_count: int = 0
    total_size: int = 0
    human_readable_size: str = "0 B"

    def to_dict(self) -> dict[str, object]:
        return {
            "path": self.path,
            "file_count": self.file_count,
            "subfolder_count": self.subfolder_count,
            "total_size": self.total_size,
            "human_readable_size": self.human_readable_size,
        }


@dataclass
class FolderListing:
    """Represents the folder listing result for a bucket."""

    bucket: str
    prefix: str = ""
    folders: list[FolderStats] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.folders)

    @property
    def paths(self) -> list[str]:
        """Folder paths in listing order."""
        return [folder.path for folder in self.folders]

    def to_dict(self) -> dict[str, object]:
        return {
            "bucket": self.bucket,
            "prefix": self.prefix,
            "count": self.count,
            "folders": [folder.to_dict() for folder in self.folders],
        }
