from __future__ import annotations
"""Formatting helpers for sizes and package metadata."""
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, metadata, version

DIST_NAME = "storage-folders"
SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")
SIZE_STEP = 1024


@dataclass(frozen=True)
class PackageInfo:
    name: str
    version: str
    summary: str


def load_package_info(dist_name: str = DIST_NAME) -> PackageInfo:
    try:
        distribution_metadata = metadata(dist_name)
        package_version = version(dist_name)
    except PackageNotFoundError:
        return PackageInfo(
            name="storage-folders",
            version="",
            summary="Derive virtual folder trees and folder statistics from object storage buckets.",
        )
    return PackageInfo(
        name=distribution_metadata.get("Name"),
        version=package_version,
        summary=distribution_metadata.get("Summary") or "",
    )


def format_size(size_bytes: int) -> str:
    """Render ``size_bytes`` using 1024-based units with two decimals.

    >>> format_size(1536)
    '1.50 KB'
    >>> format_size(0)
    '0 B'
    """

    if size_bytes < 0:
        raise ValueError("size_bytes must be non-negative")
    if size_bytes == 0:
        return "0 B"
    value = float(size_bytes)
    unit_index = 0
    while value >= SIZE_STEP and unit_index < len(SIZE_UNITS) - 1:
        value /= SIZE_STEP
        unit_index += 1
    return f"{value:.2f} {SIZE_UNITS[unit_index]}"
