from __future__ import annotations
"""Derivation of virtual folder paths from flat object keys."""
from typing import Iterable, Iterator, Union

from .models import ObjectEntry

SEPARATOR = "/"

KeyLike = Union[str, ObjectEntry]


def _key_of(item: KeyLike) -> str:
    return item.key if isinstance(item, ObjectEntry) else item


def ancestor_folders(key: str) -> Iterator[str]:
    """Yield every folder implied by ``key``, shallowest first.

    The component after the last separator is the leaf and never becomes a
    folder, so ``"a/b/c.txt"`` yields ``"a/"`` and ``"a/b/"`` while a
    root-level key such as ``"e.txt"`` yields nothing. A marker key like
    ``"a/b/"`` has an empty leaf and therefore implies ``"a/b/"`` itself.
    """

    parts = key.split(SEPARATOR)
    parts.pop()
    current = ""
    for part in parts:
        current += part + SEPARATOR
        yield current


def index_folders(keys: Iterable[KeyLike]) -> set[str]:
    """Return the deduplicated set of folder paths implied by ``keys``."""

    folders: set[str] = set()
    for item in keys:
        folders.update(ancestor_folders(_key_of(item)))
    return folders


def is_boundary_prefix(prefix: str) -> bool:
    return not prefix or prefix.endswith(SEPARATOR)


def is_retained(folder: str, prefix: str) -> bool:
    """Shallow-listing rule: keep the prefix itself and its immediate children.

    Folders that do not start with ``prefix`` are kept untouched; the rule is
    relative to the prefix rather than a global depth limit.
    """

    if folder == prefix or not folder.startswith(prefix):
        return True
    remainder = folder[len(prefix):]
    return SEPARATOR not in remainder[:-1]


def filter_shallow(folders: Iterable[str], prefix: str) -> set[str]:
    return {folder for folder in folders if is_retained(folder, prefix)}


def child_name(key: str, folder: str) -> str | None:
    """Return the next component below ``folder`` when ``key`` lies in a subfolder.

    Keys stored directly in ``folder`` (including a marker equal to the folder)
    return ``None``.
    """

    remainder = key[len(folder):]
    name, separator, _ = remainder.partition(SEPARATOR)
    if not separator:
        return None
    return name
