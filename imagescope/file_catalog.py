"""A catalog of file metadata and content sources for every file in an image's layers."""

from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any, BinaryIO

Opener = Callable[[], BinaryIO]


class FileNotInCatalogError(LookupError):
    """Raised when a file reference has not been added to the catalog."""


@dataclass
class FileCatalogEntry:
    """Everything stored for a single file reference."""

    file: Hashable
    metadata: Any
    layer: Any = None
    contents: Opener | None = None


def _describe(ref: Hashable) -> str:
    return str(getattr(ref, "real_path", ref))


class FileCatalog:
    """File entries keyed by their references, with an index by MIME type.

    References must be hashable and equal exactly when they name the same file;
    metadata may carry a ``mime_type`` attribute.
    """

    def __init__(self) -> None:
        self._catalog: dict[Hashable, FileCatalogEntry] = {}
        self._by_mime_type: dict[str, list[Hashable]] = {}

    def add(self, ref: Hashable, metadata: Any, layer: Any, opener: Opener | None) -> None:
        """Store an entry for ``ref``, silently replacing any existing one."""
        mime_type = getattr(metadata, "mime_type", "")
        # an empty MIME type means the contents were not available to inspect
        if mime_type:
            self._by_mime_type.setdefault(mime_type, []).append(ref)
        self._catalog[ref] = FileCatalogEntry(ref, metadata, layer, opener)

    def __contains__(self, ref: object) -> bool:
        return ref in self._catalog

    def get(self, ref: Hashable) -> FileCatalogEntry:
        try:
            return self._catalog[ref]
        except KeyError:
            raise FileNotInCatalogError(f"could not find file: {_describe(ref)}") from None

    def get_by_mime_type(self, mime_type: str) -> list[FileCatalogEntry]:
        """Return the entries of the given MIME type in the order they were added."""
        entries = []
        for ref in self._by_mime_type.get(mime_type, ()):
            entry = self._catalog.get(ref)
            if entry is None:
                raise FileNotInCatalogError(f"could not find file: {_describe(ref)}")
            entries.append(entry)
        return entries

    def file_contents(self, ref: Hashable) -> BinaryIO:
        """Open the contents of the file for reading."""
        entry = self._catalog.get(ref)
        if entry is None:
            raise FileNotInCatalogError(f"could not find file: {_describe(ref)}")
        if entry.contents is None:
            raise ValueError(f"no contents available for file: {_describe(ref)}")
        return entry.contents()