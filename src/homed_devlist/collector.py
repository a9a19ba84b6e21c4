from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Iterator, TextIO

from .aliases import AliasTable
from .json_value import JsonString
from .parser import parse


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    name: str
    line: int


class Catalog:
    """Append-only mapping of source file name -> device entries."""

    def __init__(self) -> None:
        self._files: dict[str, list[CatalogEntry]] = {}

    def open_file(self, file_name: str) -> None:
        self._files.setdefault(file_name, [])

    def add(self, file_name: str, entry: CatalogEntry) -> None:
        self._files.setdefault(file_name, []).append(entry)

    def entries(self, file_name: str) -> tuple[CatalogEntry, ...]:
        return tuple(self._files.get(file_name, ()))

    def files(self) -> list[str]:
        return list(self._files)

    def __contains__(self, file_name: object) -> bool:
        return file_name in self._files

    def __iter__(self) -> Iterator[str]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)


class DeviceCatalogCollector:
    def __init__(
        self,
        aliases: AliasTable,
        catalog: Catalog | None = None,
        *,
        strict: bool = False,
        err: TextIO | None = None,
    ) -> None:
        self.aliases = aliases
        self.catalog = catalog if catalog is not None else Catalog()
        self.strict = strict
        self._err = err
        self.collected = 0
        self.failed = 0

    def report(self, message: str) -> None:
        print(message, file=self._err or sys.stderr)

    def collect(self, file_name: str, source_label: str, content: str) -> bool:
        """
        Extract every device `description` of one device library file.

        Returns False (after reporting, unless the document simply has no
        object at its top) when the file contributes nothing.
        """

        document = parse(content, strict=self.strict)
        if document.is_error:
            self.report(f"Failed to parse JSON file `{source_label}`: {document}")
            self.failed += 1
            return False
        if document.is_empty_container():
            self.report(f"The JSON is empty. `{source_label}`")
            self.failed += 1
            return False
        if document.kind != "object":
            return False

        self.aliases.ensure(file_name)
        self.catalog.open_file(file_name)
        for group in document.as_object().values():
            if group.kind != "array":
                continue
            for device in group.as_array():
                if device.kind != "object":
                    continue
                found = device.as_object().find("description")
                if found is None:
                    continue
                key, value = found
                if isinstance(value, JsonString) and key.line is not None:
                    self.catalog.add(file_name, CatalogEntry(value.as_string(), key.line))
        self.collected += 1
        return True
