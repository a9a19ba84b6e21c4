from __future__ import annotations

from pathlib import PurePosixPath
from typing import Iterator

FALLBACK_FILE = "other.json"
FALLBACK_LABEL = "..."

DEFAULT_ALIASES: tuple[tuple[str, str], ...] = (
    ("lumi.json", "Aqara/Xiaomi"),
    ("hue.json", "Philips"),
    ("gledopto.json", "GLEDOPTO"),
    ("gs.json", "GS"),
    ("konke.json", "Konke"),
    ("lifecontrol.json", "Life Control"),
    ("orvibo.json", "ORVIBO"),
    ("perenio.json", "Perenio"),
    ("yandex.json", "Yandex"),
    ("sonoff.json", "Sonoff"),
    ("ikea.json", "IKEA"),
    ("tuya.json", "TUYA"),
    ("efekta.json", "Efekta"),
    ("modkam.json", "Modkam"),
    ("pushok.json", "PushOk"),
    ("bacchus.json", "Bacchus"),
    ("homed.json", "HOMEd"),
    ("slacky.json", "Slacky"),
    (FALLBACK_FILE, FALLBACK_LABEL),
)


def default_display_name(file_name: str) -> str:
    return PurePosixPath(file_name).stem


class AliasTable:
    """Ordered file name -> section title mapping."""

    def __init__(self, seed: tuple[tuple[str, str], ...] | None = DEFAULT_ALIASES) -> None:
        self._names: dict[str, str] = {}
        for file_name, display_name in seed or ():
            self._names.setdefault(file_name, display_name)

    def ensure(self, file_name: str) -> str:
        if file_name not in self._names:
            self._names[file_name] = default_display_name(file_name)
        return self._names[file_name]

    def display_name(self, file_name: str) -> str:
        return self._names[file_name]

    def sorted_items(self) -> list[tuple[str, str]]:
        # sorted() is stable, so equal titles keep their insertion order.
        return sorted(self._names.items(), key=lambda item: item[1])

    def __contains__(self, file_name: object) -> bool:
        return file_name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)
