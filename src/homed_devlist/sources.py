from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Union

from .collector import DeviceCatalogCollector
from .errors import FetchError
from .http import HttpClient
from .schemas import validate_listing

LISTING_URL = "https://api.github.com/repos/u236/homed-service-zigbee/contents/deploy/data/usr/share/homed-zigbee"
GITHUB_ACCEPT = "application/vnd.github+json"


@dataclass(frozen=True, slots=True)
class SourceFile:
    file_name: str
    label: str
    content: str


@dataclass(frozen=True, slots=True)
class SourceFailure:
    label: str
    message: str


SourceItem = Union[SourceFile, SourceFailure]


def iter_json_files(root: Path) -> list[Path]:
    return sorted(path for path in root.rglob("*.json") if path.is_file())


def iter_directory(root: Path) -> Iterator[SourceItem]:
    for path in iter_json_files(root):
        label = str(path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            yield SourceFailure(label, f"Couldn't open file {label}: {exc}")
            continue
        yield SourceFile(path.name, label, content)


def list_remote(client: HttpClient, listing_url: str) -> list[tuple[str, str]]:
    """Return `(name, download_url)` for every JSON file of a GitHub directory listing."""

    payload = client.get_json(listing_url, accept=GITHUB_ACCEPT)
    errors = validate_listing(payload)
    if errors:
        raise FetchError(0, url=listing_url, message="Unexpected listing: " + "; ".join(errors[:5]))

    out: list[tuple[str, str]] = []
    for entry in payload:
        name = entry["name"]
        if entry["type"] != "file" or not name.endswith(".json") or not entry["download_url"]:
            continue
        out.append((name, entry["download_url"]))
    return out


def iter_remote(client: HttpClient, listing_url: str = LISTING_URL) -> Iterator[SourceItem]:
    # The listing is fetched eagerly so that a failing listing raises here.
    return _download(client, list_remote(client, listing_url))


def _download(client: HttpClient, entries: list[tuple[str, str]]) -> Iterator[SourceItem]:
    for name, url in entries:
        try:
            content = client.get_text(url)
        except FetchError as exc:
            yield SourceFailure(url, str(exc))
            continue
        yield SourceFile(name, url, content)


def collect_all(
    items: Iterable[SourceItem],
    collector: DeviceCatalogCollector,
    *,
    fail_fast: bool = False,
) -> bool:
    """
    Feed every source file to the collector.

    Bad files are reported and skipped; with `fail_fast` the first one stops
    the run. Returns True when no file failed.
    """

    ok = True
    for item in items:
        failed_before = collector.failed
        if isinstance(item, SourceFailure):
            collector.report(item.message)
            collector.failed += 1
        else:
            collector.collect(item.file_name, item.label, item.content)
        # Documents without a top-level object are skipped without counting as failures.
        if collector.failed > failed_before:
            ok = False
            if fail_fast:
                break
    return ok
