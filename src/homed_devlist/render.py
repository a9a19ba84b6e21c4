from __future__ import annotations

from typing import TextIO

from .aliases import FALLBACK_FILE, FALLBACK_LABEL, AliasTable
from .collector import Catalog

REPO_URL = "https://github.com/u236/homed-service-zigbee"
DEVICE_URL_TEMPLATE = REPO_URL + "/blob/master/deploy/data/usr/share/homed-zigbee/{file_name}#L{line}"

HEADER = (
    "# ZigBee: Поддерживаемые устройства\n"
    "\n"
    "## Общие сведения\n"
    "\n"
    "Список поддерживаемых устройств невелик, но он периодически пополняется. "
    "Для добавления поддержки новых устройств можно создать запрос на "
    f"[GitHub]({REPO_URL}/issues) или заглянуть в [чат проекта](https://t.me/homed_chat) в Telegram.\n"
    "\n"
    "Представленный ниже список поддерживаемых устройств формируется из файлов библиотеки устройств, "
    "в полу-автоматическом режиме, поэтому он может быть не совсем актуальным.\n"
    "\n"
)


def device_url(file_name: str, line: int) -> str:
    return DEVICE_URL_TEMPLATE.format(file_name=file_name, line=line)


def _render_section(title: str, file_name: str, catalog: Catalog) -> list[str]:
    lines = [f"## {title}", ""]
    for entry in catalog.entries(file_name):
        lines.append(f"* [{entry.name}]({device_url(file_name, entry.line)})")
    lines.append("")
    return lines


def render_markdown(catalog: Catalog, aliases: AliasTable, out: TextIO) -> None:
    """
    Write the device list: header, one section per collected file ordered by
    title, and the fallback section last.
    """

    sections: list[list[str]] = []
    for file_name, title in aliases.sorted_items():
        if file_name == FALLBACK_FILE or file_name not in catalog:
            continue
        sections.append(_render_section(title, file_name, catalog))
    sections.append(_render_section(FALLBACK_LABEL, FALLBACK_FILE, catalog))

    out.write(HEADER)
    for section in sections:
        out.write("\n".join(section) + "\n")
