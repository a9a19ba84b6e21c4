from __future__ import annotations

__all__ = [
    "__version__",
    "AliasTable",
    "Catalog",
    "CatalogEntry",
    "DeviceCatalogCollector",
    "Key",
    "parse",
    "render_markdown",
]

__version__ = "0.1.0"

from .aliases import AliasTable  # noqa: E402
from .collector import Catalog, CatalogEntry, DeviceCatalogCollector  # noqa: E402
from .json_value import Key  # noqa: E402
from .parser import parse  # noqa: E402
from .render import render_markdown  # noqa: E402
