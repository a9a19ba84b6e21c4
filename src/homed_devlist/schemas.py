from __future__ import annotations

from typing import Any

from jsonschema import Draft202012Validator

# GitHub "repository contents" response for a directory.
LISTING_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "array",
    "items": {
        "type": "object",
        "required": ["name", "type", "download_url"],
        "properties": {
            "name": {"type": "string", "minLength": 1},
            "path": {"type": "string"},
            "type": {"enum": ["file", "dir", "symlink", "submodule"]},
            "download_url": {"type": ["string", "null"]},
        },
    },
}


def _json_path(err: object) -> str:
    path = getattr(err, "absolute_path", None)
    if not path:
        return "$"
    out = "$"
    for part in path:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}"
    return out


def validate_listing(instance: Any) -> list[str]:
    validator = Draft202012Validator(LISTING_SCHEMA)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(getattr(e, "absolute_path", [])))
    return [f"{_json_path(e)}: {e.message}" for e in errors]
