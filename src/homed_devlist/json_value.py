from __future__ import annotations

import functools
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Iterator


class TypeMismatchError(TypeError):
    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected JSON {expected}, got {actual}")


@functools.total_ordering
@dataclass(frozen=True, slots=True, eq=False)
class Key:
    """Object key that remembers the source line it was read from.

    Equality, hashing and ordering only look at `text`; `line` is payload.
    """

    text: str | None
    line: int | None = None

    @staticmethod
    def null() -> "Key":
        return Key(None, None)

    @property
    def is_null(self) -> bool:
        return self.text is None and self.line is None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return self.text == other.text

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Key):
            return NotImplemented
        return (self.text or "") < (other.text or "")

    def __hash__(self) -> int:
        return hash(self.text)

    def __str__(self) -> str:
        return self.text or ""


class JsonValue:
    __slots__ = ()

    kind: ClassVar[str] = "value"

    @property
    def is_error(self) -> bool:
        return False

    def is_empty_container(self) -> bool:
        return False

    def as_bool(self) -> bool:
        raise TypeMismatchError("bool", self.kind)

    def as_number(self) -> float:
        raise TypeMismatchError("number", self.kind)

    def as_string(self) -> str:
        raise TypeMismatchError("string", self.kind)

    def as_timestamp(self) -> datetime:
        raise TypeMismatchError("timestamp", self.kind)

    def as_object(self) -> "JsonObject":
        raise TypeMismatchError("object", self.kind)

    def as_array(self) -> "JsonArray":
        raise TypeMismatchError("array", self.kind)

    def to_python(self) -> Any:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class JsonNull(JsonValue):
    kind: ClassVar[str] = "null"

    def to_python(self) -> None:
        return None


@dataclass(frozen=True, slots=True)
class JsonBool(JsonValue):
    value: bool

    kind: ClassVar[str] = "bool"

    def as_bool(self) -> bool:
        return self.value

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True, slots=True)
class JsonNumber(JsonValue):
    value: float

    kind: ClassVar[str] = "number"

    def as_number(self) -> float:
        return self.value

    def to_python(self) -> float:
        return self.value


@dataclass(frozen=True, slots=True)
class JsonString(JsonValue):
    value: str

    kind: ClassVar[str] = "string"

    def as_string(self) -> str:
        return self.value

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class JsonTimestamp(JsonValue):
    value: datetime

    kind: ClassVar[str] = "timestamp"

    def as_timestamp(self) -> datetime:
        return self.value

    def to_python(self) -> datetime:
        return self.value


@dataclass(frozen=True, slots=True)
class JsonError(JsonValue):
    message: str
    line: int

    kind: ClassVar[str] = "error"

    @property
    def is_error(self) -> bool:
        return True

    def to_python(self) -> Any:
        raise TypeMismatchError("value", self.kind)

    def __str__(self) -> str:
        return f"{self.message} (line {self.line})"


@dataclass(slots=True)
class JsonObject(JsonValue):
    """Insertion-ordered mapping from `Key` to `JsonValue`.

    Entries are stored by key text, so a duplicate key replaces the value (and
    the recorded line) while keeping the position of its first occurrence.
    """

    _entries: dict[str, tuple[Key, JsonValue]] = field(default_factory=dict)

    kind: ClassVar[str] = "object"

    def as_object(self) -> "JsonObject":
        return self

    def is_empty_container(self) -> bool:
        return not self._entries

    def set(self, key: Key, value: JsonValue) -> None:
        if key.text is None:
            raise ValueError("Object keys must have text")
        self._entries[key.text] = (key, value)

    def find(self, text: str) -> tuple[Key, JsonValue] | None:
        return self._entries.get(text)

    def get(self, text: str, default: JsonValue | None = None) -> JsonValue | None:
        entry = self._entries.get(text)
        return default if entry is None else entry[1]

    def keys(self) -> list[Key]:
        return [key for key, _ in self._entries.values()]

    def values(self) -> list[JsonValue]:
        return [value for _, value in self._entries.values()]

    def items(self) -> list[tuple[Key, JsonValue]]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Key]:
        return iter(self.keys())

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Key):
            item = item.text
        return item in self._entries

    def to_python(self) -> dict[str, Any]:
        return {text: value.to_python() for text, (_, value) in self._entries.items()}


@dataclass(slots=True)
class JsonArray(JsonValue):
    items: list[JsonValue] = field(default_factory=list)

    kind: ClassVar[str] = "array"

    def as_array(self) -> "JsonArray":
        return self

    def is_empty_container(self) -> bool:
        return not self.items

    def append(self, value: JsonValue) -> None:
        self.items.append(value)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> JsonValue:
        return self.items[index]

    def __iter__(self) -> Iterator[JsonValue]:
        return iter(self.items)

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.items]
