from __future__ import annotations

import re
from datetime import datetime, timedelta

from .json_value import (
    JsonArray,
    JsonBool,
    JsonError,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    JsonTimestamp,
    JsonValue,
    Key,
)

MAX_DEPTH = 256
EPOCH = datetime(1970, 1, 1)

_NUMBER_RE = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")
_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_STRING_CHUNK_RE = re.compile(r"[^\"'\\\n]*")
_HEX4_RE = re.compile(r"[0-9a-fA-F]{4}")
_DATE_RE = re.compile(r"/Date\((-?\d+)\)/")

_QUOTES = ('"', "'")
_ESCAPES = {
    '"': '"',
    "'": "'",
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


class JsonParseError(Exception):
    def __init__(self, message: str, line: int) -> None:
        self.message = message
        self.line = line
        super().__init__(f"{message} (line {line})")


def _legacy_date(text: str) -> datetime | None:
    match = _DATE_RE.fullmatch(text)
    if match is None:
        return None
    try:
        return EPOCH + timedelta(milliseconds=int(match.group(1)))
    except OverflowError:
        return None


class _Parser:
    def __init__(self, text: str, *, allow_comments: bool) -> None:
        self.text = text
        self.pos = 1 if text.startswith("\ufeff") else 0
        self.line = 1
        self.allow_comments = allow_comments

    def error(self, message: str) -> JsonParseError:
        return JsonParseError(message, self.line)

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip(self) -> None:
        text = self.text
        end = len(text)
        while self.pos < end:
            ch = text[self.pos]
            if ch == "\n":
                self.line += 1
                self.pos += 1
            elif ch.isspace():
                self.pos += 1
            elif self.allow_comments and text.startswith("//", self.pos):
                newline = text.find("\n", self.pos)
                self.pos = end if newline < 0 else newline
            elif self.allow_comments and text.startswith("/*", self.pos):
                close = text.find("*/", self.pos + 2)
                if close < 0:
                    raise self.error("Unterminated comment")
                self.line += text.count("\n", self.pos, close)
                self.pos = close + 2
            else:
                break

    def char(self, ch: str) -> bool:
        if self.peek() != ch:
            return False
        self.pos += 1
        self.skip()
        return True

    def pass_char(self, ch: str) -> None:
        if not self.char(ch):
            raise self.error(f"Expected '{ch}'")

    def identifier(self, word: str) -> bool:
        match = _IDENT_RE.match(self.text, self.pos)
        if match is None or match.group() != word:
            return False
        self.pos = match.end()
        self.skip()
        return True

    def read_string(self) -> str:
        quote = self.peek()
        if quote not in _QUOTES:
            raise self.error("Expected string")
        self.pos += 1
        text = self.text
        chunks: list[str] = []
        while True:
            match = _STRING_CHUNK_RE.match(text, self.pos)
            chunks.append(match.group())
            self.pos = match.end()
            ch = self.peek()
            if ch == quote:
                self.pos += 1
                break
            if ch in _QUOTES:
                chunks.append(ch)
                self.pos += 1
            elif ch == "\\":
                chunks.append(self._read_escape())
            else:
                raise self.error("Unterminated string")
        self.skip()
        return "".join(chunks)

    def _read_escape(self) -> str:
        self.pos += 1
        esc = self.peek()
        if esc == "u":
            self.pos += 1
            code = self._read_hex4()
            if 0xD800 <= code <= 0xDBFF and self.text.startswith("\\u", self.pos):
                saved = self.pos
                self.pos += 2
                low = self._read_hex4()
                if 0xDC00 <= low <= 0xDFFF:
                    return chr(0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00))
                self.pos = saved
            if 0xD800 <= code <= 0xDFFF:
                return "\ufffd"
            return chr(code)
        if esc not in _ESCAPES:
            raise self.error(f"Invalid escape sequence '\\{esc}'" if esc else "Unterminated string")
        self.pos += 1
        return _ESCAPES[esc]

    def _read_hex4(self) -> int:
        match = _HEX4_RE.match(self.text, self.pos)
        if match is None:
            raise self.error("Invalid unicode escape")
        self.pos = match.end()
        return int(match.group(), 16)

    def value(self, depth: int) -> JsonValue:
        if depth > MAX_DEPTH:
            raise self.error("Nesting too deep")
        number = _NUMBER_RE.match(self.text, self.pos)
        if number is not None:
            self.pos = number.end()
            self.skip()
            return JsonNumber(float(number.group()))
        if self.peek() in _QUOTES:
            s = self.read_string()
            stamp = _legacy_date(s)
            return JsonString(s) if stamp is None else JsonTimestamp(stamp)
        if self.identifier("null"):
            return JsonNull()
        if self.identifier("true"):
            return JsonBool(True)
        if self.identifier("false"):
            return JsonBool(False)
        if self.char("{"):
            return self.read_object(depth)
        if self.char("["):
            return self.read_array(depth)
        raise self.error("Unrecognized JSON element")

    def read_object(self, depth: int) -> JsonObject:
        obj = JsonObject()
        while not self.char("}"):
            line = self.line
            text = self.read_string()
            self.pass_char(":")
            obj.set(Key(text, line), self.value(depth + 1))
            # A stray ',' before the closing brace is allowed.
            if self.char("}"):
                break
            self.pass_char(",")
        return obj

    def read_array(self, depth: int) -> JsonArray:
        arr = JsonArray()
        while not self.char("]"):
            arr.append(self.value(depth + 1))
            if self.char("]"):
                break
            self.pass_char(",")
        return arr


def parse(text: str, *, strict: bool = False, allow_comments: bool = True) -> JsonValue:
    """
    Parse one JSON value, recording the source line of every object key.

    Malformed input never raises: it yields a `JsonError` carrying the message
    and the 1-based line where parsing stopped. Input after the first complete
    value is ignored unless `strict` is set.
    """

    parser = _Parser(text, allow_comments=allow_comments)
    try:
        parser.skip()
        value = parser.value(0)
        if strict and not parser.at_end():
            raise parser.error("Unexpected trailing data")
    except JsonParseError as exc:
        return JsonError(exc.message, exc.line)
    return value
