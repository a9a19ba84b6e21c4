from __future__ import annotations

import http.client
import json
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any

from . import __version__
from .errors import FetchError


@dataclass(frozen=True, slots=True)
class HttpResponse:
    url: str
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class HttpClient:
    def __init__(self, *, timeout: float = 30.0, headers: dict[str, str] | None = None) -> None:
        self._timeout = timeout
        self._default_headers = {"User-Agent": f"homed-devlist/{__version__}", **(headers or {})}

    def get(self, url: str, *, headers: dict[str, str] | None = None) -> HttpResponse:
        try:
            request = urllib.request.Request(url=url, method="GET")
            for key, value in {**self._default_headers, **(headers or {})}.items():
                request.add_header(key, value)
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                status = response.getcode()
                resp_headers = dict(response.headers.items())
                raw = response.read()
        except urllib.error.HTTPError as exc:
            status = exc.code
            resp_headers = dict(exc.headers.items()) if exc.headers is not None else {}
            raw = exc.read()
        except (urllib.error.URLError, http.client.HTTPException, TimeoutError, ConnectionError) as exc:
            raise FetchError(0, url=url, message=str(exc) or exc.__class__.__name__) from exc
        except ValueError as exc:
            # Raised by urllib for URLs it cannot handle, e.g. a missing scheme.
            raise FetchError(0, url=url, message=f"Invalid URL: {exc}") from exc

        return HttpResponse(url=url, status_code=status, headers=resp_headers, body=raw)

    def _checked(self, url: str, *, headers: dict[str, str] | None = None) -> HttpResponse:
        resp = self.get(url, headers=headers)
        if resp.status_code >= 400:
            raise FetchError(resp.status_code, url=url, message=resp.text.strip()[:200] or None)
        return resp

    def get_text(self, url: str) -> str:
        resp = self._checked(url)
        try:
            return resp.body.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise FetchError(resp.status_code, url=url, message=f"Invalid UTF-8 response: {exc}") from exc

    def get_json(self, url: str, *, accept: str = "application/json") -> Any:
        resp = self._checked(url, headers={"Accept": accept})
        try:
            return json.loads(resp.body.decode("utf-8")) if resp.body else None
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise FetchError(resp.status_code, url=url, message=f"Invalid JSON response: {exc}") from exc
