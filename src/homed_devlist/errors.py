from __future__ import annotations


class FetchError(Exception):
    def __init__(self, status_code: int, *, url: str, message: str | None = None) -> None:
        self.status_code = status_code
        self.url = url
        self.message = message

        super().__init__(str(self))

    def __str__(self) -> str:
        if self.status_code and self.message:
            return f"GET {self.url} failed ({self.status_code}): {self.message}"
        if self.message:
            return f"GET {self.url} failed: {self.message}"
        return f"GET {self.url} failed ({self.status_code})"
