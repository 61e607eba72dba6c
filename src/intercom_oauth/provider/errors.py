from __future__ import annotations

from typing import Any, Mapping


class ProviderError(Exception):
    """Raised when Intercom rejects a token or user-info request."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = dict(body or {})

    def __repr__(self) -> str:
        return f"ProviderError({self.message!r}, status_code={self.status_code!r})"
