from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, Set, Union

from authlib.oauth2.rfc6749 import OAuth2Token

TokenLike = Union[str, OAuth2Token, None]


class Identity(Protocol):
    """Normalized, read-only user returned by a provider."""

    @property
    def id(self) -> Optional[str]:
        ...

    @property
    def name(self) -> Optional[str]:
        ...

    @property
    def email(self) -> Optional[str]:
        ...

    @property
    def avatar_url(self) -> Optional[str]:
        ...

    def to_dict(self) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class ProviderConfig:
    client_id: str
    client_secret: str
    redirect_uri: str
    verify_email: bool = True


class Provider(Protocol):
    """Hooks an OAuth2 client calls to talk to a specific identity provider."""

    config: ProviderConfig

    def authorization_endpoint(self) -> str:
        ...

    def token_endpoint(self, params: Mapping[str, Any]) -> str:
        ...

    def user_info_endpoint(self, token: OAuth2Token) -> str:
        ...

    def default_scopes(self) -> Set[str]:
        ...

    def default_headers(self) -> Dict[str, str]:
        ...

    def authorization_headers(self, token: TokenLike = None) -> Dict[str, str]:
        ...

    def validate_response(self, status_code: int, body: Any, reason: str | None = None) -> None:
        ...

    def build_identity(self, payload: Mapping[str, Any], token: OAuth2Token) -> Identity:
        ...
