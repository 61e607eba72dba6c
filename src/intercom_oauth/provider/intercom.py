from __future__ import annotations

import base64
from typing import TYPE_CHECKING, Any, Dict, Mapping, Set

import httpx
from authlib.oauth2.rfc6749 import OAuth2Token

from intercom_oauth import __version__
from intercom_oauth.provider.errors import ProviderError
from intercom_oauth.provider.identity import IntercomIdentity
from intercom_oauth.provider.types import ProviderConfig, TokenLike

if TYPE_CHECKING:
    from intercom_oauth.settings import Settings


class IntercomProvider:
    """Intercom endpoints, headers and user mapping for the OAuth2 client.

    Intercom deviates from the usual bearer scheme: ``/me`` expects HTTP Basic
    auth with the access token as username and an empty password.
    """

    AUTHORIZE_URL = "https://app.intercom.com/oauth"
    TOKEN_URL = "https://api.intercom.io/auth/eagle/token"
    USER_URL = "https://api.intercom.io/me"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        *,
        verify_email: bool = True,
    ) -> None:
        self.config = ProviderConfig(
            client_id=client_id,
            client_secret=client_secret,
            redirect_uri=redirect_uri,
            verify_email=verify_email,
        )

    @classmethod
    def from_settings(cls, settings: "Settings") -> "IntercomProvider":
        o = settings.oauth
        return cls(
            client_id=o.client_id,
            client_secret=o.client_secret or "",
            redirect_uri=o.redirect_uri,
            verify_email=o.verify_email,
        )

    def authorization_endpoint(self) -> str:
        return self.AUTHORIZE_URL

    def token_endpoint(self, params: Mapping[str, Any]) -> str:
        return self.TOKEN_URL

    def user_info_endpoint(self, token: OAuth2Token) -> str:
        return self.USER_URL

    def default_scopes(self) -> Set[str]:
        return set()

    def default_headers(self) -> Dict[str, str]:
        return {"Accept": "application/json", "User-Agent": f"intercom-oauth/{__version__}"}

    def authorization_headers(self, token: TokenLike = None) -> Dict[str, str]:
        if isinstance(token, Mapping):
            token = token.get("access_token")
        credentials = f"{token or ''}:".encode("utf-8")
        return {"Authorization": "Basic " + base64.b64encode(credentials).decode("ascii")}

    def validate_response(self, status_code: int, body: Any, reason: str | None = None) -> None:
        """Raise ProviderError unless Intercom answered 200 without ``errors``.

        The message is the first error's ``message`` when Intercom sent one,
        otherwise the HTTP reason phrase.
        """
        errors = body.get("errors") if isinstance(body, Mapping) else None
        if not errors and status_code == 200:
            return

        message = None
        if isinstance(errors, list) and errors and isinstance(errors[0], Mapping):
            message = errors[0].get("message")
        if not message:
            message = reason or httpx.codes.get_reason_phrase(status_code)

        raise ProviderError(
            str(message),
            status_code=status_code,
            body=body if isinstance(body, Mapping) else None,
        )

    def build_identity(self, payload: Mapping[str, Any], token: OAuth2Token) -> IntercomIdentity:
        # Unverified accounts get an empty identity rather than an error.
        if self.config.verify_email and not bool(payload.get("email_verified", False)):
            return IntercomIdentity({})
        return IntercomIdentity(payload)
