from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

import httpx
from authlib.oauth2.rfc6749 import OAuth2Token

from intercom_oauth.provider import Identity, IntercomProvider, Provider, ProviderError
from intercom_oauth.settings import Settings, get_settings

logger = logging.getLogger(__name__)

# Query parameters the client manages itself and never forwards from callers
_RESERVED_PARAMS = ("approval_prompt",)


class OAuth2Client:
    """Authorization-code client driven entirely by an injected provider.

    The provider supplies endpoints, headers and response validation; this
    class only moves requests and responses over httpx.
    """

    def __init__(self, provider: Provider, *, timeout: float = 10.0) -> None:
        self._provider = provider
        self._timeout = timeout

    @property
    def provider(self) -> Provider:
        return self._provider

    def build_authorization_url(
        self,
        *,
        state: str,
        scopes: Optional[Iterable[str]] = None,
        redirect_uri: str | None = None,
        extra_params: Mapping[str, Any] | None = None,
    ) -> str:
        config = self._provider.config
        requested = set(self._provider.default_scopes()) | set(scopes or ())
        params: Dict[str, Any] = {
            "response_type": "code",
            "client_id": config.client_id,
            "redirect_uri": redirect_uri or config.redirect_uri,
            "scope": " ".join(sorted(requested)),
            "state": state,
        }
        if extra_params:
            params.update({k: v for k, v in extra_params.items() if k not in _RESERVED_PARAMS})
        return _append_query(self._provider.authorization_endpoint(), params)

    async def exchange_code(self, *, code: str, redirect_uri: str | None = None) -> OAuth2Token:
        config = self._provider.config
        data: Dict[str, Any] = {
            "grant_type": "authorization_code",
            "code": code,
            "client_id": config.client_id,
            "client_secret": config.client_secret,
            "redirect_uri": redirect_uri or config.redirect_uri,
        }
        url = self._provider.token_endpoint(data)

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            resp = await client.post(url, data=data, headers=self._provider.default_headers())

        payload = _safe_json(resp)
        self._provider.validate_response(resp.status_code, payload, resp.reason_phrase)

        if not payload.get("access_token"):
            raise ProviderError(
                'Required option not passed: "access_token"',
                status_code=resp.status_code,
                body=payload,
            )
        logger.info("token exchange succeeded", extra={"status_code": resp.status_code})
        return OAuth2Token.from_dict(payload)

    async def fetch_user_details(self, token: OAuth2Token) -> Dict[str, Any]:
        url = self._provider.user_info_endpoint(token)
        headers = {**self._provider.default_headers(), **self._provider.authorization_headers(token)}

        async with httpx.AsyncClient(timeout=self._timeout) as client:
            resp = await client.get(url, headers=headers)

        payload = _safe_json(resp)
        self._provider.validate_response(resp.status_code, payload, resp.reason_phrase)
        return payload

    async def get_identity(self, token: OAuth2Token) -> Identity:
        details = await self.fetch_user_details(token)
        identity = self._provider.build_identity(details, token)
        if identity.id is None:
            logger.warning("identity rejected: email not verified")
        return identity


def get_oauth_client(settings: Optional[Settings] = None) -> OAuth2Client:
    s = settings or get_settings()
    return OAuth2Client(IntercomProvider.from_settings(s), timeout=s.oauth.timeout)


def _append_query(url: str, params: Mapping[str, Any]) -> str:
    parsed = urlparse(url)
    query_params = parse_qsl(parsed.query, keep_blank_values=True)
    query_params.extend((str(k), str(v)) for k, v in params.items() if v is not None)
    new_query = urlencode(query_params, doseq=True)
    return urlunparse(parsed._replace(query=new_query))


def _safe_json(resp: httpx.Response) -> Dict[str, Any]:
    try:
        data = resp.json()
    except ValueError:
        return {"raw": resp.text}
    if not isinstance(data, dict):
        return {"raw": data}
    return data
