import base64
from urllib.parse import parse_qs, urlparse

import pytest
import respx
from httpx import Response

from intercom_oauth.clients import OAuth2Client
from intercom_oauth.provider import IntercomProvider, ProviderError

TOKEN_URL = "https://api.intercom.io/auth/eagle/token"
USER_URL = "https://api.intercom.io/me"

ERROR_BODY = {
    "type": "error.list",
    "request_id": "anvt4on87prigma30i8g",
    "errors": [{"code": "server_error", "message": "Server Error"}],
}


@pytest.fixture
def client(provider):
    return OAuth2Client(provider)


def test_authorization_url(client):
    url = client.build_authorization_url(state="xyz", extra_params={"approval_prompt": "auto"})
    parsed = urlparse(url)
    query = parse_qs(parsed.query, keep_blank_values=True)

    assert url.startswith("https://app.intercom.com/oauth")
    assert query["client_id"] == ["mock_client_id"]
    assert query["redirect_uri"] == ["none"]
    assert query["state"] == ["xyz"]
    assert query["scope"] == [""]
    assert query["response_type"] == ["code"]
    assert "approval_prompt" not in query


def test_authorization_url_extra_scopes(client):
    url = client.build_authorization_url(state="s", scopes=["read_users", "read_admins"])
    query = parse_qs(urlparse(url).query)
    assert query["scope"] == ["read_admins read_users"]


@pytest.mark.asyncio
@respx.mock
async def test_exchange_code(client):
    route = respx.post(TOKEN_URL).mock(
        return_value=Response(
            200, json={"access_token": "mock_access_token", "token_type": "bearer", "uid": "12345"}
        )
    )

    token = await client.exchange_code(code="mock_authorization_code")

    assert route.called
    sent = parse_qs(route.calls.last.request.content.decode())
    assert sent["grant_type"] == ["authorization_code"]
    assert sent["code"] == ["mock_authorization_code"]
    assert sent["client_secret"] == ["mock_secret"]
    assert route.calls.last.request.headers["accept"] == "application/json"
    assert route.calls.last.request.headers["user-agent"].startswith("intercom-oauth/")

    assert token["access_token"] == "mock_access_token"
    assert token.get("expires_at") is None
    assert token.get("refresh_token") is None


@pytest.mark.asyncio
@respx.mock
async def test_exchange_code_with_expiry(client):
    respx.post(TOKEN_URL).mock(
        return_value=Response(200, json={"access_token": "tok", "expires_in": 3600})
    )
    token = await client.exchange_code(code="c")
    assert token["expires_at"] > 0
    assert not token.is_expired()


@pytest.mark.asyncio
@respx.mock
async def test_exchange_error_response_raises(client):
    respx.post(TOKEN_URL).mock(return_value=Response(401, json=ERROR_BODY))

    with pytest.raises(ProviderError) as ei:
        await client.exchange_code(code="mock_authorization_code")
    assert ei.value.message == "Server Error"
    assert ei.value.status_code == 401


@pytest.mark.asyncio
@respx.mock
async def test_exchange_status_not_success_raises(client):
    respx.post(TOKEN_URL).mock(return_value=Response(500, text="upstream exploded"))

    with pytest.raises(ProviderError) as ei:
        await client.exchange_code(code="mock_authorization_code")
    assert ei.value.message == "Internal Server Error"
    assert ei.value.status_code == 500


@pytest.mark.asyncio
@respx.mock
async def test_exchange_without_access_token_raises(client):
    respx.post(TOKEN_URL).mock(return_value=Response(200, json={"token_type": "bearer"}))

    with pytest.raises(ProviderError):
        await client.exchange_code(code="c")


@pytest.mark.asyncio
@respx.mock
async def test_get_identity(client, user_payload):
    respx.post(TOKEN_URL).mock(
        return_value=Response(
            200, json={"token": "mock_access_token", "access_token": "mock_access_token", "token_type": "Bearer"}
        )
    )
    me = respx.get(USER_URL).mock(return_value=Response(200, json=user_payload))

    token = await client.exchange_code(code="mock_authorization_code")
    identity = await client.get_identity(token)

    auth = me.calls.last.request.headers["authorization"]
    assert auth == "Basic " + base64.b64encode(b"mock_access_token:").decode()
    assert identity.to_dict() == user_payload
    assert identity.id == user_payload["id"]
    assert identity.email == user_payload["email"]
    assert identity.name == user_payload["name"]
    assert identity.avatar_url == user_payload["avatar"]["image_url"]


@pytest.mark.asyncio
@respx.mock
async def test_get_identity_unverified_email(client, user_payload):
    user_payload["email_verified"] = False
    respx.post(TOKEN_URL).mock(return_value=Response(200, json={"access_token": "mock_access_token"}))
    respx.get(USER_URL).mock(return_value=Response(200, json=user_payload))

    token = await client.exchange_code(code="mock_authorization_code")
    identity = await client.get_identity(token)

    assert identity.to_dict() == {}
    assert identity.id is None
    assert identity.email is None
    assert identity.name is None
    assert identity.avatar_url is None


@pytest.mark.asyncio
@respx.mock
async def test_get_identity_skips_email_check(user_payload):
    client = OAuth2Client(IntercomProvider("mock_client_id", "mock_secret", "none", verify_email=False))
    user_payload["email_verified"] = False
    respx.post(TOKEN_URL).mock(return_value=Response(200, json={"access_token": "mock_access_token"}))
    respx.get(USER_URL).mock(return_value=Response(200, json=user_payload))

    token = await client.exchange_code(code="mock_authorization_code")
    identity = await client.get_identity(token)

    assert identity.to_dict() == user_payload
    assert identity.id == "368312"


@pytest.mark.asyncio
@respx.mock
async def test_user_details_error_raises(client):
    respx.get(USER_URL).mock(return_value=Response(200, json=ERROR_BODY))

    with pytest.raises(ProviderError) as ei:
        await client.fetch_user_details({"access_token": "tok"})
    assert ei.value.message == "Server Error"


class _StaticIdentity:
    def __init__(self, payload):
        self._payload = dict(payload)

    @property
    def id(self):
        return self._payload.get("login")

    name = email = avatar_url = None

    def to_dict(self):
        return dict(self._payload)


class _OtherProvider(IntercomProvider):
    USER_URL = "https://other.example/user"

    def authorization_headers(self, token=None):
        return {"Authorization": f"Bearer {token['access_token']}"}

    def build_identity(self, payload, token):
        return _StaticIdentity(payload)


@pytest.mark.asyncio
@respx.mock
async def test_get_identity_uses_injected_provider():
    client = OAuth2Client(_OtherProvider("id", "secret", "none"))
    route = respx.get("https://other.example/user").mock(return_value=Response(200, json={"login": "octo"}))

    identity = await client.get_identity({"access_token": "tok"})

    assert route.calls.last.request.headers["authorization"] == "Bearer tok"
    assert isinstance(identity, _StaticIdentity)
    assert identity.id == "octo"
    assert identity.to_dict() == {"login": "octo"}
