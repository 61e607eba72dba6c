import pytest

from intercom_oauth.provider import IntercomProvider
from intercom_oauth.settings import Settings

AVATAR_URL = "https://static.intercomassets.com/avatars/228311/square_128/1462489937.jpg"


@pytest.fixture
def user_payload():
    return {
        "type": "admin",
        "id": "368312",
        "email": "fizbit@intercom.io",
        "name": "Fizbit Grappleboot",
        "email_verified": True,
        "app": {"type": "app", "id_code": "2qmk5gy1", "created_at": 1358214715, "secure": True},
        "avatar": {"type": "avatar", "image_url": AVATAR_URL},
    }


@pytest.fixture
def provider():
    return IntercomProvider(
        client_id="mock_client_id",
        client_secret="mock_secret",
        redirect_uri="none",
    )


@pytest.fixture
def settings():
    return Settings(
        oauth={
            "client_id": "mock_client_id",
            "client_secret": "mock_secret",
            "redirect_uri": "https://test/auth/callback",
        },
        metrics={"enabled": False},
    )
