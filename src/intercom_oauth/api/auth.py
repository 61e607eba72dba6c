from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse

from intercom_oauth.clients import OAuth2Client, get_oauth_client
from intercom_oauth.provider import ProviderError
from intercom_oauth.security import generate_state, state_matches


router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)

# Session keys
STATE_KEY = "oauth_state"
IDENTITY_KEY = "identity"
TOKEN_KEY = "access_token"
ERROR_KEY = "auth_error"


def oauth_client(request: Request) -> OAuth2Client:
    return get_oauth_client(request.app.state.settings)


@router.get("/login")
async def login(request: Request, client: OAuth2Client = Depends(oauth_client)):
    settings = request.app.state.settings
    state = generate_state()
    request.session[STATE_KEY] = state

    authorize_url = client.build_authorization_url(state=state, scopes=settings.oauth.scope_list())
    return RedirectResponse(url=authorize_url)


@router.get("/callback")
async def callback(request: Request, client: OAuth2Client = Depends(oauth_client)):
    # Provider sign-in error
    if "error" in request.query_params:
        _forget_identity(request)
        request.session[ERROR_KEY] = {
            "error": request.query_params.get("error"),
            "error_description": request.query_params.get("error_description"),
        }
        return RedirectResponse(url="/")

    expected_state = request.session.pop(STATE_KEY, None)
    if not state_matches(request.query_params.get("state"), expected_state):
        raise HTTPException(status_code=400, detail="Invalid state (check cookie SameSite/HTTPS)")

    code = request.query_params.get("code")
    if not code:
        raise HTTPException(status_code=400, detail="Missing authorization code")

    try:
        token = await client.exchange_code(code=code)
        identity = await client.get_identity(token)
    except ProviderError as e:
        logger.warning("intercom rejected sign-in: %s", e, extra={"status_code": e.status_code})
        _forget_identity(request)
        request.session[ERROR_KEY] = _error_payload(e)
        return RedirectResponse(url="/")

    request.session.pop(ERROR_KEY, None)
    if identity.id is None:
        _forget_identity(request)
        request.session[ERROR_KEY] = {
            "error": "email_not_verified",
            "error_description": "Intercom account email address is not verified",
        }
        return RedirectResponse(url="/")

    request.session[TOKEN_KEY] = token["access_token"]
    request.session[IDENTITY_KEY] = identity.to_dict()
    return RedirectResponse(url="/")


@router.post("/logout")
@router.get("/logout")
async def logout(request: Request):
    request.session.clear()
    return RedirectResponse(url="/")


def _forget_identity(request: Request) -> None:
    request.session.pop(IDENTITY_KEY, None)
    request.session.pop(TOKEN_KEY, None)


def _error_payload(e: ProviderError) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "error": "provider_error",
        "error_description": e.message,
        "status_code": e.status_code,
    }
    if e.body:
        payload["details"] = e.body
    return payload
