from __future__ import annotations

from fastapi import APIRouter, Request

from intercom_oauth.provider import IntercomIdentity


router = APIRouter(tags=["system"])


@router.get("/health")
async def health_check() -> dict:
    return {"status": "healthy", "service": "intercom-oauth"}


@router.get("/")
async def index(request: Request) -> dict:
    raw = request.session.get("identity")
    identity = IntercomIdentity(raw) if raw else None
    return {
        "authenticated": identity is not None,
        "identity": {
            "id": identity.id,
            "name": identity.name,
            "email": identity.email,
            "avatar_url": identity.avatar_url,
        }
        if identity
        else None,
        "auth_error": request.session.get("auth_error"),
    }
