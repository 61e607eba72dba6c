from __future__ import annotations

import hmac
import secrets


def generate_state() -> str:
    return secrets.token_urlsafe(32)


def state_matches(received: str | None, expected: str | None) -> bool:
    if not received or not expected:
        return False
    return hmac.compare_digest(received.encode("utf-8"), expected.encode("utf-8"))
