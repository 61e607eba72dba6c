from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from intercom_oauth import package_version


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    reload: bool = False
    log_level: Literal["critical", "error", "warning", "info", "debug", "trace"] = "info"


class CorsSettings(BaseModel):
    allow_origins: str = "*"  # comma-separated or "*"
    allow_methods: str = "GET,POST"  # comma-separated
    allow_headers: str = "*"  # comma-separated or "*"

    def origins(self) -> List[str]:
        return _split(self.allow_origins, wildcard=True)

    def methods(self) -> List[str]:
        return [part.upper() for part in _split(self.allow_methods)]

    def headers(self) -> List[str]:
        return _split(self.allow_headers, wildcard=True)


class OAuthSettings(BaseModel):
    # Intercom app credentials
    client_id: str = ""
    client_secret: Optional[str] = None
    redirect_uri: str = "https://localhost:8000/auth/callback"

    # Reject (empty) identities whose email Intercom has not verified
    verify_email: bool = True

    # Extra scopes on top of the provider defaults, space-separated
    scopes: str = ""
    timeout: float = 10.0

    # Sessions
    secret_key: str = "dev-secret-change-me"
    session_cookie_name: str = "intercom_oauth_session"

    # Local TLS certs
    ssl_certfile: Optional[str] = None
    ssl_keyfile: Optional[str] = None

    def scope_list(self) -> List[str]:
        return self.scopes.split()


class MetricsSettings(BaseModel):
    enabled: bool = True
    endpoint: str = "/metrics"


class LoggingSettings(BaseModel):
    as_json: bool = False


class Settings(BaseSettings):
    """Application settings loaded from environment (and .env)."""

    app_name: str = "Intercom OAuth"
    app_version: str = Field(default_factory=package_version)

    server: ServerSettings = ServerSettings()
    cors: CorsSettings = CorsSettings()
    oauth: OAuthSettings = OAuthSettings()
    metrics: MetricsSettings = MetricsSettings()
    logging: LoggingSettings = LoggingSettings()

    model_config = SettingsConfigDict(
        env_prefix="INTERCOM_OAUTH_",
        env_nested_delimiter="__",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def _split(value: str, wildcard: bool = False) -> List[str]:
    value = value.strip()
    if wildcard and value in ("", "*"):
        return ["*"]
    return [part.strip() for part in value.split(",") if part.strip()]
