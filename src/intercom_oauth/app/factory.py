from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from intercom_oauth.settings import Settings, get_settings
from intercom_oauth.api import auth_router, system_router
from intercom_oauth.middleware.request_id import RequestIDMiddleware
from intercom_oauth.app.exceptions import register_exception_handlers
from intercom_oauth.app.logging_config import configure_logging
from intercom_oauth.app.metrics import instrument_metrics


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit settings; defaults to the cached environment settings

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Sign in with Intercom",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.server.debug,
    )
    app.state.settings = settings

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins(),
        allow_credentials=True,
        allow_methods=settings.cors.methods(),
        allow_headers=settings.cors.headers(),
    )

    # Sessions; the callback is a cross-site redirect from Intercom
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.oauth.secret_key,
        session_cookie=settings.oauth.session_cookie_name,
        same_site="none",
        https_only=True,
    )

    # Routers
    app.include_router(system_router)
    app.include_router(auth_router)

    # Middleware
    app.add_middleware(RequestIDMiddleware)

    # Exceptions, logging, metrics
    register_exception_handlers(app)
    configure_logging(settings.logging.as_json, settings.server.log_level)
    if settings.metrics.enabled:
        instrument_metrics(app, settings.metrics.endpoint)

    return app
