"""
Main entry point for the Intercom sign-in application.
"""
import logging

from dotenv import load_dotenv
import uvicorn
from intercom_oauth.app import create_app
from intercom_oauth.settings import get_settings

# Load environment variables from a .env file if present
load_dotenv()

# Create the FastAPI application
app = create_app()

logger = logging.getLogger("intercom_oauth")


def main() -> None:
    """Main entry point for running the application."""
    s = get_settings()
    ssl_kwargs = {}
    if s.oauth.ssl_certfile and s.oauth.ssl_keyfile:
        ssl_kwargs = {"ssl_certfile": s.oauth.ssl_certfile, "ssl_keyfile": s.oauth.ssl_keyfile}
        logger.info("TLS enabled: cert=%s key=%s", s.oauth.ssl_certfile, s.oauth.ssl_keyfile)
    else:
        logger.warning(
            "TLS DISABLED: serving HTTP. Set INTERCOM_OAUTH_OAUTH__SSL_CERTFILE and __SSL_KEYFILE."
        )
    if not s.oauth.client_id:
        logger.warning("INTERCOM_OAUTH_OAUTH__CLIENT_ID is not set; sign-in will fail")

    uvicorn.run(
        "intercom_oauth.main:app",
        host=s.server.host,
        port=s.server.port,
        reload=s.server.reload,
        log_level=s.server.log_level,
        **ssl_kwargs,
    )


if __name__ == "__main__":
    main()
