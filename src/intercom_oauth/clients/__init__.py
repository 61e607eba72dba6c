from intercom_oauth.clients.oauth import OAuth2Client, get_oauth_client

__all__ = ["OAuth2Client", "get_oauth_client"]
