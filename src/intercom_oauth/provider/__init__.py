from intercom_oauth.provider.errors import ProviderError
from intercom_oauth.provider.identity import IntercomIdentity
from intercom_oauth.provider.intercom import IntercomProvider
from intercom_oauth.provider.types import Identity, Provider, ProviderConfig

__all__ = ["Identity", "IntercomIdentity", "IntercomProvider", "Provider", "ProviderConfig", "ProviderError"]
