"""Intercom OAuth2 provider for httpx-based OAuth2 clients."""
from importlib.metadata import PackageNotFoundError, version as pkg_version


def package_version(default: str = "2.0.0") -> str:
    try:
        return pkg_version("intercom-oauth")
    except PackageNotFoundError:
        return default


__version__ = package_version()
