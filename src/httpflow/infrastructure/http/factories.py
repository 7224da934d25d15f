"""Factories for TLS-verified aiohttp connectors."""

import ssl
import typing as t

import aiohttp
import certifi


def create_ssl_context() -> ssl.SSLContext:
    """Create an SSL context backed by certifi's CA bundle.

    Platform trust stores are not always wired into Python (for example on
    macOS framework builds), so certificates are verified against certifi.
    """
    return ssl.create_default_context(cafile=certifi.where())


def create_secure_connector(
    ssl: ssl.SSLContext | None = None, **connector_kwargs: t.Any
) -> aiohttp.TCPConnector:
    """Create a TCPConnector verifying TLS with ``ssl`` or a certifi context.

    Must be called with a running event loop.
    """
    context = ssl if ssl is not None else create_ssl_context()
    return aiohttp.TCPConnector(ssl=context, **connector_kwargs)
