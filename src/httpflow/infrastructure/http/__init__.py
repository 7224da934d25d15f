"""HTTP transport adapters."""

from .base import BaseTransport, HttpResponseMeta, TransportResult
from .factories import create_secure_connector, create_ssl_context
from .transport import AiohttpTransport

__all__ = [
    "AiohttpTransport",
    "BaseTransport",
    "HttpResponseMeta",
    "TransportResult",
    "create_secure_connector",
    "create_ssl_context",
]
