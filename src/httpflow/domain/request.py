"""Request descriptor domain models."""

import enum
import typing as t
from dataclasses import dataclass, field
from types import MappingProxyType
from urllib.parse import urlencode, urlsplit, urlunsplit

QueryItems = tuple[tuple[str, str], ...]


class HTTPMethod(enum.StrEnum):
    """HTTP methods supported by targets."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """Immutable record of everything needed to issue one HTTP call.

    The same descriptor is reused verbatim for every attempt of a request,
    so headers are stored behind a read-only proxy and query items as a tuple.
    """

    url: str
    method: HTTPMethod = HTTPMethod.GET
    headers: t.Mapping[str, str] = field(default_factory=dict)
    query: QueryItems = ()
    body: bytes | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HTTPMethod(self.method))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        object.__setattr__(
            self, "query", tuple((str(name), str(value)) for name, value in self.query)
        )

    @property
    def full_url(self) -> str:
        """URL with query items appended after any query already in ``url``."""
        if not self.query:
            return self.url

        parts = urlsplit(self.url)
        extra = urlencode(self.query)
        query = f"{parts.query}&{extra}" if parts.query else extra
        return urlunsplit(parts._replace(query=query))
