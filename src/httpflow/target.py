"""Fluent request builder.

A ``Target`` accumulates headers and query parameters for one URL and turns
them into a ``Flow`` when an HTTP method is chosen. Targets are immutable:
every accumulation method returns a new ``Target``, so a base target can be
shared and specialised freely.
"""

import typing as t
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from .domain.headers import Headers
from .domain.request import HTTPMethod, QueryItems, RequestDescriptor
from .domain.retry import RetryPolicy
from .flow.observable import Flow
from .flow.parsers import Parser, discard_parser, json_parser, utf8_parser

if t.TYPE_CHECKING:
    from .client import FlowClient

T = t.TypeVar("T")

Body = bytes | str
ParameterInput = t.Mapping[str, t.Any] | t.Iterable[tuple[str, t.Any]]


def _encode_body(data: Body) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


@dataclass(frozen=True)
class Target:
    """An endpoint plus the headers, query and retry policy to call it with.

    Usage:
        users = client.target("https://api.example.com/users", retries=3, delay=0.5)
        flow = users.header("Accept", "application/json").parameter("page", 2).get()
        value, headers = await flow

    Attributes:
        url: Base URL; query parameters are appended to any query it has
        client: Client that executes flows built from this target
        retry_policy: Retry budget and delay for every request
        request_headers: Headers sent with every request, last write wins
        query_parameters: Ordered query pairs, duplicates allowed
    """

    url: str
    client: "FlowClient" = field(repr=False, compare=False)
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    request_headers: t.Mapping[str, str] = field(default_factory=dict)
    query_parameters: QueryItems = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "request_headers", MappingProxyType(dict(self.request_headers))
        )
        object.__setattr__(self, "query_parameters", tuple(self.query_parameters))

    # -- accumulation ------------------------------------------------------

    def header(self, name: str, value: str) -> "Target":
        """Return a target sending ``name: value``, replacing any earlier value."""
        return self.headers({name: value})

    def headers(self, headers: t.Mapping[str, str]) -> "Target":
        """Return a target with ``headers`` merged in key by key."""
        merged = {**self.request_headers, **headers}
        return replace(self, request_headers=merged)

    def parameter(self, name: str, value: t.Any) -> "Target":
        """Return a target with one more query pair. Values are stringified."""
        return self.parameters([(name, value)])

    def parameters(self, parameters: ParameterInput) -> "Target":
        """Return a target with every pair appended in iteration order."""
        items = parameters.items() if isinstance(parameters, Mapping) else parameters
        appended = tuple((str(name), str(value)) for name, value in items)
        return replace(self, query_parameters=self.query_parameters + appended)

    def describe(self, method: HTTPMethod, body: Body | None = None) -> RequestDescriptor:
        """Freeze the accumulated state into a request descriptor."""
        return RequestDescriptor(
            url=self.url,
            method=method,
            headers=self.request_headers,
            query=self.query_parameters,
            body=None if body is None else _encode_body(body),
        )

    # -- execution ---------------------------------------------------------

    def get(self, parser: Parser[T] | None = None) -> Flow[tuple[T, Headers]]:
        """GET the target. Parses JSON unless ``parser`` is given."""
        return self._flow(HTTPMethod.GET, parser or self._json_parser())

    def post(
        self, data: Body, parser: Parser[T] | None = None
    ) -> Flow[tuple[T, Headers]]:
        """POST ``data``. Returns the body as text unless ``parser`` is given."""
        return self._flow(HTTPMethod.POST, parser or utf8_parser, data)

    def put(
        self, data: Body, parser: Parser[T] | None = None
    ) -> Flow[tuple[T, Headers]]:
        return self._flow(HTTPMethod.PUT, parser or utf8_parser, data)

    def patch(
        self, data: Body, parser: Parser[T] | None = None
    ) -> Flow[tuple[T, Headers]]:
        return self._flow(HTTPMethod.PATCH, parser or utf8_parser, data)

    def delete(self, parser: Parser[T] | None = None) -> Flow[tuple[T, Headers]]:
        return self._flow(HTTPMethod.DELETE, parser or utf8_parser)

    def head(self, parser: Parser[T] | None = None) -> Flow[tuple[T, Headers]]:
        """HEAD the target. The value is None; only the headers are useful."""
        return self._flow(HTTPMethod.HEAD, parser or discard_parser)

    def options(self, parser: Parser[T] | None = None) -> Flow[tuple[T, Headers]]:
        return self._flow(HTTPMethod.OPTIONS, parser or self._json_parser())

    def _json_parser(self) -> Parser[t.Any]:
        return json_parser(self.client.settings.json_mode)

    def _flow(
        self, method: HTTPMethod, parser: Parser[t.Any], body: Body | None = None
    ) -> Flow[tuple[t.Any, Headers]]:
        descriptor = self.describe(method, body)
        return self.client.flow(descriptor, parser, self.retry_policy)
