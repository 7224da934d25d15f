"""Response header flattening."""

import typing as t
from collections.abc import Mapping

from multidict import CIMultiDict, CIMultiDictProxy

Headers = CIMultiDictProxy[str]

RawHeaders = t.Mapping[str, t.Any] | t.Iterable[tuple[str, t.Any]]


def flatten_headers(raw: RawHeaders | None) -> Headers:
    """Flatten response headers to one value per key.

    Lookups are case-insensitive. When a key repeats, the last value wins,
    which is how multi-valued headers are reduced.

    Args:
        raw: A mapping (including aiohttp's multi-valued headers, whose
            ``items()`` yields every value) or an iterable of pairs

    Returns:
        Read-only case-insensitive header mapping
    """
    flat: CIMultiDict[str] = CIMultiDict()
    if raw is not None:
        items = raw.items() if isinstance(raw, Mapping) else raw
        for key, value in items:
            flat[str(key)] = str(value)
    return CIMultiDictProxy(flat)
