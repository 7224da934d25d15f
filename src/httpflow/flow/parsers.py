"""Built-in response parsers.

A parser is any callable taking the raw success payload and returning the
decoded value. Parsers run on the background executor, so they may be
CPU-heavy but must be thread-safe.
"""

import json
import typing as t

from ..domain.exceptions import ParseError
from ..domain.parsing import JsonMode

T = t.TypeVar("T")

Parser = t.Callable[[bytes], T]

JSONValue = t.Any


def utf8_parser(data: bytes) -> str:
    """Decode the payload as UTF-8 text.

    Raises:
        ParseError: If the payload is not valid UTF-8
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(exc) from exc


def strict_json_parser(data: bytes) -> JSONValue:
    """Decode the payload as JSON.

    Raises:
        ParseError: If the payload is not valid JSON
    """
    try:
        return json.loads(data)
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        raise ParseError(exc) from exc


def lenient_json_parser(data: bytes) -> JSONValue:
    """Decode the payload as JSON, returning None when it is malformed."""
    try:
        return json.loads(data)
    except ValueError:
        return None


def discard_parser(data: bytes) -> None:
    """Ignore the payload (HEAD responses carry no body)."""
    return None


def json_parser(mode: JsonMode = JsonMode.LENIENT) -> Parser[JSONValue]:
    """Return the JSON parser for ``mode``."""
    if mode is JsonMode.STRICT:
        return strict_json_parser
    return lenient_json_parser


def run_parser(parser: Parser[T], data: bytes) -> T:
    """Invoke ``parser``, wrapping unexpected failures in ParseError."""
    try:
        return parser(data)
    except ParseError:
        raise
    except Exception as exc:
        raise ParseError(exc) from exc
