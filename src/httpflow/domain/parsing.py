"""Parsing policy models."""

import enum


class JsonMode(enum.StrEnum):
    """How the built-in JSON parser treats malformed payloads."""

    LENIENT = "lenient"  # Malformed JSON decodes to None
    STRICT = "strict"  # Malformed JSON raises ParseError
