"""Parser registry: maps parser identifiers to parser classes.

Adding a response format:
  1. Write a class with a ``parse(raw_body, path, columns) -> Dataframe`` method
  2. Call ``register_parser("my-format", MyParser)`` at import time
  3. Reference it from a schema with ``"responseParser": "my-format"``

Identifiers are resolved when a schema is built, so an unknown name is a
configuration error reported before any request goes out.
"""

from __future__ import annotations

from datafetch_http_provider.errors import ConfigurationError
from datafetch_http_provider.parsers.base import ResponseParser
from datafetch_http_provider.parsers.json_parser import JsonResponseParser

DEFAULT_PARSER = "json"

_PARSER_CLASSES: dict[str, type[ResponseParser]] = {
    DEFAULT_PARSER: JsonResponseParser,
    f"{JsonResponseParser.__module__}.{JsonResponseParser.__qualname__}": JsonResponseParser,
}


def register_parser(name: str, parser_class: type[ResponseParser]) -> None:
    """Make ``parser_class`` available under ``name``. Re-registering replaces it."""
    if not name or not name.strip():
        raise ValueError("Parser name must be a non-blank string")
    if not callable(getattr(parser_class, "parse", None)):
        raise TypeError(f"{parser_class!r} does not implement parse()")
    _PARSER_CLASSES[name.strip()] = parser_class


def resolve_parser_name(name: str | None) -> str:
    """Validate a configured identifier and return its registry key.

    Blank or missing names resolve to the default JSON parser.
    """
    if name is None or not str(name).strip():
        return DEFAULT_PARSER
    key = str(name).strip()
    if key not in _PARSER_CLASSES:
        supported = ", ".join(sorted(_PARSER_CLASSES))
        raise ConfigurationError(
            f"Unknown response parser '{key}'. Supported: {supported}",
            key="responseParser",
        )
    return key


def get_parser(name: str | None = None) -> ResponseParser:
    """Instantiate the parser registered under ``name``."""
    return _PARSER_CLASSES[resolve_parser_name(name)]()


def available_parsers() -> list[str]:
    return sorted(_PARSER_CLASSES)


__all__ = [
    "DEFAULT_PARSER",
    "JsonResponseParser",
    "ResponseParser",
    "available_parsers",
    "get_parser",
    "register_parser",
    "resolve_parser_name",
]
