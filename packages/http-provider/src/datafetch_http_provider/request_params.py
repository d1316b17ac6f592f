"""Request parameter builder: schema description → validated RequestSpec.

A source configuration arrives as an untyped mapping (whatever the caller
persisted). This module is the only place that reads it. Everything
downstream consumes the frozen RequestSpec.

Build order is fixed: the required keys (url, username, password, property)
are read first, so when several are missing the reported key is always the
same one. Then optional keys get their defaults. The response parser is
resolved last; an unknown identifier fails here, not at fetch time.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

import httpx
from datafetch_shared.dataframe import Column, ColumnType
from pydantic import BaseModel, ConfigDict

from datafetch_http_provider.errors import ConfigurationError
from datafetch_http_provider.parsers import resolve_parser_name

logger = logging.getLogger(__name__)

SCHEMAS = "schemas"
TABLE = "table"
COLUMNS = "columns"
URL = "url"
USERNAME = "username"
PASSWORD = "password"
PROPERTY = "property"
TIMEOUT = "timeout"
REQUEST_METHOD = "method"
CONTENT_TYPE = "contentType"
RESPONSE_PARSER = "responseParser"
BODY = "body"
QUERY_PARAM = "queryParam"
HEADERS = "headers"

REQUIRED_KEYS = (URL, USERNAME, PASSWORD, PROPERTY)

DEFAULT_METHOD = "GET"
DEFAULT_TIMEOUT_MS = 30 * 1_000
DEFAULT_CONTENT_TYPE = "application/json"

HTTP_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"})


class RequestSpec(BaseModel):
    """Fully resolved parameters for one HTTP fetch."""

    model_config = ConfigDict(frozen=True)

    url: str
    username: str
    password: str
    property_path: str
    method: str = DEFAULT_METHOD
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    content_type: str = DEFAULT_CONTENT_TYPE
    parser: str = "json"
    body: str | None = None
    headers: tuple[tuple[str, str], ...] = ()
    query_params: tuple[tuple[str, str], ...] = ()
    columns: tuple[Column, ...] = ()

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @property
    def has_credentials(self) -> bool:
        return bool(self.username or self.password)


def expand_schemas(config: Mapping[str, Any] | None) -> list[Mapping[str, Any]]:
    """Split a source configuration into its schema descriptions.

    A configuration with a ``schemas`` key is a batch; one without it is a
    single schema. A missing or empty batch yields no schemas.
    """
    if config is None:
        return []
    if SCHEMAS not in config:
        return [config]
    schemas = config[SCHEMAS]
    if schemas is None:
        return []
    if not isinstance(schemas, Sequence) or isinstance(schemas, str | bytes):
        raise ConfigurationError("'schemas' must be a list of schema descriptions", key=SCHEMAS)
    for index, schema in enumerate(schemas):
        if not isinstance(schema, Mapping):
            raise ConfigurationError(
                f"Schema entry is a {type(schema).__name__}, expected a mapping",
                key=SCHEMAS,
                schema_index=index,
            )
    return list(schemas)


def build_request_spec(schema: Mapping[str, Any]) -> RequestSpec:
    """Validate one schema description and return its RequestSpec."""
    url, username, password, property_path = (_required(schema, key) for key in REQUIRED_KEYS)
    if not url.strip():
        raise ConfigurationError("'url' must not be blank", key=URL)
    try:
        httpx.URL(url.strip())
    except httpx.InvalidURL as e:
        raise ConfigurationError(f"Invalid url {url!r}: {e}", key=URL) from e

    spec = RequestSpec(
        url=url.strip(),
        username=username,
        password=password,
        property_path=property_path.strip(),
        method=_method(schema),
        timeout_ms=_timeout(schema),
        content_type=_header_text(
            _optional_str(schema, CONTENT_TYPE) or DEFAULT_CONTENT_TYPE, CONTENT_TYPE
        ),
        body=_body(schema),
        query_params=_string_pairs(schema, QUERY_PARAM),
        headers=tuple(
            (_header_text(k, HEADERS), _header_text(v, HEADERS))
            for k, v in _string_pairs(schema, HEADERS)
        ),
        columns=parse_columns(schema),
        parser=resolve_parser_name(schema.get(RESPONSE_PARSER)),
    )
    logger.debug(
        f"Built request spec: {spec.method} {spec.url} "
        f"(property='{spec.property_path}', parser={spec.parser}, columns={len(spec.columns)})"
    )
    return spec


def build_request_specs(config: Mapping[str, Any] | None) -> list[RequestSpec]:
    """Build every schema in ``config``, tagging failures with the schema index."""
    specs: list[RequestSpec] = []
    for index, schema in enumerate(expand_schemas(config)):
        try:
            specs.append(build_request_spec(schema))
        except ConfigurationError as e:
            raise e.with_schema_index(index)
    return specs


def parse_columns(schema: Mapping[str, Any]) -> tuple[Column, ...]:
    """Read the declared output columns of a schema.

    Accepts a list of ``{"name": ..., "type": ...}`` mappings or a mapping
    of name → type. A missing type means STRING. No declaration means the
    parser infers columns from the response.
    """
    declared = schema.get(COLUMNS)
    if not declared:
        return ()

    if isinstance(declared, Mapping):
        entries: list[tuple[Any, Any]] = list(declared.items())
    elif isinstance(declared, Sequence) and not isinstance(declared, str | bytes):
        entries = []
        for entry in declared:
            if not isinstance(entry, Mapping):
                raise ConfigurationError(
                    f"Column entry is a {type(entry).__name__}, expected a mapping",
                    key=COLUMNS,
                )
            entries.append((entry.get("name"), entry.get("type")))
    else:
        raise ConfigurationError("'columns' must be a list or a mapping", key=COLUMNS)

    columns: list[Column] = []
    seen: set[str] = set()
    for name, type_name in entries:
        # Some callers persist column names as a one-element path list
        if isinstance(name, list | tuple) and len(name) == 1:
            name = name[0]
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError(f"Column name must be a non-blank string: {name!r}", key=COLUMNS)
        if name in seen:
            raise ConfigurationError(f"Duplicate column '{name}'", key=COLUMNS)
        seen.add(name)
        try:
            column_type = ColumnType.parse(type_name) if type_name else ColumnType.STRING
        except ValueError as e:
            raise ConfigurationError(str(e), key=COLUMNS) from e
        columns.append(Column(name=name, type=column_type))
    return tuple(columns)


def _required(schema: Mapping[str, Any], key: str) -> str:
    value = schema.get(key)
    if value is None:
        raise ConfigurationError(f"Missing required key '{key}'", key=key)
    return str(value)


def _optional_str(schema: Mapping[str, Any], key: str) -> str | None:
    value = schema.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _method(schema: Mapping[str, Any]) -> str:
    raw = schema.get(REQUEST_METHOD)
    if raw is None or not str(raw).strip():
        return DEFAULT_METHOD
    method = str(raw).strip().upper()
    if method not in HTTP_METHODS:
        raise ConfigurationError(f"Unknown HTTP method '{raw}'", key=REQUEST_METHOD)
    return method


def _timeout(schema: Mapping[str, Any]) -> int:
    raw = schema.get(TIMEOUT)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return DEFAULT_TIMEOUT_MS
    if isinstance(raw, bool):
        raise ConfigurationError(f"Timeout must be an integer, got {raw!r}", key=TIMEOUT)
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    try:
        timeout = int(str(raw).strip())
    except ValueError as e:
        raise ConfigurationError(f"Timeout must be an integer, got {raw!r}", key=TIMEOUT) from e
    if timeout <= 0:
        raise ConfigurationError(f"Timeout must be positive, got {timeout}", key=TIMEOUT)
    return timeout


def _body(schema: Mapping[str, Any]) -> str | None:
    body = schema.get(BODY)
    if body is None:
        return None
    if isinstance(body, str):
        return body
    return json.dumps(body)


def _string_pairs(schema: Mapping[str, Any], key: str) -> tuple[tuple[str, str], ...]:
    value = schema.get(key)
    if value is None:
        return ()
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"'{key}' must be a mapping of strings", key=key)
    return tuple((str(k), "" if v is None else str(v)) for k, v in value.items())


def _header_text(text: str, key: str) -> str:
    # header names and values go on the wire as ASCII
    try:
        text.encode("ascii")
    except UnicodeEncodeError as e:
        raise ConfigurationError(f"'{key}' must be ASCII, got {text!r}", key=key) from e
    return text
