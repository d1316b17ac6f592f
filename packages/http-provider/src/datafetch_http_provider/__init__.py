"""HTTP data provider.

Turns a declarative source configuration (url, credentials, method, headers,
body, query parameters, timeout, response parser) into Dataframes.
"""

from datafetch_http_provider.errors import (
    ConfigurationError,
    FetchError,
    FetchTimeoutError,
    PathNotFoundError,
    ProviderError,
    ResponseParseError,
)
from datafetch_http_provider.fetcher import HttpDataFetcher
from datafetch_http_provider.parsers import register_parser
from datafetch_http_provider.provider import HttpDataProvider
from datafetch_http_provider.request_params import RequestSpec, build_request_spec

__all__ = [
    "ConfigurationError",
    "FetchError",
    "FetchTimeoutError",
    "HttpDataFetcher",
    "HttpDataProvider",
    "PathNotFoundError",
    "ProviderError",
    "RequestSpec",
    "ResponseParseError",
    "build_request_spec",
    "register_parser",
]
