"""Error taxonomy for the HTTP provider.

Every failure the provider raises is a ProviderError subclass carrying a
``kind`` and a structured ``context`` (offending key, schema index, status
code, url or path). None of them format user-facing text; the calling service
layer owns that. Per-cell coercion mismatches are not errors at all.
"""

from __future__ import annotations

from typing import Any


class ProviderError(Exception):
    """Base class for all provider failures."""

    kind = "provider_error"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = {k: v for k, v in context.items() if v is not None}

    @property
    def schema_index(self) -> int | None:
        return self.context.get("schema_index")

    def with_schema_index(self, index: int) -> ProviderError:
        """Record which schema of a batch failed. Returns self for re-raising."""
        self.context.setdefault("schema_index", index)
        return self

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v!r}" for k, v in sorted(self.context.items()))
        return f"{self.message} ({details})"


class ConfigurationError(ProviderError, ValueError):
    """A schema description cannot be turned into a request spec.

    Raised at build time, before any network activity.
    """

    kind = "configuration_error"

    def __init__(self, message: str, *, key: str | None = None, **context: Any) -> None:
        super().__init__(message, key=key, **context)

    @property
    def key(self) -> str | None:
        return self.context.get("key")


class FetchError(ProviderError):
    """Network failure or non-success HTTP status."""

    kind = "fetch_error"

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message, url=url, status_code=status_code, **context)

    @property
    def status_code(self) -> int | None:
        return self.context.get("status_code")


class FetchTimeoutError(FetchError):
    """The configured timeout elapsed before the response arrived."""

    kind = "timeout_error"

    def __init__(self, message: str, *, timeout_ms: int | None = None, **context: Any) -> None:
        super().__init__(message, timeout_ms=timeout_ms, **context)


class PathNotFoundError(ProviderError):
    """The target property path does not resolve to an array in the response."""

    kind = "path_not_found"

    def __init__(self, message: str, *, path: str | None = None, **context: Any) -> None:
        super().__init__(message, path=path, **context)

    @property
    def path(self) -> str | None:
        return self.context.get("path")


class ResponseParseError(ProviderError):
    """The response body is not in the format the parser expects."""

    kind = "response_parse_error"
