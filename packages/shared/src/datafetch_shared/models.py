"""Pydantic base models shared across components.

Every activity result extends PlatformResult. Expected failures (a source that
cannot be reached, a payload that does not contain the configured property)
travel back as ``success=False`` with an ``error_kind`` naming the failure
class, so callers can branch on it without parsing the message.
"""

from pydantic import BaseModel


class PlatformResult(BaseModel):
    """Standard result envelope returned by activities."""

    success: bool
    message: str
    error_kind: str | None = None
    data: dict[str, str | int | float | bool | None] | None = None
