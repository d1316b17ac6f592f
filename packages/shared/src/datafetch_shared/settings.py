"""Process-level settings read from environment variables.

Two Temporal connection modes are supported:

1. **Local dev**: no ``TEMPORAL_API_KEY``; connect to ``TEMPORAL_ADDRESS``
   (default ``localhost:7233``) without auth.
2. **Temporal Cloud**: ``TEMPORAL_API_KEY`` set; connect to
   ``TEMPORAL_REGIONAL_ENDPOINT`` with TLS. The regional endpoint is required
   in this mode; the namespace endpoint does not accept API key auth.

Per-source settings (URLs, credentials, timeouts) never live here. They arrive
with each load request.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, model_validator


class WorkerSettings(BaseModel):
    """Settings for a worker process."""

    temporal_address: str = "localhost:7233"
    temporal_namespace: str = "default"
    temporal_api_key: str | None = None
    temporal_regional_endpoint: str | None = None
    log_level: str = "INFO"
    component: str = ""

    @model_validator(mode="after")
    def _require_endpoint_with_api_key(self) -> WorkerSettings:
        if self.temporal_api_key and not self.temporal_regional_endpoint:
            raise ValueError(
                "TEMPORAL_API_KEY is set but TEMPORAL_REGIONAL_ENDPOINT is missing. "
                "Set it to the regional endpoint from the Temporal Cloud 'Connect' dialog."
            )
        return self

    @property
    def uses_cloud(self) -> bool:
        return bool(self.temporal_api_key)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> WorkerSettings:
        """Build settings from ``environ`` (defaults to ``os.environ``).

        Empty variables are treated as unset.
        """
        env = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for field_name in cls.model_fields:
            raw = env.get(field_name.upper(), "")
            if raw:
                values[field_name] = raw
        return cls(**values)
