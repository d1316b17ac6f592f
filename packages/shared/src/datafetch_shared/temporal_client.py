"""Temporal client connection factory.

Callers pass WorkerSettings and get a ready-to-use client back, without caring
whether it talks to a local dev server or Temporal Cloud.
"""

from __future__ import annotations

from temporalio.client import Client
from temporalio.contrib.pydantic import pydantic_data_converter

from datafetch_shared.settings import WorkerSettings


async def connect(settings: WorkerSettings | None = None) -> Client:
    """Create a connected Temporal client.

    The pydantic data converter is always installed, since every activity
    argument and result in this platform is a pydantic model.
    """
    settings = settings or WorkerSettings.from_env()

    if settings.uses_cloud:
        # Namespace routing is handled by the SDK; extra rpc_metadata breaks
        # API key authentication.
        return await Client.connect(
            settings.temporal_regional_endpoint or "",
            namespace=settings.temporal_namespace,
            api_key=settings.temporal_api_key,
            tls=True,
            data_converter=pydantic_data_converter,
        )

    return await Client.connect(
        settings.temporal_address,
        namespace=settings.temporal_namespace,
        data_converter=pydantic_data_converter,
    )
