"""Component registry: maps component names to their task queue and activities.

The runner looks up the component named on the command line here to decide
what to register on the worker. Adding a provider means adding its activities
module and one entry below.
"""

from dataclasses import dataclass, field
from typing import Any

from datafetch_http_provider.activities import (
    get_source_schema,
    load_source_data,
    test_source_connection,
)
from datafetch_shared.task_queues import HTTP_PROVIDER_QUEUE


@dataclass
class ComponentConfig:
    """Configuration for a single component's worker."""

    task_queue: str
    activities: list[Any] = field(default_factory=list)


COMPONENTS: dict[str, ComponentConfig] = {
    "http-provider": ComponentConfig(
        task_queue=HTTP_PROVIDER_QUEUE,
        activities=[load_source_data, test_source_connection, get_source_schema],
    ),
}
