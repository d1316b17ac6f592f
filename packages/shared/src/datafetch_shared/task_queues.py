"""Task queue name constants.

Each provider runs on its own Temporal worker with a dedicated task queue so
slow remote sources never starve other work. Both the worker runner and any
workflow that dispatches provider activities reference these constants.
"""

# Providers: one queue per provider kind
HTTP_PROVIDER_QUEUE = "http-provider-queue"

ALL_QUEUES = (HTTP_PROVIDER_QUEUE,)
