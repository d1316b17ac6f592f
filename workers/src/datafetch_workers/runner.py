"""Worker runner entrypoint.

Usage:
  python -m datafetch_workers.runner <component-name>
  COMPONENT=http-provider python -m datafetch_workers.runner

The CLI argument takes precedence over COMPONENT. Connection settings and the
log level come from the environment (see datafetch_shared.settings). The
worker polls the component's task queue until interrupted.
"""

import asyncio
import logging
import sys

from datafetch_shared.settings import WorkerSettings
from datafetch_shared.temporal_client import connect
from temporalio.worker import Worker

from datafetch_workers.registry import COMPONENTS

logger = logging.getLogger(__name__)


def resolve_component(argv: list[str], settings: WorkerSettings) -> str:
    """Pick the component name: CLI argument first, then COMPONENT."""
    return argv[1] if len(argv) >= 2 else settings.component


async def run_worker(component_name: str, settings: WorkerSettings) -> None:
    """Start a Temporal worker for the specified component."""
    config = COMPONENTS[component_name]
    client = await connect(settings)

    logger.info(
        f"Starting worker for '{component_name}' on queue '{config.task_queue}' "
        f"(activities={len(config.activities)})"
    )
    worker = Worker(
        client,
        task_queue=config.task_queue,
        activities=config.activities,
    )
    await worker.run()


def main() -> None:
    settings = WorkerSettings.from_env()
    logging.basicConfig(level=settings.log_level.upper())

    component_name = resolve_component(sys.argv, settings)
    if not component_name:
        print("Usage: python -m datafetch_workers.runner <component>")
        print("  or: COMPONENT=<component> python -m datafetch_workers.runner")
        print(f"Components: {', '.join(sorted(COMPONENTS))}")
        sys.exit(1)
    if component_name not in COMPONENTS:
        available = ", ".join(sorted(COMPONENTS))
        logger.error(f"Unknown component '{component_name}'. Available: {available}")
        sys.exit(1)

    asyncio.run(run_worker(component_name, settings))


if __name__ == "__main__":
    main()
