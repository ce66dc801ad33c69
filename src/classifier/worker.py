"""
Message Classification Worker
=============================

Long-running process that serves the classification workflows and
activities from the configured Temporal task queue.

The LLM provider configuration is validated before connecting to Temporal;
when it is invalid the worker logs every problem and exits with status 1
instead of accepting work it cannot complete.
"""

from __future__ import annotations

import asyncio

import structlog
from temporalio.worker import Worker

from common.config import Settings
from common.logging_config import configure_logging
from common.temporal import connect_client

from .activities import ClassificationActivities
from .errors import ConfigurationError
from .registry import ProviderRegistry
from .service import MessageClassifier
from .workflows import (
    BatchMessageClassificationWorkflow,
    MessageClassificationWorkflow,
)

WORKFLOWS = [MessageClassificationWorkflow, BatchMessageClassificationWorkflow]


def build_registry(settings: Settings) -> ProviderRegistry:
    """Create the provider registry and fail fast on invalid configuration."""
    log = structlog.get_logger(__name__)
    registry = ProviderRegistry(settings)
    report = registry.validate_configuration()
    if not report.ok:
        log.error("LLM configuration validation failed", errors=report.errors)
        report.raise_for_errors()

    log.info(
        "LLM configuration validated successfully",
        available_providers=sorted(registry.list_available()),
        selected_provider=registry.selected_provider,
        model=registry.selected_model,
    )
    return registry


async def run_worker(settings: Settings) -> None:
    log = structlog.get_logger(__name__)
    registry = build_registry(settings)
    client = await connect_client(settings)

    activities = ClassificationActivities(MessageClassifier(registry))
    worker = Worker(
        client,
        task_queue=settings.TASK_QUEUE,
        workflows=WORKFLOWS,
        activities=[activities.classify_message],
    )

    log.info("Starting classification worker", task_queue=settings.TASK_QUEUE)
    try:
        await worker.run()
    finally:
        await registry.close()


def main() -> None:
    """Entry point for the classification worker."""
    log = structlog.get_logger(__name__)

    try:
        settings = Settings()
        configure_logging(settings)
    except ValueError as e:
        log.error("Configuration error", error=str(e))
        raise SystemExit(1)

    try:
        asyncio.run(run_worker(settings))
    except ConfigurationError:
        raise SystemExit(1)
    except KeyboardInterrupt:
        log.info("Ctrl-C received; exiting")


if __name__ == "__main__":
    main()
