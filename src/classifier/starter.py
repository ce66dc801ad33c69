"""
Classification Starter
======================

Command line client that starts a classification workflow and logs the
result.

    message-classifier                      # one sample message
    message-classifier single "some text"   # classify the given message
    message-classifier batch                # four sample messages
    message-classifier batch "a" "b" "c"    # classify the given messages
"""

from __future__ import annotations

import argparse
import asyncio
import uuid
from datetime import datetime, timezone

import structlog
from temporalio.client import Client, WorkflowFailureError

from common.config import Settings
from common.logging_config import configure_logging
from common.temporal import connect_client

from .errors import RequestValidationError
from .types import (
    ClassificationRequest,
    ClassificationResult,
    validate_batch,
    validate_request,
)
from .workflows import (
    BatchMessageClassificationWorkflow,
    MessageClassificationWorkflow,
)

log = structlog.get_logger(__name__)

SAMPLE_MESSAGE = "Hello, this is a nice and friendly message!"

SAMPLE_BATCH = [
    "Hello, this is a nice and friendly message!",
    "You are such an idiot and I hate you!",
    "Can you help me with my homework please?",
    "This product is amazing, I love it!",
]


def _workflow_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:21]}"


def build_requests(mode: str, messages: list[str]) -> list[ClassificationRequest]:
    """Turn CLI messages (or the samples) into requests."""
    if mode == "batch":
        texts = messages or SAMPLE_BATCH
        return [
            ClassificationRequest(message=text, user_id=f"cli-user-{i}")
            for i, text in enumerate(texts, 1)
        ]

    text = " ".join(messages) if messages else SAMPLE_MESSAGE
    return [
        ClassificationRequest(
            message=text,
            user_id="cli-user",
            metadata={
                "source": "cli",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )
    ]


def _log_result(result: ClassificationResult, index: int | None = None) -> None:
    log.info(
        "Classification result",
        index=index,
        message=result.message,
        is_offensive=result.is_offensive,
        confidence=result.confidence,
        reasoning=result.reasoning,
        categories=result.categories,
        provider=result.provider,
        model=result.model,
        timestamp=result.timestamp.isoformat(),
    )


def summarize(results: list[ClassificationResult]) -> dict[str, int]:
    offensive = sum(1 for r in results if r.is_offensive)
    return {
        "total": len(results),
        "offensive": offensive,
        "clean": len(results) - offensive,
    }


async def run_single(
    client: Client, settings: Settings, request: ClassificationRequest
) -> ClassificationResult:
    workflow_id = _workflow_id("message-classification")
    log.info("Starting message classification workflow", workflow_id=workflow_id)
    result = await client.execute_workflow(
        MessageClassificationWorkflow.run,
        request,
        id=workflow_id,
        task_queue=settings.TASK_QUEUE,
    )
    _log_result(result)
    return result


async def run_batch(
    client: Client, settings: Settings, requests: list[ClassificationRequest]
) -> list[ClassificationResult]:
    workflow_id = _workflow_id("batch-classification")
    log.info(
        "Starting batch classification workflow",
        workflow_id=workflow_id,
        message_count=len(requests),
    )
    results = await client.execute_workflow(
        BatchMessageClassificationWorkflow.run,
        requests,
        id=workflow_id,
        task_queue=settings.TASK_QUEUE,
    )
    for index, result in enumerate(results, 1):
        _log_result(result, index)
    log.info("Batch summary", **summarize(results))
    return results


async def run(settings: Settings, mode: str, messages: list[str]) -> None:
    """Validate the requests, then connect and start the workflow."""
    requests = build_requests(mode, messages)
    if mode == "batch":
        validate_batch(requests)
    else:
        validate_request(requests[0])

    client = await connect_client(settings)
    if mode == "batch":
        await run_batch(client, settings, requests)
    else:
        await run_single(client, settings, requests[0])


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="message-classifier",
        description="Classify messages as offensive or not via Temporal workflows.",
    )
    parser.add_argument("mode", nargs="?", choices=("single", "batch"), default="single")
    parser.add_argument("messages", nargs="*", help="Messages to classify")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    try:
        settings = Settings()
        configure_logging(settings)
    except ValueError as e:
        log.error("Configuration error", error=str(e))
        raise SystemExit(1)

    log.info(
        "Running classification",
        mode=args.mode,
        llm_provider=settings.LLM_PROVIDER,
        model=settings.DEFAULT_MODEL,
    )

    try:
        asyncio.run(run(settings, args.mode, args.messages))
    except RequestValidationError as e:
        log.error("Invalid request", error=str(e))
        raise SystemExit(2)
    except WorkflowFailureError as e:
        log.error("Workflow failed", error=str(e), cause=str(e.cause))
        raise SystemExit(1)


if __name__ == "__main__":
    main()
