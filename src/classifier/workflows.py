"""
Message Classification Workflows
================================

Two durable entry points, both routed through the same task queue:

- `MessageClassificationWorkflow` classifies one message.
- `BatchMessageClassificationWorkflow` classifies many messages concurrently
  and fails as a whole when any message fails. Results keep input order.

Input is validated before any activity is scheduled. The activity is retried
by Temporal according to `CLASSIFY_RETRY_POLICY`; once attempts run out the
last failure is raised to the caller as is.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy
from temporalio.exceptions import ActivityError, ApplicationError

with workflow.unsafe.imports_passed_through():
    from .activities import ClassificationActivities
    from .errors import RequestValidationError
    from .types import (
        ClassificationRequest,
        ClassificationResult,
        preview,
        validate_batch,
        validate_request,
    )

CLASSIFY_START_TO_CLOSE_TIMEOUT = timedelta(minutes=2)
CLASSIFY_HEARTBEAT_TIMEOUT = timedelta(seconds=30)
CLASSIFY_RETRY_POLICY = RetryPolicy(
    initial_interval=timedelta(seconds=1),
    backoff_coefficient=2.0,
    maximum_interval=timedelta(seconds=30),
    maximum_attempts=3,
    non_retryable_error_types=["ConfigurationError", "ValidationError"],
)


def _reject_invalid(error: RequestValidationError) -> ApplicationError:
    return ApplicationError(str(error), type=error.kind, non_retryable=True)


async def _classify(request: ClassificationRequest) -> ClassificationResult:
    return await workflow.execute_activity_method(
        ClassificationActivities.classify_message,
        request,
        start_to_close_timeout=CLASSIFY_START_TO_CLOSE_TIMEOUT,
        heartbeat_timeout=CLASSIFY_HEARTBEAT_TIMEOUT,
        retry_policy=CLASSIFY_RETRY_POLICY,
    )


@workflow.defn(name="messageClassificationWorkflow")
class MessageClassificationWorkflow:
    @workflow.run
    async def run(self, request: ClassificationRequest) -> ClassificationResult:
        try:
            validate_request(request)
        except RequestValidationError as e:
            raise _reject_invalid(e) from None

        workflow.logger.info(
            "Starting message classification workflow for message: %r",
            preview(request.message, 50),
        )
        try:
            result = await _classify(request)
        except ActivityError:
            workflow.logger.exception("Message classification workflow failed")
            raise

        workflow.logger.info(
            "Message classification completed: %s",
            "OFFENSIVE" if result.is_offensive else "NOT OFFENSIVE",
        )
        return result


@workflow.defn(name="batchMessageClassificationWorkflow")
class BatchMessageClassificationWorkflow:
    @workflow.run
    async def run(
        self, requests: list[ClassificationRequest]
    ) -> list[ClassificationResult]:
        try:
            validate_batch(requests)
        except RequestValidationError as e:
            raise _reject_invalid(e) from None

        workflow.logger.info(
            "Starting batch message classification workflow for %d messages",
            len(requests),
        )
        try:
            results = await asyncio.gather(*(_classify(r) for r in requests))
        except ActivityError:
            workflow.logger.exception("Batch message classification workflow failed")
            raise

        workflow.logger.info(
            "Batch message classification completed: %d messages processed",
            len(results),
        )
        return list(results)
