"""
Temporal activities for message classification.
"""

from __future__ import annotations

import asyncio

import structlog
from temporalio import activity
from temporalio.exceptions import ApplicationError

from .errors import MessageClassifierError
from .service import MessageClassifier
from .types import ClassificationRequest, ClassificationResult

log = structlog.get_logger(__name__)

CLASSIFY_ACTIVITY_NAME = "classifyMessage"
HEARTBEAT_INTERVAL_SECONDS = 10.0


class ClassificationActivities:
    """
    Activity implementations bound to a shared `MessageClassifier`.

    Register ``instance.classify_message`` with the worker.
    """

    def __init__(
        self,
        classifier: MessageClassifier,
        heartbeat_interval: float = HEARTBEAT_INTERVAL_SECONDS,
    ):
        self.classifier = classifier
        self.heartbeat_interval = heartbeat_interval

    @activity.defn(name=CLASSIFY_ACTIVITY_NAME)
    async def classify_message(
        self, request: ClassificationRequest
    ) -> ClassificationResult:
        info = activity.info()
        log.info(
            "Classification attempt started",
            workflow_id=info.workflow_id,
            attempt=info.attempt,
        )
        try:
            return await self._run_with_heartbeat(request)
        except MessageClassifierError as e:
            log.warning(
                "Classification attempt failed",
                workflow_id=info.workflow_id,
                attempt=info.attempt,
                error_type=e.kind,
                error=str(e),
            )
            raise ApplicationError(
                str(e),
                e.details(),
                type=e.kind,
                non_retryable=e.non_retryable,
            ) from e

    async def _run_with_heartbeat(
        self, request: ClassificationRequest
    ) -> ClassificationResult:
        # Heartbeats are how a workflow cancellation reaches this coroutine.
        task = asyncio.ensure_future(self.classifier.classify(request))
        try:
            while True:
                done, _ = await asyncio.wait({task}, timeout=self.heartbeat_interval)
                if done:
                    return task.result()
                activity.heartbeat()
        finally:
            if not task.done():
                task.cancel()
