"""
Message Classification Service
==============================

`MessageClassifier` holds the classification algorithm independently of the
workflow engine, so it can be exercised directly in tests:

1. Reject blank messages before any model call.
2. Resolve the configured model handle through the registry.
3. Build the prompts and run the handle's output strategy (one model call).
4. Normalize the validated output into a `ClassificationResult`.

Every failure leaves as either `ProviderError` or `ClassificationError`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

import structlog

from .errors import ClassificationError, ProviderError
from .prompts import SYSTEM_PROMPT, build_user_prompt
from .registry import ProviderRegistry
from .schema import ClassificationSchema, ResponseParseError
from .types import ClassificationRequest, ClassificationResult, preview

log = structlog.get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MessageClassifier:
    """
    Classifies a message as offensive or not using the selected provider.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        provider_id: str | None = None,
        model: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.registry = registry
        self.provider_id = provider_id or registry.selected_provider
        self.model = model or registry.selected_model
        self._clock = clock

    async def classify(self, request: ClassificationRequest) -> ClassificationResult:
        if not request.message or not request.message.strip():
            raise ClassificationError(
                "Message cannot be empty", request, non_retryable=True
            )

        log_context = {
            "provider": self.provider_id,
            "model": self.model,
            "user_id": request.user_id,
        }
        log.info(
            "Classifying message",
            message_preview=preview(request.message),
            **log_context,
        )

        try:
            handle = self.registry.resolve(self.provider_id, self.model)
            outcome = await handle.generate(
                SYSTEM_PROMPT,
                build_user_prompt(request.message),
                ClassificationSchema,
            )
        except (ProviderError, ClassificationError):
            log.exception("Classification failed", **log_context)
            raise
        except ResponseParseError as e:
            log.warning(
                "Classification response invalid",
                error=e.reason,
                **log_context,
            )
            raise ClassificationError(
                f"Failed to parse {self.provider_id} response: {e.reason}. "
                f"Response was: {e.raw_text}",
                request,
                cause=e,
            ) from e
        except Exception as e:
            log.exception("Classification failed", **log_context)
            raise ClassificationError(
                f"Failed to classify message: {e}", request, cause=e
            ) from e

        data = outcome.data
        result = ClassificationResult(
            message=request.message,
            is_offensive=data.is_offensive,
            confidence=data.confidence,
            reasoning=data.reasoning,
            categories=list(data.categories or []),
            provider=handle.provider_id,
            model=outcome.model,
            timestamp=self._clock(),
        )

        log.info(
            "Classification result",
            verdict="OFFENSIVE" if result.is_offensive else "NOT OFFENSIVE",
            confidence=result.confidence,
            categories=result.categories or None,
            provider=result.provider,
            model=result.model,
        )
        return result
