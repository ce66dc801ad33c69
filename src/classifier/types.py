"""
Request and result models exchanged between the starter, the workflows and
the classification activity.

Both models serialize with the camelCase field names of the wire contract
(``isOffensive``, ``userId``...) and accept either spelling on input.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .errors import RequestValidationError

PREVIEW_LENGTH = 100


class _WireModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict[str, Any]:
        """Encode to the JSON-compatible wire shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ClassificationRequest(_WireModel):
    message: str
    user_id: str | None = None
    metadata: dict[str, Any] | None = None

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "ClassificationRequest":
        return cls.model_validate(data)


class ClassificationResult(_WireModel):
    message: str
    is_offensive: bool
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    reasoning: str | None = None
    categories: list[str] = Field(default_factory=list)
    provider: str
    model: str
    timestamp: datetime

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "ClassificationResult":
        return cls.model_validate(data)


def preview(message: str, limit: int = PREVIEW_LENGTH) -> str:
    """Shorten a message for log lines."""
    if len(message) <= limit:
        return message
    return message[:limit] + "..."


def validate_request(request: ClassificationRequest | None) -> None:
    """Reject a request whose message is absent or blank."""
    if request is None or not request.message or not request.message.strip():
        raise RequestValidationError("Invalid request: message is required")


def validate_batch(requests: Sequence[ClassificationRequest] | None) -> None:
    """Reject an empty batch or a batch containing an invalid request."""
    if not requests:
        raise RequestValidationError(
            "Invalid request: at least one message is required"
        )
    for index, request in enumerate(requests):
        try:
            validate_request(request)
        except RequestValidationError:
            raise RequestValidationError(
                f"Invalid request at position {index}: message is required"
            ) from None
