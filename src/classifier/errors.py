"""
Error taxonomy for message classification.

Every error carries a string ``kind`` tag and a ``details()`` payload. At the
activity boundary the tag becomes the Temporal application error type, so
callers on the other side of the workflow service can tell failures apart
without relying on Python classes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from .types import ClassificationRequest


def _summarize(cause: BaseException | None) -> str | None:
    if cause is None:
        return None
    return f"{type(cause).__name__}: {cause}"


class MessageClassifierError(Exception):
    kind: ClassVar[str] = "MessageClassifierError"
    non_retryable: bool = False

    def __init__(self, message: str, *, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause

    def details(self) -> dict[str, Any]:
        return {"cause": _summarize(self.cause)}


class ConfigurationError(MessageClassifierError, ValueError):
    """The process is not configured well enough to serve classifications."""

    kind = "ConfigurationError"
    non_retryable = True

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors) or "Invalid configuration")
        self.errors = list(errors)

    def details(self) -> dict[str, Any]:
        return {"errors": list(self.errors)}


class ProviderError(MessageClassifierError):
    """A model handle could not be resolved for a provider."""

    kind = "ProviderError"

    def __init__(
        self, message: str, provider: str, *, cause: BaseException | None = None
    ):
        super().__init__(message, cause=cause)
        self.provider = provider

    def details(self) -> dict[str, Any]:
        return {"provider": self.provider, "cause": _summarize(self.cause)}


class RequestValidationError(MessageClassifierError):
    """Caller input was rejected before any work was dispatched."""

    kind = "ValidationError"
    non_retryable = True


class ClassificationError(MessageClassifierError):
    """Model invocation, JSON extraction or schema validation failed."""

    kind = "ClassificationError"

    def __init__(
        self,
        message: str,
        request: "ClassificationRequest",
        *,
        cause: BaseException | None = None,
        non_retryable: bool = False,
    ):
        super().__init__(message, cause=cause)
        self.request = request
        self.non_retryable = non_retryable

    def details(self) -> dict[str, Any]:
        return {
            "request": self.request.to_wire(),
            "cause": _summarize(self.cause),
        }
