"""
Structured Output Strategies
============================

Providers differ in how they can be made to return the classification JSON.
Each strategy implements a single `invoke` call that sends one chat request
and returns a validated `ClassificationSchema`:

- `SchemaConstrainedStrategy` passes the schema to the model as a hard output
  constraint (OpenAI structured outputs). The parsed object is trusted.
- `FreeTextExtractionStrategy` asks for JSON in the system prompt and then
  extracts and validates the first JSON object found in the reply.

Strategies never retry. Retries belong to the workflow.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

import structlog
from openai import AsyncOpenAI

from .prompts import JSON_ONLY_INSTRUCTION
from .schema import (
    ClassificationSchema,
    ResponseParseError,
    parse_classification_response,
)

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class GenerationParams:
    temperature: float
    max_tokens: int
    timeout: float


@dataclass(frozen=True)
class GenerationOutcome:
    data: ClassificationSchema
    model: str
    raw_text: str


def _messages(system_prompt: str, user_prompt: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


class OutputStrategy(ABC):
    """Abstract base class for structured output acquisition."""

    name: ClassVar[str]

    @abstractmethod
    async def invoke(
        self,
        client: AsyncOpenAI,
        model: str,
        params: GenerationParams,
        system_prompt: str,
        user_prompt: str,
        schema: type[ClassificationSchema] = ClassificationSchema,
    ) -> GenerationOutcome:
        """
        Send one generation request and return the validated output.

        Raises `ResponseParseError` when the reply cannot be turned into
        *schema*. Transport and API errors propagate unchanged.
        """
        raise NotImplementedError


class SchemaConstrainedStrategy(OutputStrategy):
    name = "schema-constrained"

    async def invoke(
        self,
        client: AsyncOpenAI,
        model: str,
        params: GenerationParams,
        system_prompt: str,
        user_prompt: str,
        schema: type[ClassificationSchema] = ClassificationSchema,
    ) -> GenerationOutcome:
        completion = await client.chat.completions.parse(
            model=model,
            messages=_messages(system_prompt, user_prompt),
            response_format=schema,
            temperature=params.temperature,
            max_tokens=params.max_tokens,
            timeout=params.timeout,
        )
        message = completion.choices[0].message
        if message.parsed is None:
            refusal = getattr(message, "refusal", None)
            reason = (
                "Model refused to classify"
                if refusal
                else "Model returned no structured output"
            )
            raise ResponseParseError(reason, refusal or message.content or "")

        return GenerationOutcome(
            data=message.parsed,
            model=completion.model or model,
            raw_text=message.content or "",
        )


class FreeTextExtractionStrategy(OutputStrategy):
    name = "free-text-extraction"

    async def invoke(
        self,
        client: AsyncOpenAI,
        model: str,
        params: GenerationParams,
        system_prompt: str,
        user_prompt: str,
        schema: type[ClassificationSchema] = ClassificationSchema,
    ) -> GenerationOutcome:
        system_prompt = f"{system_prompt}\n\n{JSON_ONLY_INSTRUCTION}"

        completion = await client.chat.completions.create(
            model=model,
            messages=_messages(system_prompt, user_prompt),
            temperature=params.temperature,
            max_tokens=params.max_tokens,
            timeout=params.timeout,
        )
        text = completion.choices[0].message.content or ""
        data = parse_classification_response(text, schema)
        log.debug("Extracted JSON from free-text response", model=model)
        return GenerationOutcome(
            data=data,
            model=completion.model or model,
            raw_text=text,
        )
