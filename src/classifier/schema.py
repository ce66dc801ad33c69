"""
Structured Output Contract
==========================

This module defines the JSON shape every provider must produce and the
helpers that turn free-form model output into that shape.

The schema-constrained path hands `ClassificationSchema` to the model as a
hard output constraint. The free-text path asks for JSON in the prompt and
then runs the raw text through `parse_classification_response`, which
extracts the first brace-delimited object and validates it.
"""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class ClassificationSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        strict=True,
    )

    is_offensive: bool = Field(
        description="Whether the message contains offensive content"
    )
    confidence: float = Field(
        ge=0.0, le=1.0, description="Confidence score from 0 to 1"
    )
    reasoning: str = Field(
        description="Brief explanation of the classification decision"
    )
    categories: list[str] | None = Field(
        default=None,
        description=(
            "Specific offensive categories if applicable "
            "(e.g., hate-speech, harassment, explicit-content)"
        ),
    )


class ResponseParseError(ValueError):
    """Raw model output could not be turned into a `ClassificationSchema`."""

    def __init__(self, reason: str, raw_text: str):
        super().__init__(reason)
        self.reason = reason
        self.raw_text = raw_text


def extract_first_json_object(text: str) -> Any | None:
    """
    Return the JSON value spanning the first ``{`` to the last ``}`` in *text*.

    Returns None when the text holds no brace-delimited substring. Raises
    ``json.JSONDecodeError`` when the substring is not valid JSON, which
    includes text holding two separate objects.
    """
    match = _JSON_OBJECT_RE.search(text)
    if match is None:
        return None
    return json.loads(match.group(0))


def parse_classification_response(
    text: str, schema: type[ClassificationSchema] = ClassificationSchema
) -> ClassificationSchema:
    """
    Parse and validate a free-text model response.
    """
    try:
        data = extract_first_json_object(text)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Invalid JSON in response: {e}", text) from e

    if data is None:
        raise ResponseParseError("No JSON found in response", text)

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise ResponseParseError(f"Schema validation failed: {e}", text) from e
