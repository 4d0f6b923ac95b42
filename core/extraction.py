"""
Structured extraction from natural-language provider output.

LLM responses are "JSON-adjacent": the object is usually wrapped in a
markdown code fence, sometimes preceded by a sentence of prose. This module
turns such text into a validated pydantic model or raises ExtractionError
naming exactly which fields were missing or malformed.

Usage:
    analysis = extract_structured(response_text, ScriptAnalysis, source="openai")
"""

import json
import logging
import re
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import ExtractionError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*\n?(.*?)\n?\s*```", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Return the body of the first markdown code fence, or the text itself."""
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def _isolate_object(text: str) -> str:
    # Prose before/after the object: keep the outermost {...}
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return text
    return text[start:end + 1]


def parse_json_object(text: str, source: str = "provider") -> dict[str, Any]:
    """Parse a JSON object out of provider text."""
    if not text or not text.strip():
        raise ExtractionError(f"Empty response from {source}", reason_code="EMPTY_RESPONSE")

    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        try:
            data = json.loads(_isolate_object(cleaned))
        except json.JSONDecodeError as e:
            logger.warning(f"Unparseable {source} response: {cleaned[:200]!r}")
            raise ExtractionError(
                f"Malformed JSON in {source} response: {e.msg} (line {e.lineno}, column {e.colno})",
                reason_code="MALFORMED_JSON",
            ) from e

    if not isinstance(data, dict):
        raise ExtractionError(
            f"Expected a JSON object from {source}, got {type(data).__name__}",
            reason_code="UNEXPECTED_SHAPE",
        )
    return data


def describe_validation_error(error: ValidationError) -> list[str]:
    """Flatten a pydantic ValidationError into 'field.path: problem' strings."""
    problems = []
    for item in error.errors():
        path = ".".join(str(part) for part in item["loc"]) or "<root>"
        if item["type"] == "missing":
            problems.append(f"{path}: missing")
        else:
            problems.append(f"{path}: {item['msg']}")
    return problems


def extract_structured(text: str, schema: Type[T], source: str = "provider") -> T:
    """
    Parse and validate provider text against a pydantic schema.

    Args:
        text: Raw response text
        schema: Pydantic model describing the expected structure
        source: Provider/operation name used in error messages

    Returns:
        Validated schema instance

    Raises:
        ExtractionError: If the text is not JSON or fails validation
    """
    data = parse_json_object(text, source=source)
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        fields = describe_validation_error(e)
        raise ExtractionError(
            f"{source} response does not match {schema.__name__}: " + "; ".join(fields),
            fields=fields,
            reason_code="SCHEMA_MISMATCH",
        ) from e
