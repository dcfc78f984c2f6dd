"""
Extraction and repair of JSON objects from model output.

Model replies are untrusted: they may be wrapped in markdown fences, carry
prose around the object, or contain small syntax slips. This module turns
such text into a dict, or raises MalformedResponse.
"""
import json
import logging
import re
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from interview_prep.core.exceptions import MalformedResponse

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*(.*?)\s*```\Z", re.DOTALL)
_STRING_RE = re.compile(r'("(?:[^"\\]|\\.)*")', re.DOTALL)
_BARE_KEY_RE = re.compile(r'([{,]\s*)([A-Za-z_][A-Za-z0-9_\-]*)\s*:')
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_SINGLE_QUOTED_RE = re.compile(r"'((?:[^'\\]|\\.)*)'")

_QUOTE_TRANSLATION = str.maketrans({
    "“": '"',
    "”": '"',
    "„": '"',
    "‘": "'",
    "’": "'",
})


def extract_json_text(raw_text: str) -> str:
    """
    Isolate the JSON object inside a model reply.

    A fence is stripped only when it wraps the whole reply; otherwise the span
    from the first '{' to the last '}' is used. Text without braces is
    returned stripped and left for the parser to reject.
    """
    text = raw_text.strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        return fenced.group(1).strip()

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return text[start:end + 1]
    return text


def _outside_strings(text: str, fix: Callable[[str], str]) -> str:
    """Apply fix to the spans of text that are not inside double-quoted strings."""
    parts = _STRING_RE.split(text)
    # split() with a capturing group puts the quoted spans at odd indices
    return "".join(part if index % 2 else fix(part) for index, part in enumerate(parts))


def _fix_structure(segment: str) -> str:
    segment = _BARE_KEY_RE.sub(r'\1"\2":', segment)
    return _TRAILING_COMMA_RE.sub(r"\1", segment)


def repair_json_text(text: str) -> str:
    """Apply heuristic fixes for the syntax slips models commonly make."""
    repaired = text.translate(_QUOTE_TRANSLATION)
    if '"' not in repaired:
        repaired = _SINGLE_QUOTED_RE.sub(lambda m: json.dumps(m.group(1)), repaired)
    return _outside_strings(repaired, _fix_structure)


def _loads_object(text: str) -> Optional[Any]:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def parse_model_json(raw_text: str) -> Dict[str, Any]:
    """
    Parse a model reply into a JSON object.

    Args:
        raw_text: The text part of the model reply

    Returns:
        The decoded object

    Raises:
        MalformedResponse: if no JSON object can be recovered
    """
    raw_text = raw_text or ""
    parsed = _loads_object(raw_text.strip())
    if parsed is None:
        candidate = extract_json_text(raw_text)
        parsed = _loads_object(candidate)
        if parsed is None:
            repaired = repair_json_text(candidate)
            try:
                parsed = json.loads(repaired)
                logger.info("Recovered model JSON after heuristic repair")
            except json.JSONDecodeError as e:
                logger.error(f"Unparsable model output after repair ({e}): {raw_text!r}")
                raise MalformedResponse("Model output is not valid JSON", raw_text=raw_text) from e

    if not isinstance(parsed, dict):
        logger.error(f"Model output is JSON but not an object: {raw_text!r}")
        raise MalformedResponse("Model output is not a JSON object", raw_text=raw_text)
    return parsed


def validate_shape(data: Dict[str, Any], response_model: Type[T], raw_text: str = "") -> T:
    """Validate a decoded object against the expected shape, rejecting on mismatch."""
    try:
        return response_model.model_validate(data)
    except PydanticValidationError as e:
        logger.error(
            f"Model output does not match {response_model.__name__}: {e.error_count()} errors; raw: {raw_text!r}"
        )
        raise MalformedResponse(
            f"Model output does not match the expected {response_model.__name__} shape",
            raw_text=raw_text,
        ) from e
