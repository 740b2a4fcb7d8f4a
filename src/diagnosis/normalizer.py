# src/diagnosis/normalizer.py — v1
"""Turn a raw model completion into a NormalizedDiagnosis.

Models are asked for bare JSON but frequently wrap it in a markdown fence.
When a fenced block is present only its interior is parsed; otherwise the
whole text is.
"""

from __future__ import annotations

import json
import re

from pydantic import ValidationError

from avidiag.diagnosis.errors import ParseError
from avidiag.diagnosis.models import NormalizedDiagnosis

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)


def extract_json_text(raw_text: str) -> str:
    """Interior of the first fenced block, or the text unchanged."""
    match = _FENCE_RE.search(raw_text)
    if match:
        return match.group(1)
    return raw_text


def normalize(raw_text: str) -> NormalizedDiagnosis:
    """Parse a completion into diagnosis, confidence and treatment plan.

    Raises:
        ParseError: Text is not a JSON object or lacks a required field.
    """
    text = extract_json_text(raw_text)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Response is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise ParseError(
            f"Expected a JSON object, got {type(data).__name__}"
        )

    try:
        return NormalizedDiagnosis.model_validate(data)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise ParseError(f"Invalid diagnosis payload ({fields})") from exc
