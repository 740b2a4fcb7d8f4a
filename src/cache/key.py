# src/cache/key.py — v1
"""Deterministic cache key for a diagnosis request.

The key has three segments joined by ``::``:

1. image references, each cut to its trailing 20 characters, sorted and
   joined with ``|``;
2. symptoms, sorted and joined with ``|``;
3. the first 50 characters of the description.

The image segment is a positional fingerprint of the reference string, not a
content hash: two uploads whose references share a 20-character suffix map
to the same segment. Keys already stored by earlier deployments depend on
this exact format.
"""

from __future__ import annotations

from typing import Any

SEGMENT_SEPARATOR = "::"
ITEM_SEPARATOR = "|"
IMAGE_SUFFIX_LENGTH = 20
DESCRIPTION_PREFIX_LENGTH = 50


def build_cache_key(images: Any, symptoms: Any, description: Any) -> str:
    """Build the cache key from raw request inputs.

    Total function: missing or mistyped inputs are treated as empty.
    """
    safe_images = _as_str_list(images)
    safe_symptoms = _as_str_list(symptoms)
    safe_description = description if isinstance(description, str) else ""

    image_part = ITEM_SEPARATOR.join(
        sorted(img[-IMAGE_SUFFIX_LENGTH:] for img in safe_images)
    )
    symptom_part = ITEM_SEPARATOR.join(sorted(safe_symptoms))
    description_part = safe_description[:DESCRIPTION_PREFIX_LENGTH]

    return SEGMENT_SEPARATOR.join((image_part, symptom_part, description_part))


def _as_str_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [item if isinstance(item, str) else "" for item in value]
