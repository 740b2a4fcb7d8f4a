# src/api/models.py — v1
"""API-level models: InferenceRequest, DiagnosisResponse.

Inbound payloads come from the mobile client with camelCase keys
(``subjectId``/``lotId``, ``requesterId``); both spellings are accepted.
Responses serialize back to camelCase via ``to_payload()``.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from avidiag.cache.models import CacheEntry
from avidiag.diagnosis.models import Product


class InferenceRequest(BaseModel):
    """One diagnosis request. Absent or mistyped inputs become empty."""

    images: list[str] = Field(default_factory=list)
    symptoms: list[str] = Field(default_factory=list)
    description: str = ""
    subject_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("subject_id", "subjectId", "lotId"),
    )
    requester_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices("requester_id", "requesterId"),
    )

    @field_validator("images", "symptoms", mode="before")
    @classmethod
    def coerce_str_list(cls, v: Any) -> list[str]:  # noqa: N805
        if not isinstance(v, (list, tuple)):
            return []
        return [item if isinstance(item, str) else "" for item in v]

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, v: Any) -> str:  # noqa: N805
        return v.strip() if isinstance(v, str) else ""

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to diagnose."""
        return not self.images and not self.symptoms and not self.description


class DiagnosisResponse(BaseModel):
    """Result returned to the caller, fresh or from cache."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    diagnosis: str
    confidence: int
    treatment_plan: str = Field(alias="treatmentPlan")
    recommended_products: list[Product] = Field(
        default_factory=list, alias="recommendedProducts"
    )
    cached: bool = False

    @classmethod
    def from_entry(cls, entry: CacheEntry, cached: bool = True) -> DiagnosisResponse:
        """Build a response from a stored entry."""
        return cls(
            id=entry.id,
            diagnosis=entry.diagnosis,
            confidence=entry.confidence,
            treatment_plan=entry.treatment_plan,
            recommended_products=entry.recommended_products,
            cached=cached,
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict with the client's camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
