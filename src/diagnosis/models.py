# src/diagnosis/models.py — v2
"""Diagnosis domain types: Product, NormalizedDiagnosis, ProviderConfig, cascade records."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """Marketplace product recommended alongside a diagnosis."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str
    price: int
    category: str
    seller: str
    rating: float
    image: str
    in_stock: bool = Field(default=True, alias="inStock")


class NormalizedDiagnosis(BaseModel):
    """Structured result extracted from a model completion.

    Fields are strict: a confidence sent as a string, a float or a boolean
    is rejected rather than coerced.
    """

    model_config = ConfigDict(populate_by_name=True)

    diagnosis: str = Field(strict=True)
    confidence: int = Field(ge=0, le=100, strict=True)
    treatment_plan: str = Field(alias="treatmentPlan", strict=True)


@dataclass(frozen=True)
class ProviderConfig:
    """Provider chosen for one request, with its ordered model cascade."""

    provider_name: str
    credential: str = field(repr=False)
    model_cascade_order: tuple[str, ...]
    base_url: str | None = None


@dataclass(frozen=True)
class CascadeAttemptResult:
    """Outcome of a single model attempt."""

    model_id: str
    succeeded: bool
    error: str | None = None
    latency_ms: int = 0


@dataclass
class CascadeOutcome:
    """Successful cascade run: the winning model and every attempt made."""

    result: NormalizedDiagnosis
    provider: str
    model_id: str
    attempts: list[CascadeAttemptResult]

    @property
    def failed_attempts(self) -> int:
        return sum(1 for a in self.attempts if not a.succeeded)
