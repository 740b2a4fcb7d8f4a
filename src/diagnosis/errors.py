# src/diagnosis/errors.py — v1
"""Error taxonomy of the diagnosis gateway.

Callers only ever see InvalidInput, ProviderConfigMissing or
CascadeExhausted. ModelAttemptFailed (and its ParseError subclass) is
recovered inside the cascade; PersistenceFailure is logged and dropped.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from avidiag.diagnosis.models import CascadeAttemptResult


class DiagnosisError(Exception):
    """Base class for gateway errors."""


class InvalidInput(DiagnosisError):
    """Request carries no image, no symptom and no description."""


class ProviderConfigMissing(DiagnosisError):
    """No credential available for any known provider."""


class ModelAttemptFailed(DiagnosisError):
    """One cascade attempt failed; the cascade moves on to the next model."""

    def __init__(self, message: str, model_id: str | None = None):
        self.model_id = model_id
        super().__init__(message)


class ParseError(ModelAttemptFailed):
    """Completion text could not be normalized into a diagnosis."""


class CascadeExhausted(DiagnosisError):
    """Every model of the selected provider failed."""

    def __init__(self, provider: str, attempts: list[CascadeAttemptResult]):
        self.provider = provider
        self.attempts = attempts
        last_error = attempts[-1].error if attempts else None
        self.last_error = last_error or "no model configured"
        super().__init__(
            f"All {provider} models failed ({len(attempts)} attempts). "
            f"Last error: {self.last_error}"
        )


class PersistenceFailure(DiagnosisError):
    """A fresh result could not be written to the cache store."""

    def __init__(self, entry_id: str, cause: Exception):
        self.entry_id = entry_id
        self.cause = cause
        super().__init__(f"Could not persist analysis {entry_id}: {cause}")
