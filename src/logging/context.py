# src/logging/context.py — v1
"""Contextual logging support — attach request, requester, provider and model to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging — set per diagnosis request.
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_requester_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "requester_id", default=None
)
_provider: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "provider", default=None
)
_model: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "model", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    requester_id: str | None = None
    provider: str | None = None
    model: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        requester_id=_requester_id.get(),
        provider=_provider.get(),
        model=_model.get(),
    )


def set_request_context(request_id: str, requester_id: str) -> None:
    """Set request-level context (called once per diagnosis request)."""
    _request_id.set(request_id)
    _requester_id.set(requester_id)


def set_model_context(provider: str, model: str | None = None) -> None:
    """Set provider/model context (called per cascade attempt)."""
    _provider.set(provider)
    _model.set(model)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _requester_id.set(None)
    _provider.set(None)
    _model.set(None)
