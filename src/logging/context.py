# src/logging/context.py — v2
"""Contextual logging support — attach request_id, mode and step to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging — set per enhancement request.
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_mode: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "mode", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    mode: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        mode=_mode.get(),
        step=_step.get(),
    )


def set_request_context(request_id: str, mode: str) -> None:
    """Set request-level context (called once per enhancement request)."""
    _request_id.set(request_id)
    _mode.set(mode)


def set_step(step: str | None) -> None:
    """Record the pipeline state the current request is in."""
    _step.set(step)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _mode.set(None)
    _step.set(None)
