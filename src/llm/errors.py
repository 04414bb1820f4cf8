# src/llm/errors.py — v1
"""Provider error taxonomy and user-facing messages.

Classification is driven by HTTP status, error code and error type. The
only free-text checks are the documented substrings some providers put in
messages instead of a structured status (quota, auth, 5xx, unknown model).
"""

from __future__ import annotations

import asyncio
import re
from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure categories surfaced to callers."""

    INVALID_CREDENTIALS = "invalid_credentials"
    RATE_LIMITED = "rate_limited"
    PROVIDER_SERVER_ERROR = "provider_server_error"
    NETWORK_ERROR = "network_error"
    INVALID_REQUEST = "invalid_request"
    UNKNOWN = "unknown"


class ProviderError(Exception):
    """Failure reported by a completion provider, normalized across SDKs."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        code: str | None = None,
        type: str | None = None,  # noqa: A002
        provider: str | None = None,
    ) -> None:
        self.message = message
        self.status = status
        self.code = code
        self.type = type
        self.provider = provider
        super().__init__(message)


class EnhancementError(Exception):
    """Terminal enhancement failure with a stable, human-readable message."""

    def __init__(self, kind: ErrorKind, message: str, cause: BaseException | None = None):
        self.kind = kind
        self.message = message
        self.cause = cause
        super().__init__(message)


class MissingCredentialsError(ValueError):
    """No usable API key for the selected provider."""


NETWORK_ERROR_CODES = frozenset({
    "ECONNRESET", "ETIMEDOUT", "ECONNREFUSED", "ENOTFOUND", "EAI_AGAIN",
    "timeout", "connection_error",
})
_INVALID_REQUEST_STATUSES = frozenset({400, 404, 409, 413, 422})
_LEADING_5XX = re.compile(r"^\s*5\d\d\b")
_BAD_KEY_MARKER = "API key not valid"

_PROVIDER_LABELS = {"openai": "OpenAI", "google": "Gemini", "gemini": "Gemini"}

MESSAGE_PREFIX = "Failed to enhance prompt. "


def error_status(error: BaseException) -> int | None:
    """HTTP-like status from ProviderError or foreign SDK exceptions."""
    for attr in ("status", "status_code"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    return None


def classify_error(error: BaseException) -> ErrorKind:
    """Map an exception to an ErrorKind. Deterministic; never raises."""
    status = error_status(error)
    code = getattr(error, "code", None)
    etype = getattr(error, "type", None)

    if status in (401, 403):
        return ErrorKind.INVALID_CREDENTIALS
    if status == 400 and _BAD_KEY_MARKER in str(error):
        # Gemini reports a rejected key as 400 INVALID_ARGUMENT.
        return ErrorKind.INVALID_CREDENTIALS
    if status == 429:
        return ErrorKind.RATE_LIMITED
    if status is not None and status >= 500:
        return ErrorKind.PROVIDER_SERVER_ERROR
    if code in NETWORK_ERROR_CODES or isinstance(
        error, (ConnectionError, TimeoutError, asyncio.TimeoutError)
    ):
        return ErrorKind.NETWORK_ERROR
    if etype == "invalid_request_error" or status in _INVALID_REQUEST_STATUSES:
        return ErrorKind.INVALID_REQUEST

    message = str(error)
    if "429 Too Many Requests" in message or "exceeded your current quota" in message:
        return ErrorKind.RATE_LIMITED
    if any(s in message for s in ("401 Unauthorized", "403 Forbidden", _BAD_KEY_MARKER)):
        return ErrorKind.INVALID_CREDENTIALS
    if _LEADING_5XX.match(message):
        return ErrorKind.PROVIDER_SERVER_ERROR
    if "not found for API version" in message:
        return ErrorKind.INVALID_REQUEST
    return ErrorKind.UNKNOWN


def clean_provider_message(message: str) -> str:
    """Strip SDK boilerplate (error prefixes, status/request-id suffixes)."""
    message = re.sub(r"\[GoogleGenerativeAI Error\]:\s*", "", message)
    message = re.sub(r"Error: OpenAI: ", "", message)
    message = re.sub(r"\((?:status code|Status code|Request ID): [^)]+\)", "", message)
    return message.strip()


def user_message(kind: ErrorKind, error: BaseException | None = None) -> str:
    """Stable message for ``kind``; only invalid requests echo provider text."""
    provider = getattr(error, "provider", None) if error is not None else None
    label = _PROVIDER_LABELS.get(provider or "", "")
    named = f"{label} " if label else ""
    suffix = f" ({label})" if label else ""

    if kind is ErrorKind.INVALID_CREDENTIALS:
        detail = f"Invalid {named}API key. Please check your API key in settings."
    elif kind is ErrorKind.RATE_LIMITED:
        detail = f"Rate limit exceeded{suffix}. Please try again later or check your account limits."
    elif kind is ErrorKind.PROVIDER_SERVER_ERROR:
        if error is not None and error_status(error) == 503:
            detail = (
                f"The {named}service is temporarily unavailable. "
                "Please try again in a few minutes."
            )
        else:
            detail = f"Provider server error{suffix}. Please try again later."
    elif kind is ErrorKind.NETWORK_ERROR:
        detail = "Network connection error. Please check your internet connection."
    elif kind is ErrorKind.INVALID_REQUEST:
        raw = clean_provider_message(getattr(error, "message", None) or str(error or ""))
        detail = f"Invalid request: {raw or 'Please check your inputs and try again.'}"
    else:
        detail = "Unexpected error occurred. Please try again."
    return MESSAGE_PREFIX + detail.strip()


def to_enhancement_error(error: BaseException) -> EnhancementError:
    """Wrap any failure into an EnhancementError (idempotent)."""
    if isinstance(error, EnhancementError):
        return error
    kind = classify_error(error)
    return EnhancementError(kind, user_message(kind, error), cause=error)
