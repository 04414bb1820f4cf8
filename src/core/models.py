# src/core/models.py — v1
"""Core domain models shared by the classification and enhancement pipeline.

Tag sets are closed: every value the classifier can emit is listed here and
the pattern catalog is validated against these tuples at load time.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, get_args

from pydantic import BaseModel, ConfigDict, Field

PlatformTag = Literal[
    "email", "whatsapp", "slack", "twitter", "linkedin", "discord",
    "github", "teams", "telegram", "sms", "general",
]
ToneTag = Literal[
    "formal", "casual", "urgent", "technical",
    "professional", "friendly", "business", "neutral",
]
FormatTag = Literal[
    "email", "code", "list", "table", "json", "chat", "thread", "message", "text",
]
EnhancementMode = Literal["agent", "general", "answer"]
DomainTag = Literal["programming", "business", "academic", "general"]

PLATFORMS: tuple[str, ...] = get_args(PlatformTag)
TONES: tuple[str, ...] = get_args(ToneTag)
FORMATS: tuple[str, ...] = get_args(FormatTag)
MODES: tuple[str, ...] = get_args(EnhancementMode)

DEFAULT_PLATFORM: PlatformTag = "general"
DEFAULT_TONE: ToneTag = "neutral"


class MessageAnalysis(BaseModel):
    """Coarse shape of a message: size, question/code flags, subject domain."""

    model_config = ConfigDict(frozen=True)

    characters: int = 0
    words: int = 0
    is_brief: bool = True
    is_detailed: bool = False
    is_question: bool = False
    contains_code: bool = False
    domain: DomainTag = "general"

    @property
    def length_label(self) -> str:
        """'Detailed', 'Brief' or 'Moderate'."""
        if self.is_detailed:
            return "Detailed"
        if self.is_brief:
            return "Brief"
        return "Moderate"


class ClassificationResult(BaseModel):
    """Platform, tone and format selected for one input text.

    ``confidence`` is the accumulated score of the winning platform. It is
    a ranking signal, not a probability.
    """

    model_config = ConfigDict(frozen=True)

    platform: PlatformTag = DEFAULT_PLATFORM
    tone: ToneTag = DEFAULT_TONE
    format: FormatTag = "message"
    confidence: float = 0.0
    used_fallback: bool = False
    analysis: MessageAnalysis = Field(default_factory=MessageAnalysis)


class PromptSpec(BaseModel):
    """Fully composed prompt pair handed to the orchestrator."""

    model_config = ConfigDict(frozen=True)

    mode: EnhancementMode
    system_prompt: str
    user_prompt: str


class CacheEntry(BaseModel):
    """Cached enhancement result."""

    key: str
    result: str
    created_at: float


class EnhancementOutcome(BaseModel):
    """Terminal result of one enhancement request."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    error_kind: str | None = None
    error_message: str | None = None
    completed_at: datetime | None = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None


class ProviderConfig(BaseModel):
    """Provider selection supplied by the host application's settings store."""

    model_config = ConfigDict(frozen=True)

    provider: str = "openai"
    model: str = ""
    api_key: str = ""

    @property
    def has_credentials(self) -> bool:
        """False for empty keys and the 'undefined'/'null' placeholders some stores persist."""
        key = self.api_key.strip()
        return bool(key) and key not in ("undefined", "null")
