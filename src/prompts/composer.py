# src/prompts/composer.py — v1
"""Prompt composer — turn a classification and a mode into a PromptSpec.

System prompt layout (enhancement modes):

    <mode template>

    Consider the following context:
    - Domain / Tone / Length

    Platform-Specific Guidelines:
    <format block>
    <platform/tone block>

    IMPORTANT: <format preservation directive>

``answer`` mode uses a separate direct-answer persona and never receives
enhancement guidance. Composition is synchronous and never calls a provider.
"""

from __future__ import annotations

import time
from typing import Callable

from clipenhancer.core.models import ClassificationResult, PromptSpec
from clipenhancer.prompts.guidelines import guidelines_for
from clipenhancer.prompts.templates import (
    ANSWER_WITH_INSTRUCTIONS_TEMPLATE,
    BaseTemplateStore,
    resolve_template,
)

PRESERVATION_DIRECTIVE = (
    "IMPORTANT: Preserve the original format and structure of the text. "
    "The detected format is '{format}'. Do not convert simple messages into formal emails. "
    "Do not add unnecessary greetings or signatures if they weren't in the original. "
    "Maintain the original style, tone, and structure while improving the content."
)

REGENERATION_NOTE = (
    "IMPORTANT: This is a regeneration request. You MUST provide a completely different "
    "variation of the enhanced prompt than any previous version. Be creative and offer a "
    "distinctly different enhancement while maintaining the original meaning. "
    "Timestamp: {timestamp}"
)

_USER_LEADS: dict[str, str] = {
    "agent": (
        "Reformat this for AI coding assistants, maintaining context and preserving "
        "the original format ({format}): "
    ),
    "general": (
        "Enhance this prompt while preserving its original intent, format ({format}), "
        "and adapting to the detected context: "
    ),
}


class PromptComposer:
    """Select a template and append classification-driven guidance."""

    def __init__(
        self,
        template_store: BaseTemplateStore | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = template_store
        self._clock = clock

    def compose(
        self,
        classification: ClassificationResult,
        mode: str,
        text: str,
        instructions: str | None = None,
        regenerate: bool = False,
    ) -> PromptSpec:
        """Build the prompt pair for an enhancement request.

        Args:
            classification: Result of ContextClassifier.classify(text).
            mode: "agent", "general" or "answer".
            text: Original input text.
            instructions: Optional free-form caller instructions.
            regenerate: Append a uniqueness nonce asking for a different variant.
        """
        if mode == "answer":
            return self.compose_answer(text, instructions=instructions, regenerate=regenerate)

        fmt = classification.format
        analysis = classification.analysis
        system_prompt = "\n\n".join([
            resolve_template(self._store, mode),
            (
                "Consider the following context:\n"
                f"- Domain: {analysis.domain}\n"
                f"- Tone: {classification.tone}\n"
                f"- Length: {analysis.length_label}"
            ),
            "Platform-Specific Guidelines:\n"
            + guidelines_for(classification.platform, classification.tone, fmt),
            PRESERVATION_DIRECTIVE.format(format=fmt),
        ])

        lead = _USER_LEADS.get(mode, _USER_LEADS["general"]).format(format=fmt)
        user_prompt = lead + text
        if instructions and instructions.strip():
            user_prompt = f"Additional instructions: {instructions.strip()}\n\n{user_prompt}"
        if regenerate:
            user_prompt = f"{user_prompt}\n\n{self._nonce()}"

        return PromptSpec(mode=mode, system_prompt=system_prompt, user_prompt=user_prompt)  # type: ignore[arg-type]

    def compose_answer(
        self,
        text: str,
        instructions: str | None = None,
        regenerate: bool = False,
    ) -> PromptSpec:
        """Direct-answer prompt: answer the text instead of rewriting it."""
        if instructions and instructions.strip():
            system_prompt = ANSWER_WITH_INSTRUCTIONS_TEMPLATE
            user_prompt = (
                f"TEXT TO RESPOND TO:\n{text}\n\n"
                f"INSTRUCTIONS:\n{instructions.strip()}\n\n"
                "Please write a response based on these instructions."
            )
        else:
            system_prompt = resolve_template(self._store, "answer")
            user_prompt = text
        if regenerate:
            user_prompt = f"{user_prompt}\n\n{self._nonce()}"
        return PromptSpec(mode="answer", system_prompt=system_prompt, user_prompt=user_prompt)

    def _nonce(self) -> str:
        return REGENERATION_NOTE.format(timestamp=int(self._clock() * 1000))
