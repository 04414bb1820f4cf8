# src/prompts/templates.py — v1
"""Mode-specific system prompt templates.

Templates come from a store (directory of text files, or an in-memory
mapping). Anything the store does not provide falls back to the built-in
defaults below, which cover all three modes.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES: dict[str, str] = {
    "agent": (
        "You are an AI assistant specialized in creating effective prompts for other AI systems.\n"
        "Your task is to reformat the user's input into a clear, structured prompt that will "
        "get optimal results from an AI coding assistant.\n\n"
        "Format the prompt to be clear, specific, and actionable. Include:\n"
        "1. A clear statement of the task or problem\n"
        "2. Any relevant context or constraints\n"
        "3. The expected format or structure of the response\n"
        "4. Any specific requirements or preferences"
    ),
    "general": (
        "You are an AI assistant specialized in enhancing user prompts to be more effective.\n"
        "Your task is to improve the user's input while preserving their original intent.\n\n"
        "Enhance the prompt to be:\n"
        "1. Clear and specific\n"
        "2. Well-structured\n"
        "3. Contextually appropriate\n"
        "4. Effective for the intended platform\n\n"
        "Maintain the user's original intent and tone while making the prompt more effective."
    ),
    "answer": (
        "You are a helpful assistant that provides direct, concise, and accurate answers. "
        "Respond directly to the user's question or request without unnecessary preamble. "
        "Be thorough but efficient with your response."
    ),
}

ANSWER_WITH_INSTRUCTIONS_TEMPLATE = (
    "You are a helpful assistant that crafts responses based on specific user instructions.\n"
    "You will be given:\n"
    "1. A piece of text (like an email or message)\n"
    "2. Instructions on how to respond to it\n\n"
    "Your task is to generate a well-crafted response following those instructions precisely.\n"
    "Be concise, professional, and natural in your response."
)

# Shared template used by the file store when no mode-specific file exists.
SHARED_TEMPLATE_FILE = "enhanced-system-prompt.txt"


class BaseTemplateStore(ABC):
    """Lookup of raw system prompt templates by enhancement mode."""

    @abstractmethod
    def load(self, mode: str) -> str | None:
        """Return the template for ``mode``, or None if the store has none."""


class StaticTemplateStore(BaseTemplateStore):
    """Dict-backed store, mostly for tests and embedding hosts."""

    def __init__(self, templates: dict[str, str] | None = None) -> None:
        self._templates = dict(templates or {})

    def load(self, mode: str) -> str | None:
        return self._templates.get(mode)


class FileTemplateStore(BaseTemplateStore):
    """Reads ``<mode>-enhancement-prompt.txt`` from a directory.

    Falls back to ``enhanced-system-prompt.txt`` in the same directory.
    Unreadable files are logged and treated as absent.
    """

    def __init__(self, template_dir: Path | str) -> None:
        self._root = Path(template_dir).expanduser()

    def load(self, mode: str) -> str | None:
        for name in (f"{mode}-enhancement-prompt.txt", SHARED_TEMPLATE_FILE):
            path = self._root / name
            if not path.is_file():
                continue
            try:
                content = path.read_text(encoding="utf-8").strip()
            except OSError as e:
                logger.warning("Failed to read prompt template %s: %s", path, e)
                continue
            if content:
                logger.debug("Loaded %s template from %s", mode, path)
                return content
        return None


def resolve_template(store: BaseTemplateStore | None, mode: str) -> str:
    """Template for ``mode`` from ``store``, else the built-in default."""
    template = store.load(mode) if store is not None else None
    if template:
        return template
    return DEFAULT_TEMPLATES.get(mode, DEFAULT_TEMPLATES["general"])
