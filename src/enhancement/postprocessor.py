# src/enhancement/postprocessor.py — v1
"""Repair and normalize model output against the detected input format.

Steps, in order:
1. emoji gating: strip emoji the input did not have
2. format repair (one branch per format)
3. platform cosmetics (whatsapp line breaks, slack markdown, twitter cap)
4. whitespace normalization

The twitter cap runs after whitespace normalization so the returned text
is never longer than the limit. Every step is a pure string transform; a
pattern that does not match skips its repair.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

TWITTER_LIMIT = 280
TRUNCATION_SUFFIX = "..."

EMOJI_RE = re.compile(
    "(?:[\U0001F000-\U0001F9FF]|[☀-➿]|[⭐⭕])️?"
)

_HEADER_LINE = re.compile(r"^(?:From|To|Subject|Date|Cc|Bcc):\s", re.M)
_HEADER_TEXT = re.compile(r"^(?:From|To|Subject|Date|Cc|Bcc):[^\n]*", re.M)
_SIGNATURE_DASHES = re.compile(r"\n--\s*\n[\s\S]*$")
_SIGNATURE_CLOSING = re.compile(r"\n(?:Regards|Sincerely|Best|Thank you),\s*\n[\s\S]*$")
_CLOSING_WORD = re.compile(r"(?:Regards|Sincerely|Best|Thank you),")
_SALUTATION = re.compile(r"(?:Dear|Hello|Hi)\s+[\w \t]+,")
_SALUTATION_LINE = re.compile(r"^(?:Dear|Hello|Hi)\s+[\w \t]+,\s*\n+", re.M)

_CODE_BLOCK = re.compile(r"```\w*\n[\s\S]*?\n```|`[^`]+`")
_LIST_MARKER = re.compile(r"^[ \t]*[-*•][ \t]+|^[ \t]*\d+\.[ \t]+", re.M)
_CHAT_LINE = re.compile(r"^[ \t]*(\w[\w \t]*):[ \t]*\S.*$", re.M)
_QUOTE_LINE = re.compile(r"^[ \t]*>[ \t]*\S.*$", re.M)
_QUOTE_BLOCK = re.compile(r"^[ \t]*>[ \t]*\S.*$(?:\n[ \t]*>[ \t]*\S.*$)*", re.M)

_SENTENCE_BREAK = re.compile(r"([.!?])\s+")
_MD_BOLD = re.compile(r"\*\*(.*?)\*\*")
_MD_ITALIC = re.compile(r"__(.*?)__")

_MANY_NEWLINES = re.compile(r"\n{3,}")
_SPACE_RUNS = re.compile(r"[ \t]+")

# Formats whose internal spacing carries structure.
_KEEP_SPACING = frozenset({"code", "json", "list", "table", "email", "chat", "thread"})
# Formats exempt from whatsapp sentence splitting.
_NO_LINE_BREAKS = frozenset({"code", "list"})


def has_emoji(text: str) -> bool:
    return EMOJI_RE.search(text) is not None


class ResultPostProcessor:
    """Format-preserving output repair. Stateless apart from the twitter limit."""

    def __init__(self, twitter_limit: int = TWITTER_LIMIT) -> None:
        self._twitter_limit = twitter_limit

    def process(self, output: str, platform: str, original: str, format: str = "text") -> str:
        text = output or ""
        original = original or ""

        if not has_emoji(original):
            text = EMOJI_RE.sub("", text)

        repair = getattr(self, f"_repair_{format}", None)
        if repair is not None:
            text = repair(text, original)

        text = self.apply_platform(text, platform, format)
        text = self.normalize_whitespace(text, format)

        if platform == "twitter":
            text = self.truncate(text, self._twitter_limit)
        return text

    # -- format repair ----------------------------------------------------

    def _repair_email(self, text: str, original: str) -> str:
        if not _HEADER_LINE.search(text) and _HEADER_LINE.search(original):
            headers = _HEADER_TEXT.findall(original)
            if headers:
                text = "\n".join(headers) + "\n\n" + text

        signature = _SIGNATURE_DASHES.search(original) or _SIGNATURE_CLOSING.search(original)
        if signature and "--" not in text and not _CLOSING_WORD.search(text):
            text = text + signature.group(0)
        return text

    def _repair_code(self, text: str, original: str) -> str:
        blocks = _CODE_BLOCK.findall(original)
        if blocks and "```" not in text:
            text = text + "\n\n" + "\n\n".join(blocks)
        return text

    def _repair_list(self, text: str, original: str) -> str:
        if not _LIST_MARKER.search(text) and _LIST_MARKER.search(original):
            text = "\n".join(f"• {para}" for para in text.split("\n\n"))
        return text

    def _repair_chat(self, text: str, original: str) -> str:
        speakers = [s.strip() for s in _CHAT_LINE.findall(original)]
        if not speakers or len(_CHAT_LINE.findall(text)) >= len(speakers):
            return text
        paragraphs = text.split("\n\n")
        if len(paragraphs) != len(speakers):
            return text
        return "\n\n".join(f"{speaker}: {para}" for speaker, para in zip(speakers, paragraphs))

    def _repair_thread(self, text: str, original: str) -> str:
        if not _QUOTE_LINE.search(text) and _QUOTE_LINE.search(original):
            quoted = _QUOTE_BLOCK.findall(original)
            if quoted:
                text = "\n".join(quoted) + "\n\n" + text
        return text

    def _repair_message(self, text: str, original: str) -> str:
        if not _CLOSING_WORD.search(original) and _CLOSING_WORD.search(text):
            text = _SIGNATURE_CLOSING.sub("", text, count=1)
        if not _SALUTATION.search(original) and _SALUTATION.search(text):
            text = _SALUTATION_LINE.sub("", text, count=1)
        return text

    # -- cosmetics --------------------------------------------------------

    @staticmethod
    def apply_platform(text: str, platform: str, format: str) -> str:
        if platform == "whatsapp" and format not in _NO_LINE_BREAKS:
            return _SENTENCE_BREAK.sub(r"\1\n", text)
        if platform == "slack":
            text = _MD_BOLD.sub(r"*\1*", text)
            return _MD_ITALIC.sub(r"_\1_", text)
        return text

    @staticmethod
    def normalize_whitespace(text: str, format: str) -> str:
        text = _MANY_NEWLINES.sub("\n\n", text)
        if format not in _KEEP_SPACING:
            text = _SPACE_RUNS.sub(" ", text)
        return text.strip()

    @staticmethod
    def truncate(text: str, limit: int) -> str:
        if len(text) <= limit:
            return text
        logger.debug("Truncating %d chars to %d", len(text), limit)
        return text[: limit - len(TRUNCATION_SUFFIX)] + TRUNCATION_SUFFIX


_DEFAULT = ResultPostProcessor()


def post_process(output: str, platform: str, original: str, format: str = "text") -> str:
    """Module-level shortcut over a default ResultPostProcessor."""
    return _DEFAULT.process(output, platform, original, format)
