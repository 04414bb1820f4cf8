# src/classification/catalog.py — v1
"""Static signature tables for platform, tone and format detection.

Each platform/tone maps to ordered regex rules (weight 2 by default) and
keywords (weight 1, case-insensitive substring). Declaration order is
significant: the classifier keeps the first tag examined on equal scores.

Format rules are a separate, ordered list evaluated after the email score
check. A rule fires either on a single structural match or once a pattern
occurs ``min_count`` times.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from clipenhancer.core.models import DEFAULT_PLATFORM, DEFAULT_TONE, PLATFORMS, TONES

PATTERN_WEIGHT = 2
KEYWORD_WEIGHT = 1


class CatalogError(ValueError):
    """Raised when a catalog does not cover its closed tag set."""


@dataclass(frozen=True)
class PatternRule:
    """Weighted regex signature."""

    regex: re.Pattern[str]
    weight: int = PATTERN_WEIGHT

    def matches(self, text: str) -> bool:
        return self.regex.search(text) is not None


@dataclass(frozen=True)
class SignatureRules:
    """Patterns + keywords describing one platform or tone."""

    patterns: tuple[PatternRule, ...] = ()
    keywords: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.patterns and not self.keywords

    def score(self, text: str) -> int:
        """Sum of matching pattern weights plus keyword hits."""
        lowered = text.lower()
        total = sum(rule.weight for rule in self.patterns if rule.matches(text))
        total += sum(KEYWORD_WEIGHT for kw in self.keywords if kw.lower() in lowered)
        return total


@dataclass(frozen=True)
class FormatRule:
    """Structural test for one format tag."""

    tag: str
    regex: re.Pattern[str]
    min_count: int = 1

    def matches(self, text: str) -> bool:
        if self.min_count <= 1:
            return self.regex.search(text) is not None
        return len(self.regex.findall(text)) >= self.min_count


@dataclass(frozen=True)
class EmailSignals:
    """Weighted email-structure heuristics; ``threshold`` gates format=email."""

    headers: re.Pattern[str]
    signature: re.Pattern[str]
    address: re.Pattern[str]
    header_weight: int = 3
    signature_weight: int = 2
    address_weight: int = 1
    salutation_weight: int = 2
    threshold: int = 3

    def score(self, text: str) -> int:
        total = 0
        if self.headers.search(text):
            total += self.header_weight
        if self.signature.search(text):
            total += self.signature_weight
        if self.address.search(text):
            total += self.address_weight
        if "Dear" in text and ("Regards" in text or "Sincerely" in text):
            total += self.salutation_weight
        return total


def _p(pattern: str, flags: int = 0, weight: int = PATTERN_WEIGHT) -> PatternRule:
    return PatternRule(re.compile(pattern, flags), weight)


_I = re.IGNORECASE
_M = re.MULTILINE
_S = re.DOTALL

# Face/gesture emoji ranges used as a WhatsApp signal.
_CHAT_EMOJI = (
    "[\U0001F600-\U0001F64F\U0001F910-\U0001F92F"
    "\U0001F970-\U0001F97A\U0001F9D0☹]"
)

PLATFORM_SIGNATURES: dict[str, SignatureRules] = {
    "slack": SignatureRules(
        patterns=(
            _p(r"@channel"), _p(r"@here"), _p(r"@everyone"),
            _p(r"\*\*.*?\*\*"), _p(r"\*.*?\*"), _p(r"_.*?_"),
            _p(r"```.*?```", _S),
        ),
        keywords=("slack", "channel", "thread", "dm", "direct message"),
    ),
    "twitter": SignatureRules(
        patterns=(
            _p(r"@\w+"), _p(r"#\w+"),
            _p(r"^RT @\w+:"), _p(r"\(via @\w+\)"),
        ),
        keywords=("tweet", "twitter", "retweet", "hashtag", "trending"),
    ),
    "whatsapp": SignatureRules(
        patterns=(_p(_CHAT_EMOJI), _p(r"\*[^*]+\*")),
        keywords=("whatsapp", "message", "chat", "group", "status"),
    ),
    "email": SignatureRules(
        patterns=(
            _p(r"^Subject:\s+", _I | _M), _p(r"^From:\s+", _I | _M),
            _p(r"^To:\s+", _I | _M), _p(r"^Cc:\s+", _I | _M),
            _p(r"^Bcc:\s+", _I | _M),
            _p(r"^Dear\s+[A-Z][a-z]+,", _I | _M),
            _p(r"\n\s*Best regards,\s*\n", _I), _p(r"\n\s*Sincerely,\s*\n", _I),
            _p(r"\n\s*Regards,\s*\n", _I),
            _p(r"^On .* wrote:", _M),
        ),
        keywords=("email client", "outlook", "gmail", "mail server", "email address"),
    ),
    "linkedin": SignatureRules(
        patterns=(
            _p(r"^I am writing to inquire about", _I),
            _p(r"^I noticed your profile", _I),
            _p(r"^I would like to connect", _I),
            _p(r"^I am reaching out", _I),
            _p(r"^Looking for opportunities", _I),
            _p(r"^Open to work", _I),
        ),
        keywords=(
            "linkedin", "connection", "network", "job", "opportunity",
            "profile", "experience", "skills",
        ),
    ),
    "github": SignatureRules(
        patterns=(
            _p(r"fixes #\d+", _I), _p(r"closes #\d+", _I), _p(r"resolves #\d+", _I),
            _p(r"\bPR\b"), _p(r"pull request"), _p(r"issue #\d+"),
            _p(r"```[a-z]*\n[\s\S]*?\n```"),
        ),
        keywords=(
            "github", "repo", "repository", "commit", "branch", "merge",
            "pull request", "issue", "bug", "feature",
        ),
    ),
    "discord": SignatureRules(
        patterns=(
            _p(r"@everyone"), _p(r"@here"), _p(r"<@\d+>"),
            _p(r"<#\d+>"), _p(r"<@&\d+>"),
            _p(r"```.*?```", _S),
        ),
        keywords=("discord", "server", "channel", "dm", "ping", "role", "mention"),
    ),
    "teams": SignatureRules(
        patterns=(_p(r"(?:teams\s+meeting|project\s+update|standup|sprint)", _I),),
        keywords=("microsoft teams", "meeting", "presentation", "deck", "agenda", "action items"),
    ),
    "telegram": SignatureRules(
        patterns=(_p(r"(?:/start|/help|/settings|@\w+bot)\b", _I),),
        keywords=("telegram", "sticker", "forward"),
    ),
    "sms": SignatureRules(
        patterns=(
            _p(r"\b(?:gonna|wanna|gotta|kinda|sorta)\b", _I),
            _p(r"\b(?:u|ur|thx|pls|gr8|tmrw|ttyl)\b", _I),
        ),
        keywords=("sms", "text me"),
    ),
    DEFAULT_PLATFORM: SignatureRules(),
}

TONE_SIGNATURES: dict[str, SignatureRules] = {
    "formal": SignatureRules(
        patterns=(
            _p(r"I am writing to"), _p(r"I would like to"), _p(r"I am pleased to"),
            _p(r"Please find"), _p(r"I look forward to"),
            _p(r"Thank you for your consideration"),
            _p(r"Sincerely,"), _p(r"Regards,"), _p(r"Best regards,"),
        ),
        keywords=("formal", "professional", "official", "business", "corporate"),
    ),
    "casual": SignatureRules(
        patterns=(
            _p(r"Hey!"), _p(r"Hi there!"), _p(r"What's up"), _p(r"How's it going"),
            _p(r"Thanks!"), _p(r"Cheers!"), _p(r"Later!"),
            _p(r"btw"), _p(r"lol"), _p(r"haha"), _p(r"cool"), _p(r"awesome"), _p(r"nice"),
        ),
        keywords=("casual", "informal", "friendly", "relaxed", "chill"),
    ),
    "urgent": SignatureRules(
        patterns=(
            _p(r"URGENT"), _p(r"ASAP"), _p(r"as soon as possible"), _p(r"immediately"),
            _p(r"emergency"), _p(r"critical"), _p(r"deadline"), _p(r"time-sensitive"),
            _p(r"!{2,}"),
        ),
        keywords=("urgent", "important", "critical", "emergency", "deadline", "asap"),
    ),
    "technical": SignatureRules(
        patterns=(
            _p(r"```[a-z]*\n[\s\S]*?\n```"),
            _p(r"function\s+\w+\s*\("), _p(r"class\s+\w+"), _p(r"const\s+\w+\s*="),
            _p(r"var\s+\w+\s*="), _p(r"let\s+\w+\s*="), _p(r"import\s+.*from"),
            _p(r"export\s+"), _p(r"interface\s+\w+"), _p(r"type\s+\w+\s*="),
        ),
        keywords=(
            "code", "function", "class", "method", "variable",
            "implementation", "algorithm", "debug",
        ),
    ),
    "professional": SignatureRules(
        patterns=(
            _p(r"\b(?:as discussed|per our conversation|following up|action items)\b", _I),
            _p(r"\b(?:deliverables?|stakeholders?|milestones?)\b", _I),
        ),
        keywords=("project", "update", "team", "schedule"),
    ),
    "friendly": SignatureRules(
        patterns=(
            _p(r"Hope (?:you're|you are) doing well", _I),
            _p(r"Hope this finds you well", _I),
            _p(r"Have a (?:great|nice|good) (?:day|weekend|week)", _I),
            _p(r":\)|:D"),
        ),
        keywords=("glad", "happy to", "hope you"),
    ),
    "business": SignatureRules(
        patterns=(
            _p(r"\b(?:revenue|ROI|KPIs?|budget|invoice|contract|pricing)\b", _I),
            _p(r"\bQ[1-4]\b"),
        ),
        keywords=("client", "customer", "sales", "market", "quarter"),
    ),
    DEFAULT_TONE: SignatureRules(),
}

EMAIL_SIGNALS = EmailSignals(
    headers=re.compile(r"^(?:From|To|Subject|Date|Cc|Bcc):[ \t]*.*\n", _M),
    signature=re.compile(r"\n--\s*\n|\nRegards,|\nSincerely,|\nBest,|\nThank you,"),
    address=re.compile(r"[\w.\-]+@[\w\-]+\.[\w.\-]+"),
)

CODE_KEYWORDS = re.compile(
    r"\b(?:function|class|const|let|var|import|export|if|else|for|while|return|try|catch)\b"
)

FORMAT_RULES: tuple[FormatRule, ...] = (
    FormatRule("code", re.compile(r"```\w*\n[\s\S]*?\n```|`[^`]+`")),
    FormatRule("code", CODE_KEYWORDS, min_count=3),
    FormatRule("list", re.compile(r"^[ \t]*[-*•][ \t]+.+$(?:\n[ \t]*[-*•][ \t]+.+$)+", _M)),
    FormatRule("list", re.compile(r"^[ \t]*\d+\.[ \t]+.+$(?:\n[ \t]*\d+\.[ \t]+.+$)+", _M)),
    FormatRule("table", re.compile(r"\|[^|]+\|[^|]+\|")),
    FormatRule("json", re.compile(r'\{[\s\S]*"\w+"\s*:\s*[\s\S]*\}')),
    FormatRule(
        "chat",
        re.compile(r"^[ \t]*\w[\w \t]*:[ \t]*.+$(?:\n[ \t]*\w[\w \t]*:[ \t]*.+$)+", _M),
    ),
    FormatRule("thread", re.compile(r"^[ \t]*>[ \t]*.+$", _M)),
)

# Texts shorter than this with no structural match are short messages.
MESSAGE_MAX_CHARS = 500


@dataclass(frozen=True)
class PatternCatalog:
    """Read-only, validated view over the signature tables."""

    platforms: dict[str, SignatureRules] = field(default_factory=lambda: dict(PLATFORM_SIGNATURES))
    tones: dict[str, SignatureRules] = field(default_factory=lambda: dict(TONE_SIGNATURES))
    format_rules: tuple[FormatRule, ...] = FORMAT_RULES
    email: EmailSignals = EMAIL_SIGNALS
    email_platform_threshold: int = 4
    message_max_chars: int = MESSAGE_MAX_CHARS

    def __post_init__(self) -> None:
        _validate_table("platform", self.platforms, PLATFORMS, DEFAULT_PLATFORM)
        _validate_table("tone", self.tones, TONES, DEFAULT_TONE)

    def scored_platforms(self) -> list[tuple[str, SignatureRules]]:
        """Platforms in declaration order, skipping the empty default."""
        return [(tag, rules) for tag, rules in self.platforms.items() if not rules.is_empty]

    def scored_tones(self) -> list[tuple[str, SignatureRules]]:
        """Tones in declaration order, skipping the empty default."""
        return [(tag, rules) for tag, rules in self.tones.items() if not rules.is_empty]


def _validate_table(
    kind: str,
    table: dict[str, SignatureRules],
    allowed: tuple[str, ...],
    default: str,
) -> None:
    unknown = sorted(set(table) - set(allowed))
    if unknown:
        raise CatalogError(f"Unknown {kind} tags in catalog: {', '.join(unknown)}")
    missing = [tag for tag in allowed if tag not in table]
    if missing:
        raise CatalogError(f"Catalog has no {kind} entry for: {', '.join(missing)}")
    for tag, rules in table.items():
        if rules.is_empty and tag != default:
            raise CatalogError(f"{kind} {tag!r} has no rules (only {default!r} may be empty)")


DEFAULT_CATALOG = PatternCatalog()
