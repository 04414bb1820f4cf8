# src/prompts/guidelines.py — v1
"""Platform/tone and format guideline tables appended to system prompts."""

from __future__ import annotations

FORMAT_GUIDELINES: dict[str, str] = {
    "email": (
        "Maintain email format with proper headers, greeting, body, and signature. "
        "Preserve paragraph structure. Keep professional tone if appropriate."
    ),
    "code": (
        "Preserve code blocks and syntax. Maintain indentation and formatting. "
        "Don't remove technical details or variable names."
    ),
    "list": (
        "Maintain list structure (bullet points or numbering). Preserve hierarchy and "
        "indentation. Keep consistent formatting across list items."
    ),
    "table": (
        "Preserve table structure and alignment. Maintain column headers if present. "
        "Keep data organized in rows and columns."
    ),
    "json": (
        "Preserve JSON structure and syntax. Maintain key-value pairs. "
        "Don't remove or reformat valid JSON."
    ),
    "chat": (
        "Maintain the chat format with speaker names and colons. Preserve the conversation "
        "flow and speaker turns. Keep the informal tone if present."
    ),
    "thread": (
        "Preserve quoted message format with '>' characters. Maintain the distinction "
        "between quoted text and responses. Keep the conversation context intact."
    ),
    "message": (
        "Enhance the message while maintaining its original structure and flow. Don't add "
        "unnecessary formality or convert to email format unless appropriate."
    ),
}

PLATFORM_GUIDELINES: dict[str, dict[str, str]] = {
    "slack": {
        "formal": "Use proper Slack formatting. Avoid excessive emojis. Use code blocks for code. Be concise but thorough.",
        "casual": "Use Slack-friendly formatting. Feel free to use emojis where appropriate. Keep it conversational.",
        "urgent": "Use @channel or @here appropriately. Clearly mark urgent items. Be direct and specific.",
        "technical": "Use code blocks with language specification. Format technical terms properly. Be precise.",
        "professional": "Start with the main point. Break information into digestible points. Keep messages focused and action-oriented.",
    },
    "twitter": {
        "formal": "Keep within character limits. Avoid hashtags in formal communications. Be concise and professional.",
        "casual": "Use relevant hashtags. Keep it brief and engaging. Consider adding emojis for emphasis.",
        "urgent": "Start with URGENT if truly time-sensitive. Use clear, direct language. Avoid unnecessary hashtags.",
        "technical": "Use technical terms precisely. Link to more details if needed. Avoid jargon unless necessary.",
        "professional": "Maintain brand voice. Keep messaging clear and concise. Balance professionalism with engagement.",
    },
    "whatsapp": {
        "formal": "Use proper paragraphs. Avoid excessive emojis. Use formatting sparingly for emphasis.",
        "casual": "Keep it conversational. Emojis are welcome. Use short paragraphs for readability.",
        "urgent": "Mark urgent messages clearly. Be direct. Follow up with details in separate messages.",
        "technical": "Use formatting for code snippets. Break down complex concepts. Use lists for steps.",
        "friendly": "Keep paragraphs short. Mirror the existing tone and emoji usage. Use contractions.",
    },
    "email": {
        "formal": "Use proper salutation and closing. Maintain professional language. Structure with clear paragraphs.",
        "casual": "Keep a friendly tone but maintain clarity. Use appropriate greeting and sign-off.",
        "urgent": "Mark urgent in subject line. Start with the key request. Be specific about deadlines.",
        "technical": "Use proper formatting for technical content. Consider attachments for code or diagrams.",
        "professional": "Balance formality with approachability. Structure content clearly. Focus on clarity and brevity.",
    },
    "linkedin": {
        "formal": "Maintain professional language. Reference specific aspects of profile or experience. Be concise.",
        "casual": "Keep professional but conversational. Personalize the message. Show genuine interest.",
        "urgent": "Explain why the matter is time-sensitive. Be respectful of the professional context.",
        "technical": "Reference specific technical skills or projects. Be precise with technical terminology.",
        "business": "Focus on business value. Use data and insights where relevant. Include clear calls-to-action.",
    },
    "github": {
        "formal": "Use proper issue/PR formatting. Reference relevant issues. Be specific about changes.",
        "casual": "Maintain clarity while being conversational. Use proper markdown formatting.",
        "urgent": "Clearly explain the urgency. Tag relevant maintainers. Provide all necessary context.",
        "technical": "Use code blocks with language specification. Be precise about technical details.",
    },
    "discord": {
        "formal": "Use proper channel etiquette. Avoid excessive mentions. Structure your message clearly.",
        "casual": "Feel free to use emojis and GIFs. Tag relevant roles when appropriate. Keep it friendly.",
        "urgent": "Use @here or @everyone only when truly necessary. Clearly state the urgent matter.",
        "technical": "Use code blocks with syntax highlighting. Format commands properly. Be specific.",
    },
    "teams": {
        "formal": "Lead with the purpose of the message. Keep paragraphs short. Summarize decisions and owners.",
        "professional": "Reference the meeting or project. List action items with owners and dates.",
    },
    "general": {
        "formal": "Maintain professional language and structure. Be clear and concise. Use appropriate greetings.",
        "casual": "Keep a conversational tone. Use natural language. Feel free to use appropriate emojis.",
        "urgent": "Clearly state the urgency and deadlines. Be direct about what's needed and when.",
        "technical": "Use proper formatting for technical content. Be precise with terminology. Structure logically.",
    },
}

FALLBACK_PLATFORM = "general"
FALLBACK_TONE = "formal"


def guidelines_for(platform: str, tone: str, format: str = "text") -> str:
    """Guideline text for a platform/tone pair, prefixed by the format block.

    Unknown platforms use ``general``; unknown tones use ``formal``.
    """
    platform_guide = PLATFORM_GUIDELINES.get(platform, PLATFORM_GUIDELINES[FALLBACK_PLATFORM])
    tone_guide = platform_guide.get(tone) or platform_guide[FALLBACK_TONE]

    format_guide = FORMAT_GUIDELINES.get(format) if format != "text" else None
    if format_guide:
        return f"{format_guide}\n\n{tone_guide}"
    return tone_guide
