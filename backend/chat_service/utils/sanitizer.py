from __future__ import annotations
import re

# Control characters except \t and \n
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")
_DANGEROUS_BLOCKS = [
    re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE),
    re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE),
    re.compile(r"<object\b[^<]*(?:(?!</object>)<[^<]*)*</object>", re.IGNORECASE),
    re.compile(r"<embed\b[^<]*>", re.IGNORECASE),
]
_DANGEROUS_SCHEMES = re.compile(r"javascript:", re.IGNORECASE)


def sanitize_message_content(text: str | None) -> str:
    """
    Normalize message text before it is stored.
    Strips control characters, collapses runs of blank lines and removes
    embedded script-like markup. Returns "" for None.
    """
    if not text:
        return ""
    cleaned = _CONTROL_CHARS.sub("", text.replace("\r\n", "\n")).strip()
    cleaned = _EXCESS_NEWLINES.sub("\n\n", cleaned)
    for pattern in _DANGEROUS_BLOCKS:
        cleaned = pattern.sub("", cleaned)
    cleaned = _DANGEROUS_SCHEMES.sub("", cleaned)
    return cleaned.strip()


def sanitize_display_name(name: str | None, max_length: int = 100) -> str | None:
    """Trim a conversation name; empty names become None."""
    if name is None:
        return None
    cleaned = _CONTROL_CHARS.sub("", name).strip()
    if not cleaned:
        return None
    return cleaned[:max_length]
