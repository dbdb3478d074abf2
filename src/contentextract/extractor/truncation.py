"""
Bounds extracted text to a character budget, preferring paragraph boundaries.
"""

from __future__ import annotations

TRUNCATION_MARKER = "\n\n[Content truncated...]"
DEFAULT_MAX_CHARS = 48000
DEFAULT_PARAGRAPH_BREAK_RATIO = 0.8


def truncate_content(
    text: str,
    max_chars: int = DEFAULT_MAX_CHARS,
    *,
    paragraph_break_ratio: float = DEFAULT_PARAGRAPH_BREAK_RATIO,
) -> str:
    """Cut ``text`` down to ``max_chars`` and append the truncation marker.

    The cut lands on the last paragraph break (a blank line) inside the
    budget when that break sits at or beyond ``paragraph_break_ratio`` of the
    budget; otherwise it lands exactly on ``max_chars``. Already truncated
    text whose body fits the budget is returned as-is.
    """
    if len(text) <= max_chars:
        return text
    if text.endswith(TRUNCATION_MARKER) and len(text) - len(TRUNCATION_MARKER) <= max_chars:
        return text

    truncated = text[:max_chars]
    last_paragraph = truncated.rfind("\n\n")
    if last_paragraph >= 0 and last_paragraph >= max_chars * paragraph_break_ratio:
        return truncated[:last_paragraph] + TRUNCATION_MARKER
    return truncated + TRUNCATION_MARKER
