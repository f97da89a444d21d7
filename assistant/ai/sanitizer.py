"""Input sanitization — the canonical form of every user message.

The sanitized text is what the cache key, the prompt, and the upstream
request are built from. The raw text is never used past this point.

This is not a moderation layer: it only strips markup characters and
control characters, trims, and bounds the length.
"""

import re

MAX_INPUT_CHARS = 2000

# Closing tags go first so "<b>x</b>" leaves "bx", not "bx/b".
_CLOSING_TAG_RE = re.compile(r"</[^<>]*>")
_ANGLE_BRACKETS_RE = re.compile(r"[<>]")
# C0/C1 control characters except tab and newline.
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f-\x9f]")


def sanitize(raw_text: str | None) -> str:
    """Normalizes and bounds raw user text.

    Pure and deterministic: the same input always yields the same output.

    Args:
        raw_text: Text exactly as typed in the chat box. None is treated as "".

    Returns:
        Text without markup brackets or control characters, trimmed, and at
        most MAX_INPUT_CHARS characters long.
    """
    if not raw_text:
        return ""

    text = _CLOSING_TAG_RE.sub("", raw_text)
    text = _ANGLE_BRACKETS_RE.sub("", text)
    text = _CONTROL_CHARS_RE.sub("", text)
    text = text.strip()
    return text[:MAX_INPUT_CHARS]
