from __future__ import annotations

import re

_SCRIPT_BLOCK = re.compile(r"<\s*(script|style)\b[^>]*>.*?<\s*/\s*\1\s*>", re.IGNORECASE | re.DOTALL)
_TAG = re.compile(r"<\s*/?\s*[a-zA-Z][\w:-]*\b[^>]*>")
_JS_URI = re.compile(r"javascript\s*:", re.IGNORECASE)


def sanitize_text(value: str) -> str:
    """
    Strip script/style blocks and HTML tags from user text, then escape any stray
    angle brackets so the result is safe to echo back into a page. Spans that do not
    open with a tag name, such as "<500", are escaped rather than removed.
    """
    cleaned = _SCRIPT_BLOCK.sub("", value)
    cleaned = _TAG.sub("", cleaned)
    cleaned = _JS_URI.sub("", cleaned)
    return cleaned.replace("<", "&lt;").replace(">", "&gt;")
