"""
Tolerant JSON extraction for model output.

Models are asked to answer with a bare JSON object but sometimes prefix it with
commentary or wrap it in a code fence. Parsing is two-staged: the whole text first,
then the last balanced ``{...}`` region that closes at the end of the text. The second
stage is a best-effort heuristic, not a general JSON-in-text extractor.
"""
from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional

from app.core.errors import ParseFailureError

_TRAILING_FENCE = re.compile(r"\s*```\s*$")


def parse_model_json(raw_text: str) -> Dict[str, Any]:
    """Return the JSON object carried by ``raw_text`` or raise ParseFailureError."""
    text = (raw_text or "").strip()
    payload = _loads_object(text)
    if payload is not None:
        return payload

    payload = _trailing_object(_TRAILING_FENCE.sub("", text))
    if payload is not None:
        return payload
    raise ParseFailureError(raw_text)


def try_parse_model_json(raw_text: str) -> Optional[Dict[str, Any]]:
    try:
        return parse_model_json(raw_text)
    except ParseFailureError:
        return None


def _loads_object(text: str) -> Optional[Dict[str, Any]]:
    if not text:
        return None
    try:
        value = json.loads(text)
    except json.JSONDecodeError:
        return None
    return value if isinstance(value, dict) else None


def _trailing_object(text: str) -> Optional[Dict[str, Any]]:
    """
    Return the object spanning from some ``{`` to the end of ``text``. Candidates are
    tried from the last opening brace backwards; inner braces fail to parse because
    the outer closing braces follow them, so the first success is the outermost
    balanced region that ends the text.
    """
    if not text.endswith("}"):
        return None
    idx = text.rfind("{")
    while idx != -1:
        payload = _loads_object(text[idx:])
        if payload is not None:
            return payload
        idx = text.rfind("{", 0, idx)
    return None
