# payrecon/services/text.py
import hashlib
import re

from ..errors import ValidationError

_WS = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Lower-case, collapse whitespace runs to one space, trim."""
    if not isinstance(text, str):
        raise ValidationError("receipt text must be a string", {"field": "raw_text"})
    return _WS.sub(" ", text.lower()).strip()


def fingerprint(text: str) -> str:
    """SHA-256 hex digest of the normalized text. Used for exact-duplicate detection."""
    normalized = normalize(text)
    if not normalized:
        raise ValidationError("receipt text is empty", {"field": "raw_text"})
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()
