# payrecon/services/amount_extractor.py
"""Pick the paid amount out of noisy OCR text.

Receipts carry several number-like tokens (CBU/CVU, operation ids, dates, the
amount itself). Candidates follow the local convention ``$ 12.345,67`` and are
ranked by the words around them.
"""
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from ..utils.money import to_amount
from .text import normalize

CURRENCY = "ARS"

MIN_AMOUNT = 1000
CONTEXT_RADIUS = 50
EARLY_FRACTION = 0.3

STRONG_KEYWORDS = ("importe", "monto", "total", "$", "ars", "pesos")
TRAP_KEYWORDS = ("cbu", "cvu", "cuit", "cuil", "operacion", "referencia", "codigo", "alias")

AMOUNT_RE = re.compile(r"\$?\s?\d{1,3}(?:\.\d{3})*(?:,\d{2})?")
_NON_ASCII = re.compile(r"[^\x00-\x7f]")


@dataclass
class Candidate:
    literal: str
    value: Decimal
    position: int
    score: int = 0


@dataclass
class Extraction:
    amount: int | None
    currency: str = CURRENCY
    candidates: list | None = None


def _parse(literal: str) -> Decimal | None:
    cleaned = literal.replace("$", "").strip().replace(".", "").replace(",", ".")
    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def _score(literal: str, position: int, text: str) -> int:
    context = text[max(0, position - CONTEXT_RADIUS):position + CONTEXT_RADIUS]
    score = 0
    if "$" in literal:
        score += 2
    if any(k in context for k in STRONG_KEYWORDS):
        score += 3
    if not any(k in context for k in TRAP_KEYWORDS):
        score += 2
    if position < len(text) * EARLY_FRACTION:
        score += 1
    return score


def candidates(raw_text: str) -> list[Candidate]:
    """Every plausible amount in the text, in reading order, already scored."""
    if not raw_text:
        return []
    text = _NON_ASCII.sub("", normalize(raw_text))

    found = []
    for m in AMOUNT_RE.finditer(text):
        literal = m.group(0)
        # a bare 3-4 digit token is a code, not an amount
        if "." not in literal:
            continue
        value = _parse(literal)
        if value is None or value < MIN_AMOUNT:
            continue
        position = m.start()
        found.append(Candidate(literal, value, position, _score(literal, position, text)))
    return found


def extract(raw_text: str) -> Extraction:
    scored = candidates(raw_text)
    best = None
    for c in scored:
        # strictly greater: ties keep the first one seen
        if best is None or c.score > best.score:
            best = c
    if best is None:
        return Extraction(amount=None, candidates=scored)
    return Extraction(amount=to_amount(best.value), candidates=scored)
