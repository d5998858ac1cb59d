# payrecon/services/validator.py
from ..errors import ValidationError
from .text import normalize

NOT_A_RECEIPT = (
    "The file does not look like a valid payment receipt. "
    "Contact us on WhatsApp and we will help you."
)

RECEIPT_KEYWORDS = (
    "transferencia",
    "comprobante",
    "pago",
    "importe",
    "total",
    "fecha",
    "operacion",
    "referencia",
    "cbu",
    "cvu",
    "alias",
)


def validate(raw_text, min_length: int = 30) -> None:
    """Raise ValidationError unless the text plausibly belongs to a transfer receipt.

    Any single keyword is enough; amount extraction and operator confirmation
    are the real gate.
    """
    if not raw_text or not isinstance(raw_text, str):
        raise ValidationError(NOT_A_RECEIPT, {"reason": "empty"})

    text = normalize(raw_text)
    if len(text) < min_length:
        raise ValidationError(NOT_A_RECEIPT, {"reason": "too_short", "length": len(text)})
    if not any(k in text for k in RECEIPT_KEYWORDS):
        raise ValidationError(NOT_A_RECEIPT, {"reason": "no_keywords"})
