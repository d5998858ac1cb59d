# payrecon/services/dedup.py
"""Exact-duplicate detection by receipt fingerprint.

``check`` is a fast pre-check so a duplicate is refused before anything is
stored externally; ``reserve`` is the authoritative step: it flushes the new
row and lets the unique index on ``receipts.fingerprint`` settle concurrent
uploads of the same text. A collision rolls back the whole session.
"""
from sqlalchemy.exc import IntegrityError

from ..errors import DuplicateError
from ..extensions import db
from ..model import Receipt


def _duplicate(existing: Receipt | None, fp: str) -> DuplicateError:
    data = {"fingerprint": fp}
    if existing is not None:
        data.update(receipt_id=existing.id, order_number=existing.order_number)
    return DuplicateError("Duplicate receipt", data)


def find(fp: str) -> Receipt | None:
    return Receipt.query.filter_by(fingerprint=fp).first()


def check(fp: str) -> None:
    existing = find(fp)
    if existing is not None:
        raise _duplicate(existing, fp)


def reserve(receipt: Receipt) -> Receipt:
    """Insert ``receipt`` or raise DuplicateError if its fingerprint is taken.

    Any status counts, rejected receipts included, and so does a receipt on
    a different order.
    """
    db.session.add(receipt)
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        raise _duplicate(find(receipt.fingerprint), receipt.fingerprint) from None
    return receipt
