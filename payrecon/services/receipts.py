# payrecon/services/receipts.py
"""Receipt ingestion and the pending -> confirmed | rejected lifecycle.

A receipt leaves ``pending`` exactly once. The transition is a compare-and-set
on the stored status, so of two concurrent confirmations only one succeeds.
OCR, storage and notifications stay outside the database transaction.
"""
import logging
from dataclasses import dataclass

from flask import current_app

from ..errors import AlreadyProcessedError, NotFoundError, ValidationError
from ..extensions import db
from ..model import LogEntry, Order, PaymentStatus, Receipt, ReceiptStatus
from . import amount_extractor, dedup, notifications, payments
from .orders import ensure_order, lock_order
from .text import fingerprint
from .validator import validate

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    receipt: Receipt
    order: Order
    projected_paid: int
    projected_balance: int
    projected_status: PaymentStatus

    def as_api(self):
        return {
            "receipt": self.receipt.as_api(),
            "order_number": self.order.order_number,
            "order_total": self.order.total_amount,
            "detected_amount": self.receipt.detected_amount,
            "projected_paid": self.projected_paid,
            "projected_balance": self.projected_balance,
            "projected_status": self.projected_status.value,
        }


def append_log(receipt_id: int, action: str, actor: str) -> LogEntry:
    entry = LogEntry(receipt_id=receipt_id, action=action, actor=actor or "system")
    db.session.add(entry)
    return entry


def get_receipt(receipt_id: int) -> Receipt:
    r = db.session.get(Receipt, receipt_id)
    if not r:
        raise NotFoundError("receipt not found", {"receipt_id": receipt_id})
    return r


def ingest_receipt(order_number: str, image_bytes: bytes, clients, filename: str | None = None,
                   actor: str = "customer") -> IngestionResult:
    """OCR an uploaded image and store it as a pending receipt.

    Nothing is persisted if validation, the duplicate check or an external call
    fails. The customer message afterwards is best effort.
    """
    if not order_number:
        raise ValidationError("order_number is required", {"field": "order_number"})
    if not image_bytes:
        raise ValidationError("file is required", {"field": "file"})

    order = ensure_order(order_number, clients.order_source)

    raw_text = clients.ocr.extract_text(image_bytes)
    if not raw_text or not raw_text.strip():
        raise ValidationError("OCR returned no text", {"field": "file"})

    validate(raw_text, current_app.config.get("MIN_RECEIPT_TEXT_LENGTH", 30))
    fp = fingerprint(raw_text)
    dedup.check(fp)
    amount = amount_extractor.extract(raw_text).amount

    location = clients.storage.store(image_bytes, filename)

    receipt = Receipt(
        order_number=order.order_number,
        raw_text=raw_text,
        fingerprint=fp,
        detected_amount=amount,
        reference_order_total=order.total_amount,
        status=ReceiptStatus.PENDING,
        image_location=location,
        image_url=clients.storage.public_url(location),
    )
    try:
        dedup.reserve(receipt)
        append_log(receipt.id, "created", actor)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.warning("receipt for order %s not saved, image %s left orphaned", order_number, location)
        raise
    logger.info("receipt %s created for order %s, detected amount %s", receipt.id, order_number, amount)

    # informational only: what the order would look like if every pending receipt cleared
    projected_paid = payments.total_confirmed(order.order_number) + payments.pending_total(order.order_number)
    projected_status = payments.resolve(order.total_amount, projected_paid, payments.tolerance())
    projected_balance = order.total_amount - projected_paid

    if notifications.receipt_received(clients.notifier, order, amount, projected_status, projected_balance):
        append_log(receipt.id, "notification_sent", "system")
        db.session.commit()

    return IngestionResult(receipt, order, projected_paid, projected_balance, projected_status)


def _transition(receipt_id: int, target: ReceiptStatus) -> tuple[Receipt, Order]:
    """Lock the order, then move the receipt out of pending. Caller commits."""
    receipt = get_receipt(receipt_id)
    if receipt.status != ReceiptStatus.PENDING:
        raise AlreadyProcessedError(
            "receipt already processed", {"receipt_id": receipt_id, "status": receipt.status.value}
        )

    order = lock_order(receipt.order_number)
    updated = (
        Receipt.query
        .filter(Receipt.id == receipt_id, Receipt.status == ReceiptStatus.PENDING)
        .update({Receipt.status: target}, synchronize_session="fetch")
    )
    if updated != 1:
        # someone else won the compare-and-set between our read and the lock
        current = db.session.query(Receipt.status).filter(Receipt.id == receipt_id).scalar()
        raise AlreadyProcessedError(
            "receipt already processed",
            {"receipt_id": receipt_id, "status": current.value if current else None},
        )
    return receipt, order


def confirm_receipt(receipt_id: int, actor: str = "operator") -> tuple[Receipt, payments.PaymentSummary]:
    try:
        receipt, order = _transition(receipt_id, ReceiptStatus.CONFIRMED)
        summary = payments.apply_payments(order)
        append_log(receipt.id, "confirmed", actor)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info("receipt %s confirmed by %s", receipt_id, actor)
    return receipt, summary


def reject_receipt(receipt_id: int, reason: str | None = None, actor: str = "operator") -> tuple[Receipt, Order]:
    """Reject the receipt and flag the whole order as rejected.

    The aggregate is not recomputed; other confirmed receipts keep counting the
    next time it is.
    """
    try:
        receipt, order = _transition(receipt_id, ReceiptStatus.REJECTED)
        order.payment_status = PaymentStatus.REJECTED
        append_log(receipt.id, f"rejected: {reason}" if reason else "rejected", actor)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info("receipt %s rejected by %s%s", receipt_id, actor, f" ({reason})" if reason else "")
    return receipt, order
