# payrecon/services/payments.py
"""Aggregate confirmed funds for an order and derive its payment status.

Totals are always recomputed from the stored rows, never kept incrementally.
Callers hold the order row lock (``orders.lock_order``) while recomputing and
writing, so concurrent confirmations for one order cannot overwrite each other.
"""
import logging
from dataclasses import dataclass

from flask import current_app
from sqlalchemy import func

from ..errors import ValidationError
from ..extensions import db
from ..model import CashPayment, FulfillmentStatus, Order, PaymentStatus, Receipt, ReceiptStatus
from ..utils.money import parse_amount
from . import fulfillment
from .orders import get_order, lock_order

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 1000


@dataclass
class PaymentSummary:
    order_number: str
    total: int
    paid: int
    balance: int
    status: PaymentStatus
    fulfillment_status: FulfillmentStatus | None = None

    def as_api(self):
        return {
            "order_number": self.order_number,
            "total": self.total,
            "paid": self.paid,
            "balance": self.balance,
            "payment_status": self.status.value,
            "fulfillment_status": self.fulfillment_status.value if self.fulfillment_status else None,
        }


def tolerance() -> int:
    return int(current_app.config.get("PAYMENT_TOLERANCE", DEFAULT_TOLERANCE))


def total_confirmed(order_number: str) -> int:
    """Confirmed receipts plus every cash payment. Cash has no rejection path."""
    receipts = (
        db.session.query(func.coalesce(func.sum(Receipt.detected_amount), 0))
        .filter(Receipt.order_number == order_number, Receipt.status == ReceiptStatus.CONFIRMED)
        .scalar()
    )
    cash = (
        db.session.query(func.coalesce(func.sum(CashPayment.amount), 0))
        .filter(CashPayment.order_number == order_number)
        .scalar()
    )
    return int(receipts or 0) + int(cash or 0)


def pending_total(order_number: str) -> int:
    return int(
        db.session.query(func.coalesce(func.sum(Receipt.detected_amount), 0))
        .filter(Receipt.order_number == order_number, Receipt.status == ReceiptStatus.PENDING)
        .scalar()
        or 0
    )


def resolve(order_total: int, confirmed: int, tolerance: int = DEFAULT_TOLERANCE) -> PaymentStatus:
    balance = order_total - confirmed
    if abs(balance) <= tolerance:
        return PaymentStatus.CONFIRMED_TOTAL
    if balance < -tolerance:
        return PaymentStatus.CREDIT
    if confirmed > 0:
        return PaymentStatus.CONFIRMED_PARTIAL
    return PaymentStatus.PENDING


def apply_payments(order: Order) -> PaymentSummary:
    """Recompute paid/balance/status on a locked order; auto-advance when fully paid.

    Does not commit.
    """
    paid = total_confirmed(order.order_number)
    status = resolve(order.total_amount, paid, tolerance())

    order.amount_paid = paid
    order.balance = order.total_amount - paid
    order.payment_status = status

    if status.fully_paid and order.fulfillment_status == FulfillmentStatus.AWAITING_PAYMENT:
        fulfillment.enter(order, FulfillmentStatus.READY_TO_PRINT)

    logger.info(
        "order %s paid=%s balance=%s status=%s",
        order.order_number, paid, order.balance, status.value,
    )
    return PaymentSummary(
        order.order_number, order.total_amount, paid, order.balance, status,
        order.fulfillment_status,
    )


def register_cash_payment(order_number: str, amount, recorded_by: str | None = None,
                          note: str | None = None) -> tuple[CashPayment, PaymentSummary]:
    value = parse_amount(amount)
    if value is None or value <= 0:
        raise ValidationError("invalid amount", {"field": "amount", "value": amount})

    try:
        order = lock_order(order_number)
        payment = CashPayment(
            order_number=order.order_number,
            amount=value,
            recorded_by=recorded_by or "system",
            note=note or None,
        )
        db.session.add(payment)
        db.session.flush()
        summary = apply_payments(order)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info("cash payment %s of %s recorded on order %s by %s",
                payment.id, value, order_number, payment.recorded_by)
    return payment, summary


def payment_history(order_number: str) -> dict:
    """Receipts and cash payments for an order, merged newest first."""
    order = get_order(order_number)
    receipts = [r.as_api() for r in order.receipts]
    cash = [c.as_api() for c in order.cash_payments]
    merged = sorted(receipts + cash, key=lambda p: p["created_at"] or "", reverse=True)
    return {
        "order": order.as_api(),
        "payments": merged,
        "receipts": receipts,
        "cash_payments": cash,
    }
