# payrecon/services/fulfillment.py
"""Order fulfillment: awaiting_payment -> ready_to_print -> packed -> picked_up | shipped -> in_transit.

Operators request a target status. Each stage stamps its timestamp the first
time it is entered; leaving the order ship-bound requires full payment.
"""
import logging
from datetime import datetime

from ..errors import InvalidStatusError, PaymentIncompleteError
from ..extensions import db
from ..model import FulfillmentStatus as FS
from ..model import Order
from .orders import lock_order

logger = logging.getLogger(__name__)

# status -> timestamp column stamped on first entry
STAMPS = {
    FS.AWAITING_PAYMENT: None,
    FS.READY_TO_PRINT: "printed_at",
    FS.PACKED: "packed_at",
    FS.PICKED_UP: "shipped_at",
    FS.SHIPPED: "shipped_at",
    FS.IN_TRANSIT: "shipped_at",
}

REQUIRES_FULL_PAYMENT = frozenset({FS.SHIPPED, FS.IN_TRANSIT})


def parse_status(value) -> FS:
    if isinstance(value, FS):
        return value
    try:
        return FS(str(value or "").strip().lower())
    except ValueError:
        raise InvalidStatusError(
            f"invalid status, allowed values: {', '.join(s.value for s in FS)}",
            {"status": value},
        ) from None


def enter(order: Order, target: FS, now: datetime | None = None) -> Order:
    """Move ``order`` to ``target`` without committing. Guards apply."""
    if target in REQUIRES_FULL_PAYMENT and not order.payment_status.fully_paid:
        raise PaymentIncompleteError(
            "cannot ship an order that is not fully paid",
            {
                "order_number": order.order_number,
                "payment_status": order.payment_status.value,
                "requested": target.value,
            },
        )

    stamp = STAMPS[target]
    if stamp and getattr(order, stamp) is None:
        setattr(order, stamp, now or datetime.utcnow())

    previous = order.fulfillment_status
    order.fulfillment_status = target
    if previous != target:
        logger.info("order %s fulfillment %s -> %s", order.order_number, previous.value, target.value)
    return order


def transition(order_number: str, target) -> Order:
    """Operator-driven transition, serialized with payment updates on the same order."""
    status = parse_status(target)
    try:
        order = lock_order(order_number)
        enter(order, status)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return order
