# payrecon/services/orders.py
import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError

from ..errors import NotFoundError
from ..extensions import db
from ..model import Order, PaymentStatus, FulfillmentStatus
from ..utils.money import to_amount

logger = logging.getLogger(__name__)

_CUSTOMER_FIELDS = ("customer_name", "customer_email", "customer_phone")


@dataclass
class ExternalOrder:
    """What the order source tells us about an order."""
    number: str
    total: int
    currency: str = "ARS"
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None


def get_order(order_number: str) -> Order:
    o = Order.query.filter_by(order_number=str(order_number)).first()
    if not o:
        raise NotFoundError("order not found", {"order_number": order_number})
    return o


def lock_order(order_number: str) -> Order:
    """Load the order row FOR UPDATE; all aggregate writes for it serialize here."""
    o = (
        db.session.query(Order)
        .filter(Order.order_number == str(order_number))
        .with_for_update()
        .populate_existing()
        .first()
    )
    if not o:
        raise NotFoundError("order not found", {"order_number": order_number})
    return o


def _fill_customer(order: Order, ext: ExternalOrder) -> None:
    for field in _CUSTOMER_FIELDS:
        if not getattr(order, field) and getattr(ext, field):
            setattr(order, field, getattr(ext, field))


def upsert_order(ext: ExternalOrder) -> Order:
    """Create the order on first sight; afterwards only fill empty customer fields.

    The total is taken once from the order source and never rewritten.
    Does not commit; call it before any other pending work in the session.
    """
    number = str(ext.number)
    o = Order.query.filter_by(order_number=number).first()
    if o is None:
        total = to_amount(ext.total)
        o = Order(
            order_number=number,
            currency=ext.currency or "ARS",
            total_amount=total,
            amount_paid=0,
            balance=total,
            payment_status=PaymentStatus.PENDING,
            fulfillment_status=FulfillmentStatus.AWAITING_PAYMENT,
        )
        _fill_customer(o, ext)
        db.session.add(o)
        try:
            db.session.flush()
            logger.info("order %s registered, total=%s %s", number, total, o.currency)
            return o
        except IntegrityError:
            # lost the insert race, fall through to the fill-if-absent update
            db.session.rollback()
            o = Order.query.filter_by(order_number=number).one()

    _fill_customer(o, ext)
    return o


def sync_order(order_number: str, source) -> Order:
    """Fetch the order from the external source and upsert it."""
    ext = source.fetch_order(order_number)
    try:
        o = upsert_order(ext)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return o


def ensure_order(order_number: str, source) -> Order:
    o = Order.query.filter_by(order_number=str(order_number)).first()
    return o if o is not None else sync_order(order_number, source)
