import enum
from datetime import datetime
from ..extensions import db


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED_PARTIAL = "confirmed_partial"
    CONFIRMED_TOTAL = "confirmed_total"
    CREDIT = "credit"  # over-paid beyond tolerance
    REJECTED = "rejected"

    @property
    def fully_paid(self) -> bool:
        return self in (PaymentStatus.CONFIRMED_TOTAL, PaymentStatus.CREDIT)


class FulfillmentStatus(str, enum.Enum):
    AWAITING_PAYMENT = "awaiting_payment"
    READY_TO_PRINT = "ready_to_print"
    PACKED = "packed"
    PICKED_UP = "picked_up"
    SHIPPED = "shipped"
    IN_TRANSIT = "in_transit"


def _enum_column(enum_cls, default):
    return db.Column(
        db.Enum(enum_cls, native_enum=False, length=20,
                values_callable=lambda e: [m.value for m in e]),
        nullable=False, default=default, index=True,
    )


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)
    order_number = db.Column(db.String(32), unique=True, index=True, nullable=False)

    # Customer snapshot (fill-if-absent)
    customer_name = db.Column(db.String(255))
    customer_email = db.Column(db.String(255))
    customer_phone = db.Column(db.String(50))

    # Money snapshot; total_amount comes from the order source and is never recomputed
    currency = db.Column(db.String(3), nullable=False, default="ARS")
    total_amount = db.Column(db.Integer, nullable=False)
    amount_paid = db.Column(db.Integer, nullable=False, default=0)
    balance = db.Column(db.Integer, nullable=False)

    payment_status = _enum_column(PaymentStatus, PaymentStatus.PENDING)
    fulfillment_status = _enum_column(FulfillmentStatus, FulfillmentStatus.AWAITING_PAYMENT)

    printed_at = db.Column(db.DateTime)
    packed_at = db.Column(db.DateTime)
    shipped_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    receipts = db.relationship(
        "Receipt",
        backref="order",
        order_by="Receipt.created_at.desc()",
        lazy="select",
    )
    cash_payments = db.relationship(
        "CashPayment",
        backref="order",
        order_by="CashPayment.created_at.desc()",
        lazy="select",
    )

    def as_api(self):
        return {
            "order_number": self.order_number,
            "customer": {
                "name": self.customer_name,
                "email": self.customer_email,
                "phone": self.customer_phone,
            },
            "money": {
                "currency": self.currency,
                "total": self.total_amount,
                "paid": self.amount_paid,
                "balance": self.balance,
            },
            "payment_status": self.payment_status.value,
            "fulfillment_status": self.fulfillment_status.value,
            "printed_at": self.printed_at.isoformat() if self.printed_at else None,
            "packed_at": self.packed_at.isoformat() if self.packed_at else None,
            "shipped_at": self.shipped_at.isoformat() if self.shipped_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
