from datetime import datetime
from ..extensions import db


class CashPayment(db.Model):
    """Manually registered payment. Immutable and always counted as confirmed."""
    __tablename__ = "cash_payments"

    id = db.Column(db.Integer, primary_key=True)
    order_number = db.Column(
        db.String(32), db.ForeignKey("orders.order_number"), nullable=False, index=True
    )
    amount = db.Column(db.Integer, nullable=False)
    recorded_by = db.Column(db.String(100), nullable=False, default="system")
    note = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    __table_args__ = (db.CheckConstraint("amount > 0", name="ck_cash_payments_amount_positive"),)

    def as_api(self):
        return {
            "id": self.id,
            "order_number": self.order_number,
            "kind": "cash",
            "amount": self.amount,
            "status": "confirmed",
            "recorded_by": self.recorded_by,
            "note": self.note,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
