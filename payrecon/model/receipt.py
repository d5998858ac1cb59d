# payrecon/model/receipt.py
import enum
from datetime import datetime
from ..extensions import db


class ReceiptStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class Receipt(db.Model):
    __tablename__ = "receipts"
    id = db.Column(db.Integer, primary_key=True)
    order_number = db.Column(
        db.String(32), db.ForeignKey("orders.order_number"), nullable=False, index=True
    )
    raw_text = db.Column(db.Text, nullable=False)
    # unique index backs the duplicate check
    fingerprint = db.Column(db.String(64), unique=True, index=True, nullable=False)
    detected_amount = db.Column(db.Integer)
    reference_order_total = db.Column(db.Integer)  # snapshot at ingestion, audit only
    status = db.Column(
        db.Enum(ReceiptStatus, native_enum=False, length=20,
                values_callable=lambda e: [m.value for m in e]),
        nullable=False, default=ReceiptStatus.PENDING, index=True,
    )
    image_location = db.Column(db.String(255))
    image_url = db.Column(db.String(512))
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    logs = db.relationship("LogEntry", backref="receipt", order_by="LogEntry.id.desc()")

    def as_api(self, with_text=False):
        data = {
            "id": self.id,
            "order_number": self.order_number,
            "kind": "transfer",
            "amount": self.detected_amount,
            "reference_order_total": self.reference_order_total,
            "status": self.status.value,
            "image_url": self.image_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if with_text:
            data["raw_text"] = self.raw_text
        return data
