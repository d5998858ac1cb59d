from datetime import datetime
from ..extensions import db


class LogEntry(db.Model):
    __tablename__ = "logs"

    id = db.Column(db.Integer, primary_key=True)
    receipt_id = db.Column(db.Integer, db.ForeignKey("receipts.id"), nullable=False, index=True)
    action = db.Column(db.String(255), nullable=False)
    actor = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def as_api(self):
        return {
            "id": self.id,
            "receipt_id": self.receipt_id,
            "action": self.action,
            "actor": self.actor,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
