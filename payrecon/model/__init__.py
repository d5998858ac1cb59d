# ------ payrecon/model/__init__.py ------

from .order import Order, PaymentStatus, FulfillmentStatus
from .receipt import Receipt, ReceiptStatus
from .cash_payment import CashPayment
from .log_entry import LogEntry

__all__ = [
    "Order",
    "PaymentStatus",
    "FulfillmentStatus",
    "Receipt",
    "ReceiptStatus",
    "CashPayment",
    "LogEntry",
]
