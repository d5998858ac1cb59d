# payrecon/order/routes.py
from flask import request

from ..clients import get_clients
from ..model import Order, PaymentStatus, FulfillmentStatus, LogEntry, Receipt
from ..services import fulfillment, payments
from ..services.orders import get_order, sync_order
from ..utils.api import ok, err
from . import bp


@bp.get("")
def list():
    """
    Query params:
      - page, per_page
      - payment_status=pending|confirmed_partial|confirmed_total|credit|rejected
      - fulfillment_status=awaiting_payment|ready_to_print|packed|picked_up|shipped|in_transit
      - phone=...
    """
    q = Order.query

    payment_status = request.args.get("payment_status")
    fulfillment_status = request.args.get("fulfillment_status")
    phone = request.args.get("phone")

    try:
        if payment_status: q = q.filter(Order.payment_status == PaymentStatus(payment_status))
        if fulfillment_status: q = q.filter(Order.fulfillment_status == FulfillmentStatus(fulfillment_status))
    except ValueError:
        return err("invalid status filter", 400)
    if phone: q = q.filter(Order.customer_phone == phone)

    page = request.args.get("page", 1, type=int)
    per  = min(request.args.get("per_page", 20, type=int), 100)

    q = q.order_by(Order.created_at.desc())
    paged = q.paginate(page=page, per_page=per, error_out=False)

    return ok("orders", {
        "page": page,
        "per_page": per,
        "total": paged.total,
        "items": [o.as_api() for o in paged.items],
    })


@bp.get("/<order_number>")
def get_one(order_number):
    o = get_order(order_number)
    logs = (LogEntry.query.join(Receipt)
            .filter(Receipt.order_number == o.order_number)
            .order_by(LogEntry.id.desc())
            .all())
    return ok("order", {
        "order": o.as_api(),
        "receipts": [r.as_api(with_text=True) for r in o.receipts],
        "cash_payments": [c.as_api() for c in o.cash_payments],
        "logs": [l.as_api() for l in logs],
    })


@bp.post("/validate")
def validate_order():
    payload = request.get_json(silent=True) or {}
    number = payload.get("order_number")
    if not number:
        return err("order_number is required", 400)
    o = sync_order(str(number), get_clients().order_source)
    return ok("order validated", {"order": o.as_api()})


@bp.patch("/<order_number>/status")
def update_status(order_number):
    payload = request.get_json(silent=True) or {}
    o = fulfillment.transition(order_number, payload.get("status"))
    return ok("order status updated", {"order": o.as_api()})


@bp.post("/<order_number>/cash-payments")
def register_cash(order_number):
    payload = request.get_json(silent=True) or {}
    if payload.get("amount") in (None, ""):
        return err("amount is required", 400)
    payment, summary = payments.register_cash_payment(
        order_number,
        payload.get("amount"),
        recorded_by=payload.get("recorded_by"),
        note=payload.get("note"),
    )
    return ok("cash payment recorded", {
        "payment": payment.as_api(),
        "summary": summary.as_api(),
    }, status=201)


@bp.get("/<order_number>/payments")
def history(order_number):
    return ok("payments", payments.payment_history(order_number))
