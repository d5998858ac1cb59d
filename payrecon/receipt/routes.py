# payrecon/receipt/routes.py

from flask import request

from ..clients import get_clients
from ..model import Receipt, ReceiptStatus
from ..services import receipts
from ..utils.api import ok, err
from . import bp


@bp.get("")
def list():
    """
    Query params:
      - page, per_page
      - order_number=...
      - status=pending|confirmed|rejected
    """
    q = Receipt.query
    order_number = request.args.get("order_number")
    status       = request.args.get("status")

    if order_number: q = q.filter(Receipt.order_number == order_number)
    if status:
        try:
            q = q.filter(Receipt.status == ReceiptStatus(status))
        except ValueError:
            return err("invalid status filter", 400)

    page = request.args.get("page", 1, type=int)
    per  = min(request.args.get("per_page", 20, type=int), 100)

    q = q.order_by(Receipt.created_at.desc())
    paged = q.paginate(page=page, per_page=per, error_out=False)

    return ok("receipts", {
        "page": page, "per_page": per, "total": paged.total,
        "items": [r.as_api() for r in paged.items],
    })


@bp.get("/<int:rid>")
def get_receipt(rid: int):
    r = receipts.get_receipt(rid)
    return ok("receipt", {
        "receipt": r.as_api(with_text=True),
        "order": r.order.as_api() if r.order else None,
        "logs": [l.as_api() for l in r.logs],
    })


@bp.post("")
def upload():
    order_number = request.form.get("order_number")
    file = request.files.get("file")
    if not order_number or not file:
        return err("order_number and file are required", 400)

    result = receipts.ingest_receipt(
        order_number,
        file.read(),
        get_clients(),
        filename=file.filename,
        actor=request.form.get("actor") or "customer",
    )
    return ok("receipt received", result.as_api(), status=201)


@bp.post("/<int:rid>/confirm")
def confirm(rid: int):
    payload = request.get_json(silent=True) or {}
    r, summary = receipts.confirm_receipt(rid, actor=payload.get("actor") or "operator")
    return ok("receipt confirmed", {"receipt": r.as_api(), "summary": summary.as_api()})


@bp.post("/<int:rid>/reject")
def reject(rid: int):
    payload = request.get_json(silent=True) or {}
    r, order = receipts.reject_receipt(
        rid, reason=payload.get("reason"), actor=payload.get("actor") or "operator"
    )
    return ok("receipt rejected", {"receipt": r.as_api(), "order": order.as_api()})
