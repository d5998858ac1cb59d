# payrecon/webhook/routes.py
import hashlib
import hmac
import logging

from flask import current_app, request

from ..clients import get_clients
from ..errors import ReconcileError
from ..services import notifications
from ..services.orders import upsert_order
from ..extensions import db
from ..utils.api import ok, err
from . import bp

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Linkedstore-Hmac-Sha256"


def valid_signature(body: bytes, received: str | None, secret: str) -> bool:
    if not received or not secret:
        return False
    computed = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return hmac.compare_digest(received.encode("utf-8"), computed.encode("ascii"))


@bp.post("/tiendanube")
def tiendanube():
    body = request.get_data(cache=True)
    if not valid_signature(body, request.headers.get(SIGNATURE_HEADER),
                           current_app.config.get("TIENDANUBE_CLIENT_SECRET", "")):
        logger.warning("rejected store webhook with invalid signature")
        return err("invalid signature", 401)

    payload = request.get_json(silent=True) or {}
    if payload.get("event") != "order/created":
        return ok("ignored", {"event": payload.get("event")})

    clients = get_clients()
    try:
        ext = clients.order_source.fetch_order_by_id(payload.get("id"))
        order = upsert_order(ext)
        db.session.commit()
    except ReconcileError as e:
        db.session.rollback()
        logger.warning("webhook order %s not registered: %s", payload.get("id"), e.message)
        return ok("not registered", {"reason": e.message})

    notifications.order_created(clients.notifier, order)
    return ok("order registered", {"order": order.as_api()})
