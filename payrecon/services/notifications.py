# payrecon/services/notifications.py
"""Customer messaging. Fire-and-forget: failures are logged, never raised."""
import logging

from ..utils.money import format_amount

logger = logging.getLogger(__name__)

TEMPLATE_FULLY_PAID = "todo_pago"
TEMPLATE_INCOMPLETE = "pago_incompleto"
TEMPLATE_ORDER_CREATED = "final"


def send(notifier, phone, template, variables) -> bool:
    if notifier is None or not phone:
        return False
    try:
        return bool(notifier.send_template(phone, template, variables))
    except Exception as e:
        logger.warning("notification %s to %s failed: %s", template, phone, e)
        return False


def receipt_received(notifier, order, amount, projected_status, projected_balance) -> bool:
    name = order.customer_name or "Cliente"
    if projected_status.fully_paid:
        return send(notifier, order.customer_phone, TEMPLATE_FULLY_PAID,
                    {"1": name, "2": amount or 0})
    return send(notifier, order.customer_phone, TEMPLATE_INCOMPLETE,
                {"1": name, "2": amount or 0, "3": projected_balance})


def order_created(notifier, order) -> bool:
    return send(notifier, order.customer_phone, TEMPLATE_ORDER_CREATED, {
        "1": order.customer_name or "Cliente",
        "2": order.order_number,
        "3": format_amount(order.total_amount),
    })
