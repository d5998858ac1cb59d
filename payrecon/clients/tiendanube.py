# payrecon/clients/tiendanube.py
import logging

import requests

from ..errors import NotFoundError, TransientExternalError
from ..services.orders import ExternalOrder
from ..utils.money import to_amount

logger = logging.getLogger(__name__)


def customer_phone(payload: dict) -> str | None:
    customer = payload.get("customer") or {}
    shipping = payload.get("shipping_address") or {}
    default_address = customer.get("default_address") or {}
    return (
        payload.get("contact_phone")
        or customer.get("phone")
        or shipping.get("phone")
        or default_address.get("phone")
        or None
    )


def to_external_order(payload: dict) -> ExternalOrder:
    customer = payload.get("customer") or {}
    return ExternalOrder(
        number=str(payload.get("number")),
        total=to_amount(payload.get("total")),
        currency=payload.get("currency") or "ARS",
        customer_name=customer.get("name") or payload.get("contact_name") or None,
        customer_email=customer.get("email") or payload.get("contact_email") or None,
        customer_phone=customer_phone(payload),
    )


class TiendanubeOrderSource:
    """Read-only access to orders on the e-commerce platform."""

    def __init__(self, base_url, store_id, access_token, timeout=5.0):
        self.base_url = (base_url or "https://api.tiendanube.com/v1").rstrip("/")
        self.store_id = store_id
        self.timeout = timeout
        self.headers = {
            "authentication": f"bearer {access_token}",
            "User-Agent": "payrecon",
        }

    def _get(self, path, params=None):
        url = f"{self.base_url}/{self.store_id}{path}"
        try:
            response = requests.get(url, headers=self.headers, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransientExternalError("order source unavailable", {"error": str(e)}) from e
        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            raise TransientExternalError(
                "order source error", {"status": response.status_code, "path": path}
            )
        return response.json()

    def fetch_order(self, order_number) -> ExternalOrder:
        found = self._get("/orders", params={"q": order_number}) or []
        if not found:
            raise NotFoundError("order not found on the store", {"order_number": order_number})
        exact = [o for o in found if str(o.get("number")) == str(order_number)]
        return to_external_order((exact or found)[0])

    def fetch_order_by_id(self, order_id) -> ExternalOrder:
        payload = self._get(f"/orders/{order_id}")
        if not payload:
            raise NotFoundError("order not found on the store", {"order_id": order_id})
        return to_external_order(payload)
