# ------ payrecon/clients/__init__.py ------
"""Adapters for the services the core talks to but does not own."""
from dataclasses import dataclass

from flask import current_app

from .botmaker import BotmakerNotifier
from .ocr import TesseractOcr
from .storage import LocalStorage
from .tiendanube import TiendanubeOrderSource

EXTENSION_KEY = "payrecon.clients"


@dataclass
class Clients:
    order_source: object
    ocr: object
    storage: object
    notifier: object


def build_clients(config) -> Clients:
    timeout = float(config.get("EXTERNAL_TIMEOUT", 5))
    return Clients(
        order_source=TiendanubeOrderSource(
            base_url=config.get("TIENDANUBE_API_URL"),
            store_id=config.get("TIENDANUBE_STORE_ID"),
            access_token=config.get("TIENDANUBE_ACCESS_TOKEN"),
            timeout=timeout,
        ),
        ocr=TesseractOcr(timeout=timeout),
        storage=LocalStorage(config.get("STORAGE_DIR"), config.get("STORAGE_PUBLIC_URL", "/files")),
        notifier=BotmakerNotifier(
            url=config.get("BOTMAKER_API_URL"),
            channel_id=config.get("BOTMAKER_CHANNEL_ID"),
            access_token=config.get("BOTMAKER_ACCESS_TOKEN"),
            allowlist=config.get("NOTIFY_ALLOWLIST") or (),
            enabled=config.get("NOTIFICATIONS_ENABLED", True),
            timeout=timeout,
        ),
    )


def get_clients() -> Clients:
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    "Clients",
    "build_clients",
    "get_clients",
    "BotmakerNotifier",
    "LocalStorage",
    "TesseractOcr",
    "TiendanubeOrderSource",
]
