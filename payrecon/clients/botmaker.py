# payrecon/clients/botmaker.py
import logging

import requests

from ..errors import TransientExternalError

logger = logging.getLogger(__name__)


class BotmakerNotifier:
    """Templated WhatsApp messages through the Botmaker intent API."""

    def __init__(self, url, channel_id, access_token, allowlist=(), enabled=True, timeout=5.0):
        self.url = url
        self.channel_id = channel_id
        self.access_token = access_token
        self.allowlist = {p.replace("+", "") for p in allowlist}
        self.enabled = enabled
        self.timeout = timeout

    def allows(self, phone: str) -> bool:
        if not self.enabled or not phone:
            return False
        return not self.allowlist or phone.replace("+", "") in self.allowlist

    def send_template(self, phone: str, template: str, variables: dict) -> bool:
        """Returns False when the phone is filtered out; raises on delivery failure."""
        if not self.allows(phone):
            logger.info("notification %s skipped for %s", template, phone)
            return False

        payload = {
            "chat": {"channelId": self.channel_id, "contactId": phone.replace("+", "")},
            "intentIdOrName": template,
            "variables": {k: str(v) for k, v in (variables or {}).items()},
        }
        try:
            response = requests.post(
                self.url,
                json=payload,
                headers={"access-token": self.access_token or "", "Content-Type": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise TransientExternalError("notification failed", {"template": template, "error": str(e)}) from e
        return True
