from __future__ import annotations

import logging

import httpx

from barberbot.application.exceptions import MessagingError


class WhatsAppClient:
    """Thin client for the WhatsApp Cloud API "messages" endpoint."""

    def __init__(
        self,
        access_token: str,
        phone_number_id: str,
        graph_api_version: str = "v20.0",
        http_client: httpx.Client | None = None,
    ) -> None:
        self._access_token = access_token
        self._send_endpoint = f"https://graph.facebook.com/{graph_api_version}/{phone_number_id}/messages"
        self._client = http_client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

    def send_text(self, recipient_id: str, text: str) -> None:
        payload = {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": recipient_id,
            "type": "text",
            "text": {"preview_url": False, "body": text},
        }
        headers = {"Authorization": f"Bearer {self._access_token}"}
        try:
            resp = self._client.post(self._send_endpoint, headers=headers, json=payload)
        except httpx.HTTPError as e:
            self._logger.error("WhatsApp send failed", extra={"handle": recipient_id, "reason": str(e)})
            raise MessagingError(f"WhatsApp send to {recipient_id} failed: {e}") from e

        if resp.status_code >= 400:
            try:
                error = resp.json().get("error", {})
                error_code = error.get("code")
                error_message = error.get("message")
            except ValueError:
                error_code = None
                error_message = resp.text

            self._logger.error(
                "WhatsApp send failed",
                extra={
                    "handle": recipient_id,
                    "reason": f"status={resp.status_code} code={error_code} message={error_message}",
                },
            )
            raise MessagingError(f"WhatsApp send to {recipient_id} failed with status {resp.status_code}")
