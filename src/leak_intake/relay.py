"""EmailJSRelay — ``NotificationRelay`` posting to the EmailJS REST API."""

from __future__ import annotations

import logging

import httpx

from leak_intake.interfaces import NotificationRelay
from leak_intake.models.request import NotificationPayload

logger = logging.getLogger(__name__)

EMAILJS_SEND_URL = "https://api.emailjs.com/api/v1.0/email/send"


class EmailJSRelay(NotificationRelay):
    """Send consultation notifications through an EmailJS template.

    The template receives ``region``, ``phone``, ``date`` and ``message`` as
    template parameters.  Any non-2xx status or transport problem raises
    ``httpx.HTTPError``.
    """

    def __init__(
        self,
        *,
        service_id: str,
        template_id: str,
        public_key: str,
        url: str = EMAILJS_SEND_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._service_id = service_id
        self._template_id = template_id
        self._public_key = public_key
        self._url = url
        self._timeout = timeout
        self._transport = transport

    async def send(self, payload: NotificationPayload) -> None:
        body = {
            "service_id": self._service_id,
            "template_id": self._template_id,
            "user_id": self._public_key,
            "template_params": payload.model_dump(),
        }
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            resp = await client.post(self._url, json=body)
            resp.raise_for_status()
        logger.info("Notification relayed for region=%s", payload.region)
