from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import requests

from portfolio_ceo.core.config import settings
from portfolio_ceo.services.result import Err, ErrorKind, Ok, Result

logger = logging.getLogger("portfolio_ceo.webhook")


@dataclass(frozen=True)
class WebhookResponse:
    status_code: int
    text: str
    data: Any = None

    @property
    def is_json(self) -> bool:
        return self.data is not None


def _parse_body(text: str) -> Any:
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


class WebhookClient:
    """Thin client for the remote analytics workflow.

    Every call returns ``Ok(WebhookResponse)`` or ``Err``; the error message
    keeps the display form shown to users (``"Error: 500 Internal Server Error"``,
    ``"Error: <exception>"``).
    """

    def __init__(self, url: str | None = None, timeout_s: float | None = None) -> None:
        self.url = url or settings.webhook_url
        self.timeout_s = timeout_s if timeout_s is not None else settings.webhook_timeout_s

    def _request(self, method: str, payload: dict[str, Any] | None = None) -> Result[WebhookResponse]:
        headers = {"Content-Type": "application/json"}
        try:
            response = requests.request(
                method,
                self.url,
                headers=headers,
                json=payload,
                timeout=self.timeout_s,
            )
        except requests.RequestException as exc:
            logger.warning("Webhook %s %s failed: %s", method, self.url, exc)
            return Err(ErrorKind.TRANSPORT, f"Error: {exc}")

        if not 200 <= response.status_code < 300:
            logger.warning("Webhook %s %s -> %s %s", method, self.url, response.status_code, response.reason)
            return Err(
                ErrorKind.HTTP_STATUS,
                f"Error: {response.status_code} {response.reason or ''}".rstrip(),
                status_code=response.status_code,
            )

        text = response.text or ""
        return Ok(WebhookResponse(status_code=response.status_code, text=text, data=_parse_body(text)))

    def fetch(self) -> Result[WebhookResponse]:
        return self._request("GET")

    def post(self, payload: dict[str, Any]) -> Result[WebhookResponse]:
        return self._request("POST", payload)


def get_webhook_client() -> WebhookClient:
    return WebhookClient()
