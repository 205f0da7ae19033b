from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from app.domain.entities import EnquiryEmail
from app.domain.errors import EmailDispatchError
from app.domain.ports.email_port import EmailPort


class SendGridEmailAdapter(EmailPort):
    """Sends mail through the SendGrid v3 Web API."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.sendgrid.com",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        send_path: str = "/v3/mail/send",
    ) -> None:
        if not api_key:
            raise ValueError("api_key is required")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._send_path = send_path if send_path.startswith("/") else f"/{send_path}"
        self._owns_client: bool = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)

    def _scrub(self, text: str) -> str:
        return text.replace(self._api_key, "***")

    @staticmethod
    def build_payload(email: EnquiryEmail) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "personalizations": [{"to": [{"email": email.to}]}],
            "from": {"email": email.sender},
            "subject": email.subject,
            "content": [
                {"type": "text/plain", "value": email.text},
                {"type": "text/html", "value": email.html},
            ],
        }
        if email.reply_to:
            payload["reply_to"] = {"email": email.reply_to}
        return payload

    async def send(self, email: EnquiryEmail) -> None:
        headers = {"Authorization": f"Bearer {self._api_key}"}
        url = f"{self._base_url}{self._send_path}"

        try:
            resp = await self._client.post(
                url, json=self.build_payload(email), headers=headers
            )
        except httpx.HTTPError as e:
            raise EmailDispatchError(
                self._scrub(f"SendGrid HTTP error: {e}")
            ) from None

        if not (200 <= resp.status_code < 300):
            text = self._scrub(resp.text[:200])
            raise EmailDispatchError(
                f"SendGrid responded {resp.status_code}: {text}",
                status_code=resp.status_code,
            )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
