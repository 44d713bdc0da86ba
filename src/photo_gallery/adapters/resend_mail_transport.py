"""Resend email API transport."""

from dataclasses import dataclass

import httpx

from photo_gallery.domain.mail import OutgoingEmail
from photo_gallery.services.mail import (
    MailConfigurationError,
    MailDeliveryError,
    MailTransport,
)


@dataclass
class ResendMailTransport(MailTransport):
    """Delivers email through the Resend HTTP API."""

    api_key: str | None
    base_url: str
    http_client: httpx.AsyncClient
    name: str = "resend"
    requires_sender: bool = True

    @classmethod
    def create(cls, api_key: str | None, base_url: str) -> "ResendMailTransport":
        """Create a transport with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    def ensure_configured(self) -> None:
        if not self.api_key:
            raise MailConfigurationError(
                "RESEND_API_KEY environment variable not configured"
            )

    async def send(self, email: OutgoingEmail) -> str:
        """Send an email with Resend's /emails endpoint."""
        payload: dict[str, object] = {
            "from": email.from_address,
            "to": email.to,
            "subject": email.subject,
            "html": email.html,
        }
        if email.text:
            payload["text"] = email.text
        if email.reply_to:
            payload["reply_to"] = email.reply_to
        try:
            response = await self.http_client.post(
                f"{self.base_url}/emails",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json=payload,
                timeout=15,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise MailDeliveryError(
                "Failed to send email", details=exc.response.text
            ) from exc
        except httpx.HTTPError as exc:
            raise MailDeliveryError("Failed to send email", details=str(exc)) from exc
        return str(response.json().get("id", ""))

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
