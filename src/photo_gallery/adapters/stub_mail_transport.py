"""Gmail REST stub transport."""

import logging
from dataclasses import dataclass
from uuid import uuid4

from photo_gallery.domain.mail import OutgoingEmail
from photo_gallery.services.mail import MailConfigurationError, MailTransport

_logger = logging.getLogger(__name__)


@dataclass
class StubMailTransport(MailTransport):
    """Accepts email without delivering it.

    Credentials are still required so a deployment can be checked end to end
    before switching to a real transport.
    """

    gmail_user: str | None
    gmail_app_password: str | None
    name: str = "stub"
    requires_sender: bool = False

    def ensure_configured(self) -> None:
        if not self.gmail_user or not self.gmail_app_password:
            raise MailConfigurationError(
                "Gmail configuration missing",
                details="GMAIL_USER and GMAIL_APP_PASSWORD must be set",
            )

    async def send(self, email: OutgoingEmail) -> str:
        """Log the email and return a generated message id."""
        message_id = f"stub-{uuid4()}"
        _logger.info(
            "Stub transport accepted email to=%s subject=%s message_id=%s",
            email.to,
            email.subject,
            message_id,
        )
        return message_id
