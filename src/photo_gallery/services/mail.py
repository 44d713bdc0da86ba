"""Outgoing email service."""

import logging
import re
from dataclasses import dataclass
from typing import Protocol

from photo_gallery.domain.mail import OutgoingEmail

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_logger = logging.getLogger(__name__)


class MailError(Exception):
    """Base error for outgoing email."""

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class MailValidationError(MailError):
    """The email request is incomplete or malformed."""


class MailConfigurationError(MailError):
    """The selected transport is missing configuration."""


class MailDeliveryError(MailError):
    """The provider rejected or failed to deliver the email."""


class MailTransport(Protocol):
    """Interface for a provider that delivers email."""

    name: str
    requires_sender: bool

    def ensure_configured(self) -> None:
        """Raise MailConfigurationError when credentials are missing."""

    async def send(self, email: OutgoingEmail) -> str:
        """Deliver an email and return the provider message id."""


@dataclass
class MailService:
    """Validates outgoing email and hands it to the configured transport."""

    transport: MailTransport

    async def send(self, email: OutgoingEmail) -> str:
        """Send an email and return its message id."""
        self.transport.ensure_configured()
        self._validate(email)
        message_id = await self.transport.send(email)
        _logger.info(
            "Email sent via %s: message_id=%s", self.transport.name, message_id
        )
        return message_id

    def _validate(self, email: OutgoingEmail) -> None:
        required = {"to": email.to, "subject": email.subject, "html": email.html}
        if self.transport.requires_sender:
            required = {"to": email.to, "from": email.from_address, **required}
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise MailValidationError(
                f"Missing required fields: {', '.join(required)}"
            )
        addresses = [email.to]
        if email.from_address:
            addresses.append(email.from_address)
        if not all(_EMAIL_PATTERN.match(address) for address in addresses):
            raise MailValidationError("Invalid email format")
