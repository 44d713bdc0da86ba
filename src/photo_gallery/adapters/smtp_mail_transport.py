"""SMTP email transport."""

import asyncio
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid

from photo_gallery.domain.mail import OutgoingEmail
from photo_gallery.services.mail import (
    MailConfigurationError,
    MailDeliveryError,
    MailTransport,
)


@dataclass
class SmtpMailTransport(MailTransport):
    """Delivers email through an SMTP server such as Gmail or OVH."""

    host: str | None
    port: int
    user: str | None
    password: str | None
    secure: bool = False
    from_name: str = "Galerie Photo"
    name: str = "smtp"
    requires_sender: bool = False

    def ensure_configured(self) -> None:
        if not self.host or not self.user or not self.password:
            raise MailConfigurationError(
                "SMTP configuration missing (SMTP_HOST, SMTP_USER, SMTP_PASSWORD required)"
            )

    async def send(self, email: OutgoingEmail) -> str:
        """Send an email in a worker thread."""
        try:
            return await asyncio.to_thread(self._send_sync, email)
        except (smtplib.SMTPException, OSError) as exc:
            raise MailDeliveryError(
                "Failed to send email via SMTP", details=str(exc)
            ) from exc

    def _send_sync(self, email: OutgoingEmail) -> str:
        sender = email.from_address or formataddr((self.from_name, self.user))
        message_id = make_msgid()
        msg = MIMEMultipart("alternative")
        msg["Subject"] = email.subject
        msg["From"] = sender
        msg["To"] = email.to
        msg["Message-ID"] = message_id
        if email.reply_to:
            msg["Reply-To"] = email.reply_to
        if email.text:
            msg.attach(MIMEText(email.text, "plain", _charset="utf-8"))
        msg.attach(MIMEText(email.html, "html", _charset="utf-8"))

        if self.secure:
            server: smtplib.SMTP = smtplib.SMTP_SSL(self.host, self.port, timeout=15)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=15)
        with server:
            if not self.secure:
                server.starttls()
            server.login(self.user, self.password)
            server.sendmail(sender, [email.to], msg.as_string())
        return message_id
