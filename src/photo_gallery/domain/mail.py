"""Domain models for outgoing email."""

from dataclasses import dataclass


@dataclass(frozen=True)
class OutgoingEmail:
    """An email message ready to hand to a mail transport."""

    to: str
    subject: str
    html: str
    from_address: str | None = None
    text: str | None = None
    reply_to: str | None = None
