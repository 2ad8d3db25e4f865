import logging
import smtplib
from dataclasses import dataclass, field
from email.message import EmailMessage
from typing import List, Optional

from storefront.core.config import settings
from storefront.core.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)


@dataclass
class Attachment:
    filename: str
    content: bytes
    mime_type: str = "application/octet-stream"


@dataclass
class OutgoingEmail:
    to: str
    subject: str
    html: str
    reply_to: Optional[str] = None
    attachments: List[Attachment] = field(default_factory=list)

    def __post_init__(self):
        # header values cannot carry line breaks
        self.subject = " ".join(self.subject.split())


class EmailSender:
    """Transport interface; ``send`` raises EmailDeliveryError on failure."""

    def send(self, email: OutgoingEmail) -> None:
        raise NotImplementedError


class SMTPEmailSender(EmailSender):
    def __init__(
        self,
        host: str,
        port: int = 587,
        username: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username

    def _build(self, email: OutgoingEmail) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = email.to
        message["Subject"] = email.subject
        if email.reply_to:
            message["Reply-To"] = email.reply_to
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(email.html, subtype="html")

        for attachment in email.attachments:
            maintype, _, subtype = attachment.mime_type.partition("/")
            message.add_attachment(
                attachment.content,
                maintype=maintype,
                subtype=subtype or "octet-stream",
                filename=attachment.filename,
            )
        return message

    def send(self, email: OutgoingEmail) -> None:
        try:
            with smtplib.SMTP(self.host, self.port, timeout=30) as smtp:
                smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(self._build(email))
        except (smtplib.SMTPException, OSError) as exc:
            raise EmailDeliveryError(
                "Email could not be sent. Please try again later.",
                details={"to": email.to, "reason": str(exc)},
            ) from exc
        logger.info("Sent email %r to %s", email.subject, email.to)


class LoggingEmailSender(EmailSender):
    """Used when no SMTP host is configured: logs instead of sending."""

    def send(self, email: OutgoingEmail) -> None:
        logger.info(
            "SMTP not configured; email %r to %s not delivered (%d attachments)",
            email.subject,
            email.to,
            len(email.attachments),
        )


def get_email_sender() -> EmailSender:
    if not settings.SMTP_HOST:
        return LoggingEmailSender()
    return SMTPEmailSender(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USER,
        password=settings.SMTP_PASSWORD,
        sender=settings.EMAIL_FROM,
    )
