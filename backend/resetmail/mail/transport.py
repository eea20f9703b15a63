"""
Mail transport interface and SMTP implementation.

The dispatcher only depends on ``MailTransport``; tests substitute an
in-memory double and production uses ``SMTPTransport`` over aiosmtplib.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from email.message import EmailMessage
from email.utils import formatdate, make_msgid
from typing import Dict, List, Tuple

import aiosmtplib

from resetmail.config.logging import get_logger
from resetmail.config.settings import DEFAULT_SMTP_PORT
from resetmail.core.exceptions import SendFailure, TransportVerificationError, error_message
from resetmail.mail.sender import SenderIdentity

logger = get_logger(__name__)


@dataclass(frozen=True)
class TransportConfig:
    """SMTP connection settings, built once at startup."""
    host: str
    username: str
    password: str = field(repr=False)
    port: int = DEFAULT_SMTP_PORT
    secure: bool = False
    reject_unauthorized: bool = True
    timeout: float = 30.0


@dataclass
class OutgoingMessage:
    sender: SenderIdentity
    to: str
    subject: str
    html: str
    text: str
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class SendReceipt:
    """What the server told us about an accepted message."""
    message_id: str
    accepted: List[str] = field(default_factory=list)
    rejected: List[str] = field(default_factory=list)
    response: str = ""


class MailTransport(ABC):
    """Abstract mail transport."""

    @abstractmethod
    async def verify(self) -> None:
        """Check connectivity and credentials. Raises on failure."""

    @abstractmethod
    async def send_mail(self, message: OutgoingMessage) -> SendReceipt:
        """Send one message. Raises on failure."""


class SMTPTransport(MailTransport):
    """aiosmtplib-backed transport.

    ``secure`` selects implicit TLS; otherwise STARTTLS is used when the
    server offers it. Each operation opens its own connection.
    """

    def __init__(self, config: TransportConfig):
        self.config = config

    def _client(self) -> aiosmtplib.SMTP:
        return aiosmtplib.SMTP(
            hostname=self.config.host,
            port=self.config.port,
            username=self.config.username,
            password=self.config.password,
            use_tls=self.config.secure,
            start_tls=False if self.config.secure else None,
            validate_certs=self.config.reject_unauthorized,
            timeout=self.config.timeout,
        )

    async def verify(self) -> None:
        try:
            async with self._client() as client:
                await client.noop()
        except (aiosmtplib.SMTPException, OSError) as e:
            raise TransportVerificationError(error_message(e)) from e

        logger.debug("smtp_verified", host=self.config.host, port=self.config.port)

    def build_mime(self, message: OutgoingMessage) -> Tuple[EmailMessage, str]:
        """Build the MIME message and return it with its Message-ID."""
        domain = message.sender.address.rpartition("@")[2] or None
        message_id = make_msgid(domain=domain)

        mime = EmailMessage()
        mime["From"] = message.sender.formatted()
        mime["To"] = message.to
        mime["Subject"] = message.subject
        mime["Date"] = formatdate(localtime=True)
        mime["Message-ID"] = message_id
        for name, value in message.headers.items():
            mime[name] = value

        mime.set_content(message.text)
        mime.add_alternative(message.html, subtype="html")
        return mime, message_id

    async def send_mail(self, message: OutgoingMessage) -> SendReceipt:
        mime, message_id = self.build_mime(message)

        try:
            async with self._client() as client:
                errors, response = await client.send_message(mime)
        except (aiosmtplib.SMTPException, OSError) as e:
            raise SendFailure(error_message(e)) from e

        rejected = list(errors.keys())
        accepted = [message.to] if message.to not in errors else []
        return SendReceipt(
            message_id=message_id,
            accepted=accepted,
            rejected=rejected,
            response=response,
        )
