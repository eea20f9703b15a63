"""
Password reset email dispatch.

Chooses between a live send through the configured transport and a
simulated, log-only delivery, and always returns a ``DispatchResult``
carrying the reset link.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import quote

from pydantic import ValidationError

from resetmail.config.logging import get_logger
from resetmail.config.settings import DEFAULT_FRONTEND_BASE_URL, Settings
from resetmail.core.exceptions import error_message
from resetmail.mail.configurator import MailTransportState
from resetmail.mail.sender import resolve_sender
from resetmail.mail.templates import TOKEN_EXPIRY_MINUTES, render_reset_email
from resetmail.mail.transport import OutgoingMessage
from resetmail.observability.metrics import MailMetrics, metrics as default_metrics
from resetmail.schemas.mail import DispatchResult, ResetMetadata

logger = get_logger(__name__)

RESET_PATH = "/reset-password.html"
CORRELATION_HEADER = "X-Reset-Token-ID"
CORRELATION_ID_LENGTH = 8

MetadataInput = Union[ResetMetadata, Mapping[str, Any], None]


def build_reset_link(base_url: Optional[str], token: str) -> str:
    """Frontend reset page URL carrying the token as its only query value."""
    base = (base_url or "").strip().rstrip("/") or DEFAULT_FRONTEND_BASE_URL
    return f"{base}{RESET_PATH}?token={quote(token, safe='')}"


def token_correlation_id(token: str) -> str:
    """Short token prefix for tracing a message without exposing the token."""
    return token[:CORRELATION_ID_LENGTH]


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _coerce_metadata(metadata: MetadataInput) -> ResetMetadata:
    if metadata is None:
        return ResetMetadata()
    if isinstance(metadata, ResetMetadata):
        return metadata
    try:
        return ResetMetadata.model_validate(dict(metadata))
    except (TypeError, ValueError, ValidationError) as e:
        logger.warning("reset_metadata_ignored", error=error_message(e))
        return ResetMetadata()


class PasswordResetDispatcher:
    """Sends password reset emails, or simulates them when mail is unavailable."""

    def __init__(
        self,
        state: MailTransportState,
        settings: Settings,
        metrics: Optional[MailMetrics] = None,
    ):
        self.state = state
        self.settings = settings
        self.metrics = metrics or default_metrics
        self.expiry_minutes = TOKEN_EXPIRY_MINUTES

    def reset_link(self, token: str) -> str:
        return build_reset_link(self.settings.FRONTEND_BASE_URL, token)

    async def dispatch(
        self,
        recipient: str,
        reset_token: str,
        metadata: MetadataInput = None,
    ) -> DispatchResult:
        """Deliver (or simulate) one reset email. Never raises."""
        reset_link = self.reset_link(reset_token)
        meta = _coerce_metadata(metadata)

        if not self.state.is_ready:
            result = self._simulate(recipient, reset_link, meta)
        else:
            result = await self._send(recipient, reset_token, reset_link, meta)

        self.metrics.record_dispatch(result.outcome)
        return result

    def _simulate(
        self,
        recipient: str,
        reset_link: str,
        meta: ResetMetadata,
    ) -> DispatchResult:
        record: Dict[str, Any] = {
            "timestamp": _timestamp(),
            "recipient": recipient,
            "reset_link": reset_link,
            "token_expiry": f"{self.expiry_minutes} minutes",
            "person_name": meta.person_name or "",
            "request_ip": meta.request_ip or "",
            "simulated": True,
        }

        logger.info(
            "📧 [development mode] password reset email simulated",
            recipient=recipient,
            person_name=meta.person_name or None,
            reset_link=reset_link,
            expires_in=record["token_expiry"],
            user_agent=meta.user_agent or "unknown",
            request_ip=meta.request_ip or "unknown",
        )

        return DispatchResult(
            success=True,
            development_mode=True,
            reset_link=reset_link,
            recipient=recipient,
            info=record,
        )

    async def _send(
        self,
        recipient: str,
        reset_token: str,
        reset_link: str,
        meta: ResetMetadata,
    ) -> DispatchResult:
        correlation_id = token_correlation_id(reset_token)

        try:
            sender = resolve_sender(
                self.settings.SMTP_FROM,
                self.settings.SMTP_USER,
                self.settings.MAIL_PRODUCT_NAME,
            )
            rendered = render_reset_email(
                reset_link,
                self.expiry_minutes,
                person_name=meta.person_name or "",
                product_name=self.settings.MAIL_PRODUCT_NAME,
            )
            message = OutgoingMessage(
                sender=sender,
                to=recipient,
                subject=rendered.subject,
                html=rendered.html,
                text=rendered.text,
                headers={CORRELATION_HEADER: correlation_id},
            )
            receipt = await self.state.transport.send_mail(message)
        except Exception as e:
            return self._failed(recipient, reset_link, correlation_id, error_message(e))

        record: Dict[str, Any] = {
            "timestamp": _timestamp(),
            "recipient": recipient,
            "message_id": receipt.message_id,
            "accepted": list(receipt.accepted),
            "rejected": list(receipt.rejected),
            "person_name": meta.person_name or "",
            "request_ip": meta.request_ip or "",
        }

        logger.info(
            "✅ password reset email sent",
            recipient=recipient,
            message_id=receipt.message_id,
            status=receipt.response or "sent",
            correlation_id=correlation_id,
        )

        return DispatchResult(
            success=True,
            message_id=receipt.message_id,
            reset_link=reset_link,
            recipient=recipient,
            info=record,
        )

    def _failed(
        self,
        recipient: str,
        reset_link: str,
        correlation_id: str,
        error: str,
    ) -> DispatchResult:
        record: Dict[str, Any] = {
            "timestamp": _timestamp(),
            "recipient": recipient,
            "error": error,
            "reset_link": reset_link,
        }

        logger.error(
            "❌ password reset email failed",
            recipient=recipient,
            error=error,
            correlation_id=correlation_id,
        )
        if not self.settings.is_production():
            logger.info("🔗 reset link for manual testing", reset_link=reset_link)

        # development_mode stays set on failure: callers show the link either way
        return DispatchResult(
            success=False,
            error=error,
            reset_link=reset_link,
            recipient=recipient,
            error_details=record,
            development_mode=True,
            fallback_link_exposed=True,
        )
