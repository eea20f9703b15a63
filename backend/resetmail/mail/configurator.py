"""
Mail transport configuration.

Runs once during application bootstrap. Decides whether live SMTP
delivery is possible, builds the transport and awaits its connectivity
check. Every failure is converted into a ``TransportStatus``; nothing is
raised to the bootstrap.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from resetmail.config.logging import get_logger
from resetmail.config.settings import DEFAULT_SMTP_TIMEOUT, REQUIRED_SMTP_SETTINGS, Settings
from resetmail.core.exceptions import (
    ConfigurationIncomplete,
    TransportConstructionError,
    error_message,
)
from resetmail.mail.transport import MailTransport, SMTPTransport, TransportConfig
from resetmail.observability.metrics import MailMetrics, metrics as default_metrics
from resetmail.schemas.mail import MailStatusResponse, TransportStatus

logger = get_logger(__name__)

TransportFactory = Callable[[TransportConfig], MailTransport]


@dataclass
class MailTransportState:
    """Outcome of transport configuration, handed to the dispatcher.

    Written by the configurator during startup only; read by every
    dispatch afterwards.
    """
    status: TransportStatus = TransportStatus.UNCONFIGURED
    config: Optional[TransportConfig] = None
    transport: Optional[MailTransport] = None
    missing_settings: List[str] = field(default_factory=list)
    last_error: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.status == TransportStatus.READY and self.transport is not None

    def describe(self) -> MailStatusResponse:
        return MailStatusResponse(
            status=self.status,
            ready=self.is_ready,
            missing_settings=list(self.missing_settings),
            last_error=self.last_error,
            host=self.config.host if self.config else None,
            port=self.config.port if self.config else None,
            secure=self.config.secure if self.config else None,
        )


def missing_transport_settings(settings: Settings) -> List[str]:
    """Required SMTP settings that are absent or blank."""
    return [
        name for name in REQUIRED_SMTP_SETTINGS
        if not (getattr(settings, name, None) or "").strip()
    ]


def build_transport_config(settings: Settings) -> TransportConfig:
    """Build the SMTP connection settings.

    Raises ConfigurationIncomplete when required settings are missing and
    TransportConstructionError when present values are unusable.
    """
    missing = missing_transport_settings(settings)
    if missing:
        raise ConfigurationIncomplete(missing)

    raw_port = settings.SMTP_PORT.strip()
    try:
        port = int(raw_port)
    except ValueError as e:
        raise TransportConstructionError(f"Invalid SMTP_PORT: {raw_port!r}") from e
    if not 0 < port < 65536:
        raise TransportConstructionError(f"SMTP_PORT out of range: {port}")

    raw_timeout = (settings.SMTP_TIMEOUT or "").strip()
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_SMTP_TIMEOUT
    except ValueError as e:
        raise TransportConstructionError(f"Invalid SMTP_TIMEOUT: {raw_timeout!r}") from e
    if not timeout > 0:
        raise TransportConstructionError(f"SMTP_TIMEOUT must be positive, got {raw_timeout}")

    return TransportConfig(
        host=settings.SMTP_HOST.strip(),
        username=settings.SMTP_USER.strip(),
        password=settings.SMTP_PASS,
        port=port,
        secure=settings.smtp_secure_enabled(),
        # Certificate checks are strict only in production
        reject_unauthorized=settings.is_production(),
        timeout=timeout,
    )


def _fail(state: MailTransportState, event: str, error: str) -> MailTransportState:
    state.status = TransportStatus.FAILED
    state.last_error = error
    logger.error(event, error=error)
    logger.warning("password reset emails will be simulated (logged only)")
    return state


async def configure(
    settings: Settings,
    transport_factory: TransportFactory = SMTPTransport,
    metrics: Optional[MailMetrics] = None,
) -> MailTransportState:
    """Configure the mail transport and await its connectivity check."""
    metrics = metrics or default_metrics
    state = MailTransportState()

    try:
        state = await _configure(state, settings, transport_factory)
    finally:
        metrics.set_transport_status(state.status)

    return state


async def _configure(
    state: MailTransportState,
    settings: Settings,
    transport_factory: TransportFactory,
) -> MailTransportState:
    try:
        state.config = build_transport_config(settings)
    except ConfigurationIncomplete as e:
        state.missing_settings = e.missing
        logger.warning("⚠️ smtp_settings_missing", missing=", ".join(e.missing))
        logger.warning("password reset emails will be simulated (logged only)")
        return state
    except TransportConstructionError as e:
        return _fail(state, "❌ smtp_transport_construction_failed", error_message(e))

    try:
        state.transport = transport_factory(state.config)
    except Exception as e:
        return _fail(state, "❌ smtp_transport_construction_failed", error_message(e))

    state.status = TransportStatus.CONFIGURING
    logger.info(
        "smtp_transport_verifying",
        host=state.config.host,
        port=state.config.port,
        secure=state.config.secure,
    )

    try:
        await state.transport.verify()
    except Exception as e:
        return _fail(state, "❌ smtp_verification_failed", error_message(e))

    state.status = TransportStatus.READY
    logger.info("✅ smtp_transport_ready", host=state.config.host, port=state.config.port)
    return state
