"""Password reset mail: transport configuration and dispatch."""

from resetmail.mail.configurator import (
    MailTransportState,
    build_transport_config,
    configure,
    missing_transport_settings,
)
from resetmail.mail.dispatcher import (
    PasswordResetDispatcher,
    build_reset_link,
    token_correlation_id,
)
from resetmail.mail.sender import (
    ParsedFallback,
    ParsedOk,
    SenderIdentity,
    parse_sender,
    resolve_sender,
)
from resetmail.mail.transport import (
    MailTransport,
    OutgoingMessage,
    SendReceipt,
    SMTPTransport,
    TransportConfig,
)

__all__ = [
    "MailTransportState",
    "build_transport_config",
    "configure",
    "missing_transport_settings",
    "PasswordResetDispatcher",
    "build_reset_link",
    "token_correlation_id",
    "ParsedFallback",
    "ParsedOk",
    "SenderIdentity",
    "parse_sender",
    "resolve_sender",
    "MailTransport",
    "OutgoingMessage",
    "SendReceipt",
    "SMTPTransport",
    "TransportConfig",
]
