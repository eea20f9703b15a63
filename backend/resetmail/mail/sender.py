"""
Sender identity resolution.

``SMTP_FROM`` may hold ``"Name <address>"`` or a bare address. Parsing
returns a tagged result so callers can tell a structured match from a raw
fallback.
"""

from dataclasses import dataclass
from email.utils import formataddr
from typing import Optional, Union


@dataclass(frozen=True)
class SenderIdentity:
    """Resolved display name and address used for the From header."""
    name: str
    address: str

    def formatted(self) -> str:
        return formataddr((self.name, self.address))


@dataclass(frozen=True)
class ParsedOk:
    """``SMTP_FROM`` matched the ``Name <address>`` form."""
    name: str
    address: str


@dataclass(frozen=True)
class ParsedFallback:
    """``SMTP_FROM`` did not match; the raw value is used as the address."""
    address: str


ParsedSender = Union[ParsedOk, ParsedFallback]


def _looks_like_address(value: str) -> bool:
    if not value or any(ch.isspace() for ch in value):
        return False
    if any(ch in value for ch in "<>,;\""):
        return False
    local, sep, domain = value.partition("@")
    return bool(sep) and bool(local) and bool(domain) and "@" not in domain


def parse_sender(raw: str) -> ParsedSender:
    """Parse a ``Name <address>`` display string.

    The address is the text between the last ``<`` and the last ``>``;
    the name is everything before the ``<``, trimmed and unquoted. Anything
    that does not fit, including text after the closing bracket or an
    address without a single ``@``, falls back to the trimmed raw value.
    """
    value = (raw or "").strip()

    open_at = value.rfind("<")
    close_at = value.rfind(">")
    if open_at == -1 or close_at < open_at or value[close_at + 1:].strip():
        return ParsedFallback(address=value)

    address = value[open_at + 1:close_at].strip()
    if not _looks_like_address(address):
        return ParsedFallback(address=value)

    name = value[:open_at].strip()
    if len(name) >= 2 and name[0] == name[-1] == '"':
        name = name[1:-1].strip()

    return ParsedOk(name=name, address=address)


def resolve_sender(
    smtp_from: Optional[str],
    smtp_user: Optional[str],
    default_name: str,
) -> SenderIdentity:
    """Resolve the From identity for outgoing reset mail.

    Without ``SMTP_FROM`` the authenticated account is the address and
    ``default_name`` the display name. A parsed name that is empty also
    falls back to ``default_name``.
    """
    if not smtp_from or not smtp_from.strip():
        return SenderIdentity(name=default_name, address=(smtp_user or "").strip())

    parsed = parse_sender(smtp_from)
    if isinstance(parsed, ParsedOk):
        return SenderIdentity(name=parsed.name or default_name, address=parsed.address)
    return SenderIdentity(name=default_name, address=parsed.address)
