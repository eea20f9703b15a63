"""
Mail delivery error taxonomy.

None of these escape to callers of the dispatcher: the configurator turns
them into transport states and the dispatcher turns send errors into
failure results.
"""

from typing import Iterable, List


class MailError(Exception):
    """Base class for password-reset mail errors."""


class ConfigurationIncomplete(MailError):
    """One or more required SMTP settings are missing."""

    def __init__(self, missing: Iterable[str]):
        self.missing: List[str] = list(missing)
        super().__init__(f"Missing SMTP settings: {', '.join(self.missing)}")


class TransportConstructionError(MailError):
    """SMTP settings are present but cannot produce a transport."""


class TransportVerificationError(MailError):
    """The SMTP server could not be reached or refused authentication."""


class SendFailure(MailError):
    """A single send attempt failed. The message is the transport's own."""


def error_message(exc: BaseException) -> str:
    """Return the exception text verbatim, or its class name when empty."""
    return str(exc) or exc.__class__.__name__
