"""Test fixtures package."""

from tests.fixtures.fake_mail_transport import FakeMailTransport
from tests.fixtures.settings import SMTP_ENV, make_settings

__all__ = [
    'FakeMailTransport',
    'SMTP_ENV',
    'make_settings',
]
