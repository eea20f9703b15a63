"""
Test configuration.
Shared settings, metrics and transport fixtures for the mail tests.
"""

import logging
import os

import pytest
import structlog
from prometheus_client import CollectorRegistry

from resetmail.config.settings import Settings, get_settings
from resetmail.observability.metrics import MailMetrics
from tests.fixtures import SMTP_ENV, FakeMailTransport, make_settings

# Test environment setup
test_env_vars = {
    'ENVIRONMENT': 'development',
    'LOG_LEVEL': 'ERROR',
    'LOG_FORMAT': 'console',
    'ENABLE_METRICS': 'true',
}

# Never pick up a developer's real SMTP account
for key in ('SMTP_HOST', 'SMTP_PORT', 'SMTP_SECURE', 'SMTP_USER', 'SMTP_PASS',
            'SMTP_FROM', 'NODE_ENV', 'FRONTEND_BASE_URL'):
    os.environ.pop(key, None)

for key, value in test_env_vars.items():
    os.environ[key] = value


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo configure_logging() calls made by the app lifespan or CLI."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)


@pytest.fixture
def unconfigured_settings() -> Settings:
    return make_settings()


@pytest.fixture
def smtp_settings() -> Settings:
    return make_settings(**SMTP_ENV)


@pytest.fixture
def metrics() -> MailMetrics:
    """Metrics on a private registry so counts start at zero."""
    return MailMetrics(registry=CollectorRegistry())


@pytest.fixture
def fake_transport() -> FakeMailTransport:
    return FakeMailTransport()
