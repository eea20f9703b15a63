"""
Test Transport Configurator
===========================
Tests for startup configuration of the mail transport.
"""

import pytest

from resetmail.core.exceptions import ConfigurationIncomplete, TransportConstructionError
from resetmail.mail.configurator import (
    MailTransportState,
    build_transport_config,
    configure,
    missing_transport_settings,
)
from resetmail.schemas.mail import TransportStatus
from tests.fixtures import SMTP_ENV, FakeMailTransport, make_settings


class TestMissingSettings:
    """Test suite for required-setting detection."""

    def test_all_missing(self, unconfigured_settings):
        assert missing_transport_settings(unconfigured_settings) == [
            'SMTP_HOST', 'SMTP_PORT', 'SMTP_USER', 'SMTP_PASS'
        ]

    def test_blank_values_count_as_missing(self):
        settings = make_settings(**{**SMTP_ENV, 'SMTP_PASS': '   ', 'SMTP_HOST': ''})

        assert missing_transport_settings(settings) == ['SMTP_HOST', 'SMTP_PASS']

    def test_none_missing(self, smtp_settings):
        assert missing_transport_settings(smtp_settings) == []


class TestBuildTransportConfig:
    """Test suite for TransportConfig construction."""

    def test_builds_from_settings(self, smtp_settings):
        config = build_transport_config(smtp_settings)

        assert config.host == 'smtp.example.com'
        assert config.port == 587
        assert config.username == 'mailer@example.com'
        assert config.password == 'app-password'
        assert config.secure is False
        assert config.reject_unauthorized is False

    def test_password_not_in_repr(self, smtp_settings):
        config = build_transport_config(smtp_settings)

        assert 'app-password' not in repr(config)

    def test_secure_flag(self):
        settings = make_settings(**{**SMTP_ENV, 'SMTP_PORT': '465', 'SMTP_SECURE': 'true'})

        config = build_transport_config(settings)

        assert config.port == 465
        assert config.secure is True

    @pytest.mark.parametrize("value", ['false', 'TRUE-ish', '1', ''])
    def test_secure_requires_literal_true(self, value):
        settings = make_settings(**{**SMTP_ENV, 'SMTP_SECURE': value})

        assert build_transport_config(settings).secure is False

    def test_production_rejects_unauthorized_certs(self):
        settings = make_settings(**SMTP_ENV, ENVIRONMENT='production')

        assert build_transport_config(settings).reject_unauthorized is True

    def test_missing_settings_raise(self, unconfigured_settings):
        with pytest.raises(ConfigurationIncomplete) as exc_info:
            build_transport_config(unconfigured_settings)

        assert exc_info.value.missing == ['SMTP_HOST', 'SMTP_PORT', 'SMTP_USER', 'SMTP_PASS']

    @pytest.mark.parametrize("port", ['abc', '0', '70000', '58 7'])
    def test_malformed_port_raises(self, port):
        settings = make_settings(**{**SMTP_ENV, 'SMTP_PORT': port})

        with pytest.raises(TransportConstructionError):
            build_transport_config(settings)

    def test_timeout_defaults_and_parses(self, smtp_settings):
        assert build_transport_config(smtp_settings).timeout == 30.0

        settings = make_settings(**SMTP_ENV, SMTP_TIMEOUT=' 12.5 ')
        assert build_transport_config(settings).timeout == 12.5

    @pytest.mark.parametrize("timeout", ['soon', '0', '-5'])
    def test_malformed_timeout_raises(self, timeout):
        settings = make_settings(**SMTP_ENV, SMTP_TIMEOUT=timeout)

        with pytest.raises(TransportConstructionError, match="SMTP_TIMEOUT"):
            build_transport_config(settings)


class TestConfigure:
    """Test suite for the configure() startup step."""

    @pytest.mark.asyncio
    async def test_unconfigured_when_settings_missing(self, unconfigured_settings, fake_transport, metrics):
        state = await configure(unconfigured_settings, transport_factory=fake_transport.factory, metrics=metrics)

        assert state.status == TransportStatus.UNCONFIGURED
        assert state.is_ready is False
        assert state.missing_settings == ['SMTP_HOST', 'SMTP_PORT', 'SMTP_USER', 'SMTP_PASS']
        assert state.last_error is None
        assert fake_transport.verify_count == 0

    @pytest.mark.asyncio
    async def test_ready_after_successful_verify(self, smtp_settings, fake_transport, metrics):
        state = await configure(smtp_settings, transport_factory=fake_transport.factory, metrics=metrics)

        assert state.status == TransportStatus.READY
        assert state.is_ready is True
        assert state.transport is fake_transport
        assert fake_transport.config.host == 'smtp.example.com'
        assert fake_transport.verify_count == 1

    @pytest.mark.asyncio
    async def test_failed_when_verify_fails(self, smtp_settings, metrics):
        transport = FakeMailTransport(verify_error='Invalid login: 535 Authentication failed')

        state = await configure(smtp_settings, transport_factory=transport.factory, metrics=metrics)

        assert state.status == TransportStatus.FAILED
        assert state.is_ready is False
        assert state.last_error == 'Invalid login: 535 Authentication failed'

    @pytest.mark.asyncio
    async def test_failed_when_factory_raises(self, smtp_settings, metrics):
        def broken_factory(config):
            raise ValueError('unsupported TLS options')

        state = await configure(smtp_settings, transport_factory=broken_factory, metrics=metrics)

        assert state.status == TransportStatus.FAILED
        assert state.transport is None
        assert state.last_error == 'unsupported TLS options'

    @pytest.mark.asyncio
    async def test_failed_on_malformed_port(self, fake_transport, metrics):
        settings = make_settings(**{**SMTP_ENV, 'SMTP_PORT': 'smtp'})

        state = await configure(settings, transport_factory=fake_transport.factory, metrics=metrics)

        assert state.status == TransportStatus.FAILED
        assert "Invalid SMTP_PORT" in state.last_error
        assert fake_transport.verify_count == 0

    @pytest.mark.asyncio
    async def test_failed_on_malformed_timeout(self, fake_transport, metrics):
        settings = make_settings(**SMTP_ENV, SMTP_TIMEOUT='thirty')

        state = await configure(settings, transport_factory=fake_transport.factory, metrics=metrics)

        assert state.status == TransportStatus.FAILED
        assert "Invalid SMTP_TIMEOUT" in state.last_error
        assert fake_transport.verify_count == 0

    @pytest.mark.asyncio
    async def test_status_gauge_published(self, smtp_settings, fake_transport, metrics):
        await configure(smtp_settings, transport_factory=fake_transport.factory, metrics=metrics)

        ready = metrics.registry.get_sample_value('resetmail_transport_status', {'status': 'ready'})
        failed = metrics.registry.get_sample_value('resetmail_transport_status', {'status': 'failed'})
        assert ready == 1
        assert failed == 0


class TestMailTransportState:
    """Test suite for the injectable state object."""

    def test_default_state_is_unconfigured(self):
        state = MailTransportState()

        assert state.status == TransportStatus.UNCONFIGURED
        assert state.is_ready is False

    def test_ready_status_without_transport_is_not_ready(self):
        state = MailTransportState(status=TransportStatus.READY)

        assert state.is_ready is False

    @pytest.mark.asyncio
    async def test_describe_hides_credentials(self, smtp_settings, fake_transport, metrics):
        state = await configure(smtp_settings, transport_factory=fake_transport.factory, metrics=metrics)

        described = state.describe()

        assert described.status == TransportStatus.READY
        assert described.ready is True
        assert described.host == 'smtp.example.com'
        assert described.port == 587
        assert 'app-password' not in described.model_dump_json()
