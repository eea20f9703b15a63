"""
Prometheus metrics for password-reset mail delivery.
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Gauge

from resetmail.schemas.mail import DispatchOutcome, TransportStatus


class MailMetrics:
    """Prometheus metrics collector for reset mail dispatch."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()

        self.dispatch_total = Counter(
            'resetmail_dispatch_total',
            'Password reset dispatches by outcome',
            ['outcome'],
            registry=self.registry
        )

        self.transport_status = Gauge(
            'resetmail_transport_status',
            'Current mail transport status (1 for the active status)',
            ['status'],
            registry=self.registry
        )

    def record_dispatch(self, outcome: DispatchOutcome) -> None:
        self.dispatch_total.labels(outcome=outcome.value).inc()

    def set_transport_status(self, status: TransportStatus) -> None:
        for candidate in TransportStatus:
            self.transport_status.labels(status=candidate.value).set(
                1 if candidate == status else 0
            )

    def dispatch_count(self, outcome: DispatchOutcome) -> float:
        value = self.registry.get_sample_value(
            'resetmail_dispatch_total', {'outcome': outcome.value}
        )
        return value or 0.0


# Global metrics instance
metrics = MailMetrics()
