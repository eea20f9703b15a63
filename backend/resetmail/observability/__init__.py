"""Observability helpers."""

from resetmail.observability.metrics import MailMetrics, metrics

__all__ = ["MailMetrics", "metrics"]
