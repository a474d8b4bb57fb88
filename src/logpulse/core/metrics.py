"""
Prometheus metrics collection.

In-memory counters and gauges; Prometheus handles storage. Each collector
owns its registry so several app instances (tests) can coexist.
"""

from typing import Optional

import structlog
from prometheus_client import CollectorRegistry, Counter, Gauge, Info

from ..models.validation import ValidationResult
from .pv_filter import PVFilterState

logger = structlog.get_logger(__name__)


class MetricsCollector:
    """Centralized metrics for configuration validation and the PV filter."""

    def __init__(self, registry: Optional[CollectorRegistry] = None) -> None:
        self.registry = registry or CollectorRegistry()

        # Service info
        self.service_info = Info(
            "logpulse_service",
            "LogPulse service information",
            registry=self.registry,
        )
        self.service_info.info({
            "version": "0.1.0",
            "service": "logpulse",
        })

        # Validation metrics
        self.config_validations_total = Counter(
            "logpulse_config_validations_total",
            "Configuration validation passes",
            ["outcome"],
            registry=self.registry,
        )

        self.config_validation_findings_total = Counter(
            "logpulse_config_validation_findings_total",
            "Errors and warnings reported by configuration validation",
            ["severity"],
            registry=self.registry,
        )

        # PV filter metrics
        self.pv_filter_reloads_total = Counter(
            "logpulse_pv_filter_reloads_total",
            "PV filter initializations",
            ["outcome"],
            registry=self.registry,
        )

        self.pv_filter_rules = Gauge(
            "logpulse_pv_filter_rules",
            "Rules in the current PV filter snapshot",
            ["kind"],
            registry=self.registry,
        )

        self.pv_decisions_total = Counter(
            "logpulse_pv_decisions_total",
            "Records classified through the API",
            ["decision"],
            registry=self.registry,
        )

        logger.info("Metrics collector initialized")

    def record_validation(self, result: ValidationResult) -> None:
        outcome = "valid" if result.is_valid else "invalid"
        self.config_validations_total.labels(outcome=outcome).inc()
        if result.errors:
            self.config_validation_findings_total.labels(severity="error").inc(len(result.errors))
        if result.warnings:
            self.config_validation_findings_total.labels(severity="warning").inc(len(result.warnings))

    def record_filter_reload(self, state: Optional[PVFilterState]) -> None:
        """Record an initialization; None marks a failed one."""
        if state is None:
            self.pv_filter_reloads_total.labels(outcome="failure").inc()
            return

        self.pv_filter_reloads_total.labels(outcome="success").inc()
        self.pv_filter_rules.labels(kind="status_codes").set(len(state.status_codes))
        self.pv_filter_rules.labels(kind="exclude_patterns").set(len(state.compiled_patterns))
        self.pv_filter_rules.labels(kind="exclude_ips").set(len(state.exclude_ips))

    def record_decisions(self, accepted: int, rejected: int) -> None:
        if accepted:
            self.pv_decisions_total.labels(decision="accepted").inc(accepted)
        if rejected:
            self.pv_decisions_total.labels(decision="rejected").inc(rejected)
