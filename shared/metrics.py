"""
Shared metrics configuration for RuleForge.
"""

from prometheus_client import Counter, Histogram, Info, CollectorRegistry
from typing import Dict, Any, Optional
import time
from contextlib import contextmanager


class MetricsCollector:
    """Centralized metrics collector for the rule engine."""

    def __init__(self, service_name: str = "ruleforge", registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        # Each collector owns a registry so several engines can live in one process
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up rule engine metrics."""

        self._metrics["service_info"] = Info(
            "service_info",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        self._metrics["ruleset_runs_total"] = Counter(
            "ruleset_runs_total",
            "Total ruleset runs by final outcome",
            ["ruleset", "outcome"],
            registry=self.registry
        )

        self._metrics["rule_evaluations_total"] = Counter(
            "rule_evaluations_total",
            "Total rule condition evaluations by outcome kind",
            ["ruleset", "kind"],
            registry=self.registry
        )

        self._metrics["rule_cycles_total"] = Counter(
            "rule_cycles_total",
            "Total redirect cycles detected",
            ["ruleset"],
            registry=self.registry
        )

        self._metrics["rule_errors_total"] = Counter(
            "rule_errors_total",
            "Total ERROR outcomes",
            ["ruleset"],
            registry=self.registry
        )

        self._metrics["actions_fired_total"] = Counter(
            "actions_fired_total",
            "Total actions fired",
            ["ruleset", "rule"],
            registry=self.registry
        )

        self._metrics["ruleset_run_duration_seconds"] = Histogram(
            "ruleset_run_duration_seconds",
            "Ruleset run duration in seconds",
            ["ruleset"],
            registry=self.registry
        )

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def get_sample_value(self, name: str, **labels) -> Optional[float]:
        """Read the current value of a sample from this collector's registry."""
        return self.registry.get_sample_value(name, labels)

    def record_run(self, ruleset: str, outcome: str):
        """Record a completed ruleset run."""
        self._metrics["ruleset_runs_total"].labels(ruleset=ruleset, outcome=outcome).inc()

    def record_evaluation(self, ruleset: str, kind: str):
        """Record one rule evaluation."""
        self._metrics["rule_evaluations_total"].labels(ruleset=ruleset, kind=kind).inc()

    def record_cycle(self, ruleset: str):
        """Record a detected redirect cycle."""
        self._metrics["rule_cycles_total"].labels(ruleset=ruleset).inc()

    def record_error(self, ruleset: str):
        """Record an ERROR outcome."""
        self._metrics["rule_errors_total"].labels(ruleset=ruleset).inc()

    def record_action(self, ruleset: str, rule: str):
        """Record a fired action."""
        self._metrics["actions_fired_total"].labels(ruleset=ruleset, rule=rule).inc()

    @contextmanager
    def time_operation(self, operation_name: str, **labels):
        """Context manager to time an operation."""
        start_time = time.time()
        try:
            yield
        finally:
            duration = time.time() - start_time
            if operation_name in self._metrics:
                self._metrics[operation_name].labels(**labels).observe(duration)


def get_metrics_collector(service_name: str = "ruleforge", registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for the engine."""
    return MetricsCollector(service_name, registry)
