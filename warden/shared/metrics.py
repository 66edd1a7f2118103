"""
Shared metrics configuration for the Warden authorization engine.
"""

import threading
from typing import Dict, Any, Optional

from prometheus_client import Counter, Histogram, start_http_server, CollectorRegistry


class MetricsCollector:
    """Centralized metrics collector for decision evaluation.

    Metrics are registered with ``registry`` when one is given; with no
    registry they are standalone and never exported.
    """
    
    def __init__(self, namespace: str = "warden", registry: Optional[CollectorRegistry] = None):
        self.namespace = namespace
        self.registry = registry
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()
    
    def _setup_metrics(self):
        """Set up decision metrics."""
        self._metrics["decisions_total"] = Counter(
            f"{self.namespace}_decisions_total",
            "Total authorization decisions",
            ["object_type", "action", "decision"],
            registry=self.registry
        )
        
        self._metrics["decision_duration_seconds"] = Histogram(
            f"{self.namespace}_decision_duration_seconds",
            "Authorization decision duration in seconds",
            registry=self.registry
        )
        
        self._metrics["unknown_actions_total"] = Counter(
            f"{self.namespace}_unknown_actions_total",
            "Total decisions requested for actions without a rule",
            ["object_type", "action"],
            registry=self.registry
        )
        
        self._metrics["errors_total"] = Counter(
            f"{self.namespace}_errors_total",
            "Total errors raised while deciding",
            ["error_type"],
            registry=self.registry
        )
    
    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)
    
    def start_metrics_server(self, port: int = 9090):
        """Start the Prometheus metrics server."""
        if self.registry is not None:
            start_http_server(port, registry=self.registry)
        else:
            start_http_server(port)
    
    def record_decision(self, object_type: str, action: str, allowed: bool, duration: float):
        """Record a completed decision."""
        self._metrics["decisions_total"].labels(
            object_type=object_type,
            action=action,
            decision="allow" if allowed else "deny"
        ).inc()
        
        self._metrics["decision_duration_seconds"].observe(duration)
    
    def record_unknown_action(self, object_type: str, action: str):
        """Record a lookup miss."""
        self._metrics["unknown_actions_total"].labels(object_type=object_type, action=action).inc()
    
    def record_error(self, error_type: str):
        """Record error metrics."""
        self._metrics["errors_total"].labels(error_type=error_type).inc()


def get_metrics_collector(namespace: str = "warden", registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector."""
    return MetricsCollector(namespace, registry)


# port -> collector whose registry is served on that port
_exported: Dict[int, MetricsCollector] = {}
_exported_lock = threading.Lock()


def serve_metrics(port: int, namespace: str = "warden") -> MetricsCollector:
    """Get the collector exported on ``port``, starting its server on first use."""
    with _exported_lock:
        collector = _exported.get(port)
        if collector is None:
            collector = MetricsCollector(namespace, CollectorRegistry())
            collector.start_metrics_server(port)
            _exported[port] = collector
        return collector

