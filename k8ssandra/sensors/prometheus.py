"""Prometheus monitoring backend for the K8ssandra operator.

PrometheusMonitor turns reconciliation events into Prometheus metrics:

1. Reconciliation health - pass duration and outcome (done/retry/error)
2. Remote datacenter operations - count and latency per operation
3. Seed discovery - number of seeds found per ready datacenter
"""

from typing import Dict, Optional, Any
import time
import logging

from prometheus_client import Counter, Histogram, Gauge, REGISTRY, CollectorRegistry

from k8ssandra.sensors.base import OperatorSensor

logger = logging.getLogger(__name__)


class PrometheusMonitor(OperatorSensor):
    """Prometheus metrics monitor for the K8ssandra operator.

    Example:
        monitor = PrometheusMonitor()
        state = monitor.on_reconcile_start("demo", "k8ssandra")
        monitor.on_reconcile_complete("demo", "k8ssandra", state, result)
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY):
        super().__init__()

        self.reconcile_duration = Histogram(
            'k8ssandra_reconcile_duration_seconds',
            'Time spent in a reconciliation pass',
            labelnames=['cluster_name', 'namespace', 'result'],
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0],
            registry=registry,
        )

        self.reconcile_total = Counter(
            'k8ssandra_reconcile_total',
            'Total number of reconciliation passes',
            labelnames=['cluster_name', 'namespace', 'result'],
            registry=registry,
        )

        self.reconcile_errors = Counter(
            'k8ssandra_reconcile_errors_total',
            'Total number of reconciliation passes aborted by an error',
            labelnames=['cluster_name', 'namespace', 'error_type'],
            registry=registry,
        )

        self.datacenter_operation_duration = Histogram(
            'k8ssandra_datacenter_operation_duration_seconds',
            'Time spent in calls against remote datacenters',
            labelnames=['cluster_name', 'namespace', 'datacenter', 'operation', 'result'],
            buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
            registry=registry,
        )

        self.datacenter_operation_total = Counter(
            'k8ssandra_datacenter_operation_total',
            'Total number of calls against remote datacenters',
            labelnames=['cluster_name', 'namespace', 'datacenter', 'operation', 'result'],
            registry=registry,
        )

        self.seed_endpoints = Gauge(
            'k8ssandra_seed_endpoints',
            'Seed endpoints discovered in the last pass',
            labelnames=['cluster_name', 'namespace', 'datacenter'],
            registry=registry,
        )

        self.status_updates = Counter(
            'k8ssandra_status_updates_total',
            'Total number of status updates',
            labelnames=['cluster_name', 'namespace', 'update_field'],
            registry=registry,
        )

        logger.info("PrometheusMonitor initialized with all metrics")

    def on_reconcile_start(
        self, cluster_name: str, namespace: str
    ) -> Optional[Dict[str, Any]]:
        return {'start_time': time.time()}

    def on_reconcile_complete(
        self,
        cluster_name: str,
        namespace: str,
        state: Optional[Dict[str, Any]],
        result: Any,
    ) -> None:
        outcome = result.kind if result is not None else 'unknown'
        if state and 'start_time' in state:
            duration = time.time() - state['start_time']
            self.reconcile_duration.labels(
                cluster_name=cluster_name, namespace=namespace, result=outcome
            ).observe(duration)

        self.reconcile_total.labels(
            cluster_name=cluster_name, namespace=namespace, result=outcome
        ).inc()

        if result is not None and result.is_error:
            self.reconcile_errors.labels(
                cluster_name=cluster_name,
                namespace=namespace,
                error_type=type(result.error).__name__,
            ).inc()

    def on_datacenter_operation(
        self,
        cluster_name: str,
        namespace: str,
        datacenter: str,
        operation: str,
        success: bool,
        duration: float,
    ) -> None:
        outcome = 'success' if success else 'failure'
        labels = dict(
            cluster_name=cluster_name,
            namespace=namespace,
            datacenter=datacenter,
            operation=operation,
            result=outcome,
        )
        self.datacenter_operation_duration.labels(**labels).observe(duration)
        self.datacenter_operation_total.labels(**labels).inc()

    def on_seeds_discovered(
        self, cluster_name: str, namespace: str, datacenter: str, count: int
    ) -> None:
        self.seed_endpoints.labels(
            cluster_name=cluster_name, namespace=namespace, datacenter=datacenter
        ).set(count)

    def on_status_update(
        self, cluster_name: str, namespace: str, update_fields: list
    ) -> None:
        for field in update_fields:
            self.status_updates.labels(
                cluster_name=cluster_name, namespace=namespace, update_field=field
            ).inc()
