"""K8ssandra Operator Sensor Framework.

Hook-based instrumentation of reconciliation events.

- OperatorSensor: Base class defining lifecycle hooks
- SensorDelegate: Fan-out of events to multiple sensor backends
- PrometheusMonitor: Prometheus metrics exporter
"""

from k8ssandra.sensors.base import OperatorSensor
from k8ssandra.sensors.delegate import SensorDelegate
from k8ssandra.sensors.prometheus import PrometheusMonitor
from k8ssandra.sensors.server import init_metrics_server

__all__ = [
    'OperatorSensor',
    'SensorDelegate',
    'PrometheusMonitor',
    'init_metrics_server',
]
