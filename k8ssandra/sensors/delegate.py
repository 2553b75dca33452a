"""Sensor delegation for fan-out pattern.

SensorDelegate routes sensor events to multiple monitoring backends. Each
backend receives the same events and keeps its own state.
"""

from typing import Set, Dict, Optional, Any
import logging

from k8ssandra.sensors.base import OperatorSensor

logger = logging.getLogger(__name__)


class SensorDelegate(OperatorSensor):
    """Delegate sensor that fans out events to multiple backends.

    Example:
        delegate = SensorDelegate()
        delegate.add(PrometheusMonitor())

        state = delegate.on_reconcile_start("demo", "k8ssandra")
        delegate.on_reconcile_complete("demo", "k8ssandra", state, result)
    """

    def __init__(self) -> None:
        self._sensors: Set[OperatorSensor] = set()

    def add(self, sensor: OperatorSensor) -> None:
        logger.info(f"Adding sensor: {sensor.__class__.__name__}")
        self._sensors.add(sensor)

    def remove(self, sensor: OperatorSensor) -> None:
        logger.info(f"Removing sensor: {sensor.__class__.__name__}")
        self._sensors.discard(sensor)

    def on_reconcile_start(
        self, cluster_name: str, namespace: str
    ) -> Optional[Dict[OperatorSensor, Any]]:
        """Delegate reconcile_start to all sensors.

        Returns:
            Dict mapping each sensor to its own state
        """
        states = {}
        for sensor in self._sensors:
            try:
                states[sensor] = sensor.on_reconcile_start(cluster_name, namespace)
            except Exception as e:
                logger.error(f"Sensor {sensor.__class__.__name__} failed on_reconcile_start: {e}")
        return states

    def on_reconcile_complete(
        self,
        cluster_name: str,
        namespace: str,
        state: Optional[Dict[OperatorSensor, Any]],
        result: Any,
    ) -> None:
        states = state or {}
        for sensor in self._sensors:
            try:
                sensor.on_reconcile_complete(
                    cluster_name, namespace, states.get(sensor), result
                )
            except Exception as e:
                logger.error(f"Sensor {sensor.__class__.__name__} failed on_reconcile_complete: {e}")

    def on_datacenter_operation(
        self,
        cluster_name: str,
        namespace: str,
        datacenter: str,
        operation: str,
        success: bool,
        duration: float,
    ) -> None:
        for sensor in self._sensors:
            try:
                sensor.on_datacenter_operation(
                    cluster_name, namespace, datacenter, operation, success, duration
                )
            except Exception as e:
                logger.error(f"Sensor {sensor.__class__.__name__} failed on_datacenter_operation: {e}")

    def on_seeds_discovered(
        self, cluster_name: str, namespace: str, datacenter: str, count: int
    ) -> None:
        for sensor in self._sensors:
            try:
                sensor.on_seeds_discovered(cluster_name, namespace, datacenter, count)
            except Exception as e:
                logger.error(f"Sensor {sensor.__class__.__name__} failed on_seeds_discovered: {e}")

    def on_status_update(
        self, cluster_name: str, namespace: str, update_fields: list
    ) -> None:
        for sensor in self._sensors:
            try:
                sensor.on_status_update(cluster_name, namespace, update_fields)
            except Exception as e:
                logger.error(f"Sensor {sensor.__class__.__name__} failed on_status_update: {e}")
