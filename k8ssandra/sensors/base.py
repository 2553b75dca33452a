"""Base sensor class for operator monitoring.

OperatorSensor provides lifecycle hooks for reconciliation events. All hooks
are no-ops by default, so subclasses override only the events they care about.

- Hooks come in pairs where an operation has a duration: on_X_start() and
  on_X_complete()
- Start hooks return an optional state dict passed to the complete hook
"""

from typing import Dict, Optional, Any
import logging

logger = logging.getLogger(__name__)


class OperatorSensor:
    """Base sensor class for K8ssandra operator monitoring."""

    def on_reconcile_start(
        self,
        cluster_name: str,
        namespace: str,
    ) -> Optional[Dict[str, Any]]:
        """Called when a reconciliation pass begins.

        Args:
            cluster_name: K8ssandraCluster resource name
            namespace: Kubernetes namespace

        Returns:
            Optional state dict passed to on_reconcile_complete
        """
        pass

    def on_reconcile_complete(
        self,
        cluster_name: str,
        namespace: str,
        state: Optional[Dict[str, Any]],
        result: Any,
    ) -> None:
        """Called when a reconciliation pass completes.

        Args:
            cluster_name: K8ssandraCluster resource name
            namespace: Kubernetes namespace
            state: State dict returned from on_reconcile_start
            result: ReconcileResult of the pass
        """
        pass

    def on_datacenter_operation(
        self,
        cluster_name: str,
        namespace: str,
        datacenter: str,
        operation: str,
        success: bool,
        duration: float,
    ) -> None:
        """Called after every call made against a remote datacenter."""
        pass

    def on_seeds_discovered(
        self,
        cluster_name: str,
        namespace: str,
        datacenter: str,
        count: int,
    ) -> None:
        """Called when seed endpoints were resolved for a ready datacenter."""
        pass

    def on_status_update(
        self,
        cluster_name: str,
        namespace: str,
        update_fields: list,
    ) -> None:
        pass
