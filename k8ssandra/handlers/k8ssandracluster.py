import asyncio
import kopf
from collections import defaultdict
from logging import Logger
from typing import Dict, Optional, Tuple
from marshmallow import ValidationError
from k8ssandra.common.models.result import ReconcileResult
from k8ssandra.resources import K8ssandraCluster
from k8ssandra.types.models import K8ssandraClusterSpec
from k8ssandra.types.schemas import K8ssandraClusterSpecSchema
from k8ssandra.types.settings import Settings

KIND = "K8ssandraCluster"

# Serializes passes for the same cluster across handlers and timers
reconciliation_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)


def load_spec(spec) -> K8ssandraClusterSpec:
    try:
        return K8ssandraClusterSpecSchema().load(dict(spec or {}))
    except ValidationError as ex:
        raise kopf.PermanentError(f"Invalid {KIND} spec: {ex.messages}")


async def reconcile_cluster(
    name: str, namespace: str, logger: Logger
) -> Tuple[Optional[K8ssandraCluster], ReconcileResult]:
    """Fetch the cluster resource and run one reconciliation pass.

    A cluster that no longer exists has nothing left to reconcile.
    """
    body = await K8ssandraCluster.default().fetch(name, namespace)
    if body is None:
        logger.debug(f"{KIND} {namespace}/{name} not found, nothing to do.")
        return None, ReconcileResult.done()
    spec_model = load_spec(body.get("spec"))
    cluster = K8ssandraCluster.from_spec(name, namespace, spec_model, logger=logger)
    return cluster, await cluster.reconcile()


def apply_result(
    cluster: K8ssandraCluster,
    result: ReconcileResult,
    meta,
    status,
    patch,
    logger: Logger,
):
    """Record the pass outcome on the resource status and signal kopf.

    A retry is raised as a TemporaryError with the pass delay; a hard error
    is raised as-is and kopf applies its own backoff.
    """
    status_update = cluster.prepare_status(result, status, meta.get("generation", 0))
    patch.status.update(status_update)
    if cluster.sensor:
        cluster.sensor.on_status_update(
            cluster.name, cluster.namespace, list(status_update.keys())
        )

    if result.is_retry:
        raise kopf.TemporaryError(result.reason, delay=result.requeue_after)
    if result.is_error:
        logger.error(f"Reconciliation of {KIND} {cluster.key} failed: {result.error}")
        raise result.error


async def run_reconciliation(name, namespace, meta, status, patch, logger: Logger):
    async with reconciliation_locks[f"{namespace}/{name}"]:
        cluster, result = await reconcile_cluster(name, namespace, logger)
    if cluster is not None:
        apply_result(cluster, result, meta, status, patch, logger)


@kopf.on.resume(kind=KIND)
@kopf.on.create(kind=KIND)
@kopf.on.update(kind=KIND, field="spec")
async def reconciliation(
    name, namespace, meta, status, patch, logger: Logger, **kwargs
):
    """Reconcile K8ssandraCluster resources."""
    await run_reconciliation(name, namespace, meta, status, patch, logger)


@kopf.timer(
    KIND,
    initial_delay=5.0,
    interval=Settings.resync_interval_seconds,
    idle=Settings.resync_interval_seconds,
)
async def periodic_reconciliation(
    name, namespace, meta, status, patch, logger: Logger, **kwargs
):
    """Full sync, picks up seeds of datacenters that became ready later."""
    await run_reconciliation(name, namespace, meta, status, patch, logger)


@kopf.on.delete(kind=KIND)
async def on_delete(name, namespace, **kwargs):
    """Remote datacenters are left in place; only local state is dropped."""
    reconciliation_locks.pop(f"{namespace}/{name}", None)
