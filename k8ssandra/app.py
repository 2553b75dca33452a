import kopf
import logging
import k8ssandra.handlers.k8ssandracluster as k8ssandracluster
from k8ssandra.types.settings import Settings
from k8ssandra.resources import K8ssandraCluster
from k8ssandra.remote import ClientCache
from k8ssandra.sensors import init_metrics_server, SensorDelegate, PrometheusMonitor
from kubernetes_asyncio import config
from kubernetes_asyncio.client.api_client import ApiClient


@kopf.on.startup()
async def setup(
    settings: kopf.OperatorSettings, memo: kopf.Memo, logger: logging.Logger, **kwargs
):
    # Load Kubernetes config - try in-cluster first (for production), then local kubeconfig (for dev)
    try:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes configuration")
    except config.ConfigException:
        logger.info("In-cluster config not found, trying local kubeconfig")
        try:
            await config.load_kube_config()
            logger.info("Loaded local Kubernetes configuration")
        except config.ConfigException as e:
            logger.error(f"Failed to load Kubernetes configuration: {e}")
            raise

    memo.conf = Settings()
    K8ssandraCluster.conf = memo.conf

    # Shared client for the local cluster, remote clients are built per context
    shared_client = ApiClient()
    K8ssandraCluster.shared_api_client = shared_client
    K8ssandraCluster.client_cache = ClientCache(shared_client, conf=memo.conf)
    logger.info("Shared Kubernetes API client and remote client cache initialized")

    sensor_delegate = SensorDelegate()
    sensor_delegate.add(PrometheusMonitor())
    memo.sensor = sensor_delegate
    K8ssandraCluster.sensor = sensor_delegate
    logger.info("Sensor infrastructure initialized with PrometheusMonitor")

    try:
        init_metrics_server()
    except Exception as e:
        logger.error(f"Failed to start metrics server: {e}")
        logger.warning("Continuing without metrics server")

    # Limit the number of concurrent workers to prevent flooding the API
    settings.batching.worker_limit = 4

    settings.posting.enabled = True
    settings.posting.level = logging.WARNING


@kopf.on.cleanup()
async def cleanup(logger: logging.Logger, **kwargs):
    """Cleanup handler for operator shutdown."""
    logger.info("Shutting down operator...")

    if K8ssandraCluster.client_cache is not None:
        await K8ssandraCluster.client_cache.close()
        logger.info("Remote clients closed")

    if K8ssandraCluster.shared_api_client is not None:
        await K8ssandraCluster.shared_api_client.close()
        logger.info("Shared API client closed")

    logger.info("Operator shutdown complete")


__all__ = [
    "k8ssandracluster",
]
