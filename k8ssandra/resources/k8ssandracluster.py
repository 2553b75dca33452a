import logging
import time
from contextlib import contextmanager
from logging import Logger
from typing import Dict, List, Optional, Tuple
from kubernetes_asyncio.client import CustomObjectsApi
from kubernetes_asyncio.client.api_client import ApiClient
from k8ssandra.common.models.key import ObjectKey
from k8ssandra.common.models.labels import Labels
from k8ssandra.common.models.result import ReconcileResult
from k8ssandra.remote import ClientCache, RemoteClient
from k8ssandra.resources.base import BaseResource
from k8ssandra.resources.cassandradatacenter import CassandraDatacenter
from k8ssandra.sensors import OperatorSensor
from k8ssandra.types.models.datacenter_template import CassandraDatacenterTemplate
from k8ssandra.types.models.k8ssandracluster_spec import K8ssandraClusterSpec
from k8ssandra.types.settings import Settings
from k8ssandra.utils.errors import DatacenterError, K8ssandraError
from k8ssandra.utils.helpers import now, upsert_condition


class K8ssandraCluster(BaseResource):
    """K8ssandraCluster kubernetes resource.

    Drives the datacenters of one cluster, each possibly hosted by a
    different kubernetes cluster, towards their templates. Datacenters are
    processed in template order; seeds discovered from a ready datacenter
    flow into the datacenters after it and are propagated back into the
    ones before it.
    """

    logger: Logger
    conf: Settings
    client_cache: ClientCache = None
    sensor: OperatorSensor = None
    shared_api_client: ApiClient = None

    KIND = "K8ssandraCluster"
    GROUP_NAME = "k8ssandra.io"
    GROUP_VERSION = "v1alpha1"
    PLURAL_NAME = "k8ssandraclusters"

    PHASE_CREATED = "Created"
    PHASE_NOT_READY = "NotReady"
    PHASE_READY = "Ready"

    name: str
    spec: K8ssandraClusterSpec

    # phase of each datacenter observed during the last pass
    datacenter_phases: Dict[str, str]
    seeds: List[str]

    _custom_objects_api: CustomObjectsApi = None

    def __init__(self, name: str, namespace: str):
        super().__init__(cluster=name, namespace=namespace)
        self.name = name
        self.datacenter_phases = {}
        self.seeds = []

    @classmethod
    def from_spec(
        cls,
        name: str,
        namespace: str,
        spec: K8ssandraClusterSpec,
        logger: Logger = None,
        conf: Settings = None,
        client_cache: ClientCache = None,
        sensor: OperatorSensor = None,
    ) -> "K8ssandraCluster":
        cluster = K8ssandraCluster(name, namespace)
        cluster.spec = spec
        cluster.logger = logger or logging.getLogger(__name__)
        cluster.conf = conf or getattr(cls, "conf", None) or Settings()
        if client_cache is not None:
            cluster.client_cache = client_cache
        if sensor is not None:
            cluster.sensor = sensor
        return cluster

    @classmethod
    def default(cls) -> "K8ssandraCluster":
        """Create a default K8ssandraCluster resource."""
        return K8ssandraCluster(name="default", namespace=None)

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(self.namespace, self.name)

    @property
    def cluster_name(self) -> Optional[str]:
        return self.spec.cassandra.cluster if self.spec.cassandra else None

    @property
    def templates(self) -> List[CassandraDatacenterTemplate]:
        if self.spec.cassandra is None:
            return []
        return list(self.spec.cassandra.datacenters or [])

    @property
    def labels(self) -> Labels:
        return Labels.generate_default_labels(
            self.name, self.namespace, self.K8SSANDRA_OPERATOR_NAME
        )

    @property
    def custom_objects_api(self) -> CustomObjectsApi:
        if self._custom_objects_api is None:
            api_client = self.shared_api_client or ApiClient()
            self._custom_objects_api = CustomObjectsApi(api_client)
        return self._custom_objects_api

    async def fetch(self, name: str, namespace: str) -> Optional[Dict]:
        """Fetch actual K8ssandraCluster in kubernetes."""
        return await self.get_custom_object(
            self.custom_objects_api,
            namespace=namespace,
            group=self.GROUP_NAME,
            version=self.GROUP_VERSION,
            plural=self.PLURAL_NAME,
            name=name,
        )

    async def reconcile(self) -> ReconcileResult:
        """Run one reconciliation pass.

        Hard errors are returned as a failed result, never retried here.
        """
        sensor_state = None
        if self.sensor:
            sensor_state = self.sensor.on_reconcile_start(self.name, self.namespace)
        try:
            result = await self.reconcile_datacenters()
        except Exception as ex:
            result = ReconcileResult.failed(ex)
        if result.is_done:
            self.logger.info(f"Finished reconciling {self.KIND} {self.key}")
        if self.sensor:
            self.sensor.on_reconcile_complete(self.name, self.namespace, sensor_state, result)
        return result

    async def reconcile_datacenters(self) -> ReconcileResult:
        self.seeds = []
        self.datacenter_phases = {}
        for idx, template in enumerate(self.templates):
            datacenter = CassandraDatacenter.from_template(
                self.namespace,
                self.cluster_name,
                template,
                additional_seeds=self.seeds,
                labels=self.labels,
            )
            remote_client = await self.resolve_client(template)
            result = await self.reconcile_datacenter(idx, datacenter, remote_client)
            if result is not None:
                return result
        return ReconcileResult.done()

    async def reconcile_datacenter(
        self, idx: int, datacenter: CassandraDatacenter, remote_client: RemoteClient
    ) -> Optional[ReconcileResult]:
        """Converge one datacenter. Returns a result only if the pass must stop here."""
        key = datacenter.key

        with self.datacenter_operation("get", key):
            actual = await remote_client.get_datacenter(key.namespace, key.name)

        if actual is None:
            self.logger.info(f"Creating datacenter {key}")
            with self.datacenter_operation("create", key):
                await remote_client.create_datacenter(datacenter.datacenter)
            self.datacenter_phases[key.name] = self.PHASE_CREATED
            return ReconcileResult.retry_after(
                self.conf.create_requeue_delay_seconds,
                reason=f"Datacenter {key} created",
            )

        if datacenter.needs_update(actual):
            self.logger.info(f"Updating datacenter {key}")
            with self.datacenter_operation("update", key):
                actual = await remote_client.update_datacenter(
                    datacenter.prepare_update(actual)
                )

        if not CassandraDatacenter.is_ready(actual):
            self.logger.info(f"Waiting for datacenter {key} to become ready")
            self.datacenter_phases[key.name] = self.PHASE_NOT_READY
            return ReconcileResult.retry_after(
                self.conf.ready_requeue_delay_seconds,
                reason=f"Datacenter {key} is not ready",
            )

        self.logger.info(f"The datacenter {key} is ready")
        self.datacenter_phases[key.name] = self.PHASE_READY

        with self.datacenter_operation("list seed pods", key):
            endpoints = await CassandraDatacenter.resolve_seed_endpoints(
                actual, remote_client, limit=self.conf.max_seed_endpoints
            )
        if self.sensor:
            self.sensor.on_seeds_discovered(self.name, self.namespace, key.name, len(endpoints))

        self.seeds = self.seeds + endpoints
        await self.update_additional_seeds(self.seeds, 0, idx)
        return None

    async def resolve_client(self, template: CassandraDatacenterTemplate) -> RemoteClient:
        try:
            return await self.client_cache.get_client(
                self.key, self.spec.k8s_contexts_secret, template.k8s_context
            )
        except Exception as ex:
            self.logger.error(
                f"Failed to get remote client for datacenter {template.name} "
                f"(context `{template.k8s_context}`): {ex}"
            )
            raise

    async def get_datacenter_for_template(
        self, idx: int
    ) -> Tuple[ObjectKey, Dict, RemoteClient]:
        template = self.templates[idx]
        remote_client = await self.resolve_client(template)
        key = CassandraDatacenter.key_for(template, self.namespace)
        with self.datacenter_operation("get", key):
            actual = await remote_client.get_datacenter(key.namespace, key.name)
            if actual is None:
                raise K8ssandraError(f"CassandraDatacenter {key} not found")
        return key, actual, remote_client

    async def update_additional_seeds(self, seeds: List[str], start: int, end: int):
        """Append seeds to the datacenters at template positions [start, end)."""
        for idx in range(start, end):
            key, actual, remote_client = await self.get_datacenter_for_template(idx)
            await self.update_additional_seeds_for_datacenter(
                key, actual, seeds, remote_client
            )

    async def update_additional_seeds_for_datacenter(
        self, key: ObjectKey, actual: Dict, seeds: List[str], remote_client: RemoteClient
    ):
        patch = CassandraDatacenter.prepare_additional_seeds_patch(
            actual, seeds, deduplicate=self.conf.deduplicate_seeds
        )
        if patch is None:
            return
        self.logger.info(f"Updating additional seeds of datacenter {key}")
        with self.datacenter_operation("patch seeds", key):
            await remote_client.patch_datacenter(
                key.namespace,
                key.name,
                patch,
                resource_version=actual["metadata"].get("resourceVersion"),
            )

    @contextmanager
    def datacenter_operation(self, operation: str, key: ObjectKey):
        """Wrap failures of a datacenter operation with the datacenter and operation."""
        start = time.monotonic()
        success = True
        try:
            yield
        except DatacenterError:
            success = False
            raise
        except Exception as ex:
            success = False
            self.logger.error(f"Datacenter {key}: {operation} failed: {ex}")
            raise DatacenterError(operation, key.namespace, key.name, ex) from ex
        except BaseException:
            # cancellation
            success = False
            raise
        finally:
            if self.sensor:
                self.sensor.on_datacenter_operation(
                    self.name,
                    self.namespace,
                    key.name,
                    operation.replace(" ", "_"),
                    success,
                    time.monotonic() - start,
                )

    def prepare_status(self, result: ReconcileResult, status: Dict, generation: int) -> Dict:
        """Build the status patch reflecting the outcome of a pass."""
        _status = status or {}
        names = {template.name for template in self.templates}
        # status is merge-patched, so removed datacenters are nulled
        datacenters = {
            name: entry if name in names else None
            for name, entry in (_status.get("datacenters") or {}).items()
        }
        for name, phase in self.datacenter_phases.items():
            datacenters[name] = {"phase": phase}

        if result.is_done:
            condition = {
                "type": "Ready",
                "status": "True",
                "reason": "Reconciled",
                "message": "All datacenters are ready",
            }
        elif result.is_retry:
            condition = {
                "type": "Ready",
                "status": "False",
                "reason": "Progressing",
                "message": result.reason or "Waiting for datacenters",
            }
        else:
            condition = {
                "type": "Ready",
                "status": "False",
                "reason": "Error",
                "message": result.reason or "Reconcile failed; see events/logs",
            }
        condition["observedGeneration"] = generation
        return {
            "datacenters": datacenters,
            "conditions": upsert_condition(_status.get("conditions"), condition),
            "observedGeneration": generation,
            "lastReconcileTime": now(),
        }
