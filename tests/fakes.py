"""In-memory stand-ins for remote clusters used by the unit tests."""

import copy
from typing import Callable, Dict, List, Optional, Tuple
from kubernetes_asyncio.client import V1Pod, V1PodStatus, V1ObjectMeta
from k8ssandra.common.models.labels import Labels
from k8ssandra.resources import K8ssandraCluster
from k8ssandra.sensors import OperatorSensor
from k8ssandra.types.schemas import K8ssandraClusterSpecSchema
from k8ssandra.types.settings import Settings
from k8ssandra.utils.errors import ClientResolutionError, ConflictError

NAMESPACE = "k8ssandra"
CLUSTER = "demo"

Key = Tuple[str, str]


class FakeRemoteClient:
    """In-memory CassandraDatacenter store for one kubernetes cluster."""

    def __init__(self, context: str = None):
        self.context = context
        self.datacenters: Dict[Key, Dict] = {}
        self.pods: Dict[Key, List[str]] = {}
        self.calls: List[Tuple[str, Key]] = []
        self.patches: List[Tuple[Key, Dict]] = []
        self.errors: Dict[str, Exception] = {}
        self.after_get: Optional[Callable[[Key], None]] = None
        self._version = 0

    def _bump(self, datacenter: Dict):
        self._version += 1
        datacenter["metadata"]["resourceVersion"] = str(self._version)

    def _fail(self, operation: str):
        if operation in self.errors:
            raise self.errors[operation]

    async def get_datacenter(self, namespace: str, name: str) -> Optional[Dict]:
        key = (namespace, name)
        self.calls.append(("get", key))
        self._fail("get")
        datacenter = self.datacenters.get(key)
        result = copy.deepcopy(datacenter) if datacenter else None
        if self.after_get:
            self.after_get(key)
        return result

    async def create_datacenter(self, datacenter: Dict) -> Dict:
        key = (datacenter["metadata"]["namespace"], datacenter["metadata"]["name"])
        self.calls.append(("create", key))
        self._fail("create")
        stored = copy.deepcopy(datacenter)
        self._bump(stored)
        self.datacenters[key] = stored
        return copy.deepcopy(stored)

    async def update_datacenter(self, datacenter: Dict) -> Dict:
        key = (datacenter["metadata"]["namespace"], datacenter["metadata"]["name"])
        self.calls.append(("update", key))
        self._fail("update")
        current = self.datacenters[key]
        if datacenter["metadata"].get("resourceVersion") != current["metadata"]["resourceVersion"]:
            raise ConflictError(f"{key} was modified")
        stored = copy.deepcopy(datacenter)
        # status is owned by the status subresource
        stored["status"] = copy.deepcopy(current.get("status"))
        self._bump(stored)
        self.datacenters[key] = stored
        return copy.deepcopy(stored)

    async def patch_datacenter(
        self, namespace: str, name: str, patch: Dict, resource_version: str
    ) -> Dict:
        key = (namespace, name)
        self.calls.append(("patch", key))
        self.patches.append((key, copy.deepcopy(patch)))
        self._fail("patch")
        current = self.datacenters[key]
        if resource_version != current["metadata"]["resourceVersion"]:
            raise ConflictError(f"{key} was modified")
        current["spec"].update(copy.deepcopy(patch["spec"]))
        self._bump(current)
        return copy.deepcopy(current)

    async def list_pods(self, namespace: str, labels: Dict[str, str] = None) -> List[V1Pod]:
        datacenter = (labels or {}).get(Labels.CASSANDRA_DATACENTER_LABEL)
        key = (namespace, datacenter)
        self.calls.append(("list_pods", key))
        self._fail("list_pods")
        return [
            V1Pod(
                metadata=V1ObjectMeta(name=f"{datacenter}-{i}"),
                status=V1PodStatus(pod_ip=ip),
            )
            for i, ip in enumerate(self.pods.get(key, []))
        ]

    def set_ready(self, namespace: str, name: str, ready: bool = True):
        self.datacenters[(namespace, name)]["status"] = {
            "conditions": [{"type": "Ready", "status": "True" if ready else "False"}]
        }

    def modify(self, key: Key):
        """Simulate a write from another client."""
        current = self.datacenters[key]
        current["spec"]["additionalSeeds"] = ["192.168.0.99"]
        self._bump(current)

    def operations(self, key: Key = None) -> List[str]:
        return [op for op, k in self.calls if key is None or k == key]

    def writes(self, key: Key = None) -> List[str]:
        return [
            op for op in self.operations(key) if op in ("create", "update", "patch")
        ]


class FakeClientCache:
    def __init__(self, clients: Dict[Optional[str], FakeRemoteClient]):
        self.clients = clients
        self.requests = []

    async def get_client(self, owner, contexts_secret, k8s_context):
        self.requests.append((owner, contexts_secret, k8s_context))
        if k8s_context not in self.clients:
            raise ClientResolutionError(f"Context `{k8s_context}` not found")
        return self.clients[k8s_context]


def dc_template(name: str, context: str = None, size: int = 3, **extra) -> Dict:
    template = {
        "metadata": {"name": name},
        "size": size,
        "serverVersion": "4.0.1",
        "storageConfig": {
            "cassandraDataVolumeClaimSpec": {
                "storageClassName": "standard",
                "accessModes": ["ReadWriteOnce"],
                "resources": {"requests": {"storage": "5Gi"}},
            }
        },
    }
    if context:
        template["k8sContext"] = context
    template.update(extra)
    return template


def make_cluster(
    datacenters: List[Dict],
    client_cache,
    conf: Settings = None,
    sensor: OperatorSensor = None,
) -> K8ssandraCluster:
    spec = K8ssandraClusterSpecSchema().load(
        {
            "k8sContextsSecret": "contexts",
            "cassandra": {"cluster": CLUSTER, "datacenters": datacenters},
        }
    )
    return K8ssandraCluster.from_spec(
        CLUSTER,
        NAMESPACE,
        spec,
        conf=conf or Settings(),
        client_cache=client_cache,
        sensor=sensor or OperatorSensor(),
    )
