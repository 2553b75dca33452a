import copy
from typing import Dict, Iterable, List, Optional
from k8ssandra.common.models.key import ObjectKey
from k8ssandra.common.models.labels import Labels
from k8ssandra.remote.client import RemoteClient
from k8ssandra.resources.base import BaseResource
from k8ssandra.types.models.datacenter_template import CassandraDatacenterTemplate
from k8ssandra.types.schemas import (
    RackSchema,
    ResourceRequirementsSchema,
    StorageConfigSchema,
)
from k8ssandra.utils.helpers import get_condition_status, merge_unique


class CassandraDatacenter(BaseResource):
    """Desired state of one CassandraDatacenter, derived from its template.

    Building the desired resource is pure: the same template, cluster name,
    namespace and seed list always produce the same body and the same hash.
    """

    KIND = "CassandraDatacenter"
    API_VERSION = f"{RemoteClient.GROUP_NAME}/{RemoteClient.GROUP_VERSION}"
    SERVER_TYPE = "cassandra"
    READY_CONDITION = "Ready"
    DEFAULT_MAX_SEEDS = 3

    name: str
    cluster_name: str
    template: CassandraDatacenterTemplate
    additional_seeds: List[str]
    labels: Labels

    _datacenter: Dict = None
    _hash: str = None

    def __init__(
        self,
        name: str,
        namespace: str,
        cluster_name: str,
        template: CassandraDatacenterTemplate,
        additional_seeds: Iterable[str] = None,
        labels: Labels = None,
    ):
        super().__init__(cluster=cluster_name, namespace=namespace)
        self.name = name
        self.cluster_name = cluster_name
        self.template = template
        self.additional_seeds = list(additional_seeds or [])
        self.labels = labels or Labels.empty()

    @classmethod
    def from_template(
        cls,
        k8ssandra_namespace: str,
        cluster_name: str,
        template: CassandraDatacenterTemplate,
        additional_seeds: Iterable[str] = None,
        labels: Labels = None,
    ) -> "CassandraDatacenter":
        key = cls.key_for(template, k8ssandra_namespace)
        return CassandraDatacenter(
            name=key.name,
            namespace=key.namespace,
            cluster_name=cluster_name,
            template=template,
            additional_seeds=additional_seeds,
            labels=labels,
        )

    @classmethod
    def key_for(
        cls, template: CassandraDatacenterTemplate, k8ssandra_namespace: str
    ) -> ObjectKey:
        """Template namespace takes precedence over the owning namespace."""
        return ObjectKey(template.namespace_or(k8ssandra_namespace), template.name)

    @property
    def key(self) -> ObjectKey:
        return ObjectKey(self.namespace, self.name)

    @property
    def datacenter(self) -> Dict:
        """Desired resource body, hash annotation included."""
        if self._datacenter is None:
            self._datacenter = self.prepare_datacenter()
        return self._datacenter

    @property
    def hash(self) -> str:
        if self._hash is None:
            self._hash = self.get_hash_annotation(self.datacenter)
        return self._hash

    def prepare_spec(self) -> Dict:
        template = self.template
        spec = {
            "clusterName": self.cluster_name,
            "serverType": self.SERVER_TYPE,
            "serverVersion": template.server_version,
            "size": template.size,
            "networking": {"hostNetwork": True},
        }
        if template.resources is not None:
            spec["resources"] = ResourceRequirementsSchema().dump(template.resources)
        if template.config is not None:
            spec["config"] = copy.deepcopy(template.config)
        if template.racks:
            spec["racks"] = RackSchema(many=True).dump(template.racks)
        if template.storage_config is not None:
            spec["storageConfig"] = StorageConfigSchema().dump(template.storage_config)
        if self.additional_seeds:
            spec["additionalSeeds"] = list(self.additional_seeds)
        return spec

    def prepare_datacenter(self) -> Dict:
        datacenter = {
            "apiVersion": self.API_VERSION,
            "kind": self.KIND,
            "metadata": {
                "name": self.name,
                "namespace": self.namespace,
                "labels": self.labels.as_dict(),
                "annotations": {},
            },
            "spec": self.prepare_spec(),
        }
        datacenter["metadata"]["annotations"].update(
            self.prepare_hash_annotation(self.prepare_datacenter_hash(datacenter))
        )
        return datacenter

    def prepare_datacenter_hash(self, datacenter: Dict) -> str:
        """Compute hash of the datacenter body, excluding its hash annotation."""
        _datacenter = copy.deepcopy(datacenter)
        _datacenter["metadata"].get("annotations", {}).pop(
            self.RESOURCE_HASH_ANNOTATION, None
        )
        return self.compute_hash(_datacenter)

    def needs_update(self, actual: Dict) -> bool:
        """True unless the actual resource carries the desired hash."""
        return self.get_hash_annotation(actual) != self.hash

    def prepare_update(self, actual: Dict) -> Dict:
        """Overlay the desired spec onto a copy of the actual resource.

        Server managed metadata (resourceVersion, uid, ...) is kept so the
        replace is rejected if the resource changed after it was read.
        """
        desired = self.datacenter
        updated = copy.deepcopy(actual)
        updated["spec"] = copy.deepcopy(desired["spec"])
        metadata = updated.setdefault("metadata", {})
        metadata["labels"] = {
            **(metadata.get("labels") or {}),
            **desired["metadata"]["labels"],
        }
        metadata["annotations"] = {
            **(metadata.get("annotations") or {}),
            **desired["metadata"]["annotations"],
        }
        return updated

    @classmethod
    def is_ready(cls, actual: Dict) -> bool:
        """A datacenter is ready once cass-operator reports its Ready condition."""
        conditions = (actual.get("status") or {}).get("conditions")
        return get_condition_status(conditions, cls.READY_CONDITION) == "True"

    @classmethod
    async def resolve_seed_endpoints(
        cls, actual: Dict, remote_client: RemoteClient, limit: int = None
    ) -> List[str]:
        """Return up to `limit` pod IPs of the datacenter's server pods."""
        limit = cls.DEFAULT_MAX_SEEDS if limit is None else limit
        metadata = actual["metadata"]
        pods = await remote_client.list_pods(
            metadata["namespace"], Labels.datacenter_pods(metadata["name"]).as_dict()
        )
        endpoints = []
        for pod in pods:
            if len(endpoints) >= limit:
                break
            pod_ip = pod.status.pod_ip if pod.status else None
            if pod_ip:
                endpoints.append(pod_ip)
        return endpoints

    @classmethod
    def prepare_additional_seeds_patch(
        cls, actual: Dict, seeds: Iterable[str], deduplicate: bool = True
    ) -> Optional[Dict]:
        """Merge patch appending seeds to spec.additionalSeeds.

        Returns None when the patch would not change anything.
        """
        existing = list((actual.get("spec") or {}).get("additionalSeeds") or [])
        if deduplicate:
            additional_seeds = merge_unique(existing, seeds)
        else:
            additional_seeds = existing + list(seeds)
        if additional_seeds == existing:
            return None
        return {"spec": {"additionalSeeds": additional_seeds}}
