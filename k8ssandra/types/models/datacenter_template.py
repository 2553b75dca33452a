from typing import Any, Dict, List, Optional
from k8ssandra.types.base import BaseModel
from k8ssandra.types.models.resource_requirements import ResourceRequirements
from k8ssandra.types.models.storage import StorageConfig


class EmbeddedObjectMeta(BaseModel):
    name: str
    namespace: Optional[str]


class Rack(BaseModel):
    name: str
    zone: Optional[str]
    node_affinity_labels: Optional[Dict[str, str]]


class CassandraDatacenterTemplate(BaseModel):
    """One element of the ordered datacenter list."""

    metadata: EmbeddedObjectMeta
    k8s_context: Optional[str]
    size: int
    server_version: str
    resources: Optional[ResourceRequirements]
    config: Optional[Dict[str, Any]]
    racks: Optional[List[Rack]]
    storage_config: Optional[StorageConfig]

    @property
    def name(self) -> str:
        return self.metadata.name

    def namespace_or(self, default: str) -> str:
        """Namespace override if set, otherwise the given default."""
        return self.metadata.namespace or default
