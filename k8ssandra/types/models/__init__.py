from .resource_requirements import ResourceRequirements
from .storage import StorageConfig
from .datacenter_template import EmbeddedObjectMeta, Rack, CassandraDatacenterTemplate
from .k8ssandracluster_spec import CassandraClusterTemplate, K8ssandraClusterSpec

__all__ = [
    "ResourceRequirements",
    "StorageConfig",
    "EmbeddedObjectMeta",
    "Rack",
    "CassandraDatacenterTemplate",
    "CassandraClusterTemplate",
    "K8ssandraClusterSpec",
]
