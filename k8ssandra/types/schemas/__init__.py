from .resource_requirements import ResourceRequirementsSchema
from .storage import StorageConfigSchema
from .datacenter_template import (
    EmbeddedObjectMetaSchema,
    RackSchema,
    CassandraDatacenterTemplateSchema,
)
from .k8ssandracluster_spec import (
    CassandraClusterTemplateSchema,
    K8ssandraClusterSpecSchema,
)

__all__ = [
    "ResourceRequirementsSchema",
    "StorageConfigSchema",
    "EmbeddedObjectMetaSchema",
    "RackSchema",
    "CassandraDatacenterTemplateSchema",
    "CassandraClusterTemplateSchema",
    "K8ssandraClusterSpecSchema",
]
