from .cassandradatacenter import CassandraDatacenter
from .k8ssandracluster import K8ssandraCluster

__all__ = ["CassandraDatacenter", "K8ssandraCluster"]
