from k8ssandra.handlers import k8ssandracluster, probes

__all__ = ["k8ssandracluster", "probes"]
