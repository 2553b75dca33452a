from typing import Dict


class ResourceLabels:
    K8SSANDRA_DOMAIN: str = "k8ssandra.io/"

    K8SSANDRA_CLUSTER_NAME_LABEL = K8SSANDRA_DOMAIN + "cluster-name"

    K8SSANDRA_CLUSTER_NAMESPACE_LABEL = K8SSANDRA_DOMAIN + "cluster-namespace"

    CASSANDRA_DOMAIN: str = "cassandra.datastax.com/"

    CASSANDRA_DATACENTER_LABEL = CASSANDRA_DOMAIN + "datacenter"


class Labels(ResourceLabels):
    KUBERNETES_DOMAIN = "app.kubernetes.io/"

    KUBERNETES_NAME_LABEL = KUBERNETES_DOMAIN + "name"

    KUBERNETES_PART_OF_LABEL = KUBERNETES_DOMAIN + "part-of"

    KUBERNETES_MANAGED_BY_LABEL = KUBERNETES_DOMAIN + "managed-by"

    APPLICATION_NAME = "k8ssandra"

    _labels: Dict[str, str]

    def __init__(self, labels: Dict[str, str] = None) -> None:
        self._labels = labels if labels else dict()

    def update(self, labels: Dict[str, str]) -> "Labels":
        self._labels.update(labels.copy())
        return self

    def as_dict(self) -> Dict[str, str]:
        """Return labels are dictionary."""
        return self._labels.copy()

    def include(self, label: str, value: str) -> "Labels":
        self.update({label: value})
        return self

    def include_cluster_name(self, name: str) -> "Labels":
        return self.include(self.K8SSANDRA_CLUSTER_NAME_LABEL, name)

    def include_cluster_namespace(self, namespace: str) -> "Labels":
        return self.include(self.K8SSANDRA_CLUSTER_NAMESPACE_LABEL, namespace)

    def include_datacenter(self, datacenter: str) -> "Labels":
        return self.include(self.CASSANDRA_DATACENTER_LABEL, datacenter)

    def include_kubernetes_name(self, name: str) -> "Labels":
        return self.include(self.KUBERNETES_NAME_LABEL, name)

    def include_kubernetes_part_of(self, cluster: str) -> "Labels":
        return self.include(
            self.KUBERNETES_PART_OF_LABEL, f"{self.APPLICATION_NAME}-{cluster}"[:63]
        )

    def include_kubernetes_managed_by(self, operator_name: str) -> "Labels":
        return self.include(self.KUBERNETES_MANAGED_BY_LABEL, operator_name)

    def __str__(self):
        return f"Labels<{self._labels}>"

    @classmethod
    def empty(cls) -> "Labels":
        return Labels({})

    @classmethod
    def datacenter_pods(cls, datacenter: str) -> "Labels":
        """Selector matching the server pods of a datacenter."""
        return Labels().include_datacenter(datacenter)

    @classmethod
    def generate_default_labels(
        cls,
        cluster_name: str,
        cluster_namespace: str,
        managed_by: str,
    ) -> "Labels":
        labels = Labels()
        return (
            labels.include_cluster_name(cluster_name)
            .include_cluster_namespace(cluster_namespace)
            .include_kubernetes_name("cassandra")
            .include_kubernetes_part_of(cluster_name)
            .include_kubernetes_managed_by(managed_by)
        )
