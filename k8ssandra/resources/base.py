import base64
import hashlib
from typing import Any, Dict
from kubernetes_asyncio.client import ApiException, CustomObjectsApi
from k8ssandra.utils.helpers import canonicalize_dict
from k8ssandra.utils.errors import not_found_error


class BaseResource:
    """Base resource model."""

    K8SSANDRA_OPERATOR_NAME = "k8ssandra-operator"
    RESOURCE_HASH_ANNOTATION = "k8ssandra.io/resource-hash"

    _cluster: str
    _namespace: str

    def __init__(self, cluster: str, namespace: str):
        self._cluster = cluster
        self._namespace = namespace

    @property
    def cluster(self) -> str:
        return self._cluster

    @property
    def namespace(self) -> str:
        return self._namespace

    def compute_hash(self, data: Any) -> str:
        """Compute a SHA-256 digest of the canonical form of data, base64 encoded.

        Dictionaries are serialized with keys sorted at every depth so equal
        content always yields the same digest.
        """
        if isinstance(data, dict):
            _data = canonicalize_dict(data).encode("utf-8")
        elif isinstance(data, str):
            _data = data.encode("utf-8")
        else:
            raise ValueError(f"Hash of {type(data)} is not supported.")
        digest = hashlib.sha256(_data).digest()
        return base64.b64encode(digest).decode("ascii")

    def prepare_hash_annotation(self, hash: str) -> Dict[str, str]:
        """Prepare hash annotation for k8s resources."""
        return {self.RESOURCE_HASH_ANNOTATION: str(hash)}

    def get_hash_annotation(self, resource: Dict) -> str:
        """Return the hash annotation of a resource body, or None."""
        annotations = (resource.get("metadata") or {}).get("annotations") or {}
        return annotations.get(self.RESOURCE_HASH_ANNOTATION)

    async def get_custom_object(
        self,
        custom_objects_api: CustomObjectsApi,
        namespace: str,
        group: str,
        version: str,
        plural: str,
        name: str,
    ):
        try:
            return await custom_objects_api.get_namespaced_custom_object(
                group=group,
                version=version,
                namespace=namespace,
                plural=plural,
                name=name,
            )
        except ApiException as ex:
            if not_found_error(ex):
                return None
            raise
