"""Client for CassandraDatacenter resources in one kubernetes cluster."""
import copy
from typing import Any, Dict, List, Optional
from kubernetes_asyncio.client import ApiException, CoreV1Api, CustomObjectsApi, V1Pod
from kubernetes_asyncio.client.api_client import ApiClient
from k8ssandra.utils.errors import ConflictError, conflict_error, not_found_error
from k8ssandra.utils.helpers import label_selector


class RemoteClient:
    """CassandraDatacenter and pod access against a single cluster.

    Every request carries ``request_timeout`` as its deadline. Cancelling the
    awaiting task aborts the request in flight.
    """

    GROUP_NAME = "cassandra.datastax.com"
    GROUP_VERSION = "v1beta1"
    PLURAL_NAME = "cassandradatacenters"
    KIND = "CassandraDatacenter"

    context: Optional[str]
    request_timeout: Optional[float]

    _api_client: ApiClient
    _custom_objects_api: CustomObjectsApi = None
    _core_v1_api: CoreV1Api = None

    def __init__(
        self,
        api_client: ApiClient,
        context: str = None,
        request_timeout: float = None,
    ):
        self._api_client = api_client
        self.context = context
        self.request_timeout = request_timeout

    def __repr__(self) -> str:
        return f"<RemoteClient context={self.context or '<local>'}>"

    @property
    def api_client(self) -> ApiClient:
        return self._api_client

    @property
    def custom_objects_api(self) -> CustomObjectsApi:
        if self._custom_objects_api is None:
            self._custom_objects_api = CustomObjectsApi(self._api_client)
        return self._custom_objects_api

    @property
    def core_v1_api(self) -> CoreV1Api:
        if self._core_v1_api is None:
            self._core_v1_api = CoreV1Api(self._api_client)
        return self._core_v1_api

    def _options(self) -> Dict[str, Any]:
        if self.request_timeout is None:
            return {}
        return {"_request_timeout": self.request_timeout}

    async def get_datacenter(self, namespace: str, name: str) -> Optional[Dict]:
        """Retrieve the latest state of a datacenter, None if it does not exist."""
        try:
            return await self.custom_objects_api.get_namespaced_custom_object(
                group=self.GROUP_NAME,
                version=self.GROUP_VERSION,
                namespace=namespace,
                plural=self.PLURAL_NAME,
                name=name,
                **self._options(),
            )
        except ApiException as ex:
            if not_found_error(ex):
                return None
            raise

    async def create_datacenter(self, datacenter: Dict) -> Dict:
        return await self.custom_objects_api.create_namespaced_custom_object(
            group=self.GROUP_NAME,
            version=self.GROUP_VERSION,
            namespace=datacenter["metadata"]["namespace"],
            plural=self.PLURAL_NAME,
            body=datacenter,
            **self._options(),
        )

    async def update_datacenter(self, datacenter: Dict) -> Dict:
        """Replace a datacenter.

        The body must carry the resourceVersion it was read at. A stale
        version is rejected by the API server and raised as ConflictError.
        """
        metadata = datacenter["metadata"]
        try:
            return await self.custom_objects_api.replace_namespaced_custom_object(
                group=self.GROUP_NAME,
                version=self.GROUP_VERSION,
                namespace=metadata["namespace"],
                plural=self.PLURAL_NAME,
                name=metadata["name"],
                body=datacenter,
                **self._options(),
            )
        except ApiException as ex:
            if conflict_error(ex):
                raise ConflictError(
                    f"CassandraDatacenter {metadata['namespace']}/{metadata['name']} "
                    f"was modified since resourceVersion {metadata.get('resourceVersion')}"
                ) from ex
            raise

    async def patch_datacenter(
        self, namespace: str, name: str, patch: Dict, resource_version: str
    ) -> Dict:
        """Merge patch a datacenter, conditional on its resourceVersion.

        The version is embedded in the patch body so the API server applies
        the change only if the object has not been modified since it was read.
        """
        body = copy.deepcopy(patch)
        body.setdefault("metadata", {})["resourceVersion"] = resource_version
        try:
            return await self.custom_objects_api.patch_namespaced_custom_object(
                group=self.GROUP_NAME,
                version=self.GROUP_VERSION,
                namespace=namespace,
                plural=self.PLURAL_NAME,
                name=name,
                body=body,
                _content_type="application/merge-patch+json",
                **self._options(),
            )
        except ApiException as ex:
            if conflict_error(ex):
                raise ConflictError(
                    f"CassandraDatacenter {namespace}/{name} was modified since "
                    f"resourceVersion {resource_version}"
                ) from ex
            raise

    async def list_pods(self, namespace: str, labels: Dict[str, str] = None) -> List[V1Pod]:
        """List pods in namespace, optionally filtered by labels."""
        pods = await self.core_v1_api.list_namespaced_pod(
            namespace=namespace,
            label_selector=label_selector(labels),
            **self._options(),
        )
        return list(pods.items or [])

    async def close(self):
        await self._api_client.close()
