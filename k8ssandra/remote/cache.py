"""Resolution and caching of clients for remote kubernetes clusters."""
import asyncio
import base64
import logging
import yaml
from logging import Logger
from typing import Dict, Optional, Tuple
from kubernetes_asyncio import config
from kubernetes_asyncio.client import ApiException, CoreV1Api
from kubernetes_asyncio.client.api_client import ApiClient
from kubernetes_asyncio.config import ConfigException
from k8ssandra.common.models.key import ObjectKey
from k8ssandra.remote.client import RemoteClient
from k8ssandra.types.settings import Settings
from k8ssandra.utils.errors import ClientResolutionError, not_found_error

CacheKey = Tuple[str, str, str]


class ClientCache:
    """Maps (owner, contexts secret, context) to a RemoteClient.

    The contexts secret lives in the owner's namespace and holds a kubeconfig
    with one context per remote cluster. Without a secret or a context the
    local cluster client is returned. Clients are built once per
    (namespace, secret, context) and reused for every later call.
    """

    logger: Logger
    conf: Settings

    _local_api_client: ApiClient
    _local: RemoteClient = None
    _core_v1_api: CoreV1Api = None
    _clients: Dict[CacheKey, RemoteClient]
    _lock: asyncio.Lock

    def __init__(
        self,
        local_api_client: ApiClient,
        conf: Settings = None,
        logger: Logger = None,
    ):
        self._local_api_client = local_api_client
        self.conf = conf or Settings()
        self.logger = logger or logging.getLogger(__name__)
        self._clients = {}
        self._lock = asyncio.Lock()

    @property
    def local_client(self) -> RemoteClient:
        if self._local is None:
            self._local = RemoteClient(
                self._local_api_client,
                request_timeout=self.conf.remote_request_timeout_seconds,
            )
        return self._local

    @property
    def core_v1_api(self) -> CoreV1Api:
        if self._core_v1_api is None:
            self._core_v1_api = CoreV1Api(self._local_api_client)
        return self._core_v1_api

    async def get_client(
        self,
        owner: ObjectKey,
        contexts_secret: Optional[str],
        k8s_context: Optional[str],
    ) -> RemoteClient:
        """Return the client for the given context, building it on first use.

        Only an empty context resolves to the local cluster. A context without
        a contexts secret cannot be resolved.
        """
        if not k8s_context:
            return self.local_client
        if not contexts_secret:
            raise ClientResolutionError(
                f"Context `{k8s_context}` requires a contexts secret on {owner}"
            )

        key = (owner.namespace, contexts_secret, k8s_context)
        client = self._clients.get(key)
        if client is not None:
            return client

        async with self._lock:
            client = self._clients.get(key)
            if client is None:
                api_client = await self.build_api_client(
                    owner.namespace, contexts_secret, k8s_context
                )
                client = RemoteClient(
                    api_client,
                    context=k8s_context,
                    request_timeout=self.conf.remote_request_timeout_seconds,
                )
                self._clients[key] = client
                self.logger.info(
                    f"Created client for context `{k8s_context}` from secret "
                    f"{owner.namespace}/{contexts_secret}"
                )
        return client

    async def build_api_client(
        self, namespace: str, contexts_secret: str, k8s_context: str
    ) -> ApiClient:
        kubeconfig = await self.fetch_kubeconfig(namespace, contexts_secret)
        contexts = {c.get("name") for c in kubeconfig.get("contexts") or []}
        if k8s_context not in contexts:
            raise ClientResolutionError(
                f"Context `{k8s_context}` not found in secret {namespace}/{contexts_secret}"
            )
        try:
            return await config.new_client_from_config_dict(
                kubeconfig, context=k8s_context, persist_config=False
            )
        except ConfigException as ex:
            raise ClientResolutionError(
                f"Invalid configuration for context `{k8s_context}`: {ex}"
            ) from ex

    async def fetch_kubeconfig(self, namespace: str, contexts_secret: str) -> Dict:
        """Read and parse the kubeconfig stored in the contexts secret."""
        try:
            secret = await self.core_v1_api.read_namespaced_secret(
                name=contexts_secret,
                namespace=namespace,
                _request_timeout=self.conf.remote_request_timeout_seconds,
            )
        except ApiException as ex:
            if not_found_error(ex):
                raise ClientResolutionError(
                    f"Secret {namespace}/{contexts_secret} not found"
                ) from ex
            raise ClientResolutionError(
                f"Failed to read secret {namespace}/{contexts_secret}: {ex.reason}"
            ) from ex

        data = (secret.data or {}).get(self.conf.kubeconfig_secret_key)
        if not data:
            raise ClientResolutionError(
                f"Secret {namespace}/{contexts_secret} has no "
                f"`{self.conf.kubeconfig_secret_key}` key"
            )
        try:
            kubeconfig = yaml.safe_load(base64.b64decode(data))
        except (ValueError, yaml.YAMLError) as ex:
            raise ClientResolutionError(
                f"Secret {namespace}/{contexts_secret} does not hold a valid kubeconfig"
            ) from ex
        if not isinstance(kubeconfig, dict):
            raise ClientResolutionError(
                f"Secret {namespace}/{contexts_secret} does not hold a valid kubeconfig"
            )
        return kubeconfig

    async def close(self):
        """Close every cached remote client. The local client is owned by the caller."""
        clients, self._clients = list(self._clients.values()), {}
        for client in clients:
            await client.close()
