import json
import kubernetes_asyncio

_ALREADY_EXISTS = "alreadyexists"
_NOT_FOUND = "notfound"
_CONFLICT = "conflict"


class K8ssandraError(Exception):
    """Base class for reconciliation errors."""


class ClientResolutionError(K8ssandraError):
    """A client for the remote kubernetes cluster could not be obtained."""


class ConflictError(K8ssandraError):
    """A write was rejected because the resource changed since it was read."""


class DatacenterError(K8ssandraError):
    """An operation against a CassandraDatacenter failed.

    Carries the datacenter key and the operation that failed so the error can
    be logged and reported with context. The underlying error is chained as
    ``__cause__``.
    """

    def __init__(self, operation: str, namespace: str, name: str, cause: Exception):
        self.operation = operation
        self.namespace = namespace
        self.name = name
        self.cause = cause
        super().__init__(
            f"CassandraDatacenter {namespace}/{name}: {operation} failed: {cause}"
        )

    @property
    def conflict(self) -> bool:
        return isinstance(self.cause, ConflictError)


def _reason(ex: kubernetes_asyncio.client.ApiException) -> str:
    try:
        err = json.loads(ex.body) if ex.body else {}
    except (json.JSONDecodeError, TypeError):
        return ""
    return err.get("reason", "").lower() if isinstance(err, dict) else ""


def not_found_error(ex: Exception) -> bool:
    if not isinstance(ex, kubernetes_asyncio.client.ApiException):
        return False
    return ex.status == 404 or _reason(ex) == _NOT_FOUND


def conflict_error(ex: Exception) -> bool:
    """Return True if the API server rejected a write due to a version mismatch."""
    if not isinstance(ex, kubernetes_asyncio.client.ApiException):
        return False
    return ex.status == 409 and _reason(ex) != _ALREADY_EXISTS
