import os
from typing import Any

_TRUE = {"True", "true", "yes", "on", "1"}
_FALSE = {"False", "false", "no", "off", "0"}


def _getenv(name: str, *default: Any) -> Any:
    try:
        v = os.environ[name]
        if v in _TRUE:
            return True
        elif v in _FALSE:
            return False
        else:
            return v
    except KeyError:
        pass
    if default:
        return default[0]
    raise KeyError(name)


def _getbool(name: str, default: bool) -> bool:
    """Read a boolean flag, rejecting values outside the known spellings."""
    v = _getenv(name, default)
    if not isinstance(v, bool):
        raise ValueError(
            f"{name} must be one of {sorted(_TRUE | _FALSE)}, got {v!r}"
        )
    return v


# ------------------------------------------------
# ---- Defaults and environment variables ----
# ------------------------------------------------

#: Seconds to wait before revisiting a datacenter that was just created
CREATE_REQUEUE_DELAY_SECONDS = float(_getenv("CREATE_REQUEUE_DELAY_SECONDS", 10))

#: Seconds to wait before revisiting a datacenter that is not ready yet
READY_REQUEUE_DELAY_SECONDS = float(_getenv("READY_REQUEUE_DELAY_SECONDS", 15))

#: Maximum number of seed endpoints taken from a ready datacenter
MAX_SEED_ENDPOINTS = int(_getenv("MAX_SEED_ENDPOINTS", 3))

#: Skip seeds already present when propagating to earlier datacenters
DEDUPLICATE_SEEDS = _getbool("DEDUPLICATE_SEEDS", True)

#: Deadline in seconds applied to every call against a remote cluster
REMOTE_REQUEST_TIMEOUT_SECONDS = float(_getenv("REMOTE_REQUEST_TIMEOUT_SECONDS", 30))

#: Seconds of inactivity after which a converged cluster is reconciled again
RESYNC_INTERVAL_SECONDS = float(_getenv("RESYNC_INTERVAL_SECONDS", 60))

#: Key of the contexts secret holding the multi-context kubeconfig
KUBECONFIG_SECRET_KEY = _getenv("KUBECONFIG_SECRET_KEY", "kubeconfig")


class Settings:
    """Operator settings"""

    create_requeue_delay_seconds: float = CREATE_REQUEUE_DELAY_SECONDS
    ready_requeue_delay_seconds: float = READY_REQUEUE_DELAY_SECONDS
    max_seed_endpoints: int = MAX_SEED_ENDPOINTS
    deduplicate_seeds: bool = DEDUPLICATE_SEEDS
    remote_request_timeout_seconds: float = REMOTE_REQUEST_TIMEOUT_SECONDS
    resync_interval_seconds: float = RESYNC_INTERVAL_SECONDS
    kubeconfig_secret_key: str = KUBECONFIG_SECRET_KEY

    def __init__(
        self,
        *args,
        create_requeue_delay_seconds: float = None,
        ready_requeue_delay_seconds: float = None,
        max_seed_endpoints: int = None,
        deduplicate_seeds: bool = None,
        remote_request_timeout_seconds: float = None,
        resync_interval_seconds: float = None,
        kubeconfig_secret_key: str = None,
        **kwargs,
    ):
        if create_requeue_delay_seconds is not None:
            self.create_requeue_delay_seconds = create_requeue_delay_seconds

        if ready_requeue_delay_seconds is not None:
            self.ready_requeue_delay_seconds = ready_requeue_delay_seconds

        if max_seed_endpoints is not None:
            self.max_seed_endpoints = max_seed_endpoints

        if deduplicate_seeds is not None:
            self.deduplicate_seeds = deduplicate_seeds

        if remote_request_timeout_seconds is not None:
            self.remote_request_timeout_seconds = remote_request_timeout_seconds

        if resync_interval_seconds is not None:
            self.resync_interval_seconds = resync_interval_seconds

        if kubeconfig_secret_key is not None:
            self.kubeconfig_secret_key = kubeconfig_secret_key
