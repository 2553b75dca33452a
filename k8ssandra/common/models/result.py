from typing import Optional


class ReconcileResult:
    """Outcome of one reconciliation pass.

    Exactly one of three shapes:
      * done: the pass converged every datacenter, nothing to revisit.
      * retry after: progress is pending external convergence, revisit after
        ``requeue_after`` seconds.
      * failed: a hard error aborted the pass; the caller owns backoff.
    """

    DONE = "Done"
    RETRY_AFTER = "RetryAfter"
    ERROR = "Error"

    kind: str
    requeue_after: Optional[float]
    error: Optional[Exception]
    reason: Optional[str]

    def __init__(
        self,
        kind: str,
        requeue_after: float = None,
        error: Exception = None,
        reason: str = None,
    ):
        self.kind = kind
        self.requeue_after = requeue_after
        self.error = error
        self.reason = reason

    @classmethod
    def done(cls) -> "ReconcileResult":
        return cls(cls.DONE)

    @classmethod
    def retry_after(cls, seconds: float, reason: str = None) -> "ReconcileResult":
        if seconds <= 0:
            raise ValueError(f"Retry delay must be positive, got {seconds}")
        return cls(cls.RETRY_AFTER, requeue_after=seconds, reason=reason)

    @classmethod
    def failed(cls, error: Exception) -> "ReconcileResult":
        return cls(cls.ERROR, error=error, reason=str(error))

    @property
    def is_done(self) -> bool:
        return self.kind == self.DONE

    @property
    def is_retry(self) -> bool:
        return self.kind == self.RETRY_AFTER

    @property
    def is_error(self) -> bool:
        return self.kind == self.ERROR

    def __repr__(self) -> str:
        if self.is_retry:
            return f"<ReconcileResult {self.kind}({self.requeue_after}s)>"
        if self.is_error:
            return f"<ReconcileResult {self.kind}({self.error!r})>"
        return f"<ReconcileResult {self.kind}>"
