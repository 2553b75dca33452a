from typing import NamedTuple


class ObjectKey(NamedTuple):
    """Namespace/name identity of a kubernetes object."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"
