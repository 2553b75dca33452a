from .client import RemoteClient
from .cache import ClientCache

__all__ = ["RemoteClient", "ClientCache"]
