from typing import Any, Dict, List, Optional
from k8ssandra.types.base import BaseModel


class StorageConfig(BaseModel):
    """Cassandra data volume configuration."""

    cassandra_data_volume_claim_spec: Optional[Dict[str, Any]]
    additional_volumes: Optional[List[Dict[str, Any]]]
