from marshmallow import fields
from k8ssandra.types.base import BaseSchema
from k8ssandra.types.models.storage import StorageConfig


class StorageConfigSchema(BaseSchema):
    """Cassandra data volume configuration."""

    __model__ = StorageConfig

    cassandra_data_volume_claim_spec = fields.Dict(
        data_key="cassandraDataVolumeClaimSpec", allow_none=True, load_default=None
    )
    additional_volumes = fields.List(
        fields.Dict(),
        data_key="additionalVolumes",
        allow_none=True,
        load_default=None,
    )
