from marshmallow import fields, validate
from k8ssandra.types.base import BaseSchema
from k8ssandra.types.models.datacenter_template import (
    EmbeddedObjectMeta,
    Rack,
    CassandraDatacenterTemplate,
)
from k8ssandra.types.schemas.resource_requirements import ResourceRequirementsSchema
from k8ssandra.types.schemas.storage import StorageConfigSchema


class EmbeddedObjectMetaSchema(BaseSchema):
    __model__ = EmbeddedObjectMeta

    name = fields.Str(data_key="name", required=True, validate=validate.Length(min=1))
    namespace = fields.Str(data_key="namespace", allow_none=True, load_default=None)


class RackSchema(BaseSchema):
    __model__ = Rack

    name = fields.Str(data_key="name", required=True)
    zone = fields.Str(data_key="zone", allow_none=True, load_default=None)
    node_affinity_labels = fields.Dict(
        keys=fields.Str(),
        values=fields.Str(),
        data_key="nodeAffinityLabels",
        allow_none=True,
        load_default=None,
    )


class CassandraDatacenterTemplateSchema(BaseSchema):
    __model__ = CassandraDatacenterTemplate

    metadata = fields.Nested(
        EmbeddedObjectMetaSchema(), data_key="metadata", required=True
    )
    k8s_context = fields.Str(data_key="k8sContext", allow_none=True, load_default=None)
    size = fields.Int(data_key="size", required=True, validate=validate.Range(min=1))
    server_version = fields.Str(data_key="serverVersion", required=True)
    resources = fields.Nested(
        ResourceRequirementsSchema(),
        data_key="resources",
        allow_none=True,
        load_default=None,
    )
    config = fields.Dict(data_key="config", allow_none=True, load_default=None)
    racks = fields.List(
        fields.Nested(RackSchema()),
        data_key="racks",
        allow_none=True,
        load_default=None,
    )
    storage_config = fields.Nested(
        StorageConfigSchema(),
        data_key="storageConfig",
        allow_none=True,
        load_default=None,
    )
