from marshmallow import fields
from k8ssandra.types.base import BaseSchema
from k8ssandra.types.models.k8ssandracluster_spec import (
    CassandraClusterTemplate,
    K8ssandraClusterSpec,
)
from k8ssandra.types.schemas.datacenter_template import (
    CassandraDatacenterTemplateSchema,
)


class CassandraClusterTemplateSchema(BaseSchema):
    __model__ = CassandraClusterTemplate

    cluster = fields.Str(data_key="cluster", required=True)
    datacenters = fields.List(
        fields.Nested(CassandraDatacenterTemplateSchema()),
        data_key="datacenters",
        load_default=list,
    )


class K8ssandraClusterSpecSchema(BaseSchema):
    __model__ = K8ssandraClusterSpec

    k8s_contexts_secret = fields.Str(
        data_key="k8sContextsSecret", allow_none=True, load_default=None
    )
    cassandra = fields.Nested(
        CassandraClusterTemplateSchema(),
        data_key="cassandra",
        allow_none=True,
        load_default=None,
    )
