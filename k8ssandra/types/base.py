from types import SimpleNamespace
from typing import Any, Dict
from marshmallow import INCLUDE, Schema, post_dump, post_load

JSON = Dict[str, Any]
MAX_REPR_LEN = 50


class BaseModel(SimpleNamespace):
    """Attribute namespace built from a loaded resource body."""

    def __repr__(self) -> str:
        repr_ = super().__repr__()
        if len(repr_) > MAX_REPR_LEN:
            return repr_[:MAX_REPR_LEN] + " ...)"
        return repr_


class BaseSchema(Schema):
    """The default schema for all models.

    Loading builds the schema's ``__model__``; dumping yields the camelCase
    wire form with unset fields left out.
    """

    __model__: Any = BaseModel

    class Meta:
        unknown = INCLUDE
        ordered = True

    @post_load
    def make_object(self, data: JSON, **kwargs: Any) -> "__model__":
        return self.__model__(**data)

    @post_dump
    def remove_empty(self, data: JSON, **kwargs: Any) -> JSON:
        return {k: v for k, v in data.items() if v is not None}
