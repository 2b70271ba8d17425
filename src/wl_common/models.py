"""Shared pydantic base for stored records and API payloads."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes with camelCase keys, accepts either spelling on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EntityRef(CamelModel):
    """`{id, name}` summary embedded in access lists, wallet caches and createdBy."""

    id: str
    name: str
