"""Shared pydantic configuration for models that cross the HTTP boundary."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names.

    Fields keep snake_case names in Python; the wire format uses the
    camelCase alias. Population by field name stays allowed so engine code
    can build models directly.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
