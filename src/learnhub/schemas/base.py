"""Shared pydantic base model.

JSON payloads use camelCase keys (``firstName``, ``teacherId``); snake_case
keys are accepted on input as well.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
