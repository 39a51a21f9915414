"""
Base model shared by all wire schemas.

The ordering backend speaks camelCase JSON; Python code uses snake_case.
Models accept either spelling on input and emit camelCase when dumped with
``by_alias=True`` (FastAPI does this for response models).
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
