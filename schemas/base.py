# schemas/base.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CamelInput(BaseModel):
    """
    Request bodies: accept camelCase (web client) and snake_case keys,
    unknown keys are dropped.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )
