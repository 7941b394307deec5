from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Shared Pydantic base: snake_case in Python, camelCase on the wire
class ORMModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class APIResponse(ORMModel):
    success: bool = True


class MessageResponse(APIResponse):
    message: str
