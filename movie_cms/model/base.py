from datetime import datetime
from typing import Any, Dict, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from movie_cms.utils.helper import to_utc


class MongoModel(BaseModel):
    """Shape of a stored document; `_id` is exposed as a string `id`."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: Optional[str] = Field(default=None, alias="_id")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if isinstance(value, ObjectId):
            return str(value)
        return value

    @field_validator("created_at", "updated_at", mode="after")
    @classmethod
    def _as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc(value)

    @classmethod
    def from_mongo(cls, doc: Optional[Dict[str, Any]]):
        if doc is None:
            return None
        return cls.model_validate(doc)

    def to_mongo(self) -> Dict[str, Any]:
        data = self.model_dump(exclude={"id"})
        if self.id:
            data["_id"] = ObjectId(self.id)
        return data
