from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from movie_cms.model.base import MongoModel
from movie_cms.utils.exceptions import ConflictError, NotFoundError, ValidationError
from movie_cms.utils.helper import utc_now

ModelType = TypeVar("ModelType", bound=MongoModel)

SortSpec = Sequence[Tuple[str, int]]

# Creation order, ties broken by insertion order of the ObjectId.
NEWEST_FIRST = [("created_at", DESCENDING), ("_id", DESCENDING)]


def to_object_id(id: Any, label: str = "record") -> ObjectId:
    if isinstance(id, ObjectId):
        return id
    if not id or not isinstance(id, str):
        raise ValidationError(f"{label.capitalize()} id is required")
    try:
        return ObjectId(id)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {label} id")


class MongoCRUD(Generic[ModelType]):
    """Persistence operations over one collection, returning typed records."""

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        model: Type[ModelType],
        label: Optional[str] = None,
        conflict_message: str = "Record already exists",
    ):
        self.collection = collection
        self.model = model
        self.label = label or model.__name__.lower()
        self.conflict_message = conflict_message

    def _not_found(self) -> NotFoundError:
        return NotFoundError(f"{self.label.capitalize()} not found")

    # -------- GET BY ID --------
    async def get(self, id: Any) -> ModelType:
        doc = await self.collection.find_one({"_id": to_object_id(id, self.label)})
        if not doc:
            raise self._not_found()
        return self.model.from_mongo(doc)

    # -------- FIND ONE --------
    async def find_one(self, filters: Dict[str, Any]) -> Optional[ModelType]:
        doc = await self.collection.find_one(filters)
        return self.model.from_mongo(doc)

    # -------- GET ALL with filters --------
    async def get_all(
        self,
        filters: Optional[Dict[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[ModelType]:
        cursor = self.collection.find(filters or {})
        if sort:
            cursor = cursor.sort(list(sort))
        if skip:
            cursor = cursor.skip(skip)
        if limit:
            cursor = cursor.limit(limit)
        docs = await cursor.to_list(length=None)
        return [self.model.from_mongo(doc) for doc in docs]

    # -------- CREATE --------
    async def create(self, obj: ModelType) -> ModelType:
        now = utc_now()
        data = obj.to_mongo()
        data["created_at"] = now
        data["updated_at"] = now
        try:
            result = await self.collection.insert_one(data)
        except DuplicateKeyError:
            raise ConflictError(self.conflict_message)
        data["_id"] = result.inserted_id
        return self.model.from_mongo(data)

    # -------- UPDATE --------
    async def update(
        self,
        id: Any,
        update_data: Dict[str, Any],
        extra_filters: Optional[Dict[str, Any]] = None,
    ) -> ModelType:
        """Apply a partial `$set` and return the record as stored afterwards."""
        query = {"_id": to_object_id(id, self.label)}
        if extra_filters:
            query.update(extra_filters)
        values = dict(update_data)
        values["updated_at"] = utc_now()
        try:
            doc = await self.collection.find_one_and_update(
                query,
                {"$set": values},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise ConflictError(self.conflict_message)
        if not doc:
            raise self._not_found()
        return self.model.from_mongo(doc)

    async def update_many(self, filters: Dict[str, Any], values: Dict[str, Any]) -> int:
        result = await self.collection.update_many(
            filters,
            {"$set": {**values, "updated_at": utc_now()}},
        )
        return result.modified_count

    # -------- DELETE --------
    async def remove(self, id: Any, extra_filters: Optional[Dict[str, Any]] = None) -> ModelType:
        query = {"_id": to_object_id(id, self.label)}
        if extra_filters:
            query.update(extra_filters)
        doc = await self.collection.find_one_and_delete(query)
        if not doc:
            raise self._not_found()
        return self.model.from_mongo(doc)

    # -------- AGGREGATE --------
    async def aggregate(self, pipeline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return await self.collection.aggregate(pipeline).to_list(length=None)
