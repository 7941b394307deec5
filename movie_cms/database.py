import logging
from typing import Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from movie_cms.utils.config import settings

logger = logging.getLogger(__name__)

MOVIES_COLLECTION = "movies"
SITE_SETTINGS_COLLECTION = "site_settings"


class MongoStore:
    """Owns the Mongo client for the lifetime of the process.

    Created once at startup and kept on `app.state.mongo`; request handlers
    reach the database through `get_mongo_db`.
    """

    def __init__(self, url: str, db_name: str):
        self.url = url
        self.db_name = db_name
        self.client: Optional[AsyncIOMotorClient] = None

    @property
    def db(self) -> AsyncIOMotorDatabase:
        if self.client is None:
            raise RuntimeError("MongoStore is not connected")
        return self.client[self.db_name]

    async def connect(self) -> None:
        if self.client is not None:
            return
        self.client = AsyncIOMotorClient(self.url, tz_aware=True)
        await self.ping()
        await ensure_indexes(self.db)
        logger.info("mongo.connected db=%s", self.db_name)

    async def ping(self) -> bool:
        await self.db.command("ping")
        return True

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None
            logger.info("mongo.closed db=%s", self.db_name)


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    movies = db[MOVIES_COLLECTION]
    await movies.create_index("slug", unique=True)
    await movies.create_index([("created_at", DESCENDING)])
    await movies.create_index([("release_year", ASCENDING)])
    await movies.create_index([("status", ASCENDING), ("created_at", DESCENDING)])

    # At most one active setting, enforced by the database itself.
    await db[SITE_SETTINGS_COLLECTION].create_index(
        "is_active",
        unique=True,
        partialFilterExpression={"is_active": True},
        name="single_active_setting",
    )


def create_store() -> MongoStore:
    return MongoStore(settings.MONGODB_URL, settings.MONGODB_DB_NAME)


def get_mongo_store(request: Request) -> MongoStore:
    return request.app.state.mongo


def get_mongo_db(request: Request) -> AsyncIOMotorDatabase:
    return get_mongo_store(request).db
