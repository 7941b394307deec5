"""
Site settings and the single-active-record rule.

A setting is always created inactive. Activating one first switches every
other active record off and then switches the target on; the partial unique
index on `is_active` (see `database.ensure_indexes`) rejects the second write
if a concurrent activation got there first, so two records can never be
active together. An active record cannot be deleted.
"""

import logging
from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorCollection

from movie_cms.crud.mongo_crud import NEWEST_FIRST, MongoCRUD, to_object_id
from movie_cms.model.site_setting import SiteSetting
from movie_cms.schemas.site_setting_schema import SiteSettingCreate, SiteSettingUpdate
from movie_cms.utils.exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_EDITOR = "admin"
ACTIVE_DELETE_MESSAGE = "Active site setting cannot be deleted. Deactivate it first."

# Fields whose stored default is an empty string rather than null.
_EMPTY_STRING_FIELDS = {"site_subtitle", "avatar_url"}


def _clean_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = {}
    for field, value in data.items():
        if isinstance(value, str):
            value = value.strip()
        if value is None and field in _EMPTY_STRING_FIELDS:
            value = ""
        cleaned[field] = value
    return cleaned


class SiteSettingCRUD(MongoCRUD[SiteSetting]):
    def __init__(self, collection: AsyncIOMotorCollection):
        super().__init__(
            collection,
            SiteSetting,
            label="site setting",
            conflict_message="Another site setting was activated at the same time, please retry",
        )

    async def create_setting(self, payload: SiteSettingCreate, updated_by: str = DEFAULT_EDITOR) -> SiteSetting:
        data = _clean_fields(payload.model_dump())
        if not data.get("site_title"):
            raise ValidationError("siteTitle is required")

        setting = SiteSetting(
            **data,
            is_active=False,
            last_updated_by=updated_by or DEFAULT_EDITOR,
        )
        created = await self.create(setting)
        logger.info("site_setting.created id=%s", created.id)
        return created

    async def update_setting(
        self,
        id: Any,
        payload: SiteSettingUpdate,
        updated_by: str = DEFAULT_EDITOR,
    ) -> SiteSetting:
        oid = to_object_id(id, self.label)
        data = _clean_fields(payload.model_dump(exclude_unset=True))
        if "site_title" in data and not data["site_title"]:
            raise ValidationError("siteTitle cannot be empty")

        data["last_updated_by"] = updated_by or DEFAULT_EDITOR
        updated = await self.update(oid, data)
        logger.info("site_setting.updated id=%s fields=%s", updated.id, sorted(data))
        return updated

    async def activate(self, id: Any) -> SiteSetting:
        oid = to_object_id(id, self.label)
        await self.get(oid)

        switched_off = await self.update_many({"is_active": True, "_id": {"$ne": oid}}, {"is_active": False})
        activated = await self.update(oid, {"is_active": True})
        logger.info("site_setting.activated id=%s deactivated=%s", activated.id, switched_off)
        return activated

    async def deactivate(self, id: Any) -> SiteSetting:
        deactivated = await self.update(id, {"is_active": False})
        logger.info("site_setting.deactivated id=%s", deactivated.id)
        return deactivated

    async def delete_setting(self, id: Any) -> SiteSetting:
        oid = to_object_id(id, self.label)
        try:
            # Conditional delete: never removes a record that is active at write time.
            deleted = await self.remove(oid, extra_filters={"is_active": {"$ne": True}})
        except NotFoundError:
            await self.get(oid)
            raise ConflictError(ACTIVE_DELETE_MESSAGE)
        logger.info("site_setting.deleted id=%s", deleted.id)
        return deleted

    async def get_active(self) -> SiteSetting:
        setting = await self.find_one({"is_active": True})
        if setting is None:
            raise NotFoundError("No active site setting found")
        return setting

    async def list_all(self) -> List[SiteSetting]:
        return await self.get_all(sort=NEWEST_FIRST)
