from fastapi import APIRouter, Depends, status

from movie_cms.crud.site_setting_crud import SiteSettingCRUD
from movie_cms.database import SITE_SETTINGS_COLLECTION, get_mongo_db
from movie_cms.model.site_setting import SiteSetting
from movie_cms.schemas import MessageResponse
from movie_cms.schemas.site_setting_schema import (
    SiteSettingCreate,
    SiteSettingListResponse,
    SiteSettingMutationResponse,
    SiteSettingOut,
    SiteSettingResponse,
    SiteSettingUpdate,
)
from movie_cms.utils.auth.admin_auth import get_current_admin

router = APIRouter(prefix="/api/settings", tags=["Site settings"])


def get_site_setting_crud(mdb=Depends(get_mongo_db)) -> SiteSettingCRUD:
    return SiteSettingCRUD(mdb[SITE_SETTINGS_COLLECTION])


def _setting_out(setting: SiteSetting) -> SiteSettingOut:
    return SiteSettingOut.model_validate(setting.model_dump())


# ---------------- PUBLIC ----------------

@router.get("/active", response_model=SiteSettingResponse, summary="Currently active site setting")
async def get_active_setting(crud: SiteSettingCRUD = Depends(get_site_setting_crud)):
    setting = await crud.get_active()
    return SiteSettingResponse(data=_setting_out(setting))


# ---------------- ADMIN ----------------

@router.get("", response_model=SiteSettingListResponse, summary="All site settings, newest first")
async def list_settings(
    crud: SiteSettingCRUD = Depends(get_site_setting_crud),
    admin: dict = Depends(get_current_admin),
):
    settings = await crud.list_all()
    return SiteSettingListResponse(count=len(settings), data=[_setting_out(s) for s in settings])


@router.post(
    "",
    response_model=SiteSettingMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a site setting (always inactive)",
)
async def create_setting(
    payload: SiteSettingCreate,
    crud: SiteSettingCRUD = Depends(get_site_setting_crud),
    admin: dict = Depends(get_current_admin),
):
    setting = await crud.create_setting(payload, updated_by=admin.get("email"))
    return SiteSettingMutationResponse(message="Site setting created successfully", data=_setting_out(setting))


@router.put("/{id}", response_model=SiteSettingMutationResponse, summary="Update a site setting")
async def update_setting(
    id: str,
    payload: SiteSettingUpdate,
    crud: SiteSettingCRUD = Depends(get_site_setting_crud),
    admin: dict = Depends(get_current_admin),
):
    setting = await crud.update_setting(id, payload, updated_by=admin.get("email"))
    return SiteSettingMutationResponse(message="Site setting updated successfully", data=_setting_out(setting))


@router.put("/{id}/activate", response_model=SiteSettingMutationResponse, summary="Make this the only active setting")
async def activate_setting(
    id: str,
    crud: SiteSettingCRUD = Depends(get_site_setting_crud),
    admin: dict = Depends(get_current_admin),
):
    setting = await crud.activate(id)
    return SiteSettingMutationResponse(message="Site setting activated successfully", data=_setting_out(setting))


@router.put("/{id}/deactivate", response_model=SiteSettingMutationResponse, summary="Switch a site setting off")
async def deactivate_setting(
    id: str,
    crud: SiteSettingCRUD = Depends(get_site_setting_crud),
    admin: dict = Depends(get_current_admin),
):
    setting = await crud.deactivate(id)
    return SiteSettingMutationResponse(message="Site setting deactivated successfully", data=_setting_out(setting))


@router.delete("/{id}", response_model=MessageResponse, summary="Delete an inactive site setting")
async def delete_setting(
    id: str,
    crud: SiteSettingCRUD = Depends(get_site_setting_crud),
    admin: dict = Depends(get_current_admin),
):
    await crud.delete_setting(id)
    return MessageResponse(message="Site setting deleted successfully")
