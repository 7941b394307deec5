from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from . import APIResponse, ORMModel


class SiteSettingCreate(ORMModel):
    site_title: Optional[str] = None
    site_subtitle: Optional[str] = None
    site_heading: Optional[str] = None
    avatar_url: Optional[str] = None
    remember_website_name: Optional[str] = None
    current_domain: Optional[str] = None


class SiteSettingUpdate(SiteSettingCreate):
    """isActive is deliberately absent: activation has its own route."""


class SiteSettingOut(ORMModel):
    id: str = Field(..., alias="_id")
    site_title: str
    site_subtitle: str = ""
    site_heading: Optional[str] = None
    avatar_url: str = ""
    remember_website_name: Optional[str] = None
    current_domain: Optional[str] = None
    is_active: bool = False
    last_updated_by: str = "admin"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SiteSettingResponse(APIResponse):
    data: SiteSettingOut


class SiteSettingMutationResponse(APIResponse):
    message: str
    data: SiteSettingOut


class SiteSettingListResponse(APIResponse):
    count: int
    data: List[SiteSettingOut]
