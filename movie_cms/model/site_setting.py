from typing import Optional

from movie_cms.model.base import MongoModel


class SiteSetting(MongoModel):
    site_title: str
    site_subtitle: str = ""
    site_heading: Optional[str] = None
    avatar_url: str = ""
    remember_website_name: Optional[str] = None
    current_domain: Optional[str] = None
    is_active: bool = False
    last_updated_by: str = "admin"
