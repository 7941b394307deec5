from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from . import APIResponse, ORMModel


class NotificationType(str, Enum):
    TRENDING = "trending"
    MOVIE = "movie"


class NotificationOut(ORMModel):
    id: str = Field(..., description="Movie ObjectId as string")
    title: str
    subtitle: str
    link: str
    time: str = Field(..., description="Relative time, e.g. '2 days ago'")
    is_seen: bool = False
    type: NotificationType
    created_at: Optional[datetime] = None


class NotificationFeedResponse(APIResponse):
    total: int
    unread_count: int
    data: List[NotificationOut]
