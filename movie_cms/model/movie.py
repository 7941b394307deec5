from enum import Enum
from typing import List, Optional, Union

from pydantic import Field

from movie_cms.model.base import MongoModel


class MovieStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    BLOCKED = "blocked"


class MovieQuality(str, Enum):
    Q480P = "480p"
    Q720P = "720p"
    Q1080P = "1080p"
    Q4K = "4K"


SLUG_PATTERN = r"^[a-z0-9-]+$"
MIN_RATING = 0
MAX_RATING = 10


class Movie(MongoModel):
    title: str
    slug: str = Field(..., pattern=SLUG_PATTERN)
    description: str
    # Opaque numeric value, stored as given.
    release_date: Optional[Union[int, float]] = None
    release_year: Optional[Union[int, float]] = None
    duration: Optional[Union[int, float]] = Field(None, description="Duration in minutes")
    language: List[str] = Field(default_factory=list)
    poster: str
    quality: List[MovieQuality] = Field(default_factory=list)
    redirect_url: str
    rating: Union[int, float] = Field(0, ge=MIN_RATING, le=MAX_RATING)
    status: MovieStatus = MovieStatus.DRAFT
    is_trending: bool = False
