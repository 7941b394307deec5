from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import Field

from . import APIResponse, ORMModel


# Request bodies stay loosely typed: coercion and validation happen in the
# movie CRUD so that missing/invalid input produces the API's own messages.
class MovieCreate(ORMModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    release_date: Any = None
    release_year: Any = None
    duration: Any = None
    language: Any = None
    poster: Optional[str] = None
    quality: Any = None
    redirect_url: Optional[str] = None
    rating: Any = None
    status: Optional[str] = None
    is_trending: Any = None


class MovieUpdate(MovieCreate):
    """Same fields as create; only keys present in the body are applied."""


class MovieDelete(ORMModel):
    id: Optional[str] = None


class MovieOut(ORMModel):
    id: str = Field(..., alias="_id")
    title: str
    slug: str
    description: str
    release_date: Optional[Union[int, float]] = None
    release_year: Optional[Union[int, float]] = None
    duration: Optional[Union[int, float]] = None
    language: List[str] = []
    poster: str
    quality: List[str] = []
    redirect_url: str
    rating: Union[int, float] = 0
    status: str
    is_trending: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MovieSummary(ORMModel):
    id: str = Field(..., alias="_id")
    title: str
    slug: str
    poster: str
    status: str
    rating: Union[int, float] = 0
    is_trending: bool = False
    created_at: Optional[datetime] = None


class MovieListResponse(APIResponse):
    page: int
    limit: int
    count: int
    has_more: bool
    movies: List[MovieOut]


class MovieResponse(APIResponse):
    movie: MovieOut


class MovieMutationResponse(APIResponse):
    message: str
    movie: MovieOut


class MovieDeleteResponse(APIResponse):
    message: str
    movie_id: str


class DashboardStats(ORMModel):
    total_movies: int = 0
    published_movies: int = 0
    draft_movies: int = 0
    blocked_movies: int = 0


class DashboardResponse(APIResponse):
    stats: DashboardStats
    recent_movies: List[MovieSummary]
