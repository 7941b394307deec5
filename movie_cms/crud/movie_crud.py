import logging
import math
import re
from typing import Any, Dict, List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import DESCENDING

from movie_cms.crud.mongo_crud import NEWEST_FIRST, MongoCRUD, to_object_id
from movie_cms.model.movie import (
    MAX_RATING,
    MIN_RATING,
    SLUG_PATTERN,
    Movie,
    MovieQuality,
    MovieStatus,
)
from movie_cms.schemas.movie_schema import DashboardStats, MovieCreate, MovieSummary, MovieUpdate
from movie_cms.utils.exceptions import ConflictError, ValidationError
from movie_cms.utils.helper import fits_int64, normalize_string_set, parse_int, to_bool, to_number

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 50
RECENT_MOVIES_LIMIT = 5

STATUS_VALUES = [s.value for s in MovieStatus]
QUALITY_VALUES = [q.value for q in MovieQuality]

# (field name, name on the wire)
REQUIRED_FIELDS = (
    ("title", "title"),
    ("slug", "slug"),
    ("description", "description"),
    ("poster", "poster"),
    ("redirect_url", "redirectUrl"),
)
NUMERIC_FIELDS = (
    ("release_date", "releaseDate"),
    ("release_year", "releaseYear"),
    ("duration", "duration"),
)

TRENDING_FIRST = [("is_trending", DESCENDING)] + NEWEST_FIRST

SUMMARY_PROJECTION = {
    "title": 1,
    "slug": 1,
    "poster": 1,
    "status": 1,
    "rating": 1,
    "is_trending": 1,
    "created_at": 1,
}

_slug_re = re.compile(SLUG_PATTERN)


# ---------------- QUERY BUILDING ----------------

def parse_pagination(page: Any = None, limit: Any = None) -> Tuple[int, int]:
    """Page is at least 1; limit falls back to 10 and is clamped into [1, 50]."""
    page_num = max(parse_int(page) or DEFAULT_PAGE, 1)
    limit_num = parse_int(limit) or DEFAULT_LIMIT
    limit_num = max(1, min(limit_num, MAX_LIMIT))
    return page_num, limit_num


def _query_number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    # Whole numbers beyond int64 stay doubles so the filter still encodes.
    return int(number) if number.is_integer() and fits_int64(number) else number


def build_movie_filter(
    status: Optional[str] = None,
    is_trending: Optional[str] = None,
    language: Optional[str] = None,
    quality: Optional[str] = None,
    min_rating: Any = None,
    year: Any = None,
    search: Optional[str] = None,
) -> Dict[str, Any]:
    """Conjunction of the recognised filters; anything invalid is left out."""
    match: Dict[str, Any] = {}

    if status and status in STATUS_VALUES:
        match["status"] = status

    if is_trending == "true":
        match["is_trending"] = True
    elif is_trending == "false":
        match["is_trending"] = False

    if language:
        match["language"] = {"$in": [language]}
    if quality:
        match["quality"] = {"$in": [quality]}

    rating = _query_number(min_rating)
    if rating is not None:
        match["rating"] = {"$gte": rating}

    release_year = _query_number(year)
    if release_year is not None:
        match["release_year"] = release_year

    if search:
        match["title"] = {"$regex": re.escape(search), "$options": "i"}

    return match


def build_movie_sort(is_trending: Optional[str] = None) -> List[Tuple[str, int]]:
    return list(TRENDING_FIRST) if is_trending == "true" else list(NEWEST_FIRST)


def clean_slug(slug: str) -> str:
    value = slug.strip()
    if not _slug_re.match(value):
        raise ValidationError("Invalid slug format (lowercase & hyphen only)")
    return value.lower()


# ---------------- FIELD COERCION ----------------

def _clean_status(value: Any) -> str:
    if value not in STATUS_VALUES:
        raise ValidationError(f"Invalid status, expected one of: {', '.join(STATUS_VALUES)}")
    return value


def _clean_quality(value: Any) -> List[str]:
    qualities = normalize_string_set(value)
    invalid = [q for q in qualities if q not in QUALITY_VALUES]
    if invalid:
        raise ValidationError(
            f"Invalid quality: {', '.join(invalid)}. Allowed: {', '.join(QUALITY_VALUES)}"
        )
    return qualities


def _clean_rating(value: Any):
    rating = to_number(value, "rating")
    if rating is None:
        return 0
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationError(f"rating must be between {MIN_RATING} and {MAX_RATING}")
    return rating


class MovieCRUD(MongoCRUD[Movie]):
    def __init__(self, collection: AsyncIOMotorCollection):
        super().__init__(
            collection,
            Movie,
            label="movie",
            conflict_message="Movie with this slug already exists",
        )

    # -------- LIST --------
    async def list_movies(
        self,
        page: Any = None,
        limit: Any = None,
        status: Optional[str] = None,
        is_trending: Optional[str] = None,
        language: Optional[str] = None,
        quality: Optional[str] = None,
        min_rating: Any = None,
        year: Any = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        page_num, limit_num = parse_pagination(page, limit)
        match = build_movie_filter(
            status=status,
            is_trending=is_trending,
            language=language,
            quality=quality,
            min_rating=min_rating,
            year=year,
            search=search,
        )
        movies = await self.get_all(
            filters=match,
            sort=build_movie_sort(is_trending),
            skip=(page_num - 1) * limit_num,
            limit=limit_num,
        )
        return {
            "page": page_num,
            "limit": limit_num,
            "count": len(movies),
            # A full page is taken to mean there is more; exact multiples report one extra page.
            "has_more": len(movies) == limit_num,
            "movies": movies,
        }

    # -------- CREATE --------
    async def create_movie(self, payload: MovieCreate) -> Movie:
        data = payload.model_dump()

        missing = [wire for field, wire in REQUIRED_FIELDS if not (data.get(field) or "").strip()]
        if missing:
            raise ValidationError(
                "Required fields missing",
                extra={"required": [wire for _, wire in REQUIRED_FIELDS]},
            )

        slug = clean_slug(data["slug"])
        if await self.find_one({"slug": slug}):
            raise ConflictError(self.conflict_message)

        movie = Movie(
            title=data["title"].strip(),
            slug=slug,
            description=data["description"].strip(),
            release_date=to_number(data.get("release_date"), "releaseDate"),
            release_year=to_number(data.get("release_year"), "releaseYear"),
            duration=to_number(data.get("duration"), "duration"),
            language=normalize_string_set(data.get("language")),
            poster=data["poster"].strip(),
            quality=_clean_quality(data.get("quality")),
            redirect_url=data["redirect_url"].strip(),
            rating=_clean_rating(data.get("rating")),
            status=_clean_status(data.get("status") or MovieStatus.DRAFT.value),
            is_trending=to_bool(data.get("is_trending")),
        )
        created = await self.create(movie)
        logger.info("movie.created id=%s slug=%s", created.id, created.slug)
        return created

    # -------- UPDATE --------
    async def update_movie(self, id: Any, payload: MovieUpdate) -> Movie:
        oid = to_object_id(id, self.label)
        data = payload.model_dump(exclude_unset=True)
        update_data: Dict[str, Any] = {}

        for field, wire in REQUIRED_FIELDS:
            if field not in data or field == "slug":
                continue
            value = data[field]
            if value is None or not value.strip():
                raise ValidationError(f"{wire} cannot be empty")
            update_data[field] = value.strip()

        if "slug" in data:
            if not data["slug"] or not data["slug"].strip():
                raise ValidationError("slug cannot be empty")
            slug = clean_slug(data["slug"])
            if await self.find_one({"slug": slug, "_id": {"$ne": oid}}):
                raise ConflictError(self.conflict_message)
            update_data["slug"] = slug

        for field, wire in NUMERIC_FIELDS:
            if field in data:
                update_data[field] = to_number(data[field], wire)

        if "language" in data:
            update_data["language"] = normalize_string_set(data["language"])
        if "quality" in data:
            update_data["quality"] = _clean_quality(data["quality"])
        if "rating" in data:
            update_data["rating"] = _clean_rating(data["rating"])
        if "status" in data:
            update_data["status"] = _clean_status(data["status"])
        if "is_trending" in data:
            update_data["is_trending"] = to_bool(data["is_trending"])

        updated = await self.update(oid, update_data)
        logger.info("movie.updated id=%s fields=%s", updated.id, sorted(update_data))
        return updated

    # -------- DELETE --------
    async def delete_movie(self, id: Optional[str]) -> Movie:
        if not id:
            raise ValidationError("Movie id is required in body")
        deleted = await self.remove(id)
        logger.info("movie.deleted id=%s slug=%s", deleted.id, deleted.slug)
        return deleted

    # -------- GET ONE --------
    async def get_movie(self, id: Any) -> Movie:
        # Returned regardless of status; there is no public/preview split.
        return await self.get(id)

    # -------- DASHBOARD --------
    async def dashboard_stats(self) -> Tuple[DashboardStats, List[MovieSummary]]:
        pipeline = [
            {
                "$facet": {
                    "statusCounts": [
                        {"$group": {"_id": "$status", "count": {"$sum": 1}}},
                    ],
                    "totalMovies": [
                        {"$count": "total"},
                    ],
                    "recentMovies": [
                        {"$sort": dict(NEWEST_FIRST)},
                        {"$limit": RECENT_MOVIES_LIMIT},
                        {"$project": SUMMARY_PROJECTION},
                    ],
                }
            }
        ]
        rows = await self.aggregate(pipeline)
        result = rows[0] if rows else {}

        total = result.get("totalMovies") or []
        stats = DashboardStats(total_movies=total[0]["total"] if total else 0)
        for item in result.get("statusCounts", []):
            if item["_id"] == MovieStatus.PUBLISHED.value:
                stats.published_movies = item["count"]
            elif item["_id"] == MovieStatus.DRAFT.value:
                stats.draft_movies = item["count"]
            elif item["_id"] == MovieStatus.BLOCKED.value:
                stats.blocked_movies = item["count"]

        recent = [
            MovieSummary.model_validate({**doc, "_id": str(doc["_id"])})
            for doc in result.get("recentMovies", [])
        ]
        return stats, recent

    # -------- RECENT PUBLISHED --------
    async def recent_published(self, limit: int) -> List[Movie]:
        return await self.get_all(
            filters={"status": MovieStatus.PUBLISHED.value},
            sort=NEWEST_FIRST,
            limit=limit,
        )
