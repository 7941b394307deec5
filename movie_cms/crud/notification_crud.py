from datetime import datetime
from typing import List, Optional

from movie_cms.crud.movie_crud import MovieCRUD
from movie_cms.model.movie import Movie
from movie_cms.schemas.notification_schemas import NotificationOut, NotificationType
from movie_cms.utils.helper import time_ago, to_utc

FEED_SIZE = 10
FALLBACK_SUBTITLE = "Now available for download"


def movie_to_notification(movie: Movie, now: Optional[datetime] = None) -> NotificationOut:
    created_at = to_utc(movie.created_at)
    year = created_at.year if created_at else ""
    languages = " + ".join(movie.language)
    qualities = " / ".join(movie.quality)

    return NotificationOut(
        id=movie.id,
        title=f"{movie.title} ({year}) {languages}".strip(),
        subtitle=f"Download now available in {qualities}" if qualities else FALLBACK_SUBTITLE,
        link=movie.redirect_url,
        time=time_ago(created_at, now) if created_at else "Just now",
        is_seen=False,  # no per-user read state
        type=NotificationType.TRENDING if movie.is_trending else NotificationType.MOVIE,
        created_at=created_at,
    )


class NotificationFeed:
    """Derives the public notification feed from recently published movies."""

    def __init__(self, movies: MovieCRUD):
        self.movies = movies

    async def latest(self, now: Optional[datetime] = None) -> List[NotificationOut]:
        movies = await self.movies.recent_published(limit=FEED_SIZE)
        return [movie_to_notification(movie, now) for movie in movies]
