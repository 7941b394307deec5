from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from movie_cms.crud.movie_crud import MovieCRUD
from movie_cms.crud.notification_crud import NotificationFeed
from movie_cms.database import MOVIES_COLLECTION, get_mongo_db
from movie_cms.model.movie import Movie
from movie_cms.schemas.movie_schema import (
    DashboardResponse,
    MovieCreate,
    MovieDelete,
    MovieDeleteResponse,
    MovieListResponse,
    MovieMutationResponse,
    MovieOut,
    MovieResponse,
    MovieUpdate,
)
from movie_cms.schemas.notification_schemas import NotificationFeedResponse
from movie_cms.utils.auth.admin_auth import get_current_admin

router = APIRouter(prefix="/api/movie", tags=["Movies"])


def get_movie_crud(mdb=Depends(get_mongo_db)) -> MovieCRUD:
    return MovieCRUD(mdb[MOVIES_COLLECTION])


def _movie_out(movie: Movie) -> MovieOut:
    return MovieOut.model_validate(movie.model_dump())


@router.get("", response_model=MovieListResponse, summary="List, filter and paginate movies")
async def list_movies(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    is_trending: Optional[str] = Query(None, alias="isTrending"),
    language: Optional[str] = None,
    quality: Optional[str] = None,
    min_rating: Optional[str] = Query(None, alias="minRating"),
    year: Optional[str] = None,
    search: Optional[str] = None,
    crud: MovieCRUD = Depends(get_movie_crud),
):
    result = await crud.list_movies(
        page=page,
        limit=limit,
        status=status_filter,
        is_trending=is_trending,
        language=language,
        quality=quality,
        min_rating=min_rating,
        year=year,
        search=search,
    )
    return MovieListResponse(
        page=result["page"],
        limit=result["limit"],
        count=result["count"],
        has_more=result["has_more"],
        movies=[_movie_out(m) for m in result["movies"]],
    )


@router.get("/dashboard", response_model=DashboardResponse, summary="Admin dashboard stats")
async def dashboard(
    crud: MovieCRUD = Depends(get_movie_crud),
    admin: dict = Depends(get_current_admin),
):
    stats, recent = await crud.dashboard_stats()
    return DashboardResponse(stats=stats, recent_movies=recent)


@router.get("/notification", response_model=NotificationFeedResponse, summary="Latest releases as notifications")
async def notifications(crud: MovieCRUD = Depends(get_movie_crud)):
    feed = await NotificationFeed(crud).latest()
    # No read-state is stored, so every item counts as unread.
    return NotificationFeedResponse(total=len(feed), unread_count=len(feed), data=feed)


@router.get("/{id}", response_model=MovieResponse, summary="Fetch a single movie")
async def get_movie(id: str, crud: MovieCRUD = Depends(get_movie_crud)):
    movie = await crud.get_movie(id)
    return MovieResponse(movie=_movie_out(movie))


@router.post(
    "/create",
    response_model=MovieMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a movie (admin)",
)
async def create_movie(
    payload: MovieCreate,
    crud: MovieCRUD = Depends(get_movie_crud),
    admin: dict = Depends(get_current_admin),
):
    movie = await crud.create_movie(payload)
    return MovieMutationResponse(message="Movie created successfully", movie=_movie_out(movie))


@router.delete("/delete", response_model=MovieDeleteResponse, summary="Delete a movie by id in body (admin)")
async def delete_movie(
    payload: Optional[MovieDelete] = None,
    crud: MovieCRUD = Depends(get_movie_crud),
    admin: dict = Depends(get_current_admin),
):
    movie = await crud.delete_movie(payload.id if payload else None)
    return MovieDeleteResponse(message=f"{movie.title} deleted successfully", movie_id=movie.id)


@router.patch("/update/{id}", response_model=MovieMutationResponse, summary="Partially update a movie (admin)")
async def update_movie(
    id: str,
    payload: MovieUpdate,
    crud: MovieCRUD = Depends(get_movie_crud),
    admin: dict = Depends(get_current_admin),
):
    movie = await crud.update_movie(id, payload)
    return MovieMutationResponse(message="Movie updated successfully", movie=_movie_out(movie))
