from uuid import UUID
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from gocinema.db.session import get_db
from gocinema.core.exceptions import NotFoundError
from gocinema.models.movie import Movie, Premiere
from gocinema.models.screening import Screening
from gocinema.schemas.common import PaginatedResponse
from gocinema.schemas.movie import (
    Movie as MovieSchema,
    MovieDetail,
    MovieScreening,
    Premiere as PremiereSchema,
)
from gocinema.utils.dates import utcnow

router = APIRouter(prefix="/movies", tags=["Movies"])
premieres_router = APIRouter(prefix="/premieres", tags=["Premieres"])

MOVIE_NOT_FOUND = "Ֆիլմը չի գտնվել"


def load_movie_detail(db: Session, movie: Movie) -> MovieDetail:
    """Movie with its screenings that haven't started yet."""
    upcoming = (
        db.query(Screening)
        .filter(Screening.movie_id == movie.id, Screening.start_time >= utcnow())
        .order_by(Screening.start_time)
        .all()
    )
    detail = MovieDetail.model_validate(movie)
    detail.screenings = [MovieScreening.model_validate(s) for s in upcoming]
    return detail


@router.get("/", response_model=PaginatedResponse[MovieSchema])
def list_movies(
    genre: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Case-insensitive title search"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Active movies, newest first."""
    query = db.query(Movie).filter(Movie.is_active == True)
    if genre:
        query = query.filter(Movie.genre == genre)
    if search:
        query = query.filter(Movie.title.ilike(f"%{search}%"))

    total = query.count()
    movies = (
        query.order_by(Movie.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return PaginatedResponse(
        data=[MovieSchema.model_validate(m) for m in movies],
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit),
    )


@router.get("/{id_or_slug}", response_model=MovieDetail)
def get_movie(id_or_slug: str, db: Session = Depends(get_db)):
    """Look a movie up by id or by slug."""
    try:
        movie = db.query(Movie).filter(Movie.id == UUID(id_or_slug)).first()
    except ValueError:
        movie = db.query(Movie).filter(Movie.slug == id_or_slug).first()
    if not movie or not movie.is_active:
        raise NotFoundError(MOVIE_NOT_FOUND)
    return load_movie_detail(db, movie)


@premieres_router.get("/", response_model=List[PremiereSchema])
def list_upcoming_premieres(db: Session = Depends(get_db)):
    return (
        db.query(Premiere)
        .filter(Premiere.is_active == True, Premiere.premiere_date >= utcnow())
        .order_by(Premiere.premiere_date)
        .all()
    )
