from uuid import UUID
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

from gocinema.db.session import get_db
from gocinema.api.deps import get_current_admin_user
from gocinema.api.v1.public.movies import MOVIE_NOT_FOUND, load_movie_detail
from gocinema.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from gocinema.models.user import User
from gocinema.models.movie import Movie, Premiere
from gocinema.models.screening import Screening
from gocinema.models.ticket import Ticket, TicketStatus
from gocinema.schemas.common import DeleteResponse, PaginatedResponse
from gocinema.schemas.movie import (
    MovieCreate,
    MovieUpdate,
    Movie as MovieSchema,
    MovieDetail,
    PremiereCreate,
    PremiereUpdate,
    Premiere as PremiereSchema,
)
from gocinema.utils.slug import generate_slug, make_unique_slug, slug_taken

router = APIRouter(prefix="/admin/movies", tags=["Admin - Movies"])
premiere_router = APIRouter(prefix="/admin/premieres", tags=["Admin - Premieres"])

SLUG_TAKEN = "Այս slug-ով ֆիլմ արդեն գոյություն ունի"
MOVIE_HAS_TICKETS = "Ֆիլմի ցուցադրությունների համար արդեն գոյություն ունեն տոմսեր: Չի կարելի ջնջել"
PREMIERE_NOT_FOUND = "Պրեմիերան չի գտնվել"
INVALID_SLUG = "Slug-ը պետք է պարունակի տառեր կամ թվեր"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_movie(db: Session, movie_id: UUID) -> Movie:
    movie = db.query(Movie).filter(Movie.id == movie_id).first()
    if not movie:
        raise NotFoundError(MOVIE_NOT_FOUND)
    return movie


def _explicit_slug(db: Session, raw: str, exclude_id: Optional[UUID] = None) -> str:
    """An admin-chosen slug must be free; it is not silently suffixed."""
    slug = generate_slug(raw)
    if not slug:
        raise InvalidInputError(INVALID_SLUG)
    if slug_taken(db, slug, exclude_id=exclude_id):
        raise ConflictError(SLUG_TAKEN)
    return slug


# ---------------------------------------------------------------------------
# Movies
# ---------------------------------------------------------------------------


@router.get("/", response_model=PaginatedResponse[MovieSchema])
def list_movies(
    is_active: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    query = db.query(Movie)
    if is_active is not None:
        query = query.filter(Movie.is_active == is_active)

    total = query.count()
    movies = query.order_by(Movie.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return PaginatedResponse(
        data=[MovieSchema.model_validate(m) for m in movies],
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit),
    )


@router.get("/{movie_id}", response_model=MovieDetail)
def get_movie(
    movie_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    return load_movie_detail(db, _get_movie(db, movie_id))


@router.post("/", response_model=MovieSchema, status_code=status.HTTP_201_CREATED)
def create_movie(
    data: MovieCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    if data.slug:
        slug = _explicit_slug(db, data.slug)
    else:
        slug = make_unique_slug(db, data.title)

    movie = Movie(**data.model_dump(exclude={"slug"}), slug=slug)
    db.add(movie)
    db.commit()
    db.refresh(movie)
    return movie


@router.patch("/{movie_id}", response_model=MovieSchema)
def update_movie(
    movie_id: UUID,
    data: MovieUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    movie = _get_movie(db, movie_id)
    update = data.model_dump(exclude_unset=True)
    if update.get("slug"):
        update["slug"] = _explicit_slug(db, update["slug"], exclude_id=movie.id)
    else:
        update.pop("slug", None)

    for field, value in update.items():
        setattr(movie, field, value)
    db.commit()
    db.refresh(movie)
    return movie


@router.delete("/{movie_id}", response_model=DeleteResponse)
def delete_movie(
    movie_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    movie = _get_movie(db, movie_id)
    live = (
        db.query(Ticket.id)
        .join(Screening, Ticket.screening_id == Screening.id)
        .filter(Screening.movie_id == movie_id, Ticket.status != TicketStatus.cancelled)
        .first()
    )
    if live:
        raise ConflictError(MOVIE_HAS_TICKETS)

    # Screenings, their cancelled tickets and premieres cascade-delete
    db.delete(movie)
    db.commit()
    return DeleteResponse(id=str(movie_id))


# ---------------------------------------------------------------------------
# Premieres
# ---------------------------------------------------------------------------


def _get_premiere(db: Session, premiere_id: UUID) -> Premiere:
    premiere = (
        db.query(Premiere)
        .options(joinedload(Premiere.movie))
        .filter(Premiere.id == premiere_id)
        .first()
    )
    if not premiere:
        raise NotFoundError(PREMIERE_NOT_FOUND)
    return premiere


@premiere_router.get("/", response_model=List[PremiereSchema])
def list_premieres(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    return (
        db.query(Premiere)
        .options(joinedload(Premiere.movie))
        .order_by(Premiere.premiere_date.desc())
        .all()
    )


@premiere_router.get("/{premiere_id}", response_model=PremiereSchema)
def get_premiere(
    premiere_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    return _get_premiere(db, premiere_id)


@premiere_router.post("/", response_model=PremiereSchema, status_code=status.HTTP_201_CREATED)
def create_premiere(
    data: PremiereCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    _get_movie(db, data.movie_id)
    premiere = Premiere(**data.model_dump())
    db.add(premiere)
    db.commit()
    return _get_premiere(db, premiere.id)


@premiere_router.patch("/{premiere_id}", response_model=PremiereSchema)
def update_premiere(
    premiere_id: UUID,
    data: PremiereUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    premiere = _get_premiere(db, premiere_id)
    update = data.model_dump(exclude_unset=True, exclude_none=True)
    if "movie_id" in update:
        _get_movie(db, update["movie_id"])
    for field, value in update.items():
        setattr(premiere, field, value)
    db.commit()
    return _get_premiere(db, premiere_id)


@premiere_router.delete("/{premiere_id}", response_model=DeleteResponse)
def delete_premiere(
    premiere_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    premiere = _get_premiere(db, premiere_id)
    db.delete(premiere)
    db.commit()
    return DeleteResponse(id=str(premiere_id))
