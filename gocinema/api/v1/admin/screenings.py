from uuid import UUID
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

from gocinema.db.session import get_db
from gocinema.api.deps import get_current_admin_user
from gocinema.core.config import settings
from gocinema.core.exceptions import ConflictError, NotFoundError
from gocinema.models.user import User
from gocinema.models.hall import Hall
from gocinema.models.movie import Movie
from gocinema.models.screening import Screening
from gocinema.models.ticket import Ticket, TicketStatus
from gocinema.schemas.common import DeleteResponse
from gocinema.schemas.screening import ScreeningCreate, ScreeningUpdate, Screening as ScreeningSchema
from gocinema.services.booking import SCREENING_NOT_FOUND
from gocinema.services.scheduling import ensure_hall_free
from gocinema.utils.dates import ensure_utc

router = APIRouter(prefix="/admin/screenings", tags=["Admin - Screenings"])

MOVIE_NOT_FOUND = "Ֆիլմը չի գտնվել"
HALL_NOT_FOUND = "Դահլիճը չի գտնվել"
HAS_TICKETS = "Այս ցուցադրության համար արդեն գոյություն ունեն տոմսեր: Չի կարելի ջնջել"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _require(db: Session, model, object_id: UUID, message: str):
    if db.query(model.id).filter(model.id == object_id).first() is None:
        raise NotFoundError(message)


def _load(db: Session, screening_id: UUID) -> Screening:
    screening = (
        db.query(Screening)
        .options(joinedload(Screening.movie), joinedload(Screening.hall))
        .filter(Screening.id == screening_id)
        .first()
    )
    if not screening:
        raise NotFoundError(SCREENING_NOT_FOUND)
    return screening


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


@router.get("/", response_model=List[ScreeningSchema])
def list_screenings(
    hall_id: Optional[UUID] = Query(None),
    movie_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """All screenings, past ones included."""
    query = db.query(Screening).options(joinedload(Screening.movie), joinedload(Screening.hall))
    if hall_id:
        query = query.filter(Screening.hall_id == hall_id)
    if movie_id:
        query = query.filter(Screening.movie_id == movie_id)
    return query.order_by(Screening.start_time).all()


@router.post("/", response_model=ScreeningSchema, status_code=status.HTTP_201_CREATED)
def create_screening(
    data: ScreeningCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    _require(db, Movie, data.movie_id, MOVIE_NOT_FOUND)
    _require(db, Hall, data.hall_id, HALL_NOT_FOUND)
    ensure_hall_free(db, data.hall_id, data.start_time, data.end_time)

    base_price = data.base_price if data.base_price is not None else Decimal(settings.DEFAULT_BASE_PRICE)
    screening = Screening(**data.model_dump(exclude={"base_price"}), base_price=base_price)
    db.add(screening)
    db.commit()
    return _load(db, screening.id)


@router.patch("/{screening_id}", response_model=ScreeningSchema)
def update_screening(
    screening_id: UUID,
    data: ScreeningUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    screening = _load(db, screening_id)
    update = data.model_dump(exclude_unset=True, exclude_none=True)
    if "movie_id" in update:
        _require(db, Movie, update["movie_id"], MOVIE_NOT_FOUND)
    if "hall_id" in update:
        _require(db, Hall, update["hall_id"], HALL_NOT_FOUND)

    # Re-check the slot with whatever the screening will look like after the update
    hall_id = update.get("hall_id", screening.hall_id)
    start_time = update.get("start_time", ensure_utc(screening.start_time))
    end_time = update.get("end_time", ensure_utc(screening.end_time))
    ensure_hall_free(db, hall_id, start_time, end_time, exclude_id=screening.id)

    for field, value in update.items():
        setattr(screening, field, value)
    db.commit()
    return _load(db, screening_id)


@router.delete("/{screening_id}", response_model=DeleteResponse)
def delete_screening(
    screening_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    screening = _load(db, screening_id)
    live = (
        db.query(Ticket.id)
        .filter(Ticket.screening_id == screening_id, Ticket.status != TicketStatus.cancelled)
        .first()
    )
    if live:
        raise ConflictError(HAS_TICKETS)

    # Cancelled tickets cascade-delete via the ORM relationship
    db.delete(screening)
    db.commit()
    return DeleteResponse(id=str(screening_id))
