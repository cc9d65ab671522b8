from uuid import UUID
from typing import List, Optional
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload

from gocinema.db.session import get_db
from gocinema.core.exceptions import NotFoundError
from gocinema.models.screening import Screening
from gocinema.models.seat import Seat
from gocinema.schemas.hall import SeatMapSeat
from gocinema.schemas.screening import Screening as ScreeningSchema, ScreeningDetail
from gocinema.services.booking import SCREENING_NOT_FOUND, taken_seat_ids
from gocinema.utils.dates import ensure_utc, utcnow

router = APIRouter(prefix="/screenings", tags=["Screenings"])


@router.get("/", response_model=List[ScreeningSchema])
def list_screenings(
    date_from: Optional[datetime] = Query(None, description="Defaults to now"),
    date_to: Optional[datetime] = Query(None),
    movie_id: Optional[UUID] = Query(None),
    hall_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db),
):
    """Schedule: screenings starting within [date_from, date_to], soonest first."""
    query = db.query(Screening).options(
        joinedload(Screening.movie), joinedload(Screening.hall)
    ).filter(Screening.start_time >= (ensure_utc(date_from) or utcnow()))
    if date_to:
        query = query.filter(Screening.start_time <= ensure_utc(date_to))
    if movie_id:
        query = query.filter(Screening.movie_id == movie_id)
    if hall_id:
        query = query.filter(Screening.hall_id == hall_id)
    return query.order_by(Screening.start_time).all()


@router.get("/{screening_id}", response_model=ScreeningDetail)
def get_screening(screening_id: UUID, db: Session = Depends(get_db)):
    """Screening with the hall's seat map; `is_taken` marks seats held by a live ticket."""
    screening = (
        db.query(Screening)
        .options(joinedload(Screening.movie), joinedload(Screening.hall))
        .filter(Screening.id == screening_id)
        .first()
    )
    if not screening:
        raise NotFoundError(SCREENING_NOT_FOUND)

    seats = (
        db.query(Seat)
        .filter(Seat.hall_id == screening.hall_id)
        .order_by(Seat.row, Seat.number)
        .all()
    )
    taken = taken_seat_ids(db, screening.id)

    detail = ScreeningDetail.model_validate(screening)
    detail.seats = [
        SeatMapSeat(
            id=seat.id,
            row=seat.row,
            number=seat.number,
            seat_type=seat.seat_type,
            is_taken=seat.id in taken,
        )
        for seat in seats
    ]
    return detail
