from uuid import UUID
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gocinema.db.session import get_db
from gocinema.api.deps import get_current_admin_user
from gocinema.core.exceptions import ConflictError, InvalidInputError, NotFoundError, REQUIRED_FIELDS
from gocinema.models.user import User
from gocinema.models.hall import Hall
from gocinema.models.seat import Seat
from gocinema.models.ticket import Ticket, ACTIVE_TICKET_STATUSES
from gocinema.schemas.common import DeleteResponse
from gocinema.schemas.hall import (
    Hall as HallSchema,
    HallCreate,
    SeatCreate,
    SeatUpdate,
    Seat as SeatSchema,
    SeatBulkCreate,
    SeatBulkCreateResponse,
)

seats_router = APIRouter(prefix="/admin/halls", tags=["Admin - Halls & Seats"])
seat_router = APIRouter(prefix="/admin/seats", tags=["Admin - Halls & Seats"])

HALL_NOT_FOUND = "Դահլիճը չի գտնվել"
SEAT_NOT_FOUND = "Նստատեղը չի գտնվել"
SEAT_EXISTS = "Նստատեղ {row}{number} արդեն գոյություն ունի"
ALL_SEATS_EXIST = "Բոլոր նստատեղերը արդեն գոյություն ունեն"
SEAT_HAS_TICKETS = "Նստատեղը չի կարող ջնջվել, քանի որ ունի ակտիվ տոմսեր"
HALL_HAS_TICKETS = "Որոշ նստատեղեր ունեն ակտիվ տոմսեր և չեն կարող ջնջվել"
BULK_CREATED = "Ստեղծվեց {count} նստատեղ"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_hall(db: Session, hall_id: UUID) -> Hall:
    hall = db.query(Hall).filter(Hall.id == hall_id).first()
    if not hall:
        raise NotFoundError(HALL_NOT_FOUND)
    return hall


def _recount_capacity(db: Session, hall: Hall) -> None:
    """Hall capacity always equals its number of seats."""
    db.flush()
    hall.capacity = db.query(func.count(Seat.id)).filter(Seat.hall_id == hall.id).scalar()


def _seat_exists(db: Session, hall_id: UUID, row: str, number: int, exclude_id: UUID = None) -> bool:
    query = db.query(Seat.id).filter(Seat.hall_id == hall_id, Seat.row == row, Seat.number == number)
    if exclude_id is not None:
        query = query.filter(Seat.id != exclude_id)
    return query.first() is not None


def _has_active_tickets(db: Session, *seat_filters) -> bool:
    return (
        db.query(Ticket.id)
        .join(Seat, Ticket.seat_id == Seat.id)
        .filter(Ticket.status.in_(ACTIVE_TICKET_STATUSES), *seat_filters)
        .first()
        is not None
    )


def _save_seats(db: Session, hall: Hall, row: str, number) -> None:
    try:
        _recount_capacity(db, hall)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(SEAT_EXISTS.format(row=row, number=number))


# ---------------------------------------------------------------------------
# Halls
# ---------------------------------------------------------------------------


@seats_router.get("/", response_model=List[HallSchema])
def list_halls(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    return db.query(Hall).order_by(Hall.created_at).all()


@seats_router.post("/", response_model=HallSchema, status_code=status.HTTP_201_CREATED)
def create_hall(
    data: HallCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    if not data.name.strip():
        raise InvalidInputError(REQUIRED_FIELDS)
    hall = Hall(name=data.name.strip(), capacity=0)
    db.add(hall)
    db.commit()
    db.refresh(hall)
    return hall


@seats_router.get("/{hall_id}", response_model=HallSchema)
def get_hall(
    hall_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    return _get_hall(db, hall_id)


# ---------------------------------------------------------------------------
# Single seat creation
# ---------------------------------------------------------------------------


@seats_router.post(
    "/{hall_id}/seats",
    response_model=SeatSchema,
    status_code=status.HTTP_201_CREATED,
)
def create_seat(
    hall_id: UUID,
    data: SeatCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    hall = _get_hall(db, hall_id)
    row = data.row.strip().upper()
    if not row or data.number < 1:
        raise InvalidInputError(REQUIRED_FIELDS)
    if _seat_exists(db, hall_id, row, data.number):
        raise ConflictError(SEAT_EXISTS.format(row=row, number=data.number))

    seat = Seat(hall_id=hall_id, row=row, number=data.number, seat_type=data.seat_type)
    db.add(seat)
    _save_seats(db, hall, row, data.number)
    db.refresh(seat)
    return seat


# ---------------------------------------------------------------------------
# Bulk seat creation: every row gets seats 1..seats_per_row
# ---------------------------------------------------------------------------


@seats_router.post(
    "/{hall_id}/seats/bulk",
    response_model=SeatBulkCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
def bulk_create_seats(
    hall_id: UUID,
    data: SeatBulkCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    hall = _get_hall(db, hall_id)
    rows = [r.strip().upper() for r in data.rows if r.strip()]
    if not rows or data.seats_per_row < 1:
        raise InvalidInputError(REQUIRED_FIELDS)

    existing = {
        (seat.row, seat.number)
        for seat in db.query(Seat.row, Seat.number).filter(Seat.hall_id == hall_id).all()
    }
    new_seats = [
        Seat(hall_id=hall_id, row=row, number=number, seat_type=data.seat_type)
        for row in dict.fromkeys(rows)
        for number in range(1, data.seats_per_row + 1)
        if (row, number) not in existing
    ]
    if not new_seats:
        raise ConflictError(ALL_SEATS_EXIST)

    db.add_all(new_seats)
    _save_seats(db, hall, new_seats[0].row, new_seats[0].number)
    return SeatBulkCreateResponse(
        created_count=len(new_seats),
        hall_id=hall_id,
        message=BULK_CREATED.format(count=len(new_seats)),
    )


# ---------------------------------------------------------------------------
# List / delete seats in a hall
# ---------------------------------------------------------------------------


@seats_router.get("/{hall_id}/seats", response_model=List[SeatSchema])
def list_seats(
    hall_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    _get_hall(db, hall_id)
    return (
        db.query(Seat)
        .filter(Seat.hall_id == hall_id)
        .order_by(Seat.row, Seat.number)
        .all()
    )


@seats_router.delete("/{hall_id}/seats", status_code=status.HTTP_200_OK)
def delete_all_seats(
    hall_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    hall = _get_hall(db, hall_id)
    if _has_active_tickets(db, Seat.hall_id == hall_id):
        raise ConflictError(HALL_HAS_TICKETS)

    seats = db.query(Seat).filter(Seat.hall_id == hall_id).all()
    # Cancelled tickets cascade-delete via the ORM relationship
    for seat in seats:
        db.delete(seat)
    _recount_capacity(db, hall)
    db.commit()
    return {"hall_id": str(hall_id), "deleted_count": len(seats)}


# ---------------------------------------------------------------------------
# Get / update / delete a single seat
# ---------------------------------------------------------------------------


def _get_seat(db: Session, seat_id: UUID) -> Seat:
    seat = db.query(Seat).filter(Seat.id == seat_id).first()
    if not seat:
        raise NotFoundError(SEAT_NOT_FOUND)
    return seat


@seat_router.get("/{seat_id}", response_model=SeatSchema)
def get_seat(
    seat_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    return _get_seat(db, seat_id)


@seat_router.patch("/{seat_id}", response_model=SeatSchema)
def update_seat(
    seat_id: UUID,
    data: SeatUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    seat = _get_seat(db, seat_id)
    update = data.model_dump(exclude_unset=True)
    if "row" in update:
        update["row"] = update["row"].strip().upper()

    row = update.get("row", seat.row)
    number = update.get("number", seat.number)
    if (row, number) != (seat.row, seat.number) and _seat_exists(db, seat.hall_id, row, number, exclude_id=seat.id):
        raise ConflictError(SEAT_EXISTS.format(row=row, number=number))

    for field, value in update.items():
        setattr(seat, field, value)
    _save_seats(db, seat.hall, row, number)
    db.refresh(seat)
    return seat


@seat_router.delete("/{seat_id}", response_model=DeleteResponse)
def delete_seat(
    seat_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    seat = _get_seat(db, seat_id)
    if _has_active_tickets(db, Seat.id == seat_id):
        raise ConflictError(SEAT_HAS_TICKETS)

    hall = seat.hall
    db.delete(seat)
    _recount_capacity(db, hall)
    db.commit()
    return DeleteResponse(id=str(seat_id))
