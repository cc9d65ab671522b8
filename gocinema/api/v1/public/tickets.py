from uuid import UUID
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload

from gocinema.db.session import get_db
from gocinema.api.deps import get_current_user
from gocinema.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from gocinema.models.screening import Screening
from gocinema.models.ticket import Ticket, TicketStatus
from gocinema.models.user import User
from gocinema.schemas.payment import Payment as PaymentSchema
from gocinema.schemas.ticket import Ticket as TicketSchema, TicketCreate, ReservationResult
from gocinema.services.booking import PAID_TICKET_CANCEL, TICKET_NOT_FOUND, change_ticket_status, reserve_seats

router = APIRouter(prefix="/tickets", tags=["Tickets"])

TICKET_NOT_YOURS = "Տոմսը ձերը չէ"
PAYMENT_NOT_FOUND = "Վճարումը չի գտնվել"


def _ticket_query(db: Session):
    return db.query(Ticket).options(
        joinedload(Ticket.seat),
        joinedload(Ticket.screening).joinedload(Screening.movie),
        joinedload(Ticket.screening).joinedload(Screening.hall),
    )


def _get_own_ticket(db: Session, ticket_id: UUID, user: User) -> Ticket:
    ticket = _ticket_query(db).filter(Ticket.id == ticket_id).first()
    if not ticket:
        raise NotFoundError(TICKET_NOT_FOUND)
    if ticket.user_id != user.id and user.role != "admin":
        raise PermissionDeniedError(TICKET_NOT_YOURS)
    return ticket


@router.post("/", response_model=ReservationResult, status_code=status.HTTP_201_CREATED)
def reserve(
    data: TicketCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Reserve one or more seats without an order (box-office style)."""
    tickets = reserve_seats(db, current_user.id, data.screening_id, data.seat_ids)
    db.commit()
    ids = [t.id for t in tickets]
    tickets = _ticket_query(db).filter(Ticket.id.in_(ids)).all()
    return ReservationResult(tickets=[TicketSchema.model_validate(t) for t in tickets])


@router.get("/", response_model=List[TicketSchema])
def my_tickets(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return (
        _ticket_query(db)
        .filter(Ticket.user_id == current_user.id)
        .order_by(Ticket.created_at.desc())
        .all()
    )


@router.get("/{ticket_id}", response_model=TicketSchema)
def get_ticket(
    ticket_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _get_own_ticket(db, ticket_id, current_user)


@router.get("/{ticket_id}/payment", response_model=PaymentSchema)
def get_ticket_payment(
    ticket_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ticket = _get_own_ticket(db, ticket_id, current_user)
    if ticket.payment is None:
        raise NotFoundError(PAYMENT_NOT_FOUND)
    return ticket.payment


@router.post("/{ticket_id}/cancel", response_model=TicketSchema)
def cancel_ticket(
    ticket_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Release an unpaid reservation."""
    ticket = _get_own_ticket(db, ticket_id, current_user)
    if ticket.status == TicketStatus.paid and current_user.role != "admin":
        raise ConflictError(PAID_TICKET_CANCEL)
    change_ticket_status(ticket, TicketStatus.cancelled)
    db.commit()
    return _get_own_ticket(db, ticket_id, current_user)
