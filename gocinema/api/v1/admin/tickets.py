from uuid import UUID
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload

from gocinema.db.session import get_db
from gocinema.api.deps import get_current_admin_user
from gocinema.core.exceptions import NotFoundError
from gocinema.models.user import User
from gocinema.models.screening import Screening
from gocinema.models.ticket import Ticket, TicketStatus
from gocinema.schemas.scanner import MarkUsedResult, ScanRequest, ScanResult
from gocinema.schemas.ticket import TicketStatusUpdate, TicketWithUser
from gocinema.services import scanner
from gocinema.services.booking import TICKET_NOT_FOUND, change_ticket_status
from gocinema.services.orders import complete_if_paid

router = APIRouter(prefix="/admin/tickets", tags=["Admin - Tickets"])
scanner_router = APIRouter(prefix="/admin/scanner", tags=["Admin - Scanner"])


def _ticket_query(db: Session):
    return db.query(Ticket).options(
        joinedload(Ticket.user),
        joinedload(Ticket.seat),
        joinedload(Ticket.screening).joinedload(Screening.movie),
        joinedload(Ticket.screening).joinedload(Screening.hall),
    )


# ---------------------------------------------------------------------------
# Tickets
# ---------------------------------------------------------------------------


@router.get("/", response_model=List[TicketWithUser])
def list_tickets(
    screening_id: Optional[UUID] = Query(None),
    status: Optional[TicketStatus] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    query = _ticket_query(db)
    if screening_id:
        query = query.filter(Ticket.screening_id == screening_id)
    if status:
        query = query.filter(Ticket.status == status)
    return query.order_by(Ticket.created_at.desc()).all()


@router.patch("/{ticket_id}/status", response_model=TicketWithUser)
def update_ticket_status(
    ticket_id: UUID,
    data: TicketStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Manual status change; only forward moves of the ticket lifecycle are accepted."""
    ticket = _ticket_query(db).filter(Ticket.id == ticket_id).first()
    if not ticket:
        raise NotFoundError(TICKET_NOT_FOUND)
    change_ticket_status(ticket, data.status)
    complete_if_paid(ticket.order)
    db.commit()
    return _ticket_query(db).filter(Ticket.id == ticket_id).first()


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


@scanner_router.post("/scan", response_model=ScanResult)
def scan_code(
    data: ScanRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    """Resolve an `ORDER-<id>` or `TICKET-<id>` QR code."""
    return scanner.scan(db, data.code)


@scanner_router.post("/tickets/{ticket_id}/use", response_model=MarkUsedResult)
def use_ticket(
    ticket_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    return scanner.mark_ticket_used(db, ticket_id)


@scanner_router.post("/orders/{order_id}/use", response_model=MarkUsedResult)
def use_order(
    order_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin_user),
):
    return scanner.mark_order_used(db, order_id)
