"""Entrance scanner: resolves ticket QR codes and marks tickets used."""

import logging
import re
import uuid
from typing import List

from sqlalchemy.orm import Session, joinedload

from gocinema.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from gocinema.models.order import Order
from gocinema.models.screening import Screening
from gocinema.models.ticket import Ticket, TicketStatus
from gocinema.schemas.order import Order as OrderSchema
from gocinema.schemas.scanner import MarkUsedResult, ScanResult
from gocinema.schemas.ticket import TicketWithUser
from gocinema.services.booking import TICKET_NOT_FOUND, TICKET_NOT_PAID, TICKET_USED, change_ticket_status
from gocinema.services.orders import ORDER_NOT_FOUND, load_order, refresh_total

logger = logging.getLogger(__name__)

QR_PATTERN = re.compile(r"^(ORDER|TICKET)-([0-9a-fA-F-]{32,36})$")

INVALID_QR = "Անվավեր QR կոդ"
NO_PAID_TICKETS = "Պատվերում վճարված տոմսեր չկան"


def parse_qr_code(code: str):
    """Split ``ORDER-<uuid>`` / ``TICKET-<uuid>`` into (kind, id)."""
    match = QR_PATTERN.match((code or "").strip())
    if not match:
        raise InvalidInputError(INVALID_QR)
    try:
        object_id = uuid.UUID(match.group(2))
    except ValueError:
        raise InvalidInputError(INVALID_QR)
    return match.group(1).lower(), object_id


def _load_ticket(db: Session, ticket_id) -> Ticket:
    ticket = (
        db.query(Ticket)
        .options(
            joinedload(Ticket.user),
            joinedload(Ticket.seat),
            joinedload(Ticket.screening).joinedload(Screening.movie),
            joinedload(Ticket.screening).joinedload(Screening.hall),
        )
        .filter(Ticket.id == ticket_id)
        .first()
    )
    if not ticket:
        raise NotFoundError(TICKET_NOT_FOUND)
    return ticket


def _load_order(db: Session, order_id) -> Order:
    order = load_order(db, order_id)
    if not order:
        raise NotFoundError(ORDER_NOT_FOUND)
    return order


def scan(db: Session, code: str) -> ScanResult:
    kind, object_id = parse_qr_code(code)
    if kind == "order":
        order = refresh_total(_load_order(db, object_id))
        return ScanResult(type="order", order=OrderSchema.model_validate(order))
    ticket = _load_ticket(db, object_id)
    return ScanResult(type="ticket", ticket=TicketWithUser.model_validate(ticket))


def mark_ticket_used(db: Session, ticket_id) -> MarkUsedResult:
    ticket = _load_ticket(db, ticket_id)
    if ticket.status == TicketStatus.used:
        raise ConflictError(TICKET_USED)
    if ticket.status != TicketStatus.paid:
        raise ConflictError(TICKET_NOT_PAID)
    change_ticket_status(ticket, TicketStatus.used)
    db.commit()
    logger.info("Ticket %s admitted", ticket.id)
    return MarkUsedResult(tickets=[TicketWithUser.model_validate(_load_ticket(db, ticket_id))])


def mark_order_used(db: Session, order_id) -> MarkUsedResult:
    order = _load_order(db, order_id)
    paid: List[Ticket] = [t for t in order.tickets if t.status == TicketStatus.paid]
    if not paid:
        raise ConflictError(NO_PAID_TICKETS)
    for ticket in paid:
        change_ticket_status(ticket, TicketStatus.used)
    db.commit()
    logger.info("Order %s admitted (%d ticket(s))", order.id, len(paid))
    return MarkUsedResult(
        tickets=[TicketWithUser.model_validate(_load_ticket(db, t.id)) for t in paid]
    )
