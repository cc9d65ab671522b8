"""Seat allocation for screenings and the ticket status machine."""

import logging
from typing import Iterable, List
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gocinema.core.config import settings
from gocinema.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from gocinema.models.screening import Screening
from gocinema.models.seat import Seat
from gocinema.models.ticket import Ticket, TicketStatus, ACTIVE_TICKET_STATUSES
from gocinema.utils.dates import utcnow

logger = logging.getLogger(__name__)

SEATS_TAKEN = "Որոշ նստատեղեր արդեն ամրագրված են"
SEAT_TAKEN = "Այս նստատեղը արդեն ամրագրված է"
NO_SEATS = "Ընտրեք առնվազն մեկ նստատեղ"
DUPLICATE_SEATS = "Նույն նստատեղը ընտրված է մեկից ավելի անգամ"
TOO_MANY_SEATS = "Մեկ ամրագրմամբ կարելի է ընտրել առավելագույնը {limit} նստատեղ"
SCREENING_NOT_FOUND = "Ցուցադրությունը չի գտնվել"
SCREENING_STARTED = "Ցուցադրությունն արդեն սկսվել է"
SEAT_NOT_FOUND = "Նստատեղը չի գտնվել"
TICKET_NOT_FOUND = "Տոմսը չի գտնվել"
TICKET_USED = "Տոմսը արդեն օգտագործված է"
TICKET_CANCELLED = "Տոմսը չեղարկված է"
TICKET_ALREADY_PAID = "Տոմսը արդեն վճարված է"
TICKET_NOT_PAID = "Տոմսը պետք է լինի վճարված"
INVALID_TRANSITION = "Տոմսի կարգավիճակը հնարավոր չէ փոխել"
PAID_TICKET_CANCEL = "Վճարված տոմսը կարող է չեղարկել միայն ադմինիստրատորը"

# status -> statuses it may move to
ALLOWED_TRANSITIONS = {
    TicketStatus.reserved: {TicketStatus.paid, TicketStatus.cancelled},
    TicketStatus.paid: {TicketStatus.used, TicketStatus.cancelled},
    TicketStatus.used: set(),
    TicketStatus.cancelled: set(),
}


def taken_seat_ids(db: Session, screening_id: UUID, seat_ids: Iterable[UUID] = None) -> set:
    """Seats of the screening held by a non-cancelled ticket."""
    query = db.query(Ticket.seat_id).filter(
        Ticket.screening_id == screening_id,
        Ticket.status.in_(ACTIVE_TICKET_STATUSES),
    )
    if seat_ids is not None:
        query = query.filter(Ticket.seat_id.in_(list(seat_ids)))
    return {row.seat_id for row in query.all()}


def reserve_seats(db: Session, user_id: UUID, screening_id: UUID, seat_ids: List[UUID]) -> List[Ticket]:
    """Create reserved tickets for the given seats.

    Tickets are flushed but not committed, so callers can fold the
    reservation into a larger transaction. Two concurrent requests for the
    same seat cannot both succeed: the partial unique index on
    (screening_id, seat_id) rejects the second flush.
    """
    if not seat_ids:
        raise InvalidInputError(NO_SEATS)
    if len(set(seat_ids)) != len(seat_ids):
        raise InvalidInputError(DUPLICATE_SEATS)
    if len(seat_ids) > settings.MAX_SEATS_PER_BOOKING:
        raise InvalidInputError(TOO_MANY_SEATS.format(limit=settings.MAX_SEATS_PER_BOOKING))

    screening = db.query(Screening).filter(Screening.id == screening_id).first()
    if not screening:
        raise NotFoundError(SCREENING_NOT_FOUND)

    started = (
        db.query(Screening.id)
        .filter(Screening.id == screening_id, Screening.start_time <= utcnow())
        .first()
    )
    if started:
        raise ConflictError(SCREENING_STARTED)

    seats = (
        db.query(Seat)
        .filter(Seat.id.in_(seat_ids), Seat.hall_id == screening.hall_id)
        .all()
    )
    seats_by_id = {seat.id: seat for seat in seats}
    if len(seats_by_id) != len(seat_ids):
        raise NotFoundError(SEAT_NOT_FOUND)

    if taken_seat_ids(db, screening_id, seat_ids):
        raise ConflictError(SEATS_TAKEN if len(seat_ids) > 1 else SEAT_TAKEN)

    tickets = [
        Ticket(
            screening=screening,
            seat=seats_by_id[seat_id],
            user_id=user_id,
            price=screening.base_price,
            status=TicketStatus.reserved,
        )
        for seat_id in seat_ids
    ]
    db.add_all(tickets)
    try:
        db.flush()
    except IntegrityError:
        # Lost the race for one of the seats
        db.rollback()
        logger.info("Seat race lost on screening %s for user %s", screening_id, user_id)
        raise ConflictError(SEATS_TAKEN if len(seat_ids) > 1 else SEAT_TAKEN)

    logger.info(
        "Reserved %d seat(s) on screening %s for user %s",
        len(tickets), screening_id, user_id,
    )
    return tickets


def change_ticket_status(ticket: Ticket, new_status: TicketStatus) -> Ticket:
    """Move a ticket along reserved -> paid -> used, or to cancelled."""
    current = TicketStatus(ticket.status)
    if new_status in ALLOWED_TRANSITIONS[current]:
        ticket.status = new_status
        return ticket

    if current == TicketStatus.used:
        raise ConflictError(TICKET_USED)
    if current == TicketStatus.cancelled:
        raise ConflictError(TICKET_CANCELLED)
    if new_status == TicketStatus.paid:
        raise ConflictError(TICKET_ALREADY_PAID)
    if new_status == TicketStatus.used:
        raise ConflictError(TICKET_NOT_PAID)
    raise ConflictError(INVALID_TRANSITION)
