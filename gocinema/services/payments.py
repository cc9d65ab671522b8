"""Fake payment gateway: every charge succeeds and issues the ticket's QR code."""

import logging
import secrets
import time
from decimal import Decimal
from typing import List
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from gocinema.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from gocinema.models.order import Order, OrderStatus
from gocinema.models.payment import Payment, PaymentMethod
from gocinema.models.ticket import Ticket, TicketStatus
from gocinema.models.user import User
from gocinema.schemas.payment import Payment as PaymentSchema, PaymentResult
from gocinema.services.booking import TICKET_NOT_FOUND, change_ticket_status
from gocinema.services.orders import ORDER_NOT_FOUND, complete_if_paid, refresh_total

logger = logging.getLogger(__name__)

TICKET_NOT_YOURS = "Տոմսը ձերը չէ"
ORDER_NOT_YOURS = "Պատվերը ձերը չէ"
ALREADY_PAID = "Տոմսը արդեն վճարված է"
ORDER_ALREADY_PAID = "Պատվերի բոլոր տոմսերը արդեն վճարված են"
ORDER_CANCELLED = "Պատվերը չեղարկված է"


def ticket_qr_code(ticket: Ticket) -> str:
    return f"TICKET-{ticket.id}"


def order_qr_code(order: Order) -> str:
    return f"ORDER-{order.id}"


def generate_transaction_id() -> str:
    return f"TXN-{int(time.time() * 1000)}-{secrets.token_hex(5).upper()}"


def _charge(db: Session, user_id: UUID, ticket: Ticket, amount: Decimal, method: PaymentMethod) -> Payment:
    if ticket.payment is not None:
        raise ConflictError(ALREADY_PAID)
    change_ticket_status(ticket, TicketStatus.paid)
    ticket.qr_code = ticket_qr_code(ticket)
    payment = Payment(
        ticket=ticket,
        user_id=user_id,
        amount=amount,
        method=method,
        status="completed",
        transaction_id=generate_transaction_id(),
    )
    db.add(payment)
    return payment


def _attached_items_total(ticket: Ticket) -> Decimal:
    return sum((item.price * item.quantity for item in ticket.order_items), Decimal("0"))


def _order_level_due(order: Order) -> Decimal:
    """Order-level items ride on the first ticket of the order to be paid."""
    if order is None or any(t.payment is not None for t in order.tickets):
        return Decimal("0")
    return sum(
        (item.price * item.quantity for item in order.order_items if item.ticket_id is None),
        Decimal("0"),
    )


def pay_ticket(db: Session, user: User, ticket_id: UUID, method: PaymentMethod) -> PaymentResult:
    """Pay a single ticket, including concessions attached to its seat."""
    ticket = (
        db.query(Ticket)
        .options(joinedload(Ticket.order), joinedload(Ticket.payment))
        .filter(Ticket.id == ticket_id)
        .first()
    )
    if not ticket:
        raise NotFoundError(TICKET_NOT_FOUND)
    if ticket.user_id != user.id:
        raise PermissionDeniedError(TICKET_NOT_YOURS)

    amount = ticket.price + _attached_items_total(ticket) + _order_level_due(ticket.order)
    payment = _charge(db, user.id, ticket, amount, method)
    complete_if_paid(ticket.order)
    db.commit()
    db.refresh(payment)

    logger.info("Ticket %s paid by user %s (%s, %s)", ticket.id, user.id, amount, payment.transaction_id)
    return PaymentResult(payments=[PaymentSchema.model_validate(payment)], qr_codes=[ticket.qr_code], amount=amount)


def pay_order(db: Session, user: User, order_id: UUID, method: PaymentMethod) -> PaymentResult:
    """Pay every reserved ticket of the order.

    Items attached to a seat are charged with that seat's ticket; order-level
    items are charged with the first ticket, so the payments add up to the
    order total.
    """
    order = (
        db.query(Order)
        .options(joinedload(Order.tickets), joinedload(Order.order_items))
        .filter(Order.id == order_id)
        .first()
    )
    if not order:
        raise NotFoundError(ORDER_NOT_FOUND)
    if order.user_id != user.id:
        raise PermissionDeniedError(ORDER_NOT_YOURS)
    if order.status == OrderStatus.cancelled:
        raise ConflictError(ORDER_CANCELLED)

    unpaid = [t for t in order.tickets if t.status == TicketStatus.reserved]
    if not unpaid:
        raise ConflictError(ORDER_ALREADY_PAID)

    order_level = _order_level_due(order)

    payments: List[Payment] = []
    total = Decimal("0")
    for index, ticket in enumerate(unpaid):
        amount = ticket.price + _attached_items_total(ticket)
        if index == 0:
            amount += order_level
        payments.append(_charge(db, user.id, ticket, amount, method))
        total += amount

    complete_if_paid(order)
    refresh_total(order)
    db.commit()
    for payment in payments:
        db.refresh(payment)

    logger.info("Order %s paid by user %s (%d ticket(s), %s)", order.id, user.id, len(payments), total)
    return PaymentResult(
        payments=[PaymentSchema.model_validate(p) for p in payments],
        qr_codes=[t.qr_code for t in unpaid],
        order_qr_code=order_qr_code(order),
        amount=total,
    )
