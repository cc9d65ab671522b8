"""Checkout: orders bundle a booking's tickets with concession items."""

import logging
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from gocinema.core.exceptions import ConflictError, InvalidInputError, NotFoundError, PermissionDeniedError
from gocinema.models.order import Order, OrderItem, OrderStatus
from gocinema.models.product import Product
from gocinema.models.ticket import Ticket, TicketStatus
from gocinema.models.user import User
from gocinema.schemas.order import OrderProductLine
from gocinema.services.booking import PAID_TICKET_CANCEL, change_ticket_status, reserve_seats

logger = logging.getLogger(__name__)

ORDER_NOT_FOUND = "Պատվերը չի գտնվել"
ORDER_NOT_YOURS = "Պատվերը ձերը չէ"
ORDER_NOT_PENDING = "Պատվերն այլևս հնարավոր չէ փոփոխել"
PRODUCT_NOT_FOUND = "Ապրանքը չի գտնվել"
PRODUCT_SEAT_MISMATCH = "Ապրանքը կցված է պատվերում չընդգրկված նստատեղի"


def compute_order_total(order: Order) -> Decimal:
    """Sum of ticket prices plus item unit price x quantity."""
    tickets_total = sum((t.price for t in order.tickets), Decimal("0"))
    items_total = sum((item.price * item.quantity for item in order.order_items), Decimal("0"))
    return tickets_total + items_total


def load_order(db: Session, order_id: UUID) -> Optional[Order]:
    return (
        db.query(Order)
        .options(
            joinedload(Order.tickets).joinedload(Ticket.seat),
            joinedload(Order.tickets).joinedload(Ticket.screening),
            joinedload(Order.order_items).joinedload(OrderItem.product),
        )
        .filter(Order.id == order_id)
        .first()
    )


def get_order_for_user(db: Session, order_id: UUID, user: User) -> Order:
    """Fetch an order its owner (or an admin) may see."""
    order = load_order(db, order_id)
    if not order:
        raise NotFoundError(ORDER_NOT_FOUND)
    if order.user_id != user.id and user.role != "admin":
        raise PermissionDeniedError(ORDER_NOT_YOURS)
    return order


def refresh_total(order: Order) -> Order:
    """Bring the stored total in line with the child rows before serializing."""
    order.total_amount = compute_order_total(order)
    return order


def _load_products(db: Session, lines: List[OrderProductLine]) -> Dict[UUID, Product]:
    if not lines:
        return {}
    wanted = {line.product_id for line in lines}
    products = (
        db.query(Product)
        .filter(Product.id.in_(wanted), Product.is_active == True)
        .all()
    )
    found = {p.id: p for p in products}
    if len(found) != len(wanted):
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return found


def _attach_items(
    order: Order,
    lines: List[OrderProductLine],
    products: Dict[UUID, Product],
    tickets_by_seat: Dict[UUID, Ticket],
) -> None:
    for line in lines:
        ticket = None
        if line.seat_id is not None:
            ticket = tickets_by_seat.get(line.seat_id)
            if ticket is None:
                raise InvalidInputError(PRODUCT_SEAT_MISMATCH)
        product = products[line.product_id]
        order.order_items.append(
            OrderItem(product=product, ticket=ticket, quantity=line.quantity, price=product.price)
        )


def create_order(
    db: Session,
    user: User,
    screening_id: UUID,
    seat_ids: List[UUID],
    lines: List[OrderProductLine],
) -> Order:
    """Reserve the seats and build the order in one transaction."""
    for line in lines:
        if line.seat_id is not None and line.seat_id not in seat_ids:
            raise InvalidInputError(PRODUCT_SEAT_MISMATCH)
    products = _load_products(db, lines)

    try:
        tickets = reserve_seats(db, user.id, screening_id, seat_ids)
        order = Order(user=user, status=OrderStatus.pending)
        db.add(order)
        for ticket in tickets:
            ticket.order = order
        _attach_items(order, lines, products, {t.seat_id: t for t in tickets})
        refresh_total(order)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Order %s created for user %s (%s)", order.id, user.id, order.total_amount)
    return load_order(db, order.id)


def update_order_products(db: Session, order_id: UUID, user: User, lines: List[OrderProductLine]) -> Order:
    """Replace the order's concession items and recompute its total."""
    order = get_order_for_user(db, order_id, user)
    if order.status != OrderStatus.pending:
        raise ConflictError(ORDER_NOT_PENDING)
    # Items can only change while no ticket of the order is paid
    if any(t.payment is not None or t.status != TicketStatus.reserved for t in order.tickets):
        raise ConflictError(ORDER_NOT_PENDING)

    products = _load_products(db, lines)
    tickets_by_seat = {t.seat_id: t for t in order.tickets}
    order.order_items.clear()
    _attach_items(order, lines, products, tickets_by_seat)
    refresh_total(order)
    db.commit()
    return load_order(db, order.id)


def cancel_order(db: Session, order_id: UUID, user: User) -> Order:
    """Cancel a pending order and release its seats."""
    order = get_order_for_user(db, order_id, user)
    if order.status != OrderStatus.pending:
        raise ConflictError(ORDER_NOT_PENDING)
    if user.role != "admin" and any(t.status == TicketStatus.paid for t in order.tickets):
        raise ConflictError(PAID_TICKET_CANCEL)

    for ticket in order.tickets:
        if ticket.status in (TicketStatus.reserved, TicketStatus.paid):
            change_ticket_status(ticket, TicketStatus.cancelled)
    order.status = OrderStatus.cancelled
    db.commit()
    logger.info("Order %s cancelled by user %s", order.id, user.id)
    return load_order(db, order.id)


def complete_if_paid(order: Optional[Order]) -> None:
    """Mark the order completed once none of its live tickets awaits payment."""
    if order is None or order.status != OrderStatus.pending:
        return
    live = [t for t in order.tickets if t.status != TicketStatus.cancelled]
    if live and all(t.status in (TicketStatus.paid, TicketStatus.used) for t in live):
        order.status = OrderStatus.completed
