from decimal import Decimal

import pytest

from gocinema.core.exceptions import ConflictError, InvalidInputError
from gocinema.models import Order, OrderItem, OrderStatus, PaymentMethod, Ticket, TicketStatus
from gocinema.schemas.order import OrderProductLine
from gocinema.services.booking import PAID_TICKET_CANCEL, SEATS_TAKEN
from gocinema.services.orders import (
    ORDER_NOT_PENDING,
    cancel_order,
    compute_order_total,
    create_order,
    load_order,
    update_order_products,
)
from gocinema.services.payments import pay_order, pay_ticket


def test_total_is_tickets_plus_items():
    order = Order()
    order.tickets = [Ticket(price=Decimal("2000")), Ticket(price=Decimal("2500"))]
    order.order_items = [
        OrderItem(price=Decimal("1500"), quantity=2),
        OrderItem(price=Decimal("700"), quantity=1),
    ]
    assert compute_order_total(order) == Decimal("8200")


def test_total_of_empty_order_is_zero():
    assert compute_order_total(Order()) == Decimal("0")


def test_create_order_reserves_seats_and_prices_items(db, user, screening, seats, products):
    order = create_order(
        db, user, screening.id,
        [seats["A1"].id, seats["A2"].id],
        [
            OrderProductLine(product_id=products["popcorn"].id, quantity=2),
            OrderProductLine(product_id=products["cola"].id, quantity=1, seat_id=seats["A2"].id),
        ],
    )

    assert order.status == OrderStatus.pending
    assert len(order.tickets) == 2
    assert all(t.status == TicketStatus.reserved for t in order.tickets)
    # 2 x 2000 + 2 x 1500 + 700
    assert order.total_amount == Decimal("7700")
    assert compute_order_total(order) == order.total_amount

    attached = [i for i in order.order_items if i.ticket_id is not None]
    assert len(attached) == 1
    assert attached[0].ticket.seat_id == seats["A2"].id


def test_failed_reservation_leaves_no_order(db, user, other_user, screening, seats):
    create_order(db, other_user, screening.id, [seats["A1"].id], [])

    with pytest.raises(ConflictError) as exc:
        create_order(db, user, screening.id, [seats["A3"].id, seats["A1"].id], [])
    assert exc.value.message == SEATS_TAKEN

    assert db.query(Order).filter(Order.user_id == user.id).count() == 0
    assert db.query(Ticket).filter(Ticket.user_id == user.id).count() == 0


def test_product_for_unbooked_seat_is_rejected(db, user, screening, seats, products):
    with pytest.raises(InvalidInputError):
        create_order(
            db, user, screening.id, [seats["A1"].id],
            [OrderProductLine(product_id=products["cola"].id, seat_id=seats["B1"].id)],
        )
    assert db.query(Ticket).count() == 0


def test_update_products_replaces_items_and_recomputes_total(db, user, screening, seats, products):
    order = create_order(
        db, user, screening.id, [seats["A1"].id],
        [OrderProductLine(product_id=products["popcorn"].id, quantity=3)],
    )
    assert order.total_amount == Decimal("6500")

    order = update_order_products(
        db, order.id, user,
        [OrderProductLine(product_id=products["cola"].id, quantity=2)],
    )
    assert len(order.order_items) == 1
    assert order.order_items[0].product_id == products["cola"].id
    assert order.total_amount == Decimal("3400")
    assert db.query(OrderItem).count() == 1


def test_cancel_order_frees_seats(db, user, other_user, screening, seats):
    order = create_order(db, user, screening.id, [seats["A1"].id], [])
    order = cancel_order(db, order.id, user)

    assert order.status == OrderStatus.cancelled
    assert order.tickets[0].status == TicketStatus.cancelled

    again = create_order(db, other_user, screening.id, [seats["A1"].id], [])
    assert again.tickets[0].seat_id == seats["A1"].id


def test_cancelled_order_cannot_be_changed(db, user, screening, seats, products):
    order = create_order(db, user, screening.id, [seats["A1"].id], [])
    cancel_order(db, order.id, user)
    with pytest.raises(ConflictError):
        update_order_products(db, order.id, user, [OrderProductLine(product_id=products["cola"].id)])



def _partly_paid_order(db, user, screening, seats):
    order = create_order(db, user, screening.id, [seats["A1"].id, seats["A2"].id], [])
    first = next(t for t in order.tickets if t.seat_id == seats["A1"].id)
    pay_ticket(db, user, first.id, PaymentMethod.card)
    return order


def test_products_are_frozen_once_a_ticket_is_paid(db, user, screening, seats, products):
    order = _partly_paid_order(db, user, screening, seats)

    with pytest.raises(ConflictError) as exc:
        update_order_products(db, order.id, user, [
            OrderProductLine(product_id=products["popcorn"].id),
            OrderProductLine(product_id=products["cola"].id, seat_id=seats["A1"].id),
        ])
    assert exc.value.message == ORDER_NOT_PENDING

    result = pay_order(db, user, order.id, PaymentMethod.card)
    db.expire_all()
    order = load_order(db, order.id)
    paid = sum(t.payment.amount for t in order.tickets)
    assert order.status == OrderStatus.completed
    assert paid == compute_order_total(order) == Decimal("4000")
    assert result.amount == Decimal("2000")


def test_owner_cannot_cancel_order_with_a_paid_ticket(db, user, screening, seats):
    order = _partly_paid_order(db, user, screening, seats)

    with pytest.raises(ConflictError) as exc:
        cancel_order(db, order.id, user)
    assert exc.value.message == PAID_TICKET_CANCEL

    db.expire_all()
    order = load_order(db, order.id)
    assert order.status == OrderStatus.pending
    assert sorted(t.status.value for t in order.tickets) == ["paid", "reserved"]


def test_admin_can_cancel_order_with_a_paid_ticket(db, user, admin, screening, seats):
    order = _partly_paid_order(db, user, screening, seats)

    order = cancel_order(db, order.id, admin)
    assert order.status == OrderStatus.cancelled
    assert all(t.status == TicketStatus.cancelled for t in order.tickets)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


def test_order_endpoints(client, user_headers, screening, seats, products):
    response = client.post(
        "/api/v1/orders/",
        headers=user_headers,
        json={
            "screening_id": str(screening.id),
            "seat_ids": [str(seats["B1"].id), str(seats["B2"].id)],
            "products": [{"product_id": str(products["popcorn"].id), "quantity": 1}],
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    order_id = body["order"]["id"]
    assert Decimal(str(body["order"]["total_amount"])) == Decimal("5500")

    response = client.get(f"/api/v1/orders/{order_id}", headers=user_headers)
    assert response.status_code == 200
    assert len(response.json()["tickets"]) == 2

    response = client.get("/api/v1/orders/", headers=user_headers)
    assert [o["id"] for o in response.json()] == [order_id]


def test_order_of_another_user_is_forbidden(client, db, other_user, user_headers, screening, seats):
    order = create_order(db, other_user, screening.id, [seats["A1"].id], [])
    response = client.get(f"/api/v1/orders/{order.id}", headers=user_headers)
    assert response.status_code == 403
    assert response.json()["success"] is False


def test_unknown_order_is_not_found(client, user_headers):
    response = client.get("/api/v1/orders/00000000-0000-4000-8000-000000000000", headers=user_headers)
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Պատվերը չի գտնվել"}
