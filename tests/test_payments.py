from decimal import Decimal

import pytest

from gocinema.core.exceptions import ConflictError, PermissionDeniedError
from gocinema.models import OrderStatus, Payment, PaymentMethod, TicketStatus
from gocinema.schemas.order import OrderProductLine
from gocinema.services.orders import create_order, load_order
from gocinema.services.payments import ORDER_ALREADY_PAID, pay_order, pay_ticket


@pytest.fixture
def order(db, user, screening, seats, products):
    return create_order(
        db, user, screening.id,
        [seats["A1"].id, seats["A2"].id],
        [
            OrderProductLine(product_id=products["popcorn"].id, quantity=1),
            OrderProductLine(product_id=products["cola"].id, quantity=2, seat_id=seats["A2"].id),
        ],
    )


def test_pay_order_marks_everything_paid(db, user, order):
    result = pay_order(db, user, order.id, PaymentMethod.card)

    assert result.success is True
    assert len(result.payments) == 2
    assert all(p.transaction_id.startswith("TXN-") for p in result.payments)
    # Payments add up to the order total: 2 x 2000 + 1500 + 2 x 700
    assert result.amount == Decimal("6900")
    assert sum(p.amount for p in result.payments) == Decimal("6900")
    assert result.order_qr_code == f"ORDER-{order.id}"

    paid = load_order(db, order.id)
    assert paid.status == OrderStatus.completed
    assert all(t.status == TicketStatus.paid for t in paid.tickets)
    assert sorted(result.qr_codes) == sorted(f"TICKET-{t.id}" for t in paid.tickets)


def test_paying_twice_is_a_conflict(db, user, order):
    pay_order(db, user, order.id, PaymentMethod.card)
    with pytest.raises(ConflictError) as exc:
        pay_order(db, user, order.id, PaymentMethod.card)
    assert exc.value.message == ORDER_ALREADY_PAID
    assert db.query(Payment).count() == 2


def test_pay_single_ticket_completes_order_last(db, user, order):
    first, second = order.tickets
    pay_ticket(db, user, first.id, PaymentMethod.cash)
    assert load_order(db, order.id).status == OrderStatus.pending

    pay_ticket(db, user, second.id, PaymentMethod.cash)
    assert load_order(db, order.id).status == OrderStatus.completed
    total = sum(p.amount for p in db.query(Payment).all())
    assert total == Decimal("6900")

    with pytest.raises(ConflictError):
        pay_ticket(db, user, first.id, PaymentMethod.cash)


def test_cannot_pay_someone_elses_ticket(db, other_user, order):
    with pytest.raises(PermissionDeniedError):
        pay_ticket(db, other_user, order.tickets[0].id, PaymentMethod.card)


def test_pay_order_endpoint(client, user_headers, order):
    response = client.post(
        f"/api/v1/payments/orders/{order.id}",
        headers=user_headers,
        json={"method": "card"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert len(body["qr_codes"]) == 2

    response = client.get("/api/v1/payments/", headers=user_headers)
    assert len(response.json()) == 2
