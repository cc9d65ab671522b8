import uuid

import pytest

from gocinema.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from gocinema.models import PaymentMethod, TicketStatus
from gocinema.services.booking import TICKET_NOT_PAID, TICKET_USED
from gocinema.services.orders import create_order
from gocinema.services.payments import pay_order
from gocinema.services.scanner import INVALID_QR, NO_PAID_TICKETS, parse_qr_code


@pytest.fixture
def paid_order(db, user, screening, seats):
    order = create_order(db, user, screening.id, [seats["A1"].id, seats["A2"].id], [])
    pay_order(db, user, order.id, PaymentMethod.card)
    return order


def test_parse_qr_code():
    ticket_id = uuid.uuid4()
    assert parse_qr_code(f"TICKET-{ticket_id}") == ("ticket", ticket_id)
    assert parse_qr_code(f" ORDER-{ticket_id} ") == ("order", ticket_id)
    for bad in ("", "TICKET-", "TICKET-12", f"SEAT-{ticket_id}"):
        with pytest.raises(InvalidInputError) as exc:
            parse_qr_code(bad)
        assert exc.value.message == INVALID_QR


def test_scan_ticket_and_admit(client, db, admin_headers, paid_order):
    ticket = paid_order.tickets[0]
    response = client.post("/api/v1/admin/scanner/scan", headers=admin_headers, json={"code": ticket.qr_code})
    assert response.status_code == 200
    body = response.json()
    assert body["type"] == "ticket"
    assert body["ticket"]["status"] == "paid"
    assert body["ticket"]["user"]["phone"] == "077123456"

    response = client.post(f"/api/v1/admin/scanner/tickets/{ticket.id}/use", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["tickets"][0]["status"] == "used"

    response = client.post(f"/api/v1/admin/scanner/tickets/{ticket.id}/use", headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["error"] == TICKET_USED


def test_scan_order(client, admin_headers, paid_order):
    response = client.post(
        "/api/v1/admin/scanner/scan", headers=admin_headers, json={"code": f"ORDER-{paid_order.id}"}
    )
    assert response.json()["type"] == "order"
    assert len(response.json()["order"]["tickets"]) == 2


def test_admit_whole_order(db, client, admin_headers, paid_order):
    response = client.post(f"/api/v1/admin/scanner/orders/{paid_order.id}/use", headers=admin_headers)
    assert [t["status"] for t in response.json()["tickets"]] == ["used", "used"]

    response = client.post(f"/api/v1/admin/scanner/orders/{paid_order.id}/use", headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["error"] == NO_PAID_TICKETS


def test_unpaid_ticket_cannot_be_admitted(db, user, screening, seats):
    from gocinema.services.scanner import mark_ticket_used

    order = create_order(db, user, screening.id, [seats["B1"].id], [])
    with pytest.raises(ConflictError) as exc:
        mark_ticket_used(db, order.tickets[0].id)
    assert exc.value.message == TICKET_NOT_PAID
    assert order.tickets[0].status == TicketStatus.reserved


def test_unknown_ticket_code(db):
    from gocinema.services.scanner import scan

    with pytest.raises(NotFoundError):
        scan(db, f"TICKET-{uuid.uuid4()}")


def test_scanner_is_admin_only(client, user_headers, paid_order):
    response = client.post(
        "/api/v1/admin/scanner/scan", headers=user_headers, json={"code": f"ORDER-{paid_order.id}"}
    )
    assert response.status_code == 403
