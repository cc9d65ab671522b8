
from conftest import make_user
from gocinema.models import FAQ, Movie, Product, Screening, Seat, TicketStatus
from gocinema.schemas.order import OrderProductLine
from gocinema.services.orders import create_order


def test_admin_routes_reject_regular_users(client, user_headers):
    assert client.get("/api/v1/admin/halls/", headers=user_headers).status_code == 403
    assert client.get("/api/v1/admin/users/", headers=user_headers).status_code == 403


# ---------------------------------------------------------------------------
# Halls & seats
# ---------------------------------------------------------------------------


def test_bulk_seats_skip_existing_and_update_capacity(client, db, admin_headers, hall):
    response = client.post(
        f"/api/v1/admin/halls/{hall.id}/seats",
        headers=admin_headers,
        json={"row": "a", "number": 1},
    )
    assert response.status_code == 201
    assert response.json()["row"] == "A"

    response = client.post(
        f"/api/v1/admin/halls/{hall.id}/seats/bulk",
        headers=admin_headers,
        json={"rows": ["A", "B"], "seats_per_row": 3},
    )
    assert response.status_code == 201
    assert response.json()["created_count"] == 5

    db.refresh(hall)
    assert hall.capacity == 6

    response = client.post(
        f"/api/v1/admin/halls/{hall.id}/seats/bulk",
        headers=admin_headers,
        json={"rows": ["A"], "seats_per_row": 3},
    )
    assert response.status_code == 409
    assert response.json()["error"] == "Բոլոր նստատեղերը արդեն գոյություն ունեն"


def test_duplicate_seat_is_a_conflict(client, admin_headers, hall, seats):
    response = client.post(
        f"/api/v1/admin/halls/{hall.id}/seats",
        headers=admin_headers,
        json={"row": "A", "number": 1},
    )
    assert response.status_code == 409
    assert response.json()["error"] == "Նստատեղ A1 արդեն գոյություն ունի"


def test_seat_with_live_ticket_cannot_be_deleted(client, db, user, admin_headers, hall, screening, seats):
    create_order(db, user, screening.id, [seats["A1"].id], [])

    response = client.delete(f"/api/v1/admin/seats/{seats['A1'].id}", headers=admin_headers)
    assert response.status_code == 409

    response = client.delete(f"/api/v1/admin/seats/{seats['A2'].id}", headers=admin_headers)
    assert response.status_code == 200
    db.refresh(hall)
    assert hall.capacity == 9

    response = client.delete(f"/api/v1/admin/halls/{hall.id}/seats", headers=admin_headers)
    assert response.status_code == 409


def test_delete_all_seats(client, db, admin_headers, hall, seats):
    response = client.delete(f"/api/v1/admin/halls/{hall.id}/seats", headers=admin_headers)
    assert response.json()["deleted_count"] == 10
    assert db.query(Seat).count() == 0
    db.refresh(hall)
    assert hall.capacity == 0


# ---------------------------------------------------------------------------
# Screenings & movies
# ---------------------------------------------------------------------------


def test_screening_with_tickets_cannot_be_deleted(client, db, user, admin_headers, screening, seats):
    order = create_order(db, user, screening.id, [seats["A1"].id], [])
    response = client.delete(f"/api/v1/admin/screenings/{screening.id}", headers=admin_headers)
    assert response.status_code == 409

    order.tickets[0].status = TicketStatus.cancelled
    db.commit()

    response = client.delete(f"/api/v1/admin/screenings/{screening.id}", headers=admin_headers)
    assert response.status_code == 200
    assert db.query(Screening).count() == 0


def test_movie_slug_generation_and_uniqueness(client, admin_headers, movie):
    payload = {
        "title": "Dune",
        "duration": 155,
        "rating": "8.0",
        "genre": "Sci-Fi",
        "release_date": "2024-03-01",
    }
    response = client.post("/api/v1/admin/movies/", headers=admin_headers, json=payload)
    assert response.status_code == 201
    assert response.json()["slug"].startswith("dune-")

    response = client.post("/api/v1/admin/movies/", headers=admin_headers, json={**payload, "slug": "dune"})
    assert response.status_code == 409
    assert response.json()["error"] == "Այս slug-ով ֆիլմ արդեն գոյություն ունի"


def test_public_movie_by_slug_lists_upcoming_screenings(client, movie, screening):
    response = client.get("/api/v1/movies/dune")
    assert response.status_code == 200
    assert [s["id"] for s in response.json()["screenings"]] == [str(screening.id)]

    assert client.get(f"/api/v1/movies/{movie.id}").json()["slug"] == "dune"
    assert client.get("/api/v1/movies/nope").status_code == 404


def test_movie_delete_guarded_by_tickets(client, db, user, admin_headers, movie, screening, seats):
    create_order(db, user, screening.id, [seats["A1"].id], [])
    response = client.delete(f"/api/v1/admin/movies/{movie.id}", headers=admin_headers)
    assert response.status_code == 409
    assert db.query(Movie).count() == 1


def test_premiere_crud_and_public_list(client, admin_headers, movie, tomorrow):
    response = client.post(
        "/api/v1/admin/premieres/",
        headers=admin_headers,
        json={"movie_id": str(movie.id), "premiere_date": tomorrow.isoformat()},
    )
    assert response.status_code == 201
    premiere_id = response.json()["id"]

    listed = client.get("/api/v1/premieres/").json()
    assert [p["id"] for p in listed] == [premiere_id]
    assert listed[0]["movie"]["title"] == "Dune"

    client.patch(f"/api/v1/admin/premieres/{premiere_id}", headers=admin_headers, json={"is_active": False})
    assert client.get("/api/v1/premieres/").json() == []


# ---------------------------------------------------------------------------
# Products, FAQ, contacts
# ---------------------------------------------------------------------------


def test_ordered_product_is_soft_deleted(client, db, user, admin_headers, screening, seats, products):
    create_order(
        db, user, screening.id, [seats["A1"].id],
        [OrderProductLine(product_id=products["popcorn"].id)],
    )
    response = client.delete(f"/api/v1/admin/products/{products['popcorn'].id}", headers=admin_headers)
    assert response.json() == {"success": True, "soft_deleted": True}
    db.refresh(products["popcorn"])
    assert products["popcorn"].is_active is False

    response = client.delete(f"/api/v1/admin/products/{products['cola'].id}", headers=admin_headers)
    assert response.json() == {"success": True, "soft_deleted": False}
    assert db.query(Product).count() == 1

    assert client.get("/api/v1/products/").json() == []


def test_faq_is_appended_in_order(client, db, admin_headers):
    for question in ("Ինչպե՞ս գնել տոմս", "Կա՞ կայանատեղի"):
        client.post("/api/v1/admin/faq/", headers=admin_headers, json={"question": question, "answer": "Այո"})
    orders = [f.order for f in db.query(FAQ).order_by(FAQ.order).all()]
    assert orders == [1, 2]
    assert len(client.get("/api/v1/faq/").json()) == 2


def test_contact_form_and_status_update(client, admin_headers, user_headers):
    response = client.post(
        "/api/v1/contacts/",
        headers=user_headers,
        json={"name": "Anna", "subject": "Hello", "message": "When is the next premiere?"},
    )
    assert response.status_code == 201

    listed = client.get("/api/v1/admin/contacts/", headers=admin_headers, params={"status": "new"}).json()
    assert len(listed) == 1
    assert listed[0]["user_id"] is not None

    response = client.patch(
        f"/api/v1/admin/contacts/{listed[0]['id']}", headers=admin_headers, json={"status": "replied"}
    )
    assert response.json()["status"] == "replied"
    assert client.get("/api/v1/admin/contacts/", headers=admin_headers, params={"status": "new"}).json() == []


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def test_admin_user_update_validates_phone(client, db, admin_headers, user, other_user):
    response = client.patch(f"/api/v1/admin/users/{user.id}", headers=admin_headers, json={"phone": "12"})
    assert response.status_code == 400

    response = client.patch(
        f"/api/v1/admin/users/{user.id}", headers=admin_headers, json={"phone": other_user.phone}
    )
    assert response.status_code == 409

    response = client.patch(
        f"/api/v1/admin/users/{user.id}", headers=admin_headers, json={"phone": "055 111 222"}
    )
    assert response.json()["phone"] == "055111222"


def test_admin_changes_password_and_deletes_user(client, db, admin_headers):
    target = make_user(db, phone="044555666")
    response = client.post(
        f"/api/v1/admin/users/{target.id}/password", headers=admin_headers, json={"new_password": "123"}
    )
    assert response.status_code == 400

    response = client.post(
        f"/api/v1/admin/users/{target.id}/password", headers=admin_headers, json={"new_password": "123456"}
    )
    assert response.json()["success"] is True

    response = client.delete(f"/api/v1/admin/users/{target.id}", headers=admin_headers)
    assert response.status_code == 200


def test_user_with_bookings_is_not_deleted(client, db, user, admin_headers, screening, seats):
    create_order(db, user, screening.id, [seats["A1"].id], [])
    response = client.delete(f"/api/v1/admin/users/{user.id}", headers=admin_headers)
    assert response.status_code == 409


def test_admin_ticket_status_change(client, db, user, admin_headers, screening, seats):
    order = create_order(db, user, screening.id, [seats["A1"].id], [])
    ticket_id = order.tickets[0].id

    response = client.patch(
        f"/api/v1/admin/tickets/{ticket_id}/status", headers=admin_headers, json={"status": "used"}
    )
    assert response.status_code == 409

    response = client.patch(
        f"/api/v1/admin/tickets/{ticket_id}/status", headers=admin_headers, json={"status": "paid"}
    )
    assert response.json()["status"] == "paid"
    assert len(client.get("/api/v1/admin/tickets/", headers=admin_headers).json()) == 1
