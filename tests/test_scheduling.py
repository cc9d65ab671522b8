from datetime import timedelta

import pytest

from conftest import make_screening
from gocinema.core.exceptions import ConflictError, InvalidInputError
from gocinema.models import Hall
from gocinema.services.scheduling import (
    END_BEFORE_START,
    HALL_BUSY,
    ensure_hall_free,
    find_overlapping_screening,
)


@pytest.fixture
def day_schedule(db, movie, hall, tomorrow):
    """10:00-12:00 and 12:30-14:30 in the same hall."""
    first = make_screening(db, movie, hall, tomorrow + timedelta(hours=10))
    second = make_screening(db, movie, hall, tomorrow + timedelta(hours=12, minutes=30))
    return first, second


def test_candidate_overlapping_first_screening_is_rejected(db, hall, tomorrow, day_schedule):
    start = tomorrow + timedelta(hours=11)
    end = tomorrow + timedelta(hours=13)

    clash = find_overlapping_screening(db, hall.id, start, end)
    assert clash is not None
    assert clash.id == day_schedule[0].id

    with pytest.raises(ConflictError) as exc:
        ensure_hall_free(db, hall.id, start, end)
    assert exc.value.message == HALL_BUSY


def test_candidate_ending_inside_second_screening_is_rejected(db, hall, tomorrow, day_schedule):
    # 12:10-13:00 sits in the gap at the start but runs into 12:30-14:30
    start = tomorrow + timedelta(hours=12, minutes=10)
    end = tomorrow + timedelta(hours=13)
    clash = find_overlapping_screening(db, hall.id, start, end)
    assert clash.id == day_schedule[1].id


def test_candidate_enclosing_existing_screening_is_rejected(db, hall, tomorrow, day_schedule):
    start = tomorrow + timedelta(hours=9)
    end = tomorrow + timedelta(hours=15)
    assert find_overlapping_screening(db, hall.id, start, end) is not None


def test_back_to_back_screenings_count_as_overlap(db, hall, tomorrow, day_schedule):
    # Starts exactly when the 12:30 screening ends
    start = tomorrow + timedelta(hours=14, minutes=30)
    end = tomorrow + timedelta(hours=16)
    with pytest.raises(ConflictError):
        ensure_hall_free(db, hall.id, start, end)


def test_free_slot_is_accepted(db, hall, tomorrow, day_schedule):
    start = tomorrow + timedelta(hours=15)
    end = tomorrow + timedelta(hours=17)
    assert find_overlapping_screening(db, hall.id, start, end) is None
    ensure_hall_free(db, hall.id, start, end)


def test_other_hall_is_independent(db, tomorrow, day_schedule):
    small = Hall(name="Small", capacity=0)
    db.add(small)
    db.commit()
    ensure_hall_free(db, small.id, tomorrow + timedelta(hours=11), tomorrow + timedelta(hours=13))


def test_updated_screening_does_not_clash_with_itself(db, hall, tomorrow, day_schedule):
    first = day_schedule[0]
    # Extend 10:00-12:00 to 10:00-12:15, still clear of 12:30
    ensure_hall_free(
        db, hall.id,
        tomorrow + timedelta(hours=10),
        tomorrow + timedelta(hours=12, minutes=15),
        exclude_id=first.id,
    )


def test_end_must_follow_start(db, hall, tomorrow):
    start = tomorrow + timedelta(hours=20)
    with pytest.raises(InvalidInputError) as exc:
        ensure_hall_free(db, hall.id, start, start)
    assert exc.value.message == END_BEFORE_START


def test_admin_create_screening_conflict_is_tagged_error(client, admin_headers, movie, hall, tomorrow, day_schedule):
    response = client.post(
        "/api/v1/admin/screenings/",
        headers=admin_headers,
        json={
            "movie_id": str(movie.id),
            "hall_id": str(hall.id),
            "start_time": (tomorrow + timedelta(hours=11)).isoformat(),
            "end_time": (tomorrow + timedelta(hours=13)).isoformat(),
        },
    )
    assert response.status_code == 409
    assert response.json() == {"success": False, "error": HALL_BUSY}


def test_admin_create_screening_uses_default_price(client, admin_headers, movie, hall, tomorrow):
    response = client.post(
        "/api/v1/admin/screenings/",
        headers=admin_headers,
        json={
            "movie_id": str(movie.id),
            "hall_id": str(hall.id),
            "start_time": (tomorrow + timedelta(hours=20)).isoformat(),
            "end_time": (tomorrow + timedelta(hours=22)).isoformat(),
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert float(body["base_price"]) == 2000
    assert body["hall"]["id"] == str(hall.id)


def test_admin_update_screening_rechecks_overlap(client, admin_headers, tomorrow, day_schedule):
    second = day_schedule[1]
    response = client.patch(
        f"/api/v1/admin/screenings/{second.id}",
        headers=admin_headers,
        json={"start_time": (tomorrow + timedelta(hours=11, minutes=30)).isoformat()},
    )
    assert response.status_code == 409


def test_public_schedule_lists_upcoming_screenings(client, screening):
    response = client.get("/api/v1/screenings/")
    assert response.status_code == 200
    assert [s["id"] for s in response.json()] == [str(screening.id)]
