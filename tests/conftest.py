import os

# Settings are read at import time; point them at throwaway values first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "test-token")
os.environ.setdefault("TELEGRAM_BOT_USERNAME", "gocinema_test_bot")

import pytest
from datetime import timedelta
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gocinema.core.security import create_access_token, get_password_hash
from gocinema.db.base import Base
from gocinema.db.session import get_db
from gocinema.main import app
from gocinema.models import Hall, Movie, Product, Screening, Seat, User
from gocinema.services.telegram import get_telegram_client
from gocinema.utils.dates import utcnow


class FakeTelegram:
    """Records outgoing messages instead of calling the Bot API."""

    def __init__(self):
        self.sent = []
        self.webhooks = []
        self.fail = False

    def send_message(self, chat_id, text):
        if self.fail:
            return False
        self.sent.append((str(chat_id), text))
        return True

    def set_webhook(self, url):
        self.webhooks.append(url)
        return {"ok": True, "result": True}


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(db_engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    yield session
    session.close()


@pytest.fixture
def telegram():
    return FakeTelegram()


@pytest.fixture
def client(db, telegram):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_telegram_client] = lambda: telegram
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


def make_user(db, phone="077123456", password="secret123", role="user", name="Test User", **extra):
    user = User(name=name, phone=phone, password_hash=get_password_hash(password), role=role, **extra)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    token = create_access_token(subject=str(user.id), role=user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(db):
    return make_user(db)


@pytest.fixture
def other_user(db):
    return make_user(db, phone="091000111", name="Other User")


@pytest.fixture
def admin(db):
    return make_user(db, phone="099999999", role="admin", name="Admin")


@pytest.fixture
def user_headers(user):
    return auth_headers(user)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def hall(db):
    hall = Hall(name="Գլխավոր դահլիճ", capacity=0)
    db.add(hall)
    db.commit()
    db.refresh(hall)
    return hall


@pytest.fixture
def seats(db, hall):
    """Rows A and B, five seats each. Keyed like 'A1'."""
    created = {}
    for row in ("A", "B"):
        for number in range(1, 6):
            seat = Seat(hall_id=hall.id, row=row, number=number)
            db.add(seat)
            created[f"{row}{number}"] = seat
    hall.capacity = len(created)
    db.commit()
    return created


@pytest.fixture
def movie(db):
    movie = Movie(
        title="Dune",
        slug="dune",
        duration=150,
        rating=Decimal("8.5"),
        genre="Sci-Fi",
        release_date=utcnow().date(),
    )
    db.add(movie)
    db.commit()
    db.refresh(movie)
    return movie


def make_screening(db, movie, hall, start, hours=2, price="2000"):
    screening = Screening(
        movie_id=movie.id,
        hall_id=hall.id,
        start_time=start,
        end_time=start + timedelta(hours=hours),
        base_price=Decimal(price),
    )
    db.add(screening)
    db.commit()
    db.refresh(screening)
    return screening


@pytest.fixture
def tomorrow():
    """Midnight UTC, two days out: far enough that nothing has started."""
    return (utcnow() + timedelta(days=2)).replace(hour=0, minute=0, second=0, microsecond=0)


@pytest.fixture
def screening(db, movie, hall, tomorrow):
    return make_screening(db, movie, hall, tomorrow + timedelta(hours=18))


@pytest.fixture
def products(db):
    popcorn = Product(name="Popcorn", price=Decimal("1500"), category="popcorn")
    cola = Product(name="Cola", price=Decimal("700"), category="drinks")
    db.add_all([popcorn, cola])
    db.commit()
    return {"popcorn": popcorn, "cola": cola}
