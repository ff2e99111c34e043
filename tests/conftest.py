"""
Fixtures: SQLite w pamięci per test, seed katalogu i userów,
fake lock/notifier zamiast Redis/Celery.
"""
import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal

# Set test environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_lock_service, get_notification_service
from app.data.database import enable_sqlite_foreign_keys, get_db, init_db
from app.data.models import CategoryModel, ProductModel, UserModel, UserSessionModel
from app.repos.catalog_repo import encode_list
from app.utils.security import get_password_hash, hash_token

PASSWORD = "bilum-pass"
# bcrypt jest wolny, jeden hash na cala sesje testow
PASSWORD_HASH = get_password_hash(PASSWORD)

ADDRESS = {
    "full_name": "Kila Wari",
    "street": "12 Champion Parade",
    "city": "Port Moresby",
    "postal_code": "121",
    "country": "PG",
    "phone": None,
}


class FakeLockService:
    def __init__(self):
        self.locks = {}
        self.released = []

    def acquire_checkout_lock(self, user_id, token, ttl):
        if user_id in self.locks:
            return False
        self.locks[user_id] = token
        return True

    def release_checkout_lock(self, user_id, token):
        self.released.append(user_id)
        if self.locks.get(user_id) == token:
            del self.locks[user_id]
            return True
        return False


class FakeNotifier:
    def __init__(self, fail=False):
        self.sent = []
        self.fail = fail

    def send_order_notification(self, user_id, order_id):
        if self.fail:
            raise ConnectionError("broker down")
        self.sent.append((user_id, order_id))


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seeded(db):
    db.add_all(
        [
            UserModel(id=1, username="kila", email="kila@example.com", full_name="Kila Wari", password_hash=PASSWORD_HASH, role="customer"),
            UserModel(id=2, username="tau", email="tau@example.com", full_name="Tau Morea", password_hash=PASSWORD_HASH, role="customer"),
            UserModel(id=99, username="admin", email="admin@example.com", full_name="Admin", password_hash=PASSWORD_HASH, role="admin"),
            CategoryModel(id=1, name="Bilums", description="Hand-woven string bags"),
            CategoryModel(id=2, name="Carvings", description="Sepik wood carvings"),
        ]
    )
    db.commit()
    expires = datetime.now(timezone.utc) + timedelta(days=1)
    db.add_all(
        [
            UserSessionModel(user_id=user_id, token_hash=hash_token(session_token(user_id)), expires_at=expires)
            for user_id in (1, 2, 99)
        ]
    )
    db.commit()
    db.add_all(
        [
            ProductModel(
                id=7,
                name="Highlands Bilum",
                description="Wool bilum from Goroka",
                price=Decimal("10.00"),
                category_id=1,
                image_url="/img/bilum.jpg",
                gallery_images=encode_list(["/img/bilum-1.jpg", "/img/bilum-2.jpg"]),
                sizes=encode_list(["S", "M", "L"]),
                colors=encode_list(["red", "black"]),
                stock_quantity=20,
                featured=True,
            ),
            ProductModel(
                id=9,
                name="Sepik Mask",
                description="Carved storyboard mask",
                price=Decimal("5.00"),
                category_id=2,
                image_url="/img/mask.jpg",
                stock_quantity=3,
            ),
            ProductModel(
                id=11,
                name="Shell Necklace",
                description="Kina shell necklace",
                price=Decimal("3.50"),
                category_id=None,
                image_url="/img/kina.jpg",
            ),
        ]
    )
    db.commit()
    return db


@pytest.fixture
def lock_service():
    return FakeLockService()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def client(session_factory, seeded, lock_service, notifier):
    from app.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_lock_service] = lambda: lock_service
    app.dependency_overrides[get_notification_service] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


def session_token(user_id):
    return f"test-session-{user_id}"


def auth(user_id):
    return {"Cookie": f"session={session_token(user_id)}"}
