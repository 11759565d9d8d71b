import os

# Must be set before the app modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["DEFAULT_ADMIN_EMAIL"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from app.domain.models.category import Category  # noqa: E402
from app.domain.models.product import Product  # noqa: E402
from app.domain.models.user import ROLE_ADMIN, User  # noqa: E402
from app.infrastructure.database import Base, engine, get_db  # noqa: E402
from app.main import app  # noqa: E402
from tests.factories import bearer, make_category, make_product, make_user  # noqa: E402

TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db():
    """Fresh schema per test on the shared in-memory connection."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    # No context manager: lifespan (table creation, admin seed, scheduler) stays off
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def user(db) -> User:
    return make_user(db)


@pytest.fixture
def admin(db) -> User:
    return make_user(db, email="admin@example.com", role=ROLE_ADMIN)


@pytest.fixture
def user_headers(user) -> dict:
    return bearer(user)


@pytest.fixture
def admin_headers(admin) -> dict:
    return bearer(admin)


@pytest.fixture
def category(db) -> Category:
    return make_category(db)


@pytest.fixture
def product(db, category) -> Product:
    return make_product(db, category)
