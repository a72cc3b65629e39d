from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from carlot.db.session import get_db
from carlot.dependencies.storage import get_storage
from carlot.main import app
from carlot.models.base import Base
from carlot.services import Expense, Vehicle
from carlot.services.storage import LocalBlobStorage

BASE = "/api/v1"

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture()
def engine():
    """Fresh in-memory SQLite database per test (one shared connection)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def storage(tmp_path):
    return LocalBlobStorage(
        root=tmp_path / "storage",
        public_base_url="http://testserver",
        max_size=1024 * 1024,
    )


@pytest.fixture()
def client(session_factory, storage):
    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


def signup(client, email="dealer@example.com", password="secret123"):
    r = client.post(f"{BASE}/auth/signup", json={"email": email, "password": password})
    assert r.status_code == 201, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture()
def auth_headers(client):
    return signup(client)


@pytest.fixture()
def other_headers(client):
    return signup(client, email="someone-else@example.com")


@pytest.fixture()
def create_car(client, auth_headers):
    def _create(headers=None, **overrides):
        payload = {
            "make": "Honda",
            "model": "Civic",
            "year": 2015,
            "miles": 85000,
            "purchase_price": 10000,
        }
        payload.update(overrides)
        r = client.post(f"{BASE}/cars", json=payload, headers=headers or auth_headers)
        assert r.status_code == 201, r.text
        return r.json()

    return _create


@pytest.fixture()
def make_vehicle():
    """Factory for domain Vehicle records (pure-function tests)."""
    counter = {"n": 0}

    def _make(
        *,
        purchase_price="10000",
        book_value=None,
        sold=False,
        sale_price=None,
        expenses=(),
        created_at=None,
        make="Honda",
        model="Civic",
        year=2015,
        **extra,
    ) -> Vehicle:
        counter["n"] += 1
        n = counter["n"]
        purchase = Decimal(str(purchase_price))
        return Vehicle(
            id=extra.pop("id", f"car-{n}"),
            make=make,
            model=model,
            year=year,
            miles=extra.pop("miles", 1000),
            purchase_price=purchase,
            book_value=Decimal(str(book_value)) if book_value is not None else purchase,
            created_at=created_at or T0 + timedelta(minutes=n),
            sold=sold,
            sale_price=Decimal(str(sale_price)) if sold else None,
            sale_date=T0 + timedelta(days=30) if sold else None,
            expenses=tuple(
                Expense(
                    id=f"exp-{n}-{i}",
                    description="Repair",
                    amount=Decimal(str(amount)),
                    date=date(2024, 1, 2),
                )
                for i, amount in enumerate(expenses)
            ),
            **extra,
        )

    return _make
