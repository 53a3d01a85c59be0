from __future__ import annotations

import os
import time
from decimal import Decimal

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test-cafe.db")
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from cafe import app, models
from cafe.core.config import Config
from cafe.core.dependencies import get_db, get_session_factory
from cafe.db.base import Base
from cafe.enums import DiscountType, TableStatus, UserRole


def make_token(user_id: str, email: str | None = None, **claims) -> str:
    payload = {
        "sub": user_id,
        "aud": Config.JWT_AUDIENCE,
        "email": email or f"{user_id}@example.com",
        "exp": int(time.time()) + 3600,
        **claims,
    }
    return jwt.encode(payload, Config.JWT_SECRET, algorithm=Config.JWT_ALGORITHM)


def auth(user_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


class Seed:
    """Writes fixture rows straight into the test database."""

    def __init__(self, session_factory) -> None:
        self.session_factory = session_factory

    def _add(self, obj):
        with self.session_factory() as session:
            session.add(obj)
            session.commit()
            session.refresh(obj)
        return obj

    def profile(self, user_id: str, role: UserRole = UserRole.CUSTOMER, **fields) -> models.User:
        return self._add(models.User(id=user_id, email=f"{user_id}@example.com", role=role, **fields))

    def category(self, name: str = "Coffee", sort_order: int = 1) -> models.MenuCategory:
        return self._add(models.MenuCategory(name=name, sort_order=sort_order))

    def menu_item(self, name: str, price: str, category: models.MenuCategory | None = None, available: bool = True) -> models.MenuItem:
        category = category or self.category()
        return self._add(models.MenuItem(
            name=name,
            price=Decimal(price),
            category_id=category.id,
            is_available=available,
        ))

    def table(self, number: int, seats: int = 4) -> models.CafeTable:
        return self._add(models.CafeTable(table_number=number, seats=seats, status=TableStatus.AVAILABLE))

    def coupon(
        self,
        code: str,
        discount_type: DiscountType = DiscountType.PERCENTAGE,
        value: str = "10",
        min_order: str | None = None,
        usage_limit_per_user: int | None = None,
        **fields,
    ) -> models.Coupon:
        return self._add(models.Coupon(
            code=code,
            discount_type=discount_type,
            discount_value=Decimal(value),
            min_order=Decimal(min_order) if min_order is not None else None,
            usage_limit_per_user=usage_limit_per_user,
            **fields,
        ))


@pytest.fixture()
def db_path(tmp_path):
    return tmp_path / "cafe.db"


@pytest.fixture()
def seed(db_path) -> Seed:
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(bind=engine)
    try:
        yield Seed(sessionmaker(bind=engine, expire_on_commit=False))
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def client(seed, db_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    TestingSessionLocal = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with TestingSessionLocal() as db:
            yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: TestingSessionLocal

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def menu(seed):
    coffee = seed.category("Coffee", 1)
    return {
        "latte": seed.menu_item("Latte", "3.50", coffee),
        "muffin": seed.menu_item("Muffin", "2.00", coffee),
        "cake": seed.menu_item("Carrot Cake", "4.25", coffee),
        "retired": seed.menu_item("Pumpkin Spice", "5.00", coffee, available=False),
    }


@pytest.fixture()
def staff(seed):
    return {
        "admin": seed.profile("admin-1", UserRole.ADMIN, full_name="Ada Admin"),
        "staff": seed.profile("staff-1", UserRole.STAFF, full_name="Sam Staff"),
        "kitchen": seed.profile("kitchen-1", UserRole.KITCHEN, full_name="Kit Chen"),
    }


def new_cart(client: TestClient, headers: dict | None = None) -> str:
    response = client.post("/api/v1/cart/", headers=headers or {})
    assert response.status_code == 201
    return response.json()["id"]


def fill_cart(client: TestClient, cart_id: str, *items: models.MenuItem) -> dict:
    response = None
    for item in items:
        response = client.post(f"/api/v1/cart/{cart_id}/items", json={"menu_item_id": item.id})
        assert response.status_code == 200, response.text
    return response.json()


def place_dine_in(client: TestClient, seed: Seed, menu: dict, table_number: int = 7, headers: dict | None = None) -> dict:
    seed.table(table_number)
    cart_id = new_cart(client, headers)
    fill_cart(client, cart_id, menu["latte"], menu["muffin"])
    response = client.post(
        "/api/v1/orders/",
        json={"cart_id": cart_id, "order_type": "dine_in", "table_number": table_number},
        headers=headers or {},
    )
    assert response.status_code == 201, response.text
    return response.json()
