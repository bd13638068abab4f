"""
Wspolne fixtury. Zmienne srodowiskowe musza byc ustawione przed
pierwszym importem storefront, bo settings czyta je przy imporcie.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_ON_STARTUP"] = "0"
os.environ["CHAT_STORE_BACKEND"] = "memory"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "1"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import CategoryModel, ProductModel
from storefront.repos.chat_store import InMemoryChatStore


class FakeNotificationService:
    def __init__(self):
        self.sent = []

    def send_order_confirmation(self, order_number, email):
        self.sent.append((order_number, email))


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def products(db):
    db.add(CategoryModel(name="Electrónica", slug="electronica", description="Gadgets"))
    items = [
        ProductModel(name="Product A", description="A", price=Decimal("10.00"), category="Electrónica", image_url="a.jpg"),
        ProductModel(name="Product B", description="B", price=Decimal("25.50"), category="Electrónica", image_url="b.jpg"),
        ProductModel(name="Laptop Pro", description="Powerful laptop", price=Decimal("1299.99"), category="Electrónica"),
    ]
    db.add_all(items)
    db.commit()
    return {p.name: p for p in items}


@pytest.fixture
def notifier():
    return FakeNotificationService()


@pytest.fixture
def customer():
    return {
        "customer_name": "Ana Torres",
        "customer_email": "ana@example.com",
        "customer_phone": "600123456",
        "shipping_address": "Calle Mayor 12",
        "shipping_city": "Madrid",
        "shipping_postal_code": "28013",
        "shipping_province": "Madrid",
        "shipping_country": "España",
        "payment_method": "credit-card",
    }


@pytest.fixture
def chat_store():
    return InMemoryChatStore()


@pytest.fixture
def client(products, chat_store):
    from storefront.main import app
    from storefront.api.routers.chat import get_chat_store

    app.dependency_overrides[get_chat_store] = lambda: chat_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
