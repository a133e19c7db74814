import os

os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret"
os.environ.pop("STRIPE_SECRET_KEY", None)

import mongomock
import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

import database
import main


@pytest.fixture
def mongo(monkeypatch):
    fake = mongomock.MongoClient()["storefront_test"]
    monkeypatch.setattr(database, "db", fake)
    monkeypatch.setattr(main, "db", fake)
    return fake


@pytest.fixture
def client(mongo):
    with TestClient(main.app) as c:
        yield c


def make_user(mongo, name, email, password="Pass1234", is_admin=False, is_enabled=True):
    user_id = database.create_document("user", {
        "name": name,
        "email": email,
        "passwordHash": main.hash_password(password),
        "isAdmin": is_admin,
        "isEnabled": is_enabled,
    })
    return mongo["user"].find_one({"_id": ObjectId(user_id)})


def bearer(user):
    return {"Authorization": f"Bearer {main.create_token(user)}"}


@pytest.fixture
def admin(mongo):
    return make_user(mongo, "Admin", "admin@shop.io", is_admin=True)


@pytest.fixture
def customer(mongo):
    return make_user(mongo, "Casey Customer", "casey@shop.io")


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


@pytest.fixture
def customer_headers(customer):
    return bearer(customer)


@pytest.fixture
def brand(mongo):
    return ObjectId(database.create_document("brand", {"name": "Test Brand"}))


@pytest.fixture
def category(mongo):
    return ObjectId(database.create_document("category", {"name": "Test Category"}))


@pytest.fixture
def make_product(mongo, brand, category):
    def _make(**overrides):
        doc = {
            "title": "Test Product",
            "description": "A product used in tests",
            "price": 200,
            "discountPercentage": 15,
            "stockQuantity": 100,
            "brand": brand,
            "category": category,
            "thumbnail": "https://example.com/thumbnail.jpg",
            "images": ["https://example.com/image1.jpg"],
            "isDeleted": False,
        }
        doc.update(overrides)
        return ObjectId(database.create_document("product", doc))
    return _make


@pytest.fixture
def shipping_address():
    return {"street": "123 Test St", "city": "Test City", "state": "Test State", "zip": "12345", "country": "Test Country"}


@pytest.fixture
def user_factory(mongo):
    def _make(name="Shopper", email="shopper@shop.io", **kwargs):
        return make_user(mongo, name, email, **kwargs)
    return _make


@pytest.fixture
def headers_for():
    return bearer
