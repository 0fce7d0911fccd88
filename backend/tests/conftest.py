"""
Pytest fixtures for the Stockroom backend tests.

Provides an in-memory database, a clean schema per test, the test client,
and small factories for products and suppliers.

The app context is pushed for the whole session, so requests made through
the test client share db.session with the test body: objects created by a
fixture see the effects of a request after it commits.
"""

import pytest
from stockroom import create_app
from stockroom.extensions import db
from stockroom.services import products_service, supplier_service

TENANT_A = "INV1700000000000111"
TENANT_B = "INV1700000000000222"

TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'BCRYPT_ROUNDS': 4,
    'LOW_STOCK_THRESHOLD': 2,
    'DISPLAY_TIMEZONE': 'Asia/Kolkata',
}


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TEST_CONFIG)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def db_session(app):
    """Empty every table before each test."""
    meta = db.metadata
    for table in reversed(meta.sorted_tables):
        db.session.execute(table.delete())
    db.session.commit()

    yield db.session

    # Cleanup after test
    db.session.rollback()


@pytest.fixture(scope='function')
def client(app, db_session):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def make_product(db_session):
    """Factory: create a product through the service layer."""
    def _make(inventory_id=TENANT_A, **overrides):
        patch = {
            "inventory_id": inventory_id,
            "name": "Cordless Drill",
            "description": "18V drill with two batteries",
            "original_price": 120.0,
            "price": 99.5,
            "stock": 10,
            "category": "Hardware",
            "supplier_id": "SUP-NONE",
        }
        patch.update(overrides)
        return products_service.create_product(patch=patch)
    return _make


@pytest.fixture(scope='function')
def make_supplier(db_session):
    """Factory: create a supplier through the service layer."""
    def _make(inventory_id=TENANT_A, **overrides):
        patch = {
            "inventory_id": inventory_id,
            "name": "Acme Wholesale",
            "email": "orders@acme.test",
            "phone": "+1 555 0100",
        }
        patch.update(overrides)
        return supplier_service.create_supplier(patch=patch)
    return _make


@pytest.fixture(scope='function')
def product_a(make_product):
    """Product with stock 10 in tenant A."""
    return make_product()


def product_payload(**overrides) -> dict:
    payload = {
        "InventoryId": TENANT_A,
        "name": "Cordless Drill",
        "description": "18V drill with two batteries",
        "original_price": 120,
        "price": 99.5,
        "stock": 10,
        "category": "Hardware",
        "supplierId": "SUP-NONE",
    }
    payload.update(overrides)
    return payload


def transaction_payload(product, **overrides) -> dict:
    payload = {
        "InventoryId": product.inventory_id,
        "productId": product.product_id,
        "type": "SALE",
        "quantity": 3,
        "unitPrice": 5,
    }
    payload.update(overrides)
    return payload
