"""Shared pytest fixtures for the StockLedger test-suite."""

from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from stockledger.config.database import Database
from stockledger.main import create_app
from stockledger.modules.products.service import ProductService
from stockledger.modules.suppliers.service import SupplierService
from stockledger.shared.database.models import Transaction

TENANT = "user-alpha"
OTHER_TENANT = "user-beta"
MISSING_ID = "0123456789abcdef01234567"


@pytest.fixture
def database() -> Iterator[Database]:
    """Fresh in-memory database per test."""

    database = Database("sqlite://", echo=False)
    database.create_all()
    try:
        yield database
    finally:
        database.drop_all()
        database.dispose()


@pytest.fixture
def db(database: Database) -> Iterator[Session]:
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def supplier_payload() -> dict:
    return {
        "name": "Acme Supplies",
        "contact_person": "Jane Doe",
        "email": "jane@acme.com",
        "phone": "555-0100",
    }


@pytest.fixture
def make_supplier(db: Session, supplier_payload: dict) -> Callable:
    """Factory creating suppliers through the service layer."""

    def _make(user_id: str = TENANT, **overrides):
        data = dict(supplier_payload)
        data.update(overrides)
        return SupplierService(db).create_supplier(user_id, data)

    return _make


@pytest.fixture
def make_product(db: Session, make_supplier: Callable) -> Callable:
    """Factory creating products (and a supplier when none is given)."""

    def _make(user_id: str = TENANT, supplier_id: str = None, **overrides):
        if supplier_id is None:
            supplier_id = make_supplier(user_id).id
        data = {
            "name": "Widget",
            "price": 2.50,
            "stock_quantity": 10,
            "supplier_id": supplier_id,
        }
        data.update(overrides)
        return ProductService(db).create_product(user_id, data)

    return _make


@pytest.fixture
def add_transaction(db: Session) -> Callable:
    """Insert a transaction with an explicit timestamp."""

    def _add(
        created_at: datetime,
        quantity: int = 1,
        unit_price: str = "10.00",
        user_id: str = TENANT,
        product_id: str = MISSING_ID,
        product_name: str = "Widget",
    ) -> Transaction:
        price = Decimal(unit_price)
        transaction = Transaction(
            user_id=user_id,
            product_id=product_id,
            product_name=product_name,
            quantity=quantity,
            unit_price=price,
            total_amount=price * quantity,
            created_at=created_at,
        )
        db.add(transaction)
        db.commit()
        db.refresh(transaction)
        return transaction

    return _add


@pytest.fixture
def client(database: Database) -> Iterator[TestClient]:
    app = create_app(database)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def tenant_headers() -> dict:
    return {"X-User-Id": TENANT}
