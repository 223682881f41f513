"""
Pytest fixtures for the POS API tests.

Every test gets a fresh in-memory SQLite database shared through a
StaticPool, so the HTTP client and the direct session see the same rows.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTO_CREATE_TABLES"] = "false"

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pos_api.core.config import settings
from pos_api.core.hashing import hash_password
from pos_api.core.jwt import create_access_token
from pos_api.database import Base, get_db
from pos_api.main import app
from pos_api.models.invoices import Invoice
from pos_api.models.invoice_items import InvoiceItem
from pos_api.models.invoice_payments import InvoicePayment
from pos_api.models.products import Product
from pos_api.models.stock import StockEntry
from pos_api.models.users import User, UserRight
from pos_api.services.auth_service import token_claims


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def enforce_foreign_keys(engine):
    """SQLite only checks foreign keys when asked; the StaticPool keeps the pragma for the test."""
    with engine.connect() as conn:
        conn.exec_driver_sql("PRAGMA foreign_keys=ON")
        conn.commit()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ---------------- SEED DATA ----------------
@pytest.fixture
def products(db_session):
    """Sugar with a barcoded batch, milk with a blank-barcode batch, bread with no stock row."""
    sugar = Product(id=1, code="SUG1", name="Sugar 1kg", barcode="6001", category="Groceries",
                    purchase_cost=Decimal("80"), sales_cost=Decimal("100"), reorder_point=2)
    milk = Product(id=2, code="MLK5", name="Milk 500ml", barcode=None, category="Dairy",
                   purchase_cost=Decimal("40"), sales_cost=Decimal("55"), reorder_point=10)
    bread = Product(id=3, code="BRD4", name="Bread 400g", barcode="6003", category=" Bakery ",
                    purchase_cost=Decimal("45"), sales_cost=Decimal("60"), reorder_point=5)

    db_session.add_all([sugar, milk, bread])
    db_session.add_all([
        StockEntry(product_id=1, barcode="6001", quantity=Decimal("10"),
                   purchase_rate=Decimal("80"), sales_rate=Decimal("100")),
        StockEntry(product_id=2, barcode="", quantity=Decimal("5"),
                   purchase_rate=Decimal("40"), sales_rate=Decimal("55")),
    ])
    db_session.commit()

    return {"sugar": sugar, "milk": milk, "bread": bread}


def _user(user_id: str, user_type: str, rights=()):
    user = User(
        user_id=user_id,
        password_hash=hash_password("secret123"),
        name=user_id.title(),
        user_type=user_type,
        email=f"{user_id}@shop.test",
        active=True,
    )
    user.rights = [UserRight(module_name=module, **flags) for module, flags in rights]
    return user


@pytest.fixture
def users(db_session):
    admin = _user("admin", "admin")
    cashier = _user("cashier", "cashier", [("Sales", {"can_save": True, "can_view": True})])
    viewer = _user("viewer", "cashier", [("Sales", {"can_view": True})])
    former = _user("former", "cashier")
    former.active = False

    db_session.add_all([admin, cashier, viewer, former])
    db_session.commit()

    return {"admin": admin, "cashier": cashier, "viewer": viewer, "former": former}


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(data=token_claims(user), config=settings)}"}


@pytest.fixture
def admin_headers(users):
    return bearer(users["admin"])


@pytest.fixture
def cashier_headers(users):
    return bearer(users["cashier"])


@pytest.fixture
def viewer_headers(users):
    return bearer(users["viewer"])


def sale_payload(inv_id=501, invoice_no="RCT-501", quantity="2", payments=None, **overrides):
    """Two sugar packets paid in cash, as the till sends it."""
    payload = {
        "invId": inv_id,
        "invoiceNo": invoice_no,
        "invoiceDate": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "userId": "cashier",
        "salesmanName": "Cashier",
        "customerName": "Walk-in",
        "grandTotal": "200.00",
        "totalDiscount": "0",
        "amountTendered": "200.00",
        "changeAmount": "0",
        "products": [
            {
                "productId": 1,
                "productCode": "SUG1",
                "barcode": "6001",
                "quantity": quantity,
                "salesRate": "100",
                "purchaseRate": "80",
                "totalAmount": "200.00",
                "margin": "20",
            }
        ],
        "payments": payments if payments is not None else [{"paymentMode": "Cash", "amount": "200.00"}],
    }
    payload.update(overrides)
    return payload


def add_invoice(db, invoice_id, invoice_no, grand_total, when=None, discount="0", items=(), payments=()):
    """Insert a committed invoice directly, bypassing the sale workflow."""
    invoice = Invoice(
        id=invoice_id,
        invoice_no=invoice_no,
        invoice_date=when or datetime.now(),
        customer_name="Walk-in",
        salesman_name="Cashier",
        grand_total=Decimal(grand_total),
        total_discount=Decimal(discount),
        amount_tendered=Decimal(grand_total),
        change_amount=Decimal("0"),
    )
    db.add(invoice)
    db.flush()

    for product_id, qty, total, purchase_rate, margin in items:
        db.add(InvoiceItem(
            invoice_id=invoice_id,
            product_id=product_id,
            quantity=Decimal(qty),
            sales_rate=Decimal(total) / Decimal(qty),
            purchase_rate=Decimal(purchase_rate),
            total_amount=Decimal(total),
            margin=Decimal(margin),
        ))

    for mode, amount in payments:
        db.add(InvoicePayment(
            invoice_id=invoice_id,
            payment_mode=mode,
            amount=Decimal(amount),
            payment_date=invoice.invoice_date,
        ))

    db.commit()
    return invoice


@pytest.fixture
def sale_config():
    return settings
