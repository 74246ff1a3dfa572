"""Root conftest: in-memory SQLite engine and fixtures for the full schema."""

from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import Connection, create_engine, event, text
from sqlalchemy.engine import Engine

from obrador.models.budget import Budget, LineItem
from obrador.models.client import Client
from obrador.models.invoice import Invoice
from obrador.models.service import Service

# Matches Alembic head: 3f9c1a7d2e40 (create obrador schema)
SCHEMA_DDL = """
CREATE TABLE services (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    name TEXT NOT NULL,
    base_price NUMERIC(12, 2) NOT NULL,
    unit TEXT NOT NULL,
    created_at DATETIME NOT NULL,
    deleted_at DATETIME
);

CREATE TABLE clients (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    phone TEXT NOT NULL DEFAULT '',
    created_at DATETIME NOT NULL
);

CREATE TABLE budgets (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    number INTEGER NOT NULL,
    client_id INTEGER NOT NULL REFERENCES clients(id),
    project_name TEXT NOT NULL DEFAULT '',
    distance_km NUMERIC(10, 2) NOT NULL DEFAULT 0,
    global_difficulty_factor NUMERIC(6, 3) NOT NULL DEFAULT 1,
    adjustment NUMERIC(12, 2) NOT NULL DEFAULT 0,
    adjustment_reason TEXT NOT NULL DEFAULT '',
    total_price NUMERIC(12, 2) NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending',
    observations TEXT NOT NULL DEFAULT '',
    created_at DATETIME NOT NULL,
    sent_at DATETIME
);

CREATE TABLE budget_items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    budget_id INTEGER NOT NULL REFERENCES budgets(id) ON DELETE CASCADE,
    service_id INTEGER NOT NULL REFERENCES services(id),
    service_name TEXT NOT NULL,
    unit TEXT NOT NULL,
    unit_price NUMERIC(12, 2) NOT NULL,
    quantity NUMERIC(12, 3) NOT NULL,
    difficulty_factor NUMERIC(6, 3) NOT NULL DEFAULT 1,
    notes TEXT NOT NULL DEFAULT '',
    included_items TEXT NOT NULL DEFAULT '[]',
    total NUMERIC(18, 6) NOT NULL,
    sort_order INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE invoices (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(26) NOT NULL UNIQUE,
    invoice_number INTEGER NOT NULL,
    client_id INTEGER NOT NULL REFERENCES clients(id),
    project_name TEXT NOT NULL DEFAULT '',
    observations TEXT NOT NULL DEFAULT '',
    subtotal NUMERIC(12, 2) NOT NULL,
    tax_amount NUMERIC(12, 2) NOT NULL,
    total_price NUMERIC(12, 2) NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending',
    created_at DATETIME NOT NULL,
    sent_at DATETIME
);

CREATE TABLE invoice_items (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    invoice_id INTEGER NOT NULL REFERENCES invoices(id) ON DELETE CASCADE,
    service_id INTEGER NOT NULL REFERENCES services(id),
    service_name TEXT NOT NULL,
    unit TEXT NOT NULL,
    unit_price NUMERIC(12, 2) NOT NULL,
    quantity NUMERIC(12, 3) NOT NULL,
    difficulty_factor NUMERIC(6, 3) NOT NULL DEFAULT 1,
    notes TEXT NOT NULL DEFAULT '',
    included_items TEXT NOT NULL DEFAULT '[]',
    total NUMERIC(18, 6) NOT NULL,
    sort_order INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE email_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    document_type TEXT NOT NULL,
    document_id INTEGER NOT NULL,
    type TEXT NOT NULL,
    subject TEXT NOT NULL DEFAULT '',
    content TEXT NOT NULL,
    sent_at DATETIME NOT NULL
);
"""


@pytest.fixture()
def db_engine() -> Engine:
    engine = create_engine("sqlite:///:memory:")

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    return engine


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()
    yield conn
    conn.close()


def _sample_service(**overrides) -> Service:
    defaults = dict(
        id=1,
        name="Alicatado",
        base_price=Decimal("30"),
        unit="m²",
    )
    defaults.update(overrides)
    return Service(**defaults)


def _sample_client(**overrides) -> Client:
    defaults = dict(
        id=1,
        name="Ana García López",
        email="ana@example.com",
        phone="600 000 000",
    )
    defaults.update(overrides)
    return Client(**defaults)


def _sample_line_item(**overrides) -> LineItem:
    """A priced snapshot line, as stored with a budget or invoice."""
    defaults = dict(
        service_id=1,
        quantity=Decimal("10"),
        difficulty_factor=Decimal("1"),
        notes="",
        included_items=["Cemento cola", "Rejuntado"],
        service_name="Alicatado",
        unit="m²",
        unit_price=Decimal("30"),
        total=Decimal("300"),
    )
    defaults.update(overrides)
    return LineItem(**defaults)


def _sample_budget(client_id: int = 1, **overrides) -> Budget:
    defaults = dict(
        number=12,
        client_id=client_id,
        project_name="Reforma baño",
        items=[_sample_line_item()],
        distance_km=Decimal("20"),
        total_price=Decimal("315"),
        observations="Acceso por escalera",
    )
    defaults.update(overrides)
    return Budget(**defaults)


def _sample_invoice(client_id: int = 1, **overrides) -> Invoice:
    defaults = dict(
        invoice_number=7,
        client_id=client_id,
        project_name="Reforma baño",
        items=[_sample_line_item()],
        subtotal=Decimal("500"),
        tax_amount=Decimal("105"),
        total_price=Decimal("605"),
    )
    defaults.update(overrides)
    return Invoice(**defaults)


@pytest.fixture()
def sample_service():
    return _sample_service


@pytest.fixture()
def sample_client():
    return _sample_client


@pytest.fixture()
def sample_line_item():
    return _sample_line_item


@pytest.fixture()
def sample_budget():
    return _sample_budget


@pytest.fixture()
def sample_invoice():
    return _sample_invoice
