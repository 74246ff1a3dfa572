from __future__ import annotations

import json
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError
from ulid import ULID

from obrador.constants import CENT, MADRID_TZ
from obrador.models.budget import Budget, BudgetStatus, LineItem
from obrador.models.client import Client, normalize_email
from obrador.models.email_history import DocumentType, EmailHistoryEntry, EmailType
from obrador.models.invoice import Invoice, InvoiceStatus
from obrador.models.service import Service
from obrador.repositories.base import (
    BudgetRepository,
    ClientRepository,
    DocumentNumberSequence,
    EmailHistoryRepository,
    InvoiceRepository,
    ServiceRepository,
)


def _now() -> datetime:
    return datetime.now(MADRID_TZ)


def _dec(value) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value))


def _money(value: Decimal) -> str:
    return str(value.quantize(CENT, rounding=ROUND_HALF_UP))


def _in_clause(prefix: str, ids: list[int]) -> tuple[str, dict[str, int]]:
    placeholders = ", ".join(f":{prefix}{i}" for i in range(len(ids)))
    params = {f"{prefix}{i}": value for i, value in enumerate(ids)}
    return placeholders, params


class _LineItemStore:
    """Shared persistence for the item rows of budgets and invoices."""

    def __init__(self, conn: Connection, table: str, parent_column: str) -> None:
        self.conn = conn
        self.table = table
        self.parent_column = parent_column

    def insert(self, parent_id: int, items: list[LineItem]) -> None:
        for i, item in enumerate(items):
            self.conn.execute(
                text(
                    f"INSERT INTO {self.table} ({self.parent_column}, service_id, service_name, unit, "
                    "unit_price, quantity, difficulty_factor, notes, included_items, total, sort_order) "
                    f"VALUES (:parent_id, :service_id, :service_name, :unit, "
                    ":unit_price, :quantity, :difficulty_factor, :notes, :included_items, :total, :sort_order)"
                ),
                {
                    "parent_id": parent_id,
                    "service_id": item.service_id,
                    "service_name": item.service_name,
                    "unit": item.unit,
                    "unit_price": None if item.unit_price is None else str(item.unit_price),
                    "quantity": str(item.quantity),
                    "difficulty_factor": str(item.difficulty_factor),
                    "notes": item.notes,
                    "included_items": json.dumps(item.included_items, ensure_ascii=False),
                    "total": None if item.total is None else str(item.total),
                    "sort_order": i,
                },
            )

    @staticmethod
    def build(row: RowMapping) -> LineItem:
        return LineItem(
            id=row["id"],
            service_id=row["service_id"],
            service_name=row["service_name"],
            unit=row["unit"],
            unit_price=_dec(row["unit_price"]),
            quantity=_dec(row["quantity"]),
            difficulty_factor=_dec(row["difficulty_factor"]),
            notes=row["notes"],
            included_items=json.loads(row["included_items"] or "[]"),
            total=_dec(row["total"]),
            sort_order=row["sort_order"],
        )

    def fetch(self, parent_ids: list[int]) -> dict[int, list[LineItem]]:
        if not parent_ids:
            return {}
        placeholders, params = _in_clause("id", parent_ids)
        rows = (
            self.conn.execute(
                text(
                    f"SELECT * FROM {self.table} WHERE {self.parent_column} IN ({placeholders}) "
                    "ORDER BY sort_order"
                ),
                params,
            )
            .mappings()
            .fetchall()
        )
        by_parent: dict[int, list[LineItem]] = {}
        for row in rows:
            by_parent.setdefault(row[self.parent_column], []).append(self.build(row))
        return by_parent


class SQLAlchemyServiceRepository(ServiceRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _build(row: RowMapping) -> Service:
        return Service(
            id=row["id"],
            uuid=row["uuid"],
            name=row["name"],
            base_price=_dec(row["base_price"]),
            unit=row["unit"],
            created_at=row["created_at"],
            deleted_at=row["deleted_at"],
        )

    def create(self, service: Service) -> Service:
        result = self.conn.execute(
            text(
                "INSERT INTO services (uuid, name, base_price, unit, created_at) "
                "VALUES (:uuid, :name, :base_price, :unit, :created_at)"
            ),
            {
                "uuid": str(ULID()),
                "name": service.name,
                "base_price": str(service.base_price),
                "unit": service.unit,
                "created_at": _now(),
            },
        )
        self.conn.commit()
        service_id = result.lastrowid
        created = self.get_by_id(service_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve service after create (id={service_id})")
        return created

    def get_by_id(self, service_id: int) -> Service | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM services WHERE id = :id AND deleted_at IS NULL"),
                {"id": service_id},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._build(row)

    def get_many(self, service_ids: list[int]) -> dict[int, Service]:
        ids = sorted(set(service_ids))
        if not ids:
            return {}
        placeholders, params = _in_clause("id", ids)
        rows = (
            self.conn.execute(
                text(f"SELECT * FROM services WHERE id IN ({placeholders}) AND deleted_at IS NULL"),
                params,
            )
            .mappings()
            .fetchall()
        )
        return {row["id"]: self._build(row) for row in rows}

    def list_all(self) -> list[Service]:
        rows = (
            self.conn.execute(text("SELECT * FROM services WHERE deleted_at IS NULL ORDER BY name"))
            .mappings()
            .fetchall()
        )
        return [self._build(row) for row in rows]

    def update(self, service: Service) -> Service:
        if service.id is None:
            raise ValueError("Cannot update service without an id")
        self.conn.execute(
            text("UPDATE services SET name = :name, base_price = :base_price, unit = :unit WHERE id = :id"),
            {
                "name": service.name,
                "base_price": str(service.base_price),
                "unit": service.unit,
                "id": service.id,
            },
        )
        self.conn.commit()
        result = self.get_by_id(service.id)
        if result is None:
            raise RuntimeError(f"Failed to retrieve service after update (id={service.id})")
        return result

    def delete(self, service_id: int) -> None:
        self.conn.execute(
            text("UPDATE services SET deleted_at = :deleted_at WHERE id = :id"),
            {"deleted_at": _now(), "id": service_id},
        )
        self.conn.commit()


class SQLAlchemyClientRepository(ClientRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _build(row: RowMapping) -> Client:
        return Client(
            id=row["id"],
            uuid=row["uuid"],
            name=row["name"],
            email=row["email"],
            phone=row["phone"],
            created_at=row["created_at"],
        )

    def find_or_create_by_email(self, name: str, email: str, phone: str = "") -> Client:
        email = normalize_email(email)
        existing = self.get_by_email(email)
        if existing is not None:
            return existing
        try:
            self.conn.execute(
                text(
                    "INSERT INTO clients (uuid, name, email, phone, created_at) "
                    "VALUES (:uuid, :name, :email, :phone, :created_at)"
                ),
                {
                    "uuid": str(ULID()),
                    "name": name.strip(),
                    "email": email,
                    "phone": phone.strip(),
                    "created_at": _now(),
                },
            )
            self.conn.commit()
        except IntegrityError:
            # Another writer inserted the same email first; reuse that row.
            self.conn.rollback()
        client = self.get_by_email(email)
        if client is None:
            raise RuntimeError(f"Failed to retrieve client after create (email={email})")
        return client

    def get_by_id(self, client_id: int) -> Client | None:
        row = (
            self.conn.execute(text("SELECT * FROM clients WHERE id = :id"), {"id": client_id})
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._build(row)

    def get_by_email(self, email: str) -> Client | None:
        row = (
            self.conn.execute(
                text("SELECT * FROM clients WHERE email = :email"),
                {"email": normalize_email(email)},
            )
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._build(row)

    def list_all(self) -> list[Client]:
        rows = self.conn.execute(text("SELECT * FROM clients ORDER BY name")).mappings().fetchall()
        return [self._build(row) for row in rows]


class SQLAlchemyBudgetRepository(BudgetRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn
        self.items = _LineItemStore(conn, "budget_items", "budget_id")

    def create(self, budget: Budget) -> Budget:
        result = self.conn.execute(
            text(
                "INSERT INTO budgets (uuid, number, client_id, project_name, distance_km, "
                "global_difficulty_factor, adjustment, adjustment_reason, total_price, status, "
                "observations, created_at) "
                "VALUES (:uuid, :number, :client_id, :project_name, :distance_km, "
                ":global_difficulty_factor, :adjustment, :adjustment_reason, :total_price, :status, "
                ":observations, :created_at)"
            ),
            {
                "uuid": str(ULID()),
                "number": budget.number,
                "client_id": budget.client_id,
                "project_name": budget.project_name,
                "distance_km": str(budget.distance_km),
                "global_difficulty_factor": str(budget.global_difficulty_factor),
                "adjustment": _money(budget.adjustment),
                "adjustment_reason": budget.adjustment_reason,
                "total_price": _money(budget.total_price),
                "status": budget.status.value,
                "observations": budget.observations,
                "created_at": _now(),
            },
        )
        budget_id = result.lastrowid
        self.items.insert(budget_id, budget.items)
        self.conn.commit()
        created = self.get_by_id(budget_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve budget after create (id={budget_id})")
        return created

    @staticmethod
    def _build(row: RowMapping, items: list[LineItem]) -> Budget:
        return Budget(
            id=row["id"],
            uuid=row["uuid"],
            number=row["number"],
            client_id=row["client_id"],
            project_name=row["project_name"],
            items=items,
            distance_km=_dec(row["distance_km"]),
            global_difficulty_factor=_dec(row["global_difficulty_factor"]),
            adjustment=_dec(row["adjustment"]),
            adjustment_reason=row["adjustment_reason"],
            total_price=_dec(row["total_price"]),
            status=BudgetStatus(row["status"]),
            observations=row["observations"],
            created_at=row["created_at"],
            sent_at=row["sent_at"],
        )

    def _build_many(self, rows: list[RowMapping]) -> list[Budget]:
        items_by_budget = self.items.fetch([row["id"] for row in rows])
        return [self._build(row, items_by_budget.get(row["id"], [])) for row in rows]

    def _fetch_one(self, where: str, params: dict) -> Budget | None:
        row = self.conn.execute(text(f"SELECT * FROM budgets WHERE {where}"), params).mappings().fetchone()
        if row is None:
            return None
        return self._build_many([row])[0]

    def get_by_id(self, budget_id: int) -> Budget | None:
        return self._fetch_one("id = :id", {"id": budget_id})

    def get_by_uuid(self, uuid: str) -> Budget | None:
        return self._fetch_one("uuid = :uuid", {"uuid": uuid})

    def list_all(self) -> list[Budget]:
        rows = (
            self.conn.execute(text("SELECT * FROM budgets ORDER BY created_at DESC, id DESC"))
            .mappings()
            .fetchall()
        )
        return self._build_many(list(rows))

    def list_by_status(self, status: BudgetStatus) -> list[Budget]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM budgets WHERE status = :status ORDER BY created_at DESC, id DESC"),
                {"status": status.value},
            )
            .mappings()
            .fetchall()
        )
        return self._build_many(list(rows))

    def update_status(self, budget_id: int, status: BudgetStatus) -> None:
        self.conn.execute(
            text("UPDATE budgets SET status = :status WHERE id = :id"),
            {"status": status.value, "id": budget_id},
        )
        self.conn.commit()

    def mark_sent(self, budget_id: int, sent_at: datetime) -> None:
        self.conn.execute(
            text("UPDATE budgets SET status = :status, sent_at = :sent_at WHERE id = :id"),
            {"status": BudgetStatus.SENT.value, "sent_at": sent_at, "id": budget_id},
        )
        self.conn.commit()


class SQLAlchemyInvoiceRepository(InvoiceRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn
        self.items = _LineItemStore(conn, "invoice_items", "invoice_id")

    def create(self, invoice: Invoice) -> Invoice:
        result = self.conn.execute(
            text(
                "INSERT INTO invoices (uuid, invoice_number, client_id, project_name, observations, "
                "subtotal, tax_amount, total_price, status, created_at) "
                "VALUES (:uuid, :invoice_number, :client_id, :project_name, :observations, "
                ":subtotal, :tax_amount, :total_price, :status, :created_at)"
            ),
            {
                "uuid": str(ULID()),
                "invoice_number": invoice.invoice_number,
                "client_id": invoice.client_id,
                "project_name": invoice.project_name,
                "observations": invoice.observations,
                "subtotal": _money(invoice.subtotal),
                "tax_amount": _money(invoice.tax_amount),
                "total_price": _money(invoice.total_price),
                "status": invoice.status.value,
                "created_at": _now(),
            },
        )
        invoice_id = result.lastrowid
        self.items.insert(invoice_id, invoice.items)
        self.conn.commit()
        created = self.get_by_id(invoice_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve invoice after create (id={invoice_id})")
        return created

    @staticmethod
    def _build(row: RowMapping, items: list[LineItem]) -> Invoice:
        return Invoice(
            id=row["id"],
            uuid=row["uuid"],
            invoice_number=row["invoice_number"],
            client_id=row["client_id"],
            project_name=row["project_name"],
            items=items,
            observations=row["observations"],
            subtotal=_dec(row["subtotal"]),
            tax_amount=_dec(row["tax_amount"]),
            total_price=_dec(row["total_price"]),
            status=InvoiceStatus(row["status"]),
            created_at=row["created_at"],
            sent_at=row["sent_at"],
        )

    def _build_many(self, rows: list[RowMapping]) -> list[Invoice]:
        items_by_invoice = self.items.fetch([row["id"] for row in rows])
        return [self._build(row, items_by_invoice.get(row["id"], [])) for row in rows]

    def _fetch_one(self, where: str, params: dict) -> Invoice | None:
        row = self.conn.execute(text(f"SELECT * FROM invoices WHERE {where}"), params).mappings().fetchone()
        if row is None:
            return None
        return self._build_many([row])[0]

    def get_by_id(self, invoice_id: int) -> Invoice | None:
        return self._fetch_one("id = :id", {"id": invoice_id})

    def get_by_uuid(self, uuid: str) -> Invoice | None:
        return self._fetch_one("uuid = :uuid", {"uuid": uuid})

    def list_all(self) -> list[Invoice]:
        rows = (
            self.conn.execute(text("SELECT * FROM invoices ORDER BY invoice_number DESC, id DESC"))
            .mappings()
            .fetchall()
        )
        return self._build_many(list(rows))

    def mark_sent(self, invoice_id: int, sent_at: datetime) -> None:
        self.conn.execute(
            text("UPDATE invoices SET status = :status, sent_at = :sent_at WHERE id = :id"),
            {"status": InvoiceStatus.SENT.value, "sent_at": sent_at, "id": invoice_id},
        )
        self.conn.commit()


class SQLAlchemyEmailHistoryRepository(EmailHistoryRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, entry: EmailHistoryEntry) -> EmailHistoryEntry:
        sent_at = entry.sent_at or _now()
        result = self.conn.execute(
            text(
                "INSERT INTO email_history (document_type, document_id, type, subject, content, sent_at) "
                "VALUES (:document_type, :document_id, :type, :subject, :content, :sent_at)"
            ),
            {
                "document_type": entry.document_type.value,
                "document_id": entry.document_id,
                "type": entry.type.value,
                "subject": entry.subject,
                "content": entry.content,
                "sent_at": sent_at,
            },
        )
        self.conn.commit()
        return entry.model_copy(update={"id": result.lastrowid, "sent_at": sent_at})

    def list_by_document(self, document_type: DocumentType, document_id: int) -> list[EmailHistoryEntry]:
        rows = (
            self.conn.execute(
                text(
                    "SELECT * FROM email_history WHERE document_type = :document_type "
                    "AND document_id = :document_id ORDER BY id"
                ),
                {"document_type": document_type.value, "document_id": document_id},
            )
            .mappings()
            .fetchall()
        )
        return [
            EmailHistoryEntry(
                id=row["id"],
                document_type=DocumentType(row["document_type"]),
                document_id=row["document_id"],
                type=EmailType(row["type"]),
                subject=row["subject"],
                content=row["content"],
                sent_at=row["sent_at"],
            )
            for row in rows
        ]


class SQLAlchemyDocumentNumberSequence(DocumentNumberSequence):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def _next(self, table: str, column: str) -> int:
        value = self.conn.execute(text(f"SELECT COALESCE(MAX({column}), 0) + 1 FROM {table}")).scalar_one()
        return int(value)

    def next_budget_number(self) -> int:
        return self._next("budgets", "number")

    def next_invoice_number(self) -> int:
        return self._next("invoices", "invoice_number")
