from abc import ABC, abstractmethod
from datetime import datetime

from obrador.models.budget import Budget, BudgetStatus
from obrador.models.client import Client
from obrador.models.email_history import DocumentType, EmailHistoryEntry
from obrador.models.invoice import Invoice
from obrador.models.service import Service


class ServiceRepository(ABC):
    @abstractmethod
    def create(self, service: Service) -> Service: ...

    @abstractmethod
    def get_by_id(self, service_id: int) -> Service | None: ...

    @abstractmethod
    def get_many(self, service_ids: list[int]) -> dict[int, Service]: ...

    @abstractmethod
    def list_all(self) -> list[Service]: ...

    @abstractmethod
    def update(self, service: Service) -> Service: ...

    @abstractmethod
    def delete(self, service_id: int) -> None: ...


class ClientRepository(ABC):
    @abstractmethod
    def find_or_create_by_email(self, name: str, email: str, phone: str = "") -> Client: ...

    @abstractmethod
    def get_by_id(self, client_id: int) -> Client | None: ...

    @abstractmethod
    def get_by_email(self, email: str) -> Client | None: ...

    @abstractmethod
    def list_all(self) -> list[Client]: ...


class BudgetRepository(ABC):
    @abstractmethod
    def create(self, budget: Budget) -> Budget: ...

    @abstractmethod
    def get_by_id(self, budget_id: int) -> Budget | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Budget | None: ...

    @abstractmethod
    def list_all(self) -> list[Budget]: ...

    @abstractmethod
    def list_by_status(self, status: BudgetStatus) -> list[Budget]: ...

    @abstractmethod
    def update_status(self, budget_id: int, status: BudgetStatus) -> None: ...

    @abstractmethod
    def mark_sent(self, budget_id: int, sent_at: datetime) -> None: ...


class InvoiceRepository(ABC):
    @abstractmethod
    def create(self, invoice: Invoice) -> Invoice: ...

    @abstractmethod
    def get_by_id(self, invoice_id: int) -> Invoice | None: ...

    @abstractmethod
    def get_by_uuid(self, uuid: str) -> Invoice | None: ...

    @abstractmethod
    def list_all(self) -> list[Invoice]: ...

    @abstractmethod
    def mark_sent(self, invoice_id: int, sent_at: datetime) -> None: ...


class EmailHistoryRepository(ABC):
    @abstractmethod
    def create(self, entry: EmailHistoryEntry) -> EmailHistoryEntry: ...

    @abstractmethod
    def list_by_document(self, document_type: DocumentType, document_id: int) -> list[EmailHistoryEntry]: ...


class DocumentNumberSequence(ABC):
    @abstractmethod
    def next_budget_number(self) -> int: ...

    @abstractmethod
    def next_invoice_number(self) -> int: ...
