import pytest
from sqlalchemy import Connection

from obrador.repositories.sqlalchemy import (
    SQLAlchemyBudgetRepository,
    SQLAlchemyClientRepository,
    SQLAlchemyDocumentNumberSequence,
    SQLAlchemyEmailHistoryRepository,
    SQLAlchemyInvoiceRepository,
    SQLAlchemyServiceRepository,
)


@pytest.fixture()
def service_repo(db_connection: Connection) -> SQLAlchemyServiceRepository:
    return SQLAlchemyServiceRepository(db_connection)


@pytest.fixture()
def client_repo(db_connection: Connection) -> SQLAlchemyClientRepository:
    return SQLAlchemyClientRepository(db_connection)


@pytest.fixture()
def budget_repo(db_connection: Connection) -> SQLAlchemyBudgetRepository:
    return SQLAlchemyBudgetRepository(db_connection)


@pytest.fixture()
def invoice_repo(db_connection: Connection) -> SQLAlchemyInvoiceRepository:
    return SQLAlchemyInvoiceRepository(db_connection)


@pytest.fixture()
def history_repo(db_connection: Connection) -> SQLAlchemyEmailHistoryRepository:
    return SQLAlchemyEmailHistoryRepository(db_connection)


@pytest.fixture()
def sequence(db_connection: Connection) -> SQLAlchemyDocumentNumberSequence:
    return SQLAlchemyDocumentNumberSequence(db_connection)


@pytest.fixture()
def saved_service(service_repo, sample_service):
    return service_repo.create(sample_service(id=None))


@pytest.fixture()
def saved_client(client_repo):
    return client_repo.find_or_create_by_email("Ana García", "ana@example.com", "600 000 000")
