from obrador.repositories.base import (
    BudgetRepository,
    ClientRepository,
    DocumentNumberSequence,
    EmailHistoryRepository,
    InvoiceRepository,
    ServiceRepository,
)


def get_service_repository() -> ServiceRepository:
    from obrador.db import get_connection
    from obrador.repositories.sqlalchemy import SQLAlchemyServiceRepository

    return SQLAlchemyServiceRepository(get_connection())


def get_client_repository() -> ClientRepository:
    from obrador.db import get_connection
    from obrador.repositories.sqlalchemy import SQLAlchemyClientRepository

    return SQLAlchemyClientRepository(get_connection())


def get_budget_repository() -> BudgetRepository:
    from obrador.db import get_connection
    from obrador.repositories.sqlalchemy import SQLAlchemyBudgetRepository

    return SQLAlchemyBudgetRepository(get_connection())


def get_invoice_repository() -> InvoiceRepository:
    from obrador.db import get_connection
    from obrador.repositories.sqlalchemy import SQLAlchemyInvoiceRepository

    return SQLAlchemyInvoiceRepository(get_connection())


def get_email_history_repository() -> EmailHistoryRepository:
    from obrador.db import get_connection
    from obrador.repositories.sqlalchemy import SQLAlchemyEmailHistoryRepository

    return SQLAlchemyEmailHistoryRepository(get_connection())


def get_document_number_sequence() -> DocumentNumberSequence:
    from obrador.db import get_connection
    from obrador.repositories.sqlalchemy import SQLAlchemyDocumentNumberSequence

    return SQLAlchemyDocumentNumberSequence(get_connection())
