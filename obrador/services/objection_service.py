from __future__ import annotations

import logging

from obrador.documents import Locale
from obrador.documents.locales import t
from obrador.mail.base import EmailSender
from obrador.models.budget import Budget, BudgetStatus
from obrador.models.client import Client
from obrador.models.email_history import DocumentType, EmailHistoryEntry, EmailType
from obrador.repositories.base import BudgetRepository, ClientRepository, EmailHistoryRepository
from obrador.services.ai_service import AIService
from obrador.services.delivery import deliver

logger = logging.getLogger(__name__)


class ObjectionService:
    """Answer a client's price objection on a budget that was already sent."""

    def __init__(
        self,
        budget_repo: BudgetRepository,
        client_repo: ClientRepository,
        history_repo: EmailHistoryRepository,
        ai_service: AIService,
        email_sender: EmailSender,
        locale: Locale = Locale.ES,
    ) -> None:
        self.budget_repo = budget_repo
        self.client_repo = client_repo
        self.history_repo = history_repo
        self.ai_service = ai_service
        self.email_sender = email_sender
        self.locale = Locale(locale)

    def _load(self, budget_id: int) -> tuple[Budget, Client]:
        budget = self.budget_repo.get_by_id(budget_id)
        if budget is None:
            raise ValueError(f"Budget {budget_id} not found")
        if budget.status == BudgetStatus.PENDING:
            raise ValueError(f"Budget {budget.number} has not been sent yet")
        client = self.client_repo.get_by_id(budget.client_id)
        if client is None:
            raise ValueError(f"Client {budget.client_id} for budget {budget.number} not found")
        return budget, client

    def reply_subject(self, budget_id: int) -> str:
        proposals = [
            entry
            for entry in self.history_repo.list_by_document(DocumentType.BUDGET, budget_id)
            if entry.type == EmailType.PROPOSAL
        ]
        if proposals and proposals[0].subject:
            first_subject = proposals[0].subject
        else:
            budget = self.budget_repo.get_by_id(budget_id)
            first_subject = budget.project_name if budget and budget.project_name else str(budget_id)
        return t(self.locale, "reply_subject", subject=first_subject)

    def draft(self, budget_id: int, client_message: str) -> str:
        budget, client = self._load(budget_id)
        return self.ai_service.draft_objection_response(budget, client, client_message, self.locale)

    def send(self, budget_id: int, text: str) -> bool:
        if not text.strip():
            raise ValueError("Response text is required")
        budget, client = self._load(budget_id)
        subject = self.reply_subject(budget_id)

        if not deliver(self.email_sender, client.email, subject, text.strip()):
            return False

        self.history_repo.create(
            EmailHistoryEntry(
                document_type=DocumentType.BUDGET,
                document_id=budget.id,
                type=EmailType.RESPONSE,
                subject=subject,
                content=text.strip(),
            )
        )
        logger.info("Objection response sent for budget %s to %s", budget.number, client.email)
        return True
