from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from obrador.constants import MADRID_TZ
from obrador.documents import DocumentContent, DocumentKind, Locale, build_document_content
from obrador.documents.locales import t
from obrador.mail.base import Attachment, EmailSender
from obrador.models.budget import Budget, BudgetStatus, LineItem
from obrador.models.client import Client, normalize_email
from obrador.models.email_history import DocumentType, EmailHistoryEntry, EmailType
from obrador.models.issuer import Issuer
from obrador.pdf.document import DocumentPDF
from obrador.pricing import PricingConfig, PricingResult, price_budget
from obrador.repositories.base import (
    BudgetRepository,
    ClientRepository,
    DocumentNumberSequence,
    EmailHistoryRepository,
    ServiceRepository,
)
from obrador.services.delivery import deliver

logger = logging.getLogger(__name__)

CLOSED_STATUSES = (BudgetStatus.ACCEPTED, BudgetStatus.REJECTED)


def _now() -> datetime:
    return datetime.now(MADRID_TZ)


class BudgetRequest(BaseModel):
    client_name: str
    client_email: str
    client_phone: str = ""
    project_name: str = ""
    items: list[LineItem]
    distance_km: Decimal = Decimal("0")
    global_difficulty_factor: Decimal = Decimal("1")
    adjustment: Decimal = Decimal("0")
    adjustment_reason: str = ""
    observations: str = ""


class BudgetOutcome(BaseModel):
    budget: Budget
    client: Client
    pricing: PricingResult
    content: DocumentContent
    email_sent: bool = False


def validate_client_fields(name: str, email: str) -> None:
    if not name.strip():
        raise ValueError("Client name is required")
    email = normalize_email(email)
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise ValueError(f"Invalid client email: {email!r}")


def check_pricing(pricing: PricingResult) -> None:
    """Raise for a request that cannot become a document; warn about dropped lines."""
    if pricing.rejected:
        raise ValueError(pricing.issues[0].message)
    for issue in pricing.issues:
        logger.warning("Line %s skipped (%s): %s", issue.line_index, issue.kind.value, issue.message)
    if not pricing.items:
        raise ValueError("No valid items to price")


class BudgetService:
    def __init__(
        self,
        budget_repo: BudgetRepository,
        client_repo: ClientRepository,
        service_repo: ServiceRepository,
        history_repo: EmailHistoryRepository,
        sequence: DocumentNumberSequence,
        email_sender: EmailSender,
        pdf_generator: DocumentPDF | None = None,
        pricing_config: PricingConfig | None = None,
        issuer: Issuer | None = None,
        locale: Locale = Locale.ES,
        validity_days: int = 15,
    ) -> None:
        self.budget_repo = budget_repo
        self.client_repo = client_repo
        self.service_repo = service_repo
        self.history_repo = history_repo
        self.sequence = sequence
        self.email_sender = email_sender
        self.pdf_generator = pdf_generator or DocumentPDF()
        self.pricing_config = pricing_config or PricingConfig()
        self.issuer = issuer or Issuer()
        self.locale = Locale(locale)
        self.validity_days = validity_days

    def quote(self, request: BudgetRequest) -> PricingResult:
        """Price a request against the current catalog. Nothing is persisted."""
        catalog = self.service_repo.get_many([item.service_id for item in request.items])
        return price_budget(
            request.items,
            catalog,
            distance_km=request.distance_km,
            global_difficulty_factor=request.global_difficulty_factor,
            manual_adjustment=request.adjustment,
            config=self.pricing_config,
        )

    def _build_content(
        self,
        request: BudgetRequest,
        pricing: PricingResult,
        client: Client,
        number: int,
        issued_at: datetime,
    ) -> DocumentContent:
        return build_document_content(
            pricing,
            client,
            self.locale,
            issued_at.date(),
            kind=DocumentKind.BUDGET,
            number=number,
            project_name=request.project_name,
            observations=request.observations,
            adjustment_reason=request.adjustment_reason,
            validity_days=self.validity_days,
        )

    def preview_pdf(self, request: BudgetRequest) -> bytes:
        validate_client_fields(request.client_name, request.client_email)
        pricing = self.quote(request)
        check_pricing(pricing)
        client = Client(
            name=request.client_name.strip(),
            email=normalize_email(request.client_email),
            phone=request.client_phone.strip(),
        )
        number = self.sequence.next_budget_number()
        content = self._build_content(request, pricing, client, number, _now())
        return self.pdf_generator.generate(content, client, self.issuer, observations=request.observations)

    def create_budget(self, request: BudgetRequest) -> BudgetOutcome:
        validate_client_fields(request.client_name, request.client_email)
        pricing = self.quote(request)
        check_pricing(pricing)

        client = self.client_repo.find_or_create_by_email(
            request.client_name,
            request.client_email,
            request.client_phone,
        )

        number = self.sequence.next_budget_number()
        content = self._build_content(request, pricing, client, number, _now())
        pdf_bytes = self.pdf_generator.generate(content, client, self.issuer, observations=request.observations)

        budget = self.budget_repo.create(
            Budget(
                number=number,
                client_id=client.id,
                project_name=request.project_name.strip(),
                items=[item.to_line_item(sort_order=i) for i, item in enumerate(pricing.items)],
                distance_km=pricing.distance_km,
                global_difficulty_factor=pricing.global_difficulty_factor,
                adjustment=pricing.adjustment,
                adjustment_reason=request.adjustment_reason.strip(),
                total_price=pricing.total,
                observations=request.observations.strip(),
            )
        )
        logger.info(
            "Budget created: id=%s number=%s client=%s total=%s items=%d",
            budget.id,
            budget.number,
            client.email,
            pricing.total,
            len(pricing.items),
        )

        self.history_repo.create(
            EmailHistoryEntry(
                document_type=DocumentType.BUDGET,
                document_id=budget.id,
                type=EmailType.PROPOSAL,
                subject=content.subject,
                content=content.email_text,
            )
        )

        attachment = Attachment(filename=t(self.locale, "budget_filename", number=number), content=pdf_bytes)
        email_sent = deliver(self.email_sender, client.email, content.subject, content.email_text, [attachment])
        if email_sent:
            self.budget_repo.mark_sent(budget.id, _now())
            budget = self.budget_repo.get_by_id(budget.id) or budget
            logger.info("Budget %s sent to %s", budget.number, client.email)
        else:
            logger.warning("Budget %s saved but not sent; status stays pending", budget.number)

        return BudgetOutcome(
            budget=budget,
            client=client,
            pricing=pricing,
            content=content,
            email_sent=email_sent,
        )

    def set_status(self, budget_id: int, status: BudgetStatus) -> Budget:
        budget = self.budget_repo.get_by_id(budget_id)
        if budget is None:
            raise ValueError(f"Budget {budget_id} not found")
        if status not in CLOSED_STATUSES:
            raise ValueError(f"Status can only be set to accepted or rejected, not {status.value}")
        if budget.status == BudgetStatus.PENDING:
            raise ValueError(f"Budget {budget.number} was never sent and cannot be closed")
        self.budget_repo.update_status(budget_id, status)
        logger.info("Budget %s status: %s -> %s", budget.number, budget.status.value, status.value)
        return budget.model_copy(update={"status": status})

    def list_budgets(self, status: BudgetStatus | None = None) -> list[Budget]:
        if status is not None:
            return self.budget_repo.list_by_status(status)
        return self.budget_repo.list_all()

    def get_budget(self, budget_id: int) -> Budget | None:
        logger.debug("Looking up budget id=%s", budget_id)
        return self.budget_repo.get_by_id(budget_id)

    def get_client(self, client_id: int) -> Client | None:
        return self.client_repo.get_by_id(client_id)

    def history(self, budget_id: int) -> list[EmailHistoryEntry]:
        return self.history_repo.list_by_document(DocumentType.BUDGET, budget_id)
