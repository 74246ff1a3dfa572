from __future__ import annotations

import logging
from datetime import datetime

from pydantic import BaseModel

from obrador.constants import MADRID_TZ
from obrador.documents import DocumentContent, DocumentKind, Locale, build_document_content
from obrador.documents.locales import t
from obrador.mail.base import Attachment, EmailSender
from obrador.models.budget import LineItem
from obrador.models.client import Client, normalize_email
from obrador.models.email_history import DocumentType, EmailHistoryEntry, EmailType
from obrador.models.invoice import Invoice
from obrador.models.issuer import Issuer
from obrador.pdf.document import DocumentPDF
from obrador.pricing import PricingConfig, PricingResult, price_budget
from obrador.repositories.base import (
    ClientRepository,
    DocumentNumberSequence,
    EmailHistoryRepository,
    InvoiceRepository,
    ServiceRepository,
)
from obrador.services.budget_service import check_pricing, validate_client_fields
from obrador.services.delivery import deliver

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(MADRID_TZ)


class InvoiceRequest(BaseModel):
    client_name: str
    client_email: str
    client_phone: str = ""
    project_name: str = ""
    items: list[LineItem]
    observations: str = ""
    email_subject: str = ""
    email_body: str = ""


class InvoiceOutcome(BaseModel):
    invoice: Invoice
    client: Client
    pricing: PricingResult
    content: DocumentContent
    email_sent: bool = False


class InvoiceService:
    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        client_repo: ClientRepository,
        service_repo: ServiceRepository,
        history_repo: EmailHistoryRepository,
        sequence: DocumentNumberSequence,
        email_sender: EmailSender,
        pdf_generator: DocumentPDF | None = None,
        pricing_config: PricingConfig | None = None,
        issuer: Issuer | None = None,
        locale: Locale = Locale.ES,
    ) -> None:
        self.invoice_repo = invoice_repo
        self.client_repo = client_repo
        self.service_repo = service_repo
        self.history_repo = history_repo
        self.sequence = sequence
        self.email_sender = email_sender
        self.pdf_generator = pdf_generator or DocumentPDF()
        self.pricing_config = pricing_config or PricingConfig()
        self.issuer = issuer or Issuer()
        self.locale = Locale(locale)

    def quote(self, request: InvoiceRequest) -> PricingResult:
        catalog = self.service_repo.get_many([item.service_id for item in request.items])
        return price_budget(request.items, catalog, config=self.pricing_config)

    def _build_content(
        self,
        request: InvoiceRequest,
        pricing: PricingResult,
        client: Client,
        number: int,
    ) -> DocumentContent:
        return build_document_content(
            pricing,
            client,
            self.locale,
            _now().date(),
            kind=DocumentKind.INVOICE,
            number=number,
            project_name=request.project_name,
            observations=request.observations,
        )

    def default_email(self, content: DocumentContent, client: Client) -> tuple[str, str]:
        """The subject and short body used when no custom text is given."""
        body = t(self.locale, "invoice_short_body", first_name=client.first_name, number=content.document_number)
        return content.subject, body

    def preview_pdf(self, request: InvoiceRequest) -> bytes:
        validate_client_fields(request.client_name, request.client_email)
        pricing = self.quote(request)
        check_pricing(pricing)
        client = Client(
            name=request.client_name.strip(),
            email=normalize_email(request.client_email),
            phone=request.client_phone.strip(),
        )
        content = self._build_content(request, pricing, client, self.sequence.next_invoice_number())
        return self.pdf_generator.generate(content, client, self.issuer, observations=request.observations)

    def create_invoice(self, request: InvoiceRequest) -> InvoiceOutcome:
        validate_client_fields(request.client_name, request.client_email)
        pricing = self.quote(request)
        check_pricing(pricing)

        client = self.client_repo.find_or_create_by_email(
            request.client_name,
            request.client_email,
            request.client_phone,
        )
        number = self.sequence.next_invoice_number()
        content = self._build_content(request, pricing, client, number)
        pdf_bytes = self.pdf_generator.generate(content, client, self.issuer, observations=request.observations)

        default_subject, default_body = self.default_email(content, client)
        subject = request.email_subject.strip() or default_subject
        body = request.email_body.strip() or default_body

        invoice = self.invoice_repo.create(
            Invoice(
                invoice_number=number,
                client_id=client.id,
                project_name=request.project_name.strip(),
                items=[item.to_line_item(sort_order=i) for i, item in enumerate(pricing.items)],
                observations=request.observations.strip(),
                subtotal=content.subtotal,
                tax_amount=content.tax,
                total_price=content.total,
            )
        )
        logger.info(
            "Invoice created: id=%s number=%s client=%s subtotal=%s total=%s",
            invoice.id,
            invoice.invoice_number,
            client.email,
            content.subtotal,
            content.total,
        )

        self.history_repo.create(
            EmailHistoryEntry(
                document_type=DocumentType.INVOICE,
                document_id=invoice.id,
                type=EmailType.PROPOSAL,
                subject=subject,
                content=body,
            )
        )

        attachment = Attachment(filename=t(self.locale, "invoice_filename", number=number), content=pdf_bytes)
        email_sent = deliver(self.email_sender, client.email, subject, body, [attachment])
        if email_sent:
            self.invoice_repo.mark_sent(invoice.id, _now())
            invoice = self.invoice_repo.get_by_id(invoice.id) or invoice
            logger.info("Invoice %s sent to %s", invoice.invoice_number, client.email)
        else:
            logger.warning("Invoice %s saved but not sent; status stays pending", invoice.invoice_number)

        return InvoiceOutcome(
            invoice=invoice,
            client=client,
            pricing=pricing,
            content=content,
            email_sent=email_sent,
        )

    def list_invoices(self) -> list[Invoice]:
        return self.invoice_repo.list_all()

    def get_invoice(self, invoice_id: int) -> Invoice | None:
        logger.debug("Looking up invoice id=%s", invoice_id)
        return self.invoice_repo.get_by_id(invoice_id)

    def get_client(self, client_id: int) -> Client | None:
        return self.client_repo.get_by_id(client_id)

    def history(self, invoice_id: int) -> list[EmailHistoryEntry]:
        return self.history_repo.list_by_document(DocumentType.INVOICE, invoice_id)
