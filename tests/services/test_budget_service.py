from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from obrador.documents import Locale
from obrador.mail.base import EmailDeliveryError, EmailNotConfiguredError
from obrador.models.budget import Budget, BudgetStatus, LineItem
from obrador.models.client import Client
from obrador.models.email_history import DocumentType, EmailType
from obrador.models.service import Service
from obrador.services.budget_service import BudgetRequest, BudgetService, check_pricing, validate_client_fields

CATALOG = {
    1: Service(id=1, name="Alicatado", base_price=Decimal("30"), unit="m²"),
    2: Service(id=2, name="Rodapié", base_price=Decimal("20"), unit="ml"),
}


def _request(**overrides) -> BudgetRequest:
    defaults = dict(
        client_name="Ana García",
        client_email="ana@example.com",
        project_name="Baño",
        items=[
            LineItem(service_id=1, quantity=Decimal("10")),
            LineItem(service_id=2, quantity=Decimal("5"), difficulty_factor=Decimal("1.2")),
        ],
        distance_km=Decimal("25"),
    )
    defaults.update(overrides)
    return BudgetRequest(**defaults)


class TestValidation:
    def test_client_name_required(self):
        with pytest.raises(ValueError, match="name"):
            validate_client_fields("  ", "ana@example.com")

    @pytest.mark.parametrize("email", ["", "ana", "@example.com", "ana@"])
    def test_invalid_email(self, email):
        with pytest.raises(ValueError, match="email"):
            validate_client_fields("Ana", email)


class TestBudgetService:
    def setup_method(self):
        self.budget_repo = MagicMock()
        self.client_repo = MagicMock()
        self.service_repo = MagicMock()
        self.history_repo = MagicMock()
        self.sequence = MagicMock()
        self.email_sender = MagicMock()
        self.pdf_generator = MagicMock()

        self.service_repo.get_many.return_value = CATALOG
        self.client_repo.find_or_create_by_email.return_value = Client(
            id=3, name="Ana García", email="ana@example.com"
        )
        self.sequence.next_budget_number.return_value = 12
        self.budget_repo.create.side_effect = lambda budget: budget.model_copy(update={"id": 5, "uuid": "b-uuid"})
        self.budget_repo.get_by_id.side_effect = lambda budget_id: Budget(
            id=budget_id, number=12, client_id=3, total_price=Decimal("450"), status=BudgetStatus.SENT
        )
        self.pdf_generator.generate.return_value = b"%PDF-fake"

        self.service = BudgetService(
            self.budget_repo,
            self.client_repo,
            self.service_repo,
            self.history_repo,
            self.sequence,
            self.email_sender,
            pdf_generator=self.pdf_generator,
            locale=Locale.ES,
        )

    def test_quote_has_no_side_effects(self):
        pricing = self.service.quote(_request())

        assert pricing.total == Decimal("450")
        self.budget_repo.create.assert_not_called()
        self.client_repo.find_or_create_by_email.assert_not_called()
        self.email_sender.send.assert_not_called()

    def test_create_budget_sends_and_marks_sent(self):
        outcome = self.service.create_budget(_request())

        assert outcome.email_sent is True
        assert outcome.pricing.total == Decimal("450")
        assert outcome.content.document_number.startswith("12/")

        saved = self.budget_repo.create.call_args[0][0]
        assert saved.number == 12
        assert saved.client_id == 3
        assert saved.total_price == Decimal("450")
        assert [i.total for i in saved.items] == [Decimal("300"), Decimal("120")]
        assert saved.items[1].service_name == "Rodapié"

        self.budget_repo.mark_sent.assert_called_once()
        assert self.budget_repo.mark_sent.call_args[0][0] == 5
        assert outcome.budget.status == BudgetStatus.SENT

        message = self.email_sender.send.call_args[0][0]
        assert message.to == "ana@example.com"
        assert message.subject == outcome.content.subject
        assert message.body == outcome.content.email_text
        assert message.attachments[0].filename == "presupuesto-12.pdf"
        assert message.attachments[0].content == b"%PDF-fake"

    def test_create_budget_records_proposal_history(self):
        self.service.create_budget(_request())

        entry = self.history_repo.create.call_args[0][0]
        assert entry.document_type == DocumentType.BUDGET
        assert entry.document_id == 5
        assert entry.type == EmailType.PROPOSAL

    def test_email_failure_leaves_budget_pending(self):
        self.email_sender.send.side_effect = EmailDeliveryError("smtp down")

        outcome = self.service.create_budget(_request())

        assert outcome.email_sent is False
        assert outcome.budget.status == BudgetStatus.PENDING
        self.budget_repo.mark_sent.assert_not_called()

    def test_pdf_failure_persists_nothing(self):
        self.pdf_generator.generate.side_effect = RuntimeError("font table corrupt")

        with pytest.raises(RuntimeError, match="font table"):
            self.service.create_budget(_request())

        self.budget_repo.create.assert_not_called()
        self.history_repo.create.assert_not_called()
        self.email_sender.send.assert_not_called()

    def test_unconfigured_email_leaves_budget_pending(self):
        self.email_sender.send.side_effect = EmailNotConfiguredError("no backend")

        outcome = self.service.create_budget(_request())
        assert outcome.email_sent is False

    def test_rejected_distance_aborts(self):
        with pytest.raises(ValueError, match="distance"):
            self.service.create_budget(_request(distance_km=Decimal("-5")))
        self.budget_repo.create.assert_not_called()
        self.client_repo.find_or_create_by_email.assert_not_called()

    def test_no_priced_items_aborts(self):
        with pytest.raises(ValueError, match="No valid items"):
            self.service.create_budget(_request(items=[LineItem(service_id=99, quantity=Decimal("1"))]))
        self.budget_repo.create.assert_not_called()

    def test_unresolved_items_are_dropped_with_warning(self, caplog):
        items = [LineItem(service_id=1, quantity=Decimal("10")), LineItem(service_id=99, quantity=Decimal("1"))]
        with caplog.at_level("WARNING", logger="obrador.services.budget_service"):
            outcome = self.service.create_budget(_request(items=items, distance_km=Decimal("0")))

        assert outcome.pricing.unresolved_service_ids == [99]
        assert outcome.pricing.total == Decimal("300")
        assert self.budget_repo.create.call_args[0][0].total_price == Decimal("300")
        assert "unresolved_service" in caplog.text

    def test_preview_pdf_persists_nothing(self):
        result = self.service.preview_pdf(_request())

        assert result == b"%PDF-fake"
        self.budget_repo.create.assert_not_called()
        self.client_repo.find_or_create_by_email.assert_not_called()
        self.email_sender.send.assert_not_called()
        self.history_repo.create.assert_not_called()

    def test_set_status_accepts_sent_budget(self):
        self.budget_repo.get_by_id.side_effect = None
        self.budget_repo.get_by_id.return_value = Budget(id=5, number=12, client_id=3, status=BudgetStatus.SENT)

        result = self.service.set_status(5, BudgetStatus.ACCEPTED)

        self.budget_repo.update_status.assert_called_once_with(5, BudgetStatus.ACCEPTED)
        assert result.status == BudgetStatus.ACCEPTED

    def test_set_status_rejects_pending_budget(self):
        self.budget_repo.get_by_id.side_effect = None
        self.budget_repo.get_by_id.return_value = Budget(id=5, number=12, client_id=3)

        with pytest.raises(ValueError, match="never sent"):
            self.service.set_status(5, BudgetStatus.REJECTED)
        self.budget_repo.update_status.assert_not_called()

    def test_set_status_only_closes(self):
        self.budget_repo.get_by_id.side_effect = None
        self.budget_repo.get_by_id.return_value = Budget(id=5, number=12, client_id=3, status=BudgetStatus.SENT)

        with pytest.raises(ValueError, match="accepted or rejected"):
            self.service.set_status(5, BudgetStatus.PENDING)

    def test_set_status_missing_budget(self):
        self.budget_repo.get_by_id.side_effect = None
        self.budget_repo.get_by_id.return_value = None

        with pytest.raises(ValueError, match="not found"):
            self.service.set_status(5, BudgetStatus.ACCEPTED)

    def test_list_budgets(self):
        self.service.list_budgets()
        self.budget_repo.list_all.assert_called_once()

        self.service.list_budgets(BudgetStatus.SENT)
        self.budget_repo.list_by_status.assert_called_once_with(BudgetStatus.SENT)

    def test_history(self):
        self.service.history(5)
        self.history_repo.list_by_document.assert_called_once_with(DocumentType.BUDGET, 5)


class TestCheckPricing:
    def test_passes_complete_pricing(self):
        from obrador.pricing import price_budget

        check_pricing(price_budget([LineItem(service_id=1, quantity=Decimal("1"))], CATALOG))
