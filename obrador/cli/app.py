import questionary
from rich.console import Console

from obrador.cli.budget_menu import create_budget_menu, list_budgets_menu
from obrador.cli.invoice_menu import create_invoice_menu, list_invoices_menu
from obrador.cli.objection_menu import objection_menu
from obrador.cli.service_menu import service_management_menu
from obrador.documents import Locale
from obrador.llm.client import get_chat_client
from obrador.mail.factory import get_email_sender
from obrador.models.issuer import Issuer
from obrador.pdf.document import DocumentPDF
from obrador.pricing import PricingConfig
from obrador.repositories.factory import (
    get_budget_repository,
    get_client_repository,
    get_document_number_sequence,
    get_email_history_repository,
    get_invoice_repository,
    get_service_repository,
)
from obrador.services.ai_service import AIService
from obrador.services.budget_service import BudgetService
from obrador.services.catalog_service import CatalogService
from obrador.services.invoice_service import InvoiceService
from obrador.services.objection_service import ObjectionService
from obrador.settings import settings

console = Console()


def _build_services() -> tuple[CatalogService, BudgetService, InvoiceService, AIService, ObjectionService]:
    service_repo = get_service_repository()
    client_repo = get_client_repository()
    budget_repo = get_budget_repository()
    invoice_repo = get_invoice_repository()
    history_repo = get_email_history_repository()
    sequence = get_document_number_sequence()
    email_sender = get_email_sender()

    locale = Locale(settings.locale)
    pricing_config = PricingConfig.from_settings(settings)
    issuer = Issuer.from_settings(settings)
    pdf_generator = DocumentPDF(font_path=settings.pdf_font_path)
    ai_service = AIService(get_chat_client(), locale=locale)

    return (
        CatalogService(service_repo),
        BudgetService(
            budget_repo,
            client_repo,
            service_repo,
            history_repo,
            sequence,
            email_sender,
            pdf_generator=pdf_generator,
            pricing_config=pricing_config,
            issuer=issuer,
            locale=locale,
            validity_days=settings.budget_validity_days,
        ),
        InvoiceService(
            invoice_repo,
            client_repo,
            service_repo,
            history_repo,
            sequence,
            email_sender,
            pdf_generator=pdf_generator,
            pricing_config=pricing_config,
            issuer=issuer,
            locale=locale,
        ),
        ai_service,
        ObjectionService(budget_repo, client_repo, history_repo, ai_service, email_sender, locale=locale),
    )


def main_menu() -> None:
    catalog_service, budget_service, invoice_service, ai_service, objection_service = _build_services()

    console.print()
    console.print("[bold]Obrador - Orçamentos e Faturas[/bold]", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Menu Principal",
            choices=[
                "Criar Orçamento",
                "Listar Orçamentos",
                "Emitir Fatura",
                "Listar Faturas",
                "Responder Objeção",
                "Gerenciar Serviços",
                "Sair",
            ],
        ).ask()

        if choice is None or choice == "Sair":
            console.print("[bold]Até logo![/bold]")
            break
        elif choice == "Criar Orçamento":
            create_budget_menu(catalog_service, budget_service, ai_service)
        elif choice == "Listar Orçamentos":
            list_budgets_menu(budget_service)
        elif choice == "Emitir Fatura":
            create_invoice_menu(catalog_service, invoice_service)
        elif choice == "Listar Faturas":
            list_invoices_menu(invoice_service)
        elif choice == "Responder Objeção":
            objection_menu(budget_service, objection_service)
        elif choice == "Gerenciar Serviços":
            service_management_menu(catalog_service)
