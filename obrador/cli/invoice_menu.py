from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from obrador.cli.prompts import ask_client, ask_items, save_preview, show_pricing
from obrador.constants import format_stored_number
from obrador.models import format_eur
from obrador.services.catalog_service import CatalogService
from obrador.services.invoice_service import InvoiceRequest, InvoiceService

console = Console()


def create_invoice_menu(catalog_service: CatalogService, invoice_service: InvoiceService) -> None:
    console.print()
    console.print("[bold]Nova Fatura[/bold]", style="cyan")

    services = catalog_service.list_services()
    if not services:
        console.print("[yellow]Nenhum serviço cadastrado. Cadastre serviços primeiro.[/yellow]")
        return

    client = ask_client()
    if client is None:
        console.print("[yellow]Operação cancelada.[/yellow]")
        return
    client_name, client_email, client_phone = client

    project_name = questionary.text("Nome do projeto (opcional):").ask() or ""

    console.print()
    console.print("Adicione os serviços faturados:")
    items = ask_items(services, with_difficulty=False)
    if not items:
        console.print("[yellow]Nenhum serviço adicionado. Fatura não criada.[/yellow]")
        return

    observations = questionary.text("Observações (opcional):").ask() or ""

    email_subject = ""
    email_body = ""
    if questionary.confirm("Personalizar assunto e texto do email?", default=False).ask():
        email_subject = questionary.text("  Assunto:").ask() or ""
        email_body = questionary.text("  Texto do email:", multiline=True).ask() or ""

    request = InvoiceRequest(
        client_name=client_name,
        client_email=client_email,
        client_phone=client_phone,
        project_name=project_name,
        items=items,
        observations=observations,
        email_subject=email_subject,
        email_body=email_body,
    )

    show_pricing(invoice_service.quote(request), title="Fatura (sem IVA)")

    try:
        if questionary.confirm("Gerar PDF de pré-visualização?", default=False).ask():
            save_preview(invoice_service.preview_pdf(request), "fatura-preview.pdf")

        if not questionary.confirm("Emitir e enviar fatura?", default=True).ask():
            console.print("[yellow]Fatura descartada.[/yellow]")
            return

        outcome = invoice_service.create_invoice(request)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        return

    console.print()
    console.print(
        f"[green bold]Fatura {outcome.content.document_number} emitida: "
        f"{format_eur(outcome.content.total)} (IVA {format_eur(outcome.content.tax)})[/green bold]"
    )
    if outcome.email_sent:
        console.print(f"[green]Email enviado para {outcome.client.email}.[/green]")
    else:
        console.print("[yellow]Email não enviado. A fatura ficou pendente.[/yellow]")


def list_invoices_menu(invoice_service: InvoiceService) -> None:
    invoices = invoice_service.list_invoices()

    if not invoices:
        console.print("[yellow]Nenhuma fatura emitida.[/yellow]")
        return

    table = Table(title="Faturas")
    table.add_column("Nº", style="dim")
    table.add_column("Cliente", style="bold")
    table.add_column("Projeto")
    table.add_column("Subtotal", justify="right")
    table.add_column("IVA", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Status", justify="center")

    for inv in invoices:
        client = invoice_service.get_client(inv.client_id)
        table.add_row(
            format_stored_number(inv.invoice_number, inv.created_at),
            client.name if client else "-",
            inv.project_name or "-",
            format_eur(inv.subtotal),
            format_eur(inv.tax_amount),
            format_eur(inv.total_price),
            "Enviada" if inv.status.value == "sent" else "Pendente",
        )

    console.print()
    console.print(table)
    console.print()
