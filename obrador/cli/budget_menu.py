from __future__ import annotations

from decimal import Decimal

import questionary
from rich.console import Console
from rich.table import Table

from obrador.cli.prompts import ask_client, ask_decimal, ask_difficulty, ask_items, save_preview, show_pricing
from obrador.constants import STATUS_LABELS, format_stored_number
from obrador.models import format_eur
from obrador.models.budget import Budget, BudgetStatus
from obrador.services.ai_service import AIService
from obrador.services.budget_service import BudgetRequest, BudgetService
from obrador.services.catalog_service import CatalogService

console = Console()


def _budget_number(budget: Budget) -> str:
    return format_stored_number(budget.number, budget.created_at)


def _ask_adjustment(request: BudgetRequest, base_total: Decimal, ai_service: AIService) -> BudgetRequest:
    if request.observations and ai_service.available:
        analyze = questionary.confirm("Analisar observações com IA para sugerir ajuste?", default=True).ask()
        if analyze:
            adjustment, reason = ai_service.analyze_observations(request.observations, base_total)
            if adjustment:
                console.print(f"  [cyan]Ajuste sugerido: {format_eur(adjustment)} ({reason})[/cyan]")
                if questionary.confirm("Aplicar ajuste sugerido?", default=True).ask():
                    return request.model_copy(update={"adjustment": adjustment, "adjustment_reason": reason})
            else:
                console.print("  [dim]Nenhum ajuste sugerido.[/dim]")

    if questionary.confirm("Adicionar ajuste manual?", default=False).ask():
        adjustment = ask_decimal("  Valor do ajuste (ex: -50 ou 120):", allow_negative=True)
        if adjustment:
            reason = questionary.text("  Motivo do ajuste:").ask() or ""
            return request.model_copy(update={"adjustment": adjustment, "adjustment_reason": reason})
    return request


def create_budget_menu(catalog_service: CatalogService, budget_service: BudgetService, ai_service: AIService) -> None:
    console.print()
    console.print("[bold]Novo Orçamento[/bold]", style="cyan")

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
    distance = ask_decimal("Distância até a obra (km):", default="0")
    if distance is None:
        console.print("[yellow]Operação cancelada.[/yellow]")
        return

    console.print()
    console.print("Adicione os serviços do orçamento:")
    items = ask_items(services)
    if not items:
        console.print("[yellow]Nenhum serviço adicionado. Orçamento não criado.[/yellow]")
        return

    global_factor = Decimal("1")
    if questionary.confirm("Aplicar fator de dificuldade geral?", default=False).ask():
        global_factor = ask_difficulty("Dificuldade geral:") or Decimal("1")

    observations = questionary.text("Observações da obra (opcional):").ask() or ""

    request = BudgetRequest(
        client_name=client_name,
        client_email=client_email,
        client_phone=client_phone,
        project_name=project_name,
        items=items,
        distance_km=distance,
        global_difficulty_factor=global_factor,
        observations=observations,
    )

    base = budget_service.quote(request)
    request = _ask_adjustment(request, base.total, ai_service)
    pricing = budget_service.quote(request)
    show_pricing(pricing, title="Orçamento")

    try:
        if questionary.confirm("Gerar PDF de pré-visualização?", default=False).ask():
            save_preview(budget_service.preview_pdf(request), "orcamento-preview.pdf")

        if not questionary.confirm("Criar e enviar orçamento?", default=True).ask():
            console.print("[yellow]Orçamento descartado.[/yellow]")
            return

        outcome = budget_service.create_budget(request)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        return

    console.print()
    console.print(
        f"[green bold]Orçamento {outcome.content.document_number} criado: "
        f"{format_eur(outcome.pricing.total)}[/green bold]"
    )
    if outcome.email_sent:
        console.print(f"[green]Email enviado para {outcome.client.email}.[/green]")
    else:
        console.print("[yellow]Email não enviado. O orçamento ficou pendente.[/yellow]")


def list_budgets_menu(budget_service: BudgetService) -> None:
    budgets = budget_service.list_budgets()

    if not budgets:
        console.print("[yellow]Nenhum orçamento cadastrado.[/yellow]")
        return

    table = Table(title="Orçamentos")
    table.add_column("Nº", style="dim")
    table.add_column("Cliente", style="bold")
    table.add_column("Projeto")
    table.add_column("Total", justify="right")
    table.add_column("Status", justify="center")
    table.add_column("Data")

    clients = {}
    for b in budgets:
        if b.client_id not in clients:
            clients[b.client_id] = budget_service.get_client(b.client_id)
        client = clients[b.client_id]
        table.add_row(
            _budget_number(b),
            client.name if client else "-",
            b.project_name or "-",
            format_eur(b.total_price),
            STATUS_LABELS.get(b.status.value, b.status.value),
            b.created_at.strftime("%d/%m/%Y") if b.created_at else "-",
        )

    console.print()
    console.print(table)
    console.print()

    budget_choices = {f"{_budget_number(b)} - {b.project_name or format_eur(b.total_price)}": b for b in budgets}
    choices = list(budget_choices.keys()) + ["Voltar"]
    choice = questionary.select("Selecione um orçamento:", choices=choices).ask()

    if choice is None or choice == "Voltar":
        return

    _budget_detail_menu(budget_choices[choice], budget_service)


def _show_history(budget: Budget, budget_service: BudgetService) -> None:
    entries = budget_service.history(budget.id)
    if not entries:
        console.print("[yellow]Nenhum email registrado.[/yellow]")
        return

    table = Table(title=f"Histórico do orçamento {_budget_number(budget)}")
    table.add_column("Data")
    table.add_column("Tipo")
    table.add_column("Assunto")
    for entry in entries:
        table.add_row(
            entry.sent_at.strftime("%d/%m/%Y %H:%M") if entry.sent_at else "-",
            "Proposta" if entry.type.value == "proposal" else "Resposta",
            entry.subject,
        )
    console.print(table)


def _budget_detail_menu(budget: Budget, budget_service: BudgetService) -> None:
    while True:
        console.print()
        console.print(f"[bold cyan]Orçamento {_budget_number(budget)}[/bold cyan]")
        console.print(f"  Status: {STATUS_LABELS.get(budget.status.value, budget.status.value)}")
        console.print(f"  Total: {format_eur(budget.total_price)}")

        choice = questionary.select(
            "Ações:",
            choices=[
                "Marcar como Aceito",
                "Marcar como Rejeitado",
                "Ver Histórico",
                "Voltar",
            ],
        ).ask()

        if choice is None or choice == "Voltar":
            break
        elif choice == "Ver Histórico":
            _show_history(budget, budget_service)
        else:
            status = BudgetStatus.ACCEPTED if choice == "Marcar como Aceito" else BudgetStatus.REJECTED
            try:
                budget = budget_service.set_status(budget.id, status)
            except ValueError as exc:
                console.print(f"[red]{exc}[/red]")
                continue
            console.print(f"[green]Status atualizado: {STATUS_LABELS[status.value]}[/green]")
