from __future__ import annotations

import questionary
from rich.console import Console

from obrador.constants import format_stored_number
from obrador.llm.client import LLMError
from obrador.models import format_eur
from obrador.models.budget import BudgetStatus
from obrador.services.budget_service import BudgetService
from obrador.services.objection_service import ObjectionService

console = Console()


def objection_menu(budget_service: BudgetService, objection_service: ObjectionService) -> None:
    console.print()
    console.print("[bold]Responder Objeção[/bold]", style="cyan")

    budgets = [b for b in budget_service.list_budgets() if b.status != BudgetStatus.PENDING]
    if not budgets:
        console.print("[yellow]Nenhum orçamento enviado.[/yellow]")
        return

    budget_choices = {}
    for b in budgets:
        label = f"{format_stored_number(b.number, b.created_at)} - {b.project_name or '-'} ({format_eur(b.total_price)})"
        budget_choices[label] = b
    choice = questionary.select("Selecione o orçamento:", choices=list(budget_choices.keys()) + ["Voltar"]).ask()
    if choice is None or choice == "Voltar":
        return
    budget = budget_choices[choice]

    client_message = questionary.text("Cole a mensagem do cliente:", multiline=True).ask()
    if not client_message:
        console.print("[yellow]Operação cancelada.[/yellow]")
        return

    try:
        draft = objection_service.draft(budget.id, client_message)
    except LLMError as exc:
        console.print(f"[yellow]IA indisponível ({exc}). Escreva a resposta manualmente.[/yellow]")
        draft = ""
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        return

    if draft:
        console.print()
        console.print("[bold]Rascunho:[/bold]")
        console.print(draft)
        console.print()

    text = questionary.text("Resposta (edite se necessário):", default=draft, multiline=True).ask()
    if not text or not text.strip():
        console.print("[yellow]Resposta vazia. Nada enviado.[/yellow]")
        return

    if not questionary.confirm("Enviar resposta ao cliente?", default=True).ask():
        console.print("[yellow]Resposta descartada.[/yellow]")
        return

    try:
        sent = objection_service.send(budget.id, text)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        return

    if sent:
        console.print("[green bold]Resposta enviada.[/green bold]")
    else:
        console.print("[yellow]Email não enviado. Verifique a configuração de email.[/yellow]")
