from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from obrador.cli.prompts import ask_decimal
from obrador.constants import SERVICE_UNITS
from obrador.models import format_decimal, format_eur
from obrador.models.service import Service
from obrador.services.catalog_service import CatalogService

console = Console()


def _ask_unit(default: str | None = None) -> str | None:
    return questionary.select("Unidade:", choices=SERVICE_UNITS, default=default).ask()


def _show_services(services: list[Service]) -> None:
    table = Table(title="Serviços")
    table.add_column("#", style="dim")
    table.add_column("Nome", style="bold")
    table.add_column("Preço", justify="right")
    table.add_column("Unidade", justify="center")
    for s in services:
        table.add_row(str(s.id), s.name, format_eur(s.base_price), s.unit)
    console.print()
    console.print(table)
    console.print()


def _create_service(catalog_service: CatalogService) -> None:
    name = questionary.text("Nome do serviço:").ask()
    if not name:
        console.print("[yellow]Operação cancelada.[/yellow]")
        return
    price = ask_decimal("Preço unitário (ex: 45.50):")
    if price is None:
        return
    unit = _ask_unit()
    if not unit:
        return
    try:
        service = catalog_service.create_service(name, price, unit)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        return
    console.print(f"[green]Serviço '{service.name}' cadastrado.[/green]")


def _edit_service(service: Service, catalog_service: CatalogService) -> None:
    name = questionary.text("Nome do serviço:", default=service.name).ask()
    if not name:
        return
    price = ask_decimal("Preço unitário:", default=format_decimal(service.base_price))
    if price is None:
        return
    unit = _ask_unit(service.unit if service.unit in SERVICE_UNITS else None)
    if not unit:
        return
    try:
        updated = catalog_service.update_service(
            service.model_copy(update={"name": name, "base_price": price, "unit": unit})
        )
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        return
    console.print(f"[green]Serviço '{updated.name}' atualizado.[/green]")


def service_management_menu(catalog_service: CatalogService) -> None:
    while True:
        services = catalog_service.list_services()
        if services:
            _show_services(services)
        else:
            console.print("[yellow]Nenhum serviço cadastrado.[/yellow]")

        choice = questionary.select(
            "Gerenciar Serviços:",
            choices=["Adicionar Serviço", "Editar Serviço", "Excluir Serviço", "Voltar"],
        ).ask()

        if choice is None or choice == "Voltar":
            break
        elif choice == "Adicionar Serviço":
            _create_service(catalog_service)
            continue

        if not services:
            continue
        service_choices = {f"{s.id} - {s.name}": s for s in services}
        selected = questionary.select("Selecione o serviço:", choices=list(service_choices.keys())).ask()
        if selected is None:
            continue
        service = service_choices[selected]

        if choice == "Editar Serviço":
            _edit_service(service, catalog_service)
        elif choice == "Excluir Serviço":
            confirm = questionary.confirm(f"Tem certeza que deseja excluir '{service.name}'?", default=False).ask()
            if confirm:
                catalog_service.delete_service(service.id)
                console.print("[green]Serviço excluído.[/green]")
