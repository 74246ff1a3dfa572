from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import questionary
from rich.console import Console
from rich.table import Table

from obrador.constants import DIFFICULTY_PRESETS
from obrador.models import format_decimal, format_eur, parse_decimal
from obrador.models.budget import LineItem
from obrador.models.service import Service
from obrador.pricing import PricingResult

console = Console()

CUSTOM_FACTOR = "Outro valor"


def ask_decimal(label: str, default: str = "", allow_zero: bool = True, allow_negative: bool = False) -> Decimal | None:
    """Prompt until a valid number is typed. Returns None if the prompt is cancelled."""
    while True:
        answer = questionary.text(label, default=default).ask()
        if answer is None:
            return None
        value = parse_decimal(answer)
        if value is not None:
            if value < 0 and not allow_negative:
                console.print("[red]O valor não pode ser negativo.[/red]")
                continue
            if value == 0 and not allow_zero:
                console.print("[red]O valor deve ser maior que zero.[/red]")
                continue
            return value
        console.print("[red]Valor inválido. Tente novamente.[/red]")


def ask_client() -> tuple[str, str, str] | None:
    name = questionary.text("Nome do cliente:").ask()
    if not name:
        return None
    email = questionary.text("Email do cliente:").ask()
    if not email:
        return None
    phone = questionary.text("Telefone (opcional):").ask() or ""
    return name, email, phone


def ask_difficulty(label: str = "  Dificuldade:") -> Decimal | None:
    choice = questionary.select(label, choices=list(DIFFICULTY_PRESETS) + [CUSTOM_FACTOR]).ask()
    if choice is None:
        return None
    if choice == CUSTOM_FACTOR:
        return ask_decimal("  Fator (ex: 1.3):", default="1", allow_zero=False)
    return DIFFICULTY_PRESETS[choice]


def ask_items(services: list[Service], with_difficulty: bool = True) -> list[LineItem]:
    """Collect line items from the catalog until the user stops."""
    items: list[LineItem] = []
    choices = {f"{s.name} ({format_eur(s.base_price)}/{s.unit})": s for s in services}

    while True:
        add = questionary.confirm("Adicionar serviço?", default=not items).ask()
        if not add:
            break

        choice = questionary.select("  Serviço:", choices=list(choices.keys())).ask()
        if choice is None:
            continue
        service = choices[choice]

        quantity = ask_decimal(f"  Quantidade ({service.unit}):", allow_zero=False)
        if quantity is None:
            continue

        factor = Decimal("1")
        if with_difficulty:
            factor = ask_difficulty()
            if factor is None:
                continue

        notes = questionary.text("  Nota (opcional):").ask() or ""
        included_raw = questionary.text("  Itens incluídos, separados por ';' (opcional):").ask() or ""
        included = [part.strip() for part in included_raw.split(";") if part.strip()]

        items.append(
            LineItem(
                service_id=service.id,
                quantity=quantity,
                difficulty_factor=factor,
                notes=notes.strip(),
                included_items=included,
            )
        )
        console.print(f"  [green]Serviço adicionado: {service.name}[/green]")

    return items


def show_pricing(pricing: PricingResult, title: str = "Resumo") -> None:
    table = Table(title=title)
    table.add_column("Serviço", style="bold")
    table.add_column("Qtd", justify="right")
    table.add_column("Preço", justify="right")
    table.add_column("Fator", justify="right")
    table.add_column("Total", justify="right")

    for item in pricing.items:
        table.add_row(
            item.service_name,
            f"{format_decimal(item.quantity)} {item.unit}",
            format_eur(item.unit_price),
            format_decimal(item.difficulty_factor),
            format_eur(item.total),
        )

    console.print()
    console.print(table)
    console.print(f"  Subtotal serviços: {format_eur(pricing.items_subtotal)}")
    if pricing.distance_fee:
        console.print(f"  Deslocamento ({format_decimal(pricing.distance_km)} km): {format_eur(pricing.distance_fee)}")
    if pricing.difficulty_surcharge:
        console.print(
            f"  Dificuldade (x{format_decimal(pricing.global_difficulty_factor)}): "
            f"{format_eur(pricing.difficulty_surcharge)}"
        )
    if pricing.adjustment:
        console.print(f"  Ajuste: {format_eur(pricing.adjustment)}")
    console.print(f"  [bold]Total: {format_eur(pricing.total)}[/bold]")

    for issue in pricing.issues:
        console.print(f"  [yellow]Linha ignorada: {issue.message}[/yellow]")
    console.print()


def save_preview(pdf_bytes: bytes, default_name: str) -> None:
    path = questionary.text("Salvar PDF em:", default=default_name).ask()
    if not path:
        return
    Path(path).write_bytes(pdf_bytes)
    console.print(f"[green]PDF salvo em {path}[/green]")
