from __future__ import annotations

from datetime import date
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel

from obrador.constants import DATE_STAMP_FORMAT, format_document_number
from obrador.documents.locales import Locale, t
from obrador.models import format_decimal, format_eur
from obrador.models.client import Client
from obrador.pricing import ONE, ZERO, PricedItem, PricingResult, compute_vat, to_cents

RULE = "═" * 59
THIN_RULE = "─" * 59


class DocumentKind(str, Enum):
    BUDGET = "budget"
    INVOICE = "invoice"


class LineKind(str, Enum):
    ITEM = "item"
    INCLUDED = "included"
    DISTANCE = "distance"
    DIFFICULTY = "difficulty"
    ADJUSTMENT = "adjustment"
    SUBTOTAL = "subtotal"
    TAX = "tax"
    TOTAL = "total"


SUMMARY_KINDS = {LineKind.SUBTOTAL, LineKind.TAX, LineKind.TOTAL}


class PrintableLine(BaseModel):
    description: str
    amount: Decimal | None = None
    indent: int = 0
    kind: LineKind = LineKind.ITEM


class DocumentContent(BaseModel):
    kind: DocumentKind
    locale: Locale
    subject: str
    email_text: str
    printable_lines: list[PrintableLine]
    date_stamp: str
    document_number: str = ""
    subtotal: Decimal
    tax: Decimal = ZERO
    total: Decimal


def format_item_line(item: PricedItem) -> str:
    """``qty unit × unitPrice [× factor] = itemTotal``; the factor is left out when it is exactly 1."""
    line = f"{format_decimal(item.quantity)} {item.unit} × {format_eur(item.unit_price)}"
    if item.difficulty_factor != ONE:
        line += f" × {format_decimal(item.difficulty_factor)}"
    return f"{line} = {format_eur(item.total)}"


def _adjustment_label(locale: Locale, reason: str) -> str:
    label = t(locale, "adjustment")
    return f"{label} ({reason})" if reason else label


def _printable_lines(
    priced: PricingResult,
    locale: Locale,
    kind: DocumentKind,
    adjustment_reason: str,
) -> list[PrintableLine]:
    lines: list[PrintableLine] = []
    for item in priced.items:
        lines.append(
            PrintableLine(
                description=f"{format_decimal(item.quantity)} {item.unit} {item.service_name}",
                amount=item.total,
            )
        )
        for included in item.included_items:
            lines.append(PrintableLine(description=included, indent=1, kind=LineKind.INCLUDED))

    if priced.distance_fee > ZERO:
        lines.append(
            PrintableLine(
                description=t(locale, "distance", km=format_decimal(priced.distance_km)),
                amount=priced.distance_fee,
                kind=LineKind.DISTANCE,
            )
        )
    if priced.global_difficulty_factor != ONE:
        lines.append(
            PrintableLine(
                description=t(locale, "difficulty", factor=format_decimal(priced.global_difficulty_factor)),
                amount=priced.difficulty_surcharge,
                kind=LineKind.DIFFICULTY,
            )
        )
    if priced.adjustment != ZERO:
        lines.append(
            PrintableLine(
                description=_adjustment_label(locale, adjustment_reason),
                amount=priced.adjustment,
                kind=LineKind.ADJUSTMENT,
            )
        )

    subtotal = to_cents(priced.total) if kind == DocumentKind.INVOICE else priced.total
    lines.append(PrintableLine(description=t(locale, "subtotal"), amount=subtotal, kind=LineKind.SUBTOTAL))
    if kind == DocumentKind.INVOICE:
        tax, grand_total = compute_vat(priced.total)
        lines.append(PrintableLine(description=t(locale, "tax"), amount=tax, kind=LineKind.TAX))
        lines.append(PrintableLine(description=t(locale, "total"), amount=grand_total, kind=LineKind.TOTAL))
    else:
        lines.append(PrintableLine(description=t(locale, "total"), amount=priced.total, kind=LineKind.TOTAL))
    return lines


def _subject(kind: DocumentKind, locale: Locale, number: str, project_name: str, client: Client) -> str:
    if kind == DocumentKind.INVOICE:
        if project_name:
            return t(locale, "invoice_subject_project", number=number, project=project_name)
        return t(locale, "invoice_subject", number=number)
    if project_name:
        return t(locale, "budget_subject_project", project=project_name, name=client.name)
    return t(locale, "budget_subject", number=number or client.name)


def _heading(kind: DocumentKind, locale: Locale, number: str, project_name: str) -> str:
    heading = t(locale, "invoice_heading" if kind == DocumentKind.INVOICE else "budget_heading")
    if number:
        heading = f"{heading} {number}"
    if project_name:
        heading = f"{heading}: {project_name.upper()}"
    return heading


def _email_text(
    priced: PricingResult,
    client: Client,
    locale: Locale,
    kind: DocumentKind,
    number: str,
    project_name: str,
    observations: str,
    adjustment_reason: str,
    validity_days: int,
) -> str:
    lines: list[str] = []
    if kind == DocumentKind.INVOICE:
        lines += [t(locale, "invoice_salutation", first_name=client.first_name), ""]
        lines += [t(locale, "invoice_intro", number=number), ""]
    else:
        lines += [t(locale, "salutation", name=client.name), ""]
        lines += [t(locale, "budget_intro"), ""]

    lines += [RULE, _heading(kind, locale, number, project_name), RULE, ""]
    lines += [t(locale, "services_heading"), THIN_RULE, ""]

    for position, item in enumerate(priced.items, start=1):
        lines.append(f"{position}. {item.service_name}")
        lines.append(f"   {format_item_line(item)}")
        if item.notes:
            lines.append(f"   {t(locale, 'note')}: {item.notes}")
        for included in item.included_items:
            lines.append(f"   - {included}")
        lines.append("")

    lines.append(THIN_RULE)
    lines.append(f"{t(locale, 'items_subtotal')}: {format_eur(priced.items_subtotal)}")
    if priced.distance_fee > ZERO:
        distance = t(locale, "distance", km=format_decimal(priced.distance_km))
        lines.append(f"{distance}: {format_eur(priced.distance_fee)}")
    if priced.global_difficulty_factor != ONE:
        difficulty = t(locale, "difficulty", factor=format_decimal(priced.global_difficulty_factor))
        lines.append(f"{difficulty}: {format_eur(priced.difficulty_surcharge)}")
    if priced.adjustment != ZERO:
        lines.append(f"{_adjustment_label(locale, adjustment_reason)}: {format_eur(priced.adjustment)}")

    total = priced.total
    if kind == DocumentKind.INVOICE:
        tax, total = compute_vat(priced.total)
        lines.append(f"{t(locale, 'subtotal')}: {format_eur(to_cents(priced.total))}")
        lines.append(f"{t(locale, 'tax')}: {format_eur(tax)}")

    lines += ["", RULE, f"{t(locale, 'total_label')}: {format_eur(total)}", RULE]

    if observations.strip():
        lines += ["", f"{t(locale, 'observations')}:", observations.strip()]

    disclaimers_key = "invoice_disclaimers" if kind == DocumentKind.INVOICE else "budget_disclaimers"
    disclaimers = t(locale, disclaimers_key, validity_days=validity_days).splitlines()
    lines.append("")
    lines += [f"✓ {line}" for line in disclaimers]
    lines += ["", t(locale, "closing"), "", t(locale, "sign_off")]
    return "\n".join(lines)


def build_document_content(
    priced: PricingResult,
    client: Client,
    locale: Locale,
    issued_on: date,
    kind: DocumentKind = DocumentKind.BUDGET,
    number: int | None = None,
    project_name: str = "",
    observations: str = "",
    adjustment_reason: str = "",
    validity_days: int = 15,
) -> DocumentContent:
    """Render a priced budget or invoice into email text and printable lines.

    Pure: the issue date is an argument and no clock is read, so identical
    inputs always produce byte-identical output.
    """
    locale = Locale(locale)
    document_number = format_document_number(number, issued_on.year) if number is not None else ""
    project_name = project_name.strip()

    subtotal = priced.total
    if kind == DocumentKind.INVOICE:
        subtotal = to_cents(priced.total)
        tax, total = compute_vat(priced.total)
    else:
        tax, total = ZERO, priced.total

    return DocumentContent(
        kind=kind,
        locale=locale,
        subject=_subject(kind, locale, document_number, project_name, client),
        email_text=_email_text(
            priced,
            client,
            locale,
            kind,
            document_number,
            project_name,
            observations,
            adjustment_reason,
            validity_days,
        ),
        printable_lines=_printable_lines(priced, locale, kind, adjustment_reason),
        date_stamp=issued_on.strftime(DATE_STAMP_FORMAT),
        document_number=document_number,
        subtotal=subtotal,
        tax=tax,
        total=total,
    )
