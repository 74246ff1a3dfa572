from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

MADRID_TZ = ZoneInfo("Europe/Madrid")

VAT_RATE = Decimal("0.21")
CENT = Decimal("0.01")

DATE_STAMP_FORMAT = "%d-%m-%y"

SERVICE_UNITS = ["m²", "m", "ml", "unidad", "punto", "hora"]

DIFFICULTY_PRESETS = {
    "Normal (1.0x)": Decimal("1.0"),
    "Média (1.2x)": Decimal("1.2"),
    "Alta (1.5x)": Decimal("1.5"),
    "Muito difícil (2.0x)": Decimal("2.0"),
}

STATUS_LABELS = {
    "pending": "Pendente",
    "sent": "Enviado",
    "accepted": "Aceito",
    "rejected": "Rejeitado",
}


def format_document_number(number: int, year: int) -> str:
    """Number documents as ``N/0YY``: budget 12 of 2025 -> ``12/025``."""
    return f"{number}/{year % 1000:03d}"


def format_stored_number(number: int, created_at: datetime | None) -> str:
    """Number a stored document, or show the bare number when it has no creation date."""
    if created_at is None:
        return str(number)
    return format_document_number(number, created_at.year)
