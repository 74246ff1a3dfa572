from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from obrador.constants import CENT


def format_eur(amount: Decimal) -> str:
    """Format an amount with two decimals and a trailing euro sign: 450 -> '450.00 €'"""
    return f"{amount.quantize(CENT, rounding=ROUND_HALF_UP)} €"


def format_decimal(value: Decimal) -> str:
    """Drop trailing zeros without switching to exponent notation: 1.20 -> '1.2', 10.00 -> '10'"""
    normalized = value.normalize()
    if normalized == normalized.to_integral_value():
        return str(normalized.quantize(Decimal(1)))
    return f"{normalized:f}"


def parse_decimal(text: str) -> Decimal | None:
    """Parse a user-entered number. Returns None on invalid input.

    Accepts formats like '12', '12.5', '12,5', '1.250,75'.
    """
    text = (text or "").strip().replace("€", "").strip()
    if not text:
        return None
    if "," in text:
        text = text.replace(".", "").replace(",", ".")
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value
