from __future__ import annotations

from pydantic import BaseModel


class Issuer(BaseModel):
    """The business issuing budgets and invoices, as printed on the PDF."""

    name: str = ""
    address: str = ""
    tax_id: str = ""
    phone: str = ""
    email: str = ""
    payment_method: str = ""
    payment_bank: str = ""
    payment_iban: str = ""

    @classmethod
    def from_settings(cls, settings) -> Issuer:
        return cls(
            name=settings.business_name,
            address=settings.business_address,
            tax_id=settings.business_tax_id,
            phone=settings.business_phone,
            email=settings.business_email,
            payment_method=settings.payment_method,
            payment_bank=settings.payment_bank,
            payment_iban=settings.payment_iban,
        )
