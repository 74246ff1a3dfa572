from __future__ import annotations

from enum import Enum


class Locale(str, Enum):
    ES = "es"
    PT = "pt"


# One string table per locale. Templates use str.format placeholders.
STRINGS: dict[Locale, dict[str, str]] = {
    Locale.ES: {
        "salutation": "Estimado/a {name},",
        "invoice_salutation": "Buenas tardes {first_name},",
        "budget_intro": "Tras nuestra visita técnica, le presentamos el presupuesto detallado para la obra solicitada.",
        "invoice_intro": "Le enviamos la factura {number} correspondiente a los trabajos realizados.",
        "budget_heading": "PRESUPUESTO",
        "invoice_heading": "FACTURA",
        "services_heading": "SERVICIOS INCLUIDOS",
        "note": "Nota",
        "items_subtotal": "Subtotal servicios",
        "distance": "Desplazamiento ({km} km)",
        "difficulty": "Factor de complejidad (x{factor})",
        "adjustment": "Ajuste",
        "subtotal": "SUB-TOTAL",
        "tax": "IVA 21%",
        "total": "TOTAL",
        "total_label": "IMPORTE TOTAL",
        "observations": "OBSERVACIONES",
        "budget_subject": "Presupuesto {number}",
        "budget_subject_project": "Presupuesto: {project} - {name}",
        "invoice_subject": "Factura {number}",
        "invoice_subject_project": "Factura {number} - {project}",
        "reply_subject": "Re: {subject}",
        "budget_disclaimers": (
            "Presupuesto elaborado tras visita técnica\n"
            "Materiales de calidad incluidos\n"
            "Garantía del trabajo realizado\n"
            "Validez: {validity_days} días"
        ),
        "invoice_disclaimers": "Garantía del trabajo realizado\nPago mediante transferencia bancaria",
        "closing": "Quedamos a su disposición para cualquier consulta o aclaración.",
        "sign_off": "Un cordial saludo.",
        # PDF labels
        "pdf_budget_number": "Presupuesto: {number}",
        "pdf_invoice_number": "Factura: {number}",
        "pdf_description": "DESCRIPCIÓN",
        "pdf_total": "TOTAL",
        "pdf_phone": "Teléfono:",
        "pdf_mail": "Mail:",
        "pdf_tax_id": "NIF:",
        "pdf_delivery_note": "*Plazo de entrega a acordar tras la aceptación del presupuesto.",
        "pdf_exclusions_note": "*Trabajos complementarios no incluidos (electricista, pintor...)",
        "pdf_payment_method": "Método de pago: {method}.",
        "pdf_bank": "Entidad: {bank}",
        "pdf_iban": "IBAN: {iban}",
        "budget_filename": "presupuesto-{number}.pdf",
        "invoice_filename": "factura-{number}.pdf",
        "invoice_short_body": (
            "Buenas tardes {first_name},\n\n"
            "Adjunto le enviamos la factura {number}.\n\n"
            "Un cordial saludo."
        ),
    },
    Locale.PT: {
        "salutation": "Prezado(a) {name},",
        "invoice_salutation": "Boa tarde {first_name},",
        "budget_intro": "Após a nossa visita técnica, apresentamos o orçamento detalhado para a obra solicitada.",
        "invoice_intro": "Enviamos a fatura {number} referente aos trabalhos realizados.",
        "budget_heading": "ORÇAMENTO",
        "invoice_heading": "FATURA",
        "services_heading": "SERVIÇOS INCLUÍDOS",
        "note": "Nota",
        "items_subtotal": "Subtotal dos serviços",
        "distance": "Deslocamento ({km} km)",
        "difficulty": "Fator de complexidade (x{factor})",
        "adjustment": "Ajuste",
        "subtotal": "SUBTOTAL",
        "tax": "IVA 21%",
        "total": "TOTAL",
        "total_label": "VALOR TOTAL",
        "observations": "OBSERVAÇÕES",
        "budget_subject": "Orçamento {number}",
        "budget_subject_project": "Orçamento: {project} - {name}",
        "invoice_subject": "Fatura {number}",
        "invoice_subject_project": "Fatura {number} - {project}",
        "reply_subject": "Re: {subject}",
        "budget_disclaimers": (
            "Orçamento elaborado após visita técnica\n"
            "Materiais de qualidade incluídos\n"
            "Garantia do trabalho realizado\n"
            "Validade: {validity_days} dias"
        ),
        "invoice_disclaimers": "Garantia do trabalho realizado\nPagamento por transferência bancária",
        "closing": "Ficamos à disposição para qualquer dúvida ou esclarecimento.",
        "sign_off": "Atenciosamente.",
        "pdf_budget_number": "Orçamento: {number}",
        "pdf_invoice_number": "Fatura: {number}",
        "pdf_description": "DESCRIÇÃO",
        "pdf_total": "TOTAL",
        "pdf_phone": "Telefone:",
        "pdf_mail": "Email:",
        "pdf_tax_id": "NIF:",
        "pdf_delivery_note": "*Prazo de entrega a combinar após a aceitação do orçamento.",
        "pdf_exclusions_note": "*Trabalhos complementares não incluídos (eletricista, pintor...)",
        "pdf_payment_method": "Método de pagamento: {method}.",
        "pdf_bank": "Banco: {bank}",
        "pdf_iban": "IBAN: {iban}",
        "budget_filename": "orcamento-{number}.pdf",
        "invoice_filename": "fatura-{number}.pdf",
        "invoice_short_body": (
            "Boa tarde {first_name},\n\n"
            "Em anexo enviamos a fatura {number}.\n\n"
            "Atenciosamente."
        ),
    },
}


def t(locale: Locale, key: str, **kwargs: object) -> str:
    template = STRINGS[Locale(locale)][key]
    return template.format(**kwargs) if kwargs else template
