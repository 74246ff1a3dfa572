from __future__ import annotations

import logging
from pathlib import Path

from fpdf import FPDF

from obrador.documents import DocumentContent, DocumentKind, LineKind, PrintableLine
from obrador.documents.content import SUMMARY_KINDS
from obrador.documents.locales import t
from obrador.models import format_eur
from obrador.models.client import Client
from obrador.models.issuer import Issuer

logger = logging.getLogger(__name__)

BORDER = (60, 60, 60)
SHADE = (230, 230, 230)
TEXT = (20, 20, 20)
MUTED = (90, 90, 90)

CORE_FONT = "Helvetica"
CUSTOM_FONT = "DocumentFont"


def _latin1(text: str) -> str:
    """Core PDF fonts only cover latin-1; replace anything else."""
    text = text.replace("€", "EUR").replace("✓", "-").replace("—", "-")
    return text.encode("latin-1", "replace").decode("latin-1")


class _Page(FPDF):
    """A single document being drawn, with the font chosen for it."""

    def __init__(self, body_font: str, unicode_font: bool) -> None:
        super().__init__()
        self.body_font = body_font
        self.unicode_font = unicode_font

    def printable(self, text: str) -> str:
        return text if self.unicode_font else _latin1(text)


class DocumentPDF:
    def __init__(self, font_path: str = "") -> None:
        self.font_path = font_path

    def generate(
        self,
        content: DocumentContent,
        client: Client,
        issuer: Issuer | None = None,
        observations: str = "",
    ) -> bytes:
        issuer = issuer or Issuer()
        pdf = self._new_page()
        pdf.add_page()
        pdf.set_auto_page_break(auto=True, margin=20)

        page_w = pdf.w - pdf.l_margin - pdf.r_margin

        self._draw_parties(pdf, page_w, content, client, issuer)
        self._draw_number_bar(pdf, page_w, content)
        self._draw_table_header(pdf, page_w, content)
        self._draw_lines(pdf, page_w, [line for line in content.printable_lines if line.kind not in SUMMARY_KINDS])

        if observations.strip():
            self._draw_observations(pdf, page_w, observations)
        if content.kind == DocumentKind.BUDGET:
            self._draw_budget_notes(pdf, content)
        self._draw_payment(pdf, content, issuer)
        self._draw_summary(pdf, page_w, [line for line in content.printable_lines if line.kind in SUMMARY_KINDS])

        output = bytes(pdf.output())
        logger.debug(
            "PDF generated: kind=%s number=%s lines=%d size=%d bytes",
            content.kind.value,
            content.document_number,
            len(content.printable_lines),
            len(output),
        )
        return output

    def _new_page(self) -> _Page:
        if self.font_path and Path(self.font_path).is_file():
            pdf = _Page(CUSTOM_FONT, unicode_font=True)
            pdf.add_font(CUSTOM_FONT, "", self.font_path)
            pdf.add_font(CUSTOM_FONT, "B", self.font_path)
            return pdf
        if self.font_path:
            logger.warning("PDF font not found at %s; falling back to %s", self.font_path, CORE_FONT)
        return _Page(CORE_FONT, unicode_font=False)

    def _labelled(self, pdf: _Page, x: float, label: str, value: str, size: int = 9) -> None:
        pdf.set_x(x)
        pdf.set_font(pdf.body_font, "B", size)
        label_w = pdf.get_string_width(pdf.printable(label)) + 1
        pdf.cell(label_w, 5, pdf.printable(label))
        pdf.set_font(pdf.body_font, "", size)
        pdf.cell(0, 5, pdf.printable(f" {value}"), new_x="LMARGIN", new_y="NEXT")

    def _draw_parties(
        self,
        pdf: _Page,
        page_w: float,
        content: DocumentContent,
        client: Client,
        issuer: Issuer,
    ) -> None:
        locale = content.locale
        x = pdf.l_margin
        y = pdf.get_y()
        box_w = page_w / 2 - 2
        box_h = 32

        pdf.set_draw_color(*BORDER)
        pdf.set_line_width(0.3)
        pdf.rect(x, y, box_w, box_h)
        pdf.rect(x + box_w + 4, y, box_w, box_h)
        pdf.set_text_color(*TEXT)

        # Issuer box
        pdf.set_xy(x + 2, y + 3)
        pdf.set_font(pdf.body_font, "B", 9)
        pdf.cell(box_w - 4, 5, pdf.printable(issuer.name), new_x="LMARGIN", new_y="NEXT")
        if issuer.address:
            pdf.set_x(x + 2)
            pdf.set_font(pdf.body_font, "", 9)
            pdf.cell(box_w - 4, 5, pdf.printable(issuer.address), new_x="LMARGIN", new_y="NEXT")
        if issuer.tax_id:
            self._labelled(pdf, x + 2, t(locale, "pdf_tax_id"), issuer.tax_id)
        if issuer.phone:
            self._labelled(pdf, x + 2, t(locale, "pdf_phone"), issuer.phone)
        if issuer.email:
            self._labelled(pdf, x + 2, t(locale, "pdf_mail"), issuer.email)

        # Client box
        client_x = x + box_w + 6
        pdf.set_xy(client_x, y + 3)
        pdf.set_font(pdf.body_font, "B", 9)
        pdf.cell(box_w - 4, 5, pdf.printable(client.name), new_x="LMARGIN", new_y="NEXT")
        self._labelled(pdf, client_x, t(locale, "pdf_mail"), client.email)
        if client.phone:
            self._labelled(pdf, client_x, t(locale, "pdf_phone"), client.phone)

        pdf.set_y(y + box_h + 3)

    def _draw_number_bar(self, pdf: _Page, page_w: float, content: DocumentContent) -> None:
        key = "pdf_invoice_number" if content.kind == DocumentKind.INVOICE else "pdf_budget_number"
        label = t(content.locale, key, number=content.document_number or "-")

        pdf.set_font(pdf.body_font, "B", 10)
        pdf.cell(page_w * 0.7, 8, pdf.printable(f" {label}"), border=1)
        pdf.set_font(pdf.body_font, "", 10)
        pdf.cell(page_w * 0.3, 8, f"{content.date_stamp} ", border=1, align="R", new_x="LMARGIN", new_y="NEXT")
        pdf.ln(3)

    def _draw_table_header(self, pdf: _Page, page_w: float, content: DocumentContent) -> None:
        pdf.set_font(pdf.body_font, "B", 9)
        pdf.cell(page_w * 0.77, 7, pdf.printable(f" {t(content.locale, 'pdf_description')}"), border=1)
        pdf.cell(
            page_w * 0.23,
            7,
            pdf.printable(f"{t(content.locale, 'pdf_total')} "),
            border=1,
            align="R",
            new_x="LMARGIN",
            new_y="NEXT",
        )
        pdf.ln(2)

    def _draw_lines(self, pdf: _Page, page_w: float, lines: list[PrintableLine]) -> None:
        desc_w = page_w * 0.77
        amount_w = page_w * 0.23
        pdf.set_text_color(*TEXT)

        for line in lines:
            indent = "    " * line.indent
            if line.kind == LineKind.INCLUDED:
                pdf.set_font(pdf.body_font, "", 8)
                pdf.set_text_color(*MUTED)
                pdf.cell(desc_w, 4.5, pdf.printable(f" {indent}- {line.description}"), new_x="LMARGIN", new_y="NEXT")
                pdf.set_text_color(*TEXT)
                continue

            pdf.set_font(pdf.body_font, "", 9)
            amount = format_eur(line.amount) if line.amount is not None else ""
            pdf.cell(desc_w, 6, pdf.printable(f" {indent}{line.description}"))
            pdf.cell(amount_w, 6, pdf.printable(f"{amount} "), align="R", new_x="LMARGIN", new_y="NEXT")

    def _draw_observations(self, pdf: _Page, page_w: float, observations: str) -> None:
        pdf.ln(3)
        pdf.set_font(pdf.body_font, "", 8)
        pdf.set_text_color(*MUTED)
        for line in observations.strip().splitlines():
            if line.strip():
                pdf.multi_cell(page_w, 4.5, pdf.printable(f"*{line.strip()}"), new_x="LMARGIN", new_y="NEXT")
        pdf.set_text_color(*TEXT)

    def _draw_budget_notes(self, pdf: _Page, content: DocumentContent) -> None:
        pdf.ln(3)
        pdf.set_font(pdf.body_font, "", 8)
        for key in ("pdf_delivery_note", "pdf_exclusions_note"):
            pdf.cell(0, 4.5, pdf.printable(t(content.locale, key)), new_x="LMARGIN", new_y="NEXT")

    def _draw_payment(self, pdf: _Page, content: DocumentContent, issuer: Issuer) -> None:
        rows = []
        if issuer.payment_method:
            rows.append(t(content.locale, "pdf_payment_method", method=issuer.payment_method))
        if issuer.payment_bank:
            rows.append(t(content.locale, "pdf_bank", bank=issuer.payment_bank))
        if issuer.payment_iban:
            rows.append(t(content.locale, "pdf_iban", iban=issuer.payment_iban))
        if not rows:
            return

        pdf.ln(4)
        pdf.set_font(pdf.body_font, "", 9)
        for row in rows:
            pdf.cell(0, 5, pdf.printable(row), new_x="LMARGIN", new_y="NEXT")

    def _draw_summary(self, pdf: _Page, page_w: float, lines: list[PrintableLine]) -> None:
        pdf.ln(5)
        label_w = page_w * 0.77
        amount_w = page_w * 0.23
        pdf.set_fill_color(*SHADE)

        for line in lines:
            bold = "B" if line.kind == LineKind.TOTAL else ""
            pdf.set_font(pdf.body_font, bold, 10)
            pdf.cell(label_w, 7, pdf.printable(f"{line.description} "), border=1, fill=True, align="R")
            pdf.cell(
                amount_w,
                7,
                pdf.printable(f"{format_eur(line.amount)} "),
                border=1,
                fill=True,
                align="R",
                new_x="LMARGIN",
                new_y="NEXT",
            )
