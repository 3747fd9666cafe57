# sales/documents/invoice.py

"""
INVOICE PDF

Layout (A4 or A5):
- blue header band with company name, address, email | phone
- INVOICE title with invoice number and date
- BILL TO / ISSUED BY
- items table: #, Product, Quantity, Unit Price, Subtotal
- TOTAL box, optional notes
- footer lines and a diagonal watermark on every page
"""

from __future__ import annotations

import io
import logging
from xml.sax.saxutils import escape

from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .base import (
    PRIMARY,
    MUTED,
    TOTAL_BG,
    WATERMARK,
    build_styles,
    format_money,
    page_size,
    pdf_currency,
    table_style,
)

logger = logging.getLogger(__name__)

HEADER_HEIGHT = 30 * mm
SIDE_MARGIN = 15 * mm


class InvoiceRenderError(Exception):
    pass


def invoice_filename(sale) -> str:
    day = timezone.localtime(sale.created_at).strftime("%Y%m%d")
    return f"Invoice_{sale.short_id}_{day}.pdf"


class InvoiceRenderer:
    def __init__(self, sale, company, *, paper="A4", watermark=None):
        self.sale = sale
        self.company = company
        self.paper = (paper or "A4").upper()
        try:
            self.pagesize = page_size(self.paper)
        except ValueError as exc:
            raise InvoiceRenderError(str(exc)) from exc

        if watermark is None:
            watermark = company.company_name
        self.watermark = (watermark or "").strip()

        self.compact = self.paper == "A5"
        self.styles = build_styles(compact=self.compact)
        self.symbol = pdf_currency(company.currency_symbol)

    # --------------------------------------------------
    # Page decoration (header band, watermark, footer)
    # --------------------------------------------------

    def _decorate_page(self, canvas, doc):
        width, height = self.pagesize
        canvas.saveState()

        if self.watermark:
            canvas.setFont("Helvetica-Bold", 28 if self.compact else 40)
            canvas.setFillColor(WATERMARK)
            canvas.translate(width / 2, height / 2)
            canvas.rotate(45)
            canvas.drawCentredString(0, 0, self.watermark)
            canvas.rotate(-45)
            canvas.translate(-width / 2, -height / 2)

        canvas.setFillColor(PRIMARY)
        canvas.rect(0, height - HEADER_HEIGHT, width, HEADER_HEIGHT, stroke=0, fill=1)

        canvas.setFillColor(colors.white)
        canvas.setFont("Helvetica-Bold", 12 if self.compact else 14)
        canvas.drawString(SIDE_MARGIN, height - 14 * mm, self.company.company_name)
        canvas.setFont("Helvetica", 8 if self.compact else 9)
        canvas.drawString(SIDE_MARGIN, height - 20 * mm, self.company.address)
        canvas.drawString(
            SIDE_MARGIN,
            height - 25 * mm,
            f"{self.company.email} | {self.company.phone}",
        )

        canvas.setFillColor(MUTED)
        canvas.setFont("Helvetica-Oblique", 8)
        canvas.drawCentredString(width / 2, 15 * mm, "Thank you for your business!")
        canvas.drawCentredString(
            width / 2, 11 * mm, f"Generated by {self.company.company_name} Sales Manager"
        )
        canvas.restoreState()

    # --------------------------------------------------
    # Story
    # --------------------------------------------------

    def _meta_block(self):
        created = timezone.localtime(self.sale.created_at)
        styles = self.styles
        return [
            Paragraph("INVOICE", styles["title"]),
            Paragraph(f"Invoice #: {escape(self.sale.invoice_no)}", styles["meta"]),
            Paragraph(f"Date: {created.strftime('%B %d, %Y')}", styles["meta"]),
            Paragraph(f"Status: {self.sale.get_status_display()}", styles["meta"]),
            Spacer(1, 6 * mm),
        ]

    def _parties_block(self, usable_width):
        styles = self.styles
        data = [
            [
                Paragraph("BILL TO:", styles["label"]),
                Paragraph("ISSUED BY:", styles["label"]),
            ],
            [
                Paragraph(escape(self.sale.customer_name), styles["body"]),
                Paragraph(escape(self.sale.issuer_name or "-"), styles["body"]),
            ],
        ]
        customer = self.sale.customer
        if customer is not None:
            contact = " | ".join(v for v in (customer.email, customer.phone) if v)
            if contact:
                data.append([Paragraph(escape(contact), styles["body"]), ""])

        table = Table(data, colWidths=[usable_width / 2, usable_width / 2])
        table.setStyle(
            TableStyle(
                [
                    ("LEFTPADDING", (0, 0), (-1, -1), 0),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ]
            )
        )
        return [table, Spacer(1, 6 * mm)]

    def _items_table(self, items, usable_width):
        rows = [["#", "Product", "Quantity", "Unit Price", "Subtotal"]]
        for index, item in enumerate(items, start=1):
            rows.append(
                [
                    str(index),
                    Paragraph(escape(item.product_name), self.styles["body"]),
                    str(item.quantity),
                    format_money(item.unit_price, self.symbol),
                    format_money(item.total_price, self.symbol),
                ]
            )

        widths = [0.07, 0.41, 0.14, 0.19, 0.19]
        table = Table(rows, colWidths=[usable_width * w for w in widths], repeatRows=1)
        commands = table_style(font_size=8 if self.compact else 9)
        commands.append(("ALIGN", (2, 0), (-1, -1), "RIGHT"))
        table.setStyle(TableStyle(commands))
        return [table, Spacer(1, 6 * mm)]

    def _total_box(self):
        box = Table(
            [["TOTAL:", format_money(self.sale.total_amount, self.symbol)]],
            colWidths=[30 * mm, 40 * mm],
            hAlign="RIGHT",
        )
        box.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, -1), TOTAL_BG),
                    ("TEXTCOLOR", (0, 0), (-1, -1), PRIMARY),
                    ("FONTNAME", (0, 0), (-1, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 11 if self.compact else 12),
                    ("ALIGN", (1, 0), (1, 0), "RIGHT"),
                    ("TOPPADDING", (0, 0), (-1, -1), 8),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
                ]
            )
        )
        return [box]

    def _notes_block(self):
        notes = (self.sale.notes or "").strip()
        if not notes:
            return []
        return [
            Spacer(1, 6 * mm),
            Paragraph("NOTES:", self.styles["label"]),
            Paragraph(escape(notes).replace("\n", "<br/>"), self.styles["body"]),
        ]

    def render(self) -> bytes:
        items = list(self.sale.items.all())
        if not items:
            raise InvoiceRenderError("Sale has no items.")
        if self.sale.total_amount is None or self.sale.total_amount <= 0:
            raise InvoiceRenderError("Sale total is invalid.")

        width, _ = self.pagesize
        usable_width = width - 2 * SIDE_MARGIN

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=self.pagesize,
            leftMargin=SIDE_MARGIN,
            rightMargin=SIDE_MARGIN,
            topMargin=HEADER_HEIGHT + 8 * mm,
            bottomMargin=22 * mm,
            title=f"Invoice {self.sale.invoice_no}",
            author=self.company.company_name,
        )

        story = []
        story += self._meta_block()
        story += self._parties_block(usable_width)
        story += self._items_table(items, usable_width)
        story += self._total_box()
        story += self._notes_block()

        doc.build(
            story,
            onFirstPage=self._decorate_page,
            onLaterPages=self._decorate_page,
        )
        pdf = buffer.getvalue()
        buffer.close()

        logger.info(
            "Invoice rendered",
            extra={
                "sale_id": str(self.sale.pk),
                "paper": self.paper,
                "bytes": len(pdf),
            },
        )
        return pdf


def render_invoice_pdf(sale, *, company=None, paper="A4", watermark=None) -> bytes:
    if company is None:
        from company.models import CompanySettings

        company = CompanySettings.load()

    return InvoiceRenderer(sale, company, paper=paper, watermark=watermark).render()
