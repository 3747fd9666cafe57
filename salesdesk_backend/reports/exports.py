# reports/exports.py

"""
TRANSACTION REPORT EXPORTS

CSV:
    Date,Customer,Issued By,Amount,Status
    <rows>
    <blank line>
    Total,,,<total>,

PDF:
    company name / "Transaction Report" / period line,
    Date | Customer | Issued By | Amount table with a total row.
"""

from __future__ import annotations

import csv
import io
import logging
from xml.sax.saxutils import escape

from django.utils import timezone
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from sales.documents.base import (
    build_styles,
    format_money,
    page_size,
    pdf_currency,
    table_style,
)

logger = logging.getLogger(__name__)

CSV_HEADER = ["Date", "Customer", "Issued By", "Amount", "Status"]


def export_filename(extension: str) -> str:
    return f"Transaction_Report_{timezone.localdate():%Y-%m-%d}.{extension}"


def period_label(date_from=None, date_to=None) -> str:
    if not date_from and not date_to:
        return ""
    start = date_from.isoformat() if date_from else "Start"
    end = date_to.isoformat() if date_to else "End"
    return f"Period: {start} to {end}"


def render_transactions_csv(sales, total) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")

    writer.writerow(CSV_HEADER)
    for sale in sales:
        writer.writerow(
            [
                timezone.localtime(sale.created_at).strftime("%Y-%m-%d %H:%M:%S"),
                sale.customer_name,
                sale.issuer_name,
                f"{sale.total_amount:.2f}",
                sale.status,
            ]
        )
    writer.writerow([])
    writer.writerow(["Total", "", "", f"{total:.2f}", ""])

    return buffer.getvalue()


def render_transactions_pdf(sales, total, *, company, date_from=None, date_to=None) -> bytes:
    styles = build_styles()
    symbol = pdf_currency(company.currency_symbol)
    pagesize = page_size("A4")
    margin = 15 * mm
    usable_width = pagesize[0] - 2 * margin

    title_style = styles["heading"].clone("ReportCompany", alignment=1, fontSize=18, leading=22)
    subtitle_style = styles["body"].clone("ReportTitle", alignment=1, fontSize=12, leading=16)
    period_style = styles["body"].clone("ReportPeriod", alignment=1, fontSize=10)

    story = [
        Paragraph(escape(company.company_name), title_style),
        Paragraph("Transaction Report", subtitle_style),
    ]
    period = period_label(date_from, date_to)
    if period:
        story.append(Paragraph(period, period_style))
    story.append(Spacer(1, 6 * mm))

    rows = [["Date", "Customer", "Issued By", "Amount"]]
    for sale in sales:
        rows.append(
            [
                timezone.localtime(sale.created_at).strftime("%d/%m/%Y"),
                Paragraph(escape(sale.customer_name), styles["body"]),
                Paragraph(escape(sale.issuer_name or "-"), styles["body"]),
                format_money(sale.total_amount, symbol),
            ]
        )
    rows.append(["", "", "Total:", format_money(total, symbol)])

    widths = [0.18, 0.34, 0.28, 0.20]
    table = Table(rows, colWidths=[usable_width * w for w in widths], repeatRows=1)
    commands = table_style(total_row=True)
    commands.append(("ALIGN", (3, 0), (3, -1), "RIGHT"))
    table.setStyle(TableStyle(commands))
    story.append(table)

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=pagesize,
        leftMargin=margin,
        rightMargin=margin,
        topMargin=margin,
        bottomMargin=margin,
        title="Transaction Report",
        author=company.company_name,
    )
    doc.build(story)
    pdf = buffer.getvalue()
    buffer.close()

    logger.info("Transaction report rendered", extra={"rows": len(rows) - 2, "bytes": len(pdf)})
    return pdf
