# sales/documents/base.py

"""
Shared reportlab building blocks for invoices and report exports.

The built-in Helvetica family only covers cp1252, so currency symbols
outside it (the Naira sign among them) are printed as plain letters.
"""

from __future__ import annotations

from decimal import Decimal

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, A5
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet

PAGE_SIZES = {
    "A4": A4,
    "A5": A5,
}

PRIMARY = colors.Color(30 / 255, 64 / 255, 175 / 255)
ACCENT = colors.Color(59 / 255, 130 / 255, 246 / 255)
ROW_ALT = colors.Color(245 / 255, 247 / 255, 250 / 255)
TOTAL_BG = colors.Color(239 / 255, 246 / 255, 1)
WATERMARK = colors.Color(230 / 255, 230 / 255, 230 / 255)
MUTED = colors.Color(100 / 255, 100 / 255, 100 / 255)

_FALLBACK_SYMBOLS = {
    "₦": "N",
}


def pdf_currency(symbol: str) -> str:
    symbol = (symbol or "").strip()
    if symbol in _FALLBACK_SYMBOLS:
        return _FALLBACK_SYMBOLS[symbol]
    try:
        symbol.encode("cp1252")
    except UnicodeEncodeError:
        return ""
    return symbol


def format_money(amount, symbol: str = "") -> str:
    value = Decimal(str(amount or 0))
    return f"{symbol}{value:,.2f}"


def page_size(paper: str):
    try:
        return PAGE_SIZES[(paper or "A4").upper()]
    except KeyError:
        raise ValueError(f"Unsupported paper size: {paper}")


def build_styles(*, compact: bool = False) -> dict:
    base = getSampleStyleSheet()
    body_size = 8 if compact else 9

    return {
        "company": ParagraphStyle(
            "Company",
            parent=base["Heading1"],
            fontName="Helvetica-Bold",
            fontSize=12 if compact else 14,
            leading=16 if compact else 18,
            textColor=colors.white,
            spaceAfter=2,
        ),
        "company_meta": ParagraphStyle(
            "CompanyMeta",
            parent=base["Normal"],
            fontSize=body_size,
            textColor=colors.white,
        ),
        "title": ParagraphStyle(
            "Title",
            parent=base["Heading2"],
            fontName="Helvetica-Bold",
            fontSize=12,
            textColor=ACCENT,
            alignment=2,
            spaceAfter=4,
        ),
        "heading": ParagraphStyle(
            "Heading",
            parent=base["Heading2"],
            fontName="Helvetica-Bold",
            fontSize=12,
            textColor=PRIMARY,
            spaceAfter=4,
        ),
        "label": ParagraphStyle(
            "Label",
            parent=base["Normal"],
            fontName="Helvetica-Bold",
            fontSize=body_size,
        ),
        "body": ParagraphStyle(
            "Body",
            parent=base["Normal"],
            fontSize=body_size,
        ),
        "meta": ParagraphStyle(
            "Meta",
            parent=base["Normal"],
            fontSize=body_size,
            alignment=2,
        ),
        "footer": ParagraphStyle(
            "Footer",
            parent=base["Italic"],
            fontSize=8,
            textColor=MUTED,
            alignment=1,
        ),
    }


def table_style(*, font_size: int = 9, total_row: bool = False) -> list:
    commands = [
        ("BACKGROUND", (0, 0), (-1, 0), PRIMARY),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 0), (-1, -1), font_size),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, ROW_ALT]),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.lightgrey),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]
    if total_row:
        commands += [
            ("BACKGROUND", (0, -1), (-1, -1), TOTAL_BG),
            ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
        ]
    return commands
