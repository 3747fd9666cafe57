from .invoice import InvoiceRenderError, invoice_filename, render_invoice_pdf

__all__ = [
    "InvoiceRenderError",
    "invoice_filename",
    "render_invoice_pdf",
]
