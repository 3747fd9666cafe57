# sales/services/notifications.py

"""
SALE EMAILS

- notify_sale_created: receipt email to the shop's notification address.
  Runs from transaction.on_commit; mail failures are logged, never raised,
  so a broken SMTP relay cannot undo a recorded sale.
- send_invoice_email: invoice PDF to a customer. Failures raise
  NotificationError so the caller can report them.

SALE_NOTIFICATIONS_ENABLED=False turns off the automatic receipt email.
"""

from __future__ import annotations

import logging
import smtplib

from django.conf import settings
from django.core.mail import BadHeaderError, EmailMultiAlternatives
from django.template.loader import render_to_string

from company.models import CompanySettings, NotificationSettings
from sales.documents import InvoiceRenderError, invoice_filename, render_invoice_pdf
from sales.models import Sale

logger = logging.getLogger(__name__)


class NotificationError(Exception):
    pass


def _context(sale: Sale, company: CompanySettings) -> dict:
    return {
        "sale": sale,
        "items": list(sale.items.all()),
        "company": company,
        "currency": company.currency_symbol,
    }


def _build_message(*, subject, template, context, recipient) -> EmailMultiAlternatives:
    text_body = render_to_string(f"sales/email/{template}.txt", context)
    html_body = render_to_string(f"sales/email/{template}.html", context)

    msg = EmailMultiAlternatives(
        subject=subject,
        body=text_body,
        from_email=settings.DEFAULT_FROM_EMAIL or None,
        to=[recipient],
    )
    msg.attach_alternative(html_body, "text/html")
    return msg


def notify_sale_created(sale_id) -> bool:
    """
    Returns True when an email went out.

    Runs after the sale has committed: every failure stops here.
    """
    try:
        return _send_sale_notification(sale_id)
    except Exception:
        logger.exception("Sale notification failed", extra={"sale_id": str(sale_id)})
        return False


def _send_sale_notification(sale_id) -> bool:
    if not getattr(settings, "SALE_NOTIFICATIONS_ENABLED", True):
        logger.info("Sale notifications disabled", extra={"sale_id": str(sale_id)})
        return False

    prefs = NotificationSettings.load()
    if not prefs.send_on_sale or not prefs.notification_email:
        return False

    sale = Sale.objects.filter(pk=sale_id).prefetch_related("items").first()
    if sale is None:
        logger.warning("Sale notification skipped: sale not found", extra={"sale_id": str(sale_id)})
        return False

    company = CompanySettings.load()
    msg = _build_message(
        subject=prefs.email_subject_template,
        template="sale_notification",
        context=_context(sale, company),
        recipient=prefs.notification_email,
    )

    msg.send()

    logger.info(
        "Sale notification sent",
        extra={"sale_id": str(sale.pk), "recipient": prefs.notification_email},
    )
    return True


def send_invoice_email(*, sale: Sale, recipient: str, paper: str = "A4") -> Sale:
    recipient = (recipient or "").strip()
    if not recipient:
        raise NotificationError("No recipient email address for this invoice.")

    company = CompanySettings.load()
    try:
        pdf = render_invoice_pdf(sale, company=company, paper=paper)
    except InvoiceRenderError as exc:
        raise NotificationError(str(exc)) from exc

    msg = _build_message(
        subject=f"Invoice {sale.invoice_no} - {company.company_name}",
        template="invoice",
        context=_context(sale, company),
        recipient=recipient,
    )
    msg.attach(invoice_filename(sale), pdf, "application/pdf")

    try:
        msg.send()
    except (smtplib.SMTPException, OSError, BadHeaderError) as exc:
        logger.exception(
            "Invoice email failed",
            extra={"sale_id": str(sale.pk), "recipient": recipient},
        )
        raise NotificationError("Invoice email could not be sent.") from exc

    if not sale.invoice_sent:
        sale.invoice_sent = True
        sale.save(update_fields=["invoice_sent"])

    logger.info(
        "Invoice emailed",
        extra={"sale_id": str(sale.pk), "recipient": recipient},
    )
    return sale
