"""Build the render-ready view-model for invoice templates.

Templates do no computation: every amount and date in the returned dict is
already a display string, and optional sections are gated by plain
truthiness (``workDetails`` and ``paymentLinks`` become ``False`` when empty).
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from .calculator import calculate_item_discount, calculate_item_total
from .schemas import BusinessProfile, Discount, Fee, Invoice, InvoiceItem, Payment, Tax, Template
from .utils import DEFAULT_DATE_FORMAT, format_currency, format_date, format_number

logger = logging.getLogger(__name__)

PAYMENT_TERMS_DISPLAY = {
    "NET_0": "Payment due upon receipt",
    "NET_7": "Payment due within 7 days",
    "NET_14": "Payment due within 14 days",
    "NET_15": "Payment due within 15 days",
    "NET_30": "Payment due within 30 days",
    "NET_45": "Payment due within 45 days",
    "NET_60": "Payment due within 60 days",
    "NET_90": "Payment due within 90 days",
}


def payment_terms_display(payment_terms: str) -> str:
    """Human-readable phrase for a terms code; unknown codes pass through."""
    return PAYMENT_TERMS_DISPLAY.get(payment_terms, payment_terms)


class TemplateDataPreparer:
    """Formats one invoice's values for a single currency, locale and date style."""

    def __init__(self, currency: str, locale: str, date_format: str = DEFAULT_DATE_FORMAT) -> None:
        self.currency = currency
        self.locale = locale
        self.date_format = date_format

    def money(self, amount: object) -> str:
        return format_currency(amount, self.currency, self.locale)

    def date(self, value: str) -> str:
        return format_date(value, self.locale, self.date_format)

    def rate_or_money(self, kind: str, value: object) -> str:
        if kind == "percent":
            return f"{format_number(value)}%"
        return self.money(value)

    def item(self, item: InvoiceItem) -> Dict[str, Any]:
        data = item.to_json_dict()
        data.update(
            calculatedLineTotal=self.money(calculate_item_total(item)),
            calculatedDiscount=self.money(calculate_item_discount(item)) if item.discount else "",
            formattedUnitPrice=self.money(item.unit_price),
            formattedQuantity=format_number(item.quantity),
            discountDisplay=self.rate_or_money(item.discount.type, item.discount.value) if item.discount else "",
        )
        return data

    def discount(self, discount: Discount) -> Dict[str, Any]:
        data = discount.to_json_dict()
        data["formattedValue"] = self.rate_or_money(discount.type, discount.value)
        return data

    def fee(self, fee: Fee) -> Dict[str, Any]:
        data = fee.to_json_dict()
        data["formattedValue"] = self.rate_or_money(fee.type, fee.value)
        return data

    def tax(self, tax: Tax) -> Dict[str, Any]:
        data = tax.to_json_dict()
        data["formattedRate"] = f"{format_number(tax.rate)}%"
        return data

    def payment(self, payment: Payment) -> Dict[str, Any]:
        data = payment.to_json_dict()
        data["formattedAmount"] = self.money(payment.amount)
        data["formattedDate"] = self.date(payment.date)
        return data

    def totals(self, invoice: Invoice) -> Dict[str, str]:
        return {key: self.money(value) for key, value in invoice.totals.to_json_dict().items()}


def prepare_template_data(
    invoice: Invoice,
    template: Template,
    business_profile: BusinessProfile,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> Dict[str, Any]:
    """Flatten an invoice (with current totals), template and profile into a view-model."""
    has_work_details = bool(invoice.work_details and invoice.work_details.strip())
    has_payment_links = invoice.payment_links.has_any()
    logger.debug(
        "Template conditions for %s: work_details=%s payment_links=%s",
        invoice.display_id,
        has_work_details,
        has_payment_links,
    )

    fmt = TemplateDataPreparer(invoice.currency, invoice.locale, date_format)

    invoice_data = invoice.to_json_dict()
    invoice_data.update(
        formattedIssueDate=fmt.date(invoice.issue_date),
        formattedDueDate=fmt.date(invoice.due_date),
        paymentTermsDisplay=payment_terms_display(invoice.payment_terms),
    )

    return {
        "invoice": invoice_data,
        "business": business_profile.to_json_dict(),
        "client": invoice.client.to_json_dict(),
        "brand": template.brand.to_json_dict(),
        "layout": template.layout.to_json_dict(),
        "items": [fmt.item(item) for item in invoice.items],
        "fees": [fmt.fee(fee) for fee in invoice.fees],
        "taxes": [fmt.tax(tax) for tax in invoice.taxes],
        "payments": [fmt.payment(payment) for payment in invoice.payments],
        "discounts": [fmt.discount(discount) for discount in invoice.discounts],
        "totals": fmt.totals(invoice),
        "workDetails": invoice.work_details if has_work_details else False,
        "paymentLinks": invoice.payment_links.to_json_dict() if has_payment_links else False,
        "notes": invoice.notes,
        "terms": invoice.terms,
    }
