"""Line-item and invoice totals calculation.

The totals pipeline runs in a fixed order and rounds every stage before the
next one consumes it:

    subtotal -> item discounts -> invoice discounts -> fees -> tax
    -> grand total -> payments -> balance due

Every function here is pure. Placeholder values left by the editor (empty
strings, None, NaN) count as 0 instead of raising.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .schemas import (
    FEE_BASE_AFTER_INVOICE_DISCOUNTS,
    FEE_BASE_AFTER_ITEM_DISCOUNTS,
    FEE_BASE_GRAND_TOTAL_PRE_TAX,
    FEE_BASE_SUBTOTAL,
    Discount,
    Fee,
    Invoice,
    InvoiceItem,
    InvoiceTotals,
    ItemDiscount,
    Payment,
    Tax,
    TotalsBreakdown,
)
from .utils import round_to_currency, to_number

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"


def _item_base(item: InvoiceItem) -> float:
    return to_number(item.quantity) * to_number(item.unit_price)


def _discount_amount(discount: Optional[ItemDiscount], base: float) -> float:
    if discount is None:
        return 0.0
    value = to_number(discount.value)
    if discount.type == "percent":
        return base * (value / 100)
    # A fixed discount can never exceed the amount it is taken from.
    return min(value, base)


def calculate_item_total(item: InvoiceItem) -> float:
    """Line total after the item's own discount, never below zero."""
    base = _item_base(item)
    if item.discount is None:
        return round_to_currency(base)
    return round_to_currency(max(0.0, base - _discount_amount(item.discount, base)))


def calculate_item_discount(item: InvoiceItem) -> float:
    """Discount amount taken off a single line (0 when it has none)."""
    return round_to_currency(_discount_amount(item.discount, _item_base(item)))


def calculate_subtotal(items: Iterable[InvoiceItem]) -> float:
    return round_to_currency(sum(_item_base(item) for item in items))


def calculate_total_item_discounts(items: Iterable[InvoiceItem]) -> float:
    return round_to_currency(sum(calculate_item_discount(item) for item in items))


def calculate_subtotal_after_item_discounts(items: Iterable[InvoiceItem]) -> float:
    # Summed per line so each line keeps its own clamp at zero.
    return round_to_currency(sum(calculate_item_total(item) for item in items))


def calculate_invoice_discounts(discounts: Iterable[Discount], base_amount: float) -> float:
    total = 0.0
    for discount in discounts:
        value = to_number(discount.value)
        if discount.type == "percent":
            total += base_amount * (value / 100)
        else:
            total += min(value, base_amount)
    return round_to_currency(total)


def _fee_base(fee: Fee, bases: dict) -> float:
    return bases.get(fee.apply_base, bases[FEE_BASE_AFTER_ITEM_DISCOUNTS])


def calculate_fees(
    fees: Iterable[Fee],
    subtotal: float,
    subtotal_after_item_discounts: float,
    subtotal_after_invoice_discounts: float,
    grand_total_pre_tax: float,
) -> float:
    """Sum of all fees, each taken against the running subtotal its ``apply_base`` names.

    Unknown ``apply_base`` values use the subtotal after item discounts.
    """
    bases = {
        FEE_BASE_SUBTOTAL: subtotal,
        FEE_BASE_AFTER_ITEM_DISCOUNTS: subtotal_after_item_discounts,
        FEE_BASE_AFTER_INVOICE_DISCOUNTS: subtotal_after_invoice_discounts,
        FEE_BASE_GRAND_TOTAL_PRE_TAX: grand_total_pre_tax,
    }
    total = 0.0
    for fee in fees:
        value = to_number(fee.value)
        if fee.type == "percent":
            total += _fee_base(fee, bases) * (value / 100)
        else:
            total += value
    return round_to_currency(total)


def tax_applies_to(tax: Tax, item: InvoiceItem) -> bool:
    return not tax.category or tax.category == ALL_CATEGORIES or item.tax_category == tax.category


def sort_taxes(taxes: Iterable[Tax]) -> List[Tax]:
    """Taxes in ascending priority; equal priorities keep their original order."""
    return sorted(taxes, key=lambda tax: to_number(tax.priority))


def calculate_taxes(taxes: Iterable[Tax], items: List[InvoiceItem], taxable_amount: float) -> float:
    """Total tax over ``taxable_amount``.

    Each tax applies to the share of ``taxable_amount`` given by the fraction
    of line items in its category (by count, not by amount).
    """
    if not items:
        return 0.0
    total = 0.0
    for tax in sort_taxes(taxes):
        applicable = sum(1 for item in items if tax_applies_to(tax, item))
        if applicable == 0:
            continue
        ratio = applicable / len(items)
        total += taxable_amount * ratio * (to_number(tax.rate) / 100)
    return round_to_currency(total)


def calculate_total_paid(payments: Iterable[Payment]) -> float:
    return round_to_currency(sum(to_number(payment.amount) for payment in payments))


def calculate_totals_breakdown(invoice: Invoice) -> TotalsBreakdown:
    """Run the full totals pipeline and keep every intermediate stage."""
    items = list(invoice.items)

    subtotal = calculate_subtotal(items)
    item_discounts = calculate_total_item_discounts(items)
    subtotal_after_item_discounts = calculate_subtotal_after_item_discounts(items)

    invoice_discounts = calculate_invoice_discounts(invoice.discounts, subtotal_after_item_discounts)
    subtotal_after_invoice_discounts = round_to_currency(
        max(0.0, subtotal_after_item_discounts - invoice_discounts)
    )

    # Fees are computed before tax in a single pass, so the "pre-tax grand
    # total" base is the subtotal after invoice discounts, without other fees.
    grand_total_pre_tax = subtotal_after_invoice_discounts
    fees = calculate_fees(
        invoice.fees,
        subtotal=subtotal,
        subtotal_after_item_discounts=subtotal_after_item_discounts,
        subtotal_after_invoice_discounts=subtotal_after_invoice_discounts,
        grand_total_pre_tax=grand_total_pre_tax,
    )

    taxable_amount = round_to_currency(subtotal_after_invoice_discounts + fees)
    tax = calculate_taxes(invoice.taxes, items, taxable_amount)
    grand_total = round_to_currency(max(0.0, taxable_amount + tax))

    paid = calculate_total_paid(invoice.payments)
    balance_due = round_to_currency(max(0.0, grand_total - paid))

    breakdown = TotalsBreakdown(
        subtotal=subtotal,
        item_discounts=item_discounts,
        invoice_discounts=invoice_discounts,
        fees=fees,
        tax=tax,
        grand_total=grand_total,
        paid=paid,
        balance_due=balance_due,
        subtotal_after_item_discounts=subtotal_after_item_discounts,
        subtotal_after_invoice_discounts=subtotal_after_invoice_discounts,
        taxable_amount=taxable_amount,
    )
    logger.debug("Recalculated totals for %s: %s", invoice.display_id, breakdown)
    return breakdown


def calculate_invoice_totals(invoice: Invoice) -> InvoiceTotals:
    return calculate_totals_breakdown(invoice).to_totals()
