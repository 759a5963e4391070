"""Data models shared by the calculator, preparer, renderer, CLI, and API.

Persisted records serialize with camelCase keys (``unitPrice``, ``taxCategory``)
so files written by the desktop editor load unchanged. Unknown keys are kept
so a load/save cycle never drops data the core does not read.
"""
from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Editor fields may hold a transient placeholder such as "" while the user types.
Number = Union[int, float, str, None]

DiscountType = Literal["percent", "fixed"]

FEE_BASE_SUBTOTAL = "subtotal"
FEE_BASE_AFTER_ITEM_DISCOUNTS = "subtotal_after_item_discounts"
FEE_BASE_AFTER_INVOICE_DISCOUNTS = "subtotal_after_invoice_discounts"
FEE_BASE_GRAND_TOTAL_PRE_TAX = "grand_total_pre_tax"
FEE_BASES = (
    FEE_BASE_SUBTOTAL,
    FEE_BASE_AFTER_ITEM_DISCOUNTS,
    FEE_BASE_AFTER_INVOICE_DISCOUNTS,
    FEE_BASE_GRAND_TOTAL_PRE_TAX,
)


class Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_json_dict(self) -> dict:
        """Plain JSON-compatible dict using the persisted (camelCase) keys."""
        return self.model_dump(mode="json", by_alias=True)


class Client(Record):
    name: str = ""
    company: str = ""
    contact: str = ""
    email: str = ""
    phone: str = ""
    billing_address: str = ""
    shipping_address: str = ""


class PaymentLinks(Record):
    stripe_url: str = ""
    paypal_url: str = ""
    instructions: str = ""

    def has_any(self) -> bool:
        return bool(self.stripe_url or self.paypal_url or self.instructions)


class ItemDiscount(Record):
    type: DiscountType = "percent"
    value: Number = 0


class InvoiceItem(Record):
    id: str = ""
    sku: str = ""
    name: str = ""
    description: str = ""
    quantity: Number = 1
    unit_price: Number = 0
    discount: Optional[ItemDiscount] = None
    tax_category: str = "standard"
    notes: str = ""


class Discount(Record):
    id: str = ""
    label: str = ""
    type: DiscountType = "percent"
    value: Number = 0


class Fee(Record):
    id: str = ""
    label: str = ""
    type: DiscountType = "fixed"
    value: Number = 0
    apply_base: str = FEE_BASE_SUBTOTAL


class Tax(Record):
    id: str = ""
    label: str = ""
    rate: Number = 0
    category: str = "all"
    priority: Number = 0
    apply_after_discounts: bool = True


class Payment(Record):
    id: str = ""
    date: str = ""
    method: str = ""
    amount: Number = 0


class InvoiceTotals(Record):
    subtotal: float = 0.0
    item_discounts: float = 0.0
    invoice_discounts: float = 0.0
    fees: float = 0.0
    tax: float = 0.0
    grand_total: float = 0.0
    paid: float = 0.0
    balance_due: float = 0.0


class TotalsBreakdown(InvoiceTotals):
    """Every stage of the totals pipeline, including the intermediate subtotals."""

    subtotal_after_item_discounts: float = 0.0
    subtotal_after_invoice_discounts: float = 0.0
    taxable_amount: float = 0.0

    def to_totals(self) -> InvoiceTotals:
        return InvoiceTotals(**{name: getattr(self, name) for name in InvoiceTotals.model_fields})


class Invoice(Record):
    version: str = "1.0"
    id: str = ""
    template_id: str = ""
    business_profile_id: str = "default"
    invoice_number: str = ""
    po_number: str = ""
    issue_date: str = ""
    due_date: str = ""
    payment_terms: str = ""
    currency: str = "USD"
    locale: str = "en-US"
    client: Client = Field(default_factory=Client)
    items: List[InvoiceItem] = Field(default_factory=list)
    discounts: List[Discount] = Field(default_factory=list)
    fees: List[Fee] = Field(default_factory=list)
    taxes: List[Tax] = Field(default_factory=list)
    payments: List[Payment] = Field(default_factory=list)
    work_details: str = ""
    notes: str = ""
    terms: str = ""
    payment_links: PaymentLinks = Field(default_factory=PaymentLinks)
    totals: InvoiceTotals = Field(default_factory=InvoiceTotals)
    created_at: str = ""
    updated_at: str = ""

    @property
    def display_id(self) -> str:
        """Fallback identifier for messages and reports."""
        return self.invoice_number or self.id or "<unknown>"


class TemplateBrand(Record):
    primary_color: str = "#0F172A"
    accent_color: str = "#2563EB"
    font_family_header: str = "Inter"
    font_family_body: str = "Inter"
    logo_path: str = ""


class Margins(Record):
    top: Number = 48
    right: Number = 48
    bottom: Number = 64
    left: Number = 48


class TemplateLayout(Record):
    header_style: str = "left-logo-right-details"
    footer_text: str = ""
    show_signature: bool = False
    margins: Margins = Field(default_factory=Margins)


class TemplateDefaults(Record):
    tax_rules: List[str] = Field(default_factory=list)
    terms: str = ""


class Template(Record):
    id: str = ""
    name: str = ""
    brand: TemplateBrand = Field(default_factory=TemplateBrand)
    layout: TemplateLayout = Field(default_factory=TemplateLayout)
    defaults: TemplateDefaults = Field(default_factory=TemplateDefaults)
    html: str = ""
    css: str = ""


class BusinessProfile(Record):
    id: str = "default"
    name: str = ""
    address: str = ""
    email: str = ""
    phone: str = ""
    tax_id: str = ""
    bank_details: str = ""
    logo_path: str = ""
    color: str = "#111827"


class RenderRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    invoice: Invoice
    template: Optional[Template] = None
    business: Optional[BusinessProfile] = None
    document: bool = True
