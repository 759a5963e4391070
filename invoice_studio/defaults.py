"""Built-in templates and the business profile used when none is supplied."""
from __future__ import annotations

from typing import Optional

from .schemas import BusinessProfile, Margins, Template, TemplateBrand, TemplateDefaults, TemplateLayout

DEFAULT_TEMPLATE_ID = "clean-professional"

DEFAULT_TEMPLATE_HTML = """\
<div class="invoice">
  <header class="flex justify-between items-start mb-8">
    <div>
      {{#business.logoPath}}<img class="logo" src="{{business.logoPath}}" alt="{{business.name}}">{{/business.logoPath}}
      <h2 style="color: {{brand.primaryColor}};">{{business.name}}</h2>
      <div class="pre">{{business.address}}</div>
      {{#business.email}}<div>{{business.email}}</div>{{/business.email}}
      {{#business.phone}}<div>{{business.phone}}</div>{{/business.phone}}
      {{#business.taxId}}<div>Tax ID: {{business.taxId}}</div>{{/business.taxId}}
    </div>
    <div class="text-right">
      <h1 class="text-2xl" style="color: {{brand.accentColor}};">INVOICE</h1>
      <div><strong>Invoice #</strong> {{invoice.invoiceNumber}}</div>
      {{#invoice.poNumber}}<div><strong>PO #</strong> {{invoice.poNumber}}</div>{{/invoice.poNumber}}
      <div><strong>Issued</strong> {{invoice.formattedIssueDate}}</div>
      <div><strong>Due</strong> {{invoice.formattedDueDate}}</div>
      <div>{{invoice.paymentTermsDisplay}}</div>
    </div>
  </header>

  <section class="mb-6">
    <h3>Bill To</h3>
    <div class="font-semibold">{{client.name}}</div>
    {{#client.company}}<div>{{client.company}}</div>{{/client.company}}
    {{#client.billingAddress}}<div class="pre">{{client.billingAddress}}</div>{{/client.billingAddress}}
    {{#client.email}}<div>{{client.email}}</div>{{/client.email}}
  </section>

  <table>
    <thead>
      <tr>
        <th>Item</th>
        <th class="text-right">Qty</th>
        <th class="text-right">Rate</th>
        <th class="text-right">Discount</th>
        <th class="text-right">Amount</th>
      </tr>
    </thead>
    <tbody>
      {{#items}}
      <tr>
        <td>
          <div class="font-semibold">{{name}}</div>
          {{#description}}<div class="muted">{{description}}</div>{{/description}}
        </td>
        <td class="text-right">{{formattedQuantity}}</td>
        <td class="text-right">{{formattedUnitPrice}}</td>
        <td class="text-right">{{discountDisplay}}</td>
        <td class="text-right">{{calculatedLineTotal}}</td>
      </tr>
      {{/items}}
      {{^items}}
      <tr><td colspan="5" class="text-center muted">No line items</td></tr>
      {{/items}}
    </tbody>
  </table>

  {{#workDetails}}
  <section class="mt-4 work-details">
    <h3>Work Details</h3>
    <div>{{{workDetails}}}</div>
  </section>
  {{/workDetails}}

  <section class="totals mt-4">
    <div class="flex justify-between"><span>Subtotal</span><span>{{totals.subtotal}}</span></div>
    {{#discounts}}
    <div class="flex justify-between"><span>{{label}} ({{formattedValue}})</span><span></span></div>
    {{/discounts}}
    <div class="flex justify-between"><span>Discounts</span><span>{{totals.invoiceDiscounts}}</span></div>
    {{#fees}}
    <div class="flex justify-between"><span>{{label}} ({{formattedValue}})</span><span></span></div>
    {{/fees}}
    <div class="flex justify-between"><span>Fees</span><span>{{totals.fees}}</span></div>
    {{#taxes}}
    <div class="flex justify-between"><span>{{label}} ({{formattedRate}})</span><span></span></div>
    {{/taxes}}
    <div class="flex justify-between"><span>Tax</span><span>{{totals.tax}}</span></div>
    <div class="flex justify-between font-bold text-lg border-t pt-4" style="color: {{brand.primaryColor}};">
      <span>Total</span><span>{{totals.grandTotal}}</span>
    </div>
    {{#payments}}
    <div class="flex justify-between muted"><span>Paid {{formattedDate}} ({{method}})</span><span>{{formattedAmount}}</span></div>
    {{/payments}}
    <div class="flex justify-between font-bold"><span>Balance Due</span><span>{{totals.balanceDue}}</span></div>
  </section>

  {{#paymentLinks}}
  <section class="mt-8 payment-links">
    <h3>Payment Options</h3>
    {{#paymentLinks.stripeUrl}}<div><a href="{{paymentLinks.stripeUrl}}">Pay with card</a></div>{{/paymentLinks.stripeUrl}}
    {{#paymentLinks.paypalUrl}}<div><a href="{{paymentLinks.paypalUrl}}">Pay with PayPal</a></div>{{/paymentLinks.paypalUrl}}
    {{#paymentLinks.instructions}}<div class="pre">{{paymentLinks.instructions}}</div>{{/paymentLinks.instructions}}
  </section>
  {{/paymentLinks}}

  {{#notes}}<section class="mt-4"><h3>Notes</h3><div class="pre">{{notes}}</div></section>{{/notes}}
  {{#terms}}<section class="mt-4"><h3>Terms</h3><div class="pre">{{terms}}</div></section>{{/terms}}
  {{#business.bankDetails}}<section class="mt-4 muted">{{business.bankDetails}}</section>{{/business.bankDetails}}

  {{#layout.footerText}}<footer class="mt-8 text-center muted">{{layout.footerText}}</footer>{{/layout.footerText}}
</div>
"""

DEFAULT_TEMPLATE_CSS = """\
.pre { white-space: pre-line; }
.muted { color: #6b7280; font-size: 12px; }
.logo { max-height: 60px; max-width: 180px; margin-bottom: 8px; }
.totals { margin-left: auto; max-width: 320px; }
.work-details { padding: 12px; border-left: 4px solid #2563eb; background: #f0f9ff; }
"""

MODERN_STRIPE_HTML = """\
<div class="invoice">
  <div class="stripe" style="background: linear-gradient(135deg, {{brand.accentColor}} 0%, #8B5CF6 100%);">
    <div class="flex justify-between items-center">
      <div>
        {{#business.logoPath}}<img class="logo" src="{{business.logoPath}}" alt="{{business.name}}">{{/business.logoPath}}
        <h1 class="text-xl">{{business.name}}</h1>
      </div>
      <div class="text-right">
        <div class="text-2xl font-bold">INVOICE</div>
        <div># {{invoice.invoiceNumber}}</div>
      </div>
    </div>
  </div>

  <section class="grid grid-cols-2 gap-4 mb-8">
    <div class="card" style="border-left-color: {{brand.accentColor}};">
      <h3 style="color: {{brand.primaryColor}};">From</h3>
      <div class="font-semibold">{{business.name}}</div>
      <div class="pre">{{business.address}}</div>
      {{#business.email}}<div>{{business.email}}</div>{{/business.email}}
      {{#business.phone}}<div>{{business.phone}}</div>{{/business.phone}}
      {{#business.taxId}}<div class="muted">Tax ID: {{business.taxId}}</div>{{/business.taxId}}
    </div>
    <div class="card" style="border-left-color: {{brand.accentColor}};">
      <h3 style="color: {{brand.primaryColor}};">Bill To</h3>
      {{#client.name}}<div class="font-semibold">{{client.name}}</div>{{/client.name}}
      {{#client.company}}<div>{{client.company}}</div>{{/client.company}}
      {{#client.billingAddress}}<div class="pre">{{client.billingAddress}}</div>{{/client.billingAddress}}
      {{#client.email}}<div>{{client.email}}</div>{{/client.email}}
    </div>
  </section>

  <section class="flex justify-between mb-6">
    <div><span class="muted">Issued</span> {{invoice.formattedIssueDate}}</div>
    <div><span class="muted">Due</span> {{invoice.formattedDueDate}}</div>
    {{#invoice.poNumber}}<div><span class="muted">PO</span> {{invoice.poNumber}}</div>{{/invoice.poNumber}}
    <div>{{invoice.paymentTermsDisplay}}</div>
  </section>

  <table>
    <thead>
      <tr style="background: {{brand.primaryColor}}; color: white;">
        <th>Description</th>
        <th class="text-right">Qty</th>
        <th class="text-right">Rate</th>
        <th class="text-right">Amount</th>
      </tr>
    </thead>
    <tbody>
      {{#items}}
      <tr>
        <td>
          <div class="font-semibold">{{name}}</div>
          {{#sku}}<span class="sku">{{sku}}</span>{{/sku}}
          {{#description}}<div class="muted">{{description}}</div>{{/description}}
          {{#discountDisplay}}<div class="muted">Discount {{discountDisplay}}</div>{{/discountDisplay}}
        </td>
        <td class="text-right">{{formattedQuantity}}</td>
        <td class="text-right">{{formattedUnitPrice}}</td>
        <td class="text-right font-semibold">{{calculatedLineTotal}}</td>
      </tr>
      {{/items}}
    </tbody>
  </table>

  {{#workDetails}}
  <section class="card mt-4" style="border-left-color: {{brand.accentColor}};">
    <h3>Work Details</h3>
    <div>{{{workDetails}}}</div>
  </section>
  {{/workDetails}}

  <section class="totals card mt-4" style="border-left-color: {{brand.accentColor}};">
    <div class="flex justify-between"><span>Subtotal</span><span>{{totals.subtotal}}</span></div>
    <div class="flex justify-between"><span>Item discounts</span><span>-{{totals.itemDiscounts}}</span></div>
    {{#discounts}}<div class="flex justify-between muted"><span>{{label}}</span><span>{{formattedValue}}</span></div>{{/discounts}}
    <div class="flex justify-between"><span>Discounts</span><span>-{{totals.invoiceDiscounts}}</span></div>
    {{#fees}}<div class="flex justify-between muted"><span>{{label}}</span><span>{{formattedValue}}</span></div>{{/fees}}
    <div class="flex justify-between"><span>Fees</span><span>{{totals.fees}}</span></div>
    {{#taxes}}<div class="flex justify-between muted"><span>{{label}}</span><span>{{formattedRate}}</span></div>{{/taxes}}
    <div class="flex justify-between"><span>Tax</span><span>{{totals.tax}}</span></div>
    <div class="flex justify-between text-lg font-bold border-t pt-4" style="color: {{brand.accentColor}};">
      <span>Total</span><span>{{totals.grandTotal}}</span>
    </div>
    <div class="flex justify-between"><span>Paid</span><span>{{totals.paid}}</span></div>
    <div class="flex justify-between font-bold"><span>Balance Due</span><span>{{totals.balanceDue}}</span></div>
  </section>

  {{#paymentLinks}}
  <section class="mt-8">
    <h3>Pay Online</h3>
    {{#paymentLinks.stripeUrl}}<a class="pay-button" style="background: {{brand.accentColor}};" href="{{paymentLinks.stripeUrl}}">Pay with card</a>{{/paymentLinks.stripeUrl}}
    {{#paymentLinks.paypalUrl}}<a class="pay-button" href="{{paymentLinks.paypalUrl}}">Pay with PayPal</a>{{/paymentLinks.paypalUrl}}
    {{#paymentLinks.instructions}}<div class="pre mt-4">{{paymentLinks.instructions}}</div>{{/paymentLinks.instructions}}
  </section>
  {{/paymentLinks}}

  {{#notes}}<section class="mt-4"><h3>Notes</h3><div class="pre">{{notes}}</div></section>{{/notes}}
  {{#terms}}<section class="mt-4"><h3>Terms</h3><div class="pre">{{terms}}</div></section>{{/terms}}
  {{#layout.showSignature}}<section class="mt-8 signature">Authorized signature</section>{{/layout.showSignature}}
  {{#layout.footerText}}<footer class="mt-8 text-center muted">{{layout.footerText}}</footer>{{/layout.footerText}}
</div>
"""

MODERN_STRIPE_CSS = """\
.pre { white-space: pre-line; }
.muted { color: #64748B; font-size: 12px; }
.logo { height: 32px; max-width: 40px; object-fit: contain; }
.stripe { color: white; padding: 24px 48px; margin: -32px -48px 2rem -48px; }
.card { background: #F8FAFC; border-radius: 12px; padding: 1.5rem; border-left: 4px solid #3B82F6; }
.sku { font-size: 11px; color: #94A3B8; background: #F1F5F9; padding: 2px 6px; border-radius: 4px; }
.totals { margin-left: auto; max-width: 340px; }
.pay-button { display: inline-block; padding: 8px 16px; margin-right: 8px; border-radius: 6px; color: white; background: #0070BA; text-decoration: none; }
.signature { border-top: 1px solid #CBD5E1; width: 240px; padding-top: 8px; }
"""

COMPACT_LEDGER_HTML = """\
<div class="invoice ledger">
  <header class="flex justify-between items-start border-b pb-4 mb-4">
    <div>
      <h1 style="color: {{brand.primaryColor}};">{{business.name}}</h1>
      <div class="small pre">{{business.address}}</div>
      <div class="small">{{business.email}}{{#business.phone}} | {{business.phone}}{{/business.phone}}</div>
      {{#business.taxId}}<div class="small muted">Tax ID: {{business.taxId}}</div>{{/business.taxId}}
    </div>
    <table class="meta">
      <tr><th>Invoice</th><td>{{invoice.invoiceNumber}}</td></tr>
      <tr><th>Issued</th><td>{{invoice.formattedIssueDate}}</td></tr>
      <tr><th>Due</th><td>{{invoice.formattedDueDate}}</td></tr>
      {{#invoice.poNumber}}<tr><th>PO</th><td>{{invoice.poNumber}}</td></tr>{{/invoice.poNumber}}
    </table>
  </header>

  <section class="grid grid-cols-2 gap-4 mb-4 small">
    <div>
      <div class="label">Bill To</div>
      {{#client.name}}<div class="font-semibold" style="color: {{brand.primaryColor}};">{{client.name}}</div>{{/client.name}}
      {{#client.company}}<div>{{client.company}}</div>{{/client.company}}
      {{#client.billingAddress}}<div class="pre">{{client.billingAddress}}</div>{{/client.billingAddress}}
      {{#client.email}}<div>{{client.email}}</div>{{/client.email}}
    </div>
    <div>
      <div class="label">Payment</div>
      <div>{{invoice.paymentTermsDisplay}}</div>
      {{#business.bankDetails}}<div class="pre muted">{{business.bankDetails}}</div>{{/business.bankDetails}}
    </div>
  </section>

  <table class="lines">
    <thead>
      <tr>
        <th>#</th>
        <th>Item</th>
        <th class="text-right">Qty</th>
        <th class="text-right">Rate</th>
        <th class="text-right">Disc.</th>
        <th class="text-right">Total</th>
      </tr>
    </thead>
    <tbody>
      {{#items}}
      <tr>
        <td class="muted">{{sku}}</td>
        <td>
          {{name}}
          {{#description}}<div class="small muted">{{description}}</div>{{/description}}
        </td>
        <td class="text-right">{{formattedQuantity}}</td>
        <td class="text-right">{{formattedUnitPrice}}</td>
        <td class="text-right">{{discountDisplay}}</td>
        <td class="text-right">{{calculatedLineTotal}}</td>
      </tr>
      {{/items}}
      {{^items}}
      <tr><td colspan="6" class="text-center muted">No line items</td></tr>
      {{/items}}
    </tbody>
  </table>

  {{#workDetails}}<section class="mt-4 small"><div class="label">Work Details</div><div>{{{workDetails}}}</div></section>{{/workDetails}}

  <table class="summary mt-4">
    <tr><th>Subtotal</th><td>{{totals.subtotal}}</td></tr>
    <tr><th>Item discounts</th><td>{{totals.itemDiscounts}}</td></tr>
    <tr><th>Invoice discounts</th><td>{{totals.invoiceDiscounts}}</td></tr>
    <tr><th>Fees</th><td>{{totals.fees}}</td></tr>
    {{#taxes}}<tr class="muted"><th>{{label}} {{formattedRate}}</th><td></td></tr>{{/taxes}}
    <tr><th>Tax</th><td>{{totals.tax}}</td></tr>
    <tr class="grand" style="border-color: {{brand.accentColor}};"><th>Total</th><td>{{totals.grandTotal}}</td></tr>
    {{#payments}}<tr class="muted"><th>Paid {{formattedDate}}</th><td>{{formattedAmount}}</td></tr>{{/payments}}
    <tr class="font-bold"><th>Balance Due</th><td>{{totals.balanceDue}}</td></tr>
  </table>

  {{#paymentLinks}}
  <section class="mt-4 small">
    <div class="label">Pay Online</div>
    {{#paymentLinks.stripeUrl}}<div>Card: {{paymentLinks.stripeUrl}}</div>{{/paymentLinks.stripeUrl}}
    {{#paymentLinks.paypalUrl}}<div>PayPal: {{paymentLinks.paypalUrl}}</div>{{/paymentLinks.paypalUrl}}
    {{#paymentLinks.instructions}}<div class="pre">{{paymentLinks.instructions}}</div>{{/paymentLinks.instructions}}
  </section>
  {{/paymentLinks}}

  {{#notes}}<section class="mt-4 small"><div class="label">Notes</div><div class="pre">{{notes}}</div></section>{{/notes}}
  {{#terms}}<section class="mt-4 small"><div class="label">Terms</div><div class="pre">{{terms}}</div></section>{{/terms}}
  {{#layout.showSignature}}<section class="mt-8 small signature">Authorized signature</section>{{/layout.showSignature}}
  {{#layout.footerText}}<footer class="mt-4 text-center small muted">{{layout.footerText}}</footer>{{/layout.footerText}}
</div>
"""

COMPACT_LEDGER_CSS = """\
.ledger { font-size: 12px; }
.ledger h1 { font-size: 18px; }
.pre { white-space: pre-line; }
.small { font-size: 11px; }
.muted { color: #9CA3AF; }
.label { font-size: 10px; text-transform: uppercase; letter-spacing: 0.5px; color: #6B7280; margin-bottom: 2px; }
.meta { width: auto; margin: 0; }
.meta th, .meta td { padding: 2px 6px; border: none; background: none; font-size: 11px; }
.lines th, .lines td { padding: 4px 6px; }
.summary { width: 280px; margin-left: auto; }
.summary th, .summary td { padding: 3px 6px; border: none; background: none; }
.summary td { text-align: right; }
.summary .grand { border-top: 2px solid #374151; font-weight: 700; }
.signature { border-top: 1px solid #D1D5DB; width: 200px; padding-top: 6px; }
"""


def _builtin(template_id, name, primary, accent, header_font, header_style, margins, terms, html, css) -> Template:
    return Template(
        id=template_id,
        name=name,
        brand=TemplateBrand(
            primary_color=primary,
            accent_color=accent,
            font_family_header=header_font,
            font_family_body="Inter",
            logo_path="",
        ),
        layout=TemplateLayout(
            header_style=header_style,
            footer_text="Thank you for your business!",
            show_signature=False,
            margins=Margins(**margins),
        ),
        defaults=TemplateDefaults(tax_rules=["standard"], terms=terms),
        html=html,
        css=css,
    )


DEFAULT_TEMPLATE = _builtin(
    DEFAULT_TEMPLATE_ID,
    "Clean Professional",
    "#0F172A",
    "#2563EB",
    "Inter",
    "left-logo-right-details",
    dict(top=48, right=48, bottom=64, left=48),
    "Payment due within 14 days.",
    DEFAULT_TEMPLATE_HTML,
    DEFAULT_TEMPLATE_CSS,
)

MODERN_STRIPE_TEMPLATE = _builtin(
    "modern-stripe",
    "Modern Stripe",
    "#1E293B",
    "#3B82F6",
    "Inter",
    "stripe-header-style",
    dict(top=32, right=48, bottom=64, left=48),
    "Payment due within 30 days.",
    MODERN_STRIPE_HTML,
    MODERN_STRIPE_CSS,
)

COMPACT_LEDGER_TEMPLATE = _builtin(
    "compact-ledger",
    "Compact Ledger",
    "#1F2937",
    "#374151",
    "Roboto Slab",
    "compact-header",
    dict(top=32, right=32, bottom=48, left=32),
    "Payment due within 30 days.",
    COMPACT_LEDGER_HTML,
    COMPACT_LEDGER_CSS,
)

DEFAULT_TEMPLATES = [DEFAULT_TEMPLATE, MODERN_STRIPE_TEMPLATE, COMPACT_LEDGER_TEMPLATE]


def get_template(template_id: Optional[str]) -> Template:
    """Built-in template with ``template_id``, or the first one when unknown."""
    for template in DEFAULT_TEMPLATES:
        if template.id == template_id:
            return template
    return DEFAULT_TEMPLATES[0]


DEFAULT_BUSINESS_PROFILE = BusinessProfile(
    id="default",
    name="Your Business",
    address="100 Main St\nCity, ST 00000",
    email="billing@example.com",
    phone="555-555-5555",
    tax_id="",
    bank_details="",
    logo_path="",
    color="#111827",
)
