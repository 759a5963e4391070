import pytest

from invoice_studio.schemas import BusinessProfile, Invoice, InvoiceItem, ItemDiscount, Tax, Template


def make_item(quantity=1, unit_price=0, discount=None, tax_category="standard", **extra) -> InvoiceItem:
    return InvoiceItem(
        id=extra.pop("id", f"item-{quantity}-{unit_price}"),
        name=extra.pop("name", "Consulting"),
        quantity=quantity,
        unit_price=unit_price,
        discount=ItemDiscount(**discount) if discount else None,
        tax_category=tax_category,
        **extra,
    )


@pytest.fixture
def single_item_invoice() -> Invoice:
    """One standard-rated item at 100 with a single 10% tax."""
    return Invoice(
        id="inv-1",
        invoice_number="INV-2026-00001",
        issue_date="2026-03-05",
        due_date="2026-03-19",
        payment_terms="NET_14",
        currency="USD",
        locale="en-US",
        items=[make_item(quantity=1, unit_price=100, id="item-1", name="Design work")],
        taxes=[Tax(id="tax-1", label="Sales tax", rate=10, category="standard", priority=1, apply_after_discounts=True)],
    )


@pytest.fixture
def template() -> Template:
    return Template(id="test", name="Test", html="<p>{{invoice.invoiceNumber}} {{totals.grandTotal}}</p>")


@pytest.fixture
def business() -> BusinessProfile:
    return BusinessProfile(id="default", name="Acme Studio", address="1 Road\nTown", color="#111827")
