import pytest

from invoice_studio.editor import recalculate
from invoice_studio.preparer import payment_terms_display, prepare_template_data
from invoice_studio.schemas import Discount, Fee, Payment, PaymentLinks, Tax

from .conftest import make_item


@pytest.fixture
def prepared(single_item_invoice, template, business):
    def _prepare(**changes):
        invoice = recalculate(single_item_invoice.model_copy(update=changes))
        return prepare_template_data(invoice, template, business)

    return _prepare


@pytest.mark.parametrize("raw", ["", "   ", "\n\t "])
def test_blank_work_details_are_falsy(prepared, raw):
    assert not prepared(work_details=raw)["workDetails"]


def test_work_details_exposed_raw(prepared):
    html = "<p>Installed <strong>two</strong> units</p>"
    assert prepared(work_details=html)["workDetails"] == html


def test_payment_links_hidden_when_empty(prepared):
    assert prepared()["paymentLinks"] is False


@pytest.mark.parametrize(
    "links",
    [
        {"stripe_url": "https://pay.example/abc"},
        {"paypal_url": "https://paypal.example/xyz"},
        {"instructions": "Wire to account 123"},
    ],
)
def test_payment_links_shown_when_any_present(prepared, links):
    data = prepared(payment_links=PaymentLinks(**links))
    assert data["paymentLinks"]
    assert set(data["paymentLinks"]) >= {"stripeUrl", "paypalUrl", "instructions"}


def test_items_carry_formatted_values(prepared):
    data = prepared(
        items=[
            make_item(quantity=2, unit_price=50, discount={"type": "percent", "value": 10}, id="a"),
            make_item(quantity=1.5, unit_price=20, discount={"type": "fixed", "value": 5}, id="b"),
            make_item(quantity=1, unit_price=8, id="c"),
        ]
    )
    first, second, third = data["items"]

    assert first["formattedUnitPrice"] == "$50.00"
    assert first["formattedQuantity"] == "2"
    assert first["calculatedLineTotal"] == "$90.00"
    assert first["calculatedDiscount"] == "$10.00"
    assert first["discountDisplay"] == "10%"
    assert first["unitPrice"] == 50

    assert second["formattedQuantity"] == "1.5"
    assert second["discountDisplay"] == "$5.00"
    assert second["calculatedLineTotal"] == "$25.00"

    assert third["discountDisplay"] == ""
    assert third["calculatedDiscount"] == ""


def test_totals_are_all_strings(prepared):
    totals = prepared()["totals"]
    assert set(totals) == {
        "subtotal",
        "itemDiscounts",
        "invoiceDiscounts",
        "fees",
        "tax",
        "grandTotal",
        "paid",
        "balanceDue",
    }
    assert all(isinstance(value, str) for value in totals.values())
    assert totals["grandTotal"] == "$110.00"
    assert totals["tax"] == "$10.00"


def test_collections_have_formatted_companions(prepared):
    data = prepared(
        discounts=[Discount(label="Loyalty", type="percent", value=5)],
        fees=[Fee(label="Rush", type="fixed", value=15), Fee(label="Card", type="percent", value=2.5)],
        taxes=[Tax(label="VAT", rate=8.5, category="all")],
        payments=[Payment(date="2026-03-10", method="card", amount=20)],
    )
    assert data["discounts"][0]["formattedValue"] == "5%"
    assert [fee["formattedValue"] for fee in data["fees"]] == ["$15.00", "2.5%"]
    assert data["taxes"][0]["formattedRate"] == "8.5%"
    assert data["taxes"][0]["rate"] == 8.5
    assert data["payments"][0]["formattedAmount"] == "$20.00"
    assert data["payments"][0]["formattedDate"] == "3/10/2026"
    assert data["payments"][0]["method"] == "card"


def test_invoice_section(prepared):
    invoice = prepared()["invoice"]
    assert invoice["invoiceNumber"] == "INV-2026-00001"
    assert invoice["formattedIssueDate"] == "3/5/2026"
    assert invoice["formattedDueDate"] == "3/19/2026"
    assert invoice["paymentTermsDisplay"] == "Payment due within 14 days"


def test_business_and_template_sections(prepared):
    data = prepared()
    assert data["business"]["name"] == "Acme Studio"
    assert data["brand"]["primaryColor"] == "#0F172A"
    assert data["layout"]["margins"]["top"] == 48
    assert data["client"]["billingAddress"] == ""


def test_other_currency_and_locale(prepared):
    data = prepared(currency="EUR", locale="de-DE")
    assert "110,00" in data["totals"]["grandTotal"]
    assert "€" in data["totals"]["grandTotal"]
    assert data["invoice"]["formattedIssueDate"] == "05.03.2026"


@pytest.mark.parametrize(
    "code, expected",
    [
        ("NET_0", "Payment due upon receipt"),
        ("NET_7", "Payment due within 7 days"),
        ("NET_15", "Payment due within 15 days"),
        ("NET_30", "Payment due within 30 days"),
        ("NET_45", "Payment due within 45 days"),
        ("NET_60", "Payment due within 60 days"),
        ("NET_90", "Payment due within 90 days"),
        ("DUE_ON_SIGNING", "DUE_ON_SIGNING"),
    ],
)
def test_payment_terms_display(code, expected):
    assert payment_terms_display(code) == expected


def test_date_format_can_be_a_babel_style(single_item_invoice, template, business):
    data = prepare_template_data(recalculate(single_item_invoice), template, business, date_format="medium")
    assert data["invoice"]["formattedIssueDate"] == "Mar 5, 2026"
