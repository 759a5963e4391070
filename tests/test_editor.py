from datetime import date

import pytest
from pydantic import TypeAdapter, ValidationError

from invoice_studio.config import Settings
from invoice_studio.editor import (
    AddDiscount,
    AddFee,
    AddItem,
    AddPayment,
    AddTax,
    Mutation,
    RemoveItem,
    RemovePayment,
    UpdateDetails,
    UpdateFee,
    UpdateItem,
    UpdateTax,
    apply_mutation,
    apply_mutations,
    create_empty_invoice,
    duplicate_invoice,
    generate_invoice_number,
    recalculate,
)
from invoice_studio.exceptions import EntryNotFoundError, InvalidMutationError
from invoice_studio.schemas import Discount, Fee, Invoice, Payment, Tax

from .conftest import make_item

NOW = "2026-03-06T12:00:00+00:00"


def test_add_item_recomputes_totals_without_touching_input(single_item_invoice):
    before = single_item_invoice.model_dump()

    updated = apply_mutation(single_item_invoice, AddItem(item=make_item(quantity=2, unit_price=25, id="")), now=NOW)

    assert single_item_invoice.model_dump() == before
    assert len(updated.items) == 2
    assert updated.items[1].id
    assert updated.totals.subtotal == 150.0
    assert updated.totals.grand_total == 165.0
    assert updated.updated_at == NOW


def test_update_item_accepts_alias_or_attribute_names(single_item_invoice):
    updated = apply_mutations(
        single_item_invoice,
        [
            UpdateItem(id="item-1", changes={"unitPrice": 40}),
            UpdateItem(id="item-1", changes={"quantity": 3, "discount": {"type": "fixed", "value": 20}}),
        ],
    )
    item = updated.items[0]
    assert item.unit_price == 40
    assert item.quantity == 3
    assert item.discount.type == "fixed"
    assert updated.totals.subtotal == 120.0
    assert updated.totals.item_discounts == 20.0
    assert updated.totals.grand_total == 110.0


def test_update_item_allows_blank_placeholder(single_item_invoice):
    updated = apply_mutation(single_item_invoice, UpdateItem(id="item-1", changes={"unitPrice": ""}))
    assert updated.items[0].unit_price == ""
    assert updated.totals.grand_total == 0.0


def test_update_rejects_unknown_and_protected_fields(single_item_invoice):
    with pytest.raises(InvalidMutationError):
        apply_mutation(single_item_invoice, UpdateItem(id="item-1", changes={"colour": "red"}))
    with pytest.raises(InvalidMutationError):
        apply_mutation(single_item_invoice, UpdateItem(id="item-1", changes={"id": "other"}))


def test_update_rejects_invalid_values(single_item_invoice):
    with pytest.raises(ValidationError):
        apply_mutation(single_item_invoice, UpdateItem(id="item-1", changes={"discount": {"type": "bogus", "value": 1}}))


def test_unknown_ids_raise(single_item_invoice):
    with pytest.raises(EntryNotFoundError) as excinfo:
        apply_mutation(single_item_invoice, RemoveItem(id="nope"))
    assert excinfo.value.collection == "items"
    assert excinfo.value.entry_id == "nope"


def test_remove_item(single_item_invoice):
    updated = apply_mutation(single_item_invoice, RemoveItem(id="item-1"))
    assert updated.items == []
    assert updated.totals.grand_total == 0.0


def test_discount_fee_and_tax_mutations(single_item_invoice):
    updated = apply_mutations(
        single_item_invoice,
        [
            AddDiscount(discount=Discount(id="d1", type="percent", value=10)),
            AddFee(fee=Fee(id="f1", type="fixed", value=5)),
            UpdateFee(id="f1", changes={"value": 10}),
            AddTax(tax=Tax(id="t2", rate=5, category="all", priority=2)),
            UpdateTax(id="tax-1", changes={"rate": 0}),
        ],
    )
    # 100 - 10% = 90, + 10 fee = 100 taxable, 5% tax
    assert updated.totals.invoice_discounts == 10.0
    assert updated.totals.fees == 10.0
    assert updated.totals.tax == 5.0
    assert updated.totals.grand_total == 105.0


def test_payments_never_increase_balance(single_item_invoice):
    invoice = single_item_invoice
    balance = recalculate(invoice).totals.balance_due
    for amount in [10, 0, 45.5, 200]:
        invoice = apply_mutation(invoice, AddPayment(payment=Payment(amount=amount)))
        assert invoice.totals.balance_due <= balance
        balance = invoice.totals.balance_due
    assert balance == 0.0

    paid_id = invoice.payments[-1].id
    invoice = apply_mutation(invoice, RemovePayment(id=paid_id))
    assert invoice.totals.balance_due == 54.5


def test_update_details(single_item_invoice):
    updated = apply_mutation(
        single_item_invoice,
        UpdateDetails(changes={"notes": "Thanks", "client": {"name": "Globex"}, "paymentLinks": {"stripeUrl": "https://s"}}),
    )
    assert updated.notes == "Thanks"
    assert updated.client.name == "Globex"
    assert updated.payment_links.stripe_url == "https://s"
    assert updated.totals.grand_total == 110.0


@pytest.mark.parametrize("field", ["items", "totals", "id", "createdAt"])
def test_update_details_cannot_touch_collections_or_identity(single_item_invoice, field):
    with pytest.raises(InvalidMutationError):
        apply_mutation(single_item_invoice, UpdateDetails(changes={field: []}))


def test_mutations_parse_from_tagged_json():
    adapter = TypeAdapter(Mutation)
    mutation = adapter.validate_python({"op": "update_item", "id": "x", "changes": {"quantity": 2}})
    assert isinstance(mutation, UpdateItem)
    with pytest.raises(ValidationError):
        adapter.validate_python({"op": "explode"})


def test_generate_invoice_number():
    assert generate_invoice_number(date(2026, 1, 2), epoch_ms=1767312000123) == "INV-2026-00123"


def test_create_empty_invoice():
    settings = Settings(default_currency="EUR", default_locale="de-DE", default_due_days=30, default_payment_terms="NET_30")
    invoice = create_empty_invoice(template_id="modern", settings=settings, today=date(2026, 1, 10))

    assert invoice.id
    assert invoice.template_id == "modern"
    assert invoice.invoice_number.startswith("INV-2026-")
    assert invoice.issue_date == "2026-01-10"
    assert invoice.due_date == "2026-02-09"
    assert invoice.payment_terms == "NET_30"
    assert invoice.currency == "EUR"
    assert invoice.locale == "de-DE"
    assert invoice.items == []
    assert not invoice.payment_links.has_any()
    assert invoice.totals.grand_total == 0.0
    assert invoice.created_at == invoice.updated_at


def test_create_empty_invoice_defaults_template():
    invoice = create_empty_invoice(settings=Settings(), today=date(2026, 1, 10))
    assert invoice.template_id == "clean-professional"
    assert invoice.due_date == "2026-01-24"


def test_duplicate_invoice(single_item_invoice):
    copy = duplicate_invoice(single_item_invoice)
    assert copy.id != single_item_invoice.id
    assert copy.invoice_number == "INV-2026-00001-COPY"
    assert copy.items == single_item_invoice.items
    assert copy.items is not single_item_invoice.items


def test_recalculate_fixes_stale_totals(single_item_invoice):
    stale = single_item_invoice.model_copy(update={"totals": single_item_invoice.totals.model_copy(update={"grand_total": 999.0})})
    assert recalculate(stale).totals.grand_total == 110.0
    assert isinstance(recalculate(Invoice()), Invoice)
