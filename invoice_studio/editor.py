"""Explicit invoice edits.

Every change to an invoice goes through one of the mutation models below and
``apply_mutation``, which returns a new invoice with totals recomputed. The
input invoice is never modified.
"""
from __future__ import annotations

import time
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import Annotated, Any, Dict, Iterable, List, Literal, Optional, Type, TypeVar, Union

from pydantic import BaseModel, Field

from .calculator import calculate_invoice_totals
from .config import Settings
from .defaults import DEFAULT_TEMPLATE_ID
from .exceptions import EntryNotFoundError, InvalidMutationError
from .schemas import Discount, Fee, Invoice, InvoiceItem, Payment, Record, Tax

R = TypeVar("R", bound=Record)

COLLECTIONS = ("items", "discounts", "fees", "taxes", "payments")
PROTECTED_FIELDS = {"id", "totals", "created_at", "updated_at", *COLLECTIONS}


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


def _field_key(model: Type[Record], name: str) -> Optional[str]:
    """Attribute name for ``name`` given either the attribute or its camelCase alias."""
    if name in model.model_fields:
        return name
    for key, info in model.model_fields.items():
        if info.alias == name:
            return key
    return None


def merge_fields(record: R, fields: Dict[str, Any], protected: Iterable[str] = ("id",)) -> R:
    """Validated copy of ``record`` with ``fields`` applied."""
    model = type(record)
    blocked = set(protected)
    data = record.model_dump(by_alias=True)
    for name, value in fields.items():
        key = _field_key(model, name)
        if key is None:
            raise InvalidMutationError(f"{model.__name__} has no field '{name}'")
        if key in blocked:
            raise InvalidMutationError(f"Field '{name}' cannot be changed on {model.__name__}")
        data[model.model_fields[key].alias or key] = value
    return model.model_validate(data)


class AddItem(BaseModel):
    op: Literal["add_item"] = "add_item"
    item: InvoiceItem = Field(default_factory=InvoiceItem)


class UpdateItem(BaseModel):
    op: Literal["update_item"] = "update_item"
    id: str
    changes: Dict[str, Any]


class RemoveItem(BaseModel):
    op: Literal["remove_item"] = "remove_item"
    id: str


class AddDiscount(BaseModel):
    op: Literal["add_discount"] = "add_discount"
    discount: Discount = Field(default_factory=Discount)


class UpdateDiscount(BaseModel):
    op: Literal["update_discount"] = "update_discount"
    id: str
    changes: Dict[str, Any]


class RemoveDiscount(BaseModel):
    op: Literal["remove_discount"] = "remove_discount"
    id: str


class AddFee(BaseModel):
    op: Literal["add_fee"] = "add_fee"
    fee: Fee = Field(default_factory=Fee)


class UpdateFee(BaseModel):
    op: Literal["update_fee"] = "update_fee"
    id: str
    changes: Dict[str, Any]


class RemoveFee(BaseModel):
    op: Literal["remove_fee"] = "remove_fee"
    id: str


class AddTax(BaseModel):
    op: Literal["add_tax"] = "add_tax"
    tax: Tax = Field(default_factory=Tax)


class UpdateTax(BaseModel):
    op: Literal["update_tax"] = "update_tax"
    id: str
    changes: Dict[str, Any]


class RemoveTax(BaseModel):
    op: Literal["remove_tax"] = "remove_tax"
    id: str


class AddPayment(BaseModel):
    op: Literal["add_payment"] = "add_payment"
    payment: Payment = Field(default_factory=Payment)


class UpdatePayment(BaseModel):
    op: Literal["update_payment"] = "update_payment"
    id: str
    changes: Dict[str, Any]


class RemovePayment(BaseModel):
    op: Literal["remove_payment"] = "remove_payment"
    id: str


class UpdateDetails(BaseModel):
    """Header-level fields: client, dates, terms, notes, payment links and so on."""

    op: Literal["update_details"] = "update_details"
    changes: Dict[str, Any]


Mutation = Annotated[
    Union[
        AddItem,
        UpdateItem,
        RemoveItem,
        AddDiscount,
        UpdateDiscount,
        RemoveDiscount,
        AddFee,
        UpdateFee,
        RemoveFee,
        AddTax,
        UpdateTax,
        RemoveTax,
        AddPayment,
        UpdatePayment,
        RemovePayment,
        UpdateDetails,
    ],
    Field(discriminator="op"),
]

# op prefix -> (collection attribute, payload attribute on the Add* model)
_TARGETS = {
    "item": ("items", "item"),
    "discount": ("discounts", "discount"),
    "fee": ("fees", "fee"),
    "tax": ("taxes", "tax"),
    "payment": ("payments", "payment"),
}


def _index_of(entries: List[Record], collection: str, entry_id: str) -> int:
    for index, entry in enumerate(entries):
        if getattr(entry, "id", None) == entry_id:
            return index
    raise EntryNotFoundError(collection, entry_id)


def _apply_to_collection(invoice: Invoice, mutation: BaseModel) -> None:
    action, _, target = mutation.op.partition("_")
    collection, payload = _TARGETS[target]
    entries = list(getattr(invoice, collection))

    if action == "add":
        entry = getattr(mutation, payload).model_copy(deep=True)
        if not entry.id:
            entry.id = _new_id()
        entries.append(entry)
    elif action == "update":
        index = _index_of(entries, collection, mutation.id)
        entries[index] = merge_fields(entries[index], mutation.changes)
    else:
        index = _index_of(entries, collection, mutation.id)
        del entries[index]

    setattr(invoice, collection, entries)


def recalculate(invoice: Invoice) -> Invoice:
    """Copy of ``invoice`` whose totals match its current contents."""
    updated = invoice.model_copy(deep=True)
    updated.totals = calculate_invoice_totals(updated)
    return updated


def apply_mutation(invoice: Invoice, mutation: Mutation, now: Optional[str] = None) -> Invoice:
    if isinstance(mutation, UpdateDetails):
        updated = merge_fields(invoice, mutation.changes, protected=PROTECTED_FIELDS)
    else:
        updated = invoice.model_copy(deep=True)
        _apply_to_collection(updated, mutation)
    updated.updated_at = now or _utc_now()
    updated.totals = calculate_invoice_totals(updated)
    return updated


def apply_mutations(invoice: Invoice, mutations: Iterable[Mutation], now: Optional[str] = None) -> Invoice:
    for mutation in mutations:
        invoice = apply_mutation(invoice, mutation, now=now)
    return invoice


def generate_invoice_number(today: date, epoch_ms: Optional[int] = None) -> str:
    """``INV-<year>-<last five digits of the epoch milliseconds>``."""
    if epoch_ms is None:
        epoch_ms = int(time.time() * 1000)
    return f"INV-{today.year}-{str(epoch_ms)[-5:]}"


def create_empty_invoice(
    template_id: Optional[str] = None,
    settings: Optional[Settings] = None,
    today: Optional[date] = None,
) -> Invoice:
    settings = settings or Settings.load()
    today = today or date.today()
    timestamp = _utc_now()
    due_days = settings.default_due_days
    return Invoice(
        id=_new_id(),
        template_id=template_id or DEFAULT_TEMPLATE_ID,
        invoice_number=generate_invoice_number(today),
        issue_date=today.isoformat(),
        due_date=(today + timedelta(days=due_days)).isoformat(),
        payment_terms=settings.default_payment_terms,
        currency=settings.default_currency,
        locale=settings.default_locale,
        terms=f"Payment due within {due_days} days.",
        created_at=timestamp,
        updated_at=timestamp,
    )


def duplicate_invoice(invoice: Invoice) -> Invoice:
    timestamp = _utc_now()
    copy = invoice.model_copy(deep=True)
    copy.id = _new_id()
    copy.invoice_number = f"{invoice.invoice_number}-COPY"
    copy.created_at = timestamp
    copy.updated_at = timestamp
    return copy
