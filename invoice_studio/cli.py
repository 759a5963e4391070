"""Command-line entrypoints for creating, totalling, and rendering invoices."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Optional, Type, TypeVar

import typer
from pydantic import ValidationError
from rich import print
from rich.table import Table

from .calculator import calculate_totals_breakdown
from .config import Settings, configure_logging
from .defaults import DEFAULT_BUSINESS_PROFILE, get_template
from .editor import create_empty_invoice, recalculate
from .preparer import prepare_template_data
from .renderer import generate_invoice_html, render_template
from .schemas import BusinessProfile, Invoice, Record, Template, TotalsBreakdown
from .utils import format_currency

R = TypeVar("R", bound=Record)

app = typer.Typer(add_completion=False, help="Invoice Studio CLI")

BREAKDOWN_ROWS = [
    ("Subtotal", "subtotal"),
    ("Item discounts", "item_discounts"),
    ("After item discounts", "subtotal_after_item_discounts"),
    ("Invoice discounts", "invoice_discounts"),
    ("After invoice discounts", "subtotal_after_invoice_discounts"),
    ("Fees", "fees"),
    ("Taxable amount", "taxable_amount"),
    ("Tax", "tax"),
    ("Grand total", "grand_total"),
    ("Paid", "paid"),
    ("Balance due", "balance_due"),
]


@app.callback()
def setup() -> None:
    configure_logging(Settings.load().log_level)


def _load(model: Type[R], json_path: Path) -> R:
    try:
        return model.model_validate(json.loads(json_path.read_text(encoding="utf-8")))
    except (OSError, ValueError, ValidationError) as exc:
        print(f"[red]Could not read {model.__name__.lower()} from {json_path}:[/red] {exc}")
        raise typer.Exit(code=1)


def _write_json(record: Record, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(record.model_dump_json(by_alias=True, indent=2), encoding="utf-8")


def _print_breakdown(invoice: Invoice, breakdown: TotalsBreakdown) -> None:
    table = Table(title=f"Invoice {invoice.display_id}")
    table.add_column("Stage")
    table.add_column("Amount", justify="right")
    for label, name in BREAKDOWN_ROWS:
        table.add_row(label, format_currency(getattr(breakdown, name), invoice.currency, invoice.locale))
    print(table)


@app.command()
def new(
    output: Path = typer.Option(..., help="Path to write the new invoice JSON"),
    template_id: Optional[str] = typer.Option(None, help="Template id to attach"),
) -> None:
    """Write an empty invoice with today's dates and the configured defaults."""
    invoice = create_empty_invoice(template_id=template_id, settings=Settings.load())
    _write_json(invoice, output)
    print(f"Created invoice {invoice.invoice_number} -> {output}")


@app.command()
def totals(
    invoice_path: Path = typer.Option(..., "--invoice", exists=True, dir_okay=False, help="Invoice JSON file"),
    write: bool = typer.Option(False, help="Store the recalculated totals back into the file"),
    as_json: bool = typer.Option(False, "--json", help="Print the breakdown as JSON"),
) -> None:
    """Recalculate an invoice and show every stage of the totals pipeline."""
    invoice = _load(Invoice, invoice_path)
    breakdown = calculate_totals_breakdown(invoice)
    if as_json:
        typer.echo(breakdown.model_dump_json(by_alias=True, indent=2))
    else:
        _print_breakdown(invoice, breakdown)
    if write:
        _write_json(recalculate(invoice), invoice_path)
        print(f"Totals written to {invoice_path}")


@app.command()
def render(
    invoice_path: Path = typer.Option(..., "--invoice", exists=True, dir_okay=False, help="Invoice JSON file"),
    output: Path = typer.Option(..., help="Path to write the rendered HTML"),
    template_path: Optional[Path] = typer.Option(
        None, "--template", exists=True, dir_okay=False, help="Template JSON file; defaults to the built-in matching the invoice templateId"
    ),
    business_path: Optional[Path] = typer.Option(None, "--business", exists=True, dir_okay=False, help="Business profile JSON file"),
    fragment: bool = typer.Option(False, help="Write only the rendered template, without the document shell"),
) -> None:
    """Render an invoice to HTML for preview or for an HTML-to-PDF printer."""
    settings = Settings.load()
    invoice = recalculate(_load(Invoice, invoice_path))
    template = _load(Template, template_path) if template_path else get_template(invoice.template_id)
    business = _load(BusinessProfile, business_path) if business_path else DEFAULT_BUSINESS_PROFILE

    if fragment:
        data = prepare_template_data(invoice, template, business, date_format=settings.date_format)
        html = render_template(template, data)
    else:
        html = generate_invoice_html(invoice, template, business, date_format=settings.date_format)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    print(f"Rendered {invoice.display_id} -> {output}")


def main():
    app()


if __name__ == "__main__":
    main()
