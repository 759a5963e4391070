"""Invoice Studio: invoice totals engine and template rendering."""
from .calculator import calculate_invoice_totals, calculate_item_discount, calculate_item_total
from .preparer import prepare_template_data
from .renderer import generate_invoice_html, render_template

__all__ = [
    "calculate_invoice_totals",
    "calculate_item_discount",
    "calculate_item_total",
    "generate_invoice_html",
    "prepare_template_data",
    "render_template",
]
