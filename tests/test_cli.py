import json

from typer.testing import CliRunner

from invoice_studio.cli import app
from invoice_studio.schemas import Invoice

runner = CliRunner()


def _write_invoice(tmp_path, invoice):
    path = tmp_path / "invoice.json"
    path.write_text(invoice.model_dump_json(by_alias=True), encoding="utf-8")
    return path


def test_new_writes_empty_invoice(tmp_path):
    output = tmp_path / "out" / "new.json"
    result = runner.invoke(app, ["new", "--output", str(output), "--template-id", "modern"])
    assert result.exit_code == 0, result.output
    invoice = Invoice.model_validate_json(output.read_text(encoding="utf-8"))
    assert invoice.template_id == "modern"
    assert invoice.items == []


def test_totals_json(tmp_path, single_item_invoice):
    path = _write_invoice(tmp_path, single_item_invoice)
    result = runner.invoke(app, ["totals", "--invoice", str(path), "--json"])
    assert result.exit_code == 0, result.output
    body = json.loads(result.output)
    assert body["grandTotal"] == 110.0
    assert body["taxableAmount"] == 100.0


def test_totals_write_stores_recalculated_totals(tmp_path, single_item_invoice):
    path = _write_invoice(tmp_path, single_item_invoice)
    result = runner.invoke(app, ["totals", "--invoice", str(path), "--write"])
    assert result.exit_code == 0, result.output
    assert "Grand total" in result.output
    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored["totals"]["grandTotal"] == 110.0


def test_totals_rejects_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    result = runner.invoke(app, ["totals", "--invoice", str(path)])
    assert result.exit_code == 1


def test_render_document(tmp_path, single_item_invoice):
    path = _write_invoice(tmp_path, single_item_invoice)
    output = tmp_path / "invoice.html"
    result = runner.invoke(app, ["render", "--invoice", str(path), "--output", str(output)])
    assert result.exit_code == 0, result.output
    html = output.read_text(encoding="utf-8")
    assert html.startswith("<!DOCTYPE html>")
    assert "$110.00" in html


def test_render_fragment_with_template(tmp_path, single_item_invoice, template):
    path = _write_invoice(tmp_path, single_item_invoice)
    template_path = tmp_path / "template.json"
    template_path.write_text(template.model_dump_json(by_alias=True), encoding="utf-8")
    output = tmp_path / "fragment.html"
    result = runner.invoke(
        app,
        ["render", "--invoice", str(path), "--template", str(template_path), "--output", str(output), "--fragment"],
    )
    assert result.exit_code == 0, result.output
    assert output.read_text(encoding="utf-8") == "<p>INV-2026-00001 $110.00</p>"


def test_render_uses_builtin_template_named_by_invoice(tmp_path, single_item_invoice):
    single_item_invoice.template_id = "modern-stripe"
    path = _write_invoice(tmp_path, single_item_invoice)
    output = tmp_path / "invoice.html"
    result = runner.invoke(app, ["render", "--invoice", str(path), "--output", str(output)])
    assert result.exit_code == 0, result.output
    html = output.read_text(encoding="utf-8")
    assert 'class="stripe"' in html
    assert "padding: 32px 48px 64px 48px" in html
