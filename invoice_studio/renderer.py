"""Logic-less template substitution and invoice HTML rendering.

The engine understands a Mustache-compatible subset:

    {{name}} {{a.b.c}} {{.}}       variables (dotted lookup, current item)
    {{#name}} ... {{/name}}       section: repeated per list entry, or once if truthy
    {{^name}} ... {{/name}}       inverted section: rendered only if falsy/empty
    {{{name}}} {{& name}}         unescaped variable
    {{! comment}}                 dropped
    {{=<% %>=}}                   change delimiters
    {{> partial}}                 partial lookup, empty if unknown

``render`` escapes variables as HTML unless told otherwise. Invoice templates
are trusted markup that carry rich-text work details and currency symbols, so
``render_template`` passes ``escape=raw`` explicitly.
"""
from __future__ import annotations

import html
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .exceptions import TemplateSyntaxError
from .preparer import prepare_template_data
from .schemas import BusinessProfile, Invoice, Template
from .utils import DEFAULT_DATE_FORMAT, format_number

logger = logging.getLogger(__name__)

DEFAULT_TAGS = ("{{", "}}")
TAG_TYPES = "#^/>{&=!"

Escape = Callable[[str], str]


def html_escape(text: str) -> str:
    return html.escape(text, quote=True)


def raw(text: str) -> str:
    return text


@dataclass
class Token:
    kind: str  # "text", "name", "&", "#", "^", "/", ">"
    value: str
    position: int


@dataclass
class Section:
    name: str
    inverted: bool
    position: int
    children: List["Node"] = field(default_factory=list)


Node = Union[Token, Section]


def _line_of(source: str, position: int) -> int:
    return source.count("\n", 0, position) + 1


def tokenize(source: str, tags: Tuple[str, str] = DEFAULT_TAGS) -> List[Token]:
    otag, ctag = tags
    tokens: List[Token] = []
    pos = 0
    length = len(source)

    while pos < length:
        start = source.find(otag, pos)
        if start == -1:
            tokens.append(Token("text", source[pos:], pos))
            break
        if start > pos:
            tokens.append(Token("text", source[pos:start], pos))

        pos = start + len(otag)
        kind = "name"
        if pos < length and source[pos] in TAG_TYPES:
            kind = source[pos]
            pos += 1

        if kind == "{":
            closing = "}" + ctag
        elif kind == "=":
            closing = "=" + ctag
        else:
            closing = ctag
        end = source.find(closing, pos)
        if end == -1:
            raise TemplateSyntaxError(f"Unclosed tag '{otag}'", _line_of(source, start))
        body = source[pos:end].strip()
        pos = end + len(closing)

        if kind == "!":
            continue
        if kind == "=":
            parts = body.split()
            if len(parts) != 2:
                raise TemplateSyntaxError(f"Invalid delimiters '{body}'", _line_of(source, start))
            otag, ctag = parts
            continue
        if not body:
            raise TemplateSyntaxError("Empty tag", _line_of(source, start))
        if kind == "{":
            kind = "&"
        tokens.append(Token(kind, body, start))

    return tokens


def parse_template(source: str, tags: Tuple[str, str] = DEFAULT_TAGS) -> List[Node]:
    """Parse ``source`` into a node tree, raising TemplateSyntaxError on bad markup."""
    root: List[Node] = []
    collector = root
    open_sections: List[Section] = []

    for token in tokenize(source, tags):
        if token.kind in ("#", "^"):
            section = Section(token.value, token.kind == "^", token.position)
            collector.append(section)
            open_sections.append(section)
            collector = section.children
        elif token.kind == "/":
            if not open_sections:
                raise TemplateSyntaxError(f"Unopened section '{token.value}'", _line_of(source, token.position))
            section = open_sections.pop()
            if section.name != token.value:
                raise TemplateSyntaxError(
                    f"Unclosed section '{section.name}' (closed by '{token.value}')",
                    _line_of(source, token.position),
                )
            collector = open_sections[-1].children if open_sections else root
        else:
            collector.append(token)

    if open_sections:
        section = open_sections[-1]
        raise TemplateSyntaxError(f"Unclosed section '{section.name}'", _line_of(source, section.position))
    return root


_MISSING = object()


def _resolve(view: Any, key: str) -> Any:
    if isinstance(view, Mapping):
        return view.get(key, _MISSING)
    if isinstance(view, Sequence) and not isinstance(view, str) and key.isdigit():
        index = int(key)
        return view[index] if index < len(view) else _MISSING
    if key.startswith("_") or view is None or isinstance(view, (str, int, float, bool)):
        return _MISSING
    return getattr(view, key, _MISSING)


class Context:
    """A stack of views; names resolve against the innermost view that has them."""

    def __init__(self, view: Any, parent: Optional["Context"] = None) -> None:
        self.view = view
        self.parent = parent

    def push(self, view: Any) -> "Context":
        return Context(view, self)

    def lookup(self, name: str) -> Any:
        if name == ".":
            return self.view
        head, *rest = name.split(".")
        context: Optional[Context] = self
        value = _MISSING
        while context is not None:
            value = _resolve(context.view, head)
            if value is not _MISSING:
                break
            context = context.parent
        for part in rest:
            if value is _MISSING:
                break
            value = _resolve(value, part)
        return None if value is _MISSING else value


def _is_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


class TemplateEngine:
    def __init__(self, escape: Escape = html_escape, partials: Optional[Dict[str, str]] = None) -> None:
        self.escape = escape
        self.partials = partials or {}

    def render(self, source: str, view: Any) -> str:
        return self.render_nodes(parse_template(source), Context(view))

    def render_nodes(self, nodes: List[Node], context: Context) -> str:
        return "".join(self._render_node(node, context) for node in nodes)

    def _render_node(self, node: Node, context: Context) -> str:
        if isinstance(node, Section):
            return self._render_section(node, context)
        if node.kind == "text":
            return node.value
        if node.kind == "name":
            return self.escape(stringify(context.lookup(node.value)))
        if node.kind == "&":
            return stringify(context.lookup(node.value))
        if node.kind == ">":
            partial = self.partials.get(node.value)
            return self.render_nodes(parse_template(partial), context) if partial else ""
        return ""

    def _render_section(self, section: Section, context: Context) -> str:
        value = context.lookup(section.name)
        if section.inverted:
            if not value:
                return self.render_nodes(section.children, context)
            return ""
        if not value:
            return ""
        if _is_list(value):
            return "".join(self.render_nodes(section.children, context.push(entry)) for entry in value)
        return self.render_nodes(section.children, context.push(value))


def render(source: str, view: Any, escape: Escape = html_escape, partials: Optional[Dict[str, str]] = None) -> str:
    return TemplateEngine(escape=escape, partials=partials).render(source, view)


def error_fragment(message: str) -> str:
    return f'<div class="error">Error rendering template: {html_escape(message)}</div>'


def render_template(template: Template, data: Dict[str, Any]) -> str:
    """Substitute ``data`` into ``template.html`` without HTML escaping.

    Failures never propagate: the caller gets an inline error fragment so the
    preview stays visible.
    """
    try:
        nodes = parse_template(template.html)
        return TemplateEngine(escape=raw).render_nodes(nodes, Context(data))
    except Exception as exc:
        logger.exception("Error rendering template %s (%d chars)", template.id or "<unnamed>", len(template.html))
        return error_fragment(str(exc))


DOCUMENT_SHELL = """\
<!DOCTYPE html>
<html lang="{{locale}}">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Invoice {{invoiceNumber}}</title>
  <style>
    * { box-sizing: border-box; margin: 0; padding: 0; }
    body {
      font-family: '{{{brand.fontFamilyBody}}}', -apple-system, BlinkMacSystemFont, 'Segoe UI', 'Roboto', sans-serif;
      font-size: 14px;
      line-height: 1.5;
      color: #1f2937;
      background: white;
      -webkit-print-color-adjust: exact;
    }
    .invoice {
      max-width: 8.5in;
      margin: 0 auto;
      padding: {{margins.top}}px {{margins.right}}px {{margins.bottom}}px {{margins.left}}px;
      background: white;
    }
    h1, h2, h3, h4, h5, h6 {
      font-family: '{{{brand.fontFamilyHeader}}}', -apple-system, BlinkMacSystemFont, 'Segoe UI', 'Roboto', sans-serif;
    }
    table { width: 100%; border-collapse: collapse; margin: 1rem 0; }
    th, td { padding: 8px 12px; text-align: left; border-bottom: 1px solid #e5e7eb; }
    th { background-color: #f9fafb; font-weight: 600; border-bottom: 2px solid #d1d5db; }
    .text-right { text-align: right; }
    .text-center { text-align: center; }
    .font-bold { font-weight: 700; }
    .font-semibold { font-weight: 600; }
    .text-lg { font-size: 1.125rem; }
    .text-xl { font-size: 1.25rem; }
    .text-2xl { font-size: 1.5rem; }
    .mb-2 { margin-bottom: 0.5rem; }
    .mb-4 { margin-bottom: 1rem; }
    .mb-6 { margin-bottom: 1.5rem; }
    .mb-8 { margin-bottom: 2rem; }
    .mt-4 { margin-top: 1rem; }
    .mt-8 { margin-top: 2rem; }
    .flex { display: flex; }
    .items-start { align-items: flex-start; }
    .items-center { align-items: center; }
    .justify-between { justify-content: space-between; }
    .gap-4 { gap: 1rem; }
    .grid { display: grid; }
    .grid-cols-2 { grid-template-columns: repeat(2, minmax(0, 1fr)); }
    .border-t { border-top: 1px solid #e5e7eb; }
    .border-b { border-bottom: 1px solid #e5e7eb; }
    .pt-4 { padding-top: 1rem; }
    .pb-4 { padding-bottom: 1rem; }
    @media print {
      .invoice { margin: 0; padding: 0.5in; box-shadow: none; border: none; }
      .page-break { page-break-before: always; }
      table, tr { page-break-inside: avoid; }
    }
{{{css}}}
  </style>
</head>
<body>
{{{content}}}
</body>
</html>
"""


def wrap_document(content: str, invoice: Invoice, template: Template) -> str:
    """Wrap rendered invoice markup in a standalone, print-ready HTML document."""
    return render(
        DOCUMENT_SHELL,
        {
            "locale": invoice.locale,
            "invoiceNumber": invoice.invoice_number,
            "brand": template.brand.to_json_dict(),
            "margins": template.layout.margins.to_json_dict(),
            "css": template.css,
            "content": content,
        },
    )


def generate_invoice_html(
    invoice: Invoice,
    template: Template,
    business_profile: BusinessProfile,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> str:
    """Full HTML document for an invoice, ready for an HTML-to-PDF printer."""
    data = prepare_template_data(invoice, template, business_profile, date_format=date_format)
    return wrap_document(render_template(template, data), invoice, template)
