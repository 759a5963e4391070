"""Rounding, numeric coercion, and locale-aware formatting helpers."""
from __future__ import annotations

import math
from datetime import date
from decimal import Decimal
from typing import Optional

from babel import Locale, UnknownLocaleError
from babel.dates import format_date as babel_format_date
from babel.dates import format_skeleton
from babel.numbers import format_currency as babel_format_currency
from babel.numbers import is_currency
from dateutil import parser

DEFAULT_CURRENCY = "USD"
DEFAULT_LOCALE = "en-US"
DEFAULT_DATE_FORMAT = "numeric"

# Named date formats that map to a CLDR skeleton rather than a fixed pattern.
DATE_SKELETONS = {"numeric": "yMd"}


def to_number(value: object) -> float:
    """Coerce an editor value to a finite float; anything unusable becomes 0."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        if not value.strip():
            return 0.0
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def round_to_currency(amount: object, decimals: int = 2) -> float:
    """Scale by ``10**decimals``, round halves toward +inf, rescale.

    Binary floats are scaled as-is, so 1.005 becomes 1.00 and -0.005 becomes 0.
    The result is re-parsed from its fixed-point text so no drift survives
    into later stages.
    """
    number = to_number(amount)
    factor = 10 ** decimals
    scaled = number * factor + 0.5
    if not math.isfinite(scaled):
        return number
    rounded = float(f"{math.floor(scaled) / factor:.{decimals}f}")
    # Normalise -0.0 so serialized totals never show a signed zero.
    return rounded + 0.0


def format_number(value: object) -> str:
    """Render a number the way the editor displays it: ``100``, ``2.5``."""
    number = to_number(value)
    if number.is_integer():
        return str(int(number))
    return repr(number)


def parse_locale(locale: Optional[str]) -> Locale:
    """Parse ``en-US`` or ``en_US`` into a babel Locale; raises on unknown tags."""
    tag = (locale or DEFAULT_LOCALE).replace("-", "_")
    return Locale.parse(tag)


def format_currency(amount: object, currency: Optional[str] = DEFAULT_CURRENCY, locale: Optional[str] = DEFAULT_LOCALE) -> str:
    """Format an amount with the locale's currency pattern and exactly two decimals.

    Falls back to ``"<CODE> <amount>"`` whenever babel does not know the
    currency code or cannot handle the locale.
    """
    number = to_number(amount)
    code = (currency or DEFAULT_CURRENCY).strip().upper()
    if not is_currency(code):
        return f"{code} {number:.2f}"
    try:
        return babel_format_currency(number, code, locale=parse_locale(locale), currency_digits=False)
    except (UnknownLocaleError, ValueError, TypeError, KeyError, AttributeError):
        return f"{code} {number:.2f}"


def format_percentage(value: object, decimals: int = 1) -> str:
    return f"{to_number(value):.{decimals}f}%"


def parse_date(value: str) -> Optional[date]:
    """Parse a date string into a date object; returns None on failure."""
    if not value:
        return None
    try:
        return parser.parse(value, dayfirst=False, yearfirst=True).date()
    except (ValueError, TypeError, OverflowError):
        return None


def format_date(value: str, locale: Optional[str] = DEFAULT_LOCALE, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Locale-aware display date. Unparseable input is returned unchanged.

    ``date_format`` is ``numeric`` (``3/5/2026`` in en-US), a babel style
    such as ``medium``, or an LDML pattern such as ``d MMM yyyy``.
    """
    parsed = parse_date(value)
    if parsed is None:
        return value or ""
    try:
        if date_format in DATE_SKELETONS:
            return format_skeleton(DATE_SKELETONS[date_format], parsed, locale=parse_locale(locale))
        return babel_format_date(parsed, format=date_format, locale=parse_locale(locale))
    except (UnknownLocaleError, ValueError, TypeError, KeyError, AttributeError):
        return parsed.isoformat()
