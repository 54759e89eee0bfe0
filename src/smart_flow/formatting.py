"""
Display formatting for field values.

Used by review screens and generated documents to render composite
values as single strings.
"""

import logging
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Mapping

from smart_flow.models.composite_values import ADDRESS_KEYS
from smart_flow.models.field_definitions import FieldType, coerce_field_type

logger = logging.getLogger(__name__)

FALLBACK_CURRENCY = "CHF"

COUNTRY_TO_CURRENCY: dict[str, str] = {
    "US": "USD",
    "GB": "GBP",
    "CH": "CHF",
    "DE": "EUR",
    "FR": "EUR",
    "IT": "EUR",
    "ES": "EUR",
    "NL": "EUR",
    "BE": "EUR",
    "AT": "EUR",
    "PT": "EUR",
    "IE": "EUR",
    "FI": "EUR",
    "GR": "EUR",
    "LU": "EUR",
    "JP": "JPY",
    "CN": "CNY",
    "IN": "INR",
    "AU": "AUD",
    "CA": "CAD",
    "SG": "SGD",
    "HK": "HKD",
    "SE": "SEK",
    "NO": "NOK",
    "DK": "DKK",
    "PL": "PLN",
    "CZ": "CZK",
    "AE": "AED",
    "SA": "SAR",
    "BR": "BRL",
    "MX": "MXN",
}

_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def get_default_currency(locale: str | None = None) -> str:
    """
    Currency code for the region of ``locale``.

    ``"de-CH"`` and ``"en_US"`` style tags are both understood; anything
    without a known region gives CHF.
    """
    if not locale:
        from smart_flow.config import get_config

        locale = get_config().default_locale

    for separator in ("-", "_"):
        parts = locale.split(separator)
        if len(parts) > 1:
            currency = COUNTRY_TO_CURRENCY.get(parts[-1].upper())
            if currency:
                return currency

    return FALLBACK_CURRENCY


def _parse_amount(amount: Any) -> Decimal | None:
    # Leading-number parse, like a browser's parseFloat
    if isinstance(amount, bool):
        return None
    if isinstance(amount, (int, float)):
        text = repr(amount)
    else:
        match = _NUMBER_PREFIX.match(str(amount))
        if not match:
            return None
        text = match.group(0).strip()
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def format_phone_number(country_code: str | None = None, number: str | None = None) -> str:
    """``"+41 791234567"`` style display of a phone value."""
    if not number:
        return ""
    clean_number = re.sub(r"\D", "", number)
    if country_code:
        return f"{country_code} {clean_number}"
    return clean_number


def format_currency_amount(amount: Any = None, currency: str | None = None) -> str:
    """Amount with two decimals and thousands separators, prefixed by currency."""
    if amount is None or amount == "":
        return ""

    value = _parse_amount(amount)
    if value is None:
        return ""

    formatted = f"{value.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):,.2f}"
    return f"{currency} {formatted}" if currency else formatted


def format_address_single_line(address: Mapping[str, Any]) -> str:
    """Non-empty address parts joined with commas."""
    parts = [address.get(key) for key in ADDRESS_KEYS]
    return ", ".join(str(part) for part in parts if part)


def format_composite_value(field_type: FieldType | str, raw: Any) -> str:
    """Single-line display of a stored composite value."""
    from smart_flow.codec import decode_composite

    resolved = coerce_field_type(field_type)
    value = decode_composite(resolved, raw)

    if resolved is FieldType.PHONE:
        return format_phone_number(value.get("countryCode"), value.get("number"))
    if resolved is FieldType.CURRENCY:
        return format_currency_amount(value.get("amount"), value.get("currency"))
    if resolved is FieldType.PARTY:
        address = format_address_single_line(value)
        name = value.get("name") or ""
        return ", ".join(part for part in (name, address) if part)
    return format_address_single_line(value)


def parse_float(value: Any) -> float | None:
    """Leading number of ``value`` as a float, None if there is none."""
    parsed = _parse_amount(value)
    return float(parsed) if parsed is not None else None
