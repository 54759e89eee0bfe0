"""
Composite field value shapes.

Composite fields (address, party, phone, currency) store a structured
record instead of a scalar. The record is kept as plain JSON-shaped data
with the camelCase keys renderers write, so every key is optional: a
stored value may carry any subset of them.
"""

from types import MappingProxyType
from typing import Any, Mapping, TypedDict

from smart_flow.models.field_definitions import FieldType, coerce_field_type


class AddressValue(TypedDict, total=False):
    street: str
    city: str
    state: str
    postalCode: str
    country: str


class PartyValue(AddressValue, total=False):
    name: str
    placeId: str


class PhoneValue(TypedDict, total=False):
    countryCode: str
    number: str


class CurrencyValue(TypedDict, total=False):
    amount: float | int | str
    currency: str


ADDRESS_KEYS: tuple[str, ...] = ("street", "city", "state", "postalCode", "country")
PARTY_KEYS: tuple[str, ...] = ("name",) + ADDRESS_KEYS
PHONE_KEYS: tuple[str, ...] = ("countryCode", "number")
CURRENCY_KEYS: tuple[str, ...] = ("amount", "currency")

# Canonical defaults, one per composite type. Read-only; use
# codec.composite_default() for a mutable copy.
DEFAULT_ADDRESS: Mapping[str, Any] = MappingProxyType({
    "street": "",
    "city": "",
    "state": "",
    "postalCode": "",
    "country": "CH",
})

DEFAULT_PARTY: Mapping[str, Any] = MappingProxyType({
    "name": "",
    "street": "",
    "city": "",
    "state": "",
    "postalCode": "",
    "country": "",
})

DEFAULT_PHONE: Mapping[str, Any] = MappingProxyType({
    "countryCode": "+41",
    "number": "",
})

DEFAULT_CURRENCY: Mapping[str, Any] = MappingProxyType({
    "amount": "",
    "currency": "CHF",
})

COMPOSITE_DEFAULTS: Mapping[FieldType, Mapping[str, Any]] = MappingProxyType({
    FieldType.ADDRESS: DEFAULT_ADDRESS,
    FieldType.PARTY: DEFAULT_PARTY,
    FieldType.PHONE: DEFAULT_PHONE,
    FieldType.CURRENCY: DEFAULT_CURRENCY,
})

COMPOSITE_FIELD_TYPES: frozenset[FieldType] = frozenset(COMPOSITE_DEFAULTS)


def is_composite(field_type: FieldType | str) -> bool:
    """Whether values of this field type are structured records."""
    return coerce_field_type(field_type) in COMPOSITE_FIELD_TYPES
