"""
AI suggestion state for field renderers.

A field with an enabled ``aiSuggestionKey`` shows one of:

- waiting: the enrichment step has not produced anything yet
  (context absent or empty)
- unavailable: enrichment ran but has no value for the key
- available: a suggestion exists and differs from the current value
- applied: the current value already equals the suggestion

"Applied" is decided per field type by comparing every declared sub-field
of the composite. Currency amounts compare as strings, so ``"10"`` and
``"10.0"`` are different amounts.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable

from smart_flow.codec import EmptyRaw, classify_raw, decode_composite
from smart_flow.lookup import MISSING, get_nested_value
from smart_flow.models.composite_values import (
    ADDRESS_KEYS,
    PARTY_KEYS,
    PHONE_KEYS,
    is_composite,
)
from smart_flow.models.field_definitions import FieldConfig, FieldType
from smart_flow.models.suggestion import SuggestionState, SuggestionStatus
from smart_flow.resolver import to_display_string

logger = logging.getLogger(__name__)


def _same_parts(current: Mapping[str, Any], suggested: Mapping[str, Any], keys: tuple[str, ...]) -> bool:
    return all(current.get(key, MISSING) == suggested.get(key, MISSING) for key in keys)


def _amount_string(value: Any) -> str:
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    return to_display_string(value)


def address_matches(current: Mapping[str, Any], suggested: Mapping[str, Any]) -> bool:
    return _same_parts(current, suggested, ADDRESS_KEYS)


def party_matches(current: Mapping[str, Any], suggested: Mapping[str, Any]) -> bool:
    return _same_parts(current, suggested, PARTY_KEYS)


def phone_matches(current: Mapping[str, Any], suggested: Mapping[str, Any]) -> bool:
    return _same_parts(current, suggested, PHONE_KEYS)


def currency_matches(current: Mapping[str, Any], suggested: Mapping[str, Any]) -> bool:
    amount_match = (
        _amount_string(current.get("amount", MISSING))
        == _amount_string(suggested.get("amount", MISSING))
    )
    return amount_match and current.get("currency", MISSING) == suggested.get("currency", MISSING)


def scalar_matches(current: Any, suggested: Any) -> bool:
    current_str = "" if current is None else to_display_string(current)
    return to_display_string(suggested) == current_str


_COMPOSITE_MATCHERS: dict[FieldType, Callable[[Mapping[str, Any], Mapping[str, Any]], bool]] = {
    FieldType.ADDRESS: address_matches,
    FieldType.PARTY: party_matches,
    FieldType.PHONE: phone_matches,
    FieldType.CURRENCY: currency_matches,
}


def _inline_apply_allowed(field_type: FieldType, current: Any) -> bool:
    if field_type is FieldType.CURRENCY:
        return not current.get("amount")
    if field_type is FieldType.PARTY:
        return not current.get("name") and not current.get("street") and not current.get("city")
    if field_type in (FieldType.ADDRESS, FieldType.PHONE):
        return True
    return current is None or to_display_string(current) == ""


def get_suggestion_state(
    field: FieldConfig,
    current_value: Any,
    enrichment_context: Mapping[str, Any] | None = None,
    locale: str | None = None,
) -> SuggestionState:
    """
    Work out the suggestion status of ``field`` given its current value.

    Args:
        field: Field configuration.
        current_value: Stored value of the field (JSON text or mapping for
            composite fields).
        enrichment_context: Output of the enrichment step, ``None`` or empty
            when it has not run.
        locale: Locale for the currency default.

    Returns:
        SuggestionState with the status, the decoded suggested value and
        whether a one-click apply should be offered.
    """
    key = field.suggestion_key
    if not key:
        return SuggestionState(status=SuggestionStatus.DISABLED)

    if not enrichment_context:
        return SuggestionState(status=SuggestionStatus.WAITING)

    suggested = get_nested_value(enrichment_context, key)
    if suggested is None:
        logger.debug("No suggestion for field %s at key %s", field.name, key)
        return SuggestionState(status=SuggestionStatus.UNAVAILABLE)

    if is_composite(field.type):
        current = decode_composite(field.type, current_value, locale)
        suggested = decode_composite(field.type, suggested, locale)
        applied = _COMPOSITE_MATCHERS[field.type](current, suggested)
    else:
        current = current_value
        applied = scalar_matches(current_value, suggested)

    if applied:
        return SuggestionState(status=SuggestionStatus.APPLIED, suggested_value=suggested)

    return SuggestionState(
        status=SuggestionStatus.AVAILABLE,
        suggested_value=suggested,
        can_apply_inline=_inline_apply_allowed(field.type, current),
    )


def is_suggestion_applied(
    field: FieldConfig,
    current_value: Any,
    enrichment_context: Mapping[str, Any] | None = None,
) -> bool:
    """Whether the current value already equals the field's suggestion."""
    state = get_suggestion_state(field, current_value, enrichment_context)
    return state.status is SuggestionStatus.APPLIED


def apply_suggestion(
    field: FieldConfig,
    enrichment_context: Mapping[str, Any] | None = None,
    locale: str | None = None,
) -> Any | None:
    """
    The value to store when the user accepts the suggestion.

    Returns ``None`` when there is nothing to apply (no key, no context, or
    an empty suggestion).
    """
    key = field.suggestion_key
    if not key or not enrichment_context:
        return None

    suggested = get_nested_value(enrichment_context, key)
    if suggested is None:
        return None

    if is_composite(field.type):
        if isinstance(classify_raw(suggested), EmptyRaw):
            return None
        return decode_composite(field.type, suggested, locale)
    return suggested
