"""
Composite value codec.

Composite fields may hold their value as a JSON string (how it was
persisted) or as a native mapping (how a renderer wrote it). The raw value
is classified once, at the boundary, into a small tagged union and then
decoded. Decoding never raises: anything unusable becomes the default of
the field type.

No structural validation happens here. A stored mapping is returned as-is,
and keys missing from it stay missing; they are not backfilled from the
default.
"""

import copy
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from smart_flow.formatting import get_default_currency
from smart_flow.models.composite_values import COMPOSITE_DEFAULTS
from smart_flow.models.field_definitions import FieldType, coerce_field_type

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class EmptyRaw:
    """Nothing stored yet."""


@dataclass(frozen=True)
class JsonStringRaw:
    """Value persisted as JSON text."""

    text: str


@dataclass(frozen=True)
class StructuredRaw:
    """Value already held as a mapping."""

    value: Mapping[str, Any]


@dataclass(frozen=True)
class UnsupportedRaw:
    """Anything else (numbers, booleans, lists); decodes to the default."""

    value: Any


RawValue = EmptyRaw | JsonStringRaw | StructuredRaw | UnsupportedRaw


def _is_empty(raw: Any) -> bool:
    # Falsy the way a browser sees it: an empty mapping still counts as a value
    if raw is None or raw is False or raw == "":
        return True
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return raw == 0 or raw != raw
    return False


def classify_raw(raw: Any) -> RawValue:
    """Classify a stored composite value."""
    if _is_empty(raw):
        return EmptyRaw()
    if isinstance(raw, str):
        return JsonStringRaw(raw)
    if isinstance(raw, Mapping):
        return StructuredRaw(raw)
    return UnsupportedRaw(raw)


def parse_composite_value(raw: Any, default_value: T) -> T:
    """
    Decode a stored composite value.

    Args:
        raw: The stored value: ``None``/empty, JSON text or a mapping.
        default_value: Returned whenever ``raw`` is empty or unusable.

    Returns:
        The mapping stored in ``raw`` (parsed if it was JSON text), or
        ``default_value``. A partial mapping is returned as it is.
    """
    classified = classify_raw(raw)

    if isinstance(classified, StructuredRaw):
        return classified.value  # type: ignore[return-value]

    if isinstance(classified, JsonStringRaw):
        try:
            parsed = json.loads(classified.text)
        except (ValueError, RecursionError):
            logger.debug("Composite value is not valid JSON: %.80r", classified.text)
            return default_value
        if isinstance(parsed, dict):
            return parsed  # type: ignore[return-value]
        logger.debug("Composite value JSON is not an object: %.80r", classified.text)

    return default_value


def composite_default(field_type: FieldType | str, locale: str | None = None) -> dict[str, Any]:
    """
    A fresh copy of the canonical default for a composite field type.

    The currency default takes its currency code from ``locale``.

    Raises:
        ValueError: If ``field_type`` is not a composite type.
    """
    resolved = coerce_field_type(field_type)
    if resolved not in COMPOSITE_DEFAULTS:
        raise ValueError(f"Not a composite field type: {field_type!r}")

    default = copy.deepcopy(dict(COMPOSITE_DEFAULTS[resolved]))
    if resolved is FieldType.CURRENCY and locale is not None:
        default["currency"] = get_default_currency(locale)
    return default


def decode_composite(
    field_type: FieldType | str,
    raw: Any,
    locale: str | None = None,
) -> dict[str, Any]:
    """Decode ``raw`` using the default that belongs to ``field_type``."""
    return parse_composite_value(raw, composite_default(field_type, locale))


def encode_composite_value(value: Mapping[str, Any]) -> str:
    """Serialize a composite value for storage."""
    return json.dumps(dict(value), ensure_ascii=False, separators=(",", ":"))
