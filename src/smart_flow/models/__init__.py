"""
Data models for Smart Flow.

This module contains:
- Field and screen definitions
- Composite field value shapes and their defaults
- Output schema models
- Validation and suggestion results
- Enrichment run context
"""

from smart_flow.models.field_definitions import (
    FieldConfig,
    FieldType,
    Screen,
    coerce_field_type,
    subsequent_screens,
)
from smart_flow.models.composite_values import (
    COMPOSITE_DEFAULTS,
    COMPOSITE_FIELD_TYPES,
    DEFAULT_ADDRESS,
    DEFAULT_CURRENCY,
    DEFAULT_PARTY,
    DEFAULT_PHONE,
    AddressValue,
    CurrencyValue,
    PartyValue,
    PhoneValue,
    is_composite,
)
from smart_flow.models.enrichment import EnrichmentRunContext
from smart_flow.models.schema_output import (
    OutputSchema,
    SchemaShape,
    SchemaValidationResult,
)
from smart_flow.models.suggestion import (
    SuggestionState,
    SuggestionStatus,
)
from smart_flow.models.validation_result import (
    FieldValidationError,
    FieldValidationResult,
    ValidationResult,
)

__all__ = [
    # Definitions
    "FieldConfig",
    "FieldType",
    "Screen",
    "coerce_field_type",
    "subsequent_screens",
    # Composite values
    "AddressValue",
    "PartyValue",
    "PhoneValue",
    "CurrencyValue",
    "DEFAULT_ADDRESS",
    "DEFAULT_PARTY",
    "DEFAULT_PHONE",
    "DEFAULT_CURRENCY",
    "COMPOSITE_DEFAULTS",
    "COMPOSITE_FIELD_TYPES",
    "is_composite",
    # Output schema
    "OutputSchema",
    "SchemaShape",
    "SchemaValidationResult",
    # Suggestions
    "SuggestionState",
    "SuggestionStatus",
    # Enrichment
    "EnrichmentRunContext",
    # Validation
    "FieldValidationError",
    "FieldValidationResult",
    "ValidationResult",
]
