"""
Smart Flow: template flows with AI enrichment.

A flow is a sequence of screens. Field texts may reference earlier answers
with ``{{name}}``; an AI step attached to a screen can fill an enrichment
context whose values later screens show as suggestions.

Simple Usage:
    from smart_flow import resolve_template_variables, decode_composite

    label = resolve_template_variables(
        "Address of {{companyName|the company}}",
        form_data={"companyName": "Acme AG"},
    )

    address = decode_composite("address", stored_value)

Output schema:
    from smart_flow import SchemaEditor

    editor = SchemaEditor(screen.ai_output_schema or "", later_screens)
    editor.toggle_field("companyAddress")
    screen.ai_output_schema = editor.value

Enrichment:
    from smart_flow import EnrichmentOrchestrator

    orchestrator = EnrichmentOrchestrator(model="gpt-4.1-mini")
    context = await orchestrator.enrich(screen, form_data, context)

Tracing:
    from smart_flow.tracing import setup_tracing

    setup_tracing(log_traces=True, verbose=True)
"""

from smart_flow.codec import (
    classify_raw,
    composite_default,
    decode_composite,
    encode_composite_value,
    parse_composite_value,
)
from smart_flow.conditions import (
    ConditionGroup,
    ConditionRule,
    evaluate_conditions,
    visible_fields,
    visible_screens,
)
from smart_flow.enrichment import (
    EnrichmentOrchestrator,
    build_enrichment_prompt,
    enrich_context,
)
from smart_flow.exceptions import (
    EnrichmentError,
    InvalidOutputSchemaError,
    SmartFlowError,
)
from smart_flow.formatting import format_composite_value, get_default_currency
from smart_flow.lookup import MISSING, get_nested_value
from smart_flow.models.field_definitions import FieldConfig, FieldType, Screen
from smart_flow.models.schema_output import OutputSchema, SchemaShape
from smart_flow.models.suggestion import SuggestionState, SuggestionStatus
from smart_flow.models.validation_result import FieldValidationError, ValidationResult
from smart_flow.resolver import (
    are_template_variables_available,
    extract_template_variables,
    resolve_template_variables,
)
from smart_flow.schema_builder import (
    convert_selected_fields_to_schema,
    field_type_to_schema_type,
    parse_schema_to_selected_fields,
)
from smart_flow.schema_editor import EditorMode, SchemaEditor
from smart_flow.suggestions import apply_suggestion, get_suggestion_state
from smart_flow.tracing import disable_tracing, setup_tracing
from smart_flow.validation import validate_field, validate_screen

__all__ = [
    # Definitions
    "FieldConfig",
    "FieldType",
    "Screen",
    # Lookup and resolver
    "MISSING",
    "get_nested_value",
    "resolve_template_variables",
    "extract_template_variables",
    "are_template_variables_available",
    # Composite values
    "classify_raw",
    "parse_composite_value",
    "composite_default",
    "decode_composite",
    "encode_composite_value",
    "format_composite_value",
    "get_default_currency",
    # Output schema
    "OutputSchema",
    "SchemaShape",
    "field_type_to_schema_type",
    "convert_selected_fields_to_schema",
    "parse_schema_to_selected_fields",
    "SchemaEditor",
    "EditorMode",
    # Suggestions
    "SuggestionState",
    "SuggestionStatus",
    "get_suggestion_state",
    "apply_suggestion",
    # Conditions
    "ConditionGroup",
    "ConditionRule",
    "evaluate_conditions",
    "visible_screens",
    "visible_fields",
    # Validation
    "ValidationResult",
    "FieldValidationError",
    "validate_field",
    "validate_screen",
    # Enrichment
    "EnrichmentOrchestrator",
    "build_enrichment_prompt",
    "enrich_context",
    # Tracing
    "setup_tracing",
    "disable_tracing",
    # Errors
    "SmartFlowError",
    "InvalidOutputSchemaError",
    "EnrichmentError",
]

__version__ = "0.1.0"
