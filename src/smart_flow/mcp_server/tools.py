"""
MCP Tool definitions for Smart Flow.

Each tool is a plain function taking the call arguments and returning a
JSON-serializable dict; ``get_mcp_tools`` describes them for registration.
Screens and fields are passed in their stored JSON shape (camelCase keys).
"""

import logging
from typing import Any

from smart_flow.codec import decode_composite
from smart_flow.config import get_config
from smart_flow.conditions import evaluate_conditions
from smart_flow.enrichment.orchestrator import EnrichmentOrchestrator
from smart_flow.models.field_definitions import FieldConfig, Screen
from smart_flow.resolver import extract_template_variables, resolve_template_variables
from smart_flow.schema_builder import (
    convert_selected_fields_to_schema,
    load_output_schema,
    selected_fields_from_schema,
    validate_output_schema,
)
from smart_flow.suggestions import get_suggestion_state
from smart_flow.validation import validate_screen
from smart_flow.mcp_server.session_store import get_session_api_key

logger = logging.getLogger("smart-flow-mcp")


def mcp_resolve_template(arguments: dict[str, Any]) -> dict[str, Any]:
    """Resolve ``{{...}}`` variables in a text."""
    template = arguments.get("template") or ""
    return {
        "text": resolve_template_variables(
            template,
            arguments.get("form_data") or {},
            arguments.get("enrichment_context") or {},
        ),
        "variables": extract_template_variables(template),
    }


def mcp_derive_output_schema(arguments: dict[str, Any]) -> dict[str, Any]:
    """Output schema text for fields selected on later screens."""
    screens = [Screen.model_validate(s) for s in arguments.get("subsequent_screens", [])]
    schema = convert_selected_fields_to_schema(arguments.get("selected_fields", []), screens)
    return {"schema": schema}


def mcp_parse_output_schema(arguments: dict[str, Any]) -> dict[str, Any]:
    """Selected fields and structural problems of an output schema text."""
    schema = load_output_schema(arguments.get("schema"))
    result = validate_output_schema(schema) if schema else None
    return {
        "selected_fields": sorted(selected_fields_from_schema(schema)),
        "validation": result.model_dump() if result else None,
    }


def mcp_decode_composite_value(arguments: dict[str, Any]) -> dict[str, Any]:
    """Decode a stored composite value, falling back to the type's default."""
    return {
        "value": decode_composite(
            arguments["field_type"],
            arguments.get("raw"),
            arguments.get("locale"),
        )
    }


def mcp_evaluate_conditions(arguments: dict[str, Any]) -> dict[str, Any]:
    """Whether a condition group holds for the given answers."""
    return {
        "visible": evaluate_conditions(
            arguments.get("conditions"),
            arguments.get("form_data") or {},
        )
    }


def mcp_suggestion_state(arguments: dict[str, Any]) -> dict[str, Any]:
    """Suggestion status of a field."""
    field = FieldConfig.model_validate(arguments["field"])
    state = get_suggestion_state(
        field,
        arguments.get("current_value"),
        arguments.get("enrichment_context"),
        arguments.get("locale"),
    )
    return state.model_dump(mode="json")


def mcp_validate_screen(arguments: dict[str, Any]) -> dict[str, Any]:
    """Validate the answers to a list of fields."""
    fields = [FieldConfig.model_validate(f) for f in arguments.get("fields", [])]
    result = validate_screen(fields, arguments.get("form_data") or {})
    return result.model_dump()


async def mcp_enrich_context(arguments: dict[str, Any]) -> dict[str, Any]:
    """
    Run a screen's enrichment step.

    API key lookup order: SSE header (session store), tool argument,
    configuration.
    """
    screen = Screen.model_validate(arguments["screen"])
    api_key = get_session_api_key() or arguments.get("openai_api_key") or get_config().openai_api_key
    if api_key:
        logger.info("Using supplied OpenAI API key for enrichment")

    orchestrator = EnrichmentOrchestrator(api_key=api_key)
    if not orchestrator.should_enrich(screen, arguments.get("form_data") or {}, arguments.get("enrichment_context")):
        return {"skipped": True, "enrichment_context": arguments.get("enrichment_context") or {}}

    context = await orchestrator.enrich(
        screen,
        arguments.get("form_data") or {},
        arguments.get("enrichment_context"),
    )
    return {"skipped": False, "enrichment_context": context}


SYNC_TOOL_HANDLERS = {
    "resolve_template": mcp_resolve_template,
    "derive_output_schema": mcp_derive_output_schema,
    "parse_output_schema": mcp_parse_output_schema,
    "decode_composite_value": mcp_decode_composite_value,
    "evaluate_conditions": mcp_evaluate_conditions,
    "suggestion_state": mcp_suggestion_state,
    "validate_screen": mcp_validate_screen,
}


_FORM_DATA = {
    "type": "object",
    "description": "Answers given so far, keyed by field name",
}
_ENRICHMENT_CONTEXT = {
    "type": "object",
    "description": "Output of earlier AI enrichment steps",
}
_SCREEN = {
    "type": "object",
    "description": "Screen definition (id, title, order, fields, aiPrompt, aiOutputSchema)",
}


def get_mcp_tools() -> list[dict]:
    """
    Get MCP tool definitions for registration with MCP server.

    Returns list of tool schemas compatible with MCP protocol.
    """
    return [
        {
            "name": "resolve_template",
            "description": "Resolve {{name}} and {{name|fallback}} variables in a text "
                           "from form data, then from the enrichment context.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "template": {"type": "string", "description": "Text with {{...}} variables"},
                    "form_data": _FORM_DATA,
                    "enrichment_context": _ENRICHMENT_CONTEXT,
                },
                "required": ["template"],
            },
        },
        {
            "name": "derive_output_schema",
            "description": "Build the JSON output schema an AI enrichment step must fill "
                           "from fields selected on later screens.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "selected_fields": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Names of the selected fields",
                    },
                    "subsequent_screens": {
                        "type": "array",
                        "items": _SCREEN,
                        "description": "Screens after the current one",
                    },
                },
                "required": ["selected_fields", "subsequent_screens"],
            },
        },
        {
            "name": "parse_output_schema",
            "description": "Read which fields an output schema selects and check its structure.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "schema": {"type": "string", "description": "Output schema JSON text"},
                },
                "required": ["schema"],
            },
        },
        {
            "name": "decode_composite_value",
            "description": "Decode a stored address, party, phone or currency value. "
                           "Malformed values decode to the type's default.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "field_type": {
                        "type": "string",
                        "enum": ["address", "party", "phone", "currency"],
                    },
                    "raw": {"description": "Stored value: JSON text, object or empty"},
                    "locale": {"type": "string", "description": "Locale for the currency default"},
                },
                "required": ["field_type"],
            },
        },
        {
            "name": "evaluate_conditions",
            "description": "Evaluate a screen or field visibility condition group.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "conditions": {
                        "description": "Condition group object or its JSON text",
                    },
                    "form_data": _FORM_DATA,
                },
                "required": ["conditions"],
            },
        },
        {
            "name": "suggestion_state",
            "description": "Status of a field's AI suggestion given its current value.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "field": {"type": "object", "description": "Field definition"},
                    "current_value": {"description": "Current stored value of the field"},
                    "enrichment_context": _ENRICHMENT_CONTEXT,
                    "locale": {"type": "string"},
                },
                "required": ["field"],
            },
        },
        {
            "name": "validate_screen",
            "description": "Validate answers against their field definitions.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "fields": {"type": "array", "items": {"type": "object"}},
                    "form_data": _FORM_DATA,
                },
                "required": ["fields", "form_data"],
            },
        },
        {
            "name": "enrich_context",
            "description": "Run a screen's AI enrichment prompt and return the merged "
                           "enrichment context. Skipped when the prompt's variables "
                           "are not all answered.",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "screen": _SCREEN,
                    "form_data": _FORM_DATA,
                    "enrichment_context": _ENRICHMENT_CONTEXT,
                    "openai_api_key": {
                        "type": "string",
                        "description": "OpenAI API key, if not configured on the server",
                    },
                },
                "required": ["screen", "form_data"],
            },
        },
    ]
