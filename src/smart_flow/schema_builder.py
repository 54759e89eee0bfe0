"""
Output schema derivation.

An author picks fields on later screens that the AI enrichment step of
the current screen should fill. The picked fields become the properties
of an object schema; each property's shape follows from the field type.

Every picked field is listed in ``required``, whatever the field's own
``required`` flag says: the schema describes what the AI must return, not
what the end user must answer.
"""

import json
import logging
from collections.abc import Iterable, Sequence
from typing import Any

from smart_flow.exceptions import InvalidOutputSchemaError
from smart_flow.models.field_definitions import FieldType, Screen, coerce_field_type
from smart_flow.models.schema_output import OutputSchema, SchemaShape, SchemaValidationResult

logger = logging.getLogger(__name__)

SCHEMA_INDENT = 2

VALID_SCHEMA_TYPES = {"string", "number", "integer", "boolean", "array", "object", "null"}

_STRING_TYPES = {FieldType.TEXT, FieldType.EMAIL, FieldType.URL, FieldType.TEXTAREA, FieldType.DATE}
_NUMBER_TYPES = {FieldType.NUMBER, FieldType.PERCENTAGE}
_CHOICE_TYPES = {FieldType.SELECT, FieldType.MULTISELECT}

_ADDRESS_PARTS = ["street", "city", "state", "postalCode", "country"]


def _object_shape(parts: dict[str, str]) -> SchemaShape:
    return SchemaShape(
        type="object",
        properties={name: {"type": part_type} for name, part_type in parts.items()},
        required=list(parts),
    )


def field_type_to_schema_type(
    field_type: FieldType | str,
    options: Sequence[str] | None = None,
) -> SchemaShape:
    """
    Schema fragment for one field type.

    Total over its input: an unrecognized type maps to a string shape.

    Example:
        >>> field_type_to_schema_type("phone").to_json_schema()
        {'type': 'object', 'properties': {'countryCode': {'type': 'string'}, 'number': {'type': 'string'}}, 'required': ['countryCode', 'number']}
    """
    resolved = coerce_field_type(field_type)

    if resolved in _STRING_TYPES:
        return SchemaShape(type="string")
    if resolved in _NUMBER_TYPES:
        return SchemaShape(type="number")
    if resolved is FieldType.CHECKBOX:
        return SchemaShape(type="boolean")
    if resolved in _CHOICE_TYPES:
        return SchemaShape(type="string", enum=list(options) if options else None)
    if resolved is FieldType.PARTY:
        return _object_shape({"name": "string", **{part: "string" for part in _ADDRESS_PARTS}})
    if resolved is FieldType.ADDRESS:
        return _object_shape({part: "string" for part in _ADDRESS_PARTS})
    if resolved is FieldType.CURRENCY:
        return _object_shape({"amount": "number", "currency": "string"})
    if resolved is FieldType.PHONE:
        return _object_shape({"countryCode": "string", "number": "string"})

    logger.debug("Unrecognized field type %r mapped to string", field_type)
    return SchemaShape(type="string")


def build_output_schema(
    selected_field_names: Iterable[str],
    subsequent_screens: Sequence[Screen],
) -> OutputSchema:
    """Output schema for the selected fields, screens taken in ``order``."""
    selected = set(selected_field_names)
    schema = OutputSchema()

    for screen in sorted(subsequent_screens, key=lambda s: s.order):
        for field in screen.fields:
            if field.name not in selected:
                continue
            shape = field_type_to_schema_type(field.type, field.options).to_json_schema()
            schema.properties[field.name] = {
                "type": shape.pop("type"),
                "description": field.label,
                **shape,
            }
            if field.name not in schema.required:
                schema.required.append(field.name)

    return schema


def convert_selected_fields_to_schema(
    selected_field_names: Iterable[str],
    subsequent_screens: Sequence[Screen],
    indent: int = SCHEMA_INDENT,
) -> str:
    """
    Output schema text for the selected fields.

    Serialized with two-space indentation so the text the code editor shows
    is stable between regenerations.
    """
    return build_output_schema(selected_field_names, subsequent_screens).to_json(indent=indent)


def load_output_schema(schema_text: str | None) -> dict[str, Any]:
    """
    Parse output schema text from the code editor.

    Blank text is an empty schema.

    Raises:
        InvalidOutputSchemaError: If the text is not JSON or not a JSON object.
    """
    if not schema_text or not schema_text.strip():
        return {}
    try:
        schema = json.loads(schema_text)
    except ValueError as e:
        raise InvalidOutputSchemaError(f"Output schema is not valid JSON: {e}") from e
    except RecursionError as e:
        raise InvalidOutputSchemaError("Output schema is nested too deeply") from e
    if not isinstance(schema, dict):
        raise InvalidOutputSchemaError("Output schema must be a JSON object")
    return schema


def selected_fields_from_schema(schema: dict[str, Any]) -> set[str]:
    """Property names of an object schema; empty for any other shape."""
    properties = schema.get("properties")
    if schema.get("type") == "object" and isinstance(properties, dict):
        return set(properties)
    return set()


def parse_schema_to_selected_fields(schema_text: str | None) -> set[str]:
    """
    Field names selected by an output schema text.

    Never raises: unparseable text or a non-object schema selects nothing.
    """
    try:
        return selected_fields_from_schema(load_output_schema(schema_text))
    except InvalidOutputSchemaError as e:
        logger.debug("Failed to parse output schema: %s", e)
        return set()


def validate_output_schema(schema: dict[str, Any]) -> SchemaValidationResult:
    """Check the structure of an output schema an author typed by hand."""
    errors = []
    warnings = []

    if "type" not in schema:
        errors.append("Missing 'type' field in schema")
    elif schema["type"] != "object":
        errors.append("Root schema type must be 'object'")

    if "properties" not in schema:
        errors.append("Missing 'properties' field in schema")
    elif not isinstance(schema["properties"], dict):
        errors.append("'properties' must be an object")
    elif len(schema["properties"]) == 0:
        warnings.append("Schema has no properties defined")

    if isinstance(schema.get("properties"), dict):
        for prop_name, prop_def in schema["properties"].items():
            if not isinstance(prop_def, dict):
                errors.append(f"Property '{prop_name}' must be an object")
                continue

            if "type" not in prop_def:
                warnings.append(f"Property '{prop_name}' has no type defined")
                continue

            prop_type = prop_def["type"]
            if isinstance(prop_type, str) and prop_type not in VALID_SCHEMA_TYPES:
                errors.append(f"Property '{prop_name}' has invalid type: {prop_type}")
            elif isinstance(prop_type, list):
                for t in prop_type:
                    if t not in VALID_SCHEMA_TYPES:
                        errors.append(f"Property '{prop_name}' has invalid type in array: {t}")

    if "required" in schema:
        if not isinstance(schema["required"], list):
            errors.append("'required' must be an array")
        else:
            properties = schema.get("properties")
            properties = properties if isinstance(properties, dict) else {}
            for req_field in schema["required"]:
                if req_field not in properties:
                    errors.append(f"Required field '{req_field}' not in properties")

    return SchemaValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )
