"""
Template variable resolution.

Labels, help texts, placeholders and enrichment prompts may reference
answers with ``{{name}}`` or ``{{name|fallback text}}``. Names are dot-paths
looked up first in the form data, then in the enrichment context. A
variable with no value renders as its fallback, or as ``[name]`` so a broken
template stays visibly broken instead of silently losing text.

The output is not escaped; callers own the safety of the output context.
"""

import json
import logging
import math
import re
from collections.abc import Mapping
from typing import Any

from smart_flow.lookup import MISSING, get_nested_value
from smart_flow.models.field_definitions import FieldConfig

logger = logging.getLogger(__name__)

# {{ identifier }} or {{ identifier | fallback }}
TEMPLATE_VARIABLE_PATTERN = re.compile(r"\{\{([^}|]+)(?:\|([^}]*))?\}\}")

# Any {{...}} block, used when collecting prompt variables
_ANY_VARIABLE_PATTERN = re.compile(r"\{\{([^}]+)\}\}")


def to_display_string(value: Any) -> str:
    """Stringify a form or enrichment value for substitution into text."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, tuple)):
        return ",".join("" if item is None else to_display_string(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return str(value)


def _is_present(value: Any) -> bool:
    return value is not MISSING and value is not None and value != ""


def _lookup(source: Mapping[str, Any] | None, name: str) -> Any:
    if not source:
        return MISSING
    return get_nested_value(source, name, MISSING)


def resolve_template_variables(
    template: str | None,
    form_data: Mapping[str, Any] | None = None,
    enrichment_context: Mapping[str, Any] | None = None,
) -> str:
    """
    Expand every ``{{name}}`` / ``{{name|fallback}}`` in ``template``.

    Args:
        template: Text to resolve. ``None`` or empty gives ``""``.
        form_data: Answers of the end user, consulted first.
        enrichment_context: Output of the AI enrichment step, consulted only
            when the form data has no value (missing, ``None`` or ``""``).

    Returns:
        The resolved text. Each placeholder is resolved on its own in a
        single left-to-right pass; resolved text is never re-scanned.

    Example:
        >>> resolve_template_variables("Hello {{name}}", {"name": "Ann"})
        'Hello Ann'
        >>> resolve_template_variables("{{x|Unknown}}")
        'Unknown'
    """
    if not template:
        return ""

    def _replace(match: re.Match) -> str:
        name = match.group(1).strip()
        fallback_text = match.group(2)

        for source in (form_data, enrichment_context):
            value = _lookup(source, name)
            if _is_present(value):
                return to_display_string(value)

        if fallback_text is not None and fallback_text.strip():
            return fallback_text.strip()
        logger.debug("Unresolved template variable: %s", name)
        return f"[{name}]"

    return TEMPLATE_VARIABLE_PATTERN.sub(_replace, template)


def extract_template_variables(template: str | None) -> list[str]:
    """
    Root names of all variables referenced in ``template``.

    ``{{company.name}}`` contributes ``company``. Names are returned once, in
    order of first appearance. A ``|fallback`` suffix is not part of the name.
    """
    if not template:
        return []
    names: list[str] = []
    for match in _ANY_VARIABLE_PATTERN.finditer(template):
        name = match.group(1).split("|", 1)[0].strip()
        root = name.split(".")[0]
        if root and root not in names:
            names.append(root)
    return names


def are_template_variables_available(
    template: str | None,
    form_data: Mapping[str, Any] | None = None,
    enrichment_context: Mapping[str, Any] | None = None,
) -> bool:
    """Whether every variable in ``template`` has a non-blank value."""
    names = extract_template_variables(template)
    if not names:
        return True

    merged = {**(form_data or {}), **(enrichment_context or {})}
    for name in names:
        value = merged.get(name)
        if value is None or value == "":
            return False
        if isinstance(value, str) and not value.strip():
            return False
    return True


def get_suggestion_placeholder(
    suggestion_key: str | None,
    enrichment_context: Mapping[str, Any] | None = None,
    fallback_placeholder: str | None = None,
) -> str:
    """Placeholder text showing the suggested value, if there is one."""
    if not suggestion_key or not enrichment_context:
        return fallback_placeholder or ""

    suggested = get_nested_value(enrichment_context, suggestion_key)
    if suggested is not None:
        return to_display_string(suggested)
    return fallback_placeholder or ""


def resolve_field_text(
    field: FieldConfig,
    form_data: Mapping[str, Any] | None = None,
    enrichment_context: Mapping[str, Any] | None = None,
) -> dict[str, str]:
    """Resolved display strings of one field, as a renderer paints them."""
    return {
        "label": resolve_template_variables(field.label, form_data, enrichment_context),
        "help_text": resolve_template_variables(field.help_text, form_data, enrichment_context),
        "placeholder": get_suggestion_placeholder(
            field.suggestion_key,
            enrichment_context,
            resolve_template_variables(field.placeholder, form_data, enrichment_context),
        ),
    }
