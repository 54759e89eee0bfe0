"""
Conditional visibility for screens and fields.

A screen or field may carry a condition group: rules on earlier answers,
combined with ``and`` / ``or``. No conditions, or conditions that cannot
be read, means visible.

Example:
    >>> evaluate_conditions(
    ...     {"operator": "and", "rules": [
    ...         {"field": "employmentType", "operator": "equals", "value": "full-time"}
    ...     ]},
    ...     {"employmentType": "full-time"},
    ... )
    True
"""

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from smart_flow.lookup import get_nested_value
from smart_flow.models.field_definitions import FieldConfig, Screen

logger = logging.getLogger(__name__)

ConditionOperator = Literal[
    "equals",
    "notEquals",
    "contains",
    "notContains",
    "isEmpty",
    "isNotEmpty",
    "greaterThan",
    "lessThan",
    "greaterThanOrEqual",
    "lessThanOrEqual",
    "in",
    "notIn",
    "startsWith",
    "endsWith",
]


class ConditionRule(BaseModel):
    """A single check of one answer against a value."""

    field: str = Field(..., description="Answer to check, dot notation allowed")
    operator: str = Field(..., description="Comparison operator")
    value: Any | None = Field(default=None, description="Value to compare against")


class ConditionGroup(BaseModel):
    """Rules combined with AND or OR."""

    operator: Literal["and", "or"] = Field(default="and")
    rules: list[ConditionRule] = Field(default_factory=list)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _strict_equals(a: Any, b: Any) -> bool:
    # True == 1 in Python; answers of different kinds never match
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    if _is_number(a) != _is_number(b):
        return False
    return a == b


def _bool_equals(field_value: Any, compare_value: Any) -> bool | None:
    """Compare booleans stored either as bools or as "true"/"false"."""
    if isinstance(compare_value, bool):
        if field_value is True or field_value == "true":
            return compare_value is True
        if field_value is False or field_value == "false":
            return compare_value is False
    if isinstance(compare_value, str) and compare_value in ("true", "false"):
        expected = compare_value == "true"
        if field_value is True or field_value == "true":
            return expected
        if field_value is False or field_value == "false":
            return not expected
    return None


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or (isinstance(value, list) and len(value) == 0)


def _contains(field_value: Any, compare_value: Any) -> bool | None:
    if isinstance(field_value, str) and isinstance(compare_value, str):
        return compare_value.lower() in field_value.lower()
    if isinstance(field_value, list):
        return any(_strict_equals(item, compare_value) for item in field_value)
    return None


def _compare_numbers(field_value: Any, compare_value: Any, operator: str) -> bool:
    if not (_is_number(field_value) and _is_number(compare_value)):
        return False
    if operator == "greaterThan":
        return field_value > compare_value
    if operator == "lessThan":
        return field_value < compare_value
    if operator == "greaterThanOrEqual":
        return field_value >= compare_value
    return field_value <= compare_value


def evaluate_rule(rule: ConditionRule, form_data: Mapping[str, Any]) -> bool:
    """Evaluate one rule against the answers."""
    field_value = get_nested_value(form_data, rule.field)
    compare_value = rule.value
    operator = rule.operator

    if operator in ("equals", "notEquals"):
        matched = _bool_equals(field_value, compare_value)
        if matched is None:
            matched = _strict_equals(field_value, compare_value)
        return matched if operator == "equals" else not matched

    if operator == "contains":
        return bool(_contains(field_value, compare_value))
    if operator == "notContains":
        found = _contains(field_value, compare_value)
        return True if found is None else not found

    if operator == "isEmpty":
        return _is_empty(field_value)
    if operator == "isNotEmpty":
        return not _is_empty(field_value)

    if operator in ("greaterThan", "lessThan", "greaterThanOrEqual", "lessThanOrEqual"):
        return _compare_numbers(field_value, compare_value, operator)

    if operator == "in":
        if isinstance(compare_value, list):
            return any(_strict_equals(item, field_value) for item in compare_value)
        return False
    if operator == "notIn":
        if isinstance(compare_value, list):
            return not any(_strict_equals(item, field_value) for item in compare_value)
        return True

    if operator in ("startsWith", "endsWith"):
        if isinstance(field_value, str) and isinstance(compare_value, str):
            haystack, needle = field_value.lower(), compare_value.lower()
            return haystack.startswith(needle) if operator == "startsWith" else haystack.endswith(needle)
        return False

    logger.warning("Unknown condition operator: %s", operator)
    return True


def parse_conditions(conditions: ConditionGroup | Mapping[str, Any] | str | None) -> ConditionGroup | None:
    """Read a stored condition group; None when absent or unreadable."""
    if not conditions:
        return None
    if isinstance(conditions, ConditionGroup):
        return conditions
    try:
        if isinstance(conditions, str):
            return ConditionGroup.model_validate_json(conditions)
        return ConditionGroup.model_validate(conditions)
    except ValidationError as e:
        logger.error("Failed to parse conditions: %s", e)
        return None


def serialize_conditions(conditions: ConditionGroup | None) -> str | None:
    """Condition group as JSON text for storage."""
    if conditions is None:
        return None
    return json.dumps(conditions.model_dump(), separators=(",", ":"))


def evaluate_conditions(
    conditions: ConditionGroup | Mapping[str, Any] | str | None,
    form_data: Mapping[str, Any],
) -> bool:
    """
    Whether the conditions hold for the answers given so far.

    Returns True when there are no conditions, no rules, or the stored
    conditions cannot be parsed.
    """
    group = parse_conditions(conditions)
    if group is None or not group.rules:
        return True

    results = [evaluate_rule(rule, form_data) for rule in group.rules]
    return all(results) if group.operator == "and" else any(results)


def visible_screens(screens: Sequence[Screen], form_data: Mapping[str, Any]) -> list[Screen]:
    """Screens whose conditions hold, in flow order."""
    return [
        screen
        for screen in sorted(screens, key=lambda s: s.order)
        if evaluate_conditions(screen.conditions, form_data)
    ]


def visible_fields(screen: Screen, form_data: Mapping[str, Any]) -> list[FieldConfig]:
    """Fields of ``screen`` whose conditions hold."""
    return [field for field in screen.fields if evaluate_conditions(field.conditions, form_data)]
