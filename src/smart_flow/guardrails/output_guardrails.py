"""
Output guardrails for the enrichment agent.

These guardrails validate the model's answer before it is merged into the
enrichment context.
"""

import json
import logging
from typing import Any

from agents import (
    Agent,
    GuardrailFunctionOutput,
    RunContextWrapper,
    output_guardrail,
)
from pydantic import BaseModel, Field

from smart_flow.guardrails.constants import CODE_FENCE_PATTERN
from smart_flow.models.enrichment import EnrichmentRunContext

logger = logging.getLogger(__name__)


class EnrichmentOutputCheck(BaseModel):
    """Result of checking an enrichment answer."""

    is_valid: bool = Field(..., description="Whether the answer can be merged")
    errors: list[str] = Field(default_factory=list, description="List of validation errors")
    warnings: list[str] = Field(default_factory=list, description="List of warnings")


def extract_json_object(output: Any) -> dict[str, Any] | None:
    """
    The JSON object an agent answered with.

    Accepts an already decoded dict, raw JSON text, or JSON text wrapped in a
    markdown code fence. Returns None for anything else.
    """
    if isinstance(output, dict):
        return output
    if not isinstance(output, str):
        return None

    text = output.strip()
    fenced = CODE_FENCE_PATTERN.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        logger.debug("Enrichment output is not JSON: %s", e)
        return None
    return data if isinstance(data, dict) else None


def check_enrichment_output(output: Any, output_schema: dict[str, Any] | None = None) -> EnrichmentOutputCheck:
    """Check an answer against the screen's output schema."""
    data = extract_json_object(output)
    if data is None:
        return EnrichmentOutputCheck(is_valid=False, errors=["Output is not a JSON object"])

    errors = []
    warnings = []
    schema = output_schema or {}

    required = schema.get("required")
    for key in required if isinstance(required, list) else []:
        if key not in data:
            errors.append(f"Missing required key '{key}'")

    properties = schema.get("properties")
    if isinstance(properties, dict) and properties:
        for key in data:
            if key not in properties:
                warnings.append(f"Output has key '{key}' not in output schema")

    return EnrichmentOutputCheck(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )


@output_guardrail
async def output_schema_guardrail(
    ctx: RunContextWrapper[Any],
    agent: Agent[Any],
    output: Any,
) -> GuardrailFunctionOutput:
    """
    Guardrail checking the answer is a JSON object with every key the
    screen's output schema requires.
    """
    run_context = ctx.context if ctx is not None else None
    output_schema = run_context.output_schema if isinstance(run_context, EnrichmentRunContext) else None

    result = check_enrichment_output(output, output_schema)

    return GuardrailFunctionOutput(
        output_info=result.model_dump(),
        tripwire_triggered=not result.is_valid,
    )
