"""
Guardrails for the enrichment agent.

Basic safety checks for prompts and shape checks for answers.
"""

from smart_flow.guardrails.input_guardrails import (
    SafetyCheckResult,
    check_prompt_safety,
    safety_guardrail,
)
from smart_flow.guardrails.output_guardrails import (
    EnrichmentOutputCheck,
    check_enrichment_output,
    extract_json_object,
    output_schema_guardrail,
)

__all__ = [
    "safety_guardrail",
    "output_schema_guardrail",
    "check_prompt_safety",
    "check_enrichment_output",
    "extract_json_object",
    "SafetyCheckResult",
    "EnrichmentOutputCheck",
]
