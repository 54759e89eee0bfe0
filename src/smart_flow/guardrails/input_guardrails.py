"""
Input guardrails for the enrichment agent.

The enrichment prompt is written by a template author and carries end-user
answers, so it is screened before it reaches the model.
"""

import re
from typing import Any

from agents import (
    Agent,
    GuardrailFunctionOutput,
    RunContextWrapper,
    TResponseInputItem,
    input_guardrail,
)
from pydantic import BaseModel, Field

from smart_flow.guardrails.constants import MAX_PROMPT_LENGTH, SUSPICIOUS_PATTERNS


class SafetyCheckResult(BaseModel):
    """Result of input safety check."""

    is_safe: bool = Field(..., description="Whether the input is safe")
    issues: list[str] = Field(default_factory=list, description="Any issues found")


def _input_to_text(input: str | list[TResponseInputItem]) -> str:
    if isinstance(input, list):
        return " ".join(
            str(item.get("content", "")) if isinstance(item, dict) else str(item)
            for item in input
        )
    return str(input)


def _check_for_injection(text: str) -> bool:
    """Check for potential injection patterns."""
    for pattern in SUSPICIOUS_PATTERNS:
        if re.search(pattern, text, re.IGNORECASE):
            return False
    return True


def check_prompt_safety(text: str) -> SafetyCheckResult:
    """Screen an enrichment prompt."""
    issues = []

    if not text.strip():
        issues.append("Prompt is empty")
    if len(text) > MAX_PROMPT_LENGTH:
        issues.append(f"Prompt exceeds {MAX_PROMPT_LENGTH} characters")
    if not _check_for_injection(text):
        issues.append("Potentially unsafe content detected")

    return SafetyCheckResult(is_safe=len(issues) == 0, issues=issues)


@input_guardrail
async def safety_guardrail(
    ctx: RunContextWrapper[Any],
    agent: Agent[Any],
    input: str | list[TResponseInputItem],
) -> GuardrailFunctionOutput:
    """
    Basic safety guardrail for enrichment prompts.

    Checks for:
    1. Empty or oversized prompts
    2. Injection patterns
    """
    result = check_prompt_safety(_input_to_text(input))

    return GuardrailFunctionOutput(
        output_info=result.model_dump(),
        tripwire_triggered=not result.is_safe,
    )
