"""
Enrichment Agent.

Runs a screen's AI prompt against the answers given so far and returns
a JSON object whose keys later fields can read as suggestions or
template variables.
"""

from agents import Agent

from smart_flow.config import get_config
from smart_flow.enrichment.instructions import ENRICHMENT_INSTRUCTIONS
from smart_flow.guardrails.input_guardrails import safety_guardrail
from smart_flow.guardrails.output_guardrails import output_schema_guardrail
from smart_flow.models.enrichment import EnrichmentRunContext


def create_enrichment_agent(
    model: str | None = None,
    enable_guardrails: bool = True,
) -> Agent[EnrichmentRunContext]:
    """
    Create the Enrichment agent.

    The output schema is not baked into the agent: it is part of the prompt
    and of the run context the output guardrail reads, so one agent serves
    every screen.

    Args:
        model: The OpenAI model to use. If None, uses config.enrichment_model.
        enable_guardrails: Whether to attach the safety and output guardrails.

    Returns:
        Configured Agent instance.
    """
    config = get_config()
    model = model or config.enrichment_model

    input_guardrails = [safety_guardrail] if enable_guardrails else []
    output_guardrails = [output_schema_guardrail] if enable_guardrails else []

    return Agent[EnrichmentRunContext](
        name="Context Enricher",
        instructions=ENRICHMENT_INSTRUCTIONS,
        model=model,
        model_settings=config.get_model_settings(),
        input_guardrails=input_guardrails,
        output_guardrails=output_guardrails,
    )
