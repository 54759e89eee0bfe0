"""
Enrichment Orchestrator.

Runs the AI step attached to a screen once the user has answered it. The
answer is merged into the enrichment context, which later screens read for
template variables and field suggestions.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from agents import AgentsException, OpenAIProvider, RunConfig, Runner
from agents.exceptions import (
    InputGuardrailTripwireTriggered,
    OutputGuardrailTripwireTriggered,
)

from smart_flow.config import get_config
from smart_flow.enrichment.agent import create_enrichment_agent
from smart_flow.enrichment.instructions import (
    ENRICHMENT_PROMPT_FOOTER,
    ENRICHMENT_PROMPT_TEMPLATE,
    OUTPUT_SCHEMA_SECTION_TEMPLATE,
)
from smart_flow.exceptions import EnrichmentError, InvalidOutputSchemaError
from smart_flow.guardrails.output_guardrails import extract_json_object
from smart_flow.models.enrichment import EnrichmentRunContext
from smart_flow.models.field_definitions import Screen
from smart_flow.resolver import are_template_variables_available, resolve_template_variables
from smart_flow.schema_builder import load_output_schema
from smart_flow.tracing import enrichment_trace, setup_tracing

logger = logging.getLogger(__name__)


def _screen_output_schema(screen: Screen) -> dict[str, Any]:
    try:
        return load_output_schema(screen.ai_output_schema)
    except InvalidOutputSchemaError as e:
        logger.warning("Ignoring output schema of screen %s: %s", screen.id, e)
        return {}


def build_enrichment_prompt(
    screen: Screen,
    form_data: Mapping[str, Any],
    enrichment_context: Mapping[str, Any] | None = None,
) -> str:
    """
    Build the user message for a screen's enrichment run.

    ``{{...}}`` variables in the screen's prompt are resolved against the
    answers and the previous context; the answers are embedded as JSON, and
    so is the screen's output schema when it has a usable one.
    """
    prompt = resolve_template_variables(screen.ai_prompt or "", form_data, enrichment_context)

    message = ENRICHMENT_PROMPT_TEMPLATE.format(
        form_data=json.dumps(dict(form_data), indent=2, ensure_ascii=False, default=str),
        prompt=prompt,
    )

    output_schema = _screen_output_schema(screen)
    if output_schema:
        message += OUTPUT_SCHEMA_SECTION_TEMPLATE.format(
            output_schema=json.dumps(output_schema, indent=2, ensure_ascii=False),
        )

    return message + ENRICHMENT_PROMPT_FOOTER


class EnrichmentOrchestrator:
    """
    Runs enrichment for screens of a flow.

    Usage:
        orchestrator = EnrichmentOrchestrator()

        context = await orchestrator.enrich(
            screen=company_screen,
            form_data={"companyName": "Acme AG"},
        )
        # {"companyAddress": {...}, "industry": "Manufacturing"}
    """

    def __init__(
        self,
        model: str | None = None,
        api_key: str | None = None,
        enable_guardrails: bool | None = None,
        enable_tracing: bool | None = None,
        log_traces: bool = False,
    ):
        """
        Initialize the orchestrator.

        Args:
            model: OpenAI model to use. If None, uses config.enrichment_model.
            api_key: OpenAI API key for this orchestrator's runs. If None, uses
                     config.openai_api_key, then the SDK default.
            enable_guardrails: Whether to attach guardrails. If None, uses config.
            enable_tracing: Whether to trace runs. If None, uses config.
            log_traces: Whether to also write traces to the log.
        """
        config = get_config()
        self.model = model or config.enrichment_model
        self.api_key = api_key or config.openai_api_key or None
        self.enable_guardrails = config.enable_guardrails if enable_guardrails is None else enable_guardrails
        self.enable_tracing = config.enable_tracing if enable_tracing is None else enable_tracing

        setup_tracing(enabled=self.enable_tracing, log_traces=log_traces)

        self._agent = create_enrichment_agent(
            model=self.model,
            enable_guardrails=self.enable_guardrails,
        )

    def should_enrich(
        self,
        screen: Screen,
        form_data: Mapping[str, Any],
        enrichment_context: Mapping[str, Any] | None = None,
    ) -> bool:
        """Whether the screen has a prompt whose variables all have values."""
        if not screen.ai_prompt or not screen.ai_prompt.strip():
            return False
        return are_template_variables_available(screen.ai_prompt, form_data, enrichment_context)

    def _run_config(self) -> RunConfig:
        if self.api_key:
            return RunConfig(model_provider=OpenAIProvider(api_key=self.api_key))
        return RunConfig()

    async def enrich(
        self,
        screen: Screen,
        form_data: Mapping[str, Any],
        enrichment_context: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Run the screen's enrichment step.

        Args:
            screen: The screen the user just answered.
            form_data: All answers so far.
            enrichment_context: Context produced by earlier screens.

        Returns:
            The previous context with the agent's answer merged over it, or
            ``{}`` when the step was skipped because the screen has no prompt
            or the prompt's variables are not all answered yet.

        Raises:
            EnrichmentError: If the run fails, a guardrail trips, or the
                agent does not answer with a JSON object.
        """
        if not self.should_enrich(screen, form_data, enrichment_context):
            logger.debug("Skipping enrichment for screen %s", screen.id)
            return {}

        prompt = build_enrichment_prompt(screen, form_data, enrichment_context)
        run_context = EnrichmentRunContext(
            screen_id=screen.id,
            output_schema=_screen_output_schema(screen),
        )

        logger.info("Running enrichment for screen %s", screen.id)
        try:
            with enrichment_trace(screen.id):
                result = await Runner.run(
                    self._agent,
                    prompt,
                    context=run_context,
                    run_config=self._run_config(),
                )
        except InputGuardrailTripwireTriggered as e:
            logger.error("Enrichment prompt rejected for screen %s", screen.id)
            raise EnrichmentError(f"Enrichment prompt rejected by guardrail: {e}") from e
        except OutputGuardrailTripwireTriggered as e:
            logger.error("Enrichment output rejected for screen %s", screen.id)
            raise EnrichmentError(f"Enrichment output rejected by guardrail: {e}") from e
        except AgentsException as e:
            logger.error("Enrichment failed for screen %s: %s", screen.id, e)
            raise EnrichmentError(f"Enrichment failed: {e}") from e

        output = extract_json_object(result.final_output)
        if output is None:
            logger.error("Enrichment for screen %s returned no JSON object", screen.id)
            raise EnrichmentError(f"Unexpected output type: {type(result.final_output)}")

        logger.info("Enrichment for screen %s returned %s keys", screen.id, len(output))
        return {**(enrichment_context or {}), **output}


async def enrich_context(
    screen: Screen,
    form_data: Mapping[str, Any],
    enrichment_context: Mapping[str, Any] | None = None,
    model: str | None = None,
    api_key: str | None = None,
    enable_guardrails: bool | None = None,
    enable_tracing: bool | None = None,
) -> dict[str, Any]:
    """
    Convenience function to run one screen's enrichment step.

    Example:
        >>> from smart_flow import enrich_context
        >>> context = await enrich_context(screen, {"companyName": "Acme AG"})
    """
    orchestrator = EnrichmentOrchestrator(
        model=model,
        api_key=api_key,
        enable_guardrails=enable_guardrails,
        enable_tracing=enable_tracing,
    )
    return await orchestrator.enrich(screen, form_data, enrichment_context)
