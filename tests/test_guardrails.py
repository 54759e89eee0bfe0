"""Tests for the enrichment guardrails."""

import asyncio

from agents import RunContextWrapper

from smart_flow.guardrails import (
    check_enrichment_output,
    check_prompt_safety,
    extract_json_object,
    output_schema_guardrail,
    safety_guardrail,
)
from smart_flow.models.enrichment import EnrichmentRunContext

SCHEMA = {
    "type": "object",
    "properties": {"industry": {"type": "string"}, "size": {"type": "number"}},
    "required": ["industry", "size"],
}


class TestPromptSafety:
    """Tests for the input safety check."""

    def test_safe_prompt(self):
        """Test an ordinary enrichment prompt passes."""
        result = check_prompt_safety("Find the industry of Acme AG in Zurich.")
        assert result.is_safe
        assert result.issues == []

    def test_injection_patterns(self):
        """Test script and template injection is flagged."""
        assert not check_prompt_safety("<script>alert(1)</script>").is_safe
        assert not check_prompt_safety("Use ${process.env}").is_safe
        assert not check_prompt_safety("left over {{variable}}").is_safe

    def test_empty_prompt(self):
        """Test blank prompts are rejected."""
        result = check_prompt_safety("   ")
        assert result.issues == ["Prompt is empty"]

    def test_guardrail_tripwire(self):
        """Test the SDK guardrail trips on unsafe input."""
        output = asyncio.run(safety_guardrail.guardrail_function(None, None, "javascript:alert(1)"))
        assert output.tripwire_triggered is True
        assert output.output_info["is_safe"] is False

    def test_guardrail_accepts_message_list(self):
        """Test list-shaped input is screened too."""
        items = [{"role": "user", "content": "Describe Acme AG"}]
        output = asyncio.run(safety_guardrail.guardrail_function(None, None, items))
        assert output.tripwire_triggered is False


class TestExtractJsonObject:
    """Tests for extract_json_object."""

    def test_plain_and_fenced(self):
        """Test raw JSON and markdown-fenced JSON."""
        assert extract_json_object('{"a": 1}') == {"a": 1}
        assert extract_json_object('```json\n{"a": 1}\n```') == {"a": 1}
        assert extract_json_object({"a": 1}) == {"a": 1}

    def test_not_an_object(self):
        """Test anything but an object gives None."""
        assert extract_json_object("[1, 2]") is None
        assert extract_json_object("Sure! Here it is.") is None
        assert extract_json_object(None) is None
        assert extract_json_object("[" * 100000) is None


class TestEnrichmentOutput:
    """Tests for the output check."""

    def test_complete_output(self):
        """Test output with every required key."""
        result = check_enrichment_output('{"industry": "Retail", "size": 40}', SCHEMA)
        assert result.is_valid
        assert result.warnings == []

    def test_missing_keys(self):
        """Test missing required keys are errors."""
        result = check_enrichment_output('{"industry": "Retail"}', SCHEMA)
        assert not result.is_valid
        assert result.errors == ["Missing required key 'size'"]

    def test_extra_keys_warn(self):
        """Test unknown keys are only warnings."""
        result = check_enrichment_output('{"industry": "Retail", "size": 4, "ceo": "Ann"}', SCHEMA)
        assert result.is_valid
        assert result.warnings == ["Output has key 'ceo' not in output schema"]

    def test_without_schema(self):
        """Test any object passes when the screen has no schema."""
        assert check_enrichment_output('{"anything": true}').is_valid
        assert not check_enrichment_output("not json").is_valid

    def test_guardrail_reads_run_context(self):
        """Test the SDK guardrail takes the schema from the run context."""
        ctx = RunContextWrapper(context=EnrichmentRunContext(screen_id="s1", output_schema=SCHEMA))
        output = asyncio.run(output_schema_guardrail.guardrail_function(ctx, None, '{"industry": "Retail"}'))
        assert output.tripwire_triggered is True
        assert output.output_info["errors"] == ["Missing required key 'size'"]
